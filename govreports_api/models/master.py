from datetime import datetime

from govreports_api.extensions import db

# business_info keys printed on government reports
EMPLOYER_INFO_KEYS = (
    "tin",
    "address",
    "zip_code",
    "telephone",
    "rdo_code",
    "sss_number",
    "philhealth_number",
    "pagibig_number",
)


class Company(db.Model):
    """Employer. Registration numbers live in the business_info JSON (see EMPLOYER_INFO_KEYS)."""

    __tablename__ = "companies"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    business_info = db.Column(db.JSON, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def info(self, key, default=""):
        return (self.business_info or {}).get(key) or default


# Department (per company)
class Department(db.Model):
    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("company_id", "name", name="uq_department_company_name"),
    )

    company = db.relationship("Company", backref=db.backref("departments", lazy="dynamic"))


# Position: job title shown on 2316 and PhilHealth rosters
class Position(db.Model):
    __tablename__ = "positions"

    id = db.Column(db.Integer, primary_key=True)
    department_id = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    title = db.Column(db.String(120), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    department = db.relationship("Department", backref=db.backref("positions", lazy="dynamic"))
