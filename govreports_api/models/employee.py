from datetime import datetime
from govreports_api.extensions import db

SEPARATED_STATUSES = ("resigned", "terminated", "retired", "end_of_contract", "deceased")


class Employee(db.Model):
    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    # business
    company_id     = db.Column(db.Integer, db.ForeignKey("companies.id", ondelete="RESTRICT"), nullable=False)
    department_id  = db.Column(db.Integer, db.ForeignKey("departments.id", ondelete="RESTRICT"), nullable=True)
    position_id    = db.Column(db.Integer, db.ForeignKey("positions.id", ondelete="RESTRICT"), nullable=True)
    user_id        = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, unique=True)

    employee_number = db.Column(db.String(32), nullable=False)    # unique per company
    first_name  = db.Column(db.String(80), nullable=False)
    middle_name = db.Column(db.String(80), nullable=True)
    last_name   = db.Column(db.String(80), nullable=False)
    suffix      = db.Column(db.String(10), nullable=True)

    # statutory ids
    tin               = db.Column(db.String(20), nullable=True)
    sss_number        = db.Column(db.String(20), nullable=True)
    philhealth_number = db.Column(db.String(20), nullable=True)
    pagibig_number    = db.Column(db.String(20), nullable=True)

    date_of_birth = db.Column(db.Date, nullable=True)
    gender        = db.Column(db.String(10), nullable=True)
    civil_status  = db.Column(db.String(20), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    address = db.Column(db.JSON, nullable=True)   # street/barangay/city/province/postal_code

    hire_date        = db.Column(db.Date, nullable=True)
    termination_date = db.Column(db.Date, nullable=True)
    employment_status = db.Column(db.String(20), default="active", nullable=False)
    basic_salary = db.Column(db.Numeric(14, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("company_id", "employee_number", name="uq_employee_company_number"),
        db.Index("ix_emp_company_id", "company_id"),
        db.Index("ix_emp_dept_id", "department_id"),
        db.Index("ix_emp_last_name", "last_name"),
    )

    company    = db.relationship("Company", lazy="joined")
    department = db.relationship("Department", lazy="joined")
    position   = db.relationship("Position", lazy="joined")

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name, self.suffix]
        return " ".join(p for p in parts if p)

    @property
    def is_separated(self) -> bool:
        return self.employment_status in SEPARATED_STATUSES
