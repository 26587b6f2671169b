from datetime import datetime
from govreports_api.extensions import db


class Bir2316Certificate(db.Model):
    """Snapshot of a generated BIR 2316; one per employee per tax year."""
    __tablename__ = "bir_2316_certificates"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    tax_year = db.Column(db.Integer, nullable=False)
    compensation_data = db.Column(db.JSON, nullable=False)
    generated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    generated_by = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        db.UniqueConstraint("employee_id", "tax_year", name="uq_bir2316_employee_year"),
    )

    employee = db.relationship("Employee", lazy="joined")

    def to_dict(self):
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "tax_year": self.tax_year,
            "compensation_data": self.compensation_data,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
            "generated_by": self.generated_by,
        }
