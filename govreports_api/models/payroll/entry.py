from datetime import datetime
from govreports_api.extensions import db

# only these statuses count toward government reports
COUNTED_STATUSES = ("approved", "paid")


class PayrollEntry(db.Model):
    __tablename__ = "payroll_entries"

    id = db.Column(db.Integer, primary_key=True)
    payroll_period_id = db.Column(db.Integer, db.ForeignKey("payroll_periods.id"), nullable=False, index=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id"), nullable=False, index=True)
    employee_name = db.Column(db.String(255))

    # earnings
    basic_pay = db.Column(db.Numeric(14, 2), default=0)
    overtime_pay = db.Column(db.Numeric(14, 2), default=0)
    holiday_pay = db.Column(db.Numeric(14, 2), default=0)
    night_differential = db.Column(db.Numeric(14, 2), default=0)
    thirteenth_month_pay = db.Column(db.Numeric(14, 2), default=0)
    de_minimis = db.Column(db.Numeric(14, 2), default=0)
    other_earnings = db.Column(db.Numeric(14, 2), default=0)
    gross_pay = db.Column(db.Numeric(14, 2), default=0)

    # government contributions
    sss_employee = db.Column(db.Numeric(14, 2), default=0)
    sss_employer = db.Column(db.Numeric(14, 2), default=0)
    sss_ec = db.Column(db.Numeric(14, 2), default=0)
    philhealth_employee = db.Column(db.Numeric(14, 2), default=0)
    philhealth_employer = db.Column(db.Numeric(14, 2), default=0)
    pagibig_employee = db.Column(db.Numeric(14, 2), default=0)
    pagibig_employer = db.Column(db.Numeric(14, 2), default=0)

    withholding_tax = db.Column(db.Numeric(14, 2), default=0)
    net_pay = db.Column(db.Numeric(14, 2), default=0)

    status = db.Column(
        db.Enum("draft", "approved", "paid", "voided", name="payroll_entry_status_enum"),
        default="draft",
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("payroll_period_id", "employee_id", name="uq_payroll_entry_period_employee"),
        db.Index("ix_payroll_entry_status", "status"),
    )

    period = db.relationship("PayrollPeriod", back_populates="entries", lazy="joined")
    employee = db.relationship("Employee", lazy="joined")
