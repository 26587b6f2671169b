from datetime import datetime
from govreports_api.extensions import db


class EmployeeLoan(db.Model):
    __tablename__ = "employee_loans"

    id = db.Column(db.Integer, primary_key=True)
    employee_id = db.Column(db.Integer, db.ForeignKey("employees.id"), nullable=False, index=True)
    loan_type = db.Column(db.String(40), nullable=False, index=True)   # see LoanType
    reference_number = db.Column(db.String(64))
    principal_amount = db.Column(db.Numeric(14, 2), default=0)
    total_amount = db.Column(db.Numeric(14, 2), default=0)
    monthly_amortization = db.Column(db.Numeric(14, 2), default=0)
    start_date = db.Column(db.Date)
    status = db.Column(db.String(20), default="active", nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    employee = db.relationship("Employee", lazy="joined")
    payments = db.relationship("LoanPayment", back_populates="loan", lazy="dynamic")


class LoanPayment(db.Model):
    __tablename__ = "loan_payments"

    id = db.Column(db.Integer, primary_key=True)
    employee_loan_id = db.Column(db.Integer, db.ForeignKey("employee_loans.id"), nullable=False, index=True)
    payroll_entry_id = db.Column(db.Integer, db.ForeignKey("payroll_entries.id"), nullable=True)
    payment_date = db.Column(db.Date, nullable=False, index=True)
    amount = db.Column(db.Numeric(14, 2), nullable=False, default=0)
    balance_after = db.Column(db.Numeric(14, 2), default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    loan = db.relationship("EmployeeLoan", back_populates="payments", lazy="joined")
