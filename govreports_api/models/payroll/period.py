from datetime import datetime
from govreports_api.extensions import db


class PayrollPeriod(db.Model):
    __tablename__ = "payroll_periods"

    id = db.Column(db.Integer, primary_key=True)
    company_id = db.Column(db.Integer, db.ForeignKey("companies.id"), nullable=True, index=True)
    name = db.Column(db.String(120), nullable=False)
    cutoff_start = db.Column(db.Date, nullable=False, index=True)
    cutoff_end = db.Column(db.Date, nullable=False)
    pay_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    entries = db.relationship("PayrollEntry", back_populates="period", lazy="dynamic")
