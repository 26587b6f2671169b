"""Small row builders shared by the report tests."""
from datetime import date
from decimal import Decimal

from govreports_api.extensions import db
from govreports_api.models.employee import Employee
from govreports_api.models.master import Company, Department
from govreports_api.models.payroll import EmployeeLoan, LoanPayment, PayrollEntry, PayrollPeriod
from govreports_api.models.user import User

BUSINESS_INFO = {
    "tin": "123456789000",
    "address": "123 Ayala Ave, Makati City",
    "zip_code": "1226",
    "telephone": "02-8123-4567",
    "rdo_code": "047",
    "sss_number": "03-1234567-8",
    "philhealth_number": "01-234567890-1",
    "pagibig_number": "1234-5678-9012",
}


def make_company(code="ACME", name="Acme Corporation"):
    c = Company(code=code, name=name, business_info=dict(BUSINESS_INFO))
    db.session.add(c)
    db.session.commit()
    return c


def make_department(company, name="Operations"):
    d = Department(company_id=company.id, name=name)
    db.session.add(d)
    db.session.commit()
    return d


_seq = {"n": 0}


def make_employee(company, first="Juan", last="Dela Cruz", **kw):
    _seq["n"] += 1
    n = _seq["n"]
    values = dict(
        company_id=company.id,
        employee_number=f"E-{n:03d}",
        first_name=first,
        last_name=last,
        middle_name="Santos",
        tin=f"{n:03d}456789000",
        sss_number=f"34-{n:07d}-1",
        philhealth_number=f"12-{n:09d}-3",
        pagibig_number=f"1212-{n:04d}-3434",
        date_of_birth=date(1990, 1, 15),
        gender="male",
        hire_date=date(2020, 1, 6),
        basic_salary=Decimal("25000.00"),
    )
    values.update(kw)
    e = Employee(**values)
    db.session.add(e)
    db.session.commit()
    return e


def make_period(company, start, end=None, name=None):
    p = PayrollPeriod(
        company_id=company.id,
        name=name or start.strftime("%B %d %Y"),
        cutoff_start=start,
        cutoff_end=end or start,
        pay_date=end or start,
    )
    db.session.add(p)
    db.session.commit()
    return p


def make_entry(period, employee, status="paid", **amounts):
    values = {"gross_pay": Decimal("25000.00")}
    values.update({k: Decimal(str(v)) for k, v in amounts.items()})
    e = PayrollEntry(
        payroll_period_id=period.id,
        employee_id=employee.id,
        employee_name=employee.full_name,
        status=status,
        **values,
    )
    db.session.add(e)
    db.session.commit()
    return e


def make_loan(employee, loan_type, payments=(), reference="REF-1", principal="24000.00"):
    loan = EmployeeLoan(
        employee_id=employee.id,
        loan_type=loan_type,
        reference_number=reference,
        principal_amount=Decimal(principal),
        monthly_amortization=Decimal("1000.00"),
    )
    db.session.add(loan)
    db.session.flush()
    for paid_on, amount in payments:
        db.session.add(LoanPayment(employee_loan_id=loan.id, payment_date=paid_on, amount=Decimal(str(amount))))
    db.session.commit()
    return loan


def make_user(email="payroll@test.local", password="secret", status="active"):
    u = User(email=email, full_name="Test User", status=status)
    u.set_password(password)
    db.session.add(u)
    db.session.commit()
    return u
