"""
Roll payroll entries and loan payments up into per-employee records.

Only approved/paid entries count, the reporting window is matched on the
payroll period's cutoff_start, and employees missing the statutory id a
report requires are dropped at query time.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal

from sqlalchemy import and_

from govreports_api.extensions import db
from govreports_api.models.employee import Employee
from govreports_api.models.payroll import (
    COUNTED_STATUSES,
    EmployeeLoan,
    LoanPayment,
    PayrollEntry,
    PayrollPeriod,
)
from govreports_api.services.reports.columns import ZERO, format_address, to_decimal
from govreports_api.services.reports.enums import LoanType

log = logging.getLogger(__name__)

NON_TAXABLE_13TH_MONTH_CAP = Decimal("90000.00")

# entry columns summed per employee
ENTRY_AMOUNTS = (
    "gross_pay",
    "basic_pay",
    "overtime_pay",
    "holiday_pay",
    "night_differential",
    "thirteenth_month_pay",
    "de_minimis",
    "other_earnings",
    "sss_employee",
    "sss_employer",
    "sss_ec",
    "philhealth_employee",
    "philhealth_employer",
    "pagibig_employee",
    "pagibig_employer",
    "withholding_tax",
)


def plain_value(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


class _Record:
    def to_dict(self) -> dict:
        return {f.name: plain_value(getattr(self, f.name)) for f in fields(self)}


@dataclass
class EmployeeIdentity(_Record):
    employee_id: int
    employee_number: str = ""
    tin: str = ""
    sss_number: str = ""
    philhealth_number: str = ""
    pagibig_number: str = ""
    last_name: str = ""
    first_name: str = ""
    middle_name: str = ""
    suffix: str = ""
    date_of_birth: date | None = None
    gender: str = ""
    civil_status: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    zip_code: str = ""
    department: str = "-"
    position: str = "-"
    hire_date: date | None = None
    termination_date: date | None = None
    employment_status: str = ""
    basic_salary: Decimal = ZERO

    @classmethod
    def identity_kwargs(cls, emp: Employee) -> dict:
        addr = emp.address or {}
        return dict(
            employee_id=emp.id,
            employee_number=emp.employee_number or "",
            tin=emp.tin or "",
            sss_number=emp.sss_number or "",
            philhealth_number=emp.philhealth_number or "",
            pagibig_number=emp.pagibig_number or "",
            last_name=emp.last_name or "",
            first_name=emp.first_name or "",
            middle_name=emp.middle_name or "",
            suffix=emp.suffix or "",
            date_of_birth=emp.date_of_birth,
            gender=emp.gender or "",
            civil_status=emp.civil_status or "",
            email=emp.email or "",
            phone=emp.phone or "",
            address=format_address(addr),
            zip_code=(addr.get("postal_code") or addr.get("zip_code") or "") if isinstance(addr, dict) else "",
            department=emp.department.name if emp.department else "-",
            position=emp.position.title if emp.position else "-",
            hire_date=emp.hire_date,
            termination_date=emp.termination_date,
            employment_status=emp.employment_status or "",
            basic_salary=to_decimal(emp.basic_salary),
        )

    @classmethod
    def from_employee(cls, emp: Employee):
        return cls(**cls.identity_kwargs(emp))

    @property
    def sort_key(self):
        return (self.last_name.lower(), self.first_name.lower(), self.employee_id)


@dataclass
class EmployeeAggregate(EmployeeIdentity):
    """One employee's payroll totals over a reporting window."""
    entry_count: int = 0
    gross_pay: Decimal = ZERO
    basic_pay: Decimal = ZERO
    overtime_pay: Decimal = ZERO
    holiday_pay: Decimal = ZERO
    night_differential: Decimal = ZERO
    thirteenth_month_pay: Decimal = ZERO
    de_minimis: Decimal = ZERO
    other_earnings: Decimal = ZERO
    sss_employee: Decimal = ZERO
    sss_employer: Decimal = ZERO
    sss_ec: Decimal = ZERO
    philhealth_employee: Decimal = ZERO
    philhealth_employer: Decimal = ZERO
    pagibig_employee: Decimal = ZERO
    pagibig_employer: Decimal = ZERO
    withholding_tax: Decimal = ZERO
    first_cutoff: date | None = None
    last_cutoff: date | None = None

    @property
    def gross_compensation(self) -> Decimal:
        return self.gross_pay

    @property
    def non_taxable_13th_month(self) -> Decimal:
        return min(self.thirteenth_month_pay, NON_TAXABLE_13TH_MONTH_CAP)

    @property
    def non_taxable_compensation(self) -> Decimal:
        return self.non_taxable_13th_month + self.de_minimis

    @property
    def total_contributions(self) -> Decimal:
        return self.sss_employee + self.philhealth_employee + self.pagibig_employee

    @property
    def taxable_compensation(self) -> Decimal:
        taxable = self.gross_pay - self.total_contributions - self.non_taxable_compensation
        if taxable < 0:
            log.warning(
                "Negative taxable compensation %s for employee %s floored to 0",
                taxable, self.employee_id,
            )
            return ZERO
        return taxable

    def add_entry(self, entry: PayrollEntry):
        self.entry_count += 1
        for name in ENTRY_AMOUNTS:
            setattr(self, name, getattr(self, name) + to_decimal(getattr(entry, name)))
        cutoff = entry.period.cutoff_start if entry.period else None
        if cutoff:
            if self.first_cutoff is None or cutoff < self.first_cutoff:
                self.first_cutoff = cutoff
            if self.last_cutoff is None or cutoff > self.last_cutoff:
                self.last_cutoff = cutoff

    def to_dict(self) -> dict:
        data = super().to_dict()
        for name in (
            "gross_compensation",
            "non_taxable_13th_month",
            "non_taxable_compensation",
            "total_contributions",
            "taxable_compensation",
        ):
            data[name] = plain_value(getattr(self, name))
        return data


@dataclass
class LoanAggregate(EmployeeIdentity):
    """One employee's payments on one loan type over a reporting window."""
    loan_type: str = ""
    loan_type_label: str = ""
    reference_number: str = ""
    principal_amount: Decimal = ZERO
    monthly_amortization: Decimal = ZERO
    total_payments: Decimal = ZERO
    payment_count: int = 0
    payment_months: str = ""


@dataclass
class PeriodAggregate(_Record):
    """SSS contributions of one payroll period."""
    period_id: int
    period_name: str = ""
    cutoff_start: date | None = None
    cutoff_end: date | None = None
    pay_date: date | None = None
    employee_count: int = 0
    gross_pay: Decimal = ZERO
    sss_employee: Decimal = ZERO
    sss_employer: Decimal = ZERO
    sss_ec: Decimal = ZERO
    employee_ids: set = field(default_factory=set, repr=False)

    @property
    def total_ss(self) -> Decimal:
        return self.sss_employee + self.sss_employer

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.pop("employee_ids", None)
        data["total_ss"] = plain_value(self.total_ss)
        return data


def sum_of(rows, attr) -> Decimal:
    return sum((to_decimal(getattr(r, attr)) for r in rows), ZERO)


class AggregationEngine:
    """Read-only queries plus grouping; never writes."""

    def __init__(self, company_id: int | None = None):
        self.company_id = company_id

    # ---------- scoping ----------

    def _scope_employees(self, q, department_ids=None, employee_id=None, id_field=None):
        if self.company_id is not None:
            q = q.filter(Employee.company_id == self.company_id)
        if department_ids:
            q = q.filter(Employee.department_id.in_(list(department_ids)))
        if employee_id is not None:
            q = q.filter(Employee.id == employee_id)
        if id_field:
            col = getattr(Employee, id_field)
            q = q.filter(and_(col.isnot(None), col != ""))
        return q

    # ---------- payroll ----------

    def payroll_entries(self, window, department_ids=None, employee_id=None, id_field=None, filters=()):
        start, end = window
        q = (
            db.session.query(PayrollEntry)
            .join(PayrollPeriod, PayrollEntry.payroll_period_id == PayrollPeriod.id)
            .join(Employee, PayrollEntry.employee_id == Employee.id)
            .filter(PayrollEntry.status.in_(COUNTED_STATUSES))
            .filter(PayrollPeriod.cutoff_start >= start, PayrollPeriod.cutoff_start <= end)
        )
        q = self._scope_employees(q, department_ids, employee_id, id_field)
        for crit in filters:
            q = q.filter(crit)
        return q.order_by(PayrollPeriod.cutoff_start, PayrollEntry.id).all()

    def by_employee(self, entries) -> list[EmployeeAggregate]:
        grouped: "OrderedDict[int, EmployeeAggregate]" = OrderedDict()
        for entry in entries:
            agg = grouped.get(entry.employee_id)
            if agg is None:
                agg = EmployeeAggregate(**EmployeeIdentity.identity_kwargs(entry.employee))
                grouped[entry.employee_id] = agg
            agg.add_entry(entry)
        return sorted(grouped.values(), key=lambda a: a.sort_key)

    def employee_totals(self, window, **kwargs) -> list[EmployeeAggregate]:
        return self.by_employee(self.payroll_entries(window, **kwargs))

    def by_payroll_period(self, entries) -> list[PeriodAggregate]:
        grouped: "OrderedDict[int, PeriodAggregate]" = OrderedDict()
        for entry in entries:
            period = entry.period
            agg = grouped.get(period.id)
            if agg is None:
                agg = PeriodAggregate(
                    period_id=period.id,
                    period_name=period.name,
                    cutoff_start=period.cutoff_start,
                    cutoff_end=period.cutoff_end,
                    pay_date=period.pay_date,
                )
                grouped[period.id] = agg
            agg.employee_ids.add(entry.employee_id)
            agg.employee_count = len(agg.employee_ids)
            agg.gross_pay += to_decimal(entry.gross_pay)
            agg.sss_employee += to_decimal(entry.sss_employee)
            agg.sss_employer += to_decimal(entry.sss_employer)
            agg.sss_ec += to_decimal(entry.sss_ec)
        return sorted(grouped.values(), key=lambda a: (a.cutoff_start, a.period_id))

    # ---------- loans ----------

    def loan_payments(self, loan_types, window, department_ids=None, id_field=None):
        start, end = window
        values = [t.value if isinstance(t, LoanType) else str(t) for t in loan_types]
        q = (
            db.session.query(LoanPayment)
            .join(EmployeeLoan, LoanPayment.employee_loan_id == EmployeeLoan.id)
            .join(Employee, EmployeeLoan.employee_id == Employee.id)
            .filter(EmployeeLoan.loan_type.in_(values))
            .filter(LoanPayment.payment_date >= start, LoanPayment.payment_date <= end)
        )
        q = self._scope_employees(q, department_ids, id_field=id_field)
        return q.order_by(LoanPayment.payment_date, LoanPayment.id).all()

    def by_employee_and_loan(self, payments) -> list[LoanAggregate]:
        grouped: "OrderedDict[tuple, list]" = OrderedDict()
        for p in payments:
            grouped.setdefault((p.loan.employee_id, p.loan.loan_type), []).append(p)

        out = []
        for (_, loan_type), group in grouped.items():
            loan = group[0].loan
            months = sorted({p.payment_date.month for p in group})
            out.append(LoanAggregate(
                **EmployeeIdentity.identity_kwargs(loan.employee),
                loan_type=loan_type,
                loan_type_label=LoanType.label_for(loan_type),
                reference_number=loan.reference_number or "",
                principal_amount=to_decimal(loan.principal_amount),
                monthly_amortization=to_decimal(loan.monthly_amortization),
                total_payments=sum((to_decimal(p.amount) for p in group), ZERO),
                payment_count=len(group),
                payment_months=", ".join(date(2000, m, 1).strftime("%b") for m in months),
            ))
        return sorted(out, key=lambda a: a.sort_key + (a.loan_type,))

    # ---------- employee master ----------

    def employees(self, department_ids=None, id_field=None, filters=(), order_by=None):
        q = self._scope_employees(Employee.query, department_ids, id_field=id_field)
        for crit in filters:
            q = q.filter(crit)
        if order_by is not None:
            q = q.order_by(*order_by)
        return [EmployeeIdentity.from_employee(e) for e in q.all()]
