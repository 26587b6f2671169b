# govreports_api/models/payroll/__init__.py
# Import order matters: periods first, entries and loans reference them.
from govreports_api.extensions import db  # noqa

from .period import PayrollPeriod
from .entry import PayrollEntry, COUNTED_STATUSES
from .loan import EmployeeLoan, LoanPayment
from .certificate import Bir2316Certificate

__all__ = [
    "PayrollPeriod", "PayrollEntry", "COUNTED_STATUSES",
    "EmployeeLoan", "LoanPayment", "Bir2316Certificate",
]
