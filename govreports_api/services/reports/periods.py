import calendar
from dataclasses import dataclass
from datetime import date

from govreports_api.common.errors import InvalidArgumentError

QUARTER_LABELS = {
    1: "1st Quarter (January - March)",
    2: "2nd Quarter (April - June)",
    3: "3rd Quarter (July - September)",
    4: "4th Quarter (October - December)",
}


@dataclass(frozen=True)
class ReportPeriod:
    """
    A reporting window: a whole year, a month, a quarter, or an explicit
    date range. Month wins over quarter when both are given.
    """
    year: int
    month: int | None = None
    quarter: int | None = None
    start_date: date | None = None
    end_date: date | None = None

    def __post_init__(self):
        if not 1900 <= int(self.year) <= 9999:
            raise InvalidArgumentError("Invalid year", payload={"year": self.year})
        if self.month is not None and not 1 <= self.month <= 12:
            raise InvalidArgumentError("Month must be between 1 and 12", payload={"month": self.month})
        if self.quarter is not None and not 1 <= self.quarter <= 4:
            raise InvalidArgumentError("Quarter must be between 1 and 4", payload={"quarter": self.quarter})
        if (self.start_date is None) != (self.end_date is None):
            raise InvalidArgumentError("Both start_date and end_date are required for a date range")
        if self.start_date and self.end_date < self.start_date:
            raise InvalidArgumentError("end_date must not be before start_date")

    @property
    def is_range(self) -> bool:
        return self.start_date is not None

    def window(self) -> tuple[date, date]:
        if self.is_range:
            return self.start_date, self.end_date
        if self.month:
            last = calendar.monthrange(self.year, self.month)[1]
            return date(self.year, self.month, 1), date(self.year, self.month, last)
        if self.quarter:
            first_month = (self.quarter - 1) * 3 + 1
            last_month = first_month + 2
            last = calendar.monthrange(self.year, last_month)[1]
            return date(self.year, first_month, 1), date(self.year, last_month, last)
        return date(self.year, 1, 1), date(self.year, 12, 31)

    def label(self) -> str:
        if self.is_range:
            return f"{_long_date(self.start_date)} - {_long_date(self.end_date)}"
        if self.month:
            return f"{calendar.month_name[self.month]} {self.year}"
        if self.quarter:
            return f"{QUARTER_LABELS[self.quarter]} {self.year}"
        return str(self.year)

    def slug(self) -> str:
        """Filename period: YYYY-MM, YYYY-Qn or YYYY."""
        if self.month:
            return f"{self.year}-{self.month:02d}"
        if self.quarter:
            return f"{self.year}-Q{self.quarter}"
        return str(self.year)


def _long_date(d: date) -> str:
    return f"{calendar.month_name[d.month]} {d.day}, {d.year}"


def parse_date(value, field: str) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidArgumentError(f"Invalid {field}; expected YYYY-MM-DD", payload={field: value})


def month_options():
    return [{"value": m, "label": calendar.month_name[m]} for m in range(1, 13)]


def quarter_options():
    return [{"value": q, "label": label} for q, label in QUARTER_LABELS.items()]


def year_options(today: date | None = None, back: int = 5):
    current = (today or date.today()).year
    return [current - i for i in range(back + 1)]
