import logging
from abc import ABC, abstractmethod

from govreports_api.common.errors import InvalidArgumentError, UnsupportedExportError
from govreports_api.services.reports import pdf, serializers
from govreports_api.services.reports.aggregation import AggregationEngine
from govreports_api.services.reports.context import CONTENT_TYPES, CompanyProfile, ReportData, ReportFile
from govreports_api.services.reports.enums import PeriodType

log = logging.getLogger(__name__)


class ReportGenerator(ABC):
    """
    Contract shared by every government form.

    Subclasses supply the query/aggregation step (get_data) plus the
    format mapping hooks; serializers drive the layout. Capability flags
    are declared, never discovered by trial calls.
    """

    agency = ""
    title = ""
    report_code = ""
    period_type = PeriodType.MONTHLY
    pdf_view = ""

    supports_dat = False
    supports_fixed_width = False
    supports_date_range = False
    # monthly reports that also accept a quarter or whole year
    accepts_any_window = False

    # Excel header styling (hex RGB)
    header_fill = "E2E8F0"
    header_font_color = "000000"

    # statutory id an employee must have to appear on the report
    required_id = None

    def __init__(self, profile: CompanyProfile | None = None):
        self.profile = profile or CompanyProfile()
        self.engine = AggregationEngine(self.profile.company_id)

    # ---------- data ----------

    @abstractmethod
    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        ...

    def get_summary(self, period, department_ids=None) -> dict:
        return self.get_data(period, department_ids).totals

    @staticmethod
    def _limited(rows, limit):
        return rows[:limit] if limit else rows

    # ---------- layout hooks ----------

    @property
    def sheet_title(self) -> str:
        return self.report_code.upper()

    # e.g. "TIN"; the value comes from employer_id()
    id_label = ""

    def employer_id(self) -> str:
        return ""

    def id_line(self) -> str | None:
        value = self.employer_id()
        if not (self.id_label and value):
            return None
        return f"{self.id_label}: {value}"

    def period_label(self, period) -> str:
        return period.label()

    def period_slug(self, period) -> str:
        return period.slug()

    def filename(self, ext, period) -> str:
        return f"{self.agency}_{self.report_code}_{self.period_slug(period)}.{ext}"

    @abstractmethod
    def excel_headers(self) -> list:
        ...

    @abstractmethod
    def map_row(self, row, index: int) -> list:
        ...

    def excel_totals(self, totals: dict) -> dict | None:
        """Column letter -> value for the TOTALS row; None skips the row."""
        return {}

    def decorate_sheet(self, ws, totals: dict, totals_row: int):
        """Hook for trailer rows below the TOTALS row."""

    # ---------- DAT / fixed width ----------

    def map_row_to_dat(self, row) -> str:
        raise UnsupportedExportError(f"DAT export is not supported for {self.title}")

    def dat_header(self, period) -> str | None:
        return None

    def dat_footer(self, totals: dict, period) -> str | None:
        return None

    def map_row_to_fixed_width(self, row) -> str:
        raise UnsupportedExportError(f"Fixed-width export is not supported for {self.title}")

    # ---------- serialization ----------

    def to_excel(self, data, period) -> ReportFile:
        return ReportFile(serializers.to_excel(self, data, period), self.filename("xlsx", period), CONTENT_TYPES["xlsx"])

    def to_pdf(self, data, period) -> ReportFile:
        return ReportFile(pdf.render(self, data, period), self.filename("pdf", period), CONTENT_TYPES["pdf"])

    def to_csv(self, data, period) -> ReportFile:
        return ReportFile(serializers.to_csv(self, data), self.filename("csv", period), CONTENT_TYPES["csv"])

    def to_dat(self, data, period) -> ReportFile:
        if not self.supports_dat:
            raise UnsupportedExportError(f"DAT export is not supported for {self.title}")
        return ReportFile(serializers.to_dat(self, data, period), self.filename("dat", period), CONTENT_TYPES["dat"])

    def export(self, fmt: str, data, period) -> ReportFile:
        exporters = {
            "xlsx": self.to_excel,
            "pdf": self.to_pdf,
            "csv": self.to_csv,
            "dat": self.to_dat,
        }
        exporter = exporters.get(fmt)
        if exporter is None:
            raise UnsupportedExportError(f"Unsupported format: {fmt}", payload={"format": fmt})
        report = exporter(data, period)
        log.info("Generated %s (%d rows, %d bytes)", report.filename, len(data.rows), len(report.content))
        return report

    def generate(self, fmt: str, period, department_ids=None) -> ReportFile:
        return self.export(fmt, self.get_data(period, department_ids), period)

    # ---------- period checks ----------

    def check_period(self, period):
        if period.is_range and not self.supports_date_range:
            raise InvalidArgumentError(f"{self.title} does not accept a date range")
        if self.period_type is PeriodType.MONTHLY and not (period.month or period.is_range or self.accepts_any_window):
            raise InvalidArgumentError("Month is required for this report", payload={"field": "month"})
        if self.period_type is PeriodType.QUARTERLY and not period.quarter:
            raise InvalidArgumentError("Quarter is required for this report", payload={"field": "quarter"})