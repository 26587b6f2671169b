"""
Per-agency report dispatchers.

A service maps a report-type value to its generator class and builds a
fresh generator for every call, so no row state is shared between
requests.
"""
import logging
from datetime import datetime

from govreports_api.common.errors import InvalidArgumentError, NoDataError, UnsupportedExportError
from govreports_api.extensions import db
from govreports_api.models.payroll import Bir2316Certificate
from govreports_api.services.reports import bir, pagibig, philhealth, sss
from govreports_api.services.reports.aggregation import plain_value
from govreports_api.services.reports.bir2316_template import Bir2316TemplateService
from govreports_api.services.reports.context import CompanyProfile
from govreports_api.services.reports.enums import (
    BIR_TEMPLATE_FORMATS,
    EXPORT_FORMATS,
    BirReportType,
    PagibigReportType,
    PeriodType,
    PhilhealthReportType,
    SssReportType,
)
from govreports_api.services.reports.periods import (
    ReportPeriod,
    month_options,
    parse_date,
    quarter_options,
    year_options,
)

log = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 50


def _int_or_none(value, field):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"{field} must be an integer", payload={field: value})


class ReportService:
    agency = ""
    report_types = None
    generators: dict = {}
    includes_quarters = False

    def __init__(self, profile: CompanyProfile | None = None):
        self.profile = profile or CompanyProfile()

    # ---------- lookup ----------

    def report_type(self, value):
        report_type = self.report_types.parse(value)
        if report_type is None:
            raise InvalidArgumentError(
                f"Unknown {self.agency.upper()} report type: {value}",
                payload={"report_type": value, "allowed": [t.value for t in self.report_types]},
            )
        return report_type

    def generator(self, report_type, schedule=None):
        report_type = self.report_type(report_type)
        return self.generators[report_type](self.profile)

    def report_type_options(self):
        return self.report_types.options()

    def available_periods(self) -> dict:
        periods = {"years": year_options(), "months": month_options()}
        if self.includes_quarters:
            periods["quarters"] = quarter_options()
        return periods

    # ---------- periods ----------

    def resolve_period(self, report_type, year=None, month=None, quarter=None, start_date=None, end_date=None):
        """Build the reporting window and check it has the granularity the report needs."""
        report_type = self.report_type(report_type)
        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        year = _int_or_none(year, "year")
        if year is None:
            if start is None:
                raise InvalidArgumentError("year is required", payload={"field": "year"})
            year = start.year
        month = _int_or_none(month, "month")
        quarter = _int_or_none(quarter, "quarter")

        if report_type.period_type is PeriodType.ANNUAL:
            period = ReportPeriod(year)
        elif report_type.period_type is PeriodType.QUARTERLY:
            period = ReportPeriod(year, quarter=quarter)
        else:
            period = ReportPeriod(year, month=month, quarter=None if month else quarter,
                                  start_date=start, end_date=end)
        return period

    def _checked(self, report_type, period, schedule=None):
        gen = self.generator(report_type, schedule)
        gen.check_period(period)
        return gen

    # ---------- operations ----------

    def preview(self, report_type, period, department_ids=None, limit=DEFAULT_PREVIEW_LIMIT, schedule=None) -> dict:
        gen = self._checked(report_type, period, schedule)
        data = gen.get_data(period, department_ids, limit=limit)
        return {
            "data": [row.to_dict() for row in data.rows],
            "totals": _plain_totals(data.totals),
            "preview_limit": limit,
        }

    def summary(self, report_type, period, department_ids=None, schedule=None) -> dict:
        gen = self._checked(report_type, period, schedule)
        return _plain_totals(gen.get_summary(period, department_ids))

    def generate(self, report_type, fmt, period, department_ids=None, schedule=None):
        fmt = (fmt or "xlsx").lower()
        if fmt not in EXPORT_FORMATS:
            raise UnsupportedExportError(f"Unsupported format: {fmt}", payload={"format": fmt})
        gen = self._checked(report_type, period, schedule)
        log.info("Generating %s %s (%s) for %s", self.agency, gen.report_code, fmt, period.slug())
        return gen.generate(fmt, period, department_ids)


def _plain_totals(totals: dict) -> dict:
    out = {}
    for key, value in totals.items():
        out[key] = _plain_totals(value) if isinstance(value, dict) else plain_value(value)
    return out


class BirReportService(ReportService):
    agency = "bir"
    report_types = BirReportType
    generators = {
        BirReportType.FORM_1601C: bir.Bir1601cReportGenerator,
        BirReportType.FORM_1604CF: bir.Bir1604cfReportGenerator,
        BirReportType.FORM_2316: bir.Bir2316ReportGenerator,
        BirReportType.ALPHALIST: bir.BirAlphalistReportGenerator,
    }

    def __init__(self, profile: CompanyProfile | None = None, template_path: str | None = None):
        super().__init__(profile)
        self.template = Bir2316TemplateService(template_path)

    def generator(self, report_type, schedule=None):
        report_type = self.report_type(report_type)
        if report_type is BirReportType.ALPHALIST:
            return bir.BirAlphalistReportGenerator(self.profile, schedule=schedule or "7.1")
        return self.generators[report_type](self.profile)

    def generate(self, report_type, fmt, period, department_ids=None, schedule=None):
        fmt = (fmt or "xlsx").lower()
        if fmt in BIR_TEMPLATE_FORMATS:
            if self.report_type(report_type) is not BirReportType.FORM_2316:
                raise UnsupportedExportError(
                    f"{fmt} is only available for BIR 2316", payload={"format": fmt}
                )
            return self.generate_2316_batch_template(period.year, department_ids, fmt.split("-")[0])
        return super().generate(report_type, fmt, period, department_ids, schedule)

    # ---------- 2316 ----------

    def _form_2316(self) -> bir.Bir2316ReportGenerator:
        return bir.Bir2316ReportGenerator(self.profile)

    def has_official_template(self) -> bool:
        return self.template.has_template()

    def template_status(self) -> dict:
        return {"available": self.has_official_template(), "path": self.template.template_path}

    def generate_2316_for_employee(self, employee_id: int, year: int):
        return self._form_2316().generate_employee_pdf(employee_id, year)

    def _employee_certificate(self, gen, employee_id, year) -> dict:
        data = gen.employee_data(employee_id, year)
        if not data.rows:
            raise NoDataError(
                "No payroll data found for the specified employee and year.",
                payload={"employee_id": employee_id, "year": year},
            )
        return gen.certificate_data(data.rows[0], year)

    def generate_2316_template(self, employee_id: int, year: int, fmt: str = "xlsx"):
        """Official-template 2316 for one employee; the template is checked before any query runs."""
        if fmt not in ("xlsx", "pdf"):
            raise UnsupportedExportError(f"Unsupported template format: {fmt}", payload={"format": fmt})
        self.template.require_template()
        gen = self._form_2316()
        certificate = self._employee_certificate(gen, employee_id, year)
        if fmt == "pdf":
            return self.template.to_pdf([certificate], self.profile, year)
        return self.template.to_excel(certificate, self.profile)

    def generate_2316_batch_template(self, year: int, department_ids=None, fmt: str = "xlsx"):
        self.template.require_template()
        gen = self._form_2316()
        period = ReportPeriod(year)
        certificates = [gen.certificate_data(row, year) for row in gen.get_data(period, department_ids).rows]
        if fmt == "pdf":
            return self.template.to_pdf(certificates, self.profile, year)
        return self.template.to_batch_excel(certificates, self.profile, year)

    def generate_bulk_2316(self, year: int, department_ids=None, user_id: int | None = None) -> dict:
        """
        Store a certificate snapshot for every employee with payroll in the year.
        Each upsert is committed on its own, so a failure part way leaves the
        earlier certificates saved and a re-run picks up the rest.
        """
        gen = self._form_2316()
        rows = gen.get_data(ReportPeriod(year), department_ids).rows
        certificates = []
        for row in rows:
            cert = Bir2316Certificate.query.filter_by(employee_id=row.employee_id, tax_year=year).first()
            if cert is None:
                cert = Bir2316Certificate(employee_id=row.employee_id, tax_year=year)
                db.session.add(cert)
            cert.compensation_data = gen.certificate_data(row, year)
            cert.generated_at = datetime.utcnow()
            cert.generated_by = user_id
            db.session.commit()
            certificates.append(cert)
        log.info("Stored %d BIR 2316 certificates for %s", len(certificates), year)
        return {"generated_count": len(certificates), "certificates": certificates}

    def get_employee_2316_certificates(self, employee_id: int):
        return (
            Bir2316Certificate.query
            .filter_by(employee_id=employee_id)
            .order_by(Bir2316Certificate.tax_year.desc())
            .all()
        )


class SssReportService(ReportService):
    agency = "sss"
    report_types = SssReportType
    includes_quarters = True
    generators = {
        SssReportType.R3: sss.SssR3ReportGenerator,
        SssReportType.R5: sss.SssR5ReportGenerator,
        SssReportType.SBR: sss.SssSbrReportGenerator,
        SssReportType.ECL: sss.SssEclReportGenerator,
    }


class PhilhealthReportService(ReportService):
    agency = "philhealth"
    report_types = PhilhealthReportType
    generators = {
        PhilhealthReportType.RF1: philhealth.PhilhealthRf1ReportGenerator,
        PhilhealthReportType.ER2: philhealth.PhilhealthEr2ReportGenerator,
        PhilhealthReportType.MDR: philhealth.PhilhealthMdrReportGenerator,
    }


class PagibigReportService(ReportService):
    agency = "pagibig"
    report_types = PagibigReportType
    generators = {
        PagibigReportType.MCRF: pagibig.PagibigMcrfReportGenerator,
        PagibigReportType.STL: pagibig.PagibigStlReportGenerator,
        PagibigReportType.HDL: pagibig.PagibigHdlReportGenerator,
    }


SERVICES = {
    "bir": BirReportService,
    "sss": SssReportService,
    "philhealth": PhilhealthReportService,
    "pagibig": PagibigReportService,
}
