"""BIR forms: 1601-C, 1604-CF, Alphalist (7.1/7.2/7.3) and 2316."""
from datetime import date

from sqlalchemy import and_, or_

from govreports_api.common.errors import InvalidArgumentError, NoDataError
from govreports_api.models.employee import SEPARATED_STATUSES, Employee
from govreports_api.models.payroll import PayrollEntry
from govreports_api.services.reports import pdf
from govreports_api.services.reports.aggregation import sum_of
from govreports_api.services.reports.base import ReportGenerator
from govreports_api.services.reports.columns import ZERO, dat_text, digits_only, format_date, money, money_str
from govreports_api.services.reports.context import CONTENT_TYPES, ReportData, ReportFile
from govreports_api.services.reports.enums import PeriodType
from govreports_api.services.reports.periods import ReportPeriod

ALPHALIST_SCHEDULES = {
    "7.1": "Alphalist Schedule 7.1 - Employees with Tax Withheld",
    "7.2": "Alphalist Schedule 7.2 - Minimum Wage Earners",
    "7.3": "Alphalist Schedule 7.3 - Employees Separated During Year",
}


def dat_line(*fields) -> str:
    return "|".join(str(f) for f in fields)


def compensation_totals(rows) -> dict:
    return {
        "employee_count": len(rows),
        "gross_compensation": sum_of(rows, "gross_compensation"),
        "non_taxable_compensation": sum_of(rows, "non_taxable_compensation"),
        "taxable_compensation": sum_of(rows, "taxable_compensation"),
        "withholding_tax": sum_of(rows, "withholding_tax"),
    }


class BaseBirReportGenerator(ReportGenerator):
    agency = "bir"
    period_type = PeriodType.ANNUAL
    required_id = "tin"
    id_label = "TIN"
    header_fill = "8B0000"
    header_font_color = "FFFFFF"

    def employer_id(self) -> str:
        return self.profile.tin

    def employer_dat_fields(self):
        return (
            digits_only(self.profile.tin),
            dat_text(self.profile.name),
            dat_text(self.profile.address),
        )

    def compensation_rows(self, period, department_ids=None, employee_id=None, filters=()):
        return self.engine.employee_totals(
            period.window(),
            department_ids=department_ids,
            employee_id=employee_id,
            id_field=self.required_id,
            filters=filters,
        )

    def compensation_dat_footer(self, totals, *prefix) -> str:
        return dat_line(
            "C",
            *prefix,
            totals["employee_count"],
            money_str(totals["gross_compensation"]),
            money_str(totals["non_taxable_compensation"]),
            money_str(totals["taxable_compensation"]),
            money_str(totals["withholding_tax"]),
        )

    def compensation_excel_totals(self, totals) -> dict:
        return {
            "B": f"{totals['employee_count']} employees",
            "G": money(totals["gross_compensation"]),
            "H": money(totals["non_taxable_compensation"]),
            "I": money(totals["taxable_compensation"]),
            "J": money(totals["withholding_tax"]),
        }


class Bir1601cReportGenerator(BaseBirReportGenerator):
    """Monthly remittance of taxes withheld; only employees with tax withheld."""

    title = "1601-C - Monthly Remittance Return of Income Taxes Withheld on Compensation"
    report_code = "1601c"
    period_type = PeriodType.MONTHLY
    pdf_view = "bir.1601c"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.compensation_rows(
            period, department_ids, filters=(PayrollEntry.withholding_tax > 0,)
        )
        totals = compensation_totals(rows)
        totals["total_contributions"] = sum_of(rows, "total_contributions")
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "TIN",
            "Last Name",
            "First Name",
            "Middle Name",
            "Gross Compensation",
            "SSS/PHIC/HDMF",
            "Non-Taxable",
            "Taxable Compensation",
            "Tax Withheld",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.tin,
            row.last_name,
            row.first_name,
            row.middle_name,
            money(row.gross_compensation),
            money(row.total_contributions),
            money(row.non_taxable_compensation),
            money(row.taxable_compensation),
            money(row.withholding_tax),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "F": money(totals["gross_compensation"]),
            "G": money(totals["total_contributions"]),
            "H": money(totals["non_taxable_compensation"]),
            "I": money(totals["taxable_compensation"]),
            "J": money(totals["withholding_tax"]),
        }


class Bir1604cfReportGenerator(BaseBirReportGenerator):
    title = "1604-CF - Annual Information Return of Income Taxes Withheld on Compensation"
    report_code = "1604cf"
    pdf_view = "bir.1604cf"
    supports_dat = True

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.compensation_rows(period, department_ids)
        return ReportData(self._limited(rows, limit), compensation_totals(rows))

    def excel_headers(self):
        return [
            "No.",
            "TIN",
            "Last Name",
            "First Name",
            "Middle Name",
            "Suffix",
            "Gross Compensation",
            "Non-Taxable",
            "Taxable Compensation",
            "Tax Withheld",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.tin,
            row.last_name,
            row.first_name,
            row.middle_name,
            row.suffix,
            money(row.gross_compensation),
            money(row.non_taxable_compensation),
            money(row.taxable_compensation),
            money(row.withholding_tax),
        ]

    def excel_totals(self, totals):
        return self.compensation_excel_totals(totals)

    def map_row_to_dat(self, row):
        return dat_line(
            digits_only(row.tin),
            dat_text(row.last_name),
            dat_text(row.first_name),
            dat_text(row.middle_name),
            money_str(row.gross_compensation),
            money_str(row.non_taxable_compensation),
            money_str(row.taxable_compensation),
            money_str(row.withholding_tax),
        )

    def dat_header(self, period):
        return dat_line("H", *self.employer_dat_fields(), period.year)

    def dat_footer(self, totals, period):
        return self.compensation_dat_footer(totals)


class BirAlphalistReportGenerator(BaseBirReportGenerator):
    """Alphalist of employees; the schedule is fixed per instance."""

    pdf_view = "bir.alphalist"
    supports_dat = True

    def __init__(self, profile=None, schedule="7.1"):
        super().__init__(profile)
        schedule = str(schedule or "7.1")
        if schedule not in ALPHALIST_SCHEDULES:
            raise InvalidArgumentError(
                f"Invalid schedule: {schedule}. Must be 7.1, 7.2, or 7.3.",
                payload={"schedule": schedule},
            )
        self.schedule = schedule

    @property
    def title(self):
        return ALPHALIST_SCHEDULES[self.schedule]

    @property
    def report_code(self):
        return "alphalist_" + self.schedule.replace(".", "")

    @property
    def is_separation_schedule(self) -> bool:
        return self.schedule == "7.3"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        if self.schedule == "7.1":
            rows = self.compensation_rows(period, department_ids, filters=(PayrollEntry.withholding_tax > 0,))
        elif self.schedule == "7.2":
            rows = [r for r in self.compensation_rows(period, department_ids) if r.withholding_tax == ZERO]
        else:
            start, end = date(period.year, 1, 1), date(period.year, 12, 31)
            separated = or_(
                and_(
                    Employee.termination_date.isnot(None),
                    Employee.termination_date >= start,
                    Employee.termination_date <= end,
                ),
                Employee.employment_status.in_(SEPARATED_STATUSES),
            )
            rows = self.compensation_rows(period, department_ids, filters=(separated,))
        return ReportData(self._limited(rows, limit), compensation_totals(rows))

    def excel_headers(self):
        headers = [
            "No.",
            "TIN",
            "Last Name",
            "First Name",
            "Middle Name",
            "Date of Birth",
            "Gross Compensation",
            "Non-Taxable",
            "Taxable Compensation",
            "Tax Withheld",
        ]
        if self.is_separation_schedule:
            headers.append("Termination Date")
        return headers

    def map_row(self, row, index):
        values = [
            index,
            row.tin,
            row.last_name,
            row.first_name,
            row.middle_name,
            format_date(row.date_of_birth),
            money(row.gross_compensation),
            money(row.non_taxable_compensation),
            money(row.taxable_compensation),
            money(row.withholding_tax),
        ]
        if self.is_separation_schedule:
            values.append(format_date(row.termination_date))
        return values

    def excel_totals(self, totals):
        return self.compensation_excel_totals(totals)

    def map_row_to_dat(self, row):
        fields = [
            "D",
            self.schedule,
            digits_only(row.tin),
            dat_text(row.last_name),
            dat_text(row.first_name),
            dat_text(row.middle_name),
            format_date(row.date_of_birth),
            dat_text(row.address),
            money_str(row.gross_compensation),
            money_str(row.non_taxable_compensation),
            money_str(row.taxable_compensation),
            money_str(row.withholding_tax),
        ]
        if self.is_separation_schedule:
            fields.append(format_date(row.termination_date))
        return dat_line(*fields)

    def dat_header(self, period):
        return dat_line("H", "ALPHALIST", self.schedule, *self.employer_dat_fields(), period.year)

    def dat_footer(self, totals, period):
        return self.compensation_dat_footer(totals, self.schedule)


class Bir2316ReportGenerator(BaseBirReportGenerator):
    """Certificates of compensation payment / tax withheld, one per employee."""

    title = "2316 - Certificate of Compensation Payment/Tax Withheld"
    report_code = "2316"
    pdf_view = "bir.2316"
    supports_dat = True

    def get_data(self, period, department_ids=None, limit=None, employee_id=None) -> ReportData:
        rows = self.compensation_rows(period, department_ids, employee_id=employee_id)
        return ReportData(self._limited(rows, limit), compensation_totals(rows))

    def employee_data(self, employee_id: int, year: int) -> ReportData:
        return self.get_data(ReportPeriod(year), employee_id=employee_id)

    def certificate_data(self, row, year: int) -> dict:
        """Plain-JSON certificate payload (stored with the certificate snapshot)."""
        def f(v):
            return float(money(v))

        return {
            "employee_id": row.employee_id,
            "employee_number": row.employee_number,
            "tin": row.tin,
            "last_name": row.last_name,
            "first_name": row.first_name,
            "middle_name": row.middle_name,
            "suffix": row.suffix,
            "date_of_birth": row.date_of_birth.isoformat() if row.date_of_birth else None,
            "address": row.address,
            "zip_code": row.zip_code,
            "phone": row.phone,
            "position": row.position,
            "department": row.department,
            "hire_date": row.hire_date.isoformat() if row.hire_date else None,
            "termination_date": row.termination_date.isoformat() if row.termination_date else None,
            "tax_year": year,
            "gross_compensation": f(row.gross_compensation),
            "basic_salary": f(row.basic_pay),
            "overtime_pay": f(row.overtime_pay),
            "holiday_pay": f(row.holiday_pay),
            "night_differential": f(row.night_differential),
            "thirteenth_month_pay": f(row.thirteenth_month_pay),
            "de_minimis": f(row.de_minimis),
            "other_benefits": f(row.other_earnings),
            "non_taxable_13th_month": f(row.non_taxable_13th_month),
            "total_non_taxable": f(row.non_taxable_compensation),
            "sss_contributions": f(row.sss_employee),
            "philhealth_contributions": f(row.philhealth_employee),
            "pagibig_contributions": f(row.pagibig_employee),
            "total_contributions": f(row.total_contributions),
            "taxable_compensation": f(row.taxable_compensation),
            "withholding_tax": f(row.withholding_tax),
            "period_from": f"{year}-01-01",
            "period_to": f"{year}-12-31",
        }

    def certificate_sections(self, row):
        return [
            ("Employee Information", [
                ("Name", f"{row.last_name}, {row.first_name} {row.middle_name}".strip()),
                ("TIN", row.tin),
                ("Employee No.", row.employee_number),
                ("Date of Birth", format_date(row.date_of_birth)),
                ("Address", row.address),
                ("Position", row.position),
            ]),
            ("Employer Information", [
                ("Employer", self.profile.name),
                ("TIN", self.profile.tin),
                ("Address", self.profile.address),
            ]),
            ("Compensation", [
                ("Basic Salary", money(row.basic_pay)),
                ("Overtime Pay", money(row.overtime_pay)),
                ("Holiday Pay", money(row.holiday_pay)),
                ("Night Differential", money(row.night_differential)),
                ("13th Month Pay", money(row.thirteenth_month_pay)),
                ("De Minimis Benefits", money(row.de_minimis)),
                ("Other Benefits", money(row.other_earnings)),
                ("Gross Compensation", money(row.gross_compensation)),
            ]),
            ("Non-Taxable / Exempt", [
                ("13th Month (up to 90,000)", money(row.non_taxable_13th_month)),
                ("De Minimis Benefits", money(row.de_minimis)),
                ("SSS Contributions", money(row.sss_employee)),
                ("PhilHealth Contributions", money(row.philhealth_employee)),
                ("Pag-IBIG Contributions", money(row.pagibig_employee)),
                ("Total Non-Taxable", money(row.non_taxable_compensation)),
            ]),
            ("Tax", [
                ("Taxable Compensation", money(row.taxable_compensation)),
                ("Tax Withheld", money(row.withholding_tax)),
            ]),
        ]

    def generate_employee_pdf(self, employee_id: int, year: int) -> ReportFile:
        data = self.employee_data(employee_id, year)
        if not data.rows:
            raise NoDataError(
                "No payroll data found for the specified employee and year.",
                payload={"employee_id": employee_id, "year": year},
            )
        row = data.rows[0]
        period = ReportPeriod(year)
        content = pdf.render_certificates(
            self.profile.name, self.title, self.period_label(period), [self.certificate_sections(row)]
        )
        return ReportFile(content, f"bir_2316_{row.employee_number}_{year}.pdf", CONTENT_TYPES["pdf"])

    def excel_headers(self):
        return [
            "No.",
            "TIN",
            "Last Name",
            "First Name",
            "Middle Name",
            "Gross Compensation",
            "13th Month",
            "De Minimis",
            "SSS",
            "PhilHealth",
            "Pag-IBIG",
            "Taxable",
            "Tax Withheld",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.tin,
            row.last_name,
            row.first_name,
            row.middle_name,
            money(row.gross_compensation),
            money(row.thirteenth_month_pay),
            money(row.de_minimis),
            money(row.sss_employee),
            money(row.philhealth_employee),
            money(row.pagibig_employee),
            money(row.taxable_compensation),
            money(row.withholding_tax),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "F": money(totals["gross_compensation"]),
            "L": money(totals["taxable_compensation"]),
            "M": money(totals["withholding_tax"]),
        }

    def map_row_to_dat(self, row):
        return dat_line(
            "D",
            digits_only(row.tin),
            dat_text(row.last_name),
            dat_text(row.first_name),
            dat_text(row.middle_name),
            format_date(row.date_of_birth),
            dat_text(row.address),
            money_str(row.gross_compensation),
            money_str(row.non_taxable_compensation),
            money_str(row.taxable_compensation),
            money_str(row.withholding_tax),
            money_str(row.sss_employee),
            money_str(row.philhealth_employee),
            money_str(row.pagibig_employee),
        )

    def dat_header(self, period):
        return dat_line("H", "2316", *self.employer_dat_fields(), period.year)

    def dat_footer(self, totals, period):
        return self.compensation_dat_footer(totals)
