"""SSS forms: R3, R5, SBR and the ECL fixed-width collection list."""
from collections import OrderedDict

from openpyxl.styles import Font
from sqlalchemy import or_

from govreports_api.models.payroll import PayrollEntry
from govreports_api.services.reports import serializers
from govreports_api.services.reports.aggregation import sum_of
from govreports_api.services.reports.base import ReportGenerator
from govreports_api.services.reports.columns import ZERO, cents, clean_name, digits_only, format_date, money
from govreports_api.services.reports.context import CONTENT_TYPES, ReportData, ReportFile
from govreports_api.services.reports.enums import LoanType, PeriodType
from govreports_api.services.reports.serializers import pad, pad_amount

ECL_LINE_WIDTH = 118

# only employees with an SS contribution on either side
HAS_SSS_CONTRIBUTION = or_(PayrollEntry.sss_employee > 0, PayrollEntry.sss_employer > 0)


class BaseSssReportGenerator(ReportGenerator):
    agency = "sss"
    required_id = "sss_number"
    id_label = "SSS Employer No"

    def employer_id(self) -> str:
        return self.profile.sss_number

    def contribution_rows(self, period, department_ids=None):
        return self.engine.employee_totals(
            period.window(),
            department_ids=department_ids,
            id_field=self.required_id,
            filters=(HAS_SSS_CONTRIBUTION,),
        )


class SssR3ReportGenerator(BaseSssReportGenerator):
    title = "R3 - Monthly Contribution Collection List"
    report_code = "r3"
    pdf_view = "sss.r3"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.contribution_rows(period, department_ids)
        employee = sum_of(rows, "sss_employee")
        employer = sum_of(rows, "sss_employer")
        ec = sum_of(rows, "sss_ec")
        totals = {
            "employee_count": len(rows),
            "sss_employee": employee,
            "sss_employer": employer,
            "sss_ec": ec,
            "total_contribution": employee + employer + ec,
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "SSS Number",
            "Last Name",
            "First Name",
            "Middle Name",
            "Suffix",
            "SS (EE)",
            "SS (ER)",
            "EC",
            "Total",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.sss_number,
            row.last_name,
            row.first_name,
            row.middle_name,
            row.suffix,
            money(row.sss_employee),
            money(row.sss_employer),
            money(row.sss_ec),
            money(row.sss_employee + row.sss_employer + row.sss_ec),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "G": money(totals["sss_employee"]),
            "H": money(totals["sss_employer"]),
            "I": money(totals["sss_ec"]),
            "J": money(totals["total_contribution"]),
        }


class SssR5ReportGenerator(BaseSssReportGenerator):
    """SSS loan amortizations deducted during the quarter."""

    title = "R5 - Quarterly Loan Amortization"
    report_code = "r5"
    period_type = PeriodType.QUARTERLY
    pdf_view = "sss.r5"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        payments = self.engine.loan_payments(
            LoanType.sss_loan_types(), period.window(), department_ids, id_field=self.required_id
        )
        rows = self.engine.by_employee_and_loan(payments)

        by_type: "OrderedDict[str, dict]" = OrderedDict()
        for row in rows:
            bucket = by_type.setdefault(row.loan_type, {"count": 0, "total": ZERO})
            bucket["count"] += 1
            bucket["total"] += row.total_payments

        totals = {
            "employee_count": len({r.employee_id for r in rows}),
            "loan_count": len(rows),
            "total_payments": sum_of(rows, "total_payments"),
            "by_loan_type": dict(by_type),
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "SSS Number",
            "Last Name",
            "First Name",
            "Middle Name",
            "Loan Type",
            "Reference No.",
            "Principal Amount",
            "Quarterly Payment",
            "Payment Months",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.sss_number,
            row.last_name,
            row.first_name,
            row.middle_name,
            row.loan_type_label,
            row.reference_number,
            money(row.principal_amount),
            money(row.total_payments),
            row.payment_months,
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "F": f"{totals['loan_count']} loans",
            "I": money(totals["total_payments"]),
        }

    def decorate_sheet(self, ws, totals, totals_row):
        row = totals_row + 2
        ws[f"A{row}"] = "SUMMARY BY LOAN TYPE"
        ws[f"A{row}"].font = Font(bold=True)
        for loan_type, summary in totals["by_loan_type"].items():
            row += 1
            ws[f"A{row}"] = LoanType.label_for(loan_type)
            ws[f"F{row}"] = f"{summary['count']} loans"
            serializers.write_cell(ws, f"I{row}", money(summary["total"]))


class SssSbrReportGenerator(BaseSssReportGenerator):
    """Contribution totals per payroll period within the month."""

    title = "SBR - Summary of Contributions by Payroll"
    report_code = "sbr"
    pdf_view = "sss.sbr"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        entries = self.engine.payroll_entries(
            period.window(),
            department_ids=department_ids,
            id_field=self.required_id,
            filters=(HAS_SSS_CONTRIBUTION,),
        )
        rows = self.engine.by_payroll_period(entries)
        employee = sum_of(rows, "sss_employee")
        employer = sum_of(rows, "sss_employer")
        ec = sum_of(rows, "sss_ec")
        totals = {
            "period_count": len(rows),
            "employee_count": len({e.employee_id for e in entries}),
            "gross_pay": sum_of(rows, "gross_pay"),
            "sss_employee": employee,
            "sss_employer": employer,
            "total_ss": employee + employer,
            "sss_ec": ec,
            "total_contribution": employee + employer + ec,
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "Payroll Period",
            "Cutoff",
            "Pay Date",
            "Employees",
            "Total Gross",
            "SS (EE)",
            "SS (ER)",
            "Total SS",
            "EC",
        ]

    def map_row(self, row, index):
        return [
            row.period_name,
            f"{format_date(row.cutoff_start)} - {format_date(row.cutoff_end)}",
            format_date(row.pay_date),
            row.employee_count,
            money(row.gross_pay),
            money(row.sss_employee),
            money(row.sss_employer),
            money(row.total_ss),
            money(row.sss_ec),
        ]

    def excel_totals(self, totals):
        return {
            "D": totals["employee_count"],
            "E": money(totals["gross_pay"]),
            "F": money(totals["sss_employee"]),
            "G": money(totals["sss_employer"]),
            "H": money(totals["total_ss"]),
            "I": money(totals["sss_ec"]),
        }


class SssEclReportGenerator(BaseSssReportGenerator):
    """
    Electronic Collection List. The text export is a fixed-width file of
    118-character lines (SSS no. 10, last 25, first 25, middle 25,
    suffix 5, birth date MMDDYYYY 8, SS amount 10, EC amount 10; amounts
    in centavos, zero-padded).
    """

    title = "ECL - Electronic Collection List"
    report_code = "ecl"
    pdf_view = "sss.ecl"
    supports_fixed_width = True

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.contribution_rows(period, department_ids)
        ss = sum(((r.sss_employee + r.sss_employer) for r in rows), ZERO)
        totals = {
            "employee_count": len(rows),
            "ss_contribution": ss,
            "ec_contribution": ZERO,
            "total_contribution": ss,
        }
        return ReportData(self._limited(rows, limit), totals)

    def period_slug(self, period):
        return f"{period.year}-{(period.month or 1):02d}"

    @staticmethod
    def ss_amount(row):
        return row.sss_employee + row.sss_employer

    @staticmethod
    def ec_amount(row):
        return ZERO

    def excel_headers(self):
        return [
            "No.",
            "SSS Number",
            "Last Name",
            "First Name",
            "Middle Name",
            "Suffix",
            "Date of Birth",
            "SS Contribution",
            "EC Contribution",
            "Total",
        ]

    def map_row(self, row, index):
        ss, ec = self.ss_amount(row), self.ec_amount(row)
        return [
            index,
            row.sss_number,
            row.last_name,
            row.first_name,
            row.middle_name,
            row.suffix,
            format_date(row.date_of_birth),
            money(ss),
            money(ec),
            money(ss + ec),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "H": money(totals["ss_contribution"]),
            "I": money(totals["ec_contribution"]),
            "J": money(totals["total_contribution"]),
        }

    def map_row_to_fixed_width(self, row) -> str:
        return "".join([
            pad(digits_only(row.sss_number), 10),
            pad(clean_name(row.last_name), 25),
            pad(clean_name(row.first_name), 25),
            pad(clean_name(row.middle_name), 25),
            pad(clean_name(row.suffix), 5),
            format_date(row.date_of_birth, "%m%d%Y") or " " * 8,
            pad_amount(cents(self.ss_amount(row)), 10),
            pad_amount(cents(self.ec_amount(row)), 10),
        ])

    def to_csv(self, data, period) -> ReportFile:
        """SSS accepts the collection list as fixed-width text, not CSV."""
        return ReportFile(serializers.to_fixed_width(self, data), self.filename("txt", period), CONTENT_TYPES["txt"])
