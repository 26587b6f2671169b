"""Pag-IBIG forms: MCRF savings remittance plus STL and HDL loan remittances."""
from sqlalchemy import or_

from govreports_api.common.errors import InvalidArgumentError
from govreports_api.models.payroll import PayrollEntry
from govreports_api.services.reports.aggregation import sum_of
from govreports_api.services.reports.base import ReportGenerator
from govreports_api.services.reports.columns import money
from govreports_api.services.reports.context import ReportData
from govreports_api.services.reports.enums import LoanType


class BasePagibigReportGenerator(ReportGenerator):
    agency = "pagibig"
    required_id = "pagibig_number"
    id_label = "Pag-IBIG Employer No"

    def employer_id(self) -> str:
        return self.profile.pagibig_number

    def check_period(self, period):
        # remittances are filed per month or per quarter, never for a whole year
        if period.is_range or not (period.month or period.quarter):
            raise InvalidArgumentError(
                f"{self.title} requires a month or a quarter", payload={"field": "month"}
            )

    def period_slug(self, period):
        if period.month:
            return f"{period.year}-{period.month:02d}"
        return f"{period.year}-Q{period.quarter}"


class PagibigMcrfReportGenerator(BasePagibigReportGenerator):
    title = "MCRF - Monthly Collection Remittance Form"
    report_code = "mcrf"
    pdf_view = "pagibig.mcrf"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.engine.employee_totals(
            period.window(),
            department_ids=department_ids,
            id_field=self.required_id,
            filters=(or_(PayrollEntry.pagibig_employee > 0, PayrollEntry.pagibig_employer > 0),),
        )
        employee = sum_of(rows, "pagibig_employee")
        employer = sum_of(rows, "pagibig_employer")
        totals = {
            "employee_count": len(rows),
            "gross_pay": sum_of(rows, "gross_pay"),
            "pagibig_employee": employee,
            "pagibig_employer": employer,
            "total_contribution": employee + employer,
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "Pag-IBIG MID No.",
            "Last Name",
            "First Name",
            "Middle Name",
            "Monthly Compensation",
            "EE Share",
            "ER Share",
            "Total",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.pagibig_number,
            row.last_name,
            row.first_name,
            row.middle_name,
            money(row.gross_pay),
            money(row.pagibig_employee),
            money(row.pagibig_employer),
            money(row.pagibig_employee + row.pagibig_employer),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "F": money(totals["gross_pay"]),
            "G": money(totals["pagibig_employee"]),
            "H": money(totals["pagibig_employer"]),
            "I": money(totals["total_contribution"]),
        }


class BasePagibigLoanReportGenerator(BasePagibigReportGenerator):
    """Loan amortizations paid inside the window, one row per employee and loan type."""

    loan_types: tuple = ()

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        payments = self.engine.loan_payments(
            self.loan_types, period.window(), department_ids, id_field=self.required_id
        )
        rows = self.engine.by_employee_and_loan(payments)
        totals = {
            "employee_count": len({r.employee_id for r in rows}),
            "loan_count": len(rows),
            "total_payments": sum_of(rows, "total_payments"),
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "Pag-IBIG MID No.",
            "Last Name",
            "First Name",
            "Middle Name",
            "Reference No.",
            "Principal Amount",
            "Monthly Amortization",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.pagibig_number,
            row.last_name,
            row.first_name,
            row.middle_name,
            row.reference_number,
            money(row.principal_amount),
            money(row.total_payments),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "F": f"{totals['loan_count']} loans",
            "H": money(totals["total_payments"]),
        }


class PagibigStlReportGenerator(BasePagibigLoanReportGenerator):
    title = "STL - Short-Term Loan Remittance"
    report_code = "stl"
    pdf_view = "pagibig.stl"
    loan_types = (LoanType.PAGIBIG_MPL, LoanType.PAGIBIG_CALAMITY)


class PagibigHdlReportGenerator(BasePagibigLoanReportGenerator):
    title = "HDL - Housing Loan Remittance"
    report_code = "hdl"
    pdf_view = "pagibig.hdl"
    loan_types = (LoanType.PAGIBIG_HOUSING,)
