"""PhilHealth forms: RF1 remittance, ER2 member roster and MDR new hires."""
from sqlalchemy import or_

from govreports_api.models.employee import Employee
from govreports_api.models.payroll import PayrollEntry
from govreports_api.services.reports.aggregation import sum_of
from govreports_api.services.reports.base import ReportGenerator
from govreports_api.services.reports.columns import format_date, format_gender, money
from govreports_api.services.reports.context import ReportData


def short_name(row) -> str:
    """'Last, First M.'"""
    name = f"{row.last_name}, {row.first_name}"
    if row.middle_name:
        name += f" {row.middle_name[0]}."
    return name


def status_label(value) -> str:
    return str(value or "").replace("_", " ").title()


class BasePhilhealthReportGenerator(ReportGenerator):
    agency = "philhealth"
    required_id = "philhealth_number"
    id_label = "PhilHealth Employer No"

    def employer_id(self) -> str:
        return self.profile.philhealth_number

    def period_slug(self, period):
        if period.is_range:
            return f"{period.start_date.isoformat()}_to_{period.end_date.isoformat()}"
        if period.month:
            return f"{period.year}-{period.month:02d}"
        return str(period.year)


class PhilhealthRf1ReportGenerator(BasePhilhealthReportGenerator):
    title = "RF1 - Electronic Remittance Form"
    report_code = "rf1"
    pdf_view = "philhealth.rf1"

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.engine.employee_totals(
            period.window(),
            department_ids=department_ids,
            id_field=self.required_id,
            filters=(or_(PayrollEntry.philhealth_employee > 0, PayrollEntry.philhealth_employer > 0),),
        )
        employee = sum_of(rows, "philhealth_employee")
        employer = sum_of(rows, "philhealth_employer")
        totals = {
            "employee_count": len(rows),
            "gross_pay": sum_of(rows, "gross_pay"),
            "philhealth_employee": employee,
            "philhealth_employer": employer,
            "total_contribution": employee + employer,
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "PIN",
            "Last Name",
            "First Name",
            "Middle Name",
            "Suffix",
            "Date of Birth",
            "Sex",
            "Monthly Salary",
            "EE Share",
            "ER Share",
            "Total",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.philhealth_number,
            row.last_name,
            row.first_name,
            row.middle_name,
            row.suffix,
            format_date(row.date_of_birth),
            format_gender(row.gender),
            money(row.gross_pay),
            money(row.philhealth_employee),
            money(row.philhealth_employer),
            money(row.philhealth_employee + row.philhealth_employer),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "I": money(totals["gross_pay"]),
            "J": money(totals["philhealth_employee"]),
            "K": money(totals["philhealth_employer"]),
            "L": money(totals["total_contribution"]),
        }


class PhilhealthEr2ReportGenerator(BasePhilhealthReportGenerator):
    """Active employees registered with PhilHealth; the window only labels the report."""

    title = "ER2 - Employer Remittance Report"
    report_code = "er2"
    pdf_view = "philhealth.er2"
    accepts_any_window = True

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        rows = self.engine.employees(
            department_ids=department_ids,
            id_field=self.required_id,
            filters=(Employee.termination_date.is_(None),),
            order_by=(Employee.last_name, Employee.first_name),
        )
        totals = {
            "employee_count": len(rows),
            "total_salary": sum_of(rows, "basic_salary"),
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "PIN",
            "Name",
            "Date of Birth",
            "Sex",
            "SSS No.",
            "TIN",
            "Address",
            "Email",
            "Phone",
            "Position",
            "Salary",
            "Date Employed",
            "Status",
        ]

    def map_row(self, row, index):
        return [
            index,
            row.philhealth_number,
            short_name(row),
            format_date(row.date_of_birth),
            format_gender(row.gender),
            row.sss_number,
            row.tin,
            row.address,
            row.email,
            row.phone,
            row.position,
            money(row.basic_salary),
            format_date(row.hire_date),
            status_label(row.employment_status),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} employees",
            "L": money(totals["total_salary"]),
        }


class PhilhealthMdrReportGenerator(BasePhilhealthReportGenerator):
    """
    Member Data Record: employees hired inside the window, newest first.
    Used to register new members, so a PIN is not required.
    """

    title = "MDR - Member Data Record"
    report_code = "mdr"
    pdf_view = "philhealth.mdr"
    required_id = None
    supports_date_range = True
    accepts_any_window = True

    def get_data(self, period, department_ids=None, limit=None) -> ReportData:
        start, end = period.window()
        rows = self.engine.employees(
            department_ids=department_ids,
            filters=(Employee.hire_date >= start, Employee.hire_date <= end),
            order_by=(Employee.hire_date.desc(), Employee.last_name),
        )
        totals = {
            "employee_count": len(rows),
            "total_salary": sum_of(rows, "basic_salary"),
        }
        return ReportData(self._limited(rows, limit), totals)

    def excel_headers(self):
        return [
            "No.",
            "Name",
            "Date of Birth",
            "Sex",
            "Civil Status",
            "TIN",
            "SSS No.",
            "PIN",
            "Address",
            "Phone",
            "Email",
            "Date Employed",
            "Position",
            "Department",
            "Salary",
        ]

    def map_row(self, row, index):
        return [
            index,
            short_name(row),
            format_date(row.date_of_birth),
            format_gender(row.gender),
            status_label(row.civil_status),
            row.tin,
            row.sss_number,
            row.philhealth_number,
            row.address,
            row.phone,
            row.email,
            format_date(row.hire_date),
            row.position,
            row.department,
            money(row.basic_salary),
        ]

    def excel_totals(self, totals):
        return {
            "B": f"{totals['employee_count']} new employees",
            "O": money(totals["total_salary"]),
        }
