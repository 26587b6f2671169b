import io
from datetime import date

import pytest
from openpyxl import load_workbook

from factories import make_company, make_employee, make_entry, make_loan, make_period
from govreports_api.common.errors import InvalidArgumentError
from govreports_api.services.reports.context import CompanyProfile
from govreports_api.services.reports.service import SssReportService
from govreports_api.services.reports.sss import ECL_LINE_WIDTH


def _svc(company):
    return SssReportService(CompanyProfile.from_company(company))


def test_r3_sums_employee_and_employer_shares(app):
    c = make_company()
    e = make_employee(c)
    make_entry(make_period(c, date(2024, 5, 1)), e, sss_employee=450, sss_employer=900, sss_ec=10)
    make_entry(make_period(c, date(2024, 5, 16)), e, sss_employee=450, sss_employer=900, sss_ec=10)

    svc = _svc(c)
    totals = svc.summary("r3", svc.resolve_period("r3", 2024, 5))
    assert totals["employee_count"] == 1
    assert totals["sss_employee"] == 900.0
    assert totals["sss_employer"] == 1800.0
    assert totals["sss_ec"] == 20.0
    assert totals["total_contribution"] == 2720.0


def test_r3_skips_rows_without_contribution_or_sss_number(app):
    c = make_company()
    p = make_period(c, date(2024, 5, 1))
    make_entry(p, make_employee(c, last="Paying"), sss_employee=450, sss_employer=900)
    make_entry(p, make_employee(c, last="Zero"), sss_employee=0, sss_employer=0)
    make_entry(p, make_employee(c, last="NoNumber", sss_number=""), sss_employee=450, sss_employer=900)

    svc = _svc(c)
    result = svc.preview("r3", svc.resolve_period("r3", 2024, 5))
    assert [r["last_name"] for r in result["data"]] == ["Paying"]


def test_r3_excel_totals_row(app):
    c = make_company()
    make_entry(make_period(c, date(2024, 5, 1)), make_employee(c), sss_employee=450, sss_employer=900)

    svc = _svc(c)
    report = svc.generate("r3", "xlsx", svc.resolve_period("r3", 2024, 5))
    assert report.filename == "sss_r3_2024-05.xlsx"
    ws = load_workbook(io.BytesIO(report.content)).active
    assert ws["A4"].value == "SSS Employer No: 03-1234567-8"
    assert ws["A8"].value == "TOTALS"
    assert ws["B8"].value == "1 employees"


def test_r5_totals_sss_loans_for_the_quarter(app):
    c = make_company()
    e = make_employee(c)
    make_loan(e, "sss_salary", payments=[(date(2024, 1, 30), 2000), (date(2024, 2, 28), 2000)])
    make_loan(e, "pagibig_mpl", payments=[(date(2024, 1, 30), 1500)])
    make_loan(e, "sss_salary", reference="REF-OLD", payments=[(date(2024, 4, 30), 2000)])

    svc = _svc(c)
    period = svc.resolve_period("r5", 2024, quarter=1)
    result = svc.preview("r5", period)
    totals = result["totals"]
    assert totals["total_payments"] == 4000.0
    assert totals["loan_count"] == 1
    assert totals["employee_count"] == 1
    assert totals["by_loan_type"] == {"sss_salary": {"count": 1, "total": 4000.0}}
    row = result["data"][0]
    assert row["loan_type_label"] == "SSS Salary Loan"
    assert row["payment_months"] == "Jan, Feb"


def test_r5_requires_quarter(app):
    c = make_company()
    svc = _svc(c)
    with pytest.raises(InvalidArgumentError):
        svc.preview("r5", svc.resolve_period("r5", 2024))


def test_r5_filename_and_loan_type_summary(app):
    c = make_company()
    e = make_employee(c)
    make_loan(e, "sss_salary", payments=[(date(2024, 4, 30), 1000)])
    make_loan(e, "sss_calamity", payments=[(date(2024, 5, 30), 500)])

    svc = _svc(c)
    report = svc.generate("r5", "xlsx", svc.resolve_period("r5", 2024, quarter=2))
    assert report.filename == "sss_r5_2024-Q2.xlsx"

    ws = load_workbook(io.BytesIO(report.content)).active
    labels = [ws.cell(row=r, column=1).value for r in range(1, ws.max_row + 1)]
    assert "SUMMARY BY LOAN TYPE" in labels
    assert "SSS Calamity Loan" in labels
    assert "SSS Salary Loan" in labels


def test_sbr_groups_by_payroll_period(app):
    c = make_company()
    first = make_period(c, date(2024, 5, 1), date(2024, 5, 15), name="May 1-15")
    second = make_period(c, date(2024, 5, 16), date(2024, 5, 31), name="May 16-31")
    a, b = make_employee(c, last="A"), make_employee(c, last="B")
    make_entry(first, a, gross_pay=10000, sss_employee=450, sss_employer=900)
    make_entry(first, b, gross_pay=12000, sss_employee=450, sss_employer=900)
    make_entry(second, a, gross_pay=10000, sss_employee=450, sss_employer=900)

    svc = _svc(c)
    result = svc.preview("sbr", svc.resolve_period("sbr", 2024, 5))
    assert [r["period_name"] for r in result["data"]] == ["May 1-15", "May 16-31"]
    assert [r["employee_count"] for r in result["data"]] == [2, 1]
    assert result["data"][0]["total_ss"] == 2700.0
    assert result["totals"]["period_count"] == 2
    assert result["totals"]["employee_count"] == 2
    assert result["totals"]["gross_pay"] == 32000.0


def test_ecl_fixed_width_lines(app):
    c = make_company()
    e = make_employee(c, first="Juan", middle_name="Santos", last="Dela Cruz-Reyes",
                      sss_number="34-1234567-8", date_of_birth=date(1990, 3, 7))
    other = make_employee(c, first="Ana", last="Lim", date_of_birth=None)
    p = make_period(c, date(2024, 5, 1))
    make_entry(p, e, sss_employee=1125.5, sss_employer=2250)
    make_entry(p, other, sss_employee=450, sss_employer=900)

    svc = _svc(c)
    report = svc.generate("ecl", "csv", svc.resolve_period("ecl", 2024, 5))
    assert report.filename == "sss_ecl_2024-05.txt"
    assert report.content_type == "text/plain"

    lines = report.content.decode("utf-8").split("\r\n")
    assert len(lines) == 2
    assert all(len(line) == ECL_LINE_WIDTH for line in lines)

    juan = lines[0]
    assert juan[:10] == "3412345678"
    assert juan[10:35].rstrip() == "DELA CRUZREYES"
    assert juan[35:60].rstrip() == "JUAN"
    assert juan[60:85].rstrip() == "SANTOS"
    assert juan[90:98] == "03071990"
    assert juan[98:108] == "0000337550"
    assert juan[108:118] == "0000000000"
    assert lines[1][90:98] == " " * 8


def test_ecl_amount_too_wide_for_field_is_an_error(app):
    c = make_company()
    e = make_employee(c)
    make_entry(make_period(c, date(2024, 5, 1)), e, sss_employee=60000000, sss_employer=60000000)

    svc = _svc(c)
    with pytest.raises(InvalidArgumentError):
        svc.generate("ecl", "csv", svc.resolve_period("ecl", 2024, 5))


def test_ecl_excel_export(app):
    c = make_company()
    make_entry(make_period(c, date(2024, 5, 1)), make_employee(c), sss_employee=450, sss_employer=900)

    svc = _svc(c)
    report = svc.generate("ecl", "xlsx", svc.resolve_period("ecl", 2024, 5))
    assert report.filename == "sss_ecl_2024-05.xlsx"
    totals = svc.summary("ecl", svc.resolve_period("ecl", 2024, 5))
    assert totals["ss_contribution"] == 1350.0
    assert totals["ec_contribution"] == 0.0


def test_available_periods_include_quarters():
    periods = SssReportService().available_periods()
    assert set(periods) == {"years", "months", "quarters"}
    assert len(periods["quarters"]) == 4
