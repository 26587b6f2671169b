from datetime import date
from decimal import Decimal

import pytest
from reportlab.platypus import Paragraph

from factories import make_company, make_employee, make_entry, make_period
from govreports_api.common.errors import InvalidArgumentError
from govreports_api.services.reports import pdf
from govreports_api.services.reports.context import CompanyProfile
from govreports_api.services.reports.service import PhilhealthReportService


def _svc(company):
    return PhilhealthReportService(CompanyProfile.from_company(company))


def test_rf1_totals(app):
    c = make_company()
    p = make_period(c, date(2024, 5, 1))
    make_entry(p, make_employee(c, last="Aquino"), gross_pay=30000, philhealth_employee=750, philhealth_employer=750)
    make_entry(p, make_employee(c, last="Bautista"), gross_pay=20000, philhealth_employee=500, philhealth_employer=500)
    make_entry(p, make_employee(c, last="NoPin", philhealth_number=None), philhealth_employee=500)

    svc = _svc(c)
    result = svc.preview("rf1", svc.resolve_period("rf1", 2024, 5))
    assert [r["last_name"] for r in result["data"]] == ["Aquino", "Bautista"]
    totals = result["totals"]
    assert totals["employee_count"] == 2
    assert totals["gross_pay"] == 50000.0
    assert totals["philhealth_employee"] == 1250.0
    assert totals["total_contribution"] == 2500.0


def test_rf1_csv_has_no_totals_row(app):
    c = make_company()
    p = make_period(c, date(2024, 5, 1))
    for last in ("Aquino", "Bautista", "Cruz"):
        make_entry(p, make_employee(c, last=last), philhealth_employee=500, philhealth_employer=500)

    svc = _svc(c)
    report = svc.generate("rf1", "csv", svc.resolve_period("rf1", 2024, 5))
    assert report.content_type == "text/csv"
    lines = report.content.decode("utf-8").splitlines()
    assert len(lines) == 4
    assert [line.split(",")[0] for line in lines[1:]] == ["1", "2", "3"]
    assert not any("TOTALS" in line for line in lines)


def test_rf1_rejects_date_range(app):
    c = make_company()
    svc = _svc(c)
    period = svc.resolve_period("rf1", 2024, 5, start_date="2024-05-01", end_date="2024-05-31")
    with pytest.raises(InvalidArgumentError):
        svc.preview("rf1", period)


def test_er2_lists_active_members(app):
    c = make_company()
    make_employee(c, last="Santos", basic_salary=30000)
    make_employee(c, last="Aquino", basic_salary=20000)
    make_employee(c, last="Left", termination_date=date(2024, 1, 31))
    make_employee(c, last="NoPin", philhealth_number="")

    svc = _svc(c)
    result = svc.preview("er2", svc.resolve_period("er2", 2024, 5))
    assert [r["last_name"] for r in result["data"]] == ["Aquino", "Santos"]
    assert result["totals"] == {"employee_count": 2, "total_salary": 50000.0}


def test_er2_accepts_whole_year(app):
    c = make_company()
    make_employee(c)
    svc = _svc(c)
    report = svc.generate("er2", "xlsx", svc.resolve_period("er2", 2024))
    assert report.filename == "philhealth_er2_2024.xlsx"


def test_mdr_date_range_new_hires(app):
    c = make_company()
    make_employee(c, last="Early", hire_date=date(2024, 1, 10))
    make_employee(c, last="Later", hire_date=date(2024, 2, 20), philhealth_number=None)
    make_employee(c, last="Old", hire_date=date(2019, 5, 1))

    svc = _svc(c)
    period = svc.resolve_period("mdr", start_date="2024-01-01", end_date="2024-03-31")
    result = svc.preview("mdr", period)
    # newest first; a missing PIN does not exclude a new hire
    assert [r["last_name"] for r in result["data"]] == ["Later", "Early"]

    report = svc.generate("mdr", "csv", period)
    assert report.filename == "philhealth_mdr_2024-01-01_to_2024-03-31.csv"
    lines = report.content.decode("utf-8").splitlines()
    assert lines[0].startswith("No.,")
    # header plus one line per new hire, never a totals line
    assert len(lines) == 3
    assert not any(line.startswith("TOTALS") for line in lines)


def test_mdr_range_must_be_complete(app):
    c = make_company()
    svc = _svc(c)
    with pytest.raises(InvalidArgumentError):
        svc.resolve_period("mdr", 2024, start_date="2024-01-01")


def test_mdr_pdf(app):
    c = make_company()
    make_employee(c, hire_date=date(2024, 5, 2))
    svc = _svc(c)
    report = svc.generate("mdr", "pdf", svc.resolve_period("mdr", 2024, 5))
    assert report.filename == "philhealth_mdr_2024-05.pdf"
    assert report.content.startswith(b"%PDF")


def test_available_periods_have_no_quarters():
    periods = PhilhealthReportService().available_periods()
    assert set(periods) == {"years", "months"}
    assert len(periods["months"]) == 12
    assert date.today().year in periods["years"]


def test_pdf_text_cells_wrap(app):
    style = pdf.cell_style(7)
    address = "Unit 1204 Tower Two, 6789 Ayala Avenue corner Paseo de Roxas, Makati City"
    cell = pdf.table_cell(address, style)
    assert isinstance(cell, Paragraph)
    assert cell.getPlainText() == address
    assert pdf.table_cell(Decimal("25000"), style) == "25,000.00"
    assert pdf.table_cell(3, style) == "3"
    assert pdf.table_cell(None, style) == ""


def test_er2_pdf_with_long_addresses(app):
    c = make_company()
    long_street = "Unit 1204 Tower Two, 6789 Ayala Avenue corner Paseo de Roxas & Makati Avenue"
    make_employee(c, last="Aquino", address={"street": long_street, "city": "Makati City", "postal_code": "1226"})
    svc = _svc(c)
    report = svc.generate("er2", "pdf", svc.resolve_period("er2", 2024, 5))
    assert report.content.startswith(b"%PDF")
