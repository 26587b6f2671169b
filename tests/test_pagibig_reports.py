import io
from datetime import date

import pytest
from openpyxl import load_workbook

from factories import make_company, make_employee, make_entry, make_loan, make_period
from govreports_api.common.errors import InvalidArgumentError
from govreports_api.services.reports.context import CompanyProfile
from govreports_api.services.reports.service import PagibigReportService


def _svc(company):
    return PagibigReportService(CompanyProfile.from_company(company))


def test_mcrf_contributions(app):
    c = make_company()
    e = make_employee(c)
    make_entry(make_period(c, date(2024, 5, 1)), e, gross_pay=25000, pagibig_employee=100, pagibig_employer=100)
    make_entry(make_period(c, date(2024, 5, 16)), e, gross_pay=25000, pagibig_employee=100, pagibig_employer=100)

    svc = _svc(c)
    result = svc.preview("mcrf", svc.resolve_period("mcrf", 2024, 5))
    assert len(result["data"]) == 1
    assert result["data"][0]["pagibig_employee"] == 200.0
    assert result["data"][0]["pagibig_employer"] == 200.0
    assert result["totals"]["total_contribution"] == 400.0


def test_mcrf_excel_and_quarter_filename(app):
    c = make_company()
    e = make_employee(c)
    make_entry(make_period(c, date(2024, 5, 1)), e, pagibig_employee=200, pagibig_employer=200)

    svc = _svc(c)
    report = svc.generate("mcrf", "xlsx", svc.resolve_period("mcrf", 2024, quarter=2))
    assert report.filename == "pagibig_mcrf_2024-Q2.xlsx"
    ws = load_workbook(io.BytesIO(report.content)).active
    assert ws["A4"].value == "Pag-IBIG Employer No: 1234-5678-9012"
    assert ws["B6"].value == "Pag-IBIG MID No."
    assert ws["I7"].value == 400.0


def test_stl_covers_mpl_and_calamity_only(app):
    c = make_company()
    e = make_employee(c)
    make_loan(e, "pagibig_mpl", reference="MPL-1", payments=[(date(2024, 5, 15), 2000)])
    make_loan(e, "pagibig_calamity", reference="CAL-1", payments=[(date(2024, 5, 15), 1500)])
    make_loan(e, "pagibig_housing", reference="HDL-1", payments=[(date(2024, 5, 15), 5000)])

    svc = _svc(c)
    result = svc.preview("stl", svc.resolve_period("stl", 2024, 5))
    assert len(result["data"]) == 2
    assert {r["reference_number"] for r in result["data"]} == {"MPL-1", "CAL-1"}
    assert result["totals"] == {"employee_count": 1, "loan_count": 2, "total_payments": 3500.0}


def test_hdl_housing_loans(app):
    c = make_company()
    e = make_employee(c)
    make_loan(e, "pagibig_housing", reference="HDL-1", payments=[(date(2024, 5, 15), 5000)])
    make_loan(e, "pagibig_mpl", payments=[(date(2024, 5, 15), 2000)])

    svc = _svc(c)
    period = svc.resolve_period("hdl", 2024, 5)
    assert svc.summary("hdl", period)["total_payments"] == 5000.0

    report = svc.generate("hdl", "xlsx", period)
    assert report.filename == "pagibig_hdl_2024-05.xlsx"
    ws = load_workbook(io.BytesIO(report.content)).active
    assert ws["H7"].value == 5000.0
    assert ws["A8"].value == "TOTALS"
    assert ws["F8"].value == "1 loans"


def test_loans_need_pagibig_number(app):
    c = make_company()
    e = make_employee(c, pagibig_number=None)
    make_loan(e, "pagibig_housing", payments=[(date(2024, 5, 15), 5000)])

    svc = _svc(c)
    assert svc.preview("hdl", svc.resolve_period("hdl", 2024, 5))["data"] == []


def test_year_only_request_is_rejected(app):
    c = make_company()
    e = make_employee(c)
    for month in (1, 7, 11):
        make_entry(make_period(c, date(2024, month, 1)), e, pagibig_employee=200, pagibig_employer=200)

    svc = _svc(c)
    period = svc.resolve_period("mcrf", year=2024)
    with pytest.raises(InvalidArgumentError):
        svc.generate("mcrf", "xlsx", period)
    with pytest.raises(InvalidArgumentError):
        svc.preview("stl", svc.resolve_period("stl", year=2024))


def test_year_only_request_over_http(client, auth_headers):
    make_company()
    r = client.post("/api/v1/reports/pagibig/generate", headers=auth_headers(),
                    json={"report_type": "mcrf", "year": 2024, "format": "xlsx"})
    assert r.status_code == 422
    assert r.get_json()["error"]["code"] == "INVALID_ARGUMENT"
