from datetime import date
from decimal import Decimal

import pytest

from govreports_api.common.errors import InvalidArgumentError
from govreports_api.services.reports import columns
from govreports_api.services.reports.enums import BirReportType, LoanType, SssReportType
from govreports_api.services.reports.periods import ReportPeriod, parse_date, year_options
from govreports_api.services.reports.serializers import pad, pad_amount


def test_column_letter():
    assert columns.column_letter(0) == "A"
    assert columns.column_letter(25) == "Z"
    assert columns.column_letter(26) == "AA"
    assert columns.column_letter(33) == "AH"
    with pytest.raises(ValueError):
        columns.column_letter(-1)


def test_money_helpers():
    assert columns.money_str(1234.5) == "1234.50"
    assert columns.money_str(None) == "0.00"
    assert columns.money("0.005") == Decimal("0.01")
    assert columns.cents("3375.50") == 337550
    assert columns.to_decimal("abc") == Decimal("0.00")


def test_format_tin():
    assert columns.format_tin("123456789") == "123-456-789"
    assert columns.format_tin("123-456-789-000") == "123-456-789-000"
    assert columns.format_tin("12") == "12"


def test_names_and_text():
    assert columns.clean_name("  de la  Cruz-Ñ ") == "DE LA CRUZ"
    assert columns.dat_text("a|b\r\nc") == "A B C"
    assert columns.format_gender("Female") == "F"
    assert columns.format_gender("x") == ""
    assert columns.format_address({"street": "1 Rizal St", "city": "Manila", "postal_code": "1000"}) == \
        "1 Rizal St, Manila, 1000"


def test_pad_truncates_and_fills():
    assert pad("ABC", 5) == "ABC  "
    assert pad("ABCDEFG", 5) == "ABCDE"
    assert pad(42, 5, "0", "right") == "00042"


def test_pad_amount_fills_and_rejects_overflow():
    assert pad_amount(0, 10) == "0000000000"
    assert pad_amount(337550, 10) == "0000337550"
    assert pad_amount(9999999999, 10) == "9999999999"
    with pytest.raises(InvalidArgumentError):
        pad_amount(12000000000, 10)


def test_period_windows_and_slugs():
    assert ReportPeriod(2024, month=2).window() == (date(2024, 2, 1), date(2024, 2, 29))
    assert ReportPeriod(2024, quarter=2).window() == (date(2024, 4, 1), date(2024, 6, 30))
    assert ReportPeriod(2024).window() == (date(2024, 1, 1), date(2024, 12, 31))
    assert ReportPeriod(2024, month=5, quarter=1).slug() == "2024-05"
    assert ReportPeriod(2024, quarter=2).slug() == "2024-Q2"
    assert ReportPeriod(2024).slug() == "2024"
    assert ReportPeriod(2024, month=5).label() == "May 2024"


def test_period_validation():
    with pytest.raises(InvalidArgumentError):
        ReportPeriod(2024, month=13)
    with pytest.raises(InvalidArgumentError):
        ReportPeriod(2024, quarter=5)
    with pytest.raises(InvalidArgumentError):
        ReportPeriod(2024, start_date=date(2024, 5, 2), end_date=date(2024, 5, 1))
    with pytest.raises(InvalidArgumentError):
        parse_date("05/01/2024", "start_date")


def test_year_options_start_at_current_year():
    assert year_options(date(2026, 3, 1)) == [2026, 2025, 2024, 2023, 2022, 2021]


def test_report_type_metadata():
    assert BirReportType.parse("1601C") is BirReportType.FORM_1601C
    assert BirReportType.parse("nope") is None
    assert BirReportType.FORM_1601C.is_monthly_report
    assert not BirReportType.FORM_1601C.supports_dat_export
    assert SssReportType.R5.is_quarterly_report
    option = BirReportType.ALPHALIST.to_option()
    assert option["value"] == "alphalist"
    assert option["periodType"] == "annual"


def test_sss_loan_types():
    values = LoanType.sss_loan_type_values()
    assert "sss_salary" in values
    assert "pagibig_mpl" not in values
    assert LoanType.label_for("unknown") == "unknown"
