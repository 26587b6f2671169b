import logging
from datetime import date
from decimal import Decimal

from factories import make_company, make_department, make_employee, make_entry, make_period
from govreports_api.services.reports.aggregation import AggregationEngine, EmployeeAggregate

MAY = (date(2024, 5, 1), date(2024, 5, 31))


def test_taxable_compensation_subtracts_contributions(app):
    c = make_company()
    e = make_employee(c)
    p = make_period(c, date(2024, 5, 1), date(2024, 5, 15))
    make_entry(p, e, gross_pay=25000, withholding_tax=1500,
               sss_employee=900, philhealth_employee=500, pagibig_employee=200)

    rows = AggregationEngine(c.id).employee_totals(MAY)
    assert len(rows) == 1
    row = rows[0]
    assert row.total_contributions == Decimal("1600.00")
    assert row.taxable_compensation == Decimal("23400.00")
    assert row.withholding_tax == Decimal("1500.00")


def test_entries_in_window_are_summed_per_employee(app):
    c = make_company()
    e = make_employee(c)
    first = make_period(c, date(2024, 5, 1), date(2024, 5, 15))
    second = make_period(c, date(2024, 5, 16), date(2024, 5, 31))
    make_entry(first, e, status="approved", gross_pay=20000, withholding_tax=500)
    make_entry(second, e, status="approved", gross_pay=22000, withholding_tax=600)

    rows = AggregationEngine(c.id).employee_totals(MAY)
    assert len(rows) == 1
    assert rows[0].gross_pay == Decimal("42000.00")
    assert rows[0].withholding_tax == Decimal("1100.00")
    assert rows[0].entry_count == 2
    assert rows[0].first_cutoff == date(2024, 5, 1)
    assert rows[0].last_cutoff == date(2024, 5, 16)


def test_draft_and_voided_entries_are_ignored(app):
    c = make_company()
    e = make_employee(c)
    p1 = make_period(c, date(2024, 5, 1))
    p2 = make_period(c, date(2024, 5, 10))
    p3 = make_period(c, date(2024, 5, 20))
    make_entry(p1, e, status="draft", gross_pay=1000)
    make_entry(p2, e, status="voided", gross_pay=2000)
    make_entry(p3, e, status="paid", gross_pay=3000)

    rows = AggregationEngine(c.id).employee_totals(MAY)
    assert [r.gross_pay for r in rows] == [Decimal("3000.00")]


def test_window_matches_on_cutoff_start(app):
    c = make_company()
    e = make_employee(c)
    # starts in April, pays in May: belongs to April
    april = make_period(c, date(2024, 4, 30), date(2024, 5, 14))
    make_entry(april, e, gross_pay=1000)

    assert AggregationEngine(c.id).employee_totals(MAY) == []
    april_rows = AggregationEngine(c.id).employee_totals((date(2024, 4, 1), date(2024, 4, 30)))
    assert len(april_rows) == 1


def test_rows_sorted_by_last_then_first_name(app):
    c = make_company()
    p = make_period(c, date(2024, 5, 1))
    for first, last in (("Maria", "Santos"), ("Ana", "Bautista"), ("Jose", "Bautista")):
        make_entry(p, make_employee(c, first=first, last=last))

    rows = AggregationEngine(c.id).employee_totals(MAY)
    assert [(r.last_name, r.first_name) for r in rows] == [
        ("Bautista", "Ana"), ("Bautista", "Jose"), ("Santos", "Maria"),
    ]


def test_missing_statutory_id_excludes_employee(app):
    c = make_company()
    p = make_period(c, date(2024, 5, 1))
    make_entry(p, make_employee(c, last="Garcia", tin=""))
    make_entry(p, make_employee(c, last="Reyes", tin=None))
    make_entry(p, make_employee(c, last="Lim"))

    rows = AggregationEngine(c.id).employee_totals(MAY, id_field="tin")
    assert [r.last_name for r in rows] == ["Lim"]


def test_department_filter(app):
    c = make_company()
    ops = make_department(c, "Operations")
    fin = make_department(c, "Finance")
    p = make_period(c, date(2024, 5, 1))
    make_entry(p, make_employee(c, last="Ops", department_id=ops.id))
    make_entry(p, make_employee(c, last="Fin", department_id=fin.id))

    rows = AggregationEngine(c.id).employee_totals(MAY, department_ids=[fin.id])
    assert [r.last_name for r in rows] == ["Fin"]
    assert rows[0].department == "Finance"


def test_thirteenth_month_exemption_is_capped():
    agg = EmployeeAggregate(
        employee_id=1,
        gross_pay=Decimal("400000.00"),
        thirteenth_month_pay=Decimal("100000.00"),
        de_minimis=Decimal("5000.00"),
    )
    assert agg.non_taxable_13th_month == Decimal("90000.00")
    assert agg.non_taxable_compensation == Decimal("95000.00")
    assert agg.taxable_compensation == Decimal("305000.00")


def test_negative_taxable_is_floored_and_logged(caplog):
    agg = EmployeeAggregate(
        employee_id=7,
        gross_pay=Decimal("1000.00"),
        de_minimis=Decimal("1500.00"),
    )
    with caplog.at_level(logging.WARNING, logger="govreports_api.services.reports.aggregation"):
        assert agg.taxable_compensation == Decimal("0.00")
    assert "employee 7" in caplog.text


def test_to_dict_is_json_ready(app):
    c = make_company()
    e = make_employee(c)
    p = make_period(c, date(2024, 5, 1))
    make_entry(p, e, gross_pay=25000)

    data = AggregationEngine(c.id).employee_totals(MAY)[0].to_dict()
    assert data["gross_pay"] == 25000.0
    assert data["taxable_compensation"] == 25000.0
    assert data["date_of_birth"] == "1990-01-15"
