from datetime import date

from factories import make_company, make_employee, make_entry, make_period, make_user
from govreports_api.extensions import db

BASE = "/api/v1/reports"


def _may_payroll():
    c = make_company()
    e = make_employee(c, first="Juan", last="Dela Cruz")
    make_entry(make_period(c, date(2024, 5, 1)), e, gross_pay=25000, withholding_tax=1500,
               sss_employee=900, sss_employer=1800, philhealth_employee=500, philhealth_employer=500,
               pagibig_employee=200, pagibig_employer=200)
    return c, e


def test_requires_token(client):
    r = client.get(f"{BASE}/bir/types")
    assert r.status_code == 401


def test_requires_report_role(client, auth_headers):
    r = client.get(f"{BASE}/bir/types", headers=auth_headers(roles=["employee"]))
    assert r.status_code == 403


def test_report_types(client, auth_headers):
    r = client.get(f"{BASE}/sss/types", headers=auth_headers())
    assert r.status_code == 200
    values = [t["value"] for t in r.get_json()["data"]]
    assert values == ["r3", "r5", "sbr", "ecl"]


def test_unknown_agency(client, auth_headers):
    r = client.get(f"{BASE}/gsis/types", headers=auth_headers())
    assert r.status_code == 404
    assert r.get_json()["success"] is False


def test_periods(client, auth_headers):
    bir = client.get(f"{BASE}/bir/periods", headers=auth_headers()).get_json()["data"]
    sss = client.get(f"{BASE}/sss/periods", headers=auth_headers()).get_json()["data"]
    assert set(bir) == {"years", "months"}
    assert set(sss) == {"years", "months", "quarters"}
    assert date.today().year in bir["years"]


def test_preview(client, auth_headers):
    _may_payroll()
    r = client.post(f"{BASE}/bir/preview", headers=auth_headers(),
                    json={"report_type": "1601c", "year": 2024, "month": 5})
    assert r.status_code == 200
    data = r.get_json()["data"]
    assert set(data) == {"data", "totals", "preview_limit"}
    assert data["preview_limit"] == 50
    assert data["data"][0]["taxable_compensation"] == 23400.0


def test_preview_limit_keeps_full_totals(client, auth_headers):
    c = make_company()
    p = make_period(c, date(2024, 5, 1))
    for last in ("A", "B", "C"):
        make_entry(p, make_employee(c, last=last), pagibig_employee=100, pagibig_employer=100)
    r = client.post(f"{BASE}/pagibig/preview", headers=auth_headers(),
                    json={"report_type": "mcrf", "year": 2024, "month": 5, "limit": 2})
    data = r.get_json()["data"]
    assert len(data["data"]) == 2
    assert data["totals"]["employee_count"] == 3


def test_summary(client, auth_headers):
    _may_payroll()
    r = client.post(f"{BASE}/sss/summary", headers=auth_headers(),
                    json={"report_type": "r3", "year": 2024, "month": 5})
    assert r.get_json()["data"]["sss_employer"] == 1800.0


def test_invalid_report_type(client, auth_headers):
    r = client.post(f"{BASE}/bir/preview", headers=auth_headers(), json={"report_type": "9999", "year": 2024})
    assert r.status_code == 422
    assert r.get_json()["error"]["code"] == "INVALID_ARGUMENT"


def test_missing_month(client, auth_headers):
    r = client.post(f"{BASE}/philhealth/preview", headers=auth_headers(), json={"report_type": "rf1", "year": 2024})
    assert r.status_code == 422


def test_generate_download(client, auth_headers):
    _may_payroll()
    r = client.post(f"{BASE}/bir/generate", headers=auth_headers(),
                    json={"report_type": "1601c", "year": 2024, "month": 5, "format": "xlsx"})
    assert r.status_code == 200
    assert "bir_1601c_2024-05.xlsx" in r.headers["Content-Disposition"]
    assert r.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def test_generate_unsupported_format(client, auth_headers):
    r = client.post(f"{BASE}/bir/generate", headers=auth_headers(),
                    json={"report_type": "1601c", "year": 2024, "month": 5, "format": "dat"})
    assert r.status_code == 400
    assert r.get_json()["error"]["code"] == "UNSUPPORTED_EXPORT"


def test_template_status_and_missing_template(app, client, auth_headers, tmp_path):
    app.config["BIR_2316_TEMPLATE_PATH"] = str(tmp_path / "missing.xlsx")
    r = client.get(f"{BASE}/bir/2316/template-status", headers=auth_headers())
    assert r.get_json()["data"]["available"] is False

    r = client.post(f"{BASE}/bir/generate", headers=auth_headers(),
                    json={"report_type": "2316", "year": 2024, "format": "xlsx-template"})
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "TEMPLATE_NOT_FOUND"


def test_bulk_2316_and_certificate_listing(client, auth_headers):
    _, e = _may_payroll()
    r = client.post(f"{BASE}/bir/2316/bulk", headers=auth_headers(), json={"year": 2024})
    assert r.status_code == 200
    assert r.get_json()["data"]["generated_count"] == 1

    r = client.get(f"{BASE}/bir/2316/employees/{e.id}/certificates", headers=auth_headers())
    certs = r.get_json()["data"]
    assert [c["tax_year"] for c in certs] == [2024]


def test_bulk_2316_invalid_year(client, auth_headers):
    r = client.post(f"{BASE}/bir/2316/bulk", headers=auth_headers(), json={"year": "twenty"})
    assert r.status_code == 422


def test_employee_pdf(client, auth_headers):
    _, e = _may_payroll()
    r = client.get(f"{BASE}/bir/2316/employees/{e.id}/pdf?year=2024", headers=auth_headers())
    assert r.status_code == 200
    assert r.mimetype == "application/pdf"

    r = client.get(f"{BASE}/bir/2316/employees/{e.id}/pdf?year=2023", headers=auth_headers())
    assert r.status_code == 404


def test_self_service_without_employee_profile(client, auth_headers):
    u = make_user()
    r = client.get(f"{BASE}/bir/2316/my-certificates", headers=auth_headers(u.id, roles=["employee"]))
    assert r.status_code == 404


def test_self_service_pdf(client, auth_headers):
    _, e = _may_payroll()
    u = make_user(email="juan@test.local")
    e.user_id = u.id
    db.session.commit()

    headers = auth_headers(u.id, roles=["employee"])
    assert client.get(f"{BASE}/bir/2316/my-certificates", headers=headers).get_json()["data"] == []
    r = client.get(f"{BASE}/bir/2316/my-certificates/2024/pdf", headers=headers)
    assert r.status_code == 200
    assert r.data.startswith(b"%PDF")


def test_login_and_me(client):
    make_user(email="payroll@test.local", password="secret")
    r = client.post("/api/v1/auth/login", json={"email": "Payroll@Test.local", "password": "secret"})
    assert r.status_code == 200
    body = r.get_json()["data"]
    assert body["user"]["email"] == "payroll@test.local"

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access']}"})
    assert me.get_json()["data"]["employee_id"] is None

    refreshed = client.post("/api/v1/auth/refresh", headers={"Authorization": f"Bearer {body['refresh']}"})
    assert refreshed.status_code == 200
    assert refreshed.get_json()["data"]["access"]


def test_login_rejects_inactive_user(client):
    make_user(email="old@test.local", password="secret", status="inactive")
    r = client.post("/api/v1/auth/login", json={"email": "old@test.local", "password": "secret"})
    assert r.status_code == 401
