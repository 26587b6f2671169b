from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from govreports_api.common.auth import current_user, current_user_id, requires_roles
from govreports_api.common.errors import InvalidArgumentError
from govreports_api.common.http import fail, ok, send_report
from govreports_api.models.security import REPORT_ROLES
from govreports_api.services.reports.context import CompanyProfile
from govreports_api.services.reports.service import SERVICES, BirReportService

bp = Blueprint("compliance_reports", __name__, url_prefix="/api/v1/reports")


# ---------- helpers ----------
def _profile() -> CompanyProfile:
    return CompanyProfile.load(current_app.config.get("REPORTS_COMPANY_ID"))


def _service(agency: str):
    cls = SERVICES.get((agency or "").lower())
    if cls is None:
        return None
    if cls is BirReportService:
        return cls(_profile(), current_app.config.get("BIR_2316_TEMPLATE_PATH"))
    return cls(_profile())


def _bir() -> BirReportService:
    return _service("bir")


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _department_ids(data: dict):
    raw = data.get("department_ids")
    if raw in (None, "", []):
        return None
    if not isinstance(raw, list):
        raw = [raw]
    try:
        return [int(x) for x in raw]
    except (TypeError, ValueError):
        raise InvalidArgumentError("department_ids must be a list of integers", payload={"department_ids": raw})


def _period(svc, data: dict):
    return svc.resolve_period(
        data.get("report_type"),
        year=data.get("year"),
        month=data.get("month"),
        quarter=data.get("quarter"),
        start_date=data.get("start_date"),
        end_date=data.get("end_date"),
    )


def _tax_year(value) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError("Invalid tax year", payload={"year": value})
    if not 1900 <= year <= 9999:
        raise InvalidArgumentError("Invalid tax year", payload={"year": value})
    return year


def _preview_limit(data: dict) -> int:
    default = current_app.config.get("REPORT_PREVIEW_LIMIT", 50)
    raw = data.get("limit")
    if raw in (None, ""):
        return default
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise InvalidArgumentError("limit must be an integer", payload={"limit": raw})
    return max(1, min(limit, 500))


def _unknown_agency(agency):
    return fail(f"Unknown agency: {agency}", status=404, detail={"allowed": sorted(SERVICES)})


# ---------- report catalogue ----------
@bp.get("/<agency>/types")
@requires_roles(*REPORT_ROLES)
def report_types(agency):
    svc = _service(agency)
    if svc is None:
        return _unknown_agency(agency)
    return ok(svc.report_type_options())


@bp.get("/<agency>/periods")
@requires_roles(*REPORT_ROLES)
def report_periods(agency):
    svc = _service(agency)
    if svc is None:
        return _unknown_agency(agency)
    return ok(svc.available_periods())


# ---------- preview / summary / generate ----------
@bp.post("/<agency>/preview")
@requires_roles(*REPORT_ROLES)
def preview(agency):
    svc = _service(agency)
    if svc is None:
        return _unknown_agency(agency)
    data = _payload()
    result = svc.preview(
        data.get("report_type"),
        _period(svc, data),
        _department_ids(data),
        limit=_preview_limit(data),
        schedule=data.get("schedule"),
    )
    return ok(result)


@bp.post("/<agency>/summary")
@requires_roles(*REPORT_ROLES)
def summary(agency):
    svc = _service(agency)
    if svc is None:
        return _unknown_agency(agency)
    data = _payload()
    totals = svc.summary(data.get("report_type"), _period(svc, data), _department_ids(data), data.get("schedule"))
    return ok(totals)


@bp.post("/<agency>/generate")
@requires_roles(*REPORT_ROLES)
def generate(agency):
    svc = _service(agency)
    if svc is None:
        return _unknown_agency(agency)
    data = _payload()
    report = svc.generate(
        data.get("report_type"),
        data.get("format") or "xlsx",
        _period(svc, data),
        _department_ids(data),
        schedule=data.get("schedule"),
    )
    current_app.logger.info("report %s downloaded by user %s", report.filename, current_user_id())
    return send_report(report)


# ---------- BIR 2316 ----------
@bp.get("/bir/2316/template-status")
@requires_roles(*REPORT_ROLES)
def template_status():
    return ok(_bir().template_status())


@bp.post("/bir/2316/bulk")
@requires_roles(*REPORT_ROLES)
def bulk_2316():
    data = _payload()
    year = _tax_year(data.get("year"))
    result = _bir().generate_bulk_2316(year, _department_ids(data), user_id=current_user_id())
    current_app.logger.info("bulk 2316 for %s: %s certificates", year, result["generated_count"])
    return ok({
        "generated_count": result["generated_count"],
        "certificates": [c.to_dict() for c in result["certificates"]],
    })


@bp.get("/bir/2316/employees/<int:employee_id>/certificates")
@requires_roles(*REPORT_ROLES)
def employee_certificates(employee_id):
    certs = _bir().get_employee_2316_certificates(employee_id)
    return ok([c.to_dict() for c in certs])


@bp.get("/bir/2316/employees/<int:employee_id>/pdf")
@requires_roles(*REPORT_ROLES)
def employee_certificate_pdf(employee_id):
    year = _tax_year(request.args.get("year"))
    return send_report(_bir().generate_2316_for_employee(employee_id, year))


@bp.get("/bir/2316/employees/<int:employee_id>/template")
@requires_roles(*REPORT_ROLES)
def employee_certificate_template(employee_id):
    year = _tax_year(request.args.get("year"))
    fmt = (request.args.get("format") or "xlsx").lower()
    return send_report(_bir().generate_2316_template(employee_id, year, fmt))


# ---------- self-service ----------
def _my_employee():
    user = current_user()
    return user.employee if user else None


@bp.get("/bir/2316/my-certificates")
@jwt_required()
def my_certificates():
    emp = _my_employee()
    if emp is None:
        return fail("No employee profile linked to this account", status=404)
    certs = _bir().get_employee_2316_certificates(emp.id)
    return ok([c.to_dict() for c in certs])


@bp.get("/bir/2316/my-certificates/<year>/pdf")
@jwt_required()
def my_certificate_pdf(year):
    emp = _my_employee()
    if emp is None:
        return fail("No employee profile linked to this account", status=404)
    return send_report(_bir().generate_2316_for_employee(emp.id, _tax_year(year)))
