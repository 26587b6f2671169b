from datetime import timedelta

from flask import Blueprint, current_app, request
from flask_jwt_extended import create_access_token, create_refresh_token, jwt_required

from govreports_api.common.auth import current_user
from govreports_api.common.http import fail, ok
from govreports_api.models.user import User

bp = Blueprint("auth_v1", __name__, url_prefix="/api/v1/auth")


def _user_payload(u: User):
    emp = u.employee
    return {
        "id": u.id,
        "email": u.email,
        "full_name": u.full_name,
        "roles": u.role_codes(),
        "employee_id": emp.id if emp else None,
    }


def _access_token(u: User, expires=None):
    claims = {"roles": u.role_codes(), "email": u.email, "name": u.full_name}
    return create_access_token(identity=str(u.id), additional_claims=claims, expires_delta=expires)


@bp.post("/login")
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    email = (data.get("email") or "").strip().lower()
    u = User.query.filter_by(email=email).first()
    if not u or not u.is_active or not u.check_password(data.get("password") or ""):
        current_app.logger.info("rejected login for %s", email or "<blank>")
        return fail("Invalid credentials", status=401)

    refresh = create_refresh_token(identity=str(u.id), additional_claims={"roles": u.role_codes()})
    return ok({
        "access": _access_token(u, expires=timedelta(days=1)),
        "refresh": refresh,
        "user": _user_payload(u),
    })


@bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    u = current_user()
    if not u or not u.is_active:
        return fail("User not found", status=401)
    return ok({"access": _access_token(u)})


@bp.get("/me")
@jwt_required()
def me():
    u = current_user()
    if not u:
        return fail("User not found", status=404)
    return ok(_user_payload(u))
