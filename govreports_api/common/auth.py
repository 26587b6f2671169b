from __future__ import annotations

from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from govreports_api.common.http import fail
from govreports_api.extensions import db
from govreports_api.models.user import User


def current_user_id() -> int | None:
    uid = get_jwt_identity()
    try:
        return int(uid) if uid is not None else None
    except (TypeError, ValueError):
        return None


def current_user() -> User | None:
    uid = current_user_id()
    return db.session.get(User, uid) if uid is not None else None


def _roles() -> set[str]:
    """Role codes from the token claims, else from the database."""
    claimed = (get_jwt() or {}).get("roles")
    if claimed:
        return set(claimed)
    user = current_user()
    return set(user.role_codes()) if user else set()


def requires_roles(*codes: str):
    """
    JWT plus at least one of `codes`. "admin" always passes;
    no codes means any authenticated user.
    """
    def outer(fn):
        @wraps(fn)
        @jwt_required()
        def inner(*args, **kwargs):
            if current_user_id() is None:
                return fail("Unauthorized", status=401)
            roles = _roles()
            if codes and "admin" not in roles and roles.isdisjoint(codes):
                return fail("Forbidden", status=403)
            return fn(*args, **kwargs)
        return inner
    return outer
