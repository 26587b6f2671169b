import os

import pytest
from flask_jwt_extended import create_access_token

from govreports_api import create_app
from govreports_api.extensions import db


def _mk_app():
    os.environ["DATABASE_URL"] = "sqlite:///:memory:"
    app = create_app()
    app.config["TESTING"] = True
    return app


@pytest.fixture
def app():
    app = _mk_app()
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _headers(user_id=1, roles=("payroll",)):
        token = create_access_token(identity=str(user_id), additional_claims={"roles": list(roles)})
        return {"Authorization": f"Bearer {token}"}
    return _headers
