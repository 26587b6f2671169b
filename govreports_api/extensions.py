# govreports_api/extensions.py
import os

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()

# pool health for long-lived servers; sqlite (tests, local runs) keeps the defaults
SERVER_ENGINE_OPTIONS = {
    "pool_pre_ping": True,
    "pool_recycle": 270,
    "pool_size": 5,
    "max_overflow": 2,
    "pool_timeout": 30,
}

_DRIVER_PREFIXES = ("postgres://", "postgresql://")


def normalize_db_url(url: str) -> str:
    """Hosted Postgres URLs → the psycopg (v3) SQLAlchemy driver."""
    for prefix in _DRIVER_PREFIXES:
        if url and url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


def init_db(app):
    # the environment wins over inline defaults and config objects
    url = os.getenv("DATABASE_URL") or app.config.get("SQLALCHEMY_DATABASE_URI") or ""
    url = normalize_db_url(url)
    app.config["SQLALCHEMY_DATABASE_URI"] = url
    if not url.startswith("sqlite"):
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", dict(SERVER_ENGINE_OPTIONS))
    db.init_app(app)
