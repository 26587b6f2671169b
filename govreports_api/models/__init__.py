# govreports_api/models/__init__.py
import importlib

# payroll is a package; its __init__ pulls in periods, entries, loans and certificates
MODEL_MODULES = ("user", "security", "master", "employee", "payroll")


def load_all():
    """Import the model modules so db.metadata is complete for create_all and Alembic."""
    for name in MODEL_MODULES:
        importlib.import_module(f"{__name__}.{name}")
