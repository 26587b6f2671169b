# govreports_api/models/security.py
from govreports_api.extensions import db

# roles that may preview and download government reports; "admin" passes every check
REPORT_ROLES = ("admin", "hr", "payroll")
EMPLOYEE_ROLE = "employee"


class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)

    grants = db.relationship(
        "UserRole",
        back_populates="role",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @classmethod
    def ensure(cls, code: str) -> "Role":
        role = cls.query.filter_by(code=code).first()
        if role is None:
            role = cls(code=code)
            db.session.add(role)
            db.session.flush()
        return role

    def __repr__(self) -> str:
        return f"<Role {self.code!r}>"


class UserRole(db.Model):
    """One row per role granted to a user."""

    __tablename__ = "user_roles"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)

    role = db.relationship("Role", back_populates="grants")
    user = db.relationship("User", back_populates="grants")
