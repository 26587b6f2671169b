from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from govreports_api.extensions import db
from govreports_api.models.security import UserRole


class User(db.Model):
    """Login account. Report staff hold report roles; employees reach their own 2316 through `employee`."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), default="active")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    grants = db.relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    roles = db.relationship("Role", secondary="user_roles", lazy="joined", viewonly=True)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def set_password(self, raw: str):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw: str) -> bool:
        return check_password_hash(self.password_hash, raw)

    def role_codes(self):
        return sorted(r.code for r in self.roles)

    def grant(self, role):
        if not any(g.role_id == role.id for g in self.grants):
            self.grants.append(UserRole(role_id=role.id))

    @property
    def employee(self):
        """Employee profile linked through Employee.user_id, if any."""
        from govreports_api.models.employee import Employee  # late import to avoid circulars
        return Employee.query.filter_by(user_id=self.id).first()
