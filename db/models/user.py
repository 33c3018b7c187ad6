# db/models/user.py
import enum
from configs import db
from flask_login import UserMixin


class UserRole(enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"  # Sales / production manager
    STAFF = "STAFF"  # Sales executive, floor staff


MANAGER_ROLES = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN, UserRole.MANAGER})


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120))
    email = db.Column(db.String(255))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.STAFF, nullable=False)

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        """True when the user holds one of the given roles."""
        return self.role in roles

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
            "role": self.role.value if self.role else None,
        }
