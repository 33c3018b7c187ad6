# utils/auth.py
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import abort
from flask_login import current_user

from db.models.user import MANAGER_ROLES


def is_manager_or_above(user) -> bool:
    """Single capability check shared by every lead/B2B access rule."""
    role = getattr(user, "role", None)
    return role in MANAGER_ROLES


@dataclass(frozen=True)
class Actor:
    """Who is acting, as seen by the DAOs."""

    id: int
    is_manager: bool = False

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=int(user.id), is_manager=is_manager_or_above(user))


def current_actor() -> Optional[Actor]:
    if not current_user.is_authenticated:
        return None
    return Actor.from_user(current_user)


def roles_required(*roles):
    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                abort(401)
            if not current_user.has_role(*roles):
                abort(403)
            return fn(*a, **kw)

        return inner

    return deco
