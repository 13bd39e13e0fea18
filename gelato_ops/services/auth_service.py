import logging
from typing import Iterable

from ..extensions import db
from ..models import User
from ..utils.timezone_utils import TimezoneUtils

logger = logging.getLogger(__name__)


class AuthService:
    """Credential checks and role/permission membership tests."""

    @staticmethod
    def authenticate(email: str, password: str) -> User | None:
        if not email or not password:
            return None
        user = User.query.filter(db.func.lower(User.email) == email.strip().lower()).first()
        if not user or not user.is_active or not user.check_password(password):
            logger.info("Failed login attempt for %s", email)
            return None
        user.last_login = TimezoneUtils.utc_now()
        db.session.commit()
        return user

    @staticmethod
    def has_permission(user, permission_name: str) -> bool:
        return permission_name in user.permission_names()

    @staticmethod
    def has_any_permission(user, permission_names: Iterable[str]) -> bool:
        granted = user.permission_names()
        return any(name in granted for name in permission_names)

    @staticmethod
    def has_role(user, role_name: str) -> bool:
        return role_name in user.role_names()

    @staticmethod
    def create_user(email, password, first_name, last_name, roles=()) -> User:
        user = User(
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            is_active=True,
        )
        user.set_password(password)
        for role in roles:
            user.assign_role(role)
        db.session.add(user)
        db.session.flush()
        return user

    @staticmethod
    def serialize_user(user: User) -> dict:
        return {
            "id": user.id,
            "email": user.email,
            "firstName": user.first_name,
            "lastName": user.last_name,
            "roles": user.role_names(),
            "permissions": sorted(user.permission_names()),
        }
