import logging
from functools import wraps

from flask import jsonify
from flask_login import current_user

from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)


def require_permission(permission_name: str):
    """
    Decorator to require a specific permission string.
    Single source of truth for route-level permission checks.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({"error": "Authentication required"}), 401

            if has_permission(current_user, permission_name):
                return f(*args, **kwargs)

            logger.info("Permission %s denied for user %s", permission_name, current_user.get_id())
            return jsonify({"error": f"Permission denied: {permission_name}"}), 403

        return decorated_function
    return decorator


def any_permission_required(*permission_names, roles=()):
    """Decorator that requires any one of the permissions (or any of the roles)."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return jsonify({"error": "Authentication required"}), 401

            if any(AuthService.has_role(current_user, role) for role in roles):
                return f(*args, **kwargs)
            if AuthService.has_any_permission(current_user, permission_names):
                return f(*args, **kwargs)

            return jsonify({
                "error": f"Permission denied: {' or '.join(permission_names)}",
            }), 403

        return decorated_function
    return decorator


def has_permission(user, permission_name: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return AuthService.has_permission(user, permission_name)
