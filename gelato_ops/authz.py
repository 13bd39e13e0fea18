from __future__ import annotations

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db, login_manager


def configure_login_manager(app):
    """Attach Flask-Login handlers with JSON responses for the API."""
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({"error": "Authentication required"}), 401

    @login_manager.user_loader
    def load_user(user_id: str):
        from .models import User

        try:
            user = db.session.get(User, int(user_id))
        except (ValueError, TypeError):
            return None
        except SQLAlchemyError:
            db.session.rollback()
            return None

        if not user or not user.is_active:
            return None
        return user
