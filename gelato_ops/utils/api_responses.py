import logging
from functools import wraps
from typing import Any

from flask import jsonify
from sqlalchemy.exc import DBAPIError, OperationalError

from ..extensions import db
from ..services.errors import NotFoundError, ServiceError, ValidationError

logger = logging.getLogger(__name__)


def json_error(message: str, status_code: int = 400, **extra: Any):
    """Standard `{"error": message}` response body."""
    payload = {"error": message}
    payload.update(extra)
    return jsonify(payload), status_code


def api_route(func):
    """Decorator for API routes with consistent error handling"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            db.session.rollback()
            return json_error(e.message, 400)
        except NotFoundError as e:
            db.session.rollback()
            return json_error(e.message, 404)
        except ServiceError as e:
            db.session.rollback()
            return json_error(e.message, e.status_code)
        except (OperationalError, DBAPIError):
            # handled globally as 503
            raise
        except Exception:
            db.session.rollback()
            logger.exception("API error in %s", func.__name__)
            return json_error("Internal server error", 500)

    return wrapper


__all__ = ["json_error", "api_route"]
