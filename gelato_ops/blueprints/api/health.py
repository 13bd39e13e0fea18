import logging

from flask import jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ...extensions import db
from . import api_bp

logger = logging.getLogger(__name__)


@api_bp.route('/health', methods=['GET'])
def health_check():
    """Liveness plus a database round trip; no session required."""
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Health check database probe failed: %s", exc)
        return jsonify({'status': 'unavailable', 'database': 'unreachable'}), 503
    return jsonify({'status': 'ok', 'database': 'ok'})
