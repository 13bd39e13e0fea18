"""Audit trail writer and reader.

Synopsis:
Persist who-did-what records for state-changing operations and page through
them newest first.

Glossary:
- Audit entry: One AuditLog row (actor, action, resource, metadata, origin).
- Cursor: The id of the last entry of the previous page.
"""

import logging

from flask import has_request_context, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import AuditLog
from ..utils.http import client_ip
from ..utils.timezone_utils import TimezoneUtils

logger = logging.getLogger(__name__)


def _request_origin():
    if not has_request_context():
        return None, None
    user_agent = request.headers.get("User-Agent") or None
    return client_ip(), user_agent[:255] if user_agent else None


def _current_actor():
    if not has_request_context():
        return None, None
    if current_user and current_user.is_authenticated:
        return current_user.id, current_user.email
    return None, None


def record_audit(action, resource, resource_id=None, metadata=None):
    """Write an audit entry; call after the audited change has been committed.

    Failures are logged and swallowed so auditing never breaks the caller.
    """
    user_id, user_email = _current_actor()
    ip, user_agent = _request_origin()
    entry = AuditLog(
        user_id=user_id,
        user_email=user_email,
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=metadata or None,
        ip=ip,
        user_agent=user_agent,
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Failed to record audit %s %s:%s: %s", action, resource, resource_id, exc)
        return None
    return entry


def list_audit_logs(take=None, cursor=None, default_take=50, max_take=200):
    """Return (entries, next_cursor) ordered newest first."""
    try:
        take = int(take) if take is not None else default_take
    except (TypeError, ValueError):
        take = default_take
    take = max(1, min(take, max_take))

    query = AuditLog.query.order_by(AuditLog.id.desc())
    if cursor not in (None, ""):
        try:
            query = query.filter(AuditLog.id < int(cursor))
        except (TypeError, ValueError):
            pass

    rows = query.limit(take + 1).all()
    next_cursor = None
    if len(rows) > take:
        rows = rows[:take]
        next_cursor = rows[-1].id
    return rows, next_cursor


def serialize_audit_log(entry: AuditLog) -> dict:
    return {
        "id": entry.id,
        "userId": entry.user_id,
        "userEmail": entry.user_email,
        "action": entry.action,
        "resource": entry.resource,
        "resourceId": entry.resource_id,
        "metadata": entry.details,
        "ip": entry.ip,
        "userAgent": entry.user_agent,
        "createdAt": TimezoneUtils.format_datetime_for_api(entry.created_at),
    }
