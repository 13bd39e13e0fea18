from flask import current_app, jsonify, request

from ...services.audit_service import list_audit_logs, serialize_audit_log
from ...utils.api_responses import api_route
from ...utils.permissions import any_permission_required
from . import api_bp


@api_bp.route('/audit-logs', methods=['GET'])
@any_permission_required('audit:read', roles=('admin',))
@api_route
def audit_logs():
    """Newest-first audit entries with cursor pagination."""
    entries, next_cursor = list_audit_logs(
        take=request.args.get('take'),
        cursor=request.args.get('cursor'),
        default_take=current_app.config.get('AUDIT_LOG_PAGE_SIZE', 50),
        max_take=current_app.config.get('AUDIT_LOG_MAX_PAGE_SIZE', 200),
    )
    return jsonify({'logs': [serialize_audit_log(entry) for entry in entries], 'nextCursor': next_cursor})
