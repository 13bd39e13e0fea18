"""Production planning API routes.

Synopsis:
Serve the rolling production plan derived from delivery commitments and
manage factory production tasks.

Glossary:
- Production plan: Per-flavor demand for the next N days plus an inventory snapshot.
- Production task: A scheduled unit of factory work for one item.
"""

import logging

from flask import current_app, jsonify, request
from flask_login import current_user

from ...services import production_task_service
from ...services.audit_service import record_audit
from ...services.errors import ValidationError
from ...services.payloads import serialize_production_task
from ...services.production_requirements import clamp_days, compute_production_plan, resolve_window
from ...utils.api_responses import api_route
from ...utils.http import json_body
from ...utils.permissions import any_permission_required, require_permission
from ...utils.timezone_utils import TimezoneUtils
from . import api_bp

logger = logging.getLogger(__name__)


# =========================================================
# PRODUCTION PLAN
# =========================================================
# --- Production plan ---
# Purpose: Tell the factory what to produce for upcoming deliveries.
# Inputs: days query parameter (clamped to [1, PRODUCTION_PLAN_MAX_DAYS]).
# Outputs: {productionPlan, inventory, dateRange, summary}.
@api_bp.route('/production-plan', methods=['GET'])
@require_permission('production:read')
@api_route
def production_plan():
    days = clamp_days(
        request.args.get('days'),
        default=current_app.config.get('PRODUCTION_PLAN_DEFAULT_DAYS', 7),
        maximum=current_app.config.get('PRODUCTION_PLAN_MAX_DAYS', 60),
    )
    window_start, window_end = resolve_window(days)
    plan = compute_production_plan(window_start, window_end)
    return jsonify(plan.to_dict())


# =========================================================
# PRODUCTION TASKS
# =========================================================
@api_bp.route('/production-tasks', methods=['GET'])
@require_permission('production:read')
@api_route
def list_production_tasks():
    start = TimezoneUtils.parse_api_date(request.args.get('start'))
    end = TimezoneUtils.parse_api_date(request.args.get('end'))
    if request.args.get('start') and start is None:
        raise ValidationError("start must be a date (YYYY-MM-DD)")
    if request.args.get('end') and end is None:
        raise ValidationError("end must be a date (YYYY-MM-DD)")
    tasks = production_task_service.list_tasks(start=start, end=end)
    return jsonify({'tasks': [serialize_production_task(task) for task in tasks]})


@api_bp.route('/production-tasks', methods=['POST'])
@require_permission('production:create')
@api_route
def create_production_task():
    task = production_task_service.create_task(json_body(), actor=current_user)
    record_audit('create', 'production', task.id, {'itemId': task.item_id, 'quantity': task.quantity})
    return jsonify({'task': serialize_production_task(task)}), 201


# --- Update task ---
# Purpose: Start, complete or cancel a task and edit its assignment/notes.
# Inputs: JSON {start?, complete?, cancel?, status?, totalWeightKg?,
#         assignedToUserId?, notes?, packagingOptionId?}.
# Outputs: {task}, or 400 when a tray task is completed without a weight.
@api_bp.route('/production-tasks/<int:task_id>', methods=['PATCH'])
@any_permission_required('production:update', 'production:create')
@api_route
def update_production_task(task_id):
    body = json_body()
    task = production_task_service.apply_update(task_id, body, current_user)
    record_audit(
        'update',
        'production',
        task.id,
        {key: body[key] for key in ('start', 'complete', 'cancel', 'status', 'totalWeightKg') if key in body},
    )
    return jsonify({'task': serialize_production_task(task)})
