"""Delivery plan API routes.

Synopsis:
List, create, transition and delete delivery plans; capture weights on
delivery lines; list packaging options per destination audience.

Glossary:
- Transition: A status change DRAFT/CONFIRMED/SENT on one plan.
- Weight capture: Recording the dispatched kg on a variable-weight line.
"""

import logging

from flask import current_app, jsonify, request

from ...services import delivery_plan_service
from ...services.audit_service import record_audit
from ...services.errors import ValidationError
from ...services.payloads import (
    serialize_delivery_item,
    serialize_delivery_plan,
    serialize_packaging_option,
)
from ...utils.api_responses import api_route
from ...utils.http import json_body
from ...utils.permissions import require_permission
from ...utils.timezone_utils import TimezoneUtils
from . import api_bp

logger = logging.getLogger(__name__)


def _query_date(name):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    parsed = TimezoneUtils.parse_api_date(raw)
    if parsed is None:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD)")
    return parsed


# =========================================================
# DELIVERY PLANS
# =========================================================
# --- List plans ---
# Purpose: Delivery plans for the planning calendar.
# Inputs: status, date, from, to, storeId query parameters.
# Outputs: JSON list ordered by date.
@api_bp.route('/delivery-plans', methods=['GET'])
@require_permission('deliveries:read')
@api_route
def list_delivery_plans():
    store_id = request.args.get('storeId', type=int)
    plans = delivery_plan_service.list_delivery_plans(
        status=request.args.get('status') or None,
        day=_query_date('date'),
        start=_query_date('from'),
        end=_query_date('to'),
        store_id=store_id,
        limit=current_app.config.get('DELIVERY_PLAN_LIST_LIMIT', 1000),
    )
    return jsonify([serialize_delivery_plan(plan) for plan in plans])


# --- Create plans ---
# Purpose: One plan per destination for a single delivery date.
# Inputs: JSON {date, status?, notes?, destinations[]}.
# Outputs: 201 with the created plans.
@api_bp.route('/delivery-plans', methods=['POST'])
@require_permission('deliveries:create')
@api_route
def create_delivery_plans():
    plans = delivery_plan_service.create_delivery_plans(json_body())
    for plan in plans:
        record_audit('create', 'deliveries', plan.id, {'status': plan.status, 'lines': len(plan.items)})
    return jsonify({
        'success': True,
        'message': f"Created {len(plans)} delivery plan(s)",
        'plans': [serialize_delivery_plan(plan) for plan in plans],
    }), 201


# --- Transition plan ---
# Purpose: Move a plan between DRAFT, CONFIRMED and SENT.
# Inputs: JSON {status}.
# Outputs: Full plan JSON, or 400 naming lines that still need a weight.
@api_bp.route('/delivery-plans/<int:plan_id>', methods=['PATCH'])
@require_permission('deliveries:update')
@api_route
def transition_delivery_plan(plan_id):
    status = json_body().get('status')
    plan = delivery_plan_service.transition_plan(plan_id, status)
    record_audit('transition', 'deliveries', plan.id, {'status': plan.status})
    return jsonify(serialize_delivery_plan(plan))


@api_bp.route('/delivery-plans/<int:plan_id>', methods=['DELETE'])
@require_permission('deliveries:update')
@api_route
def delete_delivery_plan(plan_id):
    delivery_plan_service.delete_delivery_plan(plan_id)
    record_audit('delete', 'deliveries', plan_id)
    return jsonify({'success': True})


# --- Capture weight ---
# Purpose: Set or clear the dispatched weight on one delivery line.
# Inputs: JSON {weightKg: number | null}.
# Outputs: {success, item}.
@api_bp.route('/delivery-items/<int:item_id>', methods=['PATCH'])
@require_permission('deliveries:update')
@api_route
def update_delivery_item(item_id):
    body = json_body()
    if 'weightKg' not in body:
        raise ValidationError("weightKg is required (number or null)")
    line = delivery_plan_service.set_item_weight(item_id, body['weightKg'])
    record_audit('set_weight', 'deliveries', line.plan_id, {'deliveryItemId': line.id, 'weightKg': line.weight_kg})
    return jsonify({'success': True, 'item': serialize_delivery_item(line)})


@api_bp.route('/packaging-options', methods=['GET'])
@require_permission('deliveries:read')
@api_route
def list_packaging_options():
    options = delivery_plan_service.list_packaging_options(request.args.get('audience') or None)
    return jsonify([serialize_packaging_option(option) for option in options])
