"""Stocktake and store target API routes."""

import logging

from flask import jsonify
from flask_login import current_user

from ...services import stocktake_service
from ...services.audit_service import record_audit
from ...services.payloads import serialize_stocktake, serialize_store_inventory
from ...utils.api_responses import api_route
from ...utils.http import json_body
from ...utils.permissions import require_permission
from . import api_bp

logger = logging.getLogger(__name__)


@api_bp.route('/stocktakes', methods=['POST'])
@require_permission('stocktakes:create')
@api_route
def submit_stocktake():
    stocktake = stocktake_service.submit_stocktake(json_body(), actor=current_user)
    record_audit(
        'create',
        'stocktakes',
        stocktake.id,
        {'store': stocktake.store.slug, 'isMaster': stocktake.is_master, 'lines': len(stocktake.items)},
    )
    return jsonify(serialize_stocktake(stocktake)), 201


@api_bp.route('/stocktakes/latest', methods=['GET'])
@require_permission('stocktakes:read')
@api_route
def latest_stocktakes():
    stocktakes = stocktake_service.latest_stocktake_per_store()
    return jsonify([serialize_stocktake(stocktake) for stocktake in stocktakes])


@api_bp.route('/stores/<slug>/inventory', methods=['GET'])
@require_permission('stores:read')
@api_route
def list_store_inventory(slug):
    rows = stocktake_service.list_store_targets(slug)
    return jsonify([serialize_store_inventory(row) for row in rows])


@api_bp.route('/stores/<slug>/inventory', methods=['POST'])
@require_permission('stores:manage_inventory')
@api_route
def upsert_store_inventory(slug):
    row = stocktake_service.upsert_store_target(slug, json_body())
    record_audit('upsert_target', 'stores', row.store_id, {'itemId': row.item_id, 'targetQuantity': row.target_quantity})
    return jsonify(serialize_store_inventory(row))
