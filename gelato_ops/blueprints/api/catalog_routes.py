"""Customer, item and flavor API routes.

Synopsis:
List and create the catalog rows that deliveries, stocktakes and production
tasks refer to.
"""

import logging

from flask import jsonify, request

from ...services import catalog_service
from ...services.audit_service import record_audit
from ...services.payloads import serialize_customer, serialize_item
from ...utils.api_responses import api_route
from ...utils.http import json_body
from ...utils.permissions import any_permission_required, require_permission
from . import api_bp

logger = logging.getLogger(__name__)


# =========================================================
# CUSTOMERS
# =========================================================
@api_bp.route('/customers', methods=['GET'])
@require_permission('customers:read')
@api_route
def list_customers():
    return jsonify([serialize_customer(customer) for customer in catalog_service.list_customers()])


# --- Create customer ---
# Purpose: Register a direct delivery destination (restaurant, hotel, cafe).
# Inputs: {name, type?, email?, phone?}.
# Outputs: the customer, 201.
@api_bp.route('/customers', methods=['POST'])
@require_permission('customers:create')
@api_route
def create_customer():
    customer = catalog_service.create_customer(json_body())
    record_audit('create', 'customers', customer.id, {'name': customer.name, 'type': customer.type})
    return jsonify(serialize_customer(customer)), 201


# =========================================================
# ITEMS
# =========================================================
@api_bp.route('/items', methods=['GET'])
@any_permission_required('recipes:read', 'stores:read')
@api_route
def list_items():
    items = catalog_service.list_items(request.args.get('category'))
    return jsonify([serialize_item(item) for item in items])


# --- Create item ---
# Purpose: Add a catalog item outside the seeded flavors (ingredients, supplies).
# Inputs: {name, unit?, categoryId? | categoryName?, sortOrder?, targetText?, targetNumber?}.
# Outputs: the item, 201.
@api_bp.route('/items', methods=['POST'])
@require_permission('recipes:create')
@api_route
def create_item():
    item = catalog_service.create_item(json_body())
    record_audit('create', 'items', item.id, {'name': item.name, 'categoryId': item.category_id})
    return jsonify(serialize_item(item)), 201


# =========================================================
# FLAVORS
# =========================================================
@api_bp.route('/flavors', methods=['GET'])
@any_permission_required('recipes:read', 'stores:read', 'deliveries:read')
@api_route
def list_flavors():
    return jsonify([serialize_item(item) for item in catalog_service.list_flavors()])


@api_bp.route('/flavors', methods=['POST'])
@require_permission('recipes:create')
@api_route
def create_flavor():
    item = catalog_service.create_flavor(json_body())
    record_audit('create', 'items', item.id, {'name': item.name, 'flavor': True})
    return jsonify(serialize_item(item)), 201


# --- Update flavor ---
# Purpose: Rename, reorder or retire a flavor; isActive=false hides it from lists.
# Inputs: {name?, unit?, sortOrder?, isActive?}.
# Outputs: the flavor.
@api_bp.route('/flavors/<int:item_id>', methods=['PATCH'])
@require_permission('recipes:update')
@api_route
def update_flavor(item_id):
    item = catalog_service.update_flavor(item_id, json_body())
    record_audit('update', 'items', item.id, {'name': item.name, 'isActive': item.is_active})
    return jsonify(serialize_item(item))
