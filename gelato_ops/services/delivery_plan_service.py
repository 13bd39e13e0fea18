"""Delivery plan lifecycle service.

Synopsis:
Create, list, transition and delete delivery plans, and capture dispatched
weights on variable-weight lines. A plan cannot reach SENT while any
variable-weight line lacks a positive captured weight.

Glossary:
- Weight blocker: A line whose packaging is variable-weight and whose
  captured weight is missing or non-positive.
- Audience: Whether a destination is a store or a direct customer.
"""

import logging
import math
from datetime import date

from ..extensions import db
from ..models import (
    Customer,
    DeliveryItem,
    DeliveryPlan,
    DeliveryPlanCustomer,
    Item,
    PackagingOption,
    Store,
)
from ..utils.timezone_utils import TimezoneUtils
from .errors import NotFoundError, ValidationError
from .repositories import DeliveryPlanStore, SqlAlchemyDeliveryPlanStore

logger = logging.getLogger(__name__)

VALID_STATUSES = DeliveryPlan.STATUSES


# =========================================================
# STATE MACHINE
# =========================================================
def find_weight_blockers(plan) -> list:
    """Lines that must have a captured weight before the plan can be sent."""
    blockers = []
    for line in plan.items:
        packaging = line.packaging_option
        if packaging is None or not packaging.variable_weight:
            continue
        if line.weight_kg is None or line.weight_kg <= 0:
            blockers.append(line)
    return blockers


def _describe_line(line) -> str:
    item_name = line.item.name if line.item is not None else f"item {line.item_id}"
    return f"{item_name} ({line.packaging_option.name})"


def transition_plan(plan_id, requested_status, *, store: DeliveryPlanStore = None):
    """Apply a status change; SENT is refused while weight blockers remain.

    The plan row is loaded with a lock so the weight check and the status
    write land in the same transaction.
    """
    store = store or SqlAlchemyDeliveryPlanStore()
    if requested_status not in VALID_STATUSES:
        raise ValidationError("Invalid status. Must be DRAFT, CONFIRMED, or SENT")

    plan = store.get_plan_with_items(plan_id, lock=True)
    if plan is None:
        raise NotFoundError("Delivery plan not found")

    if requested_status == DeliveryPlan.STATUS_SENT:
        blockers = find_weight_blockers(plan)
        if blockers:
            described = ", ".join(_describe_line(line) for line in blockers)
            logger.warning("Blocked SENT for delivery plan %s: %s", plan_id, described)
            raise ValidationError(f"Cannot mark as SENT: weight (kg) missing for {described}")

    previous = plan.status
    plan = store.update_plan_status(plan, requested_status)
    logger.info("Delivery plan %s: %s -> %s", plan_id, previous, requested_status)
    return plan


def coerce_weight(raw):
    """Return None to clear, or a finite positive float; raise otherwise."""
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValidationError("weightKg must be a positive number")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("weightKg must be a positive number")
    if not math.isfinite(value) or value <= 0:
        raise ValidationError("weightKg must be a positive number")
    return value


def set_item_weight(item_id, weight, *, store: DeliveryPlanStore = None):
    store = store or SqlAlchemyDeliveryPlanStore()
    value = coerce_weight(weight)
    line = store.get_delivery_item(item_id)
    if line is None:
        raise NotFoundError("Delivery item not found")
    line = store.set_item_weight(line, value)
    logger.info("Delivery item %s weight set to %s", item_id, value)
    return line


# =========================================================
# QUERIES
# =========================================================
def list_delivery_plans(status=None, day=None, start=None, end=None, store_id=None, limit=1000):
    """Plans ordered by date; a single `day` filter wins over a range."""
    query = DeliveryPlan.query
    if status:
        if status not in VALID_STATUSES:
            raise ValidationError("Invalid status. Must be DRAFT, CONFIRMED, or SENT")
        query = query.filter(DeliveryPlan.status == status)
    if day is not None:
        query = query.filter(DeliveryPlan.date == day)
    else:
        if start is not None:
            query = query.filter(DeliveryPlan.date >= start)
        if end is not None:
            query = query.filter(DeliveryPlan.date <= end)
    if store_id is not None:
        query = query.filter(DeliveryPlan.store_id == store_id)
    return query.order_by(DeliveryPlan.date.asc(), DeliveryPlan.id.asc()).limit(limit).all()


def list_packaging_options(audience=None):
    query = PackagingOption.query.filter(PackagingOption.is_active.is_(True))
    if audience == "store":
        query = query.filter(PackagingOption.allow_stores.is_(True))
    elif audience == "customer":
        query = query.filter(PackagingOption.allow_customers.is_(True))
    elif audience:
        raise ValidationError("audience must be 'store' or 'customer'")
    return query.order_by(PackagingOption.sort_order.asc(), PackagingOption.name.asc()).all()


# =========================================================
# CREATE / DELETE
# =========================================================
def _get_by_id(model, raw):
    if isinstance(raw, bool):
        return None
    try:
        return db.session.get(model, int(raw))
    except (TypeError, ValueError):
        return None


def _parse_plan_date(raw) -> date:
    parsed = TimezoneUtils.parse_api_date(raw)
    if parsed is None:
        raise ValidationError("A valid date is required (YYYY-MM-DD).")
    return parsed


def _resolve_destination(destination):
    if not isinstance(destination, dict):
        raise ValidationError("Each destination must be an object")
    if destination.get("storeId") is not None:
        store = _get_by_id(Store, destination["storeId"])
        if store is None:
            raise ValidationError(f"Unknown store '{destination['storeId']}'")
        return "store", store
    if destination.get("customerId") is not None:
        customer = _get_by_id(Customer, destination["customerId"])
        if customer is None:
            raise ValidationError(f"Unknown customer '{destination['customerId']}'")
        return "customer", customer
    raise ValidationError("Each destination needs a storeId or customerId")


def _resolve_item(line) -> Item:
    if line.get("itemId") is not None:
        item = _get_by_id(Item, line["itemId"])
        if item is None:
            raise ValidationError(f"Unknown item '{line['itemId']}'")
        return item
    name = str(line.get("name") or "").strip()
    item = Item.query.filter(db.func.lower(Item.name) == name.lower()).first() if name else None
    if item is None:
        raise ValidationError(f"Unknown item '{name}'")
    return item


def _build_line(line, audience, status) -> DeliveryItem:
    if not isinstance(line, dict):
        raise ValidationError("Each item line must be an object")
    item = _resolve_item(line)
    quantity = line.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)) or not quantity > 0:
        raise ValidationError(f"Quantity must be greater than 0 for '{item.name}'.")

    packaging = None
    weight = line.get("weightKg")
    if line.get("packagingOptionId") is not None:
        packaging = _get_by_id(PackagingOption, line["packagingOptionId"])
        if packaging is None or not packaging.is_active:
            raise ValidationError(f"Unknown packaging option for '{item.name}'")
        if not packaging.allows_audience(audience):
            raise ValidationError(
                f"Packaging '{packaging.name}' is not allowed for {audience} destinations"
            )
    weight = coerce_weight(weight) if weight is not None else None
    if packaging is not None and packaging.variable_weight and status == DeliveryPlan.STATUS_SENT and weight is None:
        raise ValidationError(
            f"Weight (kg) is required for '{packaging.name}' on '{item.name}' when sending immediately. "
            "Create as Draft/Confirmed to fill weights later."
        )

    return DeliveryItem(
        item=item,
        quantity=float(quantity),
        note=line.get("note"),
        packaging_option=packaging,
        weight_kg=weight,
    )


def create_delivery_plans(payload: dict) -> list:
    """Create one plan per destination that carries at least one line."""
    plan_date = _parse_plan_date(payload.get("date"))
    status = payload.get("status")
    if status not in VALID_STATUSES:
        status = DeliveryPlan.STATUS_DRAFT
    destinations = payload.get("destinations") or []
    if not isinstance(destinations, list) or not destinations:
        raise ValidationError("No destinations selected")

    created = []
    for destination in destinations:
        audience, target = _resolve_destination(destination)
        lines = [_build_line(line, audience, status) for line in destination.get("items") or []]
        if not lines:
            continue
        plan = DeliveryPlan(date=plan_date, status=status, notes=payload.get("notes"), items=lines)
        if audience == "store":
            plan.store = target
        else:
            plan.customer_links.append(DeliveryPlanCustomer(customer=target, priority=1))
        db.session.add(plan)
        created.append(plan)

    if not created:
        raise ValidationError(
            "No valid destinations or items. Please add at least one item with a positive quantity."
        )
    db.session.commit()
    logger.info("Created %s delivery plan(s) for %s", len(created), plan_date.isoformat())
    return created


def delete_delivery_plan(plan_id):
    plan = db.session.get(DeliveryPlan, plan_id)
    if plan is None:
        raise NotFoundError("Delivery plan not found")
    db.session.delete(plan)
    db.session.commit()
    logger.info("Deleted delivery plan %s", plan_id)
