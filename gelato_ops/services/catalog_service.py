"""
Customers and catalog items.

Synopsis:
Thin list/create operations behind the catalog endpoints. Customers are the
direct delivery destinations referenced by `customerId`; items are the
catalog rows that delivery lines, stocktakes and production tasks point at.
Flavors are items in the configured gelato category.

Glossary:
- Gelato category: the category named by GELATO_CATEGORY_NAME; its items are
  the only ones the production plan aggregates.
"""

import logging

from flask import current_app
from sqlalchemy import func

from ..extensions import db
from ..models import Category, Customer, Item
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CUSTOMER_TYPES = ("RESTAURANT", "HOTEL", "CAFE", "OTHER")


def _required_name(payload, field="name"):
    name = payload.get(field)
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{field} is required")
    return name.strip()


def _optional_int(raw, field):
    if raw is None or raw == "":
        return 0
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a whole number")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number")


def _optional_float(raw, field):
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


def gelato_category_name() -> str:
    return current_app.config.get("GELATO_CATEGORY_NAME") or "Gelato Flavors"


# --- Customers ---

def list_customers() -> list:
    return Customer.query.filter(Customer.is_active.is_(True)).order_by(Customer.name.asc()).all()


def create_customer(payload: dict) -> Customer:
    name = _required_name(payload)
    customer_type = str(payload.get("type") or "RESTAURANT").strip().upper()
    if customer_type not in CUSTOMER_TYPES:
        raise ValidationError(f"Invalid customer type. Must be one of {', '.join(CUSTOMER_TYPES)}")

    customer = Customer(
        name=name,
        type=customer_type,
        email=str(payload.get("email") or "").strip().lower() or None,
        phone=payload.get("phone") or None,
    )
    db.session.add(customer)
    db.session.commit()
    logger.info("Customer %s created (%s)", customer.id, customer_type)
    return customer


# --- Items ---

def _get_or_create_category(name) -> Category:
    category = Category.query.filter(func.lower(Category.name) == name.lower()).first()
    if category is None:
        category = Category(name=name)
        db.session.add(category)
        db.session.flush()
        logger.info("Category %r created", name)
    return category


def _resolve_category(payload):
    if payload.get("categoryId") is not None:
        category = None
        if not isinstance(payload["categoryId"], bool):
            try:
                category = db.session.get(Category, int(payload["categoryId"]))
            except (TypeError, ValueError):
                category = None
        if category is None:
            raise ValidationError(f"Unknown category '{payload['categoryId']}'")
        return category
    category_name = payload.get("categoryName")
    if isinstance(category_name, str) and category_name.strip():
        return _get_or_create_category(category_name.strip())
    return None


def list_items(category_name=None) -> list:
    query = Item.query.outerjoin(Category).filter(Item.is_active.is_(True))
    if category_name:
        query = query.filter(Category.name == category_name)
    return query.order_by(Category.sort_order.asc(), Item.sort_order.asc(), Item.name.asc()).all()


def create_item(payload: dict, category=None) -> Item:
    name = _required_name(payload)
    category = category or _resolve_category(payload)
    category_id = category.id if category is not None else None

    same_category = Item.category_id.is_(None) if category_id is None else Item.category_id == category_id
    duplicate = Item.query.filter(func.lower(Item.name) == name.lower(), same_category).first()
    if duplicate is not None:
        raise ValidationError(f"Item '{name}' already exists in this category")

    item = Item(
        name=name,
        unit=payload.get("unit") or None,
        category=category,
        target_text=payload.get("targetText") or None,
        target_number=_optional_float(payload.get("targetNumber"), "targetNumber"),
        sort_order=_optional_int(payload.get("sortOrder"), "sortOrder"),
    )
    db.session.add(item)
    db.session.commit()
    logger.info("Item %s (%s) created in %s", item.id, name, category.name if category else "no category")
    return item


# --- Flavors ---

def list_flavors() -> list:
    return (
        Item.query.join(Category)
        .filter(Category.name == gelato_category_name(), Item.is_active.is_(True))
        .order_by(Item.sort_order.asc(), Item.name.asc())
        .all()
    )


def create_flavor(payload: dict) -> Item:
    _required_name(payload)
    return create_item(payload, category=_get_or_create_category(gelato_category_name()))


def update_flavor(item_id, payload: dict) -> Item:
    item = db.session.get(Item, item_id)
    if item is None or item.category is None or item.category.name != gelato_category_name():
        raise NotFoundError("Flavor not found")

    if "name" in payload:
        name = _required_name(payload)
        clash = Item.query.filter(
            func.lower(Item.name) == name.lower(),
            Item.category_id == item.category_id,
            Item.id != item.id,
        ).first()
        if clash is not None:
            raise ValidationError(f"Item '{name}' already exists in this category")
        item.name = name
    if "unit" in payload:
        item.unit = payload.get("unit") or None
    if "sortOrder" in payload:
        item.sort_order = _optional_int(payload.get("sortOrder"), "sortOrder")
    if "isActive" in payload:
        item.is_active = bool(payload.get("isActive"))
    db.session.commit()
    logger.info("Flavor %s updated (active=%s)", item.id, item.is_active)
    return item
