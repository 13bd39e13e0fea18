"""Stocktake submission and per-store stock targets."""

import logging

from flask import current_app

from ..extensions import db
from ..models import Item, Stocktake, StocktakeItem, Store, StoreInventory
from ..utils.timezone_utils import TimezoneUtils
from .errors import NotFoundError, ValidationError
from .production_requirements import latest_stocktakes
from .repositories import SqlAlchemyInventoryStore

logger = logging.getLogger(__name__)


def get_store_by_slug(slug) -> Store:
    store = Store.query.filter_by(slug=slug).first()
    if store is None:
        raise NotFoundError("Store not found")
    return store


def _optional_quantity(raw, item_id):
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid quantity for item {item_id}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid quantity for item {item_id}")
    if value < 0:
        raise ValidationError(f"Quantity cannot be negative for item {item_id}")
    return value


def _known_item_ids(raw_ids):
    ids = set()
    for raw in raw_ids:
        try:
            ids.add(int(raw))
        except (TypeError, ValueError):
            raise ValidationError(f"Unknown item '{raw}'")
    found = {row.id for row in Item.query.filter(Item.id.in_(ids)).all()} if ids else set()
    missing = ids - found
    if missing:
        raise ValidationError(f"Unknown item '{sorted(missing)[0]}'")
    return ids


def submit_stocktake(payload: dict, actor=None) -> Stocktake:
    slug = payload.get("storeSlug")
    count_date = TimezoneUtils.parse_api_date(payload.get("date"))
    lines = payload.get("items")
    if not slug or count_date is None or not isinstance(lines, list) or not lines:
        raise ValidationError("storeSlug, date and items are required")

    store = get_store_by_slug(slug)
    is_master = bool(payload.get("isMaster"))
    if is_master and store.slug != current_app.config.get("FACTORY_STORE_SLUG", "factory"):
        raise ValidationError("Master stocktakes can only be submitted for the factory store")

    if not all(isinstance(line, dict) for line in lines):
        raise ValidationError("Each stocktake line must be an object")
    _known_item_ids(line.get("itemId") for line in lines)

    stocktake = Stocktake(
        store=store,
        date=count_date,
        is_master=is_master,
        notes=payload.get("notes"),
        submitted_by_user_id=getattr(actor, "id", None),
    )
    for line in lines:
        stocktake.items.append(
            StocktakeItem(
                item_id=int(line["itemId"]),
                quantity=_optional_quantity(line.get("quantity"), line["itemId"]),
                note=line.get("note"),
            )
        )
    db.session.add(stocktake)
    db.session.commit()
    logger.info(
        "Stocktake %s submitted for %s (%s lines, master=%s)",
        stocktake.id, store.slug, len(stocktake.items), is_master,
    )
    return stocktake


def latest_stocktake_per_store() -> list:
    factory_slug = current_app.config.get("FACTORY_STORE_SLUG", "factory")
    return [stocktake for _store, stocktake in latest_stocktakes(SqlAlchemyInventoryStore(), factory_slug)]


def list_store_targets(slug) -> list:
    store = get_store_by_slug(slug)
    return (
        StoreInventory.query.filter_by(store_id=store.id)
        .join(Item)
        .order_by(Item.sort_order.asc(), Item.name.asc())
        .all()
    )


def upsert_store_target(slug, payload: dict) -> StoreInventory:
    store = get_store_by_slug(slug)
    item_ids = _known_item_ids([payload.get("itemId")]) if payload.get("itemId") is not None else None
    if not item_ids:
        raise ValidationError("itemId is required")
    item_id = item_ids.pop()

    target_quantity = _optional_quantity(payload.get("targetQuantity"), item_id)
    row = StoreInventory.query.filter_by(store_id=store.id, item_id=item_id).first()
    if row is None:
        row = StoreInventory(store_id=store.id, item_id=item_id)
        db.session.add(row)
    if "targetQuantity" in payload:
        row.target_quantity = target_quantity
    if "targetText" in payload:
        row.target_text = payload.get("targetText") or None
    if "unit" in payload:
        row.unit = payload.get("unit") or None
    if "isActive" in payload:
        row.is_active = bool(payload.get("isActive"))
    db.session.commit()
    logger.info("Stock target for item %s at %s set to %s", item_id, store.slug, row.target_quantity)
    return row
