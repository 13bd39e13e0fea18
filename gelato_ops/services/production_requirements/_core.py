"""
Core production requirements logic.

compute_production_plan is the single entry point used by the API; the
helpers are exposed for the stocktake endpoints that share the same
latest-stocktake selection.
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from flask import current_app, has_app_context

from ...utils.timezone_utils import TimezoneUtils
from ..errors import ValidationError
from ..repositories import (
    DeliveryPlanStore,
    InventoryStore,
    SqlAlchemyDeliveryPlanStore,
    SqlAlchemyInventoryStore,
)
from .types import (
    DeliveryDemand,
    FlavorRequirement,
    InventorySnapshotEntry,
    ProductionPlan,
    StocktakeContribution,
)

logger = logging.getLogger(__name__)

DEFAULT_GELATO_CATEGORY = "Gelato Flavors"
DEFAULT_FACTORY_SLUG = "factory"
UNKNOWN_CATEGORY = "Unknown"


def _config(key, default):
    if has_app_context():
        return current_app.config.get(key) or default
    return default


def clamp_days(raw, default: int = 7, maximum: int = 60) -> int:
    """Parse the `days` query value and clamp it to [1, maximum].

    Fractional values truncate toward zero, so "2.5" means two days.
    """
    if raw is None or isinstance(raw, bool):
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    return max(1, min(int(value), maximum))


def resolve_window(days: int, today: Optional[date] = None):
    """Window from today through today + days, both days inclusive."""
    start = today or TimezoneUtils.business_today()
    return start, start + timedelta(days=days)


def _as_day(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def destination_label(plan) -> str:
    if plan.store is not None:
        return plan.store.name
    names = [link.customer.name for link in plan.customer_links if link.customer is not None]
    return ", ".join(names) if names else "Unknown"


def _category_name(item) -> Optional[str]:
    category = getattr(item, "category", None)
    return category.name if category is not None else None


# --- Step 1: demand ---
def aggregate_demand(plans: Iterable, gelato_category: str) -> List[FlavorRequirement]:
    """Sum gelato line quantities per flavor; flavors sorted by name."""
    requirements: Dict[str, FlavorRequirement] = {}
    for plan in plans:
        label = destination_label(plan)
        plan_day = _as_day(plan.date).isoformat()
        for line in plan.items:
            item = line.item
            if item is None or _category_name(item) != gelato_category:
                continue
            requirement = requirements.setdefault(item.name, FlavorRequirement(flavor_name=item.name))
            requirement.add(
                DeliveryDemand(
                    date=plan_day,
                    destination=label,
                    quantity=line.quantity,
                    status=plan.status,
                )
            )
    return [requirements[name] for name in sorted(requirements)]


# --- Step 2: inventory snapshot ---
def latest_stocktakes(inventory_store: InventoryStore, factory_slug: str) -> list:
    """(store, stocktake) pairs; stores that never submitted a stocktake are skipped."""
    selected = []
    for store in inventory_store.list_stores():
        stocktake = inventory_store.latest_stocktake(store, prefer_master=store.slug == factory_slug)
        if stocktake is not None:
            selected.append((store, stocktake))
    return selected


def build_inventory_snapshot(selected: Iterable) -> List[InventorySnapshotEntry]:
    entries: Dict[int, InventorySnapshotEntry] = {}
    latest_seen: Dict[int, datetime] = {}
    for store, stocktake in selected:
        submitted = TimezoneUtils.ensure_timezone_aware(stocktake.submitted_at)
        for row in stocktake.items:
            if row.quantity is None or row.item is None:
                continue
            key = row.item.id
            entry = entries.get(key)
            if entry is None:
                entry = InventorySnapshotEntry(
                    item_name=row.item.name,
                    category=_category_name(row.item) or UNKNOWN_CATEGORY,
                )
                entries[key] = entry
            entry.total_quantity += row.quantity
            entry.stocktakes.append(
                StocktakeContribution(
                    store=store.name,
                    quantity=row.quantity,
                    date=TimezoneUtils.format_date_for_api(submitted),
                )
            )
            if key not in latest_seen or submitted > latest_seen[key]:
                latest_seen[key] = submitted
                entry.last_updated = TimezoneUtils.format_datetime_for_api(submitted)
    return sorted(entries.values(), key=lambda e: (e.category, e.item_name))


# --- Step 3: thresholds ---
def apply_thresholds(entries: Iterable[InventorySnapshotEntry], targets: Iterable) -> None:
    """Attach the highest numeric target across stores for each item name."""
    best: Dict[str, float] = {}
    for target in targets:
        if target.target_quantity is None or target.item is None:
            continue
        name = target.item.name
        if name not in best or target.target_quantity > best[name]:
            best[name] = target.target_quantity
    for entry in entries:
        if entry.item_name in best:
            entry.target_threshold = best[entry.item_name]


def compute_production_plan(
    window_start: date,
    window_end: date,
    *,
    plan_store: DeliveryPlanStore = None,
    inventory_store: InventoryStore = None,
    gelato_category: Optional[str] = None,
    factory_slug: Optional[str] = None,
) -> ProductionPlan:
    if window_end < window_start:
        raise ValidationError("windowEnd must not be before windowStart")

    plan_store = plan_store or SqlAlchemyDeliveryPlanStore()
    inventory_store = inventory_store or SqlAlchemyInventoryStore()
    gelato_category = gelato_category or _config("GELATO_CATEGORY_NAME", DEFAULT_GELATO_CATEGORY)
    factory_slug = factory_slug or _config("FACTORY_STORE_SLUG", DEFAULT_FACTORY_SLUG)

    plans = list(plan_store.find_plans_in_range(window_start, window_end))
    flavors = aggregate_demand(plans, gelato_category)

    inventory = build_inventory_snapshot(latest_stocktakes(inventory_store, factory_slug))
    apply_thresholds(inventory, inventory_store.list_inventory_targets())

    result = ProductionPlan(
        window_start=window_start,
        window_end=window_end,
        flavors=flavors,
        inventory=inventory,
        upcoming_delivery_count=len(plans),
    )
    logger.debug(
        "Production plan %s..%s: %s plans, %s flavors, %s inventory items",
        window_start, window_end, len(plans), len(flavors), len(inventory),
    )
    return result
