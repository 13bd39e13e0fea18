"""
Storage ports for the delivery, inventory and production services.

The services depend only on these narrow interfaces. The SQLAlchemy classes
below are the defaults; tests pass in-memory fakes with the same methods.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional, Protocol

from sqlalchemy.orm import selectinload

from ..extensions import db
from ..models import (
    DeliveryItem,
    DeliveryPlan,
    DeliveryPlanCustomer,
    Item,
    ProductionTask,
    Stocktake,
    StocktakeItem,
    Store,
    StoreInventory,
)


class DeliveryPlanStore(Protocol):
    def get_plan_with_items(self, plan_id: int, lock: bool = False) -> Optional[Any]: ...

    def update_plan_status(self, plan: Any, status: str) -> Any: ...

    def get_delivery_item(self, item_id: int) -> Optional[Any]: ...

    def set_item_weight(self, item: Any, weight_kg: Optional[float]) -> Any: ...

    def find_plans_in_range(self, start: date, end: date) -> Iterable[Any]: ...


class InventoryStore(Protocol):
    def list_stores(self) -> Iterable[Any]: ...

    def latest_stocktake(self, store: Any, prefer_master: bool = False) -> Optional[Any]: ...

    def list_inventory_targets(self) -> Iterable[Any]: ...


class ProductionTaskStore(Protocol):
    def get_task(self, task_id: int) -> Optional[Any]: ...

    def save_task(self, task: Any) -> Any: ...


def _plan_load_options():
    return (
        selectinload(DeliveryPlan.store),
        selectinload(DeliveryPlan.customer_links).selectinload(DeliveryPlanCustomer.customer),
        selectinload(DeliveryPlan.items).selectinload(DeliveryItem.packaging_option),
        selectinload(DeliveryPlan.items).selectinload(DeliveryItem.item).selectinload(Item.category),
    )


class SqlAlchemyDeliveryPlanStore:
    def get_plan_with_items(self, plan_id, lock=False):
        query = DeliveryPlan.query.options(*_plan_load_options()).filter(DeliveryPlan.id == plan_id)
        if lock:
            # Row lock holds until update_plan_status commits
            query = query.with_for_update(of=DeliveryPlan)
        return query.first()

    def update_plan_status(self, plan, status):
        plan.status = status
        db.session.commit()
        return plan

    def get_delivery_item(self, item_id):
        return db.session.get(DeliveryItem, item_id)

    def set_item_weight(self, item, weight_kg):
        item.weight_kg = weight_kg
        db.session.commit()
        return item

    def find_plans_in_range(self, start, end):
        return (
            DeliveryPlan.query.options(*_plan_load_options())
            .filter(DeliveryPlan.date >= start, DeliveryPlan.date <= end)
            .order_by(DeliveryPlan.date.asc(), DeliveryPlan.id.asc())
            .all()
        )


class SqlAlchemyInventoryStore:
    def list_stores(self):
        return Store.query.order_by(Store.name.asc()).all()

    def latest_stocktake(self, store, prefer_master=False):
        base = Stocktake.query.options(
            selectinload(Stocktake.items).selectinload(StocktakeItem.item).selectinload(Item.category)
        ).filter(Stocktake.store_id == store.id)
        # Recency is submission time for both master and ordinary stocktakes
        newest_first = (Stocktake.submitted_at.desc(), Stocktake.id.desc())
        if prefer_master:
            master = base.filter(Stocktake.is_master.is_(True)).order_by(*newest_first).first()
            if master is not None:
                return master
        return base.order_by(*newest_first).first()

    def list_inventory_targets(self):
        return (
            StoreInventory.query.options(selectinload(StoreInventory.item))
            .filter(StoreInventory.target_quantity.isnot(None))
            .all()
        )


class SqlAlchemyProductionTaskStore:
    def get_task(self, task_id):
        return db.session.get(ProductionTask, task_id)

    def save_task(self, task):
        db.session.add(task)
        db.session.commit()
        return task


__all__ = [
    "DeliveryPlanStore",
    "InventoryStore",
    "ProductionTaskStore",
    "SqlAlchemyDeliveryPlanStore",
    "SqlAlchemyInventoryStore",
    "SqlAlchemyProductionTaskStore",
]
