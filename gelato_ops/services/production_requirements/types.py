"""
Production Requirements Types

Result structures for the production requirements aggregation. `to_dict`
renders the camelCase JSON shape served by the production plan endpoint.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass
class DeliveryDemand:
    """One delivery contributing to a flavor's demand"""
    date: str
    destination: str
    quantity: float
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'destination': self.destination,
            'quantity': self.quantity,
            'status': self.status,
        }


@dataclass
class FlavorRequirement:
    flavor_name: str
    total_units: float = 0.0
    deliveries: List[DeliveryDemand] = field(default_factory=list)

    def add(self, demand: DeliveryDemand) -> None:
        self.total_units += demand.quantity
        self.deliveries.append(demand)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'flavorName': self.flavor_name,
            'totalUnits': self.total_units,
            'deliveries': [d.to_dict() for d in self.deliveries],
        }


@dataclass
class StocktakeContribution:
    """A single store's counted quantity for one item"""
    store: str
    quantity: float
    date: str

    def to_dict(self) -> Dict[str, Any]:
        return {'store': self.store, 'quantity': self.quantity, 'date': self.date}


@dataclass
class InventorySnapshotEntry:
    item_name: str
    category: str
    total_quantity: float = 0.0
    last_updated: Optional[str] = None
    stocktakes: List[StocktakeContribution] = field(default_factory=list)
    target_threshold: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'itemName': self.item_name,
            'category': self.category,
            'totalQuantity': self.total_quantity,
            'lastUpdated': self.last_updated,
            'stocktakes': [s.to_dict() for s in self.stocktakes],
        }
        if self.target_threshold is not None:
            data['targetThreshold'] = self.target_threshold
        return data


@dataclass
class ProductionPlan:
    """Complete aggregation result for one date window"""
    window_start: date
    window_end: date
    flavors: List[FlavorRequirement] = field(default_factory=list)
    inventory: List[InventorySnapshotEntry] = field(default_factory=list)
    upcoming_delivery_count: int = 0

    @property
    def total_units(self) -> float:
        return sum(f.total_units for f in self.flavors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'productionPlan': [f.to_dict() for f in self.flavors],
            'inventory': [i.to_dict() for i in self.inventory],
            'dateRange': {
                'start': self.window_start.isoformat(),
                'end': self.window_end.isoformat(),
            },
            'summary': {
                'totalFlavors': len(self.flavors),
                'totalUnits': self.total_units,
                'upcomingDeliveryCount': self.upcoming_delivery_count,
            },
        }
