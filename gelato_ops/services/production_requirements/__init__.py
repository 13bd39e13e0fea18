"""
Production Requirements Service Package

Rolls delivery commitments in a date window up into a per-flavor production
worklist and pairs it with a cross-store inventory snapshot:
- Demand aggregation over delivery plans (gelato flavors only)
- Latest stocktake per store, preferring the factory's master count
- Stock target thresholds per item

The package reads through the storage ports in services.repositories, so the
aggregation can run against in-memory stores.
"""

from ._core import (
    aggregate_demand,
    apply_thresholds,
    build_inventory_snapshot,
    clamp_days,
    compute_production_plan,
    latest_stocktakes,
    resolve_window,
)
from .types import (
    DeliveryDemand,
    FlavorRequirement,
    InventorySnapshotEntry,
    ProductionPlan,
    StocktakeContribution,
)

# Main public interface
__all__ = [
    'aggregate_demand',
    'apply_thresholds',
    'build_inventory_snapshot',
    'clamp_days',
    'compute_production_plan',
    'latest_stocktakes',
    'resolve_window',
    'DeliveryDemand',
    'FlavorRequirement',
    'InventorySnapshotEntry',
    'ProductionPlan',
    'StocktakeContribution',
]
