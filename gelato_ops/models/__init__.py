"""Models package - imports all models for the application"""
from ..extensions import db

# Import in dependency order for table creation
from .user import Permission, Role, User, role_permission, user_role
from .catalog import Category, Item, PackagingOption
from .store import Customer, Store, StoreInventory
from .delivery import DeliveryItem, DeliveryPlan, DeliveryPlanCustomer
from .stocktake import Stocktake, StocktakeItem
from .production import ProductionTask
from .audit import AuditLog

__all__ = [
    'db',
    'Permission',
    'Role',
    'User',
    'role_permission',
    'user_role',
    'Category',
    'Item',
    'PackagingOption',
    'Customer',
    'Store',
    'StoreInventory',
    'DeliveryItem',
    'DeliveryPlan',
    'DeliveryPlanCustomer',
    'Stocktake',
    'StocktakeItem',
    'ProductionTask',
    'AuditLog',
]
