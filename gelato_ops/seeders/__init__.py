from .admin_seeder import seed_first_admin
from .catalog_seeder import seed_catalog
from .packaging_seeder import seed_packaging_options
from .permission_seeder import seed_permissions_and_roles

__all__ = [
    'seed_first_admin',
    'seed_catalog',
    'seed_packaging_options',
    'seed_permissions_and_roles',
]
