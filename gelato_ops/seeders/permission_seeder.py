from ..extensions import db
from ..models import Permission, Role

RESOURCE_ACTIONS = {
    'stores': ('read', 'create', 'update', 'delete', 'manage_inventory'),
    'stocktakes': ('read', 'create', 'update'),
    'deliveries': ('read', 'create', 'update'),
    'production': ('read', 'create', 'update'),
    'orders': ('read', 'create', 'update'),
    'recipes': ('read', 'create', 'update', 'delete'),
    'customers': ('read', 'create', 'update', 'delete'),
    'users': ('read', 'create', 'update', 'delete'),
    'roles': ('read', 'create', 'update', 'delete'),
    'audit': ('read',),
}

ROLE_DEFINITIONS = {
    'admin': ('Full system administrator', None),  # None = every permission
    'manager': ('Store manager with most permissions', (
        'stores:read', 'stores:update', 'stores:manage_inventory',
        'stocktakes:read', 'stocktakes:create', 'stocktakes:update',
        'deliveries:read', 'deliveries:create', 'deliveries:update',
        'production:read', 'production:create', 'production:update',
        'orders:read', 'orders:create', 'orders:update',
        'recipes:read', 'recipes:create', 'recipes:update',
        'customers:read', 'customers:create', 'customers:update',
        'users:read',
    )),
    'store_staff': ('Store staff for daily operations', (
        'stores:read',
        'stocktakes:read', 'stocktakes:create', 'stocktakes:update',
        'deliveries:read',
    )),
    'factory_worker': ('Factory worker for production', (
        'production:read', 'production:create', 'production:update',
        'recipes:read',
        'stocktakes:read',
    )),
    'viewer': ('Read-only access', (
        'stores:read', 'stocktakes:read', 'deliveries:read', 'production:read',
        'orders:read', 'recipes:read', 'customers:read', 'users:read',
    )),
}


def _describe(resource, action):
    verb = 'View' if action == 'read' else action.replace('_', ' ').capitalize()
    return f"{verb} {resource}"


def seed_permissions_and_roles():
    """Create permissions and the built-in roles; existing rows are left as they are."""
    print("=== Seeding Permissions and Roles ===")
    by_name = {perm.name: perm for perm in Permission.query.all()}
    created = 0
    for resource, actions in RESOURCE_ACTIONS.items():
        for action in actions:
            name = f"{resource}:{action}"
            if name in by_name:
                continue
            perm = Permission(name=name, resource=resource, action=action, description=_describe(resource, action))
            db.session.add(perm)
            by_name[name] = perm
            created += 1

    for role_name, (description, permission_names) in ROLE_DEFINITIONS.items():
        role = Role.query.filter_by(name=role_name).first()
        if role is None:
            role = Role(name=role_name, description=description, is_active=True)
            db.session.add(role)
        wanted = by_name.values() if permission_names is None else [by_name[n] for n in permission_names]
        for perm in wanted:
            if perm not in role.permissions:
                role.permissions.append(perm)

    db.session.commit()
    print(f"✅ Permissions seeded ({created} new), {len(ROLE_DEFINITIONS)} roles ensured")
    return created
