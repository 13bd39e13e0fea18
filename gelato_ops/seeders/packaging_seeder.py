from ..extensions import db
from ..models import PackagingOption

PACKAGING_OPTIONS = [
    # Customer-facing options (restaurants/cafes/hotels)
    {'name': '125 ml cup', 'type': 'CUP', 'size_value': 125, 'size_unit': 'ML', 'variable_weight': False,
     'sort_order': 1, 'allow_stores': False, 'allow_customers': True},
    {'name': '2 L tub', 'type': 'TUB', 'size_value': 2, 'size_unit': 'L', 'variable_weight': False,
     'sort_order': 2, 'allow_stores': False, 'allow_customers': True},
    {'name': '5 L tub', 'type': 'TUB', 'size_value': 5, 'size_unit': 'L', 'variable_weight': False,
     'sort_order': 3, 'allow_stores': True, 'allow_customers': True},
    {'name': '2.5 kg tray', 'type': 'TRAY', 'size_value': 2.5, 'size_unit': 'KG', 'variable_weight': True,
     'sort_order': 4, 'allow_stores': True, 'allow_customers': True},
    # Shop-facing trays
    {'name': '5 L tray', 'type': 'TRAY', 'size_value': 5, 'size_unit': 'L', 'variable_weight': True,
     'sort_order': 5, 'allow_stores': True, 'allow_customers': False},
]


def seed_packaging_options():
    """Upsert the standard packaging options by name."""
    print("=== Seeding Packaging Options ===")
    for data in PACKAGING_OPTIONS:
        option = PackagingOption.query.filter_by(name=data['name']).first()
        if option is None:
            option = PackagingOption(name=data['name'])
            db.session.add(option)
        for key, value in data.items():
            setattr(option, key, value)
        option.is_active = True
    db.session.commit()
    print(f"✅ {len(PACKAGING_OPTIONS)} packaging options ensured")
    return len(PACKAGING_OPTIONS)
