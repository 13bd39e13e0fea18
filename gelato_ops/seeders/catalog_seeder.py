from flask import current_app

from ..extensions import db
from ..models import Category, Item, Store

GELATO_FLAVORS = [
    'Vanilla', 'Chocolate', 'Strawberry', 'Lemon', 'Pistachio', 'Hazelnut',
    'Caramel', 'Coffee', 'Mint Chocolate Chip', 'Cookies & Cream', 'Mango',
    'Passion Fruit', 'Raspberry', 'Stracciatella', 'Tiramisu',
    'Sorbet: Lemon', 'Sorbet: Mango', 'Sorbet: Raspberry',
]


def seed_catalog(include_flavors=True):
    """Ensure the gelato category, its core flavors and the factory store exist."""
    print("=== Seeding Catalog ===")
    category_name = current_app.config.get('GELATO_CATEGORY_NAME', 'Gelato Flavors')
    factory_slug = current_app.config.get('FACTORY_STORE_SLUG', 'factory')

    category = Category.query.filter_by(name=category_name).first()
    if category is None:
        category = Category(name=category_name, sort_order=0)
        db.session.add(category)
        db.session.flush()

    created = 0
    if include_flavors:
        existing = {item.name for item in Item.query.filter_by(category_id=category.id).all()}
        for position, name in enumerate(GELATO_FLAVORS):
            if name in existing:
                continue
            db.session.add(Item(name=name, unit='tub', target_text='1 tub', category_id=category.id, sort_order=position))
            created += 1

    if Store.query.filter_by(slug=factory_slug).first() is None:
        db.session.add(Store(name='Factory', slug=factory_slug, is_active=True))
        print(f"✅ Created factory store '{factory_slug}'")

    db.session.commit()
    print(f"✅ Catalog seeded ({created} new flavors in '{category_name}')")
    return created
