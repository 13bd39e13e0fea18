from ..extensions import db
from .mixins import TimestampMixin


class Store(TimestampMixin, db.Model):
    __tablename__ = 'store'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    slug = db.Column(db.String(128), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    stocktakes = db.relationship(
        'Stocktake', back_populates='store', cascade='all, delete-orphan', lazy='dynamic'
    )
    inventory_targets = db.relationship(
        'StoreInventory', back_populates='store', cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f'<Store {self.slug}>'


class Customer(TimestampMixin, db.Model):
    """Direct (non-store) delivery destination such as a restaurant or hotel."""
    __tablename__ = 'customer'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    type = db.Column(db.String(32), default='RESTAURANT', nullable=False)
    email = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(32), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<Customer {self.name}>'


class StoreInventory(TimestampMixin, db.Model):
    """Per-store stock target for one catalog item."""
    __tablename__ = 'store_inventory'

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey('store.id', ondelete='CASCADE'), nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey('item.id', ondelete='CASCADE'), nullable=False)
    target_quantity = db.Column(db.Float, nullable=True)
    target_text = db.Column(db.String(128), nullable=True)
    unit = db.Column(db.String(32), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    store = db.relationship('Store', back_populates='inventory_targets')
    item = db.relationship('Item')

    __table_args__ = (
        db.UniqueConstraint('store_id', 'item_id', name='uq_store_inventory_store_item'),
    )
