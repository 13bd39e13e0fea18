from ..extensions import db
from .mixins import TimestampMixin


class Category(TimestampMixin, db.Model):
    __tablename__ = 'category'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)

    items = db.relationship('Item', back_populates='category', lazy='select')

    def __repr__(self):
        return f'<Category {self.name}>'


class Item(TimestampMixin, db.Model):
    """Catalog entry: a gelato flavor, an ingredient or a stocked consumable."""
    __tablename__ = 'item'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False)
    unit = db.Column(db.String(32), nullable=True)
    category_id = db.Column(db.Integer, db.ForeignKey('category.id'), nullable=True)
    target_text = db.Column(db.String(128), nullable=True)
    target_number = db.Column(db.Float, nullable=True)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    category = db.relationship('Category', back_populates='items')

    __table_args__ = (
        db.UniqueConstraint('name', 'category_id', name='uq_item_name_category'),
    )

    def __repr__(self):
        return f'<Item {self.name}>'


class PackagingOption(TimestampMixin, db.Model):
    """Container choice for a delivery line (cup, tub, tray)."""
    __tablename__ = 'packaging_option'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    type = db.Column(db.String(32), nullable=False)  # CUP, TUB, TRAY
    size_value = db.Column(db.Float, nullable=True)
    size_unit = db.Column(db.String(16), nullable=True)
    # Actual dispatched weight must be captured per delivery line
    variable_weight = db.Column(db.Boolean, default=False, nullable=False)
    allow_stores = db.Column(db.Boolean, default=True, nullable=False)
    allow_customers = db.Column(db.Boolean, default=True, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def __repr__(self):
        return f'<PackagingOption {self.name}>'

    def allows_audience(self, audience):
        if audience == 'store':
            return bool(self.allow_stores)
        if audience == 'customer':
            return bool(self.allow_customers)
        return True

