from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils


class Stocktake(db.Model):
    """Point-in-time inventory count submitted for one store."""
    __tablename__ = 'stocktake'

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey('store.id', ondelete='CASCADE'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    submitted_at = db.Column(db.DateTime, default=TimezoneUtils.utc_now, nullable=False, index=True)
    # Authoritative factory count; preferred over ordinary stocktakes for the factory store
    is_master = db.Column(db.Boolean, default=False, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    submitted_by_user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)

    store = db.relationship('Store', back_populates='stocktakes')
    items = db.relationship(
        'StocktakeItem', back_populates='stocktake', cascade='all, delete-orphan', order_by='StocktakeItem.id'
    )

    def __repr__(self):
        return f'<Stocktake {self.id} store={self.store_id} {self.date}>'


class StocktakeItem(db.Model):
    __tablename__ = 'stocktake_item'

    id = db.Column(db.Integer, primary_key=True)
    stocktake_id = db.Column(db.Integer, db.ForeignKey('stocktake.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('item.id'), nullable=False)
    quantity = db.Column(db.Float, nullable=True)  # NULL means not counted
    note = db.Column(db.Text, nullable=True)

    stocktake = db.relationship('Stocktake', back_populates='items')
    item = db.relationship('Item')
