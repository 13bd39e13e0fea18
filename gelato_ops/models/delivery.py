from ..extensions import db
from .mixins import TimestampMixin


class DeliveryPlan(TimestampMixin, db.Model):
    """A dated delivery to one store or to a set of direct customers."""
    __tablename__ = 'delivery_plan'

    STATUS_DRAFT = 'DRAFT'
    STATUS_CONFIRMED = 'CONFIRMED'
    STATUS_SENT = 'SENT'
    STATUSES = (STATUS_DRAFT, STATUS_CONFIRMED, STATUS_SENT)

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(16), default=STATUS_DRAFT, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    store_id = db.Column(db.Integer, db.ForeignKey('store.id', ondelete='SET NULL'), nullable=True)

    store = db.relationship('Store')
    customer_links = db.relationship(
        'DeliveryPlanCustomer',
        back_populates='plan',
        cascade='all, delete-orphan',
        order_by='DeliveryPlanCustomer.priority',
    )
    items = db.relationship(
        'DeliveryItem',
        back_populates='plan',
        cascade='all, delete-orphan',
        order_by='DeliveryItem.id',
    )

    def __repr__(self):
        return f'<DeliveryPlan {self.id} {self.date} {self.status}>'


class DeliveryPlanCustomer(db.Model):
    __tablename__ = 'delivery_plan_customer'

    plan_id = db.Column(db.Integer, db.ForeignKey('delivery_plan.id', ondelete='CASCADE'), primary_key=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('customer.id', ondelete='CASCADE'), primary_key=True)
    priority = db.Column(db.Integer, default=1, nullable=False)
    notes = db.Column(db.Text, nullable=True)

    plan = db.relationship('DeliveryPlan', back_populates='customer_links')
    customer = db.relationship('Customer')


class DeliveryItem(TimestampMixin, db.Model):
    __tablename__ = 'delivery_item'

    id = db.Column(db.Integer, primary_key=True)
    plan_id = db.Column(db.Integer, db.ForeignKey('delivery_plan.id', ondelete='CASCADE'), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('item.id'), nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    note = db.Column(db.Text, nullable=True)
    weight_kg = db.Column(db.Float, nullable=True)
    packaging_option_id = db.Column(db.Integer, db.ForeignKey('packaging_option.id'), nullable=True)

    plan = db.relationship('DeliveryPlan', back_populates='items')
    item = db.relationship('Item')
    packaging_option = db.relationship('PackagingOption')

    def __repr__(self):
        return f'<DeliveryItem {self.id} plan={self.plan_id}>'
