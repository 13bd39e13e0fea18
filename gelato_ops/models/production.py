from ..extensions import db
from .mixins import TimestampMixin


class ProductionTask(TimestampMixin, db.Model):
    """Factory work item scheduled by planners and executed by factory staff."""
    __tablename__ = 'production_task'

    STATUS_SCHEDULED = 'SCHEDULED'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_DONE = 'DONE'
    STATUS_CANCELLED = 'CANCELLED'
    STATUSES = (STATUS_SCHEDULED, STATUS_IN_PROGRESS, STATUS_DONE, STATUS_CANCELLED)
    TERMINAL_STATUSES = (STATUS_DONE, STATUS_CANCELLED)

    OUTPUT_UNITS = 'UNITS'
    OUTPUT_TRAY = 'TRAY'
    OUTPUT_KINDS = (OUTPUT_UNITS, OUTPUT_TRAY)

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.Date, nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('item.id'), nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(32), default='units', nullable=False)
    output_kind = db.Column(db.String(16), default=OUTPUT_UNITS, nullable=False)
    status = db.Column(db.String(16), default=STATUS_SCHEDULED, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    total_weight_kg = db.Column(db.Float, nullable=True)
    packaging_option_id = db.Column(db.Integer, db.ForeignKey('packaging_option.id'), nullable=True)
    started_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    created_by_user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)
    assigned_to_user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)

    item = db.relationship('Item')
    packaging_option = db.relationship('PackagingOption')
    created_by = db.relationship('User', foreign_keys=[created_by_user_id])
    assigned_to = db.relationship('User', foreign_keys=[assigned_to_user_id])

    def __repr__(self):
        return f'<ProductionTask {self.id} {self.status}>'

    @property
    def is_tray_task(self):
        return self.output_kind == self.OUTPUT_TRAY

    @classmethod
    def infer_output_kind(cls, unit):
        """Output kind implied by a free-text unit such as "trays"."""
        if unit and "tray" in unit.lower():
            return cls.OUTPUT_TRAY
        return cls.OUTPUT_UNITS
