from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils


class AuditLog(db.Model):
    __tablename__ = 'audit_log'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)
    user_email = db.Column(db.String(120), nullable=True)
    action = db.Column(db.String(64), nullable=False)  # e.g. 'create', 'update', 'transition'
    resource = db.Column(db.String(64), nullable=False)  # e.g. 'deliveries', 'production'
    resource_id = db.Column(db.String(64), nullable=True)
    details = db.Column('metadata', db.JSON, nullable=True)
    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=TimezoneUtils.utc_now, nullable=False, index=True)

    def __repr__(self):
        return f'<AuditLog {self.action} {self.resource}:{self.resource_id}>'
