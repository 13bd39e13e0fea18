from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils
from .mixins import TimestampMixin

# Association tables for the role based access model
role_permission = db.Table(
    'role_permission',
    db.Column('role_id', db.Integer, db.ForeignKey('role.id', ondelete='CASCADE'), primary_key=True),
    db.Column('permission_id', db.Integer, db.ForeignKey('permission.id', ondelete='CASCADE'), primary_key=True),
)

user_role = db.Table(
    'user_role',
    db.Column('user_id', db.Integer, db.ForeignKey('user.id', ondelete='CASCADE'), primary_key=True),
    db.Column('role_id', db.Integer, db.ForeignKey('role.id', ondelete='CASCADE'), primary_key=True),
)


class Permission(db.Model):
    __tablename__ = 'permission'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False)  # e.g. 'deliveries:update'
    resource = db.Column(db.String(64))
    action = db.Column(db.String(64))
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=TimezoneUtils.utc_now)

    roles = db.relationship('Role', secondary=role_permission, back_populates='permissions')

    def __repr__(self):
        return f'<Permission {self.name}>'


class Role(db.Model):
    __tablename__ = 'role'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), unique=True, nullable=False)
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=TimezoneUtils.utc_now)

    permissions = db.relationship('Permission', secondary=role_permission, back_populates='roles')
    users = db.relationship('User', secondary=user_role, back_populates='roles')

    def __repr__(self):
        return f'<Role {self.name}>'

    def get_permissions(self):
        """Get all active permissions for this role"""
        return [perm for perm in self.permissions if perm.is_active]


class User(UserMixin, TimestampMixin, db.Model):
    __tablename__ = 'user'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False, default='', server_default='')
    first_name = db.Column(db.String(64), nullable=True)
    last_name = db.Column(db.String(64), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)

    roles = db.relationship('Role', secondary=user_role, back_populates='users')

    def __repr__(self):
        return f'<User {self.email}>'

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def full_name(self):
        parts = [part for part in (self.first_name, self.last_name) if part]
        return " ".join(parts) if parts else self.email

    def get_active_roles(self):
        return [role for role in self.roles if role.is_active]

    def role_names(self):
        return sorted(role.name for role in self.get_active_roles())

    def permission_names(self):
        """Union of active permissions across all active roles."""
        names = set()
        for role in self.get_active_roles():
            names.update(perm.name for perm in role.get_permissions())
        return names

    def assign_role(self, role):
        if role not in self.roles:
            self.roles.append(role)
