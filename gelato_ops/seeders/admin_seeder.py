from flask import current_app

from ..extensions import db
from ..models import Role, User
from ..services.auth_service import AuthService


def seed_first_admin(email=None, password=None):
    """Create the first admin from config; a no-op when the e-mail already exists."""
    email = (email or current_app.config.get('FIRST_ADMIN_EMAIL') or '').strip().lower()
    password = password or current_app.config.get('FIRST_ADMIN_PASSWORD')
    if not email or not password:
        print("ℹ️  FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD not set; skipping admin creation")
        return None

    existing = User.query.filter(db.func.lower(User.email) == email).first()
    if existing is not None:
        print(f"ℹ️  Admin user already exists: {email}")
        return existing

    admin_role = Role.query.filter_by(name='admin').first()
    if admin_role is None:
        raise RuntimeError("admin role missing; run 'flask seed-permissions' first")

    user = AuthService.create_user(
        email,
        password,
        current_app.config.get('FIRST_ADMIN_FIRSTNAME', 'System'),
        current_app.config.get('FIRST_ADMIN_LASTNAME', 'Administrator'),
        roles=[admin_role],
    )
    db.session.commit()
    print(f"✅ Created first admin user: {email}")
    return user
