import logging

from flask import jsonify, session
from flask_login import current_user, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from ...extensions import limiter, login_rate_limit
from ...services.audit_service import record_audit
from ...services.auth_service import AuthService
from ...utils.http import json_body
from . import auth_bp

logger = logging.getLogger(__name__)


@auth_bp.route('/login', methods=['POST'])
@limiter.limit(login_rate_limit)
def login():
    body = json_body()
    email = (body.get('email') or '').strip()
    password = body.get('password') or ''
    if not email or not password:
        return jsonify({'error': 'Email and password are required'}), 400

    user = AuthService.authenticate(email, password)
    if user is None:
        return jsonify({'error': 'Invalid email or password'}), 401

    session.clear()
    login_user(user)
    session.permanent = True
    logger.info("User %s logged in", user.id)
    record_audit('login', 'auth', user.id)
    return jsonify({'success': True, 'user': AuthService.serialize_user(user), 'csrfToken': generate_csrf()})


@auth_bp.route('/logout', methods=['POST'])
def logout():
    if current_user.is_authenticated:
        logger.info("User %s logged out", current_user.get_id())
        record_audit('logout', 'auth', current_user.get_id())
    logout_user()
    session.clear()
    return jsonify({'success': True})


@auth_bp.route('/status', methods=['GET'])
def status():
    """Session probe for the front end; also hands out a CSRF token."""
    if not current_user.is_authenticated:
        return jsonify({'authenticated': False, 'csrfToken': generate_csrf()})
    return jsonify({
        'authenticated': True,
        'user': AuthService.serialize_user(current_user),
        'csrfToken': generate_csrf(),
    })
