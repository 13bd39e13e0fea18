import pytest

from gelato_ops.extensions import db
from gelato_ops.models import Permission, Role, User
from gelato_ops.utils.permissions import has_permission


@pytest.mark.parametrize('method, path', [
    ('get', '/api/delivery-plans'),
    ('patch', '/api/delivery-plans/1'),
    ('patch', '/api/delivery-items/1'),
    ('get', '/api/production-plan'),
    ('patch', '/api/production-tasks/1'),
    ('get', '/api/audit-logs'),
    ('post', '/api/stocktakes'),
])
def test_protected_endpoints_require_login(client, method, path):
    resp = getattr(client, method)(path, json={})
    assert resp.status_code == 401
    assert resp.get_json() == {'error': 'Authentication required'}


def test_missing_permission_names_the_permission(login_as, make_user):
    client = login_as(make_user('viewer'))
    resp = client.patch('/api/delivery-plans/1', json={'status': 'SENT'})
    assert resp.status_code == 403
    assert resp.get_json() == {'error': 'Permission denied: deliveries:update'}

    resp = client.patch('/api/delivery-items/1', json={'weightKg': 1})
    assert resp.status_code == 403


def test_user_without_roles_is_denied(login_as, make_user):
    client = login_as(make_user())
    assert client.get('/api/delivery-plans').status_code == 403


def test_inactive_role_grants_nothing(app, login_as, make_user):
    user_id = make_user('manager')
    with app.app_context():
        Role.query.filter_by(name='manager').one().is_active = False
        db.session.commit()

    client = login_as(user_id)
    assert client.get('/api/delivery-plans').status_code == 403


def test_has_permission_is_exact_match(app, make_user):
    user_id = make_user('store_staff')
    with app.app_context():
        user = db.session.get(User, user_id)
        assert has_permission(user, 'deliveries:read')
        assert not has_permission(user, 'deliveries:update')
        assert not has_permission(user, 'deliveries')
        assert not has_permission(None, 'deliveries:read')


def test_admin_role_holds_every_permission(app, make_user):
    user_id = make_user('admin')
    with app.app_context():
        user = db.session.get(User, user_id)
        assert user.permission_names() == {perm.name for perm in Permission.query.all()}


def test_inactive_user_session_is_rejected(app, login_as, make_user):
    user_id = make_user('admin')
    with app.app_context():
        db.session.get(User, user_id).is_active = False
        db.session.commit()

    client = login_as(user_id)
    assert client.get('/api/delivery-plans').status_code == 401


def test_login_status_logout_flow(client, make_user):
    make_user('store_staff', email='staff@example.com', password='s3cret-pass')

    resp = client.get('/api/auth/status')
    assert resp.get_json()['authenticated'] is False

    resp = client.post('/api/auth/login', json={'email': 'Staff@Example.com', 'password': 's3cret-pass'})
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['success'] is True
    assert data['user']['email'] == 'staff@example.com'
    assert data['user']['roles'] == ['store_staff']
    assert 'deliveries:read' in data['user']['permissions']
    assert 'csrfToken' in data

    resp = client.get('/api/auth/status')
    assert resp.get_json()['authenticated'] is True
    assert client.get('/api/delivery-plans').status_code == 200

    assert client.post('/api/auth/logout').status_code == 200
    assert client.get('/api/auth/status').get_json()['authenticated'] is False
    assert client.get('/api/delivery-plans').status_code == 401


def test_login_failures(client, make_user):
    make_user('viewer', email='viewer@example.com', password='right-password')

    resp = client.post('/api/auth/login', json={'email': 'viewer@example.com', 'password': 'wrong'})
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Invalid email or password'

    resp = client.post('/api/auth/login', json={'email': 'nobody@example.com', 'password': 'right-password'})
    assert resp.status_code == 401

    resp = client.post('/api/auth/login', json={'email': 'viewer@example.com'})
    assert resp.status_code == 400


def test_unknown_route_returns_json_404(client):
    resp = client.get('/api/does-not-exist')
    assert resp.status_code == 404
    assert 'error' in resp.get_json()
