from datetime import timedelta

from gelato_ops.extensions import db
from gelato_ops.models import AuditLog, Customer, Item
from gelato_ops.utils.timezone_utils import TimezoneUtils


def test_create_customer_and_deliver_to_it(app, admin_client, catalog):
    resp = admin_client.post('/api/customers', json={
        'name': ' Trattoria Bella ', 'type': 'cafe', 'email': 'Orders@Bella.it', 'phone': '+39 055 1234',
    })
    assert resp.status_code == 201
    customer = resp.get_json()
    assert customer['name'] == 'Trattoria Bella'
    assert customer['type'] == 'CAFE'
    assert customer['email'] == 'orders@bella.it'
    assert customer['isActive'] is True

    resp = admin_client.get('/api/customers')
    assert [row['name'] for row in resp.get_json()] == ['Hotel Roma', 'Trattoria Bella']

    resp = admin_client.post('/api/delivery-plans', json={
        'date': (TimezoneUtils.business_today() + timedelta(days=1)).isoformat(),
        'destinations': [{
            'customerId': customer['id'],
            'items': [{'itemId': catalog['vanilla'], 'quantity': 2,
                       'packagingOptionId': catalog['packaging']['2 L tub']}],
        }],
    })
    assert resp.status_code == 201
    assert resp.get_json()['plans'][0]['customers'][0]['name'] == 'Trattoria Bella'

    with app.app_context():
        entry = AuditLog.query.filter_by(resource='customers').one()
        assert entry.resource_id == str(customer['id'])


def test_customer_validation(app, admin_client):
    resp = admin_client.post('/api/customers', json={'type': 'HOTEL'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'name is required'

    resp = admin_client.post('/api/customers', json={'name': 'Bar Uno', 'type': 'BAR'})
    assert resp.status_code == 400
    assert resp.get_json()['error'].startswith('Invalid customer type')

    with app.app_context():
        assert Customer.query.count() == 0


def test_inactive_customers_hidden(app, admin_client, catalog):
    with app.app_context():
        db.session.get(Customer, catalog['customer']).is_active = False
        db.session.commit()
    assert admin_client.get('/api/customers').get_json() == []


def test_viewer_reads_customers_but_cannot_create(login_as, make_user, catalog):
    client = login_as(make_user('viewer'))
    assert client.get('/api/customers').status_code == 200

    resp = client.post('/api/customers', json={'name': 'Hotel Nuovo'})
    assert resp.status_code == 403
    assert resp.get_json()['error'] == 'Permission denied: customers:create'


def test_items_share_names_across_categories(app, admin_client, catalog):
    resp = admin_client.post('/api/items', json={'name': 'Vanilla', 'unit': 'kg', 'categoryName': 'Ingredients'})
    assert resp.status_code == 201
    ingredient = resp.get_json()
    assert ingredient['category']['name'] == 'Ingredients'
    assert ingredient['id'] != catalog['vanilla']

    resp = admin_client.post('/api/items', json={'name': 'vanilla', 'categoryName': 'ingredients'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == "Item 'vanilla' already exists in this category"

    resp = admin_client.post('/api/items', json={'name': 'Sugar', 'categoryId': ingredient['category']['id'],
                                                 'sortOrder': '2', 'targetNumber': '12.5'})
    assert resp.status_code == 201
    assert resp.get_json()['targetNumber'] == 12.5

    resp = admin_client.get('/api/items?category=Ingredients')
    assert [row['name'] for row in resp.get_json()] == ['Vanilla', 'Sugar']

    all_names = [row['name'] for row in admin_client.get('/api/items').get_json()]
    assert all_names.count('Vanilla') == 2

    with app.app_context():
        assert Item.query.filter_by(name='Vanilla').count() == 2


def test_item_validation(admin_client, catalog):
    resp = admin_client.post('/api/items', json={'name': 'Salt', 'categoryId': 98765})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == "Unknown category '98765'"

    resp = admin_client.post('/api/items', json={'name': ' '})
    assert resp.status_code == 400

    resp = admin_client.post('/api/items', json={'name': 'Salt', 'sortOrder': 'first'})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'sortOrder must be a whole number'


def test_store_staff_lists_items_but_cannot_create(login_as, make_user, catalog):
    client = login_as(make_user('store_staff'))
    resp = client.get('/api/items')
    assert resp.status_code == 200
    assert {row['name'] for row in resp.get_json()} == {'Vanilla', 'Chocolate', 'Paper Cups'}

    resp = client.post('/api/items', json={'name': 'Spoons'})
    assert resp.status_code == 403
    assert resp.get_json()['error'] == 'Permission denied: recipes:create'


def test_flavors_follow_configured_category(app, admin_client, catalog):
    resp = admin_client.get('/api/flavors')
    assert [row['name'] for row in resp.get_json()] == ['Chocolate', 'Vanilla']

    resp = admin_client.post('/api/flavors', json={'name': 'Pistachio', 'unit': 'tub', 'sortOrder': -1})
    assert resp.status_code == 201
    pistachio = resp.get_json()
    assert pistachio['category']['name'] == 'Gelato Flavors'

    assert admin_client.post('/api/flavors', json={'name': 'Vanilla'}).status_code == 400

    resp = admin_client.get('/api/flavors')
    assert [row['name'] for row in resp.get_json()] == ['Pistachio', 'Chocolate', 'Vanilla']

    app.config['GELATO_CATEGORY_NAME'] = 'Supplies'
    assert [row['name'] for row in admin_client.get('/api/flavors').get_json()] == ['Paper Cups']


def test_update_and_retire_flavor(admin_client, catalog):
    resp = admin_client.patch(f"/api/flavors/{catalog['chocolate']}", json={'name': 'Dark Chocolate', 'sortOrder': 5})
    assert resp.status_code == 200
    assert resp.get_json()['name'] == 'Dark Chocolate'

    resp = admin_client.patch(f"/api/flavors/{catalog['chocolate']}", json={'name': 'Vanilla'})
    assert resp.status_code == 400

    resp = admin_client.patch(f"/api/flavors/{catalog['chocolate']}", json={'isActive': False})
    assert resp.get_json()['isActive'] is False
    assert [row['name'] for row in admin_client.get('/api/flavors').get_json()] == ['Vanilla']

    resp = admin_client.patch(f"/api/flavors/{catalog['cups']}", json={'name': 'Cups'})
    assert resp.status_code == 404
    assert resp.get_json()['error'] == 'Flavor not found'


def test_factory_worker_cannot_add_flavors(login_as, make_user, catalog):
    client = login_as(make_user('factory_worker'))
    assert client.get('/api/flavors').status_code == 200
    resp = client.post('/api/flavors', json={'name': 'Mango'})
    assert resp.status_code == 403
    assert resp.get_json()['error'] == 'Permission denied: recipes:create'
