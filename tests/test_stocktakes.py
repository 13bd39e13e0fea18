from gelato_ops.extensions import db
from gelato_ops.models import Stocktake, StoreInventory


def test_submit_stocktake(app, admin_client, catalog):
    resp = admin_client.post('/api/stocktakes', json={
        'storeSlug': 'florenci',
        'date': '2024-05-02',
        'items': [
            {'itemId': catalog['vanilla'], 'quantity': 3},
            {'itemId': catalog['cups'], 'quantity': None, 'note': 'not counted'},
        ],
    })
    assert resp.status_code == 201
    data = resp.get_json()
    assert data['store']['slug'] == 'florenci'
    assert data['isMaster'] is False
    assert [row['quantity'] for row in data['items']] == [3, None]

    with app.app_context():
        assert Stocktake.query.count() == 1


def test_master_only_for_factory(admin_client, catalog):
    payload = {
        'storeSlug': 'florenci',
        'date': '2024-05-02',
        'isMaster': True,
        'items': [{'itemId': catalog['vanilla'], 'quantity': 3}],
    }
    resp = admin_client.post('/api/stocktakes', json=payload)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Master stocktakes can only be submitted for the factory store'

    payload['storeSlug'] = 'factory'
    resp = admin_client.post('/api/stocktakes', json=payload)
    assert resp.status_code == 201
    assert resp.get_json()['isMaster'] is True


def test_submit_validation(admin_client, catalog):
    resp = admin_client.post('/api/stocktakes', json={'storeSlug': 'nowhere', 'date': '2024-05-02',
                                                      'items': [{'itemId': catalog['vanilla'], 'quantity': 1}]})
    assert resp.status_code == 404

    resp = admin_client.post('/api/stocktakes', json={'storeSlug': 'florenci', 'date': '2024-05-02', 'items': []})
    assert resp.status_code == 400

    resp = admin_client.post('/api/stocktakes', json={'storeSlug': 'florenci', 'date': '2024-05-02',
                                                      'items': [{'itemId': catalog['vanilla'], 'quantity': -1}]})
    assert resp.status_code == 400

    resp = admin_client.post('/api/stocktakes', json={'storeSlug': 'florenci', 'date': '2024-05-02',
                                                      'items': [{'itemId': 123456, 'quantity': 1}]})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == "Unknown item '123456'"


def test_latest_stocktake_per_store(admin_client, catalog):
    for quantity in (1, 2):
        admin_client.post('/api/stocktakes', json={
            'storeSlug': 'florenci',
            'date': '2024-05-02',
            'items': [{'itemId': catalog['vanilla'], 'quantity': quantity}],
        })
    admin_client.post('/api/stocktakes', json={
        'storeSlug': 'factory',
        'date': '2024-05-01',
        'isMaster': True,
        'items': [{'itemId': catalog['vanilla'], 'quantity': 40}],
    })
    admin_client.post('/api/stocktakes', json={
        'storeSlug': 'factory',
        'date': '2024-05-02',
        'items': [{'itemId': catalog['vanilla'], 'quantity': 5}],
    })

    resp = admin_client.get('/api/stocktakes/latest')
    assert resp.status_code == 200
    by_store = {row['store']['slug']: row for row in resp.get_json()}
    assert set(by_store) == {'factory', 'florenci'}
    assert by_store['factory']['isMaster'] is True
    assert by_store['factory']['items'][0]['quantity'] == 40
    assert by_store['florenci']['items'][0]['quantity'] == 2


def test_store_targets_upsert(app, admin_client, catalog):
    resp = admin_client.post('/api/stores/florenci/inventory', json={
        'itemId': catalog['vanilla'], 'targetQuantity': 6, 'targetText': '6 tubs', 'unit': 'tub',
    })
    assert resp.status_code == 200
    assert resp.get_json()['targetQuantity'] == 6

    resp = admin_client.post('/api/stores/florenci/inventory', json={'itemId': catalog['vanilla'], 'targetQuantity': 8})
    assert resp.status_code == 200
    row = resp.get_json()
    assert row['targetQuantity'] == 8
    assert row['targetText'] == '6 tubs'

    resp = admin_client.get('/api/stores/florenci/inventory')
    assert [row['item']['name'] for row in resp.get_json()] == ['Vanilla']

    with app.app_context():
        assert StoreInventory.query.count() == 1

    assert admin_client.post('/api/stores/florenci/inventory', json={}).status_code == 400
    assert admin_client.get('/api/stores/atlantis/inventory').status_code == 404


def test_store_staff_can_submit_but_not_set_targets(app, login_as, make_user, catalog):
    client = login_as(make_user('store_staff'))
    resp = client.post('/api/stocktakes', json={
        'storeSlug': 'florenci',
        'date': '2024-05-02',
        'items': [{'itemId': catalog['vanilla'], 'quantity': 3}],
    })
    assert resp.status_code == 201

    resp = client.post('/api/stores/florenci/inventory', json={'itemId': catalog['vanilla'], 'targetQuantity': 1})
    assert resp.status_code == 403

    with app.app_context():
        assert db.session.query(StoreInventory).count() == 0
