from datetime import timedelta

from gelato_ops.models import DeliveryPlan
from gelato_ops.utils.timezone_utils import TimezoneUtils


def _tomorrow():
    return (TimezoneUtils.business_today() + timedelta(days=1)).isoformat()


def test_create_one_plan_per_destination(app, admin_client, catalog):
    payload = {
        'date': _tomorrow(),
        'status': 'CONFIRMED',
        'destinations': [
            {
                'storeId': catalog['shop'],
                'items': [
                    {'itemId': catalog['vanilla'], 'quantity': 3, 'packagingOptionId': catalog['packaging']['5 L tray']},
                ],
            },
            {
                'customerId': catalog['customer'],
                'items': [
                    {'name': 'chocolate', 'quantity': 2, 'packagingOptionId': catalog['packaging']['2 L tub']},
                ],
            },
            {'storeId': catalog['factory'], 'items': []},
        ],
    }
    resp = admin_client.post('/api/delivery-plans', json=payload)
    assert resp.status_code == 201
    data = resp.get_json()
    assert data['success'] is True
    assert data['message'] == 'Created 2 delivery plan(s)'

    store_plan, customer_plan = data['plans']
    assert store_plan['store']['slug'] == 'florenci'
    assert store_plan['status'] == 'CONFIRMED'
    assert store_plan['items'][0]['quantity'] == 3
    assert customer_plan['store'] is None
    assert customer_plan['customers'][0]['name'] == 'Hotel Roma'
    assert customer_plan['items'][0]['item']['name'] == 'Chocolate'

    with app.app_context():
        assert DeliveryPlan.query.count() == 2


def test_packaging_must_allow_destination_audience(app, admin_client, catalog):
    payload = {
        'date': _tomorrow(),
        'destinations': [
            {
                'storeId': catalog['shop'],
                'items': [
                    {'itemId': catalog['vanilla'], 'quantity': 1, 'packagingOptionId': catalog['packaging']['125 ml cup']},
                ],
            },
        ],
    }
    resp = admin_client.post('/api/delivery-plans', json=payload)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == "Packaging '125 ml cup' is not allowed for store destinations"

    payload['destinations'] = [
        {
            'customerId': catalog['customer'],
            'items': [
                {'itemId': catalog['vanilla'], 'quantity': 1, 'packagingOptionId': catalog['packaging']['5 L tray']},
            ],
        },
    ]
    resp = admin_client.post('/api/delivery-plans', json=payload)
    assert resp.status_code == 400
    assert 'customer destinations' in resp.get_json()['error']

    with app.app_context():
        assert DeliveryPlan.query.count() == 0


def test_create_as_sent_requires_variable_weights(admin_client, catalog):
    line = {'itemId': catalog['vanilla'], 'quantity': 1, 'packagingOptionId': catalog['packaging']['5 L tray']}
    payload = {
        'date': _tomorrow(),
        'status': 'SENT',
        'destinations': [{'storeId': catalog['shop'], 'items': [line]}],
    }
    resp = admin_client.post('/api/delivery-plans', json=payload)
    assert resp.status_code == 400
    assert "Weight (kg) is required for '5 L tray' on 'Vanilla'" in resp.get_json()['error']

    line['weightKg'] = 2.4
    resp = admin_client.post('/api/delivery-plans', json=payload)
    assert resp.status_code == 201
    plan = resp.get_json()['plans'][0]
    assert plan['status'] == 'SENT'
    assert plan['items'][0]['weightKg'] == 2.4


def test_unknown_status_defaults_to_draft(admin_client, catalog):
    payload = {
        'date': _tomorrow(),
        'status': 'SHIPPED',
        'destinations': [{'storeId': catalog['shop'], 'items': [{'itemId': catalog['vanilla'], 'quantity': 1}]}],
    }
    resp = admin_client.post('/api/delivery-plans', json=payload)
    assert resp.status_code == 201
    assert resp.get_json()['plans'][0]['status'] == 'DRAFT'


def test_rejects_bad_quantities_and_unknown_references(admin_client, catalog):
    def post(destination):
        return admin_client.post('/api/delivery-plans', json={'date': _tomorrow(), 'destinations': [destination]})

    for quantity in (0, -2, 'three', True):
        resp = post({'storeId': catalog['shop'], 'items': [{'itemId': catalog['vanilla'], 'quantity': quantity}]})
        assert resp.status_code == 400
        assert resp.get_json()['error'] == "Quantity must be greater than 0 for 'Vanilla'."

    resp = post({'storeId': 987654, 'items': [{'itemId': catalog['vanilla'], 'quantity': 1}]})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == "Unknown store '987654'"

    resp = post({'customerId': 'abc', 'items': [{'itemId': catalog['vanilla'], 'quantity': 1}]})
    assert resp.status_code == 400

    resp = post({'storeId': catalog['shop'], 'items': [{'itemId': 555555, 'quantity': 1}]})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == "Unknown item '555555'"


def test_requires_destinations_and_lines(admin_client, catalog):
    resp = admin_client.post('/api/delivery-plans', json={'date': _tomorrow(), 'destinations': []})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'No destinations selected'

    resp = admin_client.post(
        '/api/delivery-plans',
        json={'date': _tomorrow(), 'destinations': [{'storeId': catalog['shop'], 'items': []}]},
    )
    assert resp.status_code == 400
    assert resp.get_json()['error'].startswith('No valid destinations or items')

    resp = admin_client.post(
        '/api/delivery-plans',
        json={'date': 'next tuesday', 'destinations': [{'storeId': catalog['shop']}]},
    )
    assert resp.status_code == 400


def test_list_filters_by_status_and_date(app, admin_client, catalog, make_plan):
    make_plan([(catalog['vanilla'], 1, None, None)], status='DRAFT', store_id=catalog['shop'], offset_days=1)
    sent_id, _ = make_plan([(catalog['vanilla'], 1, None, None)], status='SENT', store_id=catalog['shop'], offset_days=2)
    make_plan([(catalog['chocolate'], 1, None, None)], status='SENT', customer_id=catalog['customer'], offset_days=5)

    resp = admin_client.get('/api/delivery-plans')
    assert resp.status_code == 200
    dates = [plan['date'] for plan in resp.get_json()]
    assert dates == sorted(dates)
    assert len(dates) == 3

    day = (TimezoneUtils.business_today() + timedelta(days=2)).isoformat()
    resp = admin_client.get(f'/api/delivery-plans?status=SENT&date={day}')
    assert [plan['id'] for plan in resp.get_json()] == [sent_id]

    resp = admin_client.get(f'/api/delivery-plans?storeId={catalog["shop"]}')
    assert len(resp.get_json()) == 2

    resp = admin_client.get('/api/delivery-plans?status=LOST')
    assert resp.status_code == 400
    resp = admin_client.get('/api/delivery-plans?from=yesterday')
    assert resp.status_code == 400


def test_packaging_options_filtered_by_audience(admin_client, catalog):
    resp = admin_client.get('/api/packaging-options')
    assert resp.status_code == 200
    assert len(resp.get_json()) == 5

    store_names = [option['name'] for option in admin_client.get('/api/packaging-options?audience=store').get_json()]
    assert store_names == ['5 L tub', '2.5 kg tray', '5 L tray']

    customer_names = [
        option['name'] for option in admin_client.get('/api/packaging-options?audience=customer').get_json()
    ]
    assert customer_names == ['125 ml cup', '2 L tub', '5 L tub', '2.5 kg tray']

    assert admin_client.get('/api/packaging-options?audience=robots').status_code == 400


def test_store_staff_cannot_create_plans(app, login_as, make_user, catalog):
    client = login_as(make_user('store_staff'))
    resp = client.post('/api/delivery-plans', json={'date': _tomorrow(), 'destinations': []})
    assert resp.status_code == 403
    assert resp.get_json()['error'] == 'Permission denied: deliveries:create'

    with app.app_context():
        assert DeliveryPlan.query.count() == 0
