import os
import tempfile
import uuid
from datetime import timedelta

import pytest

from gelato_ops import create_app
from gelato_ops.extensions import db
from gelato_ops.models import (
    Category,
    Customer,
    DeliveryItem,
    DeliveryPlan,
    DeliveryPlanCustomer,
    Item,
    PackagingOption,
    Role,
    Store,
)
from gelato_ops.seeders import seed_packaging_options, seed_permissions_and_roles
from gelato_ops.services.auth_service import AuthService
from gelato_ops.utils.timezone_utils import TimezoneUtils


@pytest.fixture(scope='function')
def app():
    """Create application for testing with a fresh file-backed SQLite database."""
    db_fd, db_path = tempfile.mkstemp(suffix='.db')

    test_config = {
        'TESTING': True,
        'DATABASE_URL': f'sqlite:///{db_path}',
        'WTF_CSRF_ENABLED': False,
        'SECRET_KEY': 'test-secret-key',
        'RATELIMIT_ENABLED': False,
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()
        seed_permissions_and_roles()
        seed_packaging_options()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()

    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def db_session(app):
    with app.app_context():
        yield db.session


def login(client, user_id):
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user_id)
        sess['_fresh'] = True


@pytest.fixture
def make_user(app):
    """Create an active user holding the named seeded roles; returns the id."""
    def _make(*role_names, email=None, password='password123'):
        with app.app_context():
            roles = [Role.query.filter_by(name=name).one() for name in role_names]
            user = AuthService.create_user(
                email or f'user_{uuid.uuid4().hex[:8]}@example.com',
                password,
                'Test',
                'User',
                roles=roles,
            )
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def login_as(client):
    def _login(user_id):
        login(client, user_id)
        return client
    return _login


@pytest.fixture
def admin_client(client, make_user):
    login(client, make_user('admin'))
    return client


@pytest.fixture
def catalog(app):
    """Gelato flavors, one non-gelato item, the factory and one shop, one customer."""
    with app.app_context():
        gelato = Category(name='Gelato Flavors')
        supplies = Category(name='Supplies')
        vanilla = Item(name='Vanilla', unit='tub', category=gelato)
        chocolate = Item(name='Chocolate', unit='tub', category=gelato)
        cups = Item(name='Paper Cups', unit='box', category=supplies)
        factory = Store(name='Factory', slug='factory')
        shop = Store(name='Florenci', slug='florenci')
        customer = Customer(name='Hotel Roma', type='HOTEL')
        db.session.add_all([gelato, supplies, vanilla, chocolate, cups, factory, shop, customer])
        db.session.commit()

        packaging = {option.name: option.id for option in PackagingOption.query.all()}

        return {
            'vanilla': vanilla.id,
            'chocolate': chocolate.id,
            'cups': cups.id,
            'factory': factory.id,
            'shop': shop.id,
            'customer': customer.id,
            'packaging': packaging,
        }


@pytest.fixture
def make_plan(app):
    """Persist a delivery plan; `lines` are (item_id, quantity, packaging_id, weight)."""
    def _make(lines, status=DeliveryPlan.STATUS_CONFIRMED, store_id=None, customer_id=None, offset_days=1):
        with app.app_context():
            plan = DeliveryPlan(
                date=TimezoneUtils.business_today() + timedelta(days=offset_days),
                status=status,
                store_id=store_id,
            )
            for item_id, quantity, packaging_id, weight in lines:
                plan.items.append(
                    DeliveryItem(
                        item_id=item_id,
                        quantity=quantity,
                        packaging_option_id=packaging_id,
                        weight_kg=weight,
                    )
                )
            if customer_id is not None:
                plan.customer_links.append(DeliveryPlanCustomer(customer_id=customer_id, priority=1))
            db.session.add(plan)
            db.session.commit()
            return plan.id, [line.id for line in plan.items]
    return _make
