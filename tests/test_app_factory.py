import logging

import pytest

from gelato_ops import create_app
from gelato_ops.config import DEFAULT_SECRET_KEY
from gelato_ops.logging_config import RedactingFilter, configure_logging, redact
from gelato_ops.utils import http


def test_production_requires_real_secret_key():
    with pytest.raises(RuntimeError, match='FLASK_SECRET_KEY'):
        create_app({'ENV': 'production', 'SECRET_KEY': DEFAULT_SECRET_KEY, 'DATABASE_URL': 'sqlite://'})


def test_testing_overlay_applied(app):
    assert app.config['TESTING'] is True
    assert app.config['WTF_CSRF_ENABLED'] is False
    assert app.config['ENV'] == 'testing'
    assert app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///')


def test_pii_redaction():
    message = redact('login failed for jane@example.com password=hunter2 Bearer abc.def')
    assert 'jane@example.com' not in message
    assert 'hunter2' not in message
    assert 'abc.def' not in message


def test_redacting_filter_attached_once(app):
    configure_logging(app)
    configure_logging(app)
    handlers = logging.getLogger().handlers
    assert handlers
    for handler in handlers:
        assert sum(isinstance(f, RedactingFilter) for f in handler.filters) == 1

    record = logging.LogRecord('gelato_ops', logging.INFO, __file__, 1, 'invite sent to %s', ('ana@shop.it',), None)
    RedactingFilter().filter(record)
    assert record.getMessage() == 'invite sent to [REDACTED_EMAIL]'


def test_request_helpers(app):
    assert http.__all__ == ['json_body', 'client_ip']

    with app.test_request_context('/api/stocktakes', method='POST', json=[1, 2],
                                  headers={'X-Forwarded-For': '10.0.0.7, 172.16.0.1'}):
        assert http.json_body() == {}
        assert http.client_ip() == '10.0.0.7'
