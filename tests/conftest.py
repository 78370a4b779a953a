"""
Shared pytest fixtures and configuration for all tests.

Provides the application factory fixture, a fresh application per test,
a fixed clock, and storage-parametrised fixtures so the core behaviour is
exercised against both the in-memory and the database backend.
"""

import pytest
import sys
import os
from datetime import datetime, timedelta

# Add the project root to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stallpos import create_app
from stallpos.models import db

# Monday
FIXED_NOW = datetime(2024, 3, 4, 10, 30)


class FixedClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now=FIXED_NOW):
        self.now = now

    def __call__(self):
        return self.now

    def set(self, now):
        self.now = now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def sale(date='2024-03-04', total='50.00', method='cash', items=None, **extra):
    """Build a transaction request body."""
    body = {
        'items': items or [{'id': 'tea', 'name': 'Masala Chai', 'price': total, 'quantity': 1}],
        'totalAmount': total,
        'paymentMethod': method,
        'date': date,
    }
    body.update(extra)
    return body


@pytest.fixture(scope='session')
def app_factory():
    """Factory fixture for creating test app instances."""
    def _create_app(config='testing', clock=None, **settings):
        settings.setdefault('SQLALCHEMY_DATABASE_URI', 'sqlite:///:memory:')
        return create_app(config, settings=settings, clock=clock)
    return _create_app


@pytest.fixture(scope='function')
def clock():
    """Clock fixed at Monday 2024-03-04 10:30."""
    return FixedClock()


@pytest.fixture(scope='function')
def fresh_app(app_factory, clock):
    """Fresh application on in-memory storage for each test."""
    app = app_factory(clock=clock)

    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def client(fresh_app):
    """Create a test client for each test."""
    return fresh_app.test_client()


@pytest.fixture(scope='function')
def seeded_client(app_factory, clock):
    """Test client for an application with the default users and menu."""
    app = app_factory(clock=clock, SEED_DEFAULT_DATA=True)

    with app.app_context():
        yield app.test_client()


@pytest.fixture(scope='function', params=['memory', 'database'])
def backend_app(request, app_factory, clock):
    """Fresh application on each storage backend."""
    app = app_factory(clock=clock, STORAGE_BACKEND=request.param)
    assert app.extensions['stallpos'].storage.name == request.param

    with app.app_context():
        yield app
        if request.param == 'database':
            db.session.remove()
            db.drop_all()


@pytest.fixture(scope='function')
def services(backend_app):
    """Services container of the backend-parametrised app."""
    return backend_app.extensions['stallpos']


@pytest.fixture(scope='function')
def storage(services):
    return services.storage


@pytest.fixture(scope='function')
def record_sale(services):
    """Record a sale through the sales service."""
    def _record(**kwargs):
        return services.sales.create_transaction(sale(**kwargs))
    return _record


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "api: marks tests as API endpoint tests"
    )
    config.addinivalue_line(
        "markers", "storage: marks tests that run against every storage backend"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically add markers based on fixtures and module names."""
    for item in items:
        if 'test_routes' in item.nodeid:
            item.add_marker(pytest.mark.api)
        if 'backend_app' in getattr(item, 'fixturenames', ()):
            item.add_marker(pytest.mark.storage)
