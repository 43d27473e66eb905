"""
Pytest configuration and fixtures.
Each test gets its own sqlite file and a fake notification endpoint, so no
test touches the real database or the network.
"""

import os

import pytest
import requests

os.environ['FLASK_ENV'] = 'test'


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200):
        self.status_code = status_code


class FakeNotificationEndpoint:
    """Records every notification POST and answers with a configurable status."""

    def __init__(self):
        self.calls = []
        self.status_code = 200
        self.error = None

    def post(self, url, json=None, timeout=None, **kwargs):
        self.calls.append({'url': url, 'json': json, 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)

    def of_type(self, template_name):
        """Payloads sent with the given template."""
        return [call['json']['data'] for call in self.calls if call['json']['type'] == template_name]


@pytest.fixture(autouse=True)
def notifications(monkeypatch):
    """Replace the notification transport for every test."""
    endpoint = FakeNotificationEndpoint()
    monkeypatch.setattr(requests, 'post', endpoint.post)
    return endpoint


@pytest.fixture
def app(tmp_path):
    """Create test application with an isolated database."""
    from app import create_app
    from database import init_db

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = str(tmp_path / 'creaparty_test.db')

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(app, client):
    """Test client signed in as the seeded admin."""
    response = client.post('/auth/login', json={
        'username': 'admin',
        'password': 'admin123'
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def make_product(app):
    """Factory creating catalog products."""
    from models.product import create_product, get_product_by_id

    def _make(name='Silla Tiffany', price=50.0, stock=10, available=True, category_id=None):
        product_id = create_product({
            'name': name,
            'price': price,
            'stock': stock,
            'available': available,
            'category_id': category_id,
        })
        return get_product_by_id(product_id)

    return _make


@pytest.fixture
def make_reservation(app):
    """Factory creating reservations that commit product units on a date."""
    from models.reservation import add_reservation_items, create_reservation

    def _make(event_date, items=(), service_tier='rental', status='confirmed', name='Ana López'):
        reservation_id = create_reservation(
            name=name,
            email='ana@example.com',
            phone='600123456',
            event_type='Boda',
            event_date=event_date,
            headcount=80,
            service_tier=service_tier,
            status=status,
            total=sum(product['price'] * quantity for product, quantity in items)
        )
        if items:
            add_reservation_items(reservation_id, [
                {
                    'product_id': product['id'],
                    'product_name': product['name'],
                    'quantity': quantity,
                    'unit_price': product['price'],
                    'subtotal': product['price'] * quantity,
                }
                for product, quantity in items
            ])
        return reservation_id

    return _make


@pytest.fixture
def make_quotation(app):
    """Factory creating pending quotations from (product, quantity) pairs."""
    from models.quotation import create_quotation_with_items, get_quotation_by_id

    def _make(items, event_date='2025-06-01', service_tier='rental', name='Carlos Ruiz'):
        quotation_id = create_quotation_with_items(
            name=name,
            email='carlos@example.com',
            phone='600987654',
            event_type='Cumpleaños',
            event_date=event_date,
            headcount=40,
            service_tier=service_tier,
            items=[
                {
                    'product_id': product['id'],
                    'product_name': product['name'],
                    'quantity': quantity,
                    'unit_price': product['price'],
                }
                for product, quantity in items
            ],
            message='Fiesta en el jardín'
        )
        return get_quotation_by_id(quotation_id)

    return _make
