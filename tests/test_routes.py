"""
Route tests.
Public storefront, authentication and admin endpoints through the test client.
"""

import threading

import pytest


QUOTATION_BODY = {
    'name': 'María García',
    'email': 'maria@example.com',
    'phone': '600111222',
    'event_type': 'Boda',
    'headcount': 100,
    'service_tier': 'rental',
    'message': 'Jardín',
}


class TestPublicRoutes:
    """Catalog and availability endpoints."""

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'ok'

    def test_products_list_only_available(self, client, make_product):
        make_product(name='Visible')
        make_product(name='Oculto', available=False)

        response = client.get('/api/products')
        names = [p['name'] for p in response.get_json()['data']]
        assert names == ['Visible']

    def test_unknown_product_is_404(self, client):
        response = client.get('/api/products/999')
        assert response.status_code == 404
        assert response.get_json()['code'] == 'NOT_FOUND'

    def test_categories(self, client):
        response = client.get('/api/categories')
        assert len(response.get_json()['data']) == 5

    def test_product_availability(self, client, make_product, make_reservation):
        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 4)])

        response = client.get(f"/api/products/{product['id']}/availability?date=2025-06-01")
        data = response.get_json()

        assert response.status_code == 200
        assert data['data']['available'] == 6
        assert data['data']['degraded'] is False
        assert 'warning' not in data

    def test_availability_requires_date(self, client, make_product):
        product = make_product()
        response = client.get(f"/api/products/{product['id']}/availability")
        assert response.status_code == 400
        assert 'date' in response.get_json()['errors']

    def test_calendar_shows_only_decoration_dates(self, client, make_reservation):
        make_reservation('2025-07-04', service_tier='decoration')
        make_reservation('2025-07-05', service_tier='rental')

        response = client.get('/api/availability/calendar?date_from=2025-07-01&date_to=2025-07-31')
        assert response.get_json()['data']['blocked_dates'] == ['2025-07-04']

    def test_gallery(self, client, app):
        from models.gallery import create_gallery_image

        create_gallery_image('Boda en la playa', 'https://cdn.example.com/1.jpg', category='bodas')
        create_gallery_image('Oficina', 'https://cdn.example.com/2.jpg', category='corporativos')

        response = client.get('/api/gallery?category=bodas')
        assert [img['title'] for img in response.get_json()['data']] == ['Boda en la playa']


class TestCartRoutes:
    """Session cart endpoints."""

    def test_add_update_remove(self, client, make_product):
        product = make_product(price=50.0, stock=10)

        response = client.post('/api/cart/items', json={'product_id': product['id'], 'quantity': 2})
        assert response.status_code == 200
        assert response.get_json()['data']['total'] == 100.0

        response = client.patch(f"/api/cart/items/{product['id']}", json={'quantity': 4})
        assert response.get_json()['data']['total_units'] == 4

        response = client.delete(f"/api/cart/items/{product['id']}")
        assert response.get_json()['data']['items'] == []

    def test_cart_persists_between_requests(self, client, make_product):
        product = make_product()
        client.post('/api/cart/items', json={'product_id': product['id']})

        data = client.get('/api/cart').get_json()['data']
        assert data['items'][0]['quantity'] == 1

    def test_capacity_rejection(self, client, make_product, make_reservation):
        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 8)])

        client.post('/api/cart/date', json={'date': '2025-06-01'})
        response = client.post('/api/cart/items', json={'product_id': product['id'], 'quantity': 3})

        assert response.status_code == 409
        body = response.get_json()
        assert body['code'] == 'CAPACITY_EXCEEDED'
        assert body['available'] == 2
        assert client.get('/api/cart').get_json()['data']['items'] == []

    def test_date_change_reports_over_capacity(self, client, make_product, make_reservation):
        product = make_product(stock=10)
        make_reservation('2025-06-02', items=[(product, 9)])

        client.post('/api/cart/date', json={'date': '2025-06-01'})
        client.post('/api/cart/items', json={'product_id': product['id'], 'quantity': 5})
        response = client.post('/api/cart/date', json={'date': '2025-06-02'})

        body = response.get_json()
        assert body['over_capacity'] == [product['id']]
        assert body['data']['event_date'] == '2025-06-02'
        assert body['data']['items'][0]['available_stock'] == 1

    def test_invalid_date(self, client):
        response = client.post('/api/cart/date', json={'date': '32/13/2025'})
        assert response.status_code == 400

    def test_invalid_quantity(self, client, make_product):
        product = make_product()
        response = client.post('/api/cart/items', json={'product_id': product['id'], 'quantity': 'dos'})
        assert response.status_code == 400
        assert 'quantity' in response.get_json()['errors']

    def test_clear(self, client, make_product):
        product = make_product()
        client.post('/api/cart/date', json={'date': '2025-06-01'})
        client.post('/api/cart/items', json={'product_id': product['id']})

        response = client.delete('/api/cart')
        data = response.get_json()['data']
        assert data['items'] == []
        assert data['event_date'] is None


class TestQuotationRoute:
    """Quotation submission endpoint."""

    def test_submit_empties_cart(self, client, make_product):
        """Scenario: two lines, total 130, cart empty afterwards."""
        x = make_product(name='Silla', price=50.0, stock=10)
        y = make_product(name='Mesa', price=30.0, stock=5)

        client.post('/api/cart/date', json={'date': '2025-06-01'})
        client.post('/api/cart/items', json={'product_id': x['id'], 'quantity': 2})
        client.post('/api/cart/items', json={'product_id': y['id'], 'quantity': 1})

        response = client.post('/api/quotations', json=QUOTATION_BODY)
        body = response.get_json()

        assert response.status_code == 201
        assert body['data']['total'] == 130.0
        assert body['data']['event_date'] == '2025-06-01'
        assert len(body['data']['items']) == 2

        cart = client.get('/api/cart').get_json()['data']
        assert cart['items'] == []
        assert cart['event_date'] is None

    def test_validation_errors_keep_cart(self, client, make_product):
        product = make_product()
        client.post('/api/cart/items', json={'product_id': product['id']})

        response = client.post('/api/quotations', json=dict(QUOTATION_BODY, email='nope'))

        assert response.status_code == 400
        assert 'email' in response.get_json()['errors']
        assert len(client.get('/api/cart').get_json()['data']['items']) == 1

    def test_concurrent_first_submits_create_one_quotation(self, app, client, monkeypatch, make_product):
        """Double click on the first submit: same session cookie, two requests in flight."""
        from blueprints.public.services import quotation_service
        from database import get_db

        product = make_product()
        client.post('/api/cart/date', json={'date': '2025-06-01'})
        client.post('/api/cart/items', json={'product_id': product['id']})

        second_client = app.test_client()
        second_client.set_cookie('session', client.get_cookie('session').value)

        entered = threading.Event()
        release = threading.Event()
        create_with_items = quotation_service.create_quotation_with_items

        def slow_create(**kwargs):
            entered.set()
            release.wait(5)
            return create_with_items(**kwargs)

        monkeypatch.setattr(quotation_service, 'create_quotation_with_items', slow_create)

        statuses = {}

        def submit(name, test_client):
            statuses[name] = test_client.post('/api/quotations', json=QUOTATION_BODY).status_code

        first = threading.Thread(target=submit, args=('first', client))
        first.start()
        assert entered.wait(5)

        submit('second', second_client)
        release.set()
        first.join(10)

        assert statuses == {'first': 201, 'second': 409}
        count = get_db().execute('SELECT COUNT(*) FROM quotations').fetchone()[0]
        assert count == 1

    def test_empty_cart(self, client):
        response = client.post('/api/quotations', json=dict(QUOTATION_BODY, event_date='2025-06-01'))
        assert response.status_code == 400
        assert 'items' in response.get_json()['errors']

    def test_json_required(self, client):
        response = client.post('/api/quotations', data='name=x')
        assert response.status_code == 400


class TestAuthRoutes:
    """Login, logout and identity."""

    def test_login_success(self, client):
        response = client.post('/auth/login', json={'username': 'admin', 'password': 'admin123'})
        assert response.status_code == 200
        assert response.get_json()['data']['username'] == 'admin'

    def test_login_wrong_password(self, client):
        response = client.post('/auth/login', json={'username': 'admin', 'password': 'x'})
        assert response.status_code == 401

    def test_login_missing_fields(self, client):
        response = client.post('/auth/login', json={'username': 'admin'})
        assert response.status_code == 400
        assert 'password' in response.get_json()['errors']

    def test_me_and_logout(self, authenticated_client):
        assert authenticated_client.get('/auth/me').get_json()['data']['username'] == 'admin'

        assert authenticated_client.post('/auth/logout').status_code == 200
        assert authenticated_client.get('/auth/me').status_code == 401


class TestAdminRoutes:
    """Back-office endpoints."""

    @pytest.mark.parametrize('method,url', [
        ('get', '/admin/dashboard'),
        ('get', '/admin/quotations'),
        ('get', '/admin/reservations'),
        ('post', '/admin/products'),
        ('post', '/admin/quotations/1/convert'),
        ('post', '/admin/gallery'),
    ])
    def test_requires_login(self, client, method, url):
        response = getattr(client, method)(url, json={})
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_quotation_workflow(self, authenticated_client, make_product, make_quotation, notifications):
        product = make_product(price=50.0)
        quotation = make_quotation([(product, 2)])

        response = authenticated_client.post(f"/admin/quotations/{quotation['id']}/approve", json={})
        assert response.get_json()['data']['status'] == 'approved'

        response = authenticated_client.post(f"/admin/quotations/{quotation['id']}/convert")
        assert response.status_code == 201
        reservation = response.get_json()['data']
        assert reservation['status'] == 'confirmed'
        assert reservation['items'][0]['quantity'] == 2

        response = authenticated_client.post(f"/admin/quotations/{quotation['id']}/convert")
        assert response.status_code == 409
        assert response.get_json()['code'] == 'DUPLICATE_CONVERSION'

        listed = authenticated_client.get('/admin/quotations?status=approved').get_json()['data']
        assert listed[0]['reservation_id'] == reservation['id']
        assert len(notifications.of_type('quotation_approved')) == 1

    def test_reject_with_reason(self, authenticated_client, make_product, make_quotation):
        quotation = make_quotation([(make_product(), 1)])

        response = authenticated_client.post(
            f"/admin/quotations/{quotation['id']}/reject", json={'reason': 'Sin disponibilidad'}
        )
        assert response.get_json()['data']['rejection_reason'] == 'Sin disponibilidad'

        response = authenticated_client.post(f"/admin/quotations/{quotation['id']}/convert")
        assert response.status_code == 409
        assert response.get_json()['code'] == 'INVALID_TRANSITION'

    def test_reservation_status_changes(self, authenticated_client, make_reservation):
        reservation_id = make_reservation('2025-06-01', status='pending')

        response = authenticated_client.post(
            f'/admin/reservations/{reservation_id}/status', json={'status': 'completed'}
        )
        assert response.status_code == 200
        assert response.get_json()['message'] == 'Reserva actualizada a: Completada'

        response = authenticated_client.post(
            f'/admin/reservations/{reservation_id}/status', json={'status': 'pending'}
        )
        assert response.status_code == 409

        detail = authenticated_client.get(f'/admin/reservations/{reservation_id}').get_json()['data']
        assert [h['new_status'] for h in detail['history']] == ['pending', 'completed']

    def test_create_reservation(self, authenticated_client, make_product):
        product = make_product(price=10.0)
        response = authenticated_client.post('/admin/reservations', json={
            'name': 'Pedro Sánchez',
            'email': 'pedro@example.com',
            'event_type': 'Bautizo',
            'event_date': '2025-11-11',
            'service_tier': 'decoration',
            'status': 'confirmed',
            'items': [{'product_id': product['id'], 'quantity': 3}],
        })
        body = response.get_json()

        assert response.status_code == 201
        assert body['data']['created_by'] == 'admin'
        assert body['data']['total'] == 30.0

    def test_product_crud(self, authenticated_client):
        response = authenticated_client.post('/admin/products', json={
            'name': 'Candelabro', 'price': 15, 'stock': 12
        })
        assert response.status_code == 201
        product_id = response.get_json()['data']['id']

        response = authenticated_client.patch(f'/admin/products/{product_id}', json={'stock': 20})
        assert response.get_json()['data']['stock'] == 20

        response = authenticated_client.post('/admin/products', json={'name': '', 'price': -1, 'stock': 'x'})
        assert response.status_code == 400
        assert set(response.get_json()['errors']) == {'name', 'price', 'stock'}

        assert authenticated_client.delete(f'/admin/products/{product_id}').status_code == 200
        assert authenticated_client.delete(f'/admin/products/{product_id}').status_code == 404

    def test_gallery_management(self, authenticated_client):
        response = authenticated_client.post('/admin/gallery', json={
            'title': 'Arco de globos', 'url': 'https://cdn.example.com/arco.jpg', 'category': 'cumpleanos'
        })
        assert response.status_code == 201
        image_id = response.get_json()['data']['id']

        assert authenticated_client.delete(f'/admin/gallery/{image_id}').status_code == 200
        assert authenticated_client.delete(f'/admin/gallery/{image_id}').status_code == 404

    def test_dashboard(self, authenticated_client, make_product, make_quotation):
        make_quotation([(make_product(), 1)])

        data = authenticated_client.get('/admin/dashboard').get_json()['data']
        assert data['pending_quotations'] == 1
        assert data['product_count'] == 1
