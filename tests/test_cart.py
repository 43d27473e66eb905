"""
Tests for the cart value object, its session storage and the cart service.
"""

import json

import pytest

from models.cart import Cart, CartLine
from utils.exceptions import CapacityError


X = {'id': 1, 'name': 'Silla Tiffany', 'price': 50.0, 'stock': 10}
Y = {'id': 2, 'name': 'Mesa redonda', 'price': 30.0, 'stock': 4}


class TestCartAddItem:
    """Tests for Cart.add_item()."""

    def test_add_new_line(self):
        cart = Cart()
        result = cart.add_item(X, 2)

        assert result.ok is True
        assert cart.quantity_of(1) == 2
        assert cart.get_line(1).price == 50.0

    def test_quantity_below_one_is_raised_to_one(self):
        """A new line always starts with at least one unit."""
        cart = Cart()
        cart.add_item(X, 0)
        assert cart.quantity_of(1) == 1

        cart.add_item(Y, -3)
        assert cart.quantity_of(2) == 1

    def test_new_line_above_availability_is_rejected(self):
        """No line is created when availability is exceeded."""
        cart = Cart(event_date='2025-06-01')
        result = cart.add_item(X, 5, available_stock=2)

        assert result.ok is False
        assert isinstance(result.error, CapacityError)
        assert result.error.available == 2
        assert not cart.contains(1)

    def test_without_snapshot_stock_is_the_bound(self):
        cart = Cart()
        assert cart.add_item(Y, 5).ok is False
        assert cart.add_item(Y, 4).ok is True

    def test_existing_line_accumulates(self):
        cart = Cart()
        cart.add_item(X, 2)
        cart.add_item(X, 3)
        assert cart.quantity_of(1) == 5
        assert len(cart) == 1

    def test_existing_line_over_availability_keeps_prior_quantity(self):
        """Scenario: 3 in cart, 2 available, adding 2 more is refused with 'only 2'."""
        cart = Cart(event_date='2025-06-01')
        cart.add_item(X, 3)

        result = cart.add_item(X, 2, available_stock=2)

        assert result.ok is False
        assert result.error.available == 2
        assert 'Solo hay 2 unidades' in result.error.message
        assert cart.quantity_of(1) == 3


class TestCartUpdateQuantity:
    """Tests for Cart.update_quantity()."""

    def test_set_exact_quantity(self):
        cart = Cart()
        cart.add_item(X, 1)
        assert cart.update_quantity(1, 7).ok is True
        assert cart.quantity_of(1) == 7

    def test_below_one_removes_line(self):
        cart = Cart()
        cart.add_item(X, 3)
        cart.update_quantity(1, 0)
        assert not cart.contains(1)

    def test_above_snapshot_is_rejected(self):
        cart = Cart()
        cart.add_item(X, 1, available_stock=3)
        result = cart.update_quantity(1, 4)

        assert result.ok is False
        assert cart.quantity_of(1) == 1

    def test_unknown_product_is_noop(self):
        cart = Cart()
        assert cart.update_quantity(99, 3).ok is True
        assert cart.is_empty()

    def test_quantity_never_exceeds_known_availability(self):
        """After each successful mutation every line is within its snapshot."""
        cart = Cart()
        cart.add_item(X, 1, available_stock=4)
        cart.add_item(Y, 1, available_stock=2)

        for product_id, quantity in [(1, 3), (2, 5), (1, 9), (2, 2), (1, 4), (1, 5)]:
            result = cart.update_quantity(product_id, quantity)
            if result.ok:
                for line in cart.lines:
                    assert line.quantity <= line.max_quantity


class TestCartTotals:
    """Tests for totals across mutation sequences."""

    def test_total_is_sum_of_lines(self):
        cart = Cart()
        cart.add_item(X, 2)
        cart.add_item(Y, 1)
        assert cart.total() == 130.0
        assert cart.total_units() == 3

        cart.update_quantity(1, 3)
        cart.remove_item(2)
        assert cart.total() == sum(line.price * line.quantity for line in cart.lines) == 150.0

    def test_price_is_captured_when_added(self):
        """Later catalog prices do not change a line already in the cart."""
        cart = Cart()
        cart.add_item(dict(X), 1)
        cart.add_item(dict(X, price=80.0), 1)
        assert cart.total() == 100.0

    def test_clear_empties_lines_and_date(self):
        cart = Cart(event_date='2025-06-01')
        cart.add_item(X, 1)
        cart.clear()
        assert cart.is_empty()
        assert cart.event_date is None


class TestCartDate:
    """Tests for rebinding the cart date."""

    def test_set_event_date_clears_snapshots(self):
        cart = Cart(event_date='2025-06-01')
        cart.add_item(X, 2, available_stock=2, degraded=True)

        cart.set_event_date('2025-06-02')

        line = cart.get_line(1)
        assert line.available_stock is None
        assert line.degraded is False
        assert line.max_quantity == 10

    def test_refresh_never_shrinks_quantity(self):
        cart = Cart()
        cart.add_item(X, 5)
        cart.refresh_availability(1, 2)

        assert cart.quantity_of(1) == 5
        assert [line.product_id for line in cart.over_capacity_lines()] == [1]


class TestCartLineSerialization:

    def test_from_dict_accepts_stored_line(self):
        line = CartLine.from_dict({
            'product_id': '3', 'name': 'Arco floral', 'price': '120',
            'quantity': 2, 'stock': 1, 'available_stock': None
        })
        assert line.product_id == 3
        assert line.price == 120.0
        assert line.available_stock is None
        assert line.to_dict()['subtotal'] == 240.0


class TestCartStorage:
    """Tests for the session persistence adapter."""

    def test_save_and_load(self, app):
        from utils.cart_storage import CART_KEY, EVENT_DATE_KEY, load_cart, save_cart

        with app.test_request_context():
            from flask import session

            cart = Cart(event_date='2025-06-01')
            cart.add_item(X, 2, available_stock=8)
            save_cart(cart)

            assert json.loads(session[CART_KEY])[0]['quantity'] == 2
            assert session[EVENT_DATE_KEY] == '2025-06-01'

            loaded = load_cart()
            assert loaded.quantity_of(1) == 2
            assert loaded.event_date == '2025-06-01'
            assert loaded.get_line(1).available_stock == 8

    def test_empty_cart_removes_keys(self, app):
        from utils.cart_storage import CART_KEY, EVENT_DATE_KEY, save_cart

        with app.test_request_context():
            from flask import session

            session[CART_KEY] = '[]'
            session[EVENT_DATE_KEY] = '2025-06-01'
            save_cart(Cart())

            assert CART_KEY not in session
            assert EVENT_DATE_KEY not in session

    def test_corrupt_slot_is_treated_as_empty(self, app):
        from utils.cart_storage import CART_KEY, load_cart

        with app.test_request_context():
            from flask import session

            session[CART_KEY] = '{not json'
            assert load_cart().is_empty()

    def test_submission_token_issued_with_first_item(self, app):
        from utils.cart_storage import clear_cart, get_submission_token, save_cart

        with app.test_request_context():
            save_cart(Cart(event_date='2025-06-01'))
            assert get_submission_token() is None

            cart = Cart()
            cart.add_item(X, 1)
            save_cart(cart)
            token = get_submission_token()
            assert token

            cart.add_item(Y, 1)
            save_cart(cart)
            clear_cart()
            assert get_submission_token() == token


class TestCartService:
    """Tests for availability-aware cart operations."""

    def test_add_uses_availability_for_cart_date(self, app, make_product, make_reservation):
        from blueprints.public.services.cart_service import add_to_cart

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 8)])

        cart = Cart(event_date='2025-06-01')
        result = add_to_cart(cart, product['id'], 3)

        assert result.ok is False
        assert result.error.available == 2
        assert cart.is_empty()

    def test_scenario_existing_line_against_committed_units(self, app, make_product, make_reservation):
        """3 units carted before another event committed 8 of 10: adding 2 is refused."""
        from blueprints.public.services.cart_service import add_to_cart

        product = make_product(price=50.0, stock=10)
        cart = Cart(event_date='2025-06-01')
        assert add_to_cart(cart, product['id'], 3).ok is True

        make_reservation('2025-06-01', items=[(product, 8)])
        result = add_to_cart(cart, product['id'], 2)

        assert result.ok is False
        assert result.error.available == 2
        assert cart.quantity_of(product['id']) == 3

    def test_bind_cart_date_refreshes_every_line(self, app, make_product, make_reservation):
        from blueprints.public.services.cart_service import bind_cart_date

        chairs = make_product(name='Silla', stock=10)
        tables = make_product(name='Mesa', stock=5)
        make_reservation('2025-06-02', items=[(chairs, 9)])

        cart = Cart(event_date='2025-06-01')
        cart.add_item(chairs, 4, available_stock=10)
        cart.add_item(tables, 2, available_stock=5)

        over = bind_cart_date(cart, '2025-06-02')

        assert cart.event_date == '2025-06-02'
        assert cart.get_line(chairs['id']).available_stock == 1
        assert cart.get_line(tables['id']).available_stock == 5
        assert [line.product_id for line in over] == [chairs['id']]
        assert cart.quantity_of(chairs['id']) == 4

    def test_bind_cart_date_rejects_invalid_date(self, app):
        from blueprints.public.services.cart_service import bind_cart_date

        with pytest.raises(ValueError):
            bind_cart_date(Cart(), '01/06/2025')

    def test_unavailable_product_cannot_be_added(self, app, make_product):
        from blueprints.public.services.cart_service import add_to_cart
        from utils.exceptions import ProductNotFoundError

        product = make_product(available=False)
        with pytest.raises(ProductNotFoundError):
            add_to_cart(Cart(), product['id'])
