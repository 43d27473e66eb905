"""
Tests for date-scoped stock availability.
"""

import sqlite3
from datetime import date, datetime

import pytest

from utils.exceptions import ProductNotFoundError


class TestGetAvailableStock:
    """Tests for get_available_stock()."""

    def test_no_reservations_returns_total_stock(self, app, make_product):
        """Without reservations the whole stock is available."""
        from models.stock import get_available_stock

        product = make_product(stock=10)
        result = get_available_stock(product['id'], '2025-06-01')

        assert result.available == 10
        assert result.total_stock == 10
        assert result.degraded is False
        assert result.confirmed is True

    def test_same_day_reservation_consumes_units(self, app, make_product, make_reservation):
        """Units on a reservation for the same date are subtracted."""
        from models.stock import get_available_stock

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 3)])

        assert get_available_stock(product['id'], '2025-06-01').available == 7

    def test_other_dates_are_unaffected(self, app, make_product, make_reservation):
        """Only same-day overlap counts."""
        from models.stock import get_available_stock

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 3)])

        assert get_available_stock(product['id'], '2025-06-02').available == 10
        assert get_available_stock(product['id'], '2025-05-31').available == 10

    def test_cancelled_reservations_release_units(self, app, make_product, make_reservation):
        """Cancelled reservations do not consume stock."""
        from models.stock import get_available_stock

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 4)], status='cancelled')

        assert get_available_stock(product['id'], '2025-06-01').available == 10

    def test_pending_and_completed_reservations_consume_units(self, app, make_product, make_reservation):
        from models.stock import get_available_stock

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 2)], status='pending')
        make_reservation('2025-06-01', items=[(product, 3)], status='completed')

        assert get_available_stock(product['id'], '2025-06-01').available == 5

    def test_never_negative_when_overbooked(self, app, make_product, make_reservation):
        """Overbooked dates report zero, not a negative count."""
        from models.stock import get_available_stock

        product = make_product(stock=5)
        make_reservation('2025-06-01', items=[(product, 4)])
        make_reservation('2025-06-01', items=[(product, 4)])

        assert get_available_stock(product['id'], '2025-06-01').available == 0

    def test_never_negative_for_any_date(self, app, make_product, make_reservation):
        """Availability is >= 0 across a range of dates and loads."""
        from models.stock import get_available_stock

        product = make_product(stock=3)
        for day in range(1, 6):
            make_reservation(f'2025-06-0{day}', items=[(product, day)])

        for day in range(1, 8):
            assert get_available_stock(product['id'], f'2025-06-0{day}').available >= 0

    def test_time_of_day_is_ignored(self, app, make_product, make_reservation):
        """Datetimes and ISO strings with a time part resolve to the day."""
        from models.stock import get_available_stock

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 3)])

        assert get_available_stock(product['id'], datetime(2025, 6, 1, 18, 30)).available == 7
        assert get_available_stock(product['id'], '2025-06-01T23:59:00').available == 7
        assert get_available_stock(product['id'], date(2025, 6, 1)).date == '2025-06-01'

    def test_unknown_product_raises(self, app):
        from models.stock import get_available_stock

        with pytest.raises(ProductNotFoundError):
            get_available_stock(9999, '2025-06-01')

    def test_invalid_date_raises_value_error(self, app, make_product):
        from models.stock import get_available_stock

        product = make_product()
        with pytest.raises(ValueError):
            get_available_stock(product['id'], 'mañana')


class TestDegradedAvailability:
    """Tests for the fallback when the computation fails."""

    def test_store_error_degrades_to_total_stock(self, app, make_product, make_reservation, monkeypatch):
        """A failing computation returns total stock flagged as degraded."""
        import models.stock as stock

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 3)])

        def failing(product_id, date):
            raise sqlite3.OperationalError('database is locked')

        monkeypatch.setattr(stock, 'get_stock_disponible', failing)
        result = stock.get_available_stock(product['id'], '2025-06-01')

        assert result.available == 10
        assert result.degraded is True
        assert result.confirmed is False
        assert result.to_dict()['degraded'] is True

    def test_unexpected_shape_degrades(self, app, make_product, monkeypatch):
        import models.stock as stock

        product = make_product(stock=6)
        monkeypatch.setattr(stock, 'get_stock_disponible', lambda product_id, date: int('n/a'))

        result = stock.get_available_stock(product['id'], '2025-06-01')
        assert result.degraded is True
        assert result.available == 6


class TestTierIndependence:
    """Both tiers consume stock the same way."""

    def test_rental_and_decoration_reduce_stock_identically(self, app, make_product, make_reservation):
        """Scenario: decoration and rental on the same date each subtract their units."""
        from models.stock import get_available_stock

        product = make_product(stock=20)
        make_reservation('2025-07-04', items=[(product, 5)], service_tier='decoration')
        assert get_available_stock(product['id'], '2025-07-04').available == 15

        make_reservation('2025-07-04', items=[(product, 5)], service_tier='rental')
        assert get_available_stock(product['id'], '2025-07-04').available == 10

        assert get_available_stock(product['id'], '2025-07-05').available == 20

    def test_bulk_skips_unknown_products(self, app, make_product):
        from models.stock import get_available_stock_bulk

        product = make_product(stock=4)
        result = get_available_stock_bulk([product['id'], 9999], '2025-06-01')

        assert list(result) == [product['id']]
        assert result[product['id']].available == 4

    def test_stock_column_is_never_mutated(self, app, make_product, make_reservation):
        from models.product import get_product_by_id

        product = make_product(stock=10)
        make_reservation('2025-06-01', items=[(product, 7)])

        assert get_product_by_id(product['id'])['stock'] == 10
