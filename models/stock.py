"""
Date-scoped stock availability.

Units of a product available on a calendar day are its total stock minus the
units committed by every non-cancelled reservation whose event falls on that
same day. Rentals have no duration: only same-day overlap counts.

Results are point-in-time snapshots, never holds. When the computation
cannot be evaluated the resolver degrades to the product's total stock and
flags the result as degraded, so callers can keep working without claiming
the units are confirmed available.
"""

import logging
import sqlite3
from typing import NamedTuple

from database import get_db
from utils.datetime_helpers import to_date_str
from utils.exceptions import ProductNotFoundError, PersistenceError

logger = logging.getLogger(__name__)

# Reservation statuses that stop consuming stock
RELEASING_STATUSES = ('cancelled',)


class StockAvailability(NamedTuple):
    """Units of one product available on one date."""

    product_id: int
    date: str
    available: int
    total_stock: int
    degraded: bool = False

    @property
    def confirmed(self) -> bool:
        """True when the value comes from the reservation ledger, not the fallback."""
        return not self.degraded

    def to_dict(self) -> dict:
        return {
            'product_id': self.product_id,
            'date': self.date,
            'available': self.available,
            'total_stock': self.total_stock,
            'degraded': self.degraded,
        }


def get_stock_disponible(product_id: int, date: str) -> int | None:
    """
    Compute units of a product not committed on a date.

    Args:
        product_id: Product ID
        date: Event date (YYYY-MM-DD)

    Returns:
        int >= 0, or None if the product does not exist

    Raises:
        sqlite3.Error: If the query fails
    """
    db = get_db()
    cursor = db.cursor()

    placeholders = ','.join('?' * len(RELEASING_STATUSES))
    cursor.execute(f'''
        SELECT p.stock - COALESCE((
            SELECT SUM(rli.quantity)
            FROM reservation_line_items rli
            JOIN reservations r ON rli.reservation_id = r.id
            WHERE rli.product_id = p.id
              AND r.event_date = ?
              AND r.status NOT IN ({placeholders})
        ), 0) as available
        FROM products p
        WHERE p.id = ?
    ''', [date, *RELEASING_STATUSES, product_id])

    row = cursor.fetchone()
    if row is None:
        return None
    return max(0, int(row['available']))


def _get_total_stock(product_id: int) -> int:
    """Read products.stock or raise ProductNotFoundError."""
    db = get_db()
    cursor = db.cursor()
    try:
        cursor.execute('SELECT stock FROM products WHERE id = ?', (product_id,))
        row = cursor.fetchone()
    except sqlite3.Error as e:
        raise PersistenceError(f'reading stock of product {product_id}: {e}') from e

    if row is None:
        raise ProductNotFoundError(product_id)
    return max(0, int(row['stock']))


def get_available_stock(product_id: int, date) -> StockAvailability:
    """
    Resolve units of a product available on a date.

    Args:
        product_id: Product ID (must exist)
        date: date, datetime or 'YYYY-MM-DD[...]'; time of day is ignored

    Returns:
        StockAvailability; degraded=True when the value is the total stock
        fallback because the availability computation failed

    Raises:
        ProductNotFoundError: If the product does not exist
        ValueError: If date is not a calendar date
    """
    date_str = to_date_str(date)
    total_stock = _get_total_stock(product_id)

    try:
        available = get_stock_disponible(product_id, date_str)
    except (sqlite3.Error, TypeError, ValueError, KeyError) as e:
        logger.warning(
            f"Availability for product {product_id} on {date_str} degraded to total stock: {e}"
        )
        return StockAvailability(product_id, date_str, total_stock, total_stock, degraded=True)

    if available is None:
        raise ProductNotFoundError(product_id)

    return StockAvailability(product_id, date_str, available, total_stock)


def get_available_stock_bulk(product_ids: list, date) -> dict:
    """
    Resolve availability for several products on one date.

    Returns:
        dict: {product_id: StockAvailability}; unknown product ids are skipped
    """
    result = {}
    for product_id in product_ids:
        try:
            result[product_id] = get_available_stock(product_id, date)
        except ProductNotFoundError:
            continue
    return result
