"""
Cart Service - Connects the cart value object with stock availability.

The Cart itself never looks anything up. These helpers resolve availability
for the cart's date before each mutation and hand the snapshot to the cart.
"""

import logging

from models.cart import Cart, CartResult
from models.product import get_product_by_id
from models.stock import StockAvailability, get_available_stock, get_available_stock_bulk
from utils.datetime_helpers import to_date_str
from utils.exceptions import ProductNotFoundError

logger = logging.getLogger(__name__)


def resolve_line_availability(product_id: int, event_date: str | None) -> StockAvailability | None:
    """Availability of a product on the cart's date, or None without a date."""
    if not event_date:
        return None
    return get_available_stock(product_id, event_date)


def get_rentable_product(product_id: int) -> dict:
    """
    Product that can be added to a cart.

    Raises:
        ProductNotFoundError: Unknown product or product not offered for rent
    """
    product = get_product_by_id(product_id)
    if not product or not product.get('available'):
        raise ProductNotFoundError(product_id)
    return product


def add_to_cart(cart: Cart, product_id: int, quantity: int = 1) -> CartResult:
    """
    Add a product to the cart, bounded by its availability on the cart's date.

    Without a date the product's total stock is the bound.
    """
    product = get_rentable_product(product_id)
    availability = resolve_line_availability(product_id, cart.event_date)

    if availability is None:
        return cart.add_item(product, quantity)

    return cart.add_item(
        product,
        quantity,
        available_stock=availability.available,
        degraded=availability.degraded
    )


def update_cart_quantity(cart: Cart, product_id: int, quantity: int) -> CartResult:
    """Set a line's quantity after refreshing its availability snapshot."""
    if quantity >= 1 and cart.contains(product_id) and cart.event_date:
        try:
            availability = get_available_stock(product_id, cart.event_date)
            cart.refresh_availability(product_id, availability.available, availability.degraded)
        except ProductNotFoundError:
            logger.info(f"Product {product_id} no longer exists, keeping cart snapshot")

    return cart.update_quantity(product_id, quantity)


def bind_cart_date(cart: Cart, event_date) -> list:
    """
    Bind the cart to a new event date and re-resolve every line.

    Args:
        cart: Cart to rebind
        event_date: New date (date, datetime or ISO string), or None to unbind

    Returns:
        List of CartLine whose quantity is above the new availability.
        Quantities are never shrunk here; the next update enforces the bound.

    Raises:
        ValueError: If event_date is not a calendar date
    """
    date_str = to_date_str(event_date) if event_date else None
    cart.set_event_date(date_str)

    if date_str is None or cart.is_empty():
        return []

    product_ids = [line.product_id for line in cart.lines]
    availability = get_available_stock_bulk(product_ids, date_str)

    for product_id, result in availability.items():
        cart.refresh_availability(product_id, result.available, result.degraded)

    return cart.over_capacity_lines()


def has_degraded_lines(cart: Cart) -> bool:
    return any(line.degraded for line in cart.lines)
