"""
Cart API routes.
The cart lives in the visitor's session and is saved after every change.
"""

from flask import request

from blueprints.public.services.cart_service import (
    add_to_cart, bind_cart_date, has_degraded_lines, update_cart_quantity
)
from utils.api_response import api_success
from utils.cart_storage import clear_cart, load_cart, save_cart
from utils.exceptions import ValidationError
from utils.messages import MESSAGES


def _parse_int(value, field: str = 'quantity', default: int = None) -> int:
    """Integer from the request body or ValidationError on that field."""
    if value is None and default is not None:
        return default
    if isinstance(value, bool):
        raise ValidationError({field: MESSAGES['invalid_quantity']})
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        raise ValidationError({field: MESSAGES['invalid_quantity']})


def _cart_response(cart, message: str = None, **extra):
    warning = MESSAGES['availability_unconfirmed'] if has_degraded_lines(cart) else None
    return api_success(data=cart.to_dict(), message=message, warning=warning, **extra)


def register_routes(bp):
    """Register cart routes on the blueprint."""

    @bp.route('/cart', methods=['GET'])
    def get_cart():
        return _cart_response(load_cart())

    @bp.route('/cart/date', methods=['POST'])
    def set_cart_date():
        """
        Bind the cart to an event date.

        Request body:
            date: Event date (YYYY-MM-DD), or null to unbind

        Returns:
            Cart with refreshed availability; over_capacity lists product ids
            whose quantity is now above availability
        """
        data = request.get_json(silent=True) or {}
        cart = load_cart()

        try:
            over_capacity = bind_cart_date(cart, data.get('date'))
        except ValueError:
            raise ValidationError({'date': MESSAGES['invalid_date']})

        save_cart(cart)

        message = MESSAGES['cart_over_capacity'] if over_capacity else MESSAGES['cart_updated']
        return _cart_response(
            cart,
            message=message,
            over_capacity=[line.product_id for line in over_capacity]
        )

    @bp.route('/cart/items', methods=['POST'])
    def add_cart_item():
        """
        Add a product to the cart.

        Request body:
            product_id: Product ID (required)
            quantity: Units to add (default 1)
        """
        data = request.get_json(silent=True) or {}
        if data.get('product_id') is None:
            raise ValidationError({'product_id': MESSAGES['field_required']})

        product_id = _parse_int(data.get('product_id'), field='product_id')
        quantity = _parse_int(data.get('quantity'), default=1)

        cart = load_cart()
        result = add_to_cart(cart, product_id, quantity)
        if not result.ok:
            raise result.error

        save_cart(cart)
        return _cart_response(cart, message=MESSAGES['cart_updated'])

    @bp.route('/cart/items/<int:product_id>', methods=['PATCH'])
    def update_cart_item(product_id):
        """
        Set a line's quantity. Below 1 removes the line.

        Request body:
            quantity: New quantity (required)
        """
        data = request.get_json(silent=True) or {}
        quantity = _parse_int(data.get('quantity'))

        cart = load_cart()
        result = update_cart_quantity(cart, product_id, quantity)
        if not result.ok:
            raise result.error

        save_cart(cart)
        return _cart_response(cart, message=MESSAGES['cart_updated'])

    @bp.route('/cart/items/<int:product_id>', methods=['DELETE'])
    def remove_cart_item(product_id):
        cart = load_cart()
        cart.remove_item(product_id)
        save_cart(cart)
        return _cart_response(cart, message=MESSAGES['cart_updated'])

    @bp.route('/cart', methods=['DELETE'])
    def empty_cart():
        clear_cart()
        return api_success(data=load_cart().to_dict(), message=MESSAGES['cart_cleared'])
