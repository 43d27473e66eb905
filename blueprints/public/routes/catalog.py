"""
Catalog API routes.
Products, categories, date availability and the decoration calendar.
"""

from flask import current_app, request
from flask_wtf.csrf import generate_csrf

from models.category import get_all_categories
from models.product import get_all_products, get_product_by_id
from models.reservation import get_calendar_blocks
from models.stock import get_available_stock
from utils.api_response import api_success
from utils.datetime_helpers import to_date_str
from utils.exceptions import ProductNotFoundError, ValidationError
from utils.messages import MESSAGES


def _date_arg(name: str, required: bool = False) -> str | None:
    """Read a YYYY-MM-DD query argument or raise ValidationError."""
    value = request.args.get(name)
    if not value:
        if required:
            raise ValidationError({name: MESSAGES['date_required']})
        return None
    try:
        return to_date_str(value)
    except ValueError:
        raise ValidationError({name: MESSAGES['invalid_date']})


def register_routes(bp):
    """Register catalog routes on the blueprint."""

    @bp.route('/health', methods=['GET'])
    def health():
        """Liveness check."""
        return api_success(data={
            'status': 'ok',
            'app': current_app.config['APP_NAME'],
            'version': current_app.config['APP_VERSION'],
        })

    @bp.route('/csrf-token', methods=['GET'])
    def csrf_token():
        """CSRF token for clients posting to the API."""
        return api_success(data={'csrf_token': generate_csrf()})

    @bp.route('/products', methods=['GET'])
    def list_products():
        """
        List products offered for rent.

        Query params:
            category_id: Filter by category (optional)
        """
        category_id = request.args.get('category_id', type=int)
        products = get_all_products(category_id=category_id, available_only=True)
        return api_success(data=products, count=len(products))

    @bp.route('/products/<int:product_id>', methods=['GET'])
    def get_product(product_id):
        product = get_product_by_id(product_id)
        if not product or not product.get('available'):
            raise ProductNotFoundError(product_id)
        return api_success(data=product)

    @bp.route('/categories', methods=['GET'])
    def list_categories():
        return api_success(data=get_all_categories())

    @bp.route('/products/<int:product_id>/availability', methods=['GET'])
    def product_availability(product_id):
        """
        Units of a product available on a date.

        Query params:
            date: Event date (YYYY-MM-DD), required
        """
        event_date = _date_arg('date', required=True)
        availability = get_available_stock(product_id, event_date)

        warning = None
        if availability.degraded:
            warning = MESSAGES['availability_unconfirmed']

        return api_success(data=availability.to_dict(), warning=warning)

    @bp.route('/availability/calendar', methods=['GET'])
    def availability_calendar():
        """
        Dates blocked for decoration services.

        Query params:
            date_from: First date (YYYY-MM-DD), optional
            date_to: Last date (YYYY-MM-DD), optional
        """
        date_from = _date_arg('date_from')
        date_to = _date_arg('date_to')
        blocks = get_calendar_blocks(date_from, date_to)

        return api_success(data={
            'date_from': date_from,
            'date_to': date_to,
            'blocked_dates': sorted({block['date'] for block in blocks}),
        })
