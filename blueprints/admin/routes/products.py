"""
Catalog management routes.
Product CRUD and category creation for the back office.
"""

import logging

from flask import request
from flask_login import login_required, current_user

from models.category import create_category, get_all_categories, get_category_by_id
from models.product import (
    create_product, delete_product, get_all_products, get_product_by_id, update_product
)
from utils.api_response import api_success, api_error
from utils.exceptions import ProductNotFoundError
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)


def register_routes(bp):
    """Register product and category routes on the blueprint."""

    @bp.route('/products', methods=['GET'])
    @login_required
    def list_products():
        """
        List every product, including those not offered for rent.

        Query params:
            category_id: Filter by category (optional)
        """
        category_id = request.args.get('category_id', type=int)
        products = get_all_products(category_id=category_id)
        return api_success(data=products, count=len(products))

    @bp.route('/products/<int:product_id>', methods=['GET'])
    @login_required
    def get_product(product_id):
        product = get_product_by_id(product_id)
        if not product:
            raise ProductNotFoundError(product_id)
        return api_success(data=product)

    @bp.route('/products', methods=['POST'])
    @login_required
    def create_product_route():
        """
        Create a product.

        Request body:
            name, price, stock: Required
            description, available, category_id, image_url: Optional
        """
        data = request.get_json(silent=True)
        if data is None:
            return api_error(MESSAGES['json_required'], status=400)

        product_id = create_product(data)
        logger.info(f"Product {product_id} created by {current_user.username}")
        return api_success(
            data=get_product_by_id(product_id),
            message=MESSAGES['product_created'],
            status=201
        )

    @bp.route('/products/<int:product_id>', methods=['PUT', 'PATCH'])
    @login_required
    def update_product_route(product_id):
        data = request.get_json(silent=True)
        if data is None:
            return api_error(MESSAGES['json_required'], status=400)

        update_product(product_id, data)
        return api_success(data=get_product_by_id(product_id), message=MESSAGES['product_updated'])

    @bp.route('/products/<int:product_id>', methods=['DELETE'])
    @login_required
    def delete_product_route(product_id):
        """Delete a product. Quotation and reservation lines keep their snapshot."""
        delete_product(product_id)
        logger.info(f"Product {product_id} deleted by {current_user.username}")
        return api_success(message=MESSAGES['product_deleted'])

    @bp.route('/categories', methods=['GET'])
    @login_required
    def list_categories():
        return api_success(data=get_all_categories())

    @bp.route('/categories', methods=['POST'])
    @login_required
    def create_category_route():
        data = request.get_json(silent=True)
        if data is None:
            return api_error(MESSAGES['json_required'], status=400)

        category_id = create_category(data.get('name'), data.get('description') or '')
        return api_success(
            data=get_category_by_id(category_id),
            message=MESSAGES['category_created'],
            status=201
        )
