"""
Quotation submission route.
Turns the session cart into a pending quotation.
"""

from flask import request

from blueprints.public.services.quotation_service import submit_quotation
from utils.api_response import api_success, api_error
from utils.cart_storage import clear_cart, get_submission_token, load_cart
from utils.messages import MESSAGES


def register_routes(bp):
    """Register quotation routes on the blueprint."""

    @bp.route('/quotations', methods=['POST'])
    def create_quotation():
        """
        Submit the cart as a quotation request.

        Request body:
            name, email, phone: Contact (required)
            event_type, event_date, headcount: Event (required; event_date
                defaults to the cart's date)
            service_tier: 'rental' or 'decoration' (required)
            message: Free text (optional)

        Returns:
            201 with the quotation; the cart and its date are cleared
        """
        data = request.get_json(silent=True)
        if data is None:
            return api_error(MESSAGES['json_required'], status=400)

        cart = load_cart()

        contact = {
            'name': data.get('name'),
            'email': data.get('email'),
            'phone': data.get('phone'),
        }
        event = {
            'event_type': data.get('event_type'),
            'event_date': data.get('event_date') or cart.event_date,
            'headcount': data.get('headcount'),
            'message': data.get('message'),
        }

        quotation = submit_quotation(
            contact, event, data.get('service_tier'), cart,
            guard_key=get_submission_token()
        )
        if quotation is None:
            return api_error(MESSAGES['submission_in_progress'], status=409)

        clear_cart()
        return api_success(data=quotation, message=MESSAGES['quotation_submitted'], status=201)
