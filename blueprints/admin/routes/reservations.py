"""
Reservation management routes.
List, inspect, create and move reservations through their statuses.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.admin.services.reservation_service import (
    create_direct_reservation, update_reservation_status
)
from models.reservation import (
    RESERVATION_STATUSES, get_all_reservations, get_calendar_blocks,
    get_reservation_by_id, get_status_history
)
from utils.api_response import api_success, api_error
from utils.exceptions import NotFoundError, ValidationError
from utils.messages import MESSAGES, get_message


def register_routes(bp):
    """Register reservation routes on the blueprint."""

    @bp.route('/reservations', methods=['GET'])
    @login_required
    def list_reservations():
        """
        List reservations by event date.

        Query params:
            status: Filter by status (optional)
            search: Name, email or event type (optional)
            date_from, date_to: Event date range (optional)
        """
        status = request.args.get('status') or None
        if status and status not in RESERVATION_STATUSES:
            raise ValidationError({'status': MESSAGES['invalid_status']})

        reservations = get_all_reservations(
            status=status,
            search=request.args.get('search'),
            date_from=request.args.get('date_from'),
            date_to=request.args.get('date_to')
        )
        return api_success(data=reservations, count=len(reservations))

    @bp.route('/reservations/calendar', methods=['GET'])
    @login_required
    def reservations_calendar():
        """Decoration reservations blocking dates, with their ids."""
        blocks = get_calendar_blocks(request.args.get('date_from'), request.args.get('date_to'))
        return api_success(data=blocks)

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    @login_required
    def get_reservation(reservation_id):
        reservation = get_reservation_by_id(reservation_id)
        if not reservation:
            raise NotFoundError('reservation', reservation_id)
        reservation['history'] = get_status_history(reservation_id)
        return api_success(data=reservation)

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def create_reservation_route():
        """
        Create a reservation without a quotation.

        Request body:
            name, email, event_type, event_date, service_tier: Required
            phone, headcount, message, notes, status, total: Optional
            items: [{product_id, quantity}] (optional)
        """
        data = request.get_json(silent=True)
        if data is None:
            return api_error(MESSAGES['json_required'], status=400)

        reservation = create_direct_reservation(data, created_by=current_user.username)
        return api_success(data=reservation, message=MESSAGES['reservation_created'], status=201)

    @bp.route('/reservations/<int:reservation_id>/status', methods=['POST'])
    @login_required
    def change_status(reservation_id):
        """
        Move a reservation to another status.

        Request body:
            status: pending/confirmed/completed/cancelled (required)
            notes: Optional notes for the history
        """
        data = request.get_json(silent=True) or {}
        new_status = data.get('status')
        if not new_status:
            raise ValidationError({'status': MESSAGES['field_required']})

        reservation = update_reservation_status(
            reservation_id, new_status,
            changed_by=current_user.username,
            notes=data.get('notes') or ''
        )
        label = MESSAGES.get(f'state_{new_status}', new_status)
        return api_success(data=reservation, message=get_message('reservation_updated', status=label))
