"""
Quotation review routes.
List, inspect, approve, reject and convert quotations.
"""

from flask import request
from flask_login import login_required, current_user

from blueprints.admin.services.quotation_service import (
    approve_quotation, convert_quotation_to_reservation, reject_quotation
)
from models.quotation import QUOTATION_STATUSES, get_all_quotations, get_quotation_by_id
from utils.api_response import api_success
from utils.exceptions import NotFoundError, ValidationError
from utils.messages import MESSAGES


def register_routes(bp):
    """Register quotation routes on the blueprint."""

    @bp.route('/quotations', methods=['GET'])
    @login_required
    def list_quotations():
        """
        List quotations, newest first.

        Query params:
            status: pending/approved/rejected (optional)
            search: Name, email or event type (optional)
        """
        status = request.args.get('status') or None
        if status and status not in QUOTATION_STATUSES:
            raise ValidationError({'status': MESSAGES['invalid_status']})

        quotations = get_all_quotations(status=status, search=request.args.get('search'))
        return api_success(data=quotations, count=len(quotations))

    @bp.route('/quotations/<int:quotation_id>', methods=['GET'])
    @login_required
    def get_quotation(quotation_id):
        quotation = get_quotation_by_id(quotation_id)
        if not quotation:
            raise NotFoundError('quotation', quotation_id)
        return api_success(data=quotation)

    @bp.route('/quotations/<int:quotation_id>/approve', methods=['POST'])
    @login_required
    def approve(quotation_id):
        """Approve a pending quotation. Body: notes (optional)."""
        data = request.get_json(silent=True) or {}
        quotation = approve_quotation(quotation_id, notes=data.get('notes'))
        return api_success(data=quotation, message=MESSAGES['quotation_approved'])

    @bp.route('/quotations/<int:quotation_id>/reject', methods=['POST'])
    @login_required
    def reject(quotation_id):
        """Reject a pending quotation. Body: reason (optional)."""
        data = request.get_json(silent=True) or {}
        quotation = reject_quotation(quotation_id, reason=data.get('reason'))
        return api_success(data=quotation, message=MESSAGES['quotation_rejected'])

    @bp.route('/quotations/<int:quotation_id>/convert', methods=['POST'])
    @login_required
    def convert(quotation_id):
        """Create a confirmed reservation from the quotation."""
        reservation = convert_quotation_to_reservation(quotation_id, created_by=current_user.username)
        return api_success(data=reservation, message=MESSAGES['reservation_created'], status=201)
