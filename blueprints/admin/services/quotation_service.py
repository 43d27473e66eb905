"""
Quotation lifecycle for the back office.

pending --approve--> approved
pending --reject---> rejected
pending|approved --convert--> approved, plus a confirmed reservation

Rejected quotations and quotations that already have a reservation cannot
be converted.
"""

import logging
import sqlite3

from models.quotation import get_quotation_by_id, update_quotation_status
from models.reservation import (
    add_reservation_items, create_reservation, get_converted_quotation_ids,
    get_reservation_by_id
)
from utils.exceptions import (
    DuplicateConversionError, InvalidStateTransitionError, NotFoundError,
    PersistenceError
)
from utils.notifications import quotation_payload, run_post_commit_hooks

logger = logging.getLogger(__name__)


def _get_quotation_or_404(quotation_id: int) -> dict:
    quotation = get_quotation_by_id(quotation_id)
    if not quotation:
        raise NotFoundError('quotation', quotation_id)
    return quotation


def _raise_lost_transition(quotation_id: int, requested: str):
    """Another admin moved the quotation between our read and the update."""
    quotation = get_quotation_by_id(quotation_id)
    current = 'converted' if quotation['reservation_id'] else quotation['status']
    logger.warning(f"Quotation {quotation_id} is {current}; {requested} not applied")
    raise InvalidStateTransitionError(current, requested)


def approve_quotation(quotation_id: int, notes: str = None) -> dict:
    """
    Approve a pending quotation and notify the customer.

    Raises:
        NotFoundError: Unknown quotation
        InvalidStateTransitionError: Quotation is not pending
    """
    quotation = _get_quotation_or_404(quotation_id)
    if quotation['status'] != 'pending':
        raise InvalidStateTransitionError(quotation['status'], 'approved')

    if not update_quotation_status(quotation_id, 'approved', expected_status='pending'):
        _raise_lost_transition(quotation_id, 'approved')
    quotation = get_quotation_by_id(quotation_id)
    logger.info(f"Quotation {quotation_id} approved")

    payload = quotation_payload(quotation)
    if notes:
        payload['notas'] = notes
    run_post_commit_hooks('QuotationApproved', payload)
    return quotation


def reject_quotation(quotation_id: int, reason: str = None) -> dict:
    """
    Reject a pending quotation, storing the reason, and notify the customer.

    Raises:
        NotFoundError: Unknown quotation
        InvalidStateTransitionError: Quotation is not pending, or a reservation
            already references it
    """
    quotation = _get_quotation_or_404(quotation_id)
    if quotation['status'] != 'pending':
        raise InvalidStateTransitionError(quotation['status'], 'rejected')
    if quotation['reservation_id']:
        raise InvalidStateTransitionError('converted', 'rejected')

    reason = (reason or '').strip() or None
    if not update_quotation_status(quotation_id, 'rejected', rejection_reason=reason,
                                   expected_status='pending'):
        _raise_lost_transition(quotation_id, 'rejected')
    quotation = get_quotation_by_id(quotation_id)
    logger.info(f"Quotation {quotation_id} rejected")

    run_post_commit_hooks('QuotationRejected', quotation_payload(quotation, reason=reason))
    return quotation


def convert_quotation_to_reservation(quotation_id: int, created_by: str = None) -> dict:
    """
    Create a confirmed reservation from a quotation.

    Steps commit one at a time: the reservation, then its line items copied
    verbatim from the quotation, then the quotation status. If copying the
    line items fails the reservation stays and PersistenceError names it.

    Args:
        quotation_id: Quotation to convert
        created_by: Username performing the conversion

    Returns:
        The new reservation dict with items

    Raises:
        NotFoundError: Unknown quotation
        DuplicateConversionError: A reservation already references the quotation
        InvalidStateTransitionError: Quotation was rejected
        PersistenceError: A write failed
    """
    quotation = _get_quotation_or_404(quotation_id)

    if quotation_id in get_converted_quotation_ids():
        raise DuplicateConversionError(quotation_id)

    if quotation['status'] == 'rejected':
        raise InvalidStateTransitionError('rejected', 'approved')

    try:
        reservation_id = create_reservation(
            name=quotation['name'],
            email=quotation['email'],
            phone=quotation['phone'],
            event_type=quotation['event_type'],
            event_date=quotation['event_date'],
            headcount=quotation['headcount'],
            message=quotation['message'] or '',
            service_tier=quotation['service_tier'],
            total=quotation['total'],
            status='confirmed',
            quotation_id=quotation_id,
            created_by=created_by
        )
    except sqlite3.IntegrityError as e:
        # Another admin converted the same quotation between check and insert
        logger.warning(f"Duplicate conversion of quotation {quotation_id} blocked: {e}")
        raise DuplicateConversionError(quotation_id) from e
    except sqlite3.Error as e:
        logger.error(f"Error creating reservation for quotation {quotation_id}: {e}", exc_info=True)
        raise PersistenceError(f'creating reservation: {e}') from e

    try:
        add_reservation_items(reservation_id, quotation['items'])
    except sqlite3.Error as e:
        logger.error(
            f"Reservation {reservation_id} created but copying items of quotation "
            f"{quotation_id} failed: {e}", exc_info=True
        )
        raise PersistenceError(f'copying line items: {e}', committed_id=reservation_id) from e

    if quotation['status'] != 'approved':
        try:
            update_quotation_status(quotation_id, 'approved')
        except sqlite3.Error as e:
            logger.error(f"Reservation {reservation_id} created but quotation status update failed: {e}")
            raise PersistenceError(f'approving quotation: {e}', committed_id=reservation_id) from e

    logger.info(f"Quotation {quotation_id} converted to reservation {reservation_id}")
    return get_reservation_by_id(reservation_id)
