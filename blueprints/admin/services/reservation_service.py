"""
Reservation operations for the back office.
Status changes, direct creation and event reminders.
"""

import logging
import sqlite3
from datetime import timedelta

from models.product import get_product_by_id
from models.reservation import (
    add_reservation_items, change_reservation_status, create_reservation,
    get_reservation_by_id, get_reservations_for_date
)
from utils.datetime_helpers import get_today
from utils.exceptions import PersistenceError, ProductNotFoundError, ValidationError
from utils.messages import MESSAGES
from utils.notifications import reservation_payload, run_post_commit_hooks
from utils.validators import (
    parse_non_negative_number, parse_positive_int, sanitize_input,
    validate_date_format, validate_email, validate_service_tier
)

logger = logging.getLogger(__name__)


def update_reservation_status(reservation_id: int, new_status: str,
                              changed_by: str = None, notes: str = '') -> dict:
    """
    Move a reservation to a new status.

    Moving to confirmed sends the reservation_confirmed email after commit.

    Raises:
        NotFoundError: Unknown reservation
        ValidationError: Unknown status
        InvalidStateTransitionError: Reservation is completed or cancelled
    """
    change = change_reservation_status(reservation_id, new_status, changed_by, notes)
    reservation = get_reservation_by_id(reservation_id)

    logger.info(
        f"Reservation {reservation_id}: {change['old_status']} -> {change['new_status']}"
        f" by {changed_by or '-'}"
    )

    if new_status == 'confirmed' and change['old_status'] != 'confirmed':
        run_post_commit_hooks('ReservationConfirmed', reservation_payload(reservation))

    return reservation


def _build_items(raw_items: list) -> tuple:
    """
    Line items for a direct reservation, priced from the current catalog.

    Returns:
        (items, total)
    """
    items = []
    for raw in raw_items or []:
        product_id = parse_positive_int(raw.get('product_id'))
        quantity = parse_positive_int(raw.get('quantity'))
        if product_id is None or quantity is None:
            raise ValidationError({'items': MESSAGES['invalid_quantity']})

        product = get_product_by_id(product_id)
        if not product:
            raise ProductNotFoundError(product_id)

        items.append({
            'product_id': product_id,
            'product_name': product['name'],
            'quantity': quantity,
            'unit_price': product['price'],
            'subtotal': product['price'] * quantity,
        })
    return items, sum(item['subtotal'] for item in items)


def create_direct_reservation(data: dict, created_by: str = None) -> dict:
    """
    Create a reservation without a quotation.

    Args:
        data: name, email, event_type, event_date, service_tier required;
              phone, headcount, message, notes, status, total, items optional
        created_by: Username creating it

    Returns:
        The reservation dict with items

    Raises:
        ValidationError: Missing or malformed fields
        ProductNotFoundError: An item references an unknown product
        PersistenceError: A write failed
    """
    errors = {}

    name = sanitize_input(data.get('name'), max_length=200)
    if len(name) < 2:
        errors['name'] = MESSAGES['name_too_short']

    email = sanitize_input(data.get('email'), max_length=200)
    if not validate_email(email):
        errors['email'] = MESSAGES['invalid_email']

    event_type = sanitize_input(data.get('event_type'), max_length=100)
    if not event_type:
        errors['event_type'] = MESSAGES['event_type_required']

    event_date = sanitize_input(data.get('event_date'), max_length=10)
    if not validate_date_format(event_date):
        errors['event_date'] = MESSAGES['invalid_date']

    service_tier = data.get('service_tier')
    if not validate_service_tier(service_tier):
        errors['service_tier'] = MESSAGES['service_tier_required']

    status = data.get('status') or 'pending'
    if status not in ('pending', 'confirmed'):
        errors['status'] = MESSAGES['invalid_status']

    headcount = None
    if data.get('headcount') not in (None, ''):
        headcount = parse_positive_int(data.get('headcount'))
        if headcount is None:
            errors['headcount'] = MESSAGES['headcount_required']

    if errors:
        raise ValidationError(errors)

    items, items_total = _build_items(data.get('items'))

    total = items_total
    if data.get('total') not in (None, ''):
        total = parse_non_negative_number(data.get('total'))
        if total is None:
            raise ValidationError({'total': MESSAGES['invalid_price']})

    try:
        reservation_id = create_reservation(
            name=name,
            email=email,
            phone=sanitize_input(data.get('phone'), max_length=50),
            event_type=event_type,
            event_date=event_date,
            headcount=headcount,
            message=sanitize_input(data.get('message'), max_length=2000),
            service_tier=service_tier,
            total=total,
            status=status,
            notes=sanitize_input(data.get('notes'), max_length=2000),
            created_by=created_by
        )
    except sqlite3.Error as e:
        logger.error(f"Error creating reservation: {e}", exc_info=True)
        raise PersistenceError(f'creating reservation: {e}') from e

    if items:
        try:
            add_reservation_items(reservation_id, items)
        except sqlite3.Error as e:
            logger.error(f"Reservation {reservation_id} created but items failed: {e}", exc_info=True)
            raise PersistenceError(f'adding line items: {e}', committed_id=reservation_id) from e

    reservation = get_reservation_by_id(reservation_id)
    logger.info(f"Reservation {reservation_id} created directly by {created_by or '-'}")

    if status == 'confirmed':
        run_post_commit_hooks('ReservationConfirmed', reservation_payload(reservation))

    return reservation


def send_event_reminders(days_ahead: int = 7) -> tuple:
    """
    Send the event_reminder email for confirmed events days_ahead from today.

    Returns:
        (sent, total) reminders delivered and reservations found
    """
    target_date = (get_today() + timedelta(days=days_ahead)).isoformat()
    reservations = get_reservations_for_date(target_date, statuses=('confirmed',))

    sent = 0
    for reservation in reservations:
        payload = reservation_payload(reservation)
        payload['dias_restantes'] = days_ahead
        sent += run_post_commit_hooks('EventReminderDue', payload)

    logger.info(f"Event reminders for {target_date}: {sent}/{len(reservations)} sent")
    return sent, len(reservations)
