"""
Quotation Service - Public quotation submission.

Handles:
- Contact and event validation
- Submission-time stock revalidation for the event date
- Atomic creation of the quotation and its line items
- The new_quotation notification after commit
- Guarding against repeated submits while one is in flight
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager

from flask import current_app

from models.cart import Cart
from models.quotation import create_quotation_with_items, get_quotation_by_id
from models.stock import get_available_stock
from utils.exceptions import CapacityError, PersistenceError, ValidationError
from utils.messages import MESSAGES
from utils.notifications import quotation_payload, run_post_commit_hooks
from utils.validators import (
    parse_positive_int, sanitize_input, validate_date_format,
    validate_email, validate_phone, validate_service_tier
)

logger = logging.getLogger(__name__)


class SubmissionGuard:
    """
    In-process set of submission keys currently being processed.

    A key (the visitor's session token) can only be held once; a second
    submit with the same key while the first is running is refused.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._in_flight = set()

    @contextmanager
    def hold(self, key):
        """Yield True if the key was acquired, False if already in flight."""
        if key is None:
            yield True
            return

        with self._lock:
            if key in self._in_flight:
                acquired = False
            else:
                self._in_flight.add(key)
                acquired = True

        try:
            yield acquired
        finally:
            if acquired:
                with self._lock:
                    self._in_flight.discard(key)

    def is_in_flight(self, key) -> bool:
        with self._lock:
            return key in self._in_flight


submission_guard = SubmissionGuard()


def validate_quotation_input(contact: dict, event: dict, service_tier: str, cart: Cart) -> dict:
    """
    Validate the submission form before anything is persisted.

    Args:
        contact: name, email, phone
        event: event_type, event_date, headcount, message
        service_tier: 'rental' or 'decoration'
        cart: Cart being submitted

    Returns:
        dict of clean values

    Raises:
        ValidationError: errors maps each failing field to its message
    """
    errors = {}

    name = sanitize_input(contact.get('name'), max_length=200)
    if len(name) < 2:
        errors['name'] = MESSAGES['name_too_short']

    email = sanitize_input(contact.get('email'), max_length=200)
    if not validate_email(email):
        errors['email'] = MESSAGES['invalid_email']

    phone = sanitize_input(contact.get('phone'), max_length=50)
    if not validate_phone(phone):
        errors['phone'] = MESSAGES['invalid_phone']

    event_date = sanitize_input(event.get('event_date'), max_length=10)
    if not event_date:
        errors['event_date'] = MESSAGES['date_required']
    elif not validate_date_format(event_date):
        errors['event_date'] = MESSAGES['invalid_date']

    event_type = sanitize_input(event.get('event_type'), max_length=100)
    if not event_type:
        errors['event_type'] = MESSAGES['event_type_required']

    if not validate_service_tier(service_tier):
        errors['service_tier'] = MESSAGES['service_tier_required']

    headcount = parse_positive_int(event.get('headcount'))
    if headcount is None:
        errors['headcount'] = MESSAGES['headcount_required']

    if cart.is_empty():
        errors['items'] = MESSAGES['cart_empty']

    if errors:
        raise ValidationError(errors)

    return {
        'name': name,
        'email': email,
        'phone': phone,
        'event_type': event_type,
        'event_date': event_date,
        'headcount': headcount,
        'service_tier': service_tier,
        'message': sanitize_input(event.get('message'), max_length=2000),
    }


def revalidate_cart_stock(cart: Cart, event_date: str) -> None:
    """
    Re-check every line against current availability on the event date.

    Degraded results never reject a line.

    Raises:
        CapacityError: Naming the first line above a confirmed availability
    """
    for line in cart.lines:
        availability = get_available_stock(line.product_id, event_date)
        if availability.degraded:
            logger.warning(
                f"Submitting product {line.product_id} on {event_date} without confirmed availability"
            )
            continue
        if line.quantity > availability.available:
            raise CapacityError(availability.available, line.product_id, line.name)


def submit_quotation(contact: dict, event: dict, service_tier: str, cart: Cart,
                     guard_key=None) -> dict | None:
    """
    Persist a quotation for the cart's lines.

    The quotation and its line items are written in one transaction. The
    caller clears the cart after a successful return.

    Args:
        contact: name, email, phone
        event: event_type, event_date, headcount, message
        service_tier: 'rental' or 'decoration'
        cart: Cart being submitted; unit prices are taken from its lines
        guard_key: Submission key (session token); repeated submits with the
                   same key while one is in flight are ignored

    Returns:
        The created quotation dict with items, or None if a submission with
        the same key is already in flight

    Raises:
        ValidationError: Invalid input or empty cart (nothing persisted)
        CapacityError: A line exceeds availability on the event date
        PersistenceError: The store failed (nothing persisted)
    """
    with submission_guard.hold(guard_key) as acquired:
        if not acquired:
            logger.info("Quotation submission ignored: another submit is in flight")
            return None

        data = validate_quotation_input(contact, event, service_tier, cart)

        if current_app.config.get('QUOTATION_REVALIDATE_STOCK', True):
            revalidate_cart_stock(cart, data['event_date'])

        items = [
            {
                'product_id': line.product_id,
                'product_name': line.name,
                'quantity': line.quantity,
                'unit_price': line.price,
            }
            for line in cart.lines
        ]

        try:
            quotation_id = create_quotation_with_items(items=items, **data)
            quotation = get_quotation_by_id(quotation_id)
        except sqlite3.Error as e:
            logger.error(f"Error saving quotation: {e}", exc_info=True)
            raise PersistenceError(f'creating quotation: {e}') from e

        logger.info(
            f"Quotation {quotation_id} submitted: {len(items)} items, "
            f"{data['service_tier']} for {data['event_date']}"
        )

    run_post_commit_hooks('QuotationSubmitted', quotation_payload(quotation))
    return quotation
