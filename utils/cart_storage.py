"""
Cart persistence in the visitor's session.

Two string-keyed slots: one JSON array of cart lines and one plain date
string. Both are written after every mutation and removed when empty, so an
empty cart leaves nothing behind.

The first save of a non-empty cart also issues the visitor's submission
token, so every later quotation submit from that session carries the same
guard key, including the first one.
"""

import json
import logging
import secrets

from flask import session

from models.cart import Cart, CartLine

logger = logging.getLogger(__name__)

CART_KEY = 'creaparty_cart'
EVENT_DATE_KEY = 'creaparty_event_date'
SUBMISSION_TOKEN_KEY = 'creaparty_submission_token'


def load_cart() -> Cart:
    """
    Rebuild the cart from the session.

    A corrupt cart slot is logged and treated as empty.
    """
    lines = []
    raw = session.get(CART_KEY)
    if raw:
        try:
            lines = [CartLine.from_dict(item) for item in json.loads(raw)]
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding unreadable cart from session: {e}")
            lines = []

    return Cart(lines, session.get(EVENT_DATE_KEY) or None)


def save_cart(cart: Cart) -> None:
    """Write both slots, removing the ones that are empty."""
    if cart.is_empty():
        session.pop(CART_KEY, None)
    else:
        session[CART_KEY] = json.dumps([line.to_dict() for line in cart.lines])
        if not session.get(SUBMISSION_TOKEN_KEY):
            session[SUBMISSION_TOKEN_KEY] = secrets.token_hex(16)

    if cart.event_date:
        session[EVENT_DATE_KEY] = cart.event_date
    else:
        session.pop(EVENT_DATE_KEY, None)


def clear_cart() -> None:
    """Remove both slots. The submission token outlives the cart."""
    session.pop(CART_KEY, None)
    session.pop(EVENT_DATE_KEY, None)


def get_submission_token() -> str | None:
    """Guard key for this visitor, issued when the cart first held items."""
    return session.get(SUBMISSION_TOKEN_KEY)
