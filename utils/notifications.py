"""
Email notifications for quotation and reservation state changes.

Delivery goes through a single HTTP endpoint that renders and sends the
email for a template name:

    POST NOTIFICATION_ENDPOINT  {"type": "<template>", "data": {...}}

Notifications are dispatched through post-commit hooks: a model or service
commits its state change first and then calls run_post_commit_hooks(event,
payload). Each hook runs in its own error boundary, so a failed or slow
delivery can never reverse or fail the change that triggered it.
"""

import logging
from collections import defaultdict
from typing import Callable

import requests
from flask import current_app

from utils.exceptions import NotificationError

# Configure logger for notification delivery
logger = logging.getLogger(__name__)

TEMPLATES = (
    'new_quotation',
    'quotation_approved',
    'quotation_rejected',
    'reservation_confirmed',
    'event_reminder',
)

# Domain events and the email template each one sends
EVENT_TEMPLATES = {
    'QuotationSubmitted': 'new_quotation',
    'QuotationApproved': 'quotation_approved',
    'QuotationRejected': 'quotation_rejected',
    'ReservationConfirmed': 'reservation_confirmed',
    'EventReminderDue': 'event_reminder',
}

_hooks: dict[str, list[Callable]] = defaultdict(list)


# =============================================================================
# DELIVERY
# =============================================================================

def send_notification(template_name: str, payload: dict) -> bool:
    """
    POST a notification to the email endpoint.

    Never raises: failures are logged and reported through the return value.
    Nothing is retried.

    Args:
        template_name: One of TEMPLATES
        payload: Fields the template interpolates (nombre, email, ...)

    Returns:
        True if the endpoint answered 2xx
    """
    try:
        _post_notification(template_name, payload)
        return True
    except NotificationError as e:
        logger.error(f"Notification failed: {e}")
        return False


def _post_notification(template_name: str, payload: dict) -> None:
    """Deliver one notification or raise NotificationError."""
    if template_name not in TEMPLATES:
        raise NotificationError(template_name, 'unknown template')

    endpoint = current_app.config.get('NOTIFICATION_ENDPOINT')
    if not endpoint:
        raise NotificationError(template_name, 'NOTIFICATION_ENDPOINT is not configured')

    timeout = current_app.config.get('NOTIFICATION_TIMEOUT', 5)

    try:
        response = requests.post(
            endpoint,
            json={'type': template_name, 'data': payload},
            timeout=timeout
        )
    except requests.exceptions.RequestException as e:
        raise NotificationError(template_name, f'endpoint unreachable: {e}') from e

    if not 200 <= response.status_code < 300:
        raise NotificationError(template_name, f'endpoint answered {response.status_code}')

    logger.info(f"Notification '{template_name}' sent to {payload.get('email', '-')}")


# =============================================================================
# POST-COMMIT HOOKS
# =============================================================================

def register_hook(event: str, handler: Callable) -> None:
    """
    Register a handler(event, payload) to run after `event` commits.
    Registering the same handler twice for an event is a no-op.
    """
    if handler not in _hooks[event]:
        _hooks[event].append(handler)


def clear_hooks() -> None:
    """Remove every registered hook."""
    _hooks.clear()


def run_post_commit_hooks(event: str, payload: dict) -> int:
    """
    Run the hooks registered for an event that has already been committed.

    Args:
        event: Event name (e.g. 'QuotationApproved')
        payload: Event payload handed to each handler

    Returns:
        Number of handlers that completed without error
    """
    succeeded = 0
    for handler in list(_hooks.get(event, [])):
        try:
            if handler(event, payload) is not False:
                succeeded += 1
        except Exception as e:
            # A failing hook must never surface past the dispatch site
            logger.error(f"Post-commit hook for {event} failed: {e}", exc_info=True)
    return succeeded


def notify_by_template(event: str, payload: dict) -> bool:
    """Default hook: send the email template mapped to the event."""
    return send_notification(EVENT_TEMPLATES[event], payload)


def register_default_hooks() -> None:
    """Map every domain event to its email template."""
    for event in EVENT_TEMPLATES:
        register_hook(event, notify_by_template)


# =============================================================================
# PAYLOADS
# =============================================================================

def quotation_payload(quotation: dict, reason: str = None) -> dict:
    """Template fields for quotation emails."""
    payload = {
        'nombre': quotation['name'],
        'email': quotation['email'],
        'telefono': quotation.get('phone'),
        'tipo_evento': quotation['event_type'],
        'fecha_evento': quotation['event_date'],
        'num_personas': quotation.get('headcount'),
        'tipo_servicio': quotation.get('service_tier'),
        'total': quotation.get('total'),
    }
    if quotation.get('message'):
        payload['mensaje'] = quotation['message']
    if reason:
        payload['motivo'] = reason
    return payload


def reservation_payload(reservation: dict) -> dict:
    """Template fields for reservation emails."""
    return {
        'nombre': reservation['name'],
        'email': reservation['email'],
        'telefono': reservation.get('phone'),
        'tipo_evento': reservation['event_type'],
        'fecha_evento': reservation['event_date'],
        'num_personas': reservation.get('headcount'),
        'tipo_servicio': reservation.get('service_tier'),
    }
