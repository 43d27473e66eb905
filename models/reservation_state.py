"""
Reservation status management functions.
Handles status transitions, history, and the derived overdue flag.

States: pending, confirmed, completed, cancelled. Any move is allowed except
leaving completed or cancelled, which are sinks.
"""

from datetime import date

from database import get_db
from utils.datetime_helpers import get_today
from utils.exceptions import InvalidStateTransitionError, NotFoundError, ValidationError
from utils.messages import MESSAGES


# =============================================================================
# CONSTANTS
# =============================================================================

RESERVATION_STATUSES = ('pending', 'confirmed', 'completed', 'cancelled')

# No transitions out of these
TERMINAL_STATUSES = ('completed', 'cancelled')


# =============================================================================
# TRANSITIONS
# =============================================================================

def validate_status_transition(current_status: str, new_status: str) -> None:
    """
    Check a status change is allowed.

    Raises:
        ValidationError: If new_status is not a reservation status
        InvalidStateTransitionError: If current_status is a sink
    """
    if new_status not in RESERVATION_STATUSES:
        raise ValidationError({'status': MESSAGES['invalid_status']})

    if current_status in TERMINAL_STATUSES and new_status != current_status:
        raise InvalidStateTransitionError(current_status, new_status)


def change_reservation_status(reservation_id: int, new_status: str,
                              changed_by: str = None, notes: str = '') -> dict:
    """
    Change reservation status and record it in history.

    Args:
        reservation_id: Reservation ID
        new_status: Target status
        changed_by: Username making the change
        notes: Optional notes

    Returns:
        dict: {'old_status': str, 'new_status': str}

    Raises:
        NotFoundError: If the reservation does not exist
        InvalidStateTransitionError: If the reservation is completed or cancelled
    """
    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT status FROM reservations WHERE id = ?', (reservation_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFoundError('reservation', reservation_id)

    old_status = row['status']
    validate_status_transition(old_status, new_status)

    try:
        cursor.execute('''
            UPDATE reservations
            SET status = ?,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (new_status, reservation_id))

        cursor.execute('''
            INSERT INTO reservation_status_history
            (reservation_id, old_status, new_status, changed_by, notes, created_at)
            VALUES (?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
        ''', (reservation_id, old_status, new_status, changed_by,
              f'Cambio de {old_status} a {new_status}. {notes}'.strip()))

        db.commit()

    except Exception:
        db.rollback()
        raise

    return {'old_status': old_status, 'new_status': new_status}


# =============================================================================
# HISTORY
# =============================================================================

def get_status_history(reservation_id: int) -> list:
    """
    Get status change history for a reservation.

    Returns:
        List of history dicts, oldest first
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM reservation_status_history
        WHERE reservation_id = ?
        ORDER BY created_at, id
    ''', (reservation_id,))
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# OVERDUE FLAG
# =============================================================================

def is_overdue(reservation: dict, today: date = None) -> bool:
    """
    Event date already passed but the reservation was never closed.
    Derived on read, never stored or auto-transitioned.
    """
    if reservation.get('status') in TERMINAL_STATUSES:
        return False

    today = today or get_today()
    return str(reservation.get('event_date') or '') < today.isoformat()
