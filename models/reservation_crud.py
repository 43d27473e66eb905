"""
Reservation CRUD operations.
Handles create and read for reservations and their line items.
"""

from database import get_db
from .reservation_state import RESERVATION_STATUSES, is_overdue


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    name: str,
    email: str,
    event_type: str,
    event_date: str,
    service_tier: str,
    total: float = 0.0,
    phone: str = '',
    headcount: int = None,
    message: str = '',
    status: str = 'pending',
    quotation_id: int = None,
    notes: str = '',
    created_by: str = None
) -> int:
    """
    Insert a reservation and record its initial status in history.

    Args:
        name: Customer name
        email: Customer email
        event_type: Event type
        event_date: Event date (YYYY-MM-DD)
        service_tier: 'rental' or 'decoration'
        total: Reservation total
        phone: Customer phone
        headcount: Number of guests
        message: Customer message carried over from the quotation
        status: Initial status
        quotation_id: Originating quotation (None for direct reservations)
        notes: Internal notes
        created_by: Username creating the reservation

    Returns:
        New reservation ID

    Raises:
        sqlite3.IntegrityError: If quotation_id is already referenced
    """
    if status not in RESERVATION_STATUSES:
        raise ValueError(f"Unknown reservation status: {status}")

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('''
            INSERT INTO reservations (
                quotation_id, name, email, phone, event_type, event_date, headcount,
                message, service_tier, status, total, notes, created_by, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
        ''', (quotation_id, name, email, phone, event_type, event_date, headcount,
              message, service_tier, status, total, notes, created_by))

        reservation_id = cursor.lastrowid

        # Record initial state in history
        cursor.execute('''
            INSERT INTO reservation_status_history
            (reservation_id, old_status, new_status, changed_by, notes, created_at)
            VALUES (?, NULL, ?, ?, ?, CURRENT_TIMESTAMP)
        ''', (reservation_id, status, created_by,
              f'Creada desde cotización #{quotation_id}' if quotation_id else 'Creación de reserva'))

        db.commit()
        return reservation_id

    except Exception:
        db.rollback()
        raise


def add_reservation_items(reservation_id: int, items: list) -> int:
    """
    Insert line items for a reservation in one transaction.

    Items are copied verbatim: quantity, unit_price and subtotal are stored
    as given, never recomputed.

    Args:
        reservation_id: Reservation ID
        items: List of dicts with product_id, product_name, quantity,
               unit_price, subtotal

    Returns:
        Number of items inserted
    """
    db = get_db()
    cursor = db.cursor()

    try:
        for item in items:
            cursor.execute('''
                INSERT INTO reservation_line_items
                (reservation_id, product_id, product_name, quantity, unit_price, subtotal)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', (reservation_id, item['product_id'], item['product_name'],
                  item['quantity'], item['unit_price'], item['subtotal']))

        db.commit()
        return len(items)

    except Exception:
        db.rollback()
        raise


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: int) -> dict:
    """
    Get reservation by ID with line items and the derived overdue flag.

    Args:
        reservation_id: Reservation ID

    Returns:
        Reservation dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM reservations WHERE id = ?', (reservation_id,))
    row = cursor.fetchone()
    if not row:
        return None

    reservation = dict(row)
    reservation['items'] = get_reservation_items(reservation_id)
    reservation['overdue'] = is_overdue(reservation)
    return reservation


def get_reservation_items(reservation_id: int) -> list:
    """Line items of a reservation in insertion order."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM reservation_line_items
        WHERE reservation_id = ?
        ORDER BY id
    ''', (reservation_id,))
    return [dict(row) for row in cursor.fetchall()]


def get_all_reservations(
    status: str = None,
    search: str = None,
    date_from: str = None,
    date_to: str = None
) -> list:
    """
    List reservations ordered by event date.

    Args:
        status: Filter by status (optional)
        search: Match on name, email or event type (optional)
        date_from: Earliest event date, inclusive (optional)
        date_to: Latest event date, inclusive (optional)

    Returns:
        List of reservation dicts with the overdue flag
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM reservations WHERE 1=1'
    params = []

    if status:
        query += ' AND status = ?'
        params.append(status)

    if search:
        query += ' AND (name LIKE ? OR email LIKE ? OR event_type LIKE ?)'
        pattern = f'%{search}%'
        params.extend([pattern, pattern, pattern])

    if date_from:
        query += ' AND event_date >= ?'
        params.append(date_from)

    if date_to:
        query += ' AND event_date <= ?'
        params.append(date_to)

    query += ' ORDER BY event_date ASC, id ASC'

    cursor.execute(query, params)
    reservations = [dict(row) for row in cursor.fetchall()]
    for reservation in reservations:
        reservation['overdue'] = is_overdue(reservation)
    return reservations


def get_reservations_for_date(event_date: str, statuses: tuple = ('confirmed',)) -> list:
    """Reservations on an event date with one of the given statuses."""
    db = get_db()
    cursor = db.cursor()

    placeholders = ','.join('?' * len(statuses))
    cursor.execute(f'''
        SELECT * FROM reservations
        WHERE event_date = ? AND status IN ({placeholders})
        ORDER BY id
    ''', [event_date, *statuses])
    return [dict(row) for row in cursor.fetchall()]
