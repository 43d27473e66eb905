"""
Calendar blocking and duplicate-conversion detection.

Only the decoration tier blocks calendar dates: the team decorates one event
per day. Rental reservations consume product stock but never block a date.
"""

from database import get_db


# Statuses whose decoration reservations hold the date
BLOCKING_STATUSES = ('pending', 'confirmed')


# =============================================================================
# CALENDAR BLOCKS
# =============================================================================

def get_calendar_blocks(date_from: str = None, date_to: str = None) -> list:
    """
    Dates blocked by decoration-tier reservations.

    Args:
        date_from: Earliest event date, inclusive (optional)
        date_to: Latest event date, inclusive (optional)

    Returns:
        list: [{'date': str, 'reservation_id': int, 'status': str,
                'event_type': str}]
    """
    db = get_db()
    cursor = db.cursor()

    placeholders = ','.join('?' * len(BLOCKING_STATUSES))
    query = f'''
        SELECT id, event_date, status, event_type
        FROM reservations
        WHERE service_tier = 'decoration'
          AND status IN ({placeholders})
    '''
    params = list(BLOCKING_STATUSES)

    if date_from:
        query += ' AND event_date >= ?'
        params.append(date_from)

    if date_to:
        query += ' AND event_date <= ?'
        params.append(date_to)

    query += ' ORDER BY event_date, id'

    cursor.execute(query, params)
    return [
        {
            'date': row['event_date'],
            'reservation_id': row['id'],
            'status': row['status'],
            'event_type': row['event_type'],
        }
        for row in cursor.fetchall()
    ]


def is_decoration_date_available(event_date: str) -> bool:
    """True when no decoration reservation blocks the date."""
    return not get_calendar_blocks(event_date, event_date)


# =============================================================================
# DUPLICATE CONVERSION
# =============================================================================

def get_converted_quotation_ids() -> set:
    """IDs of every quotation already referenced by a reservation."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT quotation_id FROM reservations
        WHERE quotation_id IS NOT NULL
    ''')
    return {row['quotation_id'] for row in cursor.fetchall()}


def get_reservation_id_for_quotation(quotation_id: int) -> int | None:
    """Reservation created from a quotation, if any."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT id FROM reservations WHERE quotation_id = ?', (quotation_id,))
    row = cursor.fetchone()
    return row['id'] if row else None
