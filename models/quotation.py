"""
Quotation data access functions.
Handles quotation creation with line items, listing, and status updates.

Line items are immutable snapshots: unit price and product name are copied at
submission time and never follow later product edits.
"""

from database import get_db

QUOTATION_STATUSES = ('pending', 'approved', 'rejected')


# =============================================================================
# CREATE
# =============================================================================

def create_quotation_with_items(
    name: str,
    email: str,
    phone: str,
    event_type: str,
    event_date: str,
    headcount: int,
    service_tier: str,
    items: list,
    message: str = ''
) -> int:
    """
    Create a pending quotation and its line items in one transaction.

    Args:
        name: Customer name
        email: Customer email
        phone: Customer phone
        event_type: Event type (Boda, Cumpleaños, ...)
        event_date: Event date (YYYY-MM-DD)
        headcount: Number of guests
        service_tier: 'rental' or 'decoration'
        items: List of dicts with product_id, product_name, quantity, unit_price
        message: Free-text message

    Returns:
        New quotation ID

    Raises:
        sqlite3.Error: If either write fails (nothing is kept)
    """
    db = get_db()
    cursor = db.cursor()

    total = sum(item['unit_price'] * item['quantity'] for item in items)

    try:
        if not db.in_transaction:
            cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('''
            INSERT INTO quotations (
                name, email, phone, event_type, event_date, headcount,
                message, service_tier, status, total, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'pending', ?, CURRENT_TIMESTAMP)
        ''', (name, email, phone, event_type, event_date, headcount,
              message, service_tier, total))

        quotation_id = cursor.lastrowid

        for item in items:
            cursor.execute('''
                INSERT INTO quotation_line_items
                (quotation_id, product_id, product_name, quantity, unit_price, subtotal)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', (quotation_id, item['product_id'], item['product_name'], item['quantity'],
                  item['unit_price'], item['unit_price'] * item['quantity']))

        db.commit()
        return quotation_id

    except Exception:
        db.rollback()
        raise


# =============================================================================
# READ
# =============================================================================

def get_quotation_by_id(quotation_id: int) -> dict:
    """
    Get quotation by ID with its line items and linked reservation.

    Args:
        quotation_id: Quotation ID

    Returns:
        dict with 'items' and 'reservation_id', or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT q.*, r.id as reservation_id
        FROM quotations q
        LEFT JOIN reservations r ON r.quotation_id = q.id
        WHERE q.id = ?
    ''', (quotation_id,))
    row = cursor.fetchone()
    if not row:
        return None

    quotation = dict(row)
    quotation['items'] = get_quotation_items(quotation_id)
    return quotation


def get_quotation_items(quotation_id: int) -> list:
    """Line items of a quotation in insertion order."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM quotation_line_items
        WHERE quotation_id = ?
        ORDER BY id
    ''', (quotation_id,))
    return [dict(row) for row in cursor.fetchall()]


def get_all_quotations(status: str = None, search: str = None) -> list:
    """
    List quotations, newest first.

    Args:
        status: Filter by status (optional)
        search: Case-insensitive match on name, email or event type (optional)

    Returns:
        List of quotation dicts with reservation_id
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT q.*, r.id as reservation_id
        FROM quotations q
        LEFT JOIN reservations r ON r.quotation_id = q.id
        WHERE 1=1
    '''
    params = []

    if status:
        query += ' AND q.status = ?'
        params.append(status)

    if search:
        query += ' AND (q.name LIKE ? OR q.email LIKE ? OR q.event_type LIKE ?)'
        pattern = f'%{search}%'
        params.extend([pattern, pattern, pattern])

    query += ' ORDER BY q.created_at DESC, q.id DESC'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# UPDATE
# =============================================================================

def update_quotation_status(quotation_id: int, status: str, rejection_reason: str = None,
                            expected_status: str = None) -> bool:
    """
    Set a quotation's status.

    Args:
        quotation_id: Quotation ID
        status: 'pending', 'approved' or 'rejected'
        rejection_reason: Stored when rejecting
        expected_status: Only update while the quotation is still in this status

    Returns:
        True if a row was updated
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        UPDATE quotations
        SET status = ?,
            rejection_reason = COALESCE(?, rejection_reason),
            updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    '''
    params = [status, rejection_reason, quotation_id]
    if expected_status:
        query += ' AND status = ?'
        params.append(expected_status)
    if status == 'rejected':
        # A quotation with a reservation is settled
        query += ' AND NOT EXISTS (SELECT 1 FROM reservations r WHERE r.quotation_id = quotations.id)'

    try:
        cursor.execute(query, params)
        db.commit()
        return cursor.rowcount > 0

    except Exception:
        db.rollback()
        raise
