"""
Dashboard model.
Counters for the admin landing page.
"""

from datetime import date

from database import get_db
from utils.datetime_helpers import get_today


def get_dashboard_stats(today: date = None) -> dict:
    """
    Get the admin dashboard counters.

    Args:
        today: Reference day (defaults to today in the configured timezone)

    Returns:
        dict with keys:
            - pending_quotations: int
            - reservations_this_month: int (by event date)
            - product_count: int
            - completed_events: int (completed with a past event date)
            - overdue_reservations: int (past event, still open)
            - upcoming_events: int (confirmed, event today or later)
    """
    today = today or get_today()
    today_str = today.isoformat()
    month_prefix = today.strftime('%Y-%m')

    with get_db() as conn:
        pending_quotations = conn.execute('''
            SELECT COUNT(*) FROM quotations WHERE status = 'pending'
        ''').fetchone()[0]

        reservations_this_month = conn.execute('''
            SELECT COUNT(*) FROM reservations
            WHERE substr(event_date, 1, 7) = ?
              AND status != 'cancelled'
        ''', (month_prefix,)).fetchone()[0]

        product_count = conn.execute('SELECT COUNT(*) FROM products').fetchone()[0]

        completed_events = conn.execute('''
            SELECT COUNT(*) FROM reservations
            WHERE status = 'completed' AND event_date < ?
        ''', (today_str,)).fetchone()[0]

        overdue_reservations = conn.execute('''
            SELECT COUNT(*) FROM reservations
            WHERE event_date < ?
              AND status NOT IN ('completed', 'cancelled')
        ''', (today_str,)).fetchone()[0]

        upcoming_events = conn.execute('''
            SELECT COUNT(*) FROM reservations
            WHERE status = 'confirmed' AND event_date >= ?
        ''', (today_str,)).fetchone()[0]

    return {
        'pending_quotations': pending_quotations,
        'reservations_this_month': reservations_this_month,
        'product_count': product_count,
        'completed_events': completed_events,
        'overdue_reservations': overdue_reservations,
        'upcoming_events': upcoming_events,
    }
