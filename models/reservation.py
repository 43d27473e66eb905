"""
Reservation data access functions.
Handles reservation creation, line items, status management and calendar
blocking.

This module re-exports all functions from the split modules:
- reservation_state.py: Status transitions, history and the overdue flag
- reservation_crud.py: Create and read operations
- reservation_availability.py: Calendar blocks and duplicate detection
"""

# =============================================================================
# RE-EXPORTS
# =============================================================================

# State management
from .reservation_state import (
    # Constants
    RESERVATION_STATUSES,
    TERMINAL_STATUSES,
    # Transitions
    validate_status_transition,
    change_reservation_status,
    # History
    get_status_history,
    # Derived flags
    is_overdue,
)

# CRUD operations
from .reservation_crud import (
    # Create
    create_reservation,
    add_reservation_items,
    # Read
    get_reservation_by_id,
    get_reservation_items,
    get_all_reservations,
    get_reservations_for_date,
)

# Calendar and duplicates
from .reservation_availability import (
    BLOCKING_STATUSES,
    get_calendar_blocks,
    is_decoration_date_available,
    get_converted_quotation_ids,
    get_reservation_id_for_quotation,
)

__all__ = [
    'RESERVATION_STATUSES',
    'TERMINAL_STATUSES',
    'validate_status_transition',
    'change_reservation_status',
    'get_status_history',
    'is_overdue',
    'create_reservation',
    'add_reservation_items',
    'get_reservation_by_id',
    'get_reservation_items',
    'get_all_reservations',
    'get_reservations_for_date',
    'BLOCKING_STATUSES',
    'get_calendar_blocks',
    'is_decoration_date_available',
    'get_converted_quotation_ids',
    'get_reservation_id_for_quotation',
]
