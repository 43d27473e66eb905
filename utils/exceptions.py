"""
Domain error codes and exceptions for the rental workflow.

Each error carries a stable code, a Spanish user-facing message and the HTTP
status the API answers with. Routes let these propagate; the handler
registered in app.py renders them with api_error().
"""

from enum import Enum

from utils.messages import MESSAGES, get_message


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = 'VALIDATION_ERROR'
    CAPACITY_EXCEEDED = 'CAPACITY_EXCEEDED'
    DUPLICATE_CONVERSION = 'DUPLICATE_CONVERSION'
    INVALID_TRANSITION = 'INVALID_TRANSITION'
    NOT_FOUND = 'NOT_FOUND'
    PERSISTENCE_ERROR = 'PERSISTENCE_ERROR'
    NOTIFICATION_ERROR = 'NOTIFICATION_ERROR'


class RentalError(Exception):
    """Base domain error with code and user-safe message."""

    code = ErrorCode.VALIDATION_ERROR
    status = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def extra(self) -> dict:
        """Additional top-level fields for the JSON error envelope."""
        return {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(RentalError):
    """User input fails format or range rules. Nothing was persisted."""

    code = ErrorCode.VALIDATION_ERROR
    status = 400

    def __init__(self, errors: dict, message: str = None):
        super().__init__(message or MESSAGES['validation_failed'])
        self.errors = errors

    def extra(self) -> dict:
        return {'errors': self.errors}


class CapacityError(RentalError):
    """Requested quantity is above the units available for the date."""

    code = ErrorCode.CAPACITY_EXCEEDED
    status = 409

    def __init__(self, available: int, product_id: int = None, product_name: str = None):
        if product_name:
            message = get_message('capacity_exceeded_product', available=available, product=product_name)
        else:
            message = get_message('capacity_exceeded', available=available)
        super().__init__(message)
        self.available = available
        self.product_id = product_id

    def extra(self) -> dict:
        return {'available': self.available, 'product_id': self.product_id}


class DuplicateConversionError(RentalError):
    """A reservation already references this quotation."""

    code = ErrorCode.DUPLICATE_CONVERSION
    status = 409

    def __init__(self, quotation_id: int):
        super().__init__(MESSAGES['duplicate_reservation'])
        self.quotation_id = quotation_id

    def extra(self) -> dict:
        return {'quotation_id': self.quotation_id}


class InvalidStateTransitionError(RentalError):
    """The requested status change is not allowed from the current status."""

    code = ErrorCode.INVALID_TRANSITION
    status = 409

    def __init__(self, current: str, requested: str):
        super().__init__(get_message('invalid_transition', current=current, requested=requested))
        self.current = current
        self.requested = requested

    def extra(self) -> dict:
        return {'current_status': self.current, 'requested_status': self.requested}


class NotFoundError(RentalError):
    """Referenced record does not exist."""

    code = ErrorCode.NOT_FOUND
    status = 404

    def __init__(self, entity: str, entity_id):
        super().__init__(MESSAGES[f'{entity}_not_found'])
        self.entity = entity
        self.entity_id = entity_id


class ProductNotFoundError(NotFoundError):
    """Raised when a product id does not reference an existing product."""

    def __init__(self, product_id: int):
        super().__init__('product', product_id)


class PersistenceError(RentalError):
    """
    Store read/write failure.

    For multi-step flows the steps already committed are not rolled back;
    committed_id names the record that survived (e.g. the reservation when
    copying its line items failed).
    """

    code = ErrorCode.PERSISTENCE_ERROR
    status = 500

    def __init__(self, detail: str, committed_id: int = None):
        super().__init__(MESSAGES['persistence_error'])
        self.detail = detail
        self.committed_id = committed_id

    def extra(self) -> dict:
        if self.committed_id is not None:
            return {'committed_id': self.committed_id}
        return {}


class NotificationError(RentalError):
    """Notification delivery failed. Logged at the dispatch site, never surfaced."""

    code = ErrorCode.NOTIFICATION_ERROR
    status = 502

    def __init__(self, template_name: str, detail: str):
        super().__init__(f'{template_name}: {detail}')
        self.template_name = template_name
        self.detail = detail
