"""Error taxonomy for the Ordering domain.

Every failure surfaced to callers is an ``OrderingError`` carrying a stable
``code``, a human-readable ``message`` and structured ``details``. The
category decides how the API layer renders it.
"""

from enum import Enum


class ErrorCategory(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


class OrderingError(Exception):
    """Base exception for all ordering errors."""

    code = "ORDERING_ERROR"
    category = ErrorCategory.INTERNAL

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class NoItemsError(OrderingError):
    code = "NO_ITEMS"
    category = ErrorCategory.VALIDATION

    def __init__(self):
        super().__init__("Order must contain at least one item")


class NoAddressError(OrderingError):
    code = "NO_ADDRESS"
    category = ErrorCategory.VALIDATION

    def __init__(self):
        super().__init__("Shipping address required")


class InvalidRequestError(OrderingError):
    code = "INVALID_REQUEST"
    category = ErrorCategory.VALIDATION

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}", field=field, reason=reason)


class InvalidPaymentStatusError(OrderingError):
    code = "INVALID_PAYMENT_STATUS"
    category = ErrorCategory.VALIDATION

    def __init__(self, payment_status: str):
        super().__init__(f"Unknown payment status: {payment_status}", payment_status=payment_status)


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class ProductNotFoundError(OrderingError):
    code = "PRODUCT_NOT_FOUND"
    category = ErrorCategory.NOT_FOUND

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found", product_id=product_id)


class OrderNotFoundError(OrderingError):
    code = "ORDER_NOT_FOUND"
    category = ErrorCategory.NOT_FOUND

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__("Order not found", order_id=order_id)


# ---------------------------------------------------------------------------
# Conflict
# ---------------------------------------------------------------------------
class InsufficientInventoryError(OrderingError):
    code = "INSUFFICIENT_INVENTORY"
    category = ErrorCategory.CONFLICT

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f'Only {available} of "{product_name}" available',
            product_id=product_id,
            product_name=product_name,
            available=available,
            requested=requested,
        )


class InvalidStatusTransitionError(OrderingError):
    code = "INVALID_STATUS_TRANSITION"
    category = ErrorCategory.CONFLICT

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot transition from {current} to {requested}",
            current_status=current,
            requested_status=requested,
        )


class CannotCancelError(OrderingError):
    code = "CANNOT_CANCEL"
    category = ErrorCategory.CONFLICT

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Cannot cancel order with status: {status}", current_status=status)


class ConcurrentModificationError(OrderingError):
    code = "CONCURRENT_MODIFICATION"
    category = ErrorCategory.CONFLICT

    def __init__(self, resource: str, attempts: int | None = None):
        details = {"resource": resource}
        if attempts is not None:
            details["attempts"] = attempts
        super().__init__(f"{resource} was modified concurrently, please retry", **details)


class StockConflict(ConcurrentModificationError):
    """A versioned stock write lost: the product changed since it was read."""

    def __init__(self, product_id: str, expected_version: int):
        self.product_id = product_id
        self.expected_version = expected_version
        super().__init__(f"Product {product_id}")


class OrderAbortedError(OrderingError):
    code = "ORDER_ABORTED"
    category = ErrorCategory.CONFLICT

    def __init__(self):
        super().__init__("Order placement was aborted by the client")


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------
class UnauthorizedError(OrderingError):
    code = "UNAUTHORIZED"
    category = ErrorCategory.UNAUTHORIZED

    def __init__(self, order_id: str):
        super().__init__("You do not have access to this order", order_id=order_id)


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------
class InternalError(OrderingError):
    code = "INTERNAL_ERROR"
    category = ErrorCategory.INTERNAL

    def __init__(self, operation: str):
        super().__init__(f"Unable to {operation} at this time", operation=operation)
