"""Fidelman exceptions.

Every failure carries a stable ``code`` and belongs to one ``kind``:

    not_found      missing record, or a record the caller does not own
    validation     malformed cart, unavailable products, bad amounts
    invalid_state  order status forbids the operation
    conflict       uniqueness violation (e.g. points credited twice)

Callers map ``kind`` to their transport (404/400/409/...) without parsing
messages.
"""


class BaseError(Exception):
    """
    Structured exception with a machine-readable code.

    Usage:
        try:
            OrderService.complete_order(owner_id, order_id)
        except FidelmanError as e:
            if e.code == "ORDER_NOT_READY":
                ...
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"{code}: {self.message}")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "data": self.data,
        }


class FidelmanError(BaseError):
    """Base class for order, payment and points failures."""

    kind = "error"

    _default_messages = {
        "CLIENT_NOT_FOUND": "Client not found",
        "ESTABLISHMENT_NOT_FOUND": "Establishment not found",
        "ORDER_NOT_FOUND": "Order not found",
        "EMPTY_CART": "Order must contain at least one item",
        "INVALID_CART_LINE": "Cart lines must be (product_id, quantity) pairs",
        "INVALID_QUANTITY": "Item quantity must be a positive integer",
        "PRODUCTS_UNAVAILABLE": "Some products are not available",
        "ORDER_TOTAL_TOO_LARGE": "Order total exceeds the maximum amount",
        "INVALID_STATUS": "Unknown order status",
        "USE_COMPLETE_ORDER": "Orders are completed through complete_order",
        "INVALID_AMOUNT": "Payment amount must be a positive number",
        "INVALID_PAYMENT_METHOD": "Payment method is required",
        "INVALID_POINTS": "Points must be a non-negative integer",
        "ORDER_TERMINAL": "Order is already completed or cancelled",
        "ORDER_NOT_READY": "Order must be ready to be completed",
        "ORDER_CANCELLED": "Cannot create payment for cancelled order",
        "INSUFFICIENT_POINTS": "Insufficient points",
        "POINTS_ALREADY_CREDITED": "Points were already credited for this order",
    }

    def as_dict(self) -> dict:
        d = super().as_dict()
        d["kind"] = self.kind
        return d


class NotFoundError(FidelmanError):
    kind = "not_found"


class ValidationError(FidelmanError):
    kind = "validation"


class InvalidStateError(FidelmanError):
    kind = "invalid_state"


class ConflictError(FidelmanError):
    kind = "conflict"
