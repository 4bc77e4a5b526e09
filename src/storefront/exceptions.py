"""Error taxonomy for the storefront engine.

Validation and service errors are raised to the caller for display.
Promo rejections are values (see ``storefront.promo.port``), never
exceptions. Persistence errors stop at the persistence adapter.
"""


class StorefrontError(Exception):
    """Base class for all storefront errors."""


class ValidationError(StorefrontError):
    """Local, synchronous validation failure that blocks submission.

    ``messages`` maps a field name to the list of problems found with it,
    e.g. ``{"address": ["Address is required for delivery"]}``.
    """

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(messages)

    @property
    def field(self) -> str:
        """Name of the first failing field."""
        return next(iter(self.messages))

    @property
    def message(self) -> str:
        return self.messages[self.field][0]


class ServiceError(StorefrontError):
    """An external service call failed or was refused."""

    default_message = "The service is unavailable. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.detail = message
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class ProductNotFound(ServiceError):
    default_message = "Product not found"


class OrderNotFound(ServiceError):
    default_message = "Order not found"


class OrderNotEditable(StorefrontError):
    """The order has left the pending state and can only be viewed."""

    def __init__(self, order_id: str, order_number: str, status: str):
        self.order_id = order_id
        self.order_number = order_number
        self.status = status
        super().__init__(
            f"Order {order_number} is {status}; only pending orders can be modified"
        )


class PersistenceError(StorefrontError):
    """Reading from or writing to the durable store failed."""
