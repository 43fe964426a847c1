"""Error taxonomy for the cart/order engine.

Every error raised by services derives from CartEngineError so the API layer
can map it with one handler. TransactionFailure deliberately carries no
inventory state.
"""
from typing import Any, Dict


class CartEngineError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str = "An internal error occurred", status_code: int = 500, payload: Dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self) -> Dict[str, Any]:
        rv = dict(self.payload or ())
        rv["message"] = self.message
        rv["status"] = "error"
        return rv


class ValidationError(CartEngineError):
    """Rejected input: bad amount, malformed identifier, forbidden cart owner."""

    def __init__(self, message: str, payload: Dict[str, Any] | None = None):
        super().__init__(message, 400, payload)


class EmptyCartError(ValidationError):
    """Nothing to order: no active cart, no lines or a zero total."""

    def __init__(self, user_email: str):
        super().__init__("Cart is empty or not found", {"user_email": user_email})


class NotFoundError(CartEngineError):
    def __init__(self, entity: str, key: Any):
        super().__init__(f"{entity} {key} not found", 404, {"entity": entity, "key": key})
        self.entity = entity
        self.key = key


class InsufficientStockError(CartEngineError):
    def __init__(self, item_id: int, requested: int, available: int):
        super().__init__(
            f"Not enough stock for item {item_id}: requested {requested}, available {available}",
            409,
            {"item_id": item_id, "requested": requested, "available_stock": available},
        )
        self.item_id = item_id
        self.requested = requested
        self.available = available


class InvalidRemovalError(CartEngineError):
    def __init__(self, item_id: int, requested: int, current_amount: int):
        super().__init__(
            "Cannot remove more items than are in the cart",
            400,
            {"item_id": item_id, "requested": requested, "current_amount": current_amount},
        )
        self.item_id = item_id
        self.requested = requested
        self.current_amount = current_amount


class ConflictRetry(CartEngineError):
    """A uniqueness race was lost; the whole transaction has to start over.

    Never reaches the caller: run_in_transaction turns exhausted retries
    into a TransactionFailure.
    """

    def __init__(self, reason: str):
        super().__init__(f"Conflict, retrying: {reason}", 409)
        self.reason = reason


class TransactionFailure(CartEngineError):
    """Lock timeout, lost connection or serialization failure. Fully rolled back."""

    def __init__(self, retryable: bool = True):
        super().__init__("The operation could not be completed, please try again", 503)
        self.retryable = retryable
