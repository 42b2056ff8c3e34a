"""Settlement domain errors

Each error maps to a stable code; use cases turn them into ``libs.result.Error``
values and the API maps the code to an HTTP status.
"""

from decimal import Decimal
from typing import Optional
from libs.result import Error


class SettlementError(Exception):
    """Base class for business rule failures"""

    code = "SETTLEMENT_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_error(self) -> Error:
        return Error(code=self.code, message=self.message, reason=self.reason)


class ValidationError(SettlementError):
    """Malformed or out-of-range input, rejected before any mutation"""

    code = "VALIDATION_ERROR"


class NotFoundError(SettlementError):
    """Missing production, stock bucket, purchase, loan or payment"""

    code = "NOT_FOUND"


class ConflictError(SettlementError):
    """Operation contradicts the current state (e.g. loan already repaid)"""

    code = "CONFLICT"


class InsufficientFundsError(SettlementError):
    """A bucket debit would drive its cash below zero"""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, product_id: str, season_id: str, available: Decimal, required: Decimal):
        super().__init__(
            f"Insufficient cash in stock. Required: {required}, Available: {available}",
            reason=f"product_id={product_id}, season_id={season_id}, cash={available}, required={required}",
        )
        self.available = available
        self.required = required
