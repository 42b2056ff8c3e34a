"""Fixed-point helpers for currency amounts

Every amount is held as a ``Decimal`` quantized to cents before it is stored
or compared, so sufficiency checks never depend on binary floating point.
Amounts computed here are rounded; amounts supplied by a caller go through
``exact_money`` / ``to_quantity`` and are refused if they would not survive
storage unchanged.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Union

from src.domain.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Quantities are stored as Numeric(18, 3)
QUANTITY_STEP = Decimal("0.001")

Numeric = Union[Decimal, int, float, str]


def _to_decimal(value: Numeric, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be numeric", reason=f"{field}={value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} must be numeric", reason=f"{field}={value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number", reason=f"{field}={value!r}")
    return amount


def to_money(value: Numeric, field: str = "amount") -> Decimal:
    """Convert a numeric value to a cent-quantized Decimal

    Raises:
        ValidationError: value is not a finite number
    """
    return _to_decimal(value, field).quantize(CENT, rounding=ROUND_HALF_UP)


def exact_money(value: Numeric, field: str = "amount") -> Decimal:
    """Like ``to_money`` but refuses values with more than two decimal places

    Raises:
        ValidationError: value is not a finite number or is finer than a cent
    """
    amount = _to_decimal(value, field)
    quantized = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if quantized != amount:
        raise ValidationError(
            f"{field} must have at most 2 decimal places",
            reason=f"{field}={value!r}",
        )
    return quantized


def to_quantity(value: Numeric, field: str = "quantity") -> Decimal:
    """Validate a quantity that must be stored without rounding

    Raises:
        ValidationError: value is not a finite number or has more than three
            decimal places
    """
    quantity = _to_decimal(value, field)
    quantized = quantity.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)
    if quantized != quantity:
        raise ValidationError(
            f"{field} must have at most 3 decimal places",
            reason=f"{field}={value!r}",
        )
    return quantized


def sum_money(values: Iterable[Numeric]) -> Decimal:
    total = ZERO
    for value in values:
        total += to_money(value)
    return total


def percent_of(amount: Decimal, rate: Decimal) -> Decimal:
    """``rate`` percent of ``amount``, rounded to cents"""
    return to_money(amount * rate / Decimal(100))
