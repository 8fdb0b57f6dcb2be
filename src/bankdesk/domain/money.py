"""Fixed-point money helpers.

Amounts are ``Decimal`` values with two fractional digits. They are persisted
as integer minor units (cents) so that no binary float ever holds a balance.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from bankdesk.domain.errors import InvalidAmountError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

AmountLike = Union[Decimal, str, int]


def to_amount(value: AmountLike) -> Decimal:
    """Normalize a caller-supplied amount to a two-place ``Decimal``.

    Args:
        value: Decimal, integer or decimal string

    Returns:
        Decimal quantized to cents

    Raises:
        InvalidAmountError: If the value is a float, not a finite number, or
            carries more precision than one cent
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmountError(f"Amount must be a Decimal, int or string, not {type(value).__name__}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Malformed amount '{value}'") from e

    if not amount.is_finite():
        raise InvalidAmountError(f"Malformed amount '{value}'")

    try:
        quantized = amount.quantize(CENT)
    except InvalidOperation as e:
        raise InvalidAmountError(f"Amount '{value}' is out of range") from e
    if quantized != amount:
        raise InvalidAmountError(f"Amount '{value}' has more than two decimal places")
    if abs(quantized) > MAX_AMOUNT:
        raise InvalidAmountError(f"Amount '{value}' exceeds the largest storable amount {MAX_AMOUNT}")
    return quantized


def to_positive_amount(value: AmountLike) -> Decimal:
    """Normalize an amount and require it to be strictly positive."""
    amount = to_amount(value)
    if amount <= ZERO:
        raise InvalidAmountError(f"Amount must be positive, got {amount}")
    return amount


def to_cents(amount: Decimal) -> int:
    """Convert a two-place Decimal to integer minor units."""
    return int((Decimal(amount) * 100).to_integral_value())


def from_cents(cents: int) -> Decimal:
    """Convert integer minor units back to a two-place Decimal."""
    return (Decimal(cents) / 100).quantize(CENT)


# Largest value a signed 64-bit cents column can hold
MAX_AMOUNT = from_cents(2**63 - 1)
