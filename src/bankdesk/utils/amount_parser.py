"""Amount parsing utilities."""

import re
from decimal import Decimal

from bankdesk.domain.errors import InvalidAmountError
from bankdesk.domain.money import to_amount

_GROUPED = re.compile(r"^\d{1,3}(,\d{3})+(\.\d*)?$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a teller-entered amount string into a two-place Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "100" (whole units)

    Sign checks are left to the ledger, which rejects non-positive amounts.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        InvalidAmountError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise InvalidAmountError("Empty amount string")

    cleaned = re.sub(r"[$€£¥\s]", "", amount_str)

    # Thousands separators are only accepted in correctly grouped positions
    if "," in cleaned:
        if not _GROUPED.match(cleaned.lstrip("-")):
            raise InvalidAmountError(f"Could not parse amount '{amount_str}'")
        cleaned = cleaned.replace(",", "")

    return to_amount(cleaned)
