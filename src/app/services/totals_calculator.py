"""Document Totals Calculator

Pure fixed-point computation of subtotal, tax and total for a list of
line items.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Tuple
from src.domain.exceptions import InvalidLineItem

DEFAULT_TAX_RATE = Decimal("0.19")
MINOR_UNIT = Decimal("0.01")

# Amounts must fit Numeric(18, 6) within 15 significant digits
AMOUNT_DECIMAL_PLACES = 6
AMOUNT_INTEGER_DIGITS = 9
AMOUNT_SCALE = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)
MAX_AMOUNT = Decimal(10) ** AMOUNT_INTEGER_DIGITS


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


def _to_decimal(value: Any, field: str, index: int) -> Decimal:
    if isinstance(value, float):
        # repr() gives the shortest string that round-trips, not the binary expansion
        value = repr(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidLineItem(
            f"Item {index}: {field} must be a decimal number",
            reason=f"{field}={value!r}",
        )
    if not result.is_finite():
        raise InvalidLineItem(
            f"Item {index}: {field} must be finite",
            reason=f"{field}={value!r}",
        )
    return result


def _fits_column(value: Decimal) -> bool:
    if abs(value) >= MAX_AMOUNT:
        return False
    return value == value.quantize(AMOUNT_SCALE)


def _check_amount(value: Decimal, field: str, index: Optional[int] = None) -> None:
    if not _fits_column(value):
        where = f"Item {index}: {field}" if index is not None else field
        raise InvalidLineItem(
            f"{where} must be below {MAX_AMOUNT:,} with at most {AMOUNT_DECIMAL_PLACES} decimal places",
            reason=f"{field}={value}",
        )


class DocumentTotalsCalculator:
    """
    Computes document totals

    Rules:
    - subtotal = sum(quantity * unit_price), exact decimal arithmetic
    - tax_amount = subtotal * tax_rate rounded half-up to 2 decimal places
    - total = subtotal + tax_amount
    - Empty lists, quantity <= 0 and unit_price < 0 raise InvalidLineItem
    - Every amount stays below 10**9 with at most 6 decimal places
    """

    def __init__(self, tax_rate: Decimal = DEFAULT_TAX_RATE):
        self.tax_rate = Decimal(tax_rate)

    def line_total(self, quantity: Any, unit_price: Any, index: int = 0) -> Decimal:
        """
        Validated quantity * unit_price for a single line

        Raises:
            InvalidLineItem: quantity <= 0, unit_price < 0 or non-finite values
        """
        qty = _to_decimal(quantity, "quantity", index)
        price = _to_decimal(unit_price, "unit_price", index)

        if qty <= 0:
            raise InvalidLineItem(
                f"Item {index}: quantity must be greater than 0",
                reason=f"quantity={qty}",
            )
        if price < 0:
            raise InvalidLineItem(
                f"Item {index}: unit_price must not be negative",
                reason=f"unit_price={price}",
            )
        _check_amount(qty, "quantity", index)
        _check_amount(price, "unit_price", index)

        total = qty * price
        _check_amount(total, "line_total", index)
        return total

    def calculate(self, items: Iterable[Tuple[Any, Any]]) -> DocumentTotals:
        """
        Compute totals for ordered (quantity, unit_price) pairs

        Args:
            items: Iterable of (quantity, unit_price)

        Returns:
            DocumentTotals

        Raises:
            InvalidLineItem: Empty list or any invalid line
        """
        subtotal = Decimal("0")
        count = 0
        for index, (quantity, unit_price) in enumerate(items):
            subtotal += self.line_total(quantity, unit_price, index)
            count += 1

        if count == 0:
            raise InvalidLineItem("A document needs at least one item")

        tax_amount = (subtotal * self.tax_rate).quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)
        total = subtotal + tax_amount

        _check_amount(subtotal, "subtotal")
        _check_amount(total, "total")
        return DocumentTotals(subtotal=subtotal, tax_amount=tax_amount, total=total)
