"""
Seed quantities: parsing caller input and rendering stored values.

Quantities are kilograms held as Decimal (Numeric(18, 3) in the database).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from seedtrace_kernel.exceptions import InvalidQuantityError


def to_quantity(value: Decimal | int | str) -> Decimal:
    """
    Convert a number or numeric string to Decimal.

    Sign is not checked here; callers decide whether zero or negative
    amounts are meaningful.

    Raises:
        InvalidQuantityError: ``value`` is not a finite number.
    """
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidQuantityError(value) from None
    if not amount.is_finite():
        raise InvalidQuantityError(value)
    return amount


def format_quantity(quantity: Decimal) -> str:
    """Render 110.000 as 110 and 12.500 as 12.5."""
    text = format(quantity.normalize(), "f")
    return text if text != "-0" else "0"


def quantity_number(quantity: Decimal) -> int | float:
    # At three decimal places float repr gives back the same digits.
    if quantity == quantity.to_integral_value():
        return int(quantity)
    return float(quantity)
