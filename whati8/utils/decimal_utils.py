"""Decimal arithmetic helpers"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

from whati8.core.exceptions import ValidationError

ZERO = Decimal("0.00")
MAX_AMOUNT = Decimal(10) ** 12

MoneyInput = Union[Decimal, int, float, str]


def round_decimal(value: Decimal, decimal_places: int = 2) -> Decimal:
    """
    Round a decimal value to specified decimal places.

    Args:
        value: Decimal value to round
        decimal_places: Number of decimal places (default 2)

    Returns:
        Rounded decimal value
    """
    quantize_value = Decimal(10) ** -decimal_places
    return value.quantize(quantize_value, rounding=ROUND_HALF_UP)


def sum_decimals(values: Iterable[Decimal]) -> Decimal:
    """
    Sum decimal values.

    Args:
        values: Decimal values

    Returns:
        Sum of all values
    """
    return sum(values, Decimal("0"))


def to_money(value: MoneyInput) -> Decimal:
    """
    Parse a user supplied amount into a 2dp Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``0.10`` and not its
    binary expansion.

    Raises:
        ValidationError: If the value is not a finite number or its
            magnitude reaches MAX_AMOUNT
    """
    amount = _parse(value)
    try:
        amount = round_decimal(amount)
    except InvalidOperation as e:
        raise ValidationError(f"Amount out of range: {value!r}") from e
    if amount == 0:
        return ZERO
    return amount


def to_non_negative_money(value: MoneyInput, label: str = "Amount") -> Decimal:
    """
    Parse an amount that must not be negative.

    The sign is checked before rounding, so ``-0.004`` is rejected even
    though it rounds to ``0.00``.

    Raises:
        ValidationError: If the value is negative or not a valid amount
    """
    if _parse(value) < 0:
        raise ValidationError(f"{label} cannot be negative, got {value}")
    return to_money(value)


def _parse(value: MoneyInput) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    # Keeps running totals well inside the default 28-digit context.
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"Amount out of range: {value!r}")
    return amount


def format_money(value: Decimal) -> str:
    """Render an amount with exactly two decimal places"""
    return str(round_decimal(value))
