from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django import template

register = template.Library()


def _to_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")


def _format_with_thousands(value: Decimal, decimals: int) -> str:
    decimals = max(decimals, 0)
    if not value.is_finite():
        value = Decimal("0")
    quantum = Decimal(1).scaleb(-decimals)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
    formatted = format(rounded, f",.{decimals}f")
    if decimals == 0:
        return formatted.replace(",", ".")
    integer_part, fraction_part = formatted.split(".")
    integer_part = integer_part.replace(",", ".")
    return f"{integer_part},{fraction_part}"


def format_brl(value: object) -> str:
    """Format an amount as Brazilian Real, always with two decimals."""
    number = _to_decimal(value)
    if not number.is_finite():
        number = Decimal("0")
    sign = "-" if number < 0 else ""
    return f"{sign}R$ {_format_with_thousands(abs(number), 2)}"


@register.filter(name="number_format")
def number_format(value: object, decimals: int = 0) -> str:
    """Format numbers using dots as thousand separators and comma decimals."""
    try:
        decimals_int = int(decimals)
    except (TypeError, ValueError):
        decimals_int = 0
    number = _to_decimal(value)
    return _format_with_thousands(number, decimals_int)


@register.filter(name="brl")
def brl(value: object) -> str:
    return format_brl(value)


@register.filter(name="percent")
def percent(value: object, decimals: int = 1) -> str:
    return f"{number_format(value, decimals)}%"


@register.filter(name="amount_for")
def amount_for(row, category) -> Decimal:
    return row.amount_for(category)


@register.filter(name="total_for")
def total_for(totals, category) -> Decimal:
    return totals.per_category.get(category, Decimal("0"))


@register.filter(name="share_for")
def share_for(distribution, category) -> float:
    return distribution.get(category, 0.0)
