"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from an event record or a command.

    Returns:
        Decimal: Normalized numeric value.

    Raises:
        ValueError: If the value cannot be read as a number.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric amount: {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a numeric amount: {value!r}") from exc


def decimal_to_json(value: Decimal) -> int | str:
    """Return a JSON-safe value for a Decimal amount.

    Integral amounts are emitted as int. Fractional amounts are emitted as
    their decimal string so no digit is lost, and read back exactly by
    coerce_decimal.
    """
    if value == value.to_integral_value():
        return int(value)
    return str(value)


__all__ = ["coerce_decimal", "decimal_to_json"]
