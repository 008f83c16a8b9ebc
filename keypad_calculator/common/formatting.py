"""Render numeric results as display text."""
import math

# Magnitudes rendered positionally; outside this range exponent notation is used
MAX_POSITIONAL_EXPONENT = 21
MIN_POSITIONAL_EXPONENT = -6


def _decompose(value: float):
    """
    Split a positive finite float into its shortest significant digits and decimal point position.

    The returned ``(digits, point)`` satisfy ``value == 0.<digits> * 10 ** point``.

    :param float value: Positive finite number

    :return: Tuple of (digits, point)
    :rtype: Tuple[str, int]
    """
    # repr() gives the shortest string that round-trips to the same float
    mantissa, _, exponent = repr(value).partition("e")
    integer_part, _, fraction = mantissa.partition(".")
    all_digits = integer_part + fraction
    leading_zeros = len(all_digits) - len(all_digits.lstrip("0"))
    point = len(integer_part) + int(exponent or 0) - leading_zeros
    return all_digits.strip("0"), point


def format_number(value: float) -> str:
    """
    Format a number for the display.

    Integral values print without a fractional part, other values use the
    shortest round-trip digits. Numbers from 1e-6 up to 1e21 are written
    positionally, smaller or larger ones in exponent notation (``1e+21``,
    ``1.5e-7``).

    :param float value: Number to format

    :return: Display text
    :rtype: str
    :raises ValueError: If value is not finite
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite value: {value}")
    if value == 0:
        # Covers negative zero as well
        return "0"
    if value < 0:
        return "-" + format_number(-value)

    digits, point = _decompose(float(value))
    count = len(digits)

    if count <= point <= MAX_POSITIONAL_EXPONENT:
        return digits + "0" * (point - count)
    if 0 < point <= MAX_POSITIONAL_EXPONENT:
        return f"{digits[:point]}.{digits[point:]}"
    if MIN_POSITIONAL_EXPONENT < point <= 0:
        return "0." + "0" * -point + digits

    exponent = point - 1
    sign = "+" if exponent >= 0 else "-"
    significand = digits[0] if count == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{significand}e{sign}{abs(exponent)}"
