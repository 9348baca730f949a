"""Conversion between real numbers and their JSON text form."""

from __future__ import annotations

import math


class RealOverflowError(OverflowError, ValueError):
    """Raised when a number's text does not fit in a double."""

    def __init__(self, text: str = "real number overflow") -> None:
        super().__init__(text)


def parse_real(text: str | bytes) -> float:
    """Parse the text of a JSON number as a float.

    Raises RealOverflowError if the magnitude is too large to represent.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("ascii")
    value = float(text)
    if math.isinf(value):
        raise RealOverflowError()
    return value


def format_real(value: float, precision: int = 0) -> str:
    """Format a float for JSON output.

    A precision of 0 means 17 significant digits. The result always holds
    a '.' or an 'e', and exponents carry neither '+' nor leading zeros.
    """
    if precision == 0:
        precision = 17
    elif precision < 0:
        precision = 6

    text = "%.*g" % (precision, value)

    if "." not in text and "e" not in text:
        text += ".0"

    mantissa, sep, exponent = text.partition("e")
    if sep:
        sign = "-" if exponent.startswith("-") else ""
        digits = exponent.lstrip("+-").lstrip("0")
        text = f"{mantissa}e{sign}{digits}"

    return text