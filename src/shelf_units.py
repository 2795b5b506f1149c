"""
Unit conversion, binary-fraction rendering and length parsing.

All lengths are carried in inches internally; millimetres only appear at the
edges (hardware datasheets, gap input, display).
"""

import math
import re
from typing import NamedTuple, Optional

MM_PER_INCH = 25.4
DEFAULT_PRECISION = 5

_DECIMAL_RE = re.compile(r'^([+-]?)(\d+(?:\.\d*)?|\.\d+)$')
_FRACTION_RE = re.compile(r'^([+-]?)(\d+)/(\d+)$')
_MIXED_RE = re.compile(r'^([+-]?)(\d+)(?:\s*-\s*|\s+)(\d+)/(\d+)$')


def to_mm(inches: float) -> float:
    """Convert inches to millimetres."""
    return inches * MM_PER_INCH


def to_inches(mm: float) -> float:
    """Convert millimetres to inches."""
    return mm / MM_PER_INCH


class BinaryFraction(NamedTuple):
    """A length rounded to a power-of-two fraction, e.g. 1-3/8."""

    negative: bool
    whole: int
    numerator: int
    denominator: int

    @property
    def value(self) -> float:
        magnitude = self.whole + self.numerator / self.denominator
        return -magnitude if self.negative else magnitude

    def __str__(self) -> str:
        sign = '-' if self.negative else ''
        if self.numerator == 0:
            return f'{sign}{self.whole}'
        if self.whole == 0:
            return f'{sign}{self.numerator}/{self.denominator}'
        return f'{sign}{self.whole}-{self.numerator}/{self.denominator}'


def nearest_binary_fraction(x: float, max_denominator: int = 32) -> BinaryFraction:
    """
    Find the power-of-two fraction closest to the fractional part of x.

    Denominators 1, 2, 4, ... max_denominator are tried in order and only a
    strictly smaller error replaces the current best, so ties resolve to the
    smallest denominator.

    Args:
        x: Length in inches (may be negative)
        max_denominator: Largest denominator to try (a power of two)

    Returns:
        BinaryFraction, reduced; a fraction that rounds up to a whole unit is
        folded into the whole part
    """
    negative = x < 0
    magnitude = abs(x)
    whole = math.floor(magnitude)
    decimal = magnitude - whole

    best_numer = 0
    best_denom = 1
    best_error = decimal

    denom = 1
    while denom <= max_denominator:
        numer = math.floor(decimal * denom + 0.5)
        error = abs(decimal - numer / denom)
        if error < best_error:
            best_error = error
            best_numer = numer
            best_denom = denom
        denom *= 2

    if best_numer > 0:
        divisor = math.gcd(best_numer, best_denom)
        best_numer //= divisor
        best_denom //= divisor

    if best_numer == best_denom:
        whole += 1
        best_numer = 0
        best_denom = 1

    if whole == 0 and best_numer == 0:
        negative = False

    return BinaryFraction(negative, int(whole), best_numer, best_denom)


def parse_length_expression(text: str) -> Optional[float]:
    """
    Parse a decimal, fraction ("3/8") or mixed number ("28-31/32", "28 31/32").

    A trailing inch mark is accepted. Empty input is 0.

    Returns:
        Value in inches, or None when the text cannot be parsed (including a
        zero denominator)
    """
    if text is None:
        return None
    cleaned = text.strip()
    if cleaned.endswith('"'):
        cleaned = cleaned[:-1].rstrip()
    if not cleaned:
        return 0.0

    match = _DECIMAL_RE.match(cleaned)
    if match:
        value = float(match.group(2))
        return -value if match.group(1) == '-' else value

    match = _FRACTION_RE.match(cleaned)
    if match:
        sign, numer, denom = match.groups()
        whole = '0'
    else:
        match = _MIXED_RE.match(cleaned)
        if not match:
            return None
        sign, whole, numer, denom = match.groups()

    if int(denom) == 0:
        return None
    value = int(whole) + int(numer) / int(denom)
    return -value if sign == '-' else value


def format_fraction(inches: float, max_denominator: int = 32) -> str:
    """Nearest binary fraction with an inch mark, e.g. 0.333" -> 11/32"."""
    return f'{nearest_binary_fraction(inches, max_denominator)}"'


def format_inches(inches: float, show_both: bool = False,
                  precision: int = DEFAULT_PRECISION) -> str:
    """Decimal inches, optionally followed by millimetres."""
    if show_both:
        return f'{inches:.{precision}f}" ({to_mm(inches):.{precision}f} mm)'
    return f'{inches:.{precision}f}"'


def format_with_fraction(inches: float) -> str:
    """Combined display string: 0.3340" (11/32", 8.48mm)."""
    return f'{inches:.4f}" ({format_fraction(inches)}, {to_mm(inches):.2f}mm)'
