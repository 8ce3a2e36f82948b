"""Commission rate parsing."""

from decimal import Decimal
from fractions import Fraction
from typing import Union

Rate = Union[float, int, str, Decimal, Fraction]


def to_rate(value: Rate) -> Fraction:
    """
    Convert a commission rate to an exact fraction in [0, 1].

    Floats go through their shortest repr so that 0.05 means exactly 5/100.

    Raises:
        ValueError: If the rate is not a number or lies outside [0, 1]
    """
    rate = value if isinstance(value, Fraction) else Fraction(str(value))
    if not 0 <= rate <= 1:
        raise ValueError(f"Commission rate must be within [0, 1], got {value}")
    return rate
