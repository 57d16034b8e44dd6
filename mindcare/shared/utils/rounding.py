"""Score rounding.

Dashboard scores round .5 up (e.g. 62.5 -> 63). Python's round() uses
banker's rounding, which would store 62 for the same input.
"""
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return int(math.floor(value + 0.5))
