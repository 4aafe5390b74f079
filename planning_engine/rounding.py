"""Rounding helpers shared by progress and score calculations."""

from __future__ import annotations

from math import floor


def round_half_up(value: float, digits: int = 0):
    """Round halves upward; returns an int when ``digits`` is 0."""

    scale = 10**digits
    rounded = floor(value * scale + 0.5)
    if digits == 0:
        return int(rounded)
    return rounded / scale


def percentage(numerator: float, denominator: float) -> int:
    """Integer percentage of ``numerator / denominator``, 0 for an empty denominator."""

    if denominator <= 0:
        return 0
    return round_half_up(100.0 * numerator / denominator)
