"""Numeric helpers shared by the scoring formulas"""

import math


def round_half_up(value: float) -> int:
    """Round halves up (2.5 -> 3, -2.5 -> -2); round() would give 2 and -2"""
    return math.floor(value + 0.5)


def monthly_factor(window_days: int) -> float:
    """Multiplier that scales a window total to a 30-day month"""
    return 30 / window_days


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is zero"""
    return numerator / denominator if denominator else 0.0
