# File: utils/math_utils.py
"""Math and calculation utilities for Pet Progress.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Functions:
    - round_half_up: Integer rounding with .5 going up (not banker's rounding)
    - calculate_percentage: Progress percentage calculations
    - clamp: Bound a value to a closed range
"""

from __future__ import annotations

import math

# Default float precision for percentages
DATA_FLOAT_PRECISION = 2


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves up (never to even).

    Examples:
        round_half_up(20.5) → 21
        round_half_up(21.5) → 22
        round_half_up(20.34) → 20
    """
    return math.floor(value + 0.5)


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage with proper rounding.

    Args:
        current: Current progress value
        target: Target/total value
        precision: Number of decimal places for rounding

    Returns:
        Percentage (0-100) with proper rounding, or 0.0 if target is 0

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    return round((current / target) * 100, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(45, 0, 30) → 30
        clamp(-10, 0, 30) → 0
        clamp(15, 0, 30) → 15
    """
    return max(min_val, min(value, max_val))
