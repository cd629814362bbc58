"""
Utility functions for intensity roll-ups across evidence levels.

Ions and peptides report the apex (maximum) intensity of their supporting PSMs,
proteins report the sum of the intensities of the ions they hold.
"""

import math
from typing import Iterable, List


def _valid_intensities(intensities: Iterable[float]) -> List[float]:
    valid = []
    for intensity in intensities:
        if intensity is None:
            continue
        try:
            value = float(intensity)
        except (TypeError, ValueError):
            continue
        if math.isnan(value) or value < 0:
            continue
        valid.append(value)
    return valid


def calculate_total_intensity(intensities: Iterable[float]) -> float:
    """
    Calculate the sum of all valid intensities.

    Args:
        intensities: Intensity values of the member ions

    Returns:
        Sum of all valid (non-NaN, non-negative) intensities.
        Returns 0.0 if the input is empty or contains no valid values.
    """
    return float(sum(_valid_intensities(intensities)))


def calculate_apex_intensity(intensities: Iterable[float]) -> float:
    """
    Calculate the apex (highest) intensity.

    Args:
        intensities: Intensity values of the supporting PSMs

    Returns:
        The maximum valid (non-NaN, non-negative) intensity.
        Returns 0.0 if the input is empty or contains no valid values.
    """
    valid = _valid_intensities(intensities)
    return max(valid) if valid else 0.0
