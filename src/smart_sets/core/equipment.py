"""
Equipment-aware weight rounding.

Suggestions are snapped to the smallest step the athlete can actually
load: 5 for plates, dumbbell racks and stacks, 1 for bodyweight and
band work.  Rounding is downward unless the caller explicitly allows
rounding to the nearest step (only on positive-trend projections).
"""

from __future__ import annotations

import math
from typing import Iterable

from .config import DEFAULT_CONFIG, SuggestionConfig
from .models import WeightIncrement

# Tolerance for float noise just under a whole step (e.g. 124.99999999)
_STEP_EPSILON = 1e-9


def get_weight_increment(
    equipment: Iterable[str],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> WeightIncrement:
    """
    Return the increment of the first recognised equipment type.

    Args:
        equipment: Equipment names in the exercise's preferred order
        config: Engine configuration holding the increment table

    Returns:
        WeightIncrement; the default increment when nothing is recognised
    """
    for name in equipment:
        if name in config.equipment_increments:
            return WeightIncrement(name, float(config.equipment_increments[name]))
    return WeightIncrement("default", float(config.default_increment))


def round_to_increment(
    weight: float,
    equipment: Iterable[str],
    allow_round_up: bool = False,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> float:
    """
    Snap a weight to the equipment's increment.

    Args:
        weight: Raw weight
        equipment: Equipment names for the exercise
        allow_round_up: Round to nearest step instead of down
        config: Engine configuration

    Returns:
        Non-negative multiple of the increment, or max(0, weight) when the
        increment is not positive
    """
    increment = get_weight_increment(equipment, config).increment

    if increment <= 0:
        return max(0.0, weight)

    if allow_round_up:
        steps = math.floor(weight / increment + 0.5)
    else:
        steps = math.floor(weight / increment + _STEP_EPSILON)

    return max(0.0, steps * increment)
