"""
Intra-session adaptation rules.

Called after every completed set while the athlete is training:

- adapt_next_set() is a simple ladder: bump, hold, accept or back off
  depending on how the reps compared with the target.
- detect_pattern_shift() recognises when the athlete has clearly switched
  to a different kind of session (e.g. heavy instead of light) and
  re-targets all remaining sets from the most similar past session.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .config import DEFAULT_CONFIG, SuggestionConfig
from .equipment import round_to_increment
from .models import ExerciseDataPoint, PatternShiftResult, SetLog, SetSpec

logger = logging.getLogger(__name__)


def adapt_next_set(
    suggested_weight: float,
    suggested_reps: int,
    actual_weight: float,
    actual_reps: int,
    equipment: Sequence[str],
    is_compound: bool,
    *,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> SetSpec:
    """
    Target for the next set given how the last one went.

    The athlete's actual weight becomes the new baseline; reps are judged
    against the original target.

    Args:
        suggested_weight: Weight originally suggested for the completed set
        suggested_reps: Reps originally suggested for the completed set
        actual_weight: Weight actually used
        actual_reps: Reps actually completed
        equipment: Equipment names for rounding
        is_compound: Selects the maximum weight increase
        config: Engine configuration

    Returns:
        SetSpec for the next set
    """
    target_reps = suggested_reps
    base_weight = actual_weight

    if actual_reps >= target_reps + config.easy_reps_above:
        # Too easy: small bump, never past the per-session cap
        bumped = base_weight * (1 + config.easy_bump_percent)
        capped = min(bumped, base_weight * (1 + config.max_increase(is_compound)))
        return SetSpec(
            weight=round_to_increment(capped, equipment, False, config),
            reps=target_reps,
        )

    if actual_reps >= target_reps:
        return SetSpec(weight=base_weight, reps=target_reps)

    if actual_reps >= target_reps - config.miss_reps_below:
        # Small miss: keep the load, accept the lower reps
        return SetSpec(weight=base_weight, reps=actual_reps)

    reduced = base_weight * (1 - config.miss_reduce_percent)
    return SetSpec(
        weight=round_to_increment(reduced, equipment, False, config),
        reps=target_reps,
    )


def _relative_deviation(actual: float, reference: float, default: float) -> float:
    """|actual - reference| / reference, or ``default`` for a non-positive reference."""
    if reference <= 0:
        return default
    return abs(actual - reference) / reference


def find_closest_session(
    set_index: int,
    weight: float,
    reps: int,
    data_points: Sequence[ExerciseDataPoint],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> tuple[ExerciseDataPoint | None, float]:
    """
    Find the past session whose set at ``set_index`` best matches a performance.

    Sessions with fewer sets are compared at their last set.  The distance
    weights the relative weight difference above the relative rep
    difference, since load is the stronger signal of the session type.

    Returns:
        (best session or None, its distance); lower distance is closer
    """
    best: ExerciseDataPoint | None = None
    best_distance = float("inf")
    weight_share = config.similarity_weight_share

    for session in data_points:
        if not session.set_details:
            continue
        ref = session.set_details[min(set_index, len(session.set_details) - 1)]
        distance = (
            _relative_deviation(weight, ref.weight, 1.0) * weight_share
            + _relative_deviation(reps, ref.reps, 1.0) * (1 - weight_share)
        )
        if distance < best_distance:
            best_distance = distance
            best = session

    return best, best_distance


def detect_pattern_shift(
    completed_set_index: int,
    actual_weight: float,
    actual_reps: int,
    original_suggested_sets: Sequence[SetLog],
    data_points: Sequence[ExerciseDataPoint],
    remaining_set_count: int,
    equipment: Sequence[str],
    is_compound: bool,
    *,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> PatternShiftResult:
    """
    Re-plan the rest of the session after a large deviation.

    Args:
        completed_set_index: 0-based index of the set just completed
        actual_weight: Weight actually used
        actual_reps: Reps actually completed
        original_suggested_sets: The session's original suggestions
        data_points: Historical data points for the exercise
        remaining_set_count: Uncompleted sets left after this one
        equipment: Equipment names for rounding
        is_compound: Compound movement flag
        config: Engine configuration

    Returns:
        PatternShiftResult; ``shifted=False`` with no targets when the
        deviation is small or there is nothing left to re-plan
    """
    no_shift = PatternShiftResult(shifted=False, new_targets=[])

    if remaining_set_count <= 0 or not 0 <= completed_set_index < len(original_suggested_sets):
        return no_shift

    suggested = original_suggested_sets[completed_set_index]
    weight_dev = _relative_deviation(actual_weight, suggested.weight or 0.0, 0.0)
    reps_dev = _relative_deviation(actual_reps, suggested.reps or 0, 0.0)

    if (
        weight_dev <= config.pattern_shift_weight_threshold
        and reps_dev <= config.pattern_shift_reps_threshold
    ):
        return no_shift

    best, distance = find_closest_session(
        completed_set_index, actual_weight, actual_reps, data_points, config
    )

    targets: list[SetSpec] = []

    if best is None or distance > config.pattern_shift_max_similarity:
        logger.debug(
            "Pattern shift at set %d: no close session (distance %.3f), projecting from actual",
            completed_set_index, distance,
        )
        for i in range(remaining_set_count):
            bumped = actual_weight * (1 + config.small_bump_percent * (i + 1))
            targets.append(
                SetSpec(weight=round_to_increment(bumped, equipment, False, config), reps=actual_reps)
            )
        return PatternShiftResult(shifted=True, new_targets=targets)

    logger.debug(
        "Pattern shift at set %d: matched session of %s (distance %.3f)",
        completed_set_index, best.date.date().isoformat(), distance,
    )
    template_sets = best.set_details
    for i in range(remaining_set_count):
        template = template_sets[min(completed_set_index + 1 + i, len(template_sets) - 1)]
        progressed = round_to_increment(
            template.weight * (1 + config.small_bump_percent), equipment, False, config
        )
        targets.append(
            SetSpec(
                weight=progressed if progressed > template.weight else template.weight,
                reps=template.reps,
            )
        )

    return PatternShiftResult(shifted=True, new_targets=targets)
