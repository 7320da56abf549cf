"""
Suggestion generation for smart-sets.

Produces per-set weight/rep targets for the next session of an exercise.
Each set position is projected independently from its own history, so a
pyramid or a back-off set keeps its shape instead of being flattened to
the session average.  The whole pipeline is deterministic for a given
history, reference time and configuration.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Sequence

from .config import DEFAULT_CONFIG, SuggestionConfig
from .equipment import round_to_increment
from .extractor import extract_data_points
from .metrics import linear_regression, round_half_up
from .models import (
    DeloadPattern,
    ExerciseDataPoint,
    FallbackPattern,
    PatternAnalysis,
    ProgressiveOverloadPattern,
    RepCyclingPattern,
    SetLog,
    SetSpec,
    SmartSuggestionResult,
    StablePattern,
    Workout,
)
from .patterns import analyze_pattern, detect_set_arrangement, is_last_session_deload

logger = logging.getLogger(__name__)

# Sessions immediately before a deload that define the baseline to return to
PRE_DELOAD_SESSIONS = 3


def _project_position(
    history: Sequence[tuple[int, SetSpec]],
    equipment: Sequence[str],
    max_increase: float,
    config: SuggestionConfig,
) -> SetSpec:
    """
    Project the next weight/reps for one set position.

    Args:
        history: (session index, set) pairs for this position, oldest first
        equipment: Equipment names for rounding
        max_increase: Maximum fractional weight increase
        config: Engine configuration

    Returns:
        Projected SetSpec
    """
    last = history[-1][1]

    if len(history) == 1:
        bumped = round_to_increment(
            last.weight * (1 + config.small_bump_percent), equipment, False, config
        )
        return SetSpec(weight=bumped if bumped > last.weight else last.weight, reps=last.reps)

    weight_fit = linear_regression([(x, s.weight) for x, s in history])
    reps_fit = linear_regression([(x, s.reps) for x, s in history])

    ceiling = last.weight * (1 + max_increase)
    projected_weight = last.weight + weight_fit.slope
    projected_weight = min(projected_weight, ceiling)
    projected_weight = max(projected_weight, last.weight * (1 - config.max_decrease))

    next_weight = round_to_increment(projected_weight, equipment, weight_fit.slope > 0, config)
    if next_weight > ceiling:
        # Rounding to nearest must not step over the increase cap
        next_weight = round_to_increment(projected_weight, equipment, False, config)

    if next_weight > last.weight:
        # Heavier load: hold the rep target
        next_reps = last.reps
    else:
        projected = last.reps + reps_fit.slope
        next_reps = round_half_up(min(projected, last.reps + config.max_rep_gain))

    return SetSpec(weight=next_weight, reps=max(next_reps, 1))


def generate_per_set_suggestions(
    pool: Sequence[ExerciseDataPoint],
    requested_sets: int,
    equipment: Sequence[str],
    is_compound: bool,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> list[SetSpec]:
    """
    Project every set position from a pool of sessions.

    Positions are analysed up to the larger of the requested count and the
    longest session in the pool.  A position nobody has performed copies
    the previous position's result (or the last session's averages for the
    first position).

    Args:
        pool: Chronological sessions to derive the trends from
        requested_sets: Number of targets to return
        equipment: Equipment names for rounding
        is_compound: Selects the maximum weight increase
        config: Engine configuration

    Returns:
        Exactly ``requested_sets`` targets (empty if the pool is empty)
    """
    if not pool or requested_sets <= 0:
        return []

    max_increase = config.max_increase(is_compound)
    positions = max(requested_sets, max(len(s.set_details) for s in pool))

    results: list[SetSpec] = []
    for pos in range(positions):
        history = [
            (x, session.set_details[pos])
            for x, session in enumerate(pool)
            if len(session.set_details) > pos
        ]

        if history:
            results.append(_project_position(history, equipment, max_increase, config))
        elif results:
            results.append(results[-1])
        else:
            last_session = pool[-1]
            results.append(
                SetSpec(weight=last_session.avg_weight, reps=round_half_up(last_session.avg_reps))
            )

    return results[:requested_sets]


def apply_straight_across_progression(base_sets: Sequence[SetSpec]) -> list[SetSpec]:
    """
    Mild within-session progression for straight-across work.

    Each set keeps its own projected weight; set i gets i extra reps on top
    of its own projected reps.  Weights are not flattened to the first set,
    so a position whose trend differs keeps its own load.
    """
    if len(base_sets) <= 1:
        return list(base_sets)
    return [SetSpec(weight=s.weight, reps=s.reps + i) for i, s in enumerate(base_sets)]


def _fallback_sets(
    recent_sets: Sequence[SetLog] | None,
    requested_sets: int,
    config: SuggestionConfig,
) -> list[SetSpec]:
    """Reuse the most recent sets one-for-one, or a safe default."""
    if requested_sets <= 0:
        return []
    if not recent_sets:
        return [SetSpec(weight=0.0, reps=config.fallback_reps) for _ in range(requested_sets)]

    reused = [
        SetSpec(
            weight=float(s.weight) if s.weight is not None else 0.0,
            reps=int(s.reps) if s.reps is not None else config.fallback_reps,
        )
        for s in recent_sets[:requested_sets]
    ]
    while len(reused) < requested_sets:
        reused.append(reused[-1])
    return reused


def generate_suggestion_sets(
    analysis: PatternAnalysis,
    is_compound: bool,
    equipment: Sequence[str],
    recent_sets: Sequence[SetLog] | None,
    requested_sets: int,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> list[SetSpec]:
    """
    Build raw per-set targets for the analysed pattern.

    Args:
        analysis: Result of analyze_pattern()
        is_compound: Compound movement flag
        equipment: Equipment names for rounding
        recent_sets: The most recent session's sets (used by fallback)
        requested_sets: Number of targets to return
        config: Engine configuration

    Returns:
        Per-set targets, reps not yet clamped
    """
    if isinstance(analysis, FallbackPattern):
        return _fallback_sets(recent_sets, requested_sets, config)

    if isinstance(analysis, RepCyclingPattern):
        clusters = analysis.clusters
        pool = clusters.heavy if clusters.next_is_heavy else clusters.light
        per_set = generate_per_set_suggestions(pool, requested_sets, equipment, is_compound, config)
        if detect_set_arrangement(pool, config) == "straight_across":
            return apply_straight_across_progression(per_set)
        return per_set

    if isinstance(analysis, DeloadPattern) and is_last_session_deload(analysis.data_points, config):
        # Skip the deload itself and return to the pre-deload baseline
        pre_deload = analysis.data_points[-(PRE_DELOAD_SESSIONS + 1):-1]
        logger.debug("Last session was a deload; projecting from %d prior sessions", len(pre_deload))
        return generate_per_set_suggestions(pre_deload, requested_sets, equipment, is_compound, config)

    if isinstance(analysis, (ProgressiveOverloadPattern, StablePattern, DeloadPattern)):
        per_set = generate_per_set_suggestions(analysis.data_points, requested_sets, equipment, is_compound, config)
        if analysis.set_arrangement == "straight_across":
            return apply_straight_across_progression(per_set)
        return per_set

    raise TypeError(f"Unhandled pattern analysis: {type(analysis).__name__}")


def create_smart_suggestion_sets(
    exercise_name: str,
    workouts: Iterable[Workout],
    is_compound: bool,
    equipment: Sequence[str],
    most_recent_sets: Sequence[SetLog] | None,
    requested_set_count: int,
    exclude_session_id: str | None = None,
    *,
    now: datetime | None = None,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> SmartSuggestionResult:
    """
    Suggest the sets for the next session of an exercise.

    Args:
        exercise_name: Exercise name as logged
        workouts: Full workout history snapshot
        is_compound: Compound movement flag
        equipment: Equipment names for rounding
        most_recent_sets: Sets of the most recent session (fallback data)
        requested_set_count: Number of sets to suggest
        exclude_session_id: Id of the in-progress workout to ignore
        now: Reference time (naive UTC); defaults to the current time
        config: Engine configuration

    Returns:
        SmartSuggestionResult with reps clamped to [min_reps, max_reps]
    """
    points = extract_data_points(
        exercise_name, workouts, exclude_session_id, now=now, config=config
    )
    analysis = analyze_pattern(points, is_compound, now=now, config=config)

    raw = generate_suggestion_sets(
        analysis, is_compound, equipment, most_recent_sets, requested_set_count, config
    )

    sets = [
        SetLog(
            completed=False,
            weight=s.weight,
            reps=max(config.min_reps, min(config.max_reps, s.reps)),
        )
        for s in raw
    ]

    logger.debug(
        "%s: %s (%.2f) -> %d sets", exercise_name, analysis.pattern, analysis.confidence, len(sets)
    )

    return SmartSuggestionResult(
        sets=sets,
        pattern=analysis.pattern,
        confidence=analysis.confidence,
        history_set_count=len(sets),
        set_arrangement=analysis.set_arrangement,
        clusters=analysis.clusters if isinstance(analysis, RepCyclingPattern) else None,
    )
