"""
Training pattern detection.

Classifies an exercise's recent history into one of five patterns, checked
in priority order:

1. fallback              - too little or too old history
2. rep_cycling           - alternating heavy/light sessions
3. progressive_overload  - top-set weight rising at a steady rep target
4. deload                - history contains sharp volume drops
5. stable                - everything else

The within-session set arrangement (pyramid up/down, straight across) is
detected independently and attached to every non-fallback result.
"""

from __future__ import annotations

import logging
import statistics
from datetime import datetime
from typing import Sequence

from .config import DEFAULT_CONFIG, SuggestionConfig
from .extractor import utc_now
from .metrics import linear_regression, stddev
from .models import (
    ClusterData,
    DeloadPattern,
    ExerciseDataPoint,
    FallbackPattern,
    PatternAnalysis,
    ProgressiveOverloadPattern,
    RepCyclingPattern,
    SetArrangement,
    StablePattern,
)

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 24 * 60 * 60


def detect_set_arrangement(
    points: Sequence[ExerciseDataPoint],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> SetArrangement:
    """
    Detect how weight moves across set positions within recent sessions.

    Compares first and last set weight of each of the most recent sessions
    having at least two sets.  A pattern needs at least half of those
    sessions; otherwise (and on ties) the result is straight_across.

    Args:
        points: Chronological data points
        config: Engine configuration

    Returns:
        "pyramid_up", "pyramid_down" or "straight_across"
    """
    valid = [p for p in points if len(p.set_details) >= 2]
    if len(valid) < 2:
        return "straight_across"

    recent = valid[-config.arrangement_window:]
    up = down = 0

    for session in recent:
        first = session.set_details[0].weight
        last = session.set_details[-1].weight
        if first <= 0:
            continue
        if last > first * (1 + config.pyramid_up_threshold):
            up += 1
        elif first > last * (1 + config.pyramid_down_threshold):
            down += 1

    total = len(recent)
    if up / total >= 0.5 and up > down:
        return "pyramid_up"
    if down / total >= 0.5 and down > up:
        return "pyramid_down"
    return "straight_across"


def cluster_sessions(
    points: Sequence[ExerciseDataPoint],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> ClusterData | None:
    """
    Split sessions into heavy (low-rep) and light (high-rep) groups.

    The split threshold is the upper median of per-session average reps,
    floored at ``heavy_rep_floor`` so that a 10-rep session is always heavy.

    Returns:
        ClusterData, or None when there are too few sessions or either
        group is smaller than ``min_cluster_sessions``
    """
    if len(points) < config.min_sessions_rep_cycling:
        return None

    threshold = max(
        statistics.median_high(p.avg_reps for p in points),
        config.heavy_rep_floor,
    )

    def is_heavy(p: ExerciseDataPoint) -> bool:
        return p.avg_reps < threshold

    heavy = [p for p in points if is_heavy(p)]
    light = [p for p in points if not is_heavy(p)]

    if len(heavy) < config.min_cluster_sessions or len(light) < config.min_cluster_sessions:
        return None

    recent = list(points[-config.cluster_prediction_window:])
    flips = sum(
        1 for prev, curr in zip(recent, recent[1:]) if is_heavy(prev) != is_heavy(curr)
    )
    flip_rate = flips / (len(recent) - 1) if len(recent) > 1 else 0.0

    if flip_rate >= 0.5:
        # Regular alternation: next is the opposite of the last session
        next_is_heavy = not is_heavy(recent[-1])
    else:
        # Irregular: rebalance towards whichever group was rarer lately
        recent_heavy = sum(1 for p in recent if is_heavy(p))
        next_is_heavy = recent_heavy <= len(recent) // 2

    return ClusterData(heavy=heavy, light=light, next_is_heavy=next_is_heavy)


def detect_rep_cycling(
    points: Sequence[ExerciseDataPoint],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> bool:
    """
    Check that average reps swing widely and alternate around the median.

    Returns:
        True if the rep spread and median-crossing rate are both high enough
    """
    if len(points) < config.min_sessions_rep_cycling:
        return False

    reps = [p.avg_reps for p in points]
    if stddev(reps) < config.rep_cycling_stddev:
        return False

    median = statistics.median(reps)
    crossings = sum(1 for prev, curr in zip(reps, reps[1:]) if (prev > median) != (curr > median))
    return crossings / (len(reps) - 1) >= config.rep_cycling_alternation_rate


def _volume_drop(points: Sequence[ExerciseDataPoint], i: int) -> float:
    """Fractional volume drop of point i versus the three points before it."""
    trailing = sum(p.total_volume for p in points[i - 3:i]) / 3
    if trailing <= 0:
        return 0.0
    return 1 - points[i].total_volume / trailing


def detect_deload_history(
    points: Sequence[ExerciseDataPoint],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> bool:
    """
    Check whether any session dropped volume sharply versus its trailing average.

    Returns:
        True if at least one deload-sized drop occurred
    """
    if len(points) < config.deload_min_sessions:
        return False

    events = sum(
        1 for i in range(3, len(points)) if _volume_drop(points, i) > config.deload_volume_drop
    )
    return events >= 1


def is_last_session_deload(
    points: Sequence[ExerciseDataPoint],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> bool:
    """Check whether the most recent session itself looks like a deload."""
    if len(points) < 4:
        return False
    return _volume_drop(points, len(points) - 1) > config.deload_volume_drop


def days_since(point: ExerciseDataPoint, now: datetime) -> float:
    """Days elapsed between a data point and the reference time."""
    return (now - point.date).total_seconds() / _SECONDS_PER_DAY


def analyze_pattern(
    points: Sequence[ExerciseDataPoint],
    is_compound: bool,
    *,
    now: datetime | None = None,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> PatternAnalysis:
    """
    Classify the training pattern of an exercise.

    Args:
        points: Chronological data points from extract_data_points()
        is_compound: Compound movements need a tighter regression fit
        now: Reference time (naive UTC) for the staleness check
        config: Engine configuration

    Returns:
        One of the PatternAnalysis variants
    """
    points = list(points)
    reference = now if now is not None else utc_now()

    if len(points) < config.min_sessions:
        logger.debug("Fallback: %d sessions < %d", len(points), config.min_sessions)
        return FallbackPattern(data_points=points)

    gap_days = days_since(points[-1], reference)
    if gap_days > config.stale_gap_days:
        logger.debug("Fallback: last session %.1f days ago", gap_days)
        return FallbackPattern(data_points=points)

    arrangement = detect_set_arrangement(points, config)

    # Rep cycling first: each cluster carries its own overload trend
    clusters = cluster_sessions(points, config)
    if clusters is not None and detect_rep_cycling(points, config):
        logger.debug(
            "Rep cycling: %d heavy / %d light, next heavy=%s",
            len(clusters.heavy), len(clusters.light), clusters.next_is_heavy,
        )
        return RepCyclingPattern(
            data_points=points,
            confidence=config.rep_cycling_confidence,
            set_arrangement=arrangement,
            clusters=clusters,
        )

    regression = linear_regression([(i, p.top_set_weight) for i, p in enumerate(points)])
    rep_spread = stddev([p.avg_reps for p in points])

    if (
        regression.slope > 0
        and regression.r_squared >= config.r_squared_threshold(is_compound)
        and rep_spread < config.progressive_rep_stddev_max
    ):
        logger.debug(
            "Progressive overload: slope=%.3f r2=%.3f", regression.slope, regression.r_squared
        )
        return ProgressiveOverloadPattern(
            data_points=points,
            confidence=regression.r_squared,
            set_arrangement=arrangement,
            slope=regression.slope,
            r_squared=regression.r_squared,
        )

    if detect_deload_history(points, config):
        span_weeks = (points[-1].date - points[0].date).total_seconds() / (7 * _SECONDS_PER_DAY)
        if span_weeks >= config.min_weeks_deload_auto:
            logger.debug("Deload history over %.1f weeks", span_weeks)
            return DeloadPattern(
                data_points=points,
                confidence=config.deload_confidence,
                set_arrangement=arrangement,
            )

    return StablePattern(
        data_points=points,
        confidence=config.stable_confidence,
        set_arrangement=arrangement,
    )


def describe_analysis(analysis: PatternAnalysis) -> str:
    """
    Explain a pattern analysis in plain language.

    Args:
        analysis: Result of analyze_pattern()

    Returns:
        Multi-line human-readable explanation
    """
    points = analysis.data_points
    lines = [
        f"Pattern: {analysis.pattern} (confidence {analysis.confidence:.2f})",
        f"Sessions analysed: {len(points)}",
    ]

    if isinstance(analysis, FallbackPattern):
        lines.append(
            "Not enough recent history to detect a pattern; "
            "the last session's sets are reused as-is."
        )
        return "\n".join(lines)

    lines.append(f"Set arrangement: {analysis.set_arrangement.replace('_', ' ')}")

    if isinstance(analysis, ProgressiveOverloadPattern):
        lines.append(
            f"Top-set weight rises {analysis.slope:+.2f} per session "
            f"(R² = {analysis.r_squared:.2f}); next session continues the trend."
        )
    elif isinstance(analysis, RepCyclingPattern):
        clusters = analysis.clusters
        nxt = "heavy (low reps)" if clusters.next_is_heavy else "light (high reps)"
        lines.append(
            f"Alternating sessions: {len(clusters.heavy)} heavy, "
            f"{len(clusters.light)} light. Next session: {nxt}."
        )
    elif isinstance(analysis, DeloadPattern):
        lines.append(
            "History contains deload weeks; after a deload the plan returns "
            "to pre-deload loads."
        )
    else:
        lines.append("No clear trend; loads are projected per set from recent sessions.")

    return "\n".join(lines)
