"""
Turn raw workout history into a per-exercise time series.

Only completed sets with a positive weight are used; a session without
any such set for the exercise is left out of the series entirely.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable

from .config import DEFAULT_CONFIG, SuggestionConfig
from .models import ExerciseDataPoint, SetSpec, Workout

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_session_date(value: str) -> datetime | None:
    """
    Parse an ISO-8601 date/datetime into a naive UTC datetime.

    Aware values are converted to UTC; naive values are taken as UTC.
    A trailing "Z" is accepted.

    Returns:
        The parsed datetime, or None if the value cannot be parsed
    """
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def extract_data_points(
    exercise_name: str,
    workouts: Iterable[Workout],
    exclude_session_id: str | None = None,
    *,
    now: datetime | None = None,
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> list[ExerciseDataPoint]:
    """
    Extract the recent history of one exercise.

    Args:
        exercise_name: Exercise name as logged in the workouts
        workouts: Full workout history, any order
        exclude_session_id: Id of the in-progress workout to ignore
        now: Reference time (naive UTC); defaults to the current time
        config: Engine configuration

    Returns:
        Data points sorted oldest first, limited to the newest
        ``config.max_sessions``
    """
    reference = now if now is not None else utc_now()
    cutoff = reference - timedelta(days=config.lookback_days)

    points: list[ExerciseDataPoint] = []

    for workout in workouts:
        if exclude_session_id and workout.id == exclude_session_id:
            continue

        session_date = parse_session_date(workout.date)
        if session_date is None:
            logger.debug("Skipping workout %s: unparsable date %r", workout.id, workout.date)
            continue
        if session_date < cutoff:
            continue

        exercise = next((ex for ex in workout.exercises if ex.name == exercise_name), None)
        if exercise is None:
            continue

        completed = [s for s in exercise.sets if s.completed]
        if not completed:
            continue

        weighted = [s for s in completed if s.weight is not None and s.weight > 0]
        if not weighted:
            continue

        weights = [float(s.weight) for s in weighted]  # type: ignore[arg-type]
        reps = [int(s.reps or 0) for s in weighted]

        top_weight = max(weights)
        top_reps = reps[weights.index(top_weight)]

        points.append(
            ExerciseDataPoint(
                date=session_date,
                avg_weight=sum(weights) / len(weights),
                avg_reps=sum(reps) / len(reps),
                top_set_weight=top_weight,
                top_set_reps=top_reps,
                total_sets=len(completed),
                total_volume=sum(w * r for w, r in zip(weights, reps)),
                set_details=[SetSpec(weight=w, reps=r) for w, r in zip(weights, reps)],
            )
        )

    points.sort(key=lambda p: p.date)

    if len(points) > config.max_sessions:
        points = points[-config.max_sessions:]

    logger.debug("Extracted %d data points for %s", len(points), exercise_name)
    return points
