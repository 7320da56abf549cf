"""
Data models for smart-sets.

Workout history records (SetLog, WorkoutExercise, Workout) come from the
host application; everything else is derived by the engine on each call
and never persisted.

The pattern analysis result is a closed union of five frozen dataclasses,
one per training pattern, each carrying only its own payload.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Literal, Union

PatternType = Literal[
    "progressive_overload",
    "rep_cycling",
    "deload",
    "stable",
    "fallback",
]
SetArrangement = Literal["pyramid_up", "pyramid_down", "straight_across"]


@dataclass
class SetLog:
    """
    A single logged set.

    weight/reps are None when the host app has no value for them
    (e.g. a cardio entry or a set the user has not filled in yet).
    """

    completed: bool
    weight: float | None = None
    reps: int | None = None


@dataclass
class WorkoutExercise:
    """One exercise within a workout, with its sets in performed order."""

    name: str
    sets: list[SetLog] = field(default_factory=list)


@dataclass
class Workout:
    """
    A historical workout session.

    ``date`` is an ISO-8601 date or datetime string.  It is not validated
    here: the extractor skips sessions whose date cannot be parsed.
    """

    id: str
    date: str
    exercises: list[WorkoutExercise] = field(default_factory=list)
    plan_id: str | None = None


@dataclass(frozen=True)
class SetSpec:
    """A weight/reps pair for one set position."""

    weight: float
    reps: int


@dataclass(frozen=True)
class WeightIncrement:
    """Smallest practical weight step for a piece of equipment."""

    equipment: str
    increment: float


@dataclass
class ExerciseDataPoint:
    """
    Summary of one past session for one exercise.

    ``set_details`` keeps the per-position weight/reps of the weighted sets
    in the order they were performed, with no gaps.
    """

    date: datetime  # naive UTC
    avg_weight: float
    avg_reps: float
    top_set_weight: float
    top_set_reps: float
    total_sets: int
    total_volume: float
    set_details: list[SetSpec] = field(default_factory=list)


@dataclass
class ClusterData:
    """Heavy (low-rep) and light (high-rep) session groups."""

    heavy: list[ExerciseDataPoint]
    light: list[ExerciseDataPoint]
    next_is_heavy: bool


# =============================================================================
# PATTERN ANALYSIS VARIANTS
# =============================================================================


@dataclass(frozen=True)
class FallbackPattern:
    """Not enough (or too old) history to trust any pattern."""

    data_points: list[ExerciseDataPoint]
    confidence: float = 0.0
    set_arrangement: SetArrangement = "straight_across"

    pattern: ClassVar[PatternType] = "fallback"


@dataclass(frozen=True)
class ProgressiveOverloadPattern:
    """Top-set weight climbs steadily at a consistent rep target."""

    data_points: list[ExerciseDataPoint]
    confidence: float
    set_arrangement: SetArrangement
    slope: float
    r_squared: float

    pattern: ClassVar[PatternType] = "progressive_overload"


@dataclass(frozen=True)
class RepCyclingPattern:
    """Sessions alternate between heavy/low-rep and light/high-rep days."""

    data_points: list[ExerciseDataPoint]
    confidence: float
    set_arrangement: SetArrangement
    clusters: ClusterData

    pattern: ClassVar[PatternType] = "rep_cycling"


@dataclass(frozen=True)
class DeloadPattern:
    """History contains at least one sharp volume drop."""

    data_points: list[ExerciseDataPoint]
    confidence: float
    set_arrangement: SetArrangement

    pattern: ClassVar[PatternType] = "deload"


@dataclass(frozen=True)
class StablePattern:
    """Maintenance: no stronger pattern detected."""

    data_points: list[ExerciseDataPoint]
    confidence: float
    set_arrangement: SetArrangement

    pattern: ClassVar[PatternType] = "stable"


PatternAnalysis = Union[
    FallbackPattern,
    ProgressiveOverloadPattern,
    RepCyclingPattern,
    DeloadPattern,
    StablePattern,
]


# =============================================================================
# ENGINE OUTPUTS
# =============================================================================


@dataclass
class SmartSuggestionResult:
    """
    Suggested sets for the next session of one exercise.

    Every entry in ``sets`` has ``completed=False``.  ``history_set_count``
    is the number of sets the suggestion was built for.
    """

    sets: list[SetLog]
    pattern: PatternType
    confidence: float
    history_set_count: int
    set_arrangement: SetArrangement = "straight_across"
    clusters: ClusterData | None = None


@dataclass
class PatternShiftResult:
    """Outcome of a live deviation check after a completed set."""

    shifted: bool
    new_targets: list[SetSpec] = field(default_factory=list)
