"""
Configuration for the suggestion engine.

Every threshold the engine uses lives in SuggestionConfig.  The values
were chosen empirically and are part of the engine's behaviour: change
them through a suggestions.yaml override, not by editing the algorithms.
"""

from dataclasses import dataclass, field
from typing import Final

# =============================================================================
# EQUIPMENT INCREMENTS (same unit as logged weights)
# =============================================================================

EQUIPMENT_INCREMENTS: Final[dict[str, float]] = {
    "Barbell": 5.0,
    "Smith Machine": 5.0,
    "Trap Bar": 5.0,
    "Dumbbell": 5.0,
    "Kettlebell": 5.0,
    "Cable": 5.0,
    "Machine": 5.0,
    "Bodyweight": 1.0,
    "Bands": 1.0,
    "Bench": 5.0,
    "Cardio Machine": 1.0,
}

DEFAULT_INCREMENT: Final[float] = 5.0  # used when no equipment is recognised


@dataclass(frozen=True)
class SuggestionConfig:
    """All tunable engine thresholds."""

    # --- History window ---------------------------------------------------
    lookback_days: int = 56  # 8 weeks
    max_sessions: int = 20  # newest sessions kept per exercise
    min_sessions: int = 3  # below this the pattern is "fallback"
    stale_gap_days: float = 21.0  # gap since last session that forces fallback

    # --- Set arrangement ----------------------------------------------------
    arrangement_window: int = 6  # recent sessions inspected
    pyramid_up_threshold: float = 0.05  # last set heavier than first by > 5%
    pyramid_down_threshold: float = 0.05  # first set heavier than last by > 5%

    # --- Rep cycling --------------------------------------------------------
    min_sessions_rep_cycling: int = 4
    min_cluster_sessions: int = 2
    heavy_rep_floor: float = 11.0  # sessions below this always cluster as heavy
    rep_cycling_stddev: float = 3.0
    rep_cycling_alternation_rate: float = 0.6
    cluster_prediction_window: int = 4
    rep_cycling_confidence: float = 0.7

    # --- Progressive overload -----------------------------------------------
    r_squared_compound: float = 0.6
    r_squared_isolation: float = 0.5
    progressive_rep_stddev_max: float = 2.0

    # --- Deload -------------------------------------------------------------
    deload_min_sessions: int = 6
    deload_volume_drop: float = 0.20
    min_weeks_deload_auto: float = 12.0
    deload_confidence: float = 0.6
    stable_confidence: float = 0.5

    # --- Projection ---------------------------------------------------------
    max_increase_compound: float = 0.05
    max_increase_isolation: float = 0.10
    max_decrease: float = 0.10
    max_rep_gain: int = 2  # per-position rep projection cap over last value
    small_bump_percent: float = 0.025
    min_reps: int = 1
    max_reps: int = 30
    fallback_reps: int = 8

    # --- Intra-session adaptation -------------------------------------------
    easy_reps_above: int = 2
    miss_reps_below: int = 2
    easy_bump_percent: float = 0.025
    miss_reduce_percent: float = 0.05

    # --- Pattern shift ------------------------------------------------------
    pattern_shift_weight_threshold: float = 0.15
    pattern_shift_reps_threshold: float = 0.25
    pattern_shift_max_similarity: float = 0.30
    similarity_weight_share: float = 0.6  # reps get the remainder

    # --- Equipment ----------------------------------------------------------
    equipment_increments: dict[str, float] = field(
        default_factory=lambda: dict(EQUIPMENT_INCREMENTS)
    )
    default_increment: float = DEFAULT_INCREMENT

    def max_increase(self, is_compound: bool) -> float:
        """Maximum per-session weight increase fraction for the movement type."""
        return self.max_increase_compound if is_compound else self.max_increase_isolation

    def r_squared_threshold(self, is_compound: bool) -> float:
        """Minimum R² for a progressive-overload fit for the movement type."""
        return self.r_squared_compound if is_compound else self.r_squared_isolation


DEFAULT_CONFIG: Final[SuggestionConfig] = SuggestionConfig()
