"""
Base types for exercise definitions.

ExerciseDefinition carries the per-exercise facts the suggestion engine
needs but does not infer from history: which equipment sets the rounding
step, and whether the movement is compound (tighter regression fit and a
smaller per-session weight increase).
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExerciseDefinition:
    """Catalog entry for one exercise."""

    exercise_id: str          # e.g. "bench_press"
    name: str                 # as logged in workout history, e.g. "Bench Press"
    equipment: list[str]      # first recognised entry sets the rounding step
    is_compound: bool
    movement_pattern: str = ""  # e.g. "Horizontal Push"
    aliases: list[str] = field(default_factory=list)
