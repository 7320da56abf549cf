"""
Exercise catalog for smart-sets.

Each exercise is described by an ExerciseDefinition giving its equipment
and movement type to the suggestion engine.
"""

from .base import ExerciseDefinition
from .registry import EXERCISE_REGISTRY, find_exercise, get_exercise

__all__ = [
    "ExerciseDefinition",
    "EXERCISE_REGISTRY",
    "find_exercise",
    "get_exercise",
]
