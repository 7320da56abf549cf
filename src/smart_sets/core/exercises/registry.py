"""
Exercise registry.

All catalog exercises are registered here.  Use get_exercise() to look
up an ExerciseDefinition by id, or find_exercise() to resolve a logged
exercise name.

Exercises are loaded from per-exercise YAML files in the bundled
``src/smart_sets/exercises/`` directory at import time.  If nothing can
be loaded a RuntimeError is raised: the catalog ships with the package.

User overrides: place matching files in ``~/.smart-sets/exercises/``.
"""

from .base import ExerciseDefinition


def _build_registry() -> dict[str, ExerciseDefinition]:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "smart-sets: no exercise definitions could be loaded from YAML. "
            "Check that src/smart_sets/exercises/*.yaml files are present and valid."
        )
    return loaded


EXERCISE_REGISTRY: dict[str, ExerciseDefinition] = _build_registry()


def get_exercise(exercise_id: str) -> ExerciseDefinition:
    """
    Return the ExerciseDefinition for the given exercise_id.

    Args:
        exercise_id: Catalog id, e.g. "bench_press"

    Returns:
        ExerciseDefinition for the requested exercise

    Raises:
        ValueError: If exercise_id is not in the registry
    """
    if exercise_id not in EXERCISE_REGISTRY:
        valid = ", ".join(EXERCISE_REGISTRY)
        raise ValueError(f"Unknown exercise '{exercise_id}'. Valid IDs: {valid}")
    return EXERCISE_REGISTRY[exercise_id]


def find_exercise(name: str) -> ExerciseDefinition | None:
    """
    Resolve a logged exercise name (or id / alias), case-insensitively.

    Returns:
        The matching definition, or None for exercises outside the catalog
    """
    key = name.strip().casefold()
    for ex in EXERCISE_REGISTRY.values():
        candidates = [ex.exercise_id, ex.name, *ex.aliases]
        if any(key == c.casefold() for c in candidates):
            return ex
    return None
