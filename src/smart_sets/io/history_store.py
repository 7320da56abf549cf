"""
JSONL-based workout history snapshot.

The engine only ever reads history; this store loads a snapshot exported
by the host application, one workout per line:

    {"id": "w1", "date": "2026-03-02", "exercises": [
        {"name": "Bench Press", "sets": [{"weight": 100, "reps": 8, "completed": true}]}]}
"""

import json
import os
from pathlib import Path
from typing import Iterable

from ..core.extractor import parse_session_date
from ..core.models import SetLog, Workout, WorkoutExercise
from .serializers import ValidationError, dict_to_workout


def get_default_history_path() -> Path:
    """Return ~/.smart-sets/history.jsonl."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".smart-sets" / "history.jsonl"


class HistoryStore:
    """
    Read-only access to a workout history JSONL file.
    """

    def __init__(self, history_path: str | Path):
        """
        Initialize the history store.

        Args:
            history_path: Path to the JSONL history file
        """
        self.history_path = Path(history_path)

    def exists(self) -> bool:
        """Check if the history file exists."""
        return self.history_path.exists()

    def load_workouts(self) -> list[Workout]:
        """
        Load all workouts from the history file.

        Returns:
            Workouts in file order

        Raises:
            FileNotFoundError: If the history file does not exist
            ValidationError: If a line is not valid JSON or not a valid workout
        """
        if not self.history_path.exists():
            raise FileNotFoundError(f"History file not found: {self.history_path}")

        workouts: list[Workout] = []
        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValidationError(f"Invalid JSON on line {line_num}: {e}") from e
                try:
                    workouts.append(dict_to_workout(data))
                except ValidationError as e:
                    raise ValidationError(f"Line {line_num}: {e}") from e

        return workouts


def latest_exercise_sets(
    workouts: Iterable[Workout],
    exercise_name: str,
    exclude_session_id: str | None = None,
) -> list[SetLog]:
    """
    Return the completed sets of the latest workout that logged the exercise.

    Args:
        workouts: Workout history, any order
        exercise_name: Exercise name as logged
        exclude_session_id: Workout id to ignore (the in-progress one)

    Returns:
        Completed sets in logged order, or [] if no workout has any
    """
    latest: WorkoutExercise | None = None
    latest_date = None
    for workout in workouts:
        if exclude_session_id and workout.id == exclude_session_id:
            continue
        date = parse_session_date(workout.date)
        if date is None:
            continue
        if latest_date is not None and date < latest_date:
            continue
        for ex in workout.exercises:
            if ex.name == exercise_name and any(s.completed for s in ex.sets):
                latest, latest_date = ex, date
                break
    if latest is None:
        return []
    return [s for s in latest.sets if s.completed]
