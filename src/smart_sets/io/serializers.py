"""
JSON serialization for workout history and engine results.

Handles conversion between dataclasses and JSON-compatible dicts.  Input
records are validated here so the engine itself never has to raise.
"""

import math
import re
from typing import Any

from ..core.models import (
    ExerciseDataPoint,
    PatternShiftResult,
    SetLog,
    SetSpec,
    SmartSuggestionResult,
    Workout,
    WorkoutExercise,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _optional_number(value: Any, name: str) -> float | None:
    """Validate an optional numeric field."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return float(value)


def dict_to_set_log(data: dict[str, Any]) -> SetLog:
    """
    Convert dict to SetLog.

    Args:
        data: Dict with optional "weight", "reps" and "completed"

    Returns:
        SetLog instance

    Raises:
        ValidationError: If a field has the wrong type, is not finite or is negative
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Set must be an object, got {data!r}")

    weight = _optional_number(data.get("weight"), "weight")
    reps = _optional_number(data.get("reps"), "reps")
    if reps is not None and reps != int(reps):
        raise ValidationError(f"reps must be a whole number, got {reps:g}")
    completed = data.get("completed", False)
    if not isinstance(completed, bool):
        raise ValidationError(f"completed must be true/false, got {completed!r}")

    return SetLog(
        completed=completed,
        weight=weight,
        reps=int(reps) if reps is not None else None,
    )


def set_log_to_dict(set_log: SetLog) -> dict[str, Any]:
    """Convert SetLog to JSON-compatible dict."""
    return {
        "weight": set_log.weight,
        "reps": set_log.reps,
        "completed": set_log.completed,
    }


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert dict to Workout.

    Args:
        data: Dict with "id", "date" and "exercises"

    Returns:
        Workout instance

    Raises:
        ValidationError: If required fields are missing or malformed
    """
    if not isinstance(data, dict):
        raise ValidationError("Workout must be a JSON object")

    for key in ("id", "date"):
        if key not in data:
            raise ValidationError(f"Workout missing required field '{key}'")

    date = data["date"]
    if not isinstance(date, str) or not re.match(r"^\d{4}-\d{2}-\d{2}", date):
        raise ValidationError(f"Invalid date: {date!r}. Expected ISO format YYYY-MM-DD[THH:MM:SS]")

    exercises_raw = data.get("exercises", [])
    if not isinstance(exercises_raw, list):
        raise ValidationError("exercises must be a list")

    exercises: list[WorkoutExercise] = []
    for ex in exercises_raw:
        if not isinstance(ex, dict) or not isinstance(ex.get("name"), str):
            raise ValidationError(f"Exercise entry must have a string 'name': {ex!r}")
        sets_raw = ex.get("sets", [])
        if not isinstance(sets_raw, list):
            raise ValidationError(f"sets of '{ex['name']}' must be a list")
        exercises.append(
            WorkoutExercise(name=ex["name"], sets=[dict_to_set_log(s) for s in sets_raw])
        )

    plan_id = data.get("plan_id")
    return Workout(
        id=str(data["id"]),
        date=date,
        exercises=exercises,
        plan_id=str(plan_id) if plan_id is not None else None,
    )


def set_spec_to_dict(spec: SetSpec) -> dict[str, Any]:
    """Convert SetSpec to JSON-compatible dict."""
    return {"weight": spec.weight, "reps": spec.reps}


def data_point_to_dict(point: ExerciseDataPoint) -> dict[str, Any]:
    """Convert ExerciseDataPoint to JSON-compatible dict."""
    return {
        "date": point.date.isoformat(),
        "avg_weight": round(point.avg_weight, 2),
        "avg_reps": round(point.avg_reps, 2),
        "top_set_weight": point.top_set_weight,
        "top_set_reps": point.top_set_reps,
        "total_sets": point.total_sets,
        "total_volume": point.total_volume,
        "set_details": [set_spec_to_dict(s) for s in point.set_details],
    }


def suggestion_to_dict(result: SmartSuggestionResult) -> dict[str, Any]:
    """Convert SmartSuggestionResult to JSON-compatible dict."""
    out: dict[str, Any] = {
        "pattern": result.pattern,
        "confidence": round(result.confidence, 4),
        "set_arrangement": result.set_arrangement,
        "history_set_count": result.history_set_count,
        "sets": [set_log_to_dict(s) for s in result.sets],
    }
    if result.clusters is not None:
        out["clusters"] = {
            "heavy_sessions": len(result.clusters.heavy),
            "light_sessions": len(result.clusters.light),
            "next_is_heavy": result.clusters.next_is_heavy,
        }
    return out


def pattern_shift_to_dict(result: PatternShiftResult) -> dict[str, Any]:
    """Convert PatternShiftResult to JSON-compatible dict."""
    return {
        "shifted": result.shifted,
        "new_targets": [set_spec_to_dict(t) for t in result.new_targets],
    }


def parse_weight_reps(text: str) -> SetSpec:
    """
    Parse a "WEIGHT/REPS" or "WEIGHTxREPS" string, e.g. "100/8" or "102.5x5".

    Raises:
        ValidationError: If the string is not in either format
    """
    match = re.match(r"^\s*(\d+(?:\.\d+)?)\s*[/xX]\s*(\d+)\s*$", text)
    if not match:
        raise ValidationError(f"Invalid set '{text}'. Expected WEIGHT/REPS, e.g. 100/8")
    return SetSpec(weight=float(match.group(1)), reps=int(match.group(2)))


def parse_planned_sets(text: str) -> list[SetLog]:
    """
    Parse a comma-separated list of planned sets, e.g. "100/8,100/8,95/10".

    Returns:
        Uncompleted SetLog entries

    Raises:
        ValidationError: If any entry is malformed or the list is empty
    """
    parts = [p for p in text.split(",") if p.strip()]
    if not parts:
        raise ValidationError("At least one planned set is required")
    specs = [parse_weight_reps(p) for p in parts]
    return [SetLog(completed=False, weight=s.weight, reps=s.reps) for s in specs]
