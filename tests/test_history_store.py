"""
Tests for the JSONL history snapshot and record validation.
"""

import pytest

from smart_sets.core.models import SetLog, Workout, WorkoutExercise
from smart_sets.io.history_store import HistoryStore, latest_exercise_sets
from smart_sets.io.serializers import ValidationError, dict_to_set_log


def _workout(wid: str, date: str, sets: list[SetLog], name: str = "Bench Press") -> Workout:
    return Workout(id=wid, date=date, exercises=[WorkoutExercise(name=name, sets=sets)])


class TestSetValidation:
    """dict_to_set_log() rejects values the engine cannot use."""

    def test_valid_set(self):
        assert dict_to_set_log({"weight": 100, "reps": 8.0, "completed": True}) == SetLog(True, 100.0, 8)

    @pytest.mark.parametrize("field", ["weight", "reps"])
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, field, value):
        with pytest.raises(ValidationError, match=f"{field} must be finite"):
            dict_to_set_log({field: value, "completed": True})

    def test_fractional_reps_rejected(self):
        with pytest.raises(ValidationError, match="whole number"):
            dict_to_set_log({"weight": 100, "reps": 8.5, "completed": True})

    def test_fractional_weight_allowed(self):
        assert dict_to_set_log({"weight": 22.5, "reps": 10}).weight == 22.5


class TestHistoryStore:
    """Loading a snapshot file."""

    def test_nan_line_is_validation_error(self, tmp_path):
        path = tmp_path / "history.jsonl"
        path.write_text(
            '{"id": "a", "date": "2026-03-02", "exercises": []}\n'
            '{"id": "b", "date": "2026-03-05", "exercises": '
            '[{"name": "Bench Press", "sets": [{"weight": NaN, "reps": 8, "completed": true}]}]}\n',
            encoding="utf-8",
        )
        with pytest.raises(ValidationError, match="Line 2: weight must be finite"):
            HistoryStore(path).load_workouts()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            HistoryStore(tmp_path / "absent.jsonl").load_workouts()


class TestLatestExerciseSets:
    """Most recent completed sets used by the fallback suggestion."""

    def test_uncompleted_sets_dropped(self):
        workouts = [
            _workout("w1", "2026-03-02", [SetLog(True, 100, 8)]),
            _workout("w2", "2026-03-05", [
                SetLog(True, 105, 8),
                SetLog(False, None, None),
                SetLog(True, 105, 7),
            ]),
        ]
        assert latest_exercise_sets(workouts, "Bench Press") == [
            SetLog(True, 105, 8),
            SetLog(True, 105, 7),
        ]

    def test_session_without_completed_sets_is_skipped(self):
        workouts = [
            _workout("w1", "2026-03-02", [SetLog(True, 100, 8)]),
            _workout("w2", "2026-03-05", [SetLog(False, 105, 8)]),
        ]
        assert latest_exercise_sets(workouts, "Bench Press") == [SetLog(True, 100, 8)]

    def test_excluded_session(self):
        workouts = [
            _workout("w1", "2026-03-02", [SetLog(True, 100, 8)]),
            _workout("live", "2026-03-05", [SetLog(True, 110, 5)]),
        ]
        assert latest_exercise_sets(workouts, "Bench Press", "live") == [SetLog(True, 100, 8)]

    def test_unknown_exercise(self):
        workouts = [_workout("w1", "2026-03-02", [SetLog(True, 100, 8)])]
        assert latest_exercise_sets(workouts, "Deadlift") == []
