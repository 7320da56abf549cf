"""
End-to-end tests for create_smart_suggestion_sets().

History is built as raw workouts, run through extraction, analysis and
per-set projection, and the final targets are compared with values
worked out by hand.
"""

import dataclasses
import math
from datetime import datetime, timedelta

import pytest

from smart_sets.core.config import DEFAULT_CONFIG
from smart_sets.core.models import (
    DeloadPattern,
    ExerciseDataPoint,
    FallbackPattern,
    SetLog,
    SetSpec,
    StablePattern,
    Workout,
    WorkoutExercise,
)
from smart_sets.core.patterns import analyze_pattern
from smart_sets.core.planner import (
    apply_straight_across_progression,
    create_smart_suggestion_sets,
    generate_per_set_suggestions,
    generate_suggestion_sets,
)

NOW = datetime(2026, 3, 20, 12, 0)
BARBELL = ["Barbell", "Bench"]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _workout(wid: str, date: str, sets: list[tuple[float, int]], name: str = "Bench Press") -> Workout:
    return Workout(
        id=wid,
        date=date,
        exercises=[
            WorkoutExercise(
                name=name,
                sets=[SetLog(completed=True, weight=w, reps=r) for w, r in sets],
            )
        ],
    )


def _scenario_a() -> list[Workout]:
    """Top set 100 → 120 in steps of 5, three straight sets of 8."""
    dates = ["2026-03-02", "2026-03-05", "2026-03-09", "2026-03-12", "2026-03-16"]
    weights = [100, 105, 110, 115, 120]
    return [
        _workout(f"a{i}", d, [(w, 8)] * 3)
        for i, (d, w) in enumerate(zip(dates, weights))
    ]


def _scenario_b() -> list[Workout]:
    """Light (12 reps) and heavy (6 reps) days alternating, ending heavy."""
    plan = [
        ("2026-02-27", 50, 12),
        ("2026-03-02", 80, 6),
        ("2026-03-05", 55, 12),
        ("2026-03-09", 85, 6),
        ("2026-03-12", 60, 12),
        ("2026-03-16", 90, 6),
    ]
    return [_workout(f"b{i}", d, [(w, r)] * 3) for i, (d, w, r) in enumerate(plan)]


def _suggest(workouts, requested=3, is_compound=True, equipment=BARBELL, recent=None, **kw):
    return create_smart_suggestion_sets(
        "Bench Press", workouts, is_compound, equipment, recent, requested, now=NOW, **kw
    )


def _weights(result) -> list[float]:
    return [s.weight for s in result.sets]


def _reps(result) -> list[int]:
    return [s.reps for s in result.sets]


def _point(day: int, weight: float, reps: int, n_sets: int = 3) -> ExerciseDataPoint:
    return ExerciseDataPoint(
        date=datetime(2026, 1, 5) + timedelta(days=day),
        avg_weight=weight,
        avg_reps=reps,
        top_set_weight=weight,
        top_set_reps=reps,
        total_sets=n_sets,
        total_volume=weight * reps * n_sets,
        set_details=[SetSpec(weight, reps)] * n_sets,
    )


# ===========================================================================
# Progressive overload
# ===========================================================================

class TestScenarioA:
    """Linear top-set progression."""

    def test_pattern_and_confidence(self):
        result = _suggest(_scenario_a())
        assert result.pattern == "progressive_overload"
        assert result.confidence == pytest.approx(1.0)
        assert result.set_arrangement == "straight_across"
        assert result.clusters is None

    def test_next_weight_continues_trend(self):
        # slope 5 → 125, under the 126 cap; heavier load holds 8 reps
        result = _suggest(_scenario_a())
        assert _weights(result) == [125.0, 125.0, 125.0]

    def test_straight_across_adds_one_rep_per_set(self):
        result = _suggest(_scenario_a())
        assert _reps(result) == [8, 9, 10]

    def test_sets_are_uncompleted_suggestions(self):
        result = _suggest(_scenario_a())
        assert all(s.completed is False for s in result.sets)
        assert result.history_set_count == 3

    def test_extra_positions_clone_previous(self):
        result = _suggest(_scenario_a(), requested=5)
        assert _weights(result) == [125.0] * 5
        assert _reps(result) == [8, 9, 10, 11, 12]

    def test_fewer_sets_than_history(self):
        result = _suggest(_scenario_a(), requested=1)
        assert [(s.weight, s.reps) for s in result.sets] == [(125.0, 8)]

    def test_zero_sets(self):
        result = _suggest(_scenario_a(), requested=0)
        assert result.sets == []
        assert result.history_set_count == 0

    def test_excluded_session_does_not_count(self):
        history = _scenario_a() + [_workout("live", "2026-03-19", [(200, 3)] * 3)]
        with_live_excluded = _suggest(history, exclude_session_id="live")
        assert _weights(with_live_excluded) == [125.0, 125.0, 125.0]

    def test_deterministic(self):
        first = _suggest(_scenario_a())
        second = _suggest(_scenario_a())
        assert first == second


class TestIncreaseClamp:
    """A steep trend is capped at the per-session maximum increase."""

    def _steep(self):
        return [
            _workout("s1", "2026-03-09", [(100, 8)] * 3),
            _workout("s2", "2026-03-12", [(150, 8)] * 3),
            _workout("s3", "2026-03-16", [(200, 8)] * 3),
        ]

    def test_compound_capped_at_five_percent(self):
        result = _suggest(self._steep())
        assert result.pattern == "progressive_overload"
        assert all(w <= 200 * 1.05 for w in _weights(result))
        assert _weights(result) == [210.0, 210.0, 210.0]

    def test_isolation_capped_at_ten_percent(self):
        result = _suggest(self._steep(), is_compound=False, equipment=["Dumbbell"])
        assert _weights(result) == [220.0, 220.0, 220.0]

    def test_round_up_never_crosses_the_cap(self):
        # slope 5 → 65, capped at 63; nearest step 65 is over the cap → floor 60
        history = [
            _workout("c1", "2026-03-09", [(50, 8)] * 3),
            _workout("c2", "2026-03-12", [(55, 8)] * 3),
            _workout("c3", "2026-03-16", [(60, 8)] * 3),
        ]
        result = _suggest(history, equipment=["Dumbbell"])
        assert _weights(result) == [60.0, 60.0, 60.0]
        assert all(w <= 60 * 1.05 for w in _weights(result))


class TestRoundingAndClamps:
    """Outputs always land on the equipment grid and rep bounds."""

    @pytest.mark.parametrize("equipment,step", [
        (["Barbell"], 5.0),
        (["Bodyweight"], 1.0),
        (["Dumbbell"], 5.0),
    ])
    def test_weights_on_increment_grid(self, equipment, step):
        for history in (_scenario_a(), _scenario_b()):
            result = _suggest(history, equipment=equipment)
            for w in _weights(result):
                assert math.isclose(w / step, round(w / step))

    def test_reps_clamped_to_max(self):
        recent = [SetLog(completed=True, weight=40, reps=45)]
        result = _suggest([], recent=recent, requested=2)
        assert result.pattern == "fallback"
        assert _reps(result) == [30, 30]

    def test_reps_clamped_to_min(self):
        recent = [SetLog(completed=True, weight=40, reps=0)]
        result = _suggest([], recent=recent, requested=1)
        assert _reps(result) == [1]

    def test_rep_limits_follow_config(self):
        config = dataclasses.replace(DEFAULT_CONFIG, max_reps=9)
        result = _suggest(_scenario_a(), config=config)
        assert _reps(result) == [8, 9, 9]


# ===========================================================================
# Rep cycling
# ===========================================================================

class TestScenarioB:
    """Alternating heavy/light days project from the predicted cluster."""

    def test_pattern_and_clusters(self):
        result = _suggest(_scenario_b())
        assert result.pattern == "rep_cycling"
        assert result.confidence == pytest.approx(0.7)
        assert result.clusters is not None
        assert {p.avg_reps for p in result.clusters.heavy} == {6}
        assert {p.avg_reps for p in result.clusters.light} == {12}
        assert result.clusters.next_is_heavy is False

    def test_light_day_projected_from_light_sessions_only(self):
        # light trend 50/55/60: compound cap 63 → nearest 65 exceeds it → 60,
        # no load increase so reps come from the flat 12-rep trend
        result = _suggest(_scenario_b())
        assert _weights(result) == [60.0, 60.0, 60.0]
        assert _reps(result) == [12, 13, 14]

    def test_isolation_cap_allows_next_step(self):
        result = _suggest(_scenario_b(), is_compound=False, equipment=["Dumbbell"])
        assert _weights(result) == [65.0, 65.0, 65.0]
        assert _reps(result) == [12, 13, 14]

    def test_heavy_day_after_light(self):
        plan = [
            ("2026-02-27", 75, 6),
            ("2026-03-02", 50, 12),
            ("2026-03-05", 80, 6),
            ("2026-03-09", 55, 12),
            ("2026-03-12", 85, 6),
            ("2026-03-16", 60, 12),
        ]
        history = [_workout(f"h{i}", d, [(w, r)] * 3) for i, (d, w, r) in enumerate(plan)]
        result = _suggest(history)
        assert result.clusters.next_is_heavy is True
        # heavy trend 75/80/85: cap 89.25, nearest 90 is over it → floor 85
        assert _weights(result) == [85.0, 85.0, 85.0]
        assert _reps(result) == [6, 7, 8]


# ===========================================================================
# Stable, deload and fallback
# ===========================================================================

class TestStable:
    """Flat history projects per set and lets reps creep up."""

    def test_flat_weight_rising_reps(self):
        history = [
            _workout("f1", "2026-03-09", [(100, 6)] * 3),
            _workout("f2", "2026-03-12", [(100, 7)] * 3),
            _workout("f3", "2026-03-16", [(100, 8)] * 3),
        ]
        result = _suggest(history)
        assert result.pattern == "stable"
        # rep slope 1 → 9 (within +2), straight-across adds i reps
        assert _weights(result) == [100.0, 100.0, 100.0]
        assert _reps(result) == [9, 10, 11]

    def test_pyramid_keeps_its_shape(self):
        history = [
            _workout(f"p{i}", d, [(100, 10), (110, 8), (120, 6)])
            for i, d in enumerate(["2026-03-09", "2026-03-12", "2026-03-16"])
        ]
        result = _suggest(history)
        assert result.set_arrangement == "pyramid_up"
        assert [(s.weight, s.reps) for s in result.sets] == [(100.0, 10), (110.0, 8), (120.0, 6)]


class TestDeloadReturn:
    """After a deload the targets return to the pre-deload baseline."""

    def _points(self):
        points = [_point(day, 100, 8) for day in (0, 14, 28, 42, 56, 70)]
        points.append(_point(84, 60, 8))
        return points

    def test_projects_from_three_pre_deload_sessions(self):
        points = self._points()
        analysis = analyze_pattern(points, True, now=points[-1].date + timedelta(days=1))
        assert isinstance(analysis, DeloadPattern)
        sets = generate_suggestion_sets(analysis, True, BARBELL, None, 3)
        # no straight-across bonus on the way back from a deload
        assert sets == [SetSpec(100.0, 8)] * 3

    def test_deload_not_last_projects_full_series(self):
        points = self._points() + [_point(87, 100, 8)]
        analysis = DeloadPattern(data_points=points, confidence=0.6, set_arrangement="straight_across")
        sets = generate_suggestion_sets(analysis, True, BARBELL, None, 2)
        # the deload dip pulls the weight trend negative: 97.6 rounds down to 95
        assert [s.weight for s in sets] == [95.0, 95.0]
        assert [s.reps for s in sets] == [8, 9]


class TestFallback:
    """Too little or too old history reuses the last session."""

    def test_no_history_no_recent_sets(self):
        result = _suggest([], requested=3)
        assert result.pattern == "fallback"
        assert result.confidence == 0.0
        assert [(s.weight, s.reps) for s in result.sets] == [(0.0, 8)] * 3

    def test_reuses_recent_sets_and_pads_with_last(self):
        recent = [SetLog(True, 100, 5), SetLog(True, 90, None)]
        result = _suggest(_scenario_a()[:2], recent=recent, requested=3)
        assert result.pattern == "fallback"
        assert [(s.weight, s.reps) for s in result.sets] == [(100.0, 5), (90.0, 8), (90.0, 8)]

    def test_truncates_recent_sets(self):
        recent = [SetLog(True, 100, 5), SetLog(True, 95, 6), SetLog(True, 90, 7)]
        result = _suggest([], recent=recent, requested=2)
        assert _weights(result) == [100.0, 95.0]

    def test_missing_weight_is_zero(self):
        result = _suggest([], recent=[SetLog(False, None, 10)], requested=1)
        assert [(s.weight, s.reps) for s in result.sets] == [(0.0, 10)]

    def test_stale_history(self):
        result = create_smart_suggestion_sets(
            "Bench Press", _scenario_a(), True, BARBELL,
            [SetLog(True, 120, 8)] * 3, 3, now=datetime(2026, 4, 10),
        )
        assert result.pattern == "fallback"
        assert _weights(result) == [120.0, 120.0, 120.0]


# ===========================================================================
# Building blocks
# ===========================================================================

class TestPerSetProjection:
    """generate_per_set_suggestions() and the straight-across rule."""

    def test_empty_pool(self):
        assert generate_per_set_suggestions([], 3, BARBELL, True) == []

    def test_single_session_small_bump(self):
        # 100 * 1.025 = 102.5 → 100 on a 5 step: no bump, reps unchanged
        pool = [_point(0, 100, 8)]
        assert generate_per_set_suggestions(pool, 1, BARBELL, True) == [SetSpec(100.0, 8)]
        # on a 1 step the bump survives
        assert generate_per_set_suggestions(pool, 1, ["Bodyweight"], True) == [SetSpec(102.0, 8)]

    def test_flat_trend_caps_rep_gain_at_two(self):
        pool = [_point(0, 100, 5), _point(3, 100, 8), _point(7, 100, 11)]
        # rep slope 3 → capped at last + 2
        assert generate_per_set_suggestions(pool, 1, BARBELL, True) == [SetSpec(100.0, 13)]

    def test_falling_trend_floored_at_max_decrease(self):
        pool = [_point(0, 200, 8), _point(3, 150, 8), _point(7, 100, 8)]
        (target,) = generate_per_set_suggestions(pool, 1, BARBELL, True)
        assert target.weight == 90.0

    def test_straight_across_progression(self):
        base = [SetSpec(100, 8), SetSpec(100, 8), SetSpec(95, 7)]
        assert apply_straight_across_progression(base) == [
            SetSpec(100, 8), SetSpec(100, 9), SetSpec(95, 9)
        ]
        assert apply_straight_across_progression([SetSpec(100, 8)]) == [SetSpec(100, 8)]

    def test_straight_across_keeps_each_position_weight(self):
        # reps build on each position's own value, not on the first set's
        base = [SetSpec(120, 5), SetSpec(110, 6), SetSpec(100, 8)]
        assert apply_straight_across_progression(base) == [
            SetSpec(120, 5), SetSpec(110, 7), SetSpec(100, 10)
        ]

    def test_unknown_analysis_type_raises(self):
        with pytest.raises(TypeError):
            generate_suggestion_sets(object(), True, BARBELL, None, 1)  # type: ignore[arg-type]

    def test_stable_uses_full_series(self):
        points = [_point(d, 100, r) for d, r in ((0, 6), (3, 7), (7, 8))]
        analysis = StablePattern(data_points=points, confidence=0.5, set_arrangement="pyramid_up")
        assert generate_suggestion_sets(analysis, True, BARBELL, None, 1) == [SetSpec(100.0, 9)]

    def test_fallback_analysis(self):
        analysis = FallbackPattern(data_points=[])
        sets = generate_suggestion_sets(analysis, True, BARBELL, [SetLog(True, 50, 12)], 2)
        assert sets == [SetSpec(50.0, 12), SetSpec(50.0, 12)]
