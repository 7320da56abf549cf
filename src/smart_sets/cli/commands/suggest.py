"""Planning commands: suggest, analyze, exercises."""

import json
from typing import Annotated

import typer

from ...core.exercises import EXERCISE_REGISTRY, find_exercise
from ...core.extractor import extract_data_points
from ...core.models import ProgressiveOverloadPattern, RepCyclingPattern
from ...core.patterns import analyze_pattern, describe_analysis
from ...core.planner import create_smart_suggestion_sets
from ...io.history_store import latest_exercise_sets
from ...io.serializers import data_point_to_dict, suggestion_to_dict
from .. import views
from ..app import (
    AsOfOption,
    CompoundOption,
    EquipmentOption,
    ExcludeSessionOption,
    ExerciseArgument,
    HistoryPathOption,
    JsonOption,
    app,
    get_config,
    get_store,
    load_workouts_or_exit,
    logged_name,
    parse_as_of,
    resolve_exercise,
)


def _warn_if_uncatalogued(exercise: str, is_compound: bool, equipment: list[str]) -> None:
    if find_exercise(exercise) is None:
        views.print_warning(
            f"'{exercise}' is not in the catalog; treating it as "
            f"{'compound' if is_compound else 'isolation'} with equipment "
            f"{', '.join(equipment) if equipment else '(default step)'}."
        )


@app.command()
def suggest(
    ctx: typer.Context,
    exercise: ExerciseArgument,
    history_path: HistoryPathOption = None,
    sets: Annotated[
        int,
        typer.Option("--sets", "-n", min=0, help="Number of sets to suggest"),
    ] = 3,
    compound: CompoundOption = None,
    equipment: EquipmentOption = None,
    exclude_session: ExcludeSessionOption = None,
    as_of: AsOfOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Suggest weight and reps for every set of the next session.
    """
    config = get_config(ctx)
    now = parse_as_of(as_of)
    workouts = load_workouts_or_exit(get_store(history_path))

    names = {ex.name for w in workouts for ex in w.exercises}
    name = logged_name(exercise, names)
    is_compound, equipment_list = resolve_exercise(exercise, compound, equipment)

    result = create_smart_suggestion_sets(
        name,
        workouts,
        is_compound,
        equipment_list,
        latest_exercise_sets(workouts, name, exclude_session),
        sets,
        exclude_session,
        now=now,
        config=config,
    )

    if json_out:
        payload = {"exercise": name, **suggestion_to_dict(result)}
        print(json.dumps(payload, indent=2))
        return

    _warn_if_uncatalogued(exercise, is_compound, equipment_list)
    views.print_suggestion(name, result)


@app.command()
def analyze(
    ctx: typer.Context,
    exercise: ExerciseArgument,
    history_path: HistoryPathOption = None,
    compound: CompoundOption = None,
    exclude_session: ExcludeSessionOption = None,
    as_of: AsOfOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the detected training pattern and the history behind it.
    """
    config = get_config(ctx)
    now = parse_as_of(as_of)
    workouts = load_workouts_or_exit(get_store(history_path))

    names = {ex.name for w in workouts for ex in w.exercises}
    name = logged_name(exercise, names)
    is_compound, _ = resolve_exercise(exercise, compound, None)

    points = extract_data_points(name, workouts, exclude_session, now=now, config=config)
    analysis = analyze_pattern(points, is_compound, now=now, config=config)

    if json_out:
        payload: dict = {
            "exercise": name,
            "pattern": analysis.pattern,
            "confidence": round(analysis.confidence, 4),
            "set_arrangement": analysis.set_arrangement,
            "data_points": [data_point_to_dict(p) for p in points],
        }
        if isinstance(analysis, ProgressiveOverloadPattern):
            payload["slope"] = round(analysis.slope, 4)
            payload["r_squared"] = round(analysis.r_squared, 4)
        if isinstance(analysis, RepCyclingPattern):
            payload["next_is_heavy"] = analysis.clusters.next_is_heavy
        print(json.dumps(payload, indent=2))
        return

    if not points:
        views.print_info(f"No recent completed sets of '{name}' in the history.")
    views.print_analysis(points, describe_analysis(analysis))


@app.command()
def exercises(
    ctx: typer.Context,
    json_out: JsonOption = False,
) -> None:
    """
    List the exercise catalog (equipment and compound flag per exercise).
    """
    catalog = sorted(EXERCISE_REGISTRY.values(), key=lambda ex: ex.name)

    if json_out:
        print(json.dumps([
            {
                "exercise_id": ex.exercise_id,
                "name": ex.name,
                "equipment": ex.equipment,
                "is_compound": ex.is_compound,
                "movement_pattern": ex.movement_pattern,
                "aliases": ex.aliases,
            }
            for ex in catalog
        ], indent=2))
        return

    views.console.print(views.format_catalog_table(catalog, get_config(ctx)))

