"""In-session commands: adapt, shift."""

import json
from typing import Annotated

import typer

from ...core.adaptation import adapt_next_set, detect_pattern_shift
from ...core.extractor import extract_data_points
from ...core.models import SetSpec
from ...io.serializers import (
    ValidationError,
    parse_planned_sets,
    parse_weight_reps,
    pattern_shift_to_dict,
    set_spec_to_dict,
)
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


def _parse_or_exit(text: str, option: str) -> SetSpec:
    try:
        return parse_weight_reps(text)
    except ValidationError as e:
        views.print_error(f"{option}: {e}")
        raise typer.Exit(1)


@app.command()
def adapt(
    ctx: typer.Context,
    suggested: Annotated[
        str,
        typer.Option("--suggested", "-s", help="Suggested set as WEIGHT/REPS, e.g. 100/8"),
    ],
    actual: Annotated[
        str,
        typer.Option("--actual", "-a", help="Completed set as WEIGHT/REPS, e.g. 100/11"),
    ],
    exercise: Annotated[
        str,
        typer.Option("--exercise", "-e", help="Catalog exercise for equipment and movement type"),
    ] = "",
    compound: CompoundOption = None,
    equipment: EquipmentOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Target for the next set after completing one.
    """
    config = get_config(ctx)
    planned = _parse_or_exit(suggested, "--suggested")
    done = _parse_or_exit(actual, "--actual")
    is_compound, equipment_list = resolve_exercise(exercise, compound, equipment)

    target = adapt_next_set(
        planned.weight,
        planned.reps,
        done.weight,
        done.reps,
        equipment_list,
        is_compound,
        config=config,
    )

    if json_out:
        print(json.dumps(set_spec_to_dict(target), indent=2))
        return

    views.print_next_set(target)


@app.command()
def shift(
    ctx: typer.Context,
    exercise: ExerciseArgument,
    set_index: Annotated[
        int,
        typer.Option("--set-index", "-i", min=1, help="1-based number of the set just completed"),
    ],
    actual: Annotated[
        str,
        typer.Option("--actual", "-a", help="Completed set as WEIGHT/REPS, e.g. 135/5"),
    ],
    planned: Annotated[
        str,
        typer.Option("--planned", help="The session's planned sets, e.g. 100/8,100/8,100/8"),
    ],
    remaining: Annotated[
        int,
        typer.Option("--remaining", "-r", min=0, help="Sets still to do after this one"),
    ],
    history_path: HistoryPathOption = None,
    compound: CompoundOption = None,
    equipment: EquipmentOption = None,
    exclude_session: ExcludeSessionOption = None,
    as_of: AsOfOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Re-plan the remaining sets when a set clearly departs from the plan.
    """
    config = get_config(ctx)
    now = parse_as_of(as_of)
    done = _parse_or_exit(actual, "--actual")
    try:
        planned_sets = parse_planned_sets(planned)
    except ValidationError as e:
        views.print_error(f"--planned: {e}")
        raise typer.Exit(1)

    workouts = load_workouts_or_exit(get_store(history_path))
    names = {ex.name for w in workouts for ex in w.exercises}
    name = logged_name(exercise, names)
    is_compound, equipment_list = resolve_exercise(exercise, compound, equipment)

    points = extract_data_points(name, workouts, exclude_session, now=now, config=config)
    result = detect_pattern_shift(
        set_index - 1,
        done.weight,
        done.reps,
        planned_sets,
        points,
        remaining,
        equipment_list,
        is_compound,
        config=config,
    )

    if json_out:
        print(json.dumps(pattern_shift_to_dict(result), indent=2))
        return

    views.print_shift(result, set_index + 1)
