"""Shared Typer app object, shared option types, and store/config utilities."""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import SuggestionConfig
from ..core.engine.config_loader import load_suggestion_config
from ..core.exercises import find_exercise
from ..core.extractor import parse_session_date
from ..core.models import Workout
from ..io.history_store import HistoryStore, get_default_history_path
from ..io.serializers import ValidationError
from ..logging_config import configure_logging
from . import views

# Shared option types used across commands
HistoryPathOption = Annotated[
    Optional[Path],
    typer.Option("--history-path", "-p", help="Path to history JSONL file"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]
CompoundOption = Annotated[
    Optional[bool],
    typer.Option(
        "--compound/--isolation",
        help="Movement type (default: from the exercise catalog, else compound)",
    ),
]
EquipmentOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--equipment", "-E",
        help="Equipment name, repeatable, e.g. -E Barbell (default: from catalog)",
    ),
]
AsOfOption = Annotated[
    Optional[str],
    typer.Option("--as-of", help="Reference date YYYY-MM-DD[THH:MM] (default: now, UTC)"),
]
ExcludeSessionOption = Annotated[
    Optional[str],
    typer.Option("--exclude-session", help="Workout id to ignore (the in-progress session)"),
]
ExerciseArgument = Annotated[
    str,
    typer.Argument(help="Exercise name as logged, or a catalog id (see 'exercises')"),
]

app = typer.Typer(
    name="smart-sets",
    help="Per-set weight and rep suggestions from your workout history.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log engine decisions"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", help="Suggestions YAML overriding the bundled thresholds"),
    ] = None,
) -> None:
    """
    Smart set suggestions: analyse history, plan the next session, adapt mid-session.
    """
    configure_logging("DEBUG" if verbose else "WARNING")
    if config_path is not None and not config_path.exists():
        raise typer.BadParameter(f"Config file not found: {config_path}", param_hint="--config")
    ctx.obj = load_suggestion_config(config_path)


def get_config(ctx: typer.Context) -> SuggestionConfig:
    """Return the configuration loaded by the app callback."""
    if isinstance(ctx.obj, SuggestionConfig):
        return ctx.obj
    return load_suggestion_config()


def get_store(history_path: Path | None) -> HistoryStore:
    """Get history store from path or default location."""
    if history_path is None:
        history_path = get_default_history_path()
    return HistoryStore(history_path)


def parse_as_of(as_of: str | None) -> datetime | None:
    """Parse the --as-of option; None means "now"."""
    if as_of is None:
        return None
    parsed = parse_session_date(as_of)
    if parsed is None:
        raise typer.BadParameter(f"Invalid date '{as_of}'. Use YYYY-MM-DD", param_hint="--as-of")
    return parsed


def resolve_exercise(
    exercise: str,
    compound: bool | None,
    equipment: list[str] | None,
) -> tuple[bool, list[str]]:
    """
    Work out the compound flag and equipment for an exercise.

    Catalog values are used unless overridden on the command line.  An
    exercise outside the catalog defaults to compound with no recognised
    equipment (default increment).

    Returns:
        (is_compound, equipment)
    """
    definition = find_exercise(exercise)
    is_compound = compound
    if is_compound is None:
        is_compound = definition.is_compound if definition is not None else True
    if not equipment:
        equipment = list(definition.equipment) if definition is not None else []
    return is_compound, list(equipment)


def load_workouts_or_exit(store: HistoryStore) -> list[Workout]:
    """Load the history snapshot; print a red error and exit 1 on failure."""
    if not store.exists():
        views.print_error(f"History file not found: {store.history_path}")
        views.print_info("Export your workout history as JSONL, or pass --history-path.")
        raise typer.Exit(1)

    try:
        return store.load_workouts()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def logged_name(exercise: str, history_names: set[str]) -> str:
    """Map a catalog id or alias to the exercise name used in the history."""
    if exercise in history_names:
        return exercise
    definition = find_exercise(exercise)
    if definition is None:
        return exercise
    for name in (definition.name, *definition.aliases):
        if name in history_names:
            return name
    return definition.name
