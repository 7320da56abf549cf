"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of suggestions and analyses.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.config import DEFAULT_CONFIG, SuggestionConfig
from ..core.equipment import get_weight_increment
from ..core.exercises.base import ExerciseDefinition
from ..core.models import ExerciseDataPoint, PatternShiftResult, SetLog, SetSpec, SmartSuggestionResult

console = Console()

_PATTERN_STYLE = {
    "progressive_overload": "green",
    "rep_cycling": "magenta",
    "deload": "yellow",
    "stable": "cyan",
    "fallback": "dim",
}


def _fmt_weight(weight: float | None) -> str:
    if weight is None:
        return "-"
    return f"{weight:g}"


def format_sets_table(
    sets: list[SetLog] | list[SetSpec],
    title: str,
    first_set_number: int = 1,
) -> Table:
    """
    Create a Rich table of weight/rep targets.

    Args:
        sets: Targets to display
        title: Table title
        first_set_number: Number shown for the first row

    Returns:
        Rich Table object
    """
    table = Table(title=title)

    table.add_column("Set", justify="right", style="dim", width=4)
    table.add_column("Weight", justify="right", style="bold")
    table.add_column("Reps", justify="right")

    for i, s in enumerate(sets, first_set_number):
        table.add_row(
            str(i),
            _fmt_weight(s.weight),
            str(s.reps) if s.reps is not None else "-",
        )

    return table


def format_series_table(points: list[ExerciseDataPoint]) -> Table:
    """
    Create a Rich table of the extracted per-session series.

    Args:
        points: Chronological data points

    Returns:
        Rich Table object
    """
    table = Table(title="Recent Sessions")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Top set", justify="right", style="bold")
    table.add_column("Avg reps", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Sets")

    for i, p in enumerate(points, 1):
        table.add_row(
            str(i),
            p.date.strftime("%Y-%m-%d"),
            f"{p.top_set_weight:g} x {p.top_set_reps:g}",
            f"{p.avg_reps:.1f}",
            f"{p.total_volume:g}",
            ", ".join(f"{s.weight:g}x{s.reps}" for s in p.set_details),
        )

    return table


def format_catalog_table(
    exercises: list[ExerciseDefinition],
    config: SuggestionConfig = DEFAULT_CONFIG,
) -> Table:
    """Create a Rich table listing catalog exercises."""
    table = Table(title="Exercise Catalog")

    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Equipment")
    table.add_column("Step", justify="right")
    table.add_column("Pattern", style="dim")

    for ex in exercises:
        table.add_row(
            ex.exercise_id,
            ex.name,
            "compound" if ex.is_compound else "isolation",
            ", ".join(ex.equipment),
            f"{get_weight_increment(ex.equipment, config).increment:g}",
            ex.movement_pattern,
        )

    return table


def format_pattern(pattern: str, confidence: float) -> str:
    """Rich markup for a pattern name with its confidence."""
    style = _PATTERN_STYLE.get(pattern, "white")
    return f"[{style}]{pattern}[/{style}] (confidence {confidence:.2f})"


def print_suggestion(exercise: str, result: SmartSuggestionResult) -> None:
    """
    Print a next-session suggestion.

    Args:
        exercise: Exercise name as logged
        result: Engine output
    """
    console.print()
    console.print(f"[bold]{exercise}[/bold]: {format_pattern(result.pattern, result.confidence)}")
    console.print(f"Set arrangement: {result.set_arrangement.replace('_', ' ')}")
    if result.clusters is not None:
        nxt = "heavy" if result.clusters.next_is_heavy else "light"
        console.print(
            f"Clusters: {len(result.clusters.heavy)} heavy / "
            f"{len(result.clusters.light)} light, next: [bold]{nxt}[/bold]"
        )
    console.print()
    if result.sets:
        console.print(format_sets_table(result.sets, "Suggested Sets"))
    else:
        console.print("[dim]No sets requested.[/dim]")
    console.print()


def print_analysis(points: list[ExerciseDataPoint], explanation: str) -> None:
    """Print the series table followed by the plain-language explanation."""
    console.print()
    if points:
        console.print(format_series_table(points))
        console.print()
    console.print(explanation)
    console.print()


def print_next_set(target: SetSpec) -> None:
    """Print the adapted target for the next set."""
    console.print(f"Next set: [bold]{_fmt_weight(target.weight)}[/bold] x [bold]{target.reps}[/bold]")


def print_shift(result: PatternShiftResult, first_set_number: int) -> None:
    """
    Print a pattern-shift decision.

    Args:
        result: Engine output
        first_set_number: 1-based number of the first re-targeted set
    """
    if not result.shifted:
        console.print("[dim]No pattern shift: keep the planned sets.[/dim]")
        return
    console.print("[yellow]Pattern shift detected.[/yellow] Remaining sets re-targeted:")
    console.print(format_sets_table(result.new_targets, "New Targets", first_set_number))


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
