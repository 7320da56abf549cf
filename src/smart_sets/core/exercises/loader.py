"""
YAML → ExerciseDefinition loader.

Loads exercise definitions from individual YAML files in the bundled
``src/smart_sets/exercises/`` directory.  Each file (e.g. bench_press.yaml)
contains a flat exercise definition matching the ExerciseDefinition schema.

User overrides: place matching files in ``~/.smart-sets/exercises/``.
A user file is deep-merged over the bundled definition, so only changed
keys need to be listed.  A user file whose stem does not match any
bundled file is treated as a new exercise and added to the registry.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml
    exercises = load_exercises_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Iterator

import yaml

from ..engine.config_loader import _deep_merge
from .base import ExerciseDefinition

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "exercise_id",
        "name",
        "equipment",
        "is_compound",
    }
)


def exercise_from_dict(d: dict) -> ExerciseDefinition:
    """Convert a raw dict (from YAML) to an ExerciseDefinition.

    Raises ValueError if any required field is absent or malformed.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseDefinition missing fields: {sorted(missing)}")

    equipment = d["equipment"]
    if isinstance(equipment, str):
        equipment = [equipment]
    if not isinstance(equipment, list):
        raise ValueError("equipment must be a list of equipment names")

    if not isinstance(d["is_compound"], bool):
        raise ValueError("is_compound must be true or false")

    return ExerciseDefinition(
        exercise_id=str(d["exercise_id"]),
        name=str(d["name"]),
        equipment=[str(e) for e in equipment],
        is_compound=d["is_compound"],
        movement_pattern=str(d.get("movement_pattern", "")),
        aliases=[str(a) for a in d.get("aliases", []) or []],
    )



def _read_definition(path: Path) -> dict:
    """Read one exercise file; warn and return {} if it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"smart-sets: cannot read {path.name} ({exc})", stacklevel=3)
        return {}
    return data if isinstance(data, dict) else {}


def _bundled_exercises_dir() -> Path | None:
    # src/smart_sets/exercises/, next to the core package
    candidate = Path(__file__).resolve().parents[2] / "exercises"
    return candidate if candidate.is_dir() else None


def _user_exercises_dir() -> Path | None:
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".smart-sets" / "exercises"
    return p if p.is_dir() else None


def _definition_sources(
    bundled_dir: Path | None,
    user_dir: Path | None,
) -> Iterator[tuple[str, dict]]:
    """
    Yield (label, raw definition) per exercise file.

    Bundled files come first, each with its same-named user file merged
    over it; user files without a bundled counterpart follow.
    """
    bundled = {p.stem: p for p in sorted(bundled_dir.glob("*.yaml"))} if bundled_dir else {}
    user = {p.stem: p for p in sorted(user_dir.glob("*.yaml"))} if user_dir else {}

    for stem, path in bundled.items():
        raw = _read_definition(path)
        if raw and stem in user:
            raw = _deep_merge(raw, _read_definition(user[stem]))
        yield f"exercise '{stem}'", raw

    for stem in user.keys() - bundled.keys():
        yield f"user exercise '{stem}'", _read_definition(user[stem])


def load_exercises_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> dict[str, ExerciseDefinition] | None:
    """Return {exercise_id: ExerciseDefinition} loaded from per-exercise YAML files.

    Args:
        bundled_dir: Directory of bundled definitions (defaults to the package data)
        user_dir: Directory of user overrides (defaults to ~/.smart-sets/exercises)

    Returns None (rather than raising) so the registry can report the failure.
    """
    bundled_dir = bundled_dir or _bundled_exercises_dir()
    user_dir = user_dir or _user_exercises_dir()

    catalog: dict[str, ExerciseDefinition] = {}
    for label, raw in _definition_sources(bundled_dir, user_dir):
        if not raw:
            continue
        try:
            definition = exercise_from_dict(raw)
        except ValueError as exc:
            warnings.warn(f"smart-sets: skipping {label}: {exc}", stacklevel=2)
            continue
        catalog[definition.exercise_id] = definition

    return catalog or None
