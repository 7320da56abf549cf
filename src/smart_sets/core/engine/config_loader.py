"""
YAML → SuggestionConfig loader.

Loads engine thresholds from suggestions.yaml (bundled with the package)
and optionally merges user overrides from ~/.smart-sets/suggestions.yaml
or an explicit path.

Usage:
    from smart_sets.core.engine.config_loader import load_suggestion_config
    cfg = load_suggestion_config()
    result = create_smart_suggestion_sets(..., config=cfg)

The YAML has two sections, ``thresholds`` (SuggestionConfig field names)
and ``equipment_increments`` (equipment name → step).  A file that cannot
be read or parsed, an unknown key or a value of the wrong type produces a
warning and is ignored; the Python defaults from config.py stay in force.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import math
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import SuggestionConfig

# Fields not settable through the ``thresholds`` section
_NON_THRESHOLD_FIELDS = frozenset({"equipment_increments"})

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} if it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"smart-sets: ignoring config file {path} ({exc})", stacklevel=3)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"smart-sets: ignoring config file {path} (not a mapping)", stacklevel=3)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert a YAML value to the type of the field default."""
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise TypeError(f"{name} must be true/false")
        return value
    if not isinstance(default, (int, float)):
        return value
    kind = "an integer" if isinstance(default, int) else "a number"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{name} must be {kind}")
    if not math.isfinite(value):
        raise TypeError(f"{name} must be a finite number, got {value}")
    if isinstance(default, int):
        if value != int(value):
            raise TypeError(f"{name} must be {kind}")
        return int(value)
    return float(value)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled suggestions.yaml, or None if not found."""
    ref = importlib.resources.files("smart_sets").joinpath("suggestions.yaml")
    if ref.is_file():
        return Path(str(ref))
    # Fallback: look relative to this file's package root
    candidate = Path(__file__).parent.parent.parent / "suggestions.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.smart-sets/suggestions.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".smart-sets" / "suggestions.yaml"
    return p if p.exists() else None


def config_from_dict(data: dict[str, Any]) -> SuggestionConfig:
    """
    Build a SuggestionConfig from a parsed YAML mapping.

    Args:
        data: Mapping with optional ``thresholds`` and
            ``equipment_increments`` sections

    Returns:
        SuggestionConfig with every valid value applied over the defaults
    """
    defaults = SuggestionConfig()
    known = {f.name: getattr(defaults, f.name) for f in dataclasses.fields(SuggestionConfig)}
    changes: dict[str, Any] = {}

    thresholds = data.get("thresholds") or {}
    if not isinstance(thresholds, dict):
        warnings.warn("smart-sets: 'thresholds' must be a mapping; ignored", stacklevel=2)
        thresholds = {}

    for name, value in thresholds.items():
        if name not in known or name in _NON_THRESHOLD_FIELDS:
            warnings.warn(f"smart-sets: unknown threshold '{name}' ignored", stacklevel=2)
            continue
        try:
            changes[name] = _coerce(name, value, known[name])
        except TypeError as exc:
            warnings.warn(f"smart-sets: {exc}; keeping default", stacklevel=2)

    increments = data.get("equipment_increments")
    if increments is not None:
        if not isinstance(increments, dict):
            warnings.warn("smart-sets: 'equipment_increments' must be a mapping; ignored", stacklevel=2)
        else:
            table = dict(defaults.equipment_increments)
            for equipment, step in increments.items():
                try:
                    table[str(equipment)] = _coerce(f"increment for {equipment}", step, 0.0)
                except TypeError as exc:
                    warnings.warn(f"smart-sets: {exc}; keeping default", stacklevel=2)
            changes["equipment_increments"] = table

    return dataclasses.replace(defaults, **changes)


def load_suggestion_config(path: str | Path | None = None) -> SuggestionConfig:
    """
    Load and merge engine configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/smart_sets/suggestions.yaml
    2. ``path`` if given, otherwise ~/.smart-sets/suggestions.yaml

    Args:
        path: Explicit override file

    Returns:
        SuggestionConfig; the Python defaults if no YAML is available
    """
    merged: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        merged = _deep_merge(merged, _load_yaml_file(bundled))

    override = Path(path) if path is not None else get_user_yaml_path()
    if override is not None:
        merged = _deep_merge(merged, _load_yaml_file(override))

    return config_from_dict(merged)
