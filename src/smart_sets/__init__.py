"""
smart-sets: per-set load suggestions from workout history.

The engine lives in ``smart_sets.core``; ``smart_sets.cli`` is a thin
Typer front end over it.
"""

__version__ = "0.1.0"
