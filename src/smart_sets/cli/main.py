"""
CLI entry point using Typer.

Provides commands for set suggestions:
- suggest: Weight/reps for every set of the next session
- analyze: Detected training pattern and the history behind it
- adapt: Next-set target after completing a set
- shift: Re-plan the remaining sets after a large deviation
- exercises: List the exercise catalog
"""

from .app import app

# Command modules register themselves on the shared app
from .commands import session, suggest  # noqa: F401

if __name__ == "__main__":
    app()
