"""Terminal UI utilities for Fabric operations tooling."""

from __future__ import annotations

import questionary

from fabops.cli.common.output import out
from fabops.cli.common.tui_style import QUESTIONARY_STYLE_INPUT
from fabops.core.fabric import Capacity


def _validate_index(text: str, count: int) -> bool | str:
    """Questionary validator: True for a valid index, else the error text."""
    try:
        index = int(text.strip())
    except ValueError:
        return "Please enter a number."
    if not 0 <= index < count:
        return f"Please enter a number between 0 and {count - 1}."
    return True


def prompt_capacity_index(candidates: list[Capacity]) -> int | None:
    """Show the candidates with their index and ask for one.

    Invalid input is rejected inline and the question is asked again until
    a valid index is entered.

    Returns:
        The selected zero-based index, or None if the prompt was cancelled
        (Ctrl-C or closed input).
    """
    if not candidates:
        return None

    out.capacities_table(candidates, title="Available capacities", indexed=True)
    answer = questionary.text(
        f"[FABOPS] Select a capacity [0-{len(candidates) - 1}]:",
        validate=lambda text: _validate_index(text, len(candidates)),
        style=QUESTIONARY_STYLE_INPUT,
        qmark="✦",
    ).ask()

    if answer is None:
        return None
    return int(answer.strip())
