"""Questionary / prompt_toolkit theme for fabops.

Questionary uses prompt_toolkit under the hood. This module defines the
central style so interactive prompts such as the capacity index look
consistent.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

QUESTIONARY_STYLE_INPUT = Style.from_dict(
    {
        "qmark": "bold ansicyan",
        "question": "bold ansibrightcyan",
        "answer": "bold ansibrightgreen",
        "instruction": "ansibrightblack",
        "validation-toolbar": "bold ansired",
        "error": "bold ansired",
    }
)