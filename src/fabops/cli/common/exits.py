"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer
from rich.markup import escape

from fabops.cli.common.output import out

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


def warn_exit(msg: str, code: int = EXIT_OK) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(
    exc: Exception,
    *,
    message: str | None = None,
    hint: str | None = None,
    code: int = EXIT_FATAL,
) -> NoReturn:
    """
    Print an error message (and remediation hint) and exit with `code`.

    The message defaults to the exception text; the hint defaults to the
    exception's `hint` attribute, which every DeployError carries.
    """
    out.error(escape(message or str(exc)))
    hint = hint or getattr(exc, "hint", None)
    if hint:
        out.hint(escape(hint))
    raise typer.Exit(code) from exc
