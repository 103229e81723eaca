from __future__ import annotations

import os
import re
import subprocess
from typing import Mapping

from fabops.core.errors import ClientError
from fabops.core.fabric import Capacity, ResourceKind

_CELL = re.compile(r"\S+(?: \S+)*")
_SEPARATOR = re.compile(r"^[\s\-=+|]+$")


def _parse_names(text: str) -> list[str]:
    """Return one entry per non-empty output line."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _cells(line: str) -> list[tuple[int, str]]:
    """Split a table line into (start offset, text) cells.

    Cells are separated by two or more spaces; a single space belongs to the
    cell (`West Europe`).
    """
    return [(m.start(), m.group()) for m in _CELL.finditer(line)]


def _assign_columns(
    starts: list[int], cells: list[tuple[int, str]]
) -> dict[int, str]:
    """Map each cell to a header column by its offset.

    A cell belongs to the right-most column starting at or before it. A cell
    pushed right by an over-long neighbour moves to the next free column.
    """
    assigned: dict[int, str] = {}
    previous = -1
    for offset, value in cells:
        column = max((i for i, s in enumerate(starts) if s <= offset), default=0)
        if column <= previous:
            column = previous + 1
        if column >= len(starts):
            break
        assigned[column] = value
        previous = column
    return assigned


def parse_capacity_table(text: str) -> list[Capacity]:
    """
    Parse the long capacity listing of the Fabric CLI.

    The listing is a fixed-width table:

        name              id       sku   region       state
        -----------------------------------------------------
        mycap.Capacity    0000...  F2    West Europe  Active

    Columns are located by header name and cells are placed by their offset
    under the header, so a blank cell leaves its column empty instead of
    shifting the rest of the row. Lines before the header and dashed
    separator lines are ignored.
    """
    header: list[str] | None = None
    starts: list[int] = []
    capacities: list[Capacity] = []

    for raw in text.splitlines():
        line = raw.rstrip()
        if not line.strip() or _SEPARATOR.match(line):
            continue

        cells = _cells(line)
        if header is None:
            lowered = [c.lower() for _, c in cells]
            if "name" in lowered:
                header = lowered
                starts = [offset for offset, _ in cells]
            continue

        values = _assign_columns(starts, cells)
        row = {header[i]: v for i, v in values.items()}
        name = ResourceKind.CAPACITY.bare(row.get("name", "").strip())
        if not name:
            continue
        capacities.append(
            Capacity(
                name=name,
                sku=row.get("sku") or None,
                state=row.get("state") or None,
                region=row.get("region") or None,
            )
        )

    return capacities


class FabCliAdapter:
    """Adapter around the `fab` command-line client (Microsoft Fabric CLI)."""

    _BIN_ENV = "FABOPS_FAB_BIN"
    _DEFAULT_BIN = "fab"

    def __init__(self, executable: str | None = None) -> None:
        """Create an adapter that shells out to `executable` (or `fab`)."""
        self.executable = executable or os.getenv(self._BIN_ENV) or self._DEFAULT_BIN

    def _run(self, *args: str) -> str:
        """Run the client and return stdout; raise ClientError on failure."""
        cmd = [self.executable, *args]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as exc:
            raise ClientError(f"{self.executable} not found on PATH", command=cmd) from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            detail = stderr or (result.stdout or "").strip() or "no output"
            raise ClientError(
                f"`{' '.join(cmd)}` exited with {result.returncode}: {detail}",
                command=cmd,
                returncode=result.returncode,
                stderr=stderr,
            )
        return result.stdout or ""

    def get_version(self) -> str:
        """Return the client version string."""
        return self._run("--version").strip()

    def list_top_level(self) -> list[str]:
        """Return workspace entries (`name.Workspace`)."""
        return _parse_names(self._run("ls"))

    def list_capacities(self) -> list[Capacity]:
        """Return all capacities from the long capacity listing."""
        return parse_capacity_table(self._run("ls", ".capacities", "-l"))

    def list_children(self, path: str) -> list[str]:
        """Return entries directly below `path`."""
        return _parse_names(self._run("ls", path))

    def create(self, path: str, params: Mapping[str, str] | None = None) -> None:
        """Create the item or folder at `path`, passing `-P k=v,...` if given."""
        args = ["mkdir", path]
        if params:
            args += ["-P", ",".join(f"{k}={v}" for k, v in params.items())]
        self._run(*args)
