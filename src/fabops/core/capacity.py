"""Capacity selection logic.

A workspace can only be created on a capacity, so before reconciling we
resolve exactly one capacity name. Resolution order:

1. If exactly one non-reserved capacity exists and the operator either did
   not ask for one or asked for that very one, it is picked without a prompt.
2. An explicitly requested name that matches a candidate is used as-is.
3. Otherwise (no request with several candidates, or a request that matched
   nothing) the operator chooses from the candidate list through a Prompter.

A requested name is never silently swapped for another capacity.
"""

from __future__ import annotations

from typing import Callable, Iterable

from fabops.core.errors import (
    CapacitySelectionRequired,
    ClientError,
    NoCapacityAvailable,
)
from fabops.core.fabric import Capacity, ResourceClient, ResourceKind

# Returns a zero-based index into the candidates, or None to give up.
Prompter = Callable[[list[Capacity]], "int | None"]


def first_choice(candidates: list[Capacity]) -> int | None:
    """Non-interactive prompter that always picks the first candidate."""
    return 0 if candidates else None


def no_choice(candidates: list[Capacity]) -> int | None:
    """Non-interactive prompter that never picks anything."""
    return None


def filter_reserved(capacities: Iterable[Capacity]) -> list[Capacity]:
    """Drop capacities whose name carries the reserved marker."""
    return [c for c in capacities if not c.is_reserved]


def normalize_capacity_name(name: str | None) -> str:
    """Trim whitespace and a trailing `.Capacity` suffix."""
    return ResourceKind.CAPACITY.bare((name or "").strip())


def find_capacity(candidates: Iterable[Capacity], name: str) -> Capacity | None:
    """Return the candidate whose name equals `name` (case-sensitive)."""
    for capacity in candidates:
        if capacity.name == name:
            return capacity
    return None


def select_interactively(candidates: list[Capacity], prompter: Prompter) -> Capacity:
    """
    Ask the prompter for an index until it returns a valid one.

    Out-of-range answers are discarded and the prompter is asked again;
    there is no retry limit. A `None` answer ends the selection.

    Raises:
        CapacitySelectionRequired: If there is nothing to choose from or the
            prompter gave up.
    """
    if not candidates:
        raise CapacitySelectionRequired("No capacity to choose from.")

    while True:
        index = prompter(candidates)
        if index is None:
            raise CapacitySelectionRequired("No capacity was selected.")
        if 0 <= index < len(candidates):
            return candidates[index]


def list_candidates(client: ResourceClient) -> list[Capacity]:
    """
    Return the capacities a workspace may be attached to.

    Raises:
        NoCapacityAvailable: If listing fails or no non-reserved capacity
            remains.
    """
    try:
        capacities = client.list_capacities()
    except ClientError as exc:
        raise NoCapacityAvailable(f"Could not list capacities: {exc}") from exc

    if not capacities:
        raise NoCapacityAvailable("No capacities found for the current account.")

    candidates = filter_reserved(capacities)
    if not candidates:
        raise NoCapacityAvailable(
            "Only reserved capacities were found; none can host the workspace."
        )
    return candidates


def resolve_capacity(
    client: ResourceClient,
    requested_name: str | None,
    prompter: Prompter,
) -> Capacity:
    """
    Resolve the capacity the workspace will be attached to.

    Args:
        client: Resource client used to list capacities.
        requested_name: Optional capacity name, with or without the
                        `.Capacity` suffix.
        prompter: Called with the candidate list when the choice is not
                  obvious. Returns an index or None.

    Returns:
        The selected Capacity.

    Raises:
        NoCapacityAvailable: If there is no usable capacity.
        CapacitySelectionRequired: If the prompter did not pick one.
    """
    candidates = list_candidates(client)
    requested = normalize_capacity_name(requested_name)

    if len(candidates) == 1 and requested in ("", candidates[0].name):
        return candidates[0]

    if requested:
        match = find_capacity(candidates, requested)
        if match is not None:
            return match

    return select_interactively(candidates, prompter)
