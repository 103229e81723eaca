"""Core domain models for Fabric resources.

These models describe workspaces, lakehouses, folders and capacities in a
small immutable form, together with the `ResourceClient` interface the rest
of the core talks to. They are intentionally free of subprocess and CLI
concerns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol

RESERVED_MARKER = "Reserved"
FILES_ROOT = "Files"


class ResourceKind(str, Enum):
    """
    Kinds of resources addressed by a ResourcePath.

    The value is the suffix the Fabric client appends to item names
    (`Sales.Workspace`, `LH_Bronze.Lakehouse`). Folders carry no suffix.
    """

    WORKSPACE = ".Workspace"
    LAKEHOUSE = ".Lakehouse"
    FOLDER = ""
    CAPACITY = ".Capacity"

    def qualify(self, name: str) -> str:
        """Return `name` with this kind's suffix appended (once)."""
        if self.value and not name.endswith(self.value):
            return f"{name}{self.value}"
        return name

    def bare(self, name: str) -> str:
        """Return `name` without this kind's suffix."""
        if self.value and name.endswith(self.value):
            return name[: -len(self.value)]
        return name


@dataclass(frozen=True)
class ResourcePath:
    """
    Hierarchical address of a remote resource.

    Attributes:
        segments: Ordered `(kind, name)` pairs, root first. Build paths with
                  `ResourcePath.workspace(...)` and `child(...)` so a folder
                  can only ever hang below a lakehouse below a workspace.
    """

    segments: tuple[tuple[ResourceKind, str], ...]

    @classmethod
    def workspace(cls, name: str) -> ResourcePath:
        return cls(((ResourceKind.WORKSPACE, ResourceKind.WORKSPACE.bare(name)),))

    def child(self, kind: ResourceKind, name: str) -> ResourcePath:
        """Return the path of `name` below this path."""
        if not name:
            raise ValueError("Resource name must not be empty.")
        allowed = {
            ResourceKind.WORKSPACE: {ResourceKind.LAKEHOUSE},
            ResourceKind.LAKEHOUSE: {ResourceKind.FOLDER},
            ResourceKind.FOLDER: {ResourceKind.FOLDER},
        }
        if kind not in allowed.get(self.kind, set()):
            raise ValueError(
                f"A {kind.name.lower()} cannot live under a {self.kind.name.lower()}."
            )
        return ResourcePath(self.segments + ((kind, kind.bare(name)),))

    @property
    def kind(self) -> ResourceKind:
        return self.segments[-1][0]

    @property
    def name(self) -> str:
        """Bare name of the last segment."""
        return self.segments[-1][1]

    @property
    def leaf(self) -> str:
        """Last segment as the client lists it (suffix included)."""
        return self.kind.qualify(self.name)

    @property
    def parent(self) -> ResourcePath | None:
        if len(self.segments) == 1:
            return None
        return ResourcePath(self.segments[:-1])

    def listing_path(self) -> str:
        """
        Return the path to list in order to see this path's children.

        Folders live in the lakehouse `Files` area, so listing a lakehouse
        means listing `<lakehouse>/Files`.
        """
        rendered = str(self)
        if self.kind == ResourceKind.LAKEHOUSE:
            return f"{rendered}/{FILES_ROOT}"
        return rendered

    def __str__(self) -> str:
        parts: list[str] = []
        previous: ResourceKind | None = None
        for kind, name in self.segments:
            if kind == ResourceKind.FOLDER and previous == ResourceKind.LAKEHOUSE:
                parts.append(FILES_ROOT)
            parts.append(kind.qualify(name))
            previous = kind
        return "/".join(parts)


@dataclass(frozen=True)
class Capacity:
    """Lightweight representation of a Fabric capacity (read-only)."""

    name: str
    sku: str | None = None
    state: str | None = None
    region: str | None = None

    @property
    def ref(self) -> str:
        """Canonical client name, e.g. `mycap.Capacity`."""
        return ResourceKind.CAPACITY.qualify(self.name)

    @property
    def is_reserved(self) -> bool:
        return RESERVED_MARKER in self.name


class ResourceClient(Protocol):
    """Interface for the remote operations used by the core domain.

    Every method raises `fabops.core.errors.ClientError` on failure.
    """

    def get_version(self) -> str:
        """Return the client version string."""
        ...

    def list_top_level(self) -> list[str]:
        """Return the workspaces visible to the current principal."""
        ...

    def list_capacities(self) -> list[Capacity]:
        """Return all capacities visible to the current principal."""
        ...

    def list_children(self, path: str) -> list[str]:
        """Return the entries directly below `path`."""
        ...

    def create(self, path: str, params: Mapping[str, str] | None = None) -> None:
        """Create the resource at `path`."""
        ...
