from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from fabops.core.errors import ClientError  # noqa: E402
from fabops.core.fabric import Capacity  # noqa: E402


class FakeFabric:
    """In-memory stand-in for the Fabric CLI, keyed by rendered paths."""

    def __init__(
        self,
        existing: list[str] | None = None,
        capacities: list[Capacity] | None = None,
    ):
        self.existing: set[str] = set(existing or [])
        self.capacities = (
            list(capacities) if capacities is not None else [Capacity(name="Cap1")]
        )
        self.fail_create: set[str] = set()
        self.fail_list: set[str] = set()
        self.version_error = False
        self.auth_error = False
        self.calls: list[str] = []
        self.created: list[tuple[str, dict[str, str] | None]] = []

    def get_version(self) -> str:
        self.calls.append("version")
        if self.version_error:
            raise ClientError("fab not found on PATH")
        return "fab version 1.0.0"

    def list_top_level(self) -> list[str]:
        self.calls.append("ls")
        if self.auth_error:
            raise ClientError("not logged in")
        return sorted(p for p in self.existing if "/" not in p)

    def list_capacities(self) -> list[Capacity]:
        self.calls.append("ls .capacities")
        return list(self.capacities)

    def list_children(self, path: str) -> list[str]:
        self.calls.append(f"ls {path}")
        if path in self.fail_list:
            raise ClientError(f"cannot list {path}")
        prefix = f"{path}/"
        return sorted(
            p[len(prefix) :]
            for p in self.existing
            if p.startswith(prefix) and "/" not in p[len(prefix) :]
        )

    def create(self, path: str, params=None) -> None:
        self.calls.append(f"mkdir {path}")
        if path in self.fail_create:
            raise ClientError(f"cannot create {path}")
        self.created.append((path, dict(params) if params else None))
        self.existing.add(path)
        if path.endswith(".Lakehouse"):
            self.existing.add(f"{path}/Files")


@pytest.fixture
def fabric() -> FakeFabric:
    return FakeFabric()
