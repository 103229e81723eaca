"""Application context management for the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass

from rich.markup import escape

from fabops.cli.common.exits import exit_from_exc
from fabops.cli.common.output import out
from fabops.core.adapters.fabcli import FabCliAdapter
from fabops.core.errors import PreflightError
from fabops.core.fabric import ResourceClient
from fabops.core.preflight import verify_ready
from fabops.core.reconcile import DEFAULT_SETTLE_SECONDS

_SETTLE_ENV = "FABOPS_SETTLE_SECONDS"


@dataclass
class FabricAppContext:
    """Application context holding the Fabric resource client."""

    fab_bin: str | None
    adapter: ResourceClient
    version: str | None = None


def build_fabric_context(fab_bin: str | None) -> FabricAppContext:
    """Build the application context. Nothing is executed yet."""
    return FabricAppContext(fab_bin=fab_bin, adapter=FabCliAdapter(fab_bin))


def require_ready(appctx: FabricAppContext) -> str:
    """Run the preflight checks once per invocation; exit 1 on failure."""
    if appctx.version is not None:
        return appctx.version
    try:
        with out.status("Checking Fabric CLI..."):
            appctx.version = verify_ready(appctx.adapter)
    except PreflightError as exc:
        exit_from_exc(exc)
    out.success(f"Fabric CLI ready ({escape(appctx.version)})")
    return appctx.version


def settle_seconds(value: float | None) -> float:
    """Return the settle delay, honoring the env override when not given."""
    if value is not None:
        return value
    raw = os.getenv(_SETTLE_ENV)
    if raw is None:
        return DEFAULT_SETTLE_SECONDS
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return DEFAULT_SETTLE_SECONDS
