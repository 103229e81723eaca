"""Commands for deploying the medallion lakehouse layout."""

from __future__ import annotations

import typer
from rich.markup import escape

from fabops.cli.common.context import (
    FabricAppContext,
    require_ready,
    settle_seconds,
)
from fabops.cli.common.exits import (
    EXIT_PARTIAL,
    exit_from_exc,
    warn_exit,
)
from fabops.cli.common.options import (
    CapacityOpt,
    DryRunOpt,
    ForceOpt,
    NonInteractiveOpt,
    SettleOpt,
    StrictOpt,
    WorkspaceOpt,
)
from fabops.cli.common.output import out
from fabops.cli.tui import prompt_capacity_index
from fabops.core.capacity import (
    Prompter,
    no_choice,
    normalize_capacity_name,
    resolve_capacity,
)
from fabops.core.errors import ClientError, DeployError
from fabops.core.fabric import Capacity
from fabops.core.layout import medallion_layout
from fabops.core.reconcile import reconcile


def _capacity_prompter(requested: str | None, *, non_interactive: bool) -> Prompter:
    """Return the prompter for this run, announcing an unmatched request once."""
    wanted = normalize_capacity_name(requested)
    warned = False

    def _ask(candidates: list[Capacity]) -> int | None:
        nonlocal warned
        if wanted and not warned:
            out.warn(f"Capacity '{escape(wanted)}' is not among the available capacities.")
            warned = True
        if non_interactive:
            return no_choice(candidates)
        return prompt_capacity_index(candidates)

    return _ask


def deploy(
    ctx: typer.Context,
    workspace: str = WorkspaceOpt,
    capacity: str | None = CapacityOpt,
    force: bool = ForceOpt,
    dry_run: bool = DryRunOpt,
    strict: bool = StrictOpt,
    non_interactive: bool = NonInteractiveOpt,
    settle: float | None = SettleOpt,
):
    """
    Create the Bronze/Silver/Gold lakehouses (and their folders) if missing.
    """
    appctx: FabricAppContext = ctx.obj
    desired = medallion_layout(workspace)

    require_ready(appctx)

    try:
        selected = resolve_capacity(
            appctx.adapter,
            capacity,
            _capacity_prompter(capacity, non_interactive=non_interactive),
        )
    except DeployError as exc:
        exit_from_exc(exc)

    out.success(f"Using capacity: {escape(selected.name)}")
    if force:
        out.warn("--force was given: existing resources are kept (recreation is not supported)")

    out.header(f"Reconciling {escape(desired.workspace_path.leaf)}")
    try:
        report = reconcile(
            appctx.adapter,
            desired,
            selected,
            force=force,
            dry_run=dry_run,
            settle_seconds=settle_seconds(settle),
            observer=out.step,
        )
    except DeployError as exc:
        exit_from_exc(exc)

    out.steps_table(report.steps, title="Resources")
    out.deployment_summary(report)

    if report.has_failures and strict:
        raise typer.Exit(EXIT_PARTIAL)


def capacities(ctx: typer.Context):
    """List capacities visible to the current account."""
    appctx: FabricAppContext = ctx.obj
    require_ready(appctx)

    try:
        with out.status("Loading capacities..."):
            items = appctx.adapter.list_capacities()
    except ClientError as exc:
        exit_from_exc(
            exc, message=f"Could not list capacities: {exc}", hint="fab auth status"
        )

    if not items:
        warn_exit("No capacities found.", code=0)

    out.header("Capacities")
    out.info(f"Capacities: {len(items)} | Reserved ones are never offered for deploy")
    out.capacities_table(items, title="Capacities")


def layout(workspace: str = WorkspaceOpt):
    """Show the layout `deploy` converges to (no remote calls)."""
    desired = medallion_layout(workspace)
    out.header("Desired layout")
    out.layout_tree(desired)
