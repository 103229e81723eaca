"""Common CLI options for the CLI."""

import typer

from fabops.core.layout import DEFAULT_WORKSPACE_NAME

FabBinOpt = typer.Option(
    None,
    "--fab-bin",
    help="Path to the Fabric CLI executable (default: $FABOPS_FAB_BIN or `fab`)",
)

WorkspaceOpt = typer.Option(
    DEFAULT_WORKSPACE_NAME,
    "--workspace",
    "-w",
    help="Name of the workspace to create or reuse",
)

CapacityOpt = typer.Option(
    None,
    "--capacity",
    "-c",
    help="Capacity to attach a new workspace to (with or without .Capacity)",
)

ForceOpt = typer.Option(
    False,
    "--force",
    "-f",
    help="Request recreation of existing resources (acknowledged, not supported)",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show what would be created, but don't create anything",
)

StrictOpt = typer.Option(
    False,
    "--strict",
    help="Exit with code 2 when any lakehouse could not be created",
)

NonInteractiveOpt = typer.Option(
    False,
    "--non-interactive",
    help="Never prompt; fail if the capacity cannot be chosen automatically",
)

SettleOpt = typer.Option(
    None,
    "--settle-seconds",
    min=0,
    help="Pause after creating the workspace (default: $FABOPS_SETTLE_SECONDS or 10)",
)
