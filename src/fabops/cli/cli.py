"""CLI application for Microsoft Fabric medallion provisioning."""

import typer

from fabops.cli.commands.medallion import capacities, deploy, layout
from fabops.cli.common.context import build_fabric_context
from fabops.cli.common.options import FabBinOpt

app = typer.Typer(
    help="fabops - idempotent Bronze/Silver/Gold lakehouse provisioning for Fabric",
    no_args_is_help=True,
)


@app.callback()
def _init(ctx: typer.Context, fab_bin: str | None = FabBinOpt):
    """Initialize the Fabric CLI context."""
    ctx.obj = build_fabric_context(fab_bin)


app.command(help="Create the medallion workspace, lakehouses and folders if missing.")(
    deploy
)
app.command(help="List capacities visible to the current account.")(capacities)
app.command(help="Show the desired layout without contacting Fabric.")(layout)


if __name__ == "__main__":
    app()
