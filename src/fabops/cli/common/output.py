"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme
from rich.tree import Tree

from fabops.core.fabric import FILES_ROOT, Capacity, ResourceKind
from fabops.core.layout import MedallionLayout
from fabops.core.reconcile import DeploymentReport, Outcome, StepResult

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)

_OUTCOME_STYLE = {
    Outcome.CREATED: "ok",
    Outcome.EXISTING: "meta",
    Outcome.FORCE_IGNORED: "warn",
    Outcome.FAILED: "err",
    Outcome.PLANNED: "title",
}

_OUTCOME_LABEL = {
    Outcome.CREATED: "created",
    Outcome.EXISTING: "already exists",
    Outcome.FORCE_IGNORED: "exists (--force ignored, recreation not supported)",
    Outcome.FAILED: "failed",
    Outcome.PLANNED: "would create",
}


def outcome_label(outcome: Outcome) -> str:
    """Human-readable label for an outcome, styled with the console theme."""
    style = _OUTCOME_STYLE.get(outcome, "meta")
    return f"[{style}]{_OUTCOME_LABEL.get(outcome, outcome.value)}[/{style}]"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def hint(self, msg: str) -> None:
        """Print a remediation hint (usually a command)."""
        console.print(f"[meta]  hint:[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def step(self, result: StepResult) -> None:
        """Print one reconciliation step as it happens."""
        indent = "  " * (len(result.path.segments) - 1)
        line = f"{indent}{escape(result.path.leaf)}  {outcome_label(result.outcome)}"
        if result.error is not None:
            line = f"{line} [meta]({escape(str(result.error))})[/]"
        console.print(line)

    def capacities_table(
        self,
        capacities: Iterable[Capacity],
        title: str = "Capacities",
        *,
        indexed: bool = False,
    ) -> None:
        """
        Render capacities. With `indexed`, prepend the zero-based index used
        by the interactive selection prompt.
        """
        t = Table(title=title, show_lines=False)
        if indexed:
            t.add_column("#", style="title", no_wrap=True)
        t.add_column("Name", style="ok")
        t.add_column("SKU", style="meta")
        t.add_column("Region", style="meta")
        t.add_column("State")
        t.add_column("Reserved", style="warn")

        for i, c in enumerate(capacities):
            row = [escape(v or "") for v in (c.name, c.sku, c.region, c.state)]
            row.append("yes" if c.is_reserved else "")
            if indexed:
                row.insert(0, str(i))
            t.add_row(*row)

        console.print(t)

    def steps_table(self, steps: Iterable[StepResult], title: str = "Resources") -> None:
        """Render every reconciliation step with its outcome."""
        t = Table(title=title, show_lines=False)
        t.add_column("Resource", style="ok")
        t.add_column("Kind", style="meta")
        t.add_column("Result")
        t.add_column("Error", style="err")

        for s in steps:
            t.add_row(
                escape(str(s.path)),
                s.kind.name.lower(),
                outcome_label(s.outcome),
                escape(str(s.error or "")),
            )

        console.print(t)

    def deployment_summary(self, report: DeploymentReport) -> None:
        """Render the end-of-run summary at lakehouse granularity."""
        self.header("Deployment summary")
        self.kv(
            {
                "Workspace": f"{escape(report.workspace)} ({outcome_label(report.workspace_outcome)})",
                "Capacity": escape(report.capacity or "-"),
            }
        )

        if report.dry_run:
            self.warn("Dry-run enabled: nothing was created")

        for name in report.created:
            self.success(f"Created: {escape(name)}")
        for name in report.existing:
            console.print(f"[meta]•[/] Already existed: {escape(name)}")
        for name in report.planned:
            self.info(f"Would create: {escape(name)}")
        for name, err in report.failed.items():
            self.error(f"Failed: {escape(name)} ({escape(err)})")
        for path in report.force_ignored:
            self.warn(f"--force requested but recreation is not supported: {escape(path)}")
        for step in report.folder_warnings:
            self.warn(f"Folder not created: {escape(str(step.path))}")

        counts = f"{report.success_count}/{report.target_count} lakehouses ready"
        if report.has_failures:
            self.warn(counts)
        else:
            self.success(counts)

    def layout_tree(self, layout: MedallionLayout) -> None:
        """Render the desired workspace -> lakehouse -> folder tree."""
        paths = layout.paths()
        tree = Tree(f"[title]{escape(paths[0].leaf)}[/]")
        branches = {paths[0]: tree}
        for path in paths[1:]:
            if path.kind == ResourceKind.FOLDER:
                label = f"[meta]{FILES_ROOT}/[/]{escape(path.leaf)}"
            else:
                label = f"[ok]{escape(path.leaf)}[/]"
            branches[path] = branches[path.parent].add(label)
        console.print(tree)


out = Out()
