"""Reconciliation of a medallion layout against remote state.

The reconciler walks the desired tree top-down (workspace, then each
lakehouse in declared order, then each lakehouse's folders) and applies the
same check/decide/create step at every level:

- exists, no force     -> EXISTING
- exists, force        -> FORCE_IGNORED (recreation is not implemented; the
                          existing resource is kept and used)
- missing              -> create; CREATED on success, FAILED otherwise

Failure policy differs per level. A workspace that cannot be created stops
the run. A lakehouse that cannot be created skips its own folders but not its
siblings. Folder failures are warnings only.

Everything is sequential and nothing is retried. Results are returned as a
DeploymentReport value; nothing is kept in module state.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from fabops.core.errors import (
    CapacityRequired,
    ClientError,
    DeployError,
    FolderCreationFailed,
    LakehouseCreationFailed,
    ResourceCheckFailed,
    WorkspaceCreationFailed,
)
from fabops.core.fabric import Capacity, ResourceClient, ResourceKind, ResourcePath
from fabops.core.layout import LakehouseSpec, MedallionLayout

DEFAULT_SETTLE_SECONDS = 10


class Outcome(str, Enum):
    """
    Result of reconciling one resource.

    Values:
        CREATED: The resource was missing and has been created.
        EXISTING: The resource already existed and was left alone.
        FORCE_IGNORED: The resource existed and --force was requested, but
                       recreation is not supported; it was left alone.
        FAILED: The resource was missing and could not be created.
        PLANNED: Dry run only; the resource is missing and would be created.
    """

    CREATED = "CREATED"
    EXISTING = "EXISTING"
    FORCE_IGNORED = "FORCE_IGNORED"
    FAILED = "FAILED"
    PLANNED = "PLANNED"


@dataclass(frozen=True)
class StepResult:
    """Outcome of reconciling a single resource path."""

    path: ResourcePath
    outcome: Outcome
    error: DeployError | None = None

    @property
    def kind(self) -> ResourceKind:
        return self.path.kind


@dataclass
class DeploymentReport:
    """
    Summary of a reconciliation run, at lakehouse granularity.

    Attributes:
        workspace: Workspace name that was reconciled.
        capacity: Capacity name the workspace was (or would be) attached to.
        workspace_outcome: Outcome of the workspace step.
        created: Lakehouse name -> path, for lakehouses created in this run.
        existing: Lakehouse name -> path, for lakehouses that already
                  existed (including force-ignored ones).
        failed: Lakehouse name -> error message.
        planned: Lakehouse name -> path, dry run only.
        force_ignored: Paths of resources where --force was acknowledged but
                       not applied.
        folder_warnings: Folder steps that failed; they never count as
                         lakehouse failures.
        steps: Every step in the order it was processed.
        target_count: Number of lakehouses in the desired layout.
    """

    workspace: str
    capacity: str | None
    workspace_outcome: Outcome
    target_count: int
    dry_run: bool = False
    created: dict[str, str] = field(default_factory=dict)
    existing: dict[str, str] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)
    planned: dict[str, str] = field(default_factory=dict)
    force_ignored: list[str] = field(default_factory=list)
    folder_warnings: list[StepResult] = field(default_factory=list)
    steps: list[StepResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.created) + len(self.existing)

    @property
    def has_failures(self) -> bool:
        return bool(self.failed)

    def record(self, step: StepResult) -> None:
        """Add a step and file lakehouse steps into their bucket."""
        self.steps.append(step)

        if step.outcome == Outcome.FORCE_IGNORED:
            self.force_ignored.append(str(step.path))

        if step.kind == ResourceKind.FOLDER:
            if step.outcome == Outcome.FAILED:
                self.folder_warnings.append(step)
            return

        if step.kind != ResourceKind.LAKEHOUSE:
            return

        name = step.path.name
        if step.outcome == Outcome.CREATED:
            self.created[name] = str(step.path)
        elif step.outcome in (Outcome.EXISTING, Outcome.FORCE_IGNORED):
            self.existing[name] = str(step.path)
        elif step.outcome == Outcome.PLANNED:
            self.planned[name] = str(step.path)
        else:
            self.failed[name] = str(step.error) if step.error else "unknown error"


Observer = Callable[[StepResult], None]


def _entry_names(entries: list[str]) -> set[str]:
    """Normalize listing entries (`raw/` and `raw` are the same folder)."""
    return {e.strip().rstrip("/") for e in entries if e.strip()}


def resource_exists(client: ResourceClient, path: ResourcePath) -> bool:
    """
    Check whether `path` exists by listing its parent.

    Raises:
        ClientError: If the parent cannot be listed.
    """
    parent = path.parent
    if parent is None:
        entries = client.list_top_level()
    else:
        entries = client.list_children(parent.listing_path())
    return path.leaf in _entry_names(entries)


class Reconciler:
    """Converge remote state to a MedallionLayout.

    Args:
        client: Resource client used for every remote call.
        force: Acknowledge a recreation request for existing resources.
        dry_run: Only check existence; never create anything.
        settle_seconds: Pause after creating the workspace, before touching
                        lakehouses.
        sleep: Sleep function (patched in tests).
        observer: Called with every StepResult as soon as it is known.
    """

    def __init__(
        self,
        client: ResourceClient,
        *,
        force: bool = False,
        dry_run: bool = False,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        observer: Observer | None = None,
    ) -> None:
        self.client = client
        self.force = force
        self.dry_run = dry_run
        self.settle_seconds = settle_seconds
        self.sleep = sleep
        self.observer = observer

    def _emit(self, report: DeploymentReport, step: StepResult) -> StepResult:
        report.record(step)
        if self.observer is not None:
            self.observer(step)
        return step

    def _existing_outcome(self) -> Outcome:
        return Outcome.FORCE_IGNORED if self.force else Outcome.EXISTING

    def _exists_or_absent(self, path: ResourcePath) -> bool:
        # An unreadable parent is treated as "absent"; the create call that
        # follows reports the real problem if there is one.
        try:
            return resource_exists(self.client, path)
        except ClientError:
            return False

    def ensure_workspace(
        self,
        layout: MedallionLayout,
        capacity: Capacity | None,
        report: DeploymentReport,
    ) -> StepResult:
        """
        Make sure the workspace exists.

        Raises:
            ResourceCheckFailed: If the workspace list cannot be read.
            CapacityRequired: If the workspace is missing and no capacity
                was given.
            WorkspaceCreationFailed: If the create call fails.
        """
        path = layout.workspace_path
        try:
            exists = resource_exists(self.client, path)
        except ClientError as exc:
            raise ResourceCheckFailed(f"Could not list workspaces: {exc}") from exc

        if exists:
            return self._emit(report, StepResult(path, self._existing_outcome()))

        if capacity is None:
            raise CapacityRequired(
                f"Workspace '{layout.workspace}' does not exist and no capacity was given."
            )

        if self.dry_run:
            return self._emit(report, StepResult(path, Outcome.PLANNED))

        try:
            self.client.create(str(path), {"capacityname": capacity.name})
        except ClientError as exc:
            raise WorkspaceCreationFailed(
                f"Could not create workspace '{layout.workspace}' on capacity "
                f"'{capacity.name}': {exc}"
            ) from exc

        step = self._emit(report, StepResult(path, Outcome.CREATED))
        if self.settle_seconds > 0:
            self.sleep(self.settle_seconds)
        return step

    def ensure_lakehouse(
        self,
        layout: MedallionLayout,
        lakehouse: LakehouseSpec,
        report: DeploymentReport,
        *,
        parent_planned: bool = False,
    ) -> StepResult:
        """Make sure one lakehouse exists, then its folders."""
        path = layout.lakehouse_path(lakehouse)

        if parent_planned:
            step = self._emit(report, StepResult(path, Outcome.PLANNED))
        elif self._exists_or_absent(path):
            step = self._emit(report, StepResult(path, self._existing_outcome()))
        elif self.dry_run:
            step = self._emit(report, StepResult(path, Outcome.PLANNED))
        else:
            try:
                self.client.create(str(path))
            except ClientError as exc:
                error = LakehouseCreationFailed(
                    f"Could not create lakehouse '{lakehouse.name}': {exc}"
                )
                return self._emit(report, StepResult(path, Outcome.FAILED, error))
            step = self._emit(report, StepResult(path, Outcome.CREATED))

        planned = step.outcome == Outcome.PLANNED
        for folder in lakehouse.folders:
            self.ensure_folder(
                layout.folder_path(lakehouse, folder), report, parent_planned=planned
            )
        return step

    def ensure_folder(
        self,
        path: ResourcePath,
        report: DeploymentReport,
        *,
        parent_planned: bool = False,
    ) -> StepResult:
        """Make sure one folder exists. Failures are recorded as warnings."""
        if parent_planned:
            return self._emit(report, StepResult(path, Outcome.PLANNED))
        if self._exists_or_absent(path):
            return self._emit(report, StepResult(path, self._existing_outcome()))
        if self.dry_run:
            return self._emit(report, StepResult(path, Outcome.PLANNED))

        try:
            self.client.create(str(path))
        except ClientError as exc:
            error = FolderCreationFailed(f"Could not create folder '{path}': {exc}")
            return self._emit(report, StepResult(path, Outcome.FAILED, error))
        return self._emit(report, StepResult(path, Outcome.CREATED))

    def run(self, layout: MedallionLayout, capacity: Capacity | None) -> DeploymentReport:
        """Reconcile the whole layout and return the report."""
        report = DeploymentReport(
            workspace=layout.workspace,
            capacity=capacity.name if capacity else None,
            workspace_outcome=Outcome.PLANNED,
            target_count=len(layout.lakehouses),
            dry_run=self.dry_run,
        )

        workspace_step = self.ensure_workspace(layout, capacity, report)
        report.workspace_outcome = workspace_step.outcome

        parent_planned = workspace_step.outcome == Outcome.PLANNED
        for lakehouse in layout.lakehouses:
            self.ensure_lakehouse(layout, lakehouse, report, parent_planned=parent_planned)

        return report


def reconcile(
    client: ResourceClient,
    layout: MedallionLayout,
    capacity: Capacity | None,
    *,
    force: bool = False,
    dry_run: bool = False,
    settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
    observer: Observer | None = None,
) -> DeploymentReport:
    """
    Create whatever part of `layout` is missing remotely.

    This is a thin convenience wrapper around Reconciler.run.

    Returns:
        A DeploymentReport with per-lakehouse outcomes.

    Raises:
        ResourceCheckFailed, CapacityRequired, WorkspaceCreationFailed:
            Fatal workspace-level failures; nothing below the workspace is
            attempted.
    """
    reconciler = Reconciler(
        client,
        force=force,
        dry_run=dry_run,
        settle_seconds=settle_seconds,
        sleep=sleep,
        observer=observer,
    )
    return reconciler.run(layout, capacity)
