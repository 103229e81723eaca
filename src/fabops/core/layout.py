"""Desired state for a medallion deployment.

The layout is fixed: one workspace holding a Bronze, Silver and Gold
lakehouse, each with its own set of folders. Only the workspace name is a
parameter.
"""

from __future__ import annotations

from dataclasses import dataclass

from fabops.core.fabric import ResourceKind, ResourcePath

DEFAULT_WORKSPACE_NAME = "Medallion_Architecture"


@dataclass(frozen=True)
class LakehouseSpec:
    """A lakehouse and the folders it should contain, in creation order."""

    name: str
    folders: tuple[str, ...]


MEDALLION_LAKEHOUSES: tuple[LakehouseSpec, ...] = (
    LakehouseSpec("LH_Bronze", ("raw", "landing", "archive")),
    LakehouseSpec("LH_Silver", ("cleansed", "validated", "enriched")),
    LakehouseSpec("LH_Gold", ("curated", "aggregated", "reporting")),
)


@dataclass(frozen=True)
class MedallionLayout:
    """The full desired tree: workspace -> lakehouses -> folders."""

    workspace: str = DEFAULT_WORKSPACE_NAME
    lakehouses: tuple[LakehouseSpec, ...] = MEDALLION_LAKEHOUSES

    @property
    def workspace_path(self) -> ResourcePath:
        return ResourcePath.workspace(self.workspace)

    def lakehouse_path(self, lakehouse: LakehouseSpec) -> ResourcePath:
        return self.workspace_path.child(ResourceKind.LAKEHOUSE, lakehouse.name)

    def folder_path(self, lakehouse: LakehouseSpec, folder: str) -> ResourcePath:
        return self.lakehouse_path(lakehouse).child(ResourceKind.FOLDER, folder)

    def paths(self) -> list[ResourcePath]:
        """Return every desired resource path, parents before children."""
        paths = [self.workspace_path]
        for lakehouse in self.lakehouses:
            paths.append(self.lakehouse_path(lakehouse))
            paths.extend(self.folder_path(lakehouse, f) for f in lakehouse.folders)
        return paths


def medallion_layout(workspace: str | None = None) -> MedallionLayout:
    """Return the standard Bronze/Silver/Gold layout for `workspace`."""
    name = (workspace or "").strip() or DEFAULT_WORKSPACE_NAME
    return MedallionLayout(workspace=ResourceKind.WORKSPACE.bare(name))
