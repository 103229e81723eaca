"""Error taxonomy for medallion provisioning.

Every failure the core can report is one of the classes below. The CLI only
has to know about `DeployError`: it prints the message plus the `hint`
(usually the exact command that fixes the problem) and exits non-zero.

`ClientError` is different: it is raised by Resource Client adapters and
never leaves the core. Call sites convert it into an outcome or into one of
the fatal `DeployError` subclasses.
"""

from __future__ import annotations


class ClientError(RuntimeError):
    """Raised by a Resource Client when a remote call fails."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class DeployError(RuntimeError):
    """Base class for errors reported to the operator."""

    hint: str | None = None

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        if hint is not None:
            self.hint = hint


class PreflightError(DeployError):
    """The external client is not ready to be used."""


class ClientNotInstalled(PreflightError):
    """The `fab` executable is missing or does not answer a version query."""

    hint = "pip install ms-fabric-cli"


class NotAuthenticated(PreflightError):
    """The client is installed but cannot list workspaces."""

    hint = "fab auth login"


class CapacityError(DeployError):
    """No capacity could be resolved for the workspace."""


class NoCapacityAvailable(CapacityError):
    """Listing capacities failed or returned no usable capacity."""

    hint = "fab ls .capacities -l"


class CapacitySelectionRequired(CapacityError):
    """Selection was cancelled or no prompt was available."""

    hint = "Pass --capacity <name> to pick a capacity non-interactively."


class CapacityRequired(DeployError):
    """A workspace has to be created but no capacity was supplied."""


class WorkspaceCreationFailed(DeployError):
    """The workspace did not exist and could not be created."""


class ResourceCheckFailed(DeployError):
    """Remote state could not be observed."""


class LakehouseCreationFailed(DeployError):
    """A lakehouse could not be created (recorded, not raised)."""


class FolderCreationFailed(DeployError):
    """A folder could not be created (recorded as a warning, not raised)."""
