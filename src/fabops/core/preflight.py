"""Preflight checks run before anything is mutated."""

from __future__ import annotations

from fabops.core.errors import ClientError, ClientNotInstalled, NotAuthenticated
from fabops.core.fabric import ResourceClient


def verify_ready(client: ResourceClient) -> str:
    """
    Confirm the Fabric client is installed and authenticated.

    Args:
        client: Resource client to probe.

    Returns:
        The version string reported by the client.

    Raises:
        ClientNotInstalled: If the version query fails.
        NotAuthenticated: If listing top-level workspaces fails.
    """
    try:
        version = client.get_version()
    except ClientError as exc:
        raise ClientNotInstalled(f"Fabric CLI is not available: {exc}") from exc

    try:
        client.list_top_level()
    except ClientError as exc:
        raise NotAuthenticated(f"Fabric CLI is not authenticated: {exc}") from exc

    return version
