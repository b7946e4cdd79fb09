"""Builders for persistent volumes and persistent volume claims."""

from __future__ import annotations

from typing import Any

from ecoinfra.api import ResourceBuilder


class PVBuilder(ResourceBuilder):
    """A persistent volume read from the cluster."""

    kind = "PersistentVolume"
    resource = "persistentvolumes"
    namespaced = False

    def exists(self) -> bool:
        """Report whether the persistent volume exists in the cluster."""
        return super().exists()


class PVCBuilder(ResourceBuilder):
    """A persistent volume claim read from the cluster."""

    kind = "PersistentVolumeClaim"
    resource = "persistentvolumeclaims"

    def exists(self) -> bool:
        """Report whether the persistent volume claim exists in its namespace."""
        return super().exists()


def pull_persistent_volume(api_client: Any, name: str) -> PVBuilder:
    """Load an existing persistent volume; raise NotFoundError if it is absent."""
    builder = PVBuilder(api_client, {"metadata": {"name": name}})
    return builder._pull_existing(f"PersistentVolume object {name} doesn't exist")


def pull_persistent_volume_claim(api_client: Any, name: str, nsname: str) -> PVCBuilder:
    """Load an existing persistent volume claim; raise NotFoundError if it is absent."""
    builder = PVCBuilder(api_client, {"metadata": {"name": name, "namespace": nsname}})
    return builder._pull_existing(
        f"PersistentVolumeClaim object {name} doesn't exist in namespace {nsname}"
    )