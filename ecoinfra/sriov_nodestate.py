"""Reader for SR-IOV network node states."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Mapping

from ecoinfra.api import ApiError, BuilderError

log = logging.getLogger(__name__)

POLL_INTERVAL = 1.0
_DOWN_LINK_SPEED = "-1 Mb/s"


class NetworkNodeStateBuilder:
    """Reads the SR-IOV network node state of one node."""

    kind = "SriovNetworkNodeState"
    resource = "sriovnetworknodestates"

    def __init__(self, api_client: Any, node_name: str, nsname: str) -> None:
        self.api_client = api_client
        self.node_name = node_name
        self.ns_name = nsname
        self.objects: dict[str, Any] | None = None
        self._error_msg = ""
        if not node_name:
            log.debug("The name of the nodeName is empty")
            self._error_msg = "SriovNetworkNodeState 'nodeName' is empty"
        if not nsname:
            log.debug("The namespace of the SriovNetworkNodeState is empty")
            self._error_msg = "SriovNetworkNodeState 'nsname' is empty"

    def _validate(self) -> None:
        if self.api_client is None:
            self._error_msg = f"{self.kind} builder cannot have nil apiClient"
        if self._error_msg:
            log.debug("The %s builder has error message: %s", self.kind, self._error_msg)
            raise BuilderError(self._error_msg)

    def discover(self) -> None:
        """Read the node state from the client into ``objects``."""
        self._validate()
        log.debug("Getting the SriovNetworkNodeState in namespace %s for node %s", self.ns_name, self.node_name)
        try:
            self.objects = self.api_client.get(self.resource, self.node_name, self.ns_name)
        except ApiError:
            self.objects = None
            raise

    def get_nics(self) -> list[dict[str, Any]]:
        """Discover the node state and return its SR-IOV interfaces."""
        self._validate()
        self.discover()
        return list(((self.objects or {}).get("status") or {}).get("interfaces") or [])

    def get_up_nics(self) -> list[dict[str, Any]]:
        """Return the SR-IOV interfaces whose link is up."""
        self._validate()
        return [
            nic
            for nic in self.get_nics()
            if nic.get("linkSpeed") and nic.get("linkSpeed") != _DOWN_LINK_SPEED
        ]

    def wait_until_sync_status(self, sync_status: str, timeout: float | timedelta) -> None:
        """Poll until the node state has the sync status; raise TimeoutError otherwise."""
        self._validate()
        if not sync_status:
            raise ValueError("syncStatus can't be empty")
        seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
        deadline = time.monotonic() + seconds
        while True:
            try:
                self.discover()
            except ApiError:
                pass
            else:
                status = (self.objects or {}).get("status") or {}
                if status.get("syncStatus") == sync_status:
                    return
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError("timed out waiting for the condition")
            time.sleep(min(POLL_INTERVAL, remaining))

    def get_num_vfs(self, interface_name: str) -> int:
        """Return the number of virtual functions of an interface in the discovered state."""
        self._validate()
        if self.objects is None:
            self._error_msg = f"can not redefine the undefined {self.kind}"
        if not interface_name:
            self._error_msg = "the sriovInterface is an empty sting"
        if self._error_msg:
            raise BuilderError(self._error_msg)
        for interface in (self.objects.get("status") or {}).get("interfaces") or []:
            if interface.get("name") == interface_name:
                return interface.get("numVfs") or 0
        raise LookupError(f"failed to find interface {interface_name}")


def list_network_node_state(
    api_client: Any, nsname: str, options: Mapping[str, Any] | None = None
) -> list[NetworkNodeStateBuilder]:
    """Return builders for the node states in a namespace."""
    log.debug("Listing SriovNetworkNodeStates in the namespace %s with the options %s", nsname, options)
    if not nsname:
        raise ValueError("failed to list SriovNetworkNodeStates, 'nsname' parameter is empty")
    builders = []
    for item in api_client.list(NetworkNodeStateBuilder.resource, nsname, options):
        name = (item.get("metadata") or {}).get("name") or ""
        builder = NetworkNodeStateBuilder(api_client, name, nsname)
        builder.objects = item
        builders.append(builder)
    return builders