"""Builder for the cluster-wide proxy configuration."""

from __future__ import annotations

from typing import Any

from ecoinfra.api import ResourceBuilder

CLUSTER_PROXY_NAME = "cluster"


class ProxyBuilder(ResourceBuilder):
    """The cluster proxy configuration object."""

    kind = "Proxy"
    resource = "proxies"
    namespaced = False

    def exists(self) -> bool:
        """Report whether the proxy object exists in the cluster."""
        return super().exists()


def pull(api_client: Any) -> ProxyBuilder:
    """Load the cluster proxy object; raise NotFoundError if it is absent."""
    builder = ProxyBuilder(api_client, {"metadata": {"name": CLUSTER_PROXY_NAME}})
    return builder._pull_existing(f"proxy object {CLUSTER_PROXY_NAME} doesn't exist")