"""Builder for services."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ecoinfra.api import GroupVersionResource, ResourceBuilder

log = logging.getLogger(__name__)


class ServiceBuilder(ResourceBuilder):
    """Defines a service and keeps it in step with the cluster.

    The service type is ClusterIP unless changed by with_node_port or
    with_external_traffic_policy.
    """

    kind = "Service"
    resource = "services"

    def __init__(
        self,
        api_client: Any,
        name: str,
        nsname: str,
        labels: Mapping[str, str] | None,
        service_port: Mapping[str, Any],
    ) -> None:
        super().__init__(
            api_client,
            {
                "metadata": {"name": name, "namespace": nsname},
                "spec": {
                    "selector": dict(labels) if labels is not None else None,
                    "ports": [dict(service_port)],
                },
            },
        )
        if not name:
            log.debug("The name of the service is empty")
            self._error_msg = "Service 'name' cannot be empty"
        if not nsname:
            log.debug("The namespace of the service is empty")
            self._error_msg = "Namespace 'nsname' cannot be empty"

    @property
    def _spec(self) -> dict[str, Any]:
        return self.definition.setdefault("spec", {})

    def with_node_port(self) -> "ServiceBuilder":
        """Make the service a NodePort service exposing the first port."""
        if not self._is_valid():
            return self
        spec = self._spec
        spec["type"] = "NodePort"
        ports = spec.get("ports") or []
        if not ports:
            self._error_msg = "service does not have the available ports"
            return self
        ports[0]["nodePort"] = ports[0].get("port")
        return self

    def with_external_traffic_policy(self, policy_type: str) -> "ServiceBuilder":
        """Make the service a LoadBalancer with the given external traffic policy."""
        if not self._is_valid():
            return self
        log.debug("Defining service's ExternalTrafficPolicy: %s", policy_type)
        if not policy_type:
            self._error_msg = "ExternalTrafficPolicy can not be empty"
        if self._error_msg:
            return self
        spec = self._spec
        spec["type"] = "LoadBalancer"
        spec["externalTrafficPolicy"] = policy_type
        return self

    def with_annotation(self, annotation: Mapping[str, str] | None) -> "ServiceBuilder":
        """Replace the service annotations."""
        if not self._is_valid():
            return self
        log.debug("Defining service's Annotation to %s", annotation)
        if annotation is None:
            self._error_msg = "Annotation can not be empty map"
        if self._error_msg:
            return self
        self.definition["metadata"]["annotations"] = dict(annotation)
        return self

    def with_ip_family(self, ip_family: Iterable[str] | None, ip_stack_policy: str) -> "ServiceBuilder":
        """Set the IP families and the IP family policy."""
        if not self._is_valid():
            return self
        log.debug("Defining service's IPFamily: %s and IPFamilyPolicy: %s", ip_family, ip_stack_policy)
        if ip_family is None:
            self._error_msg = "failed to set empty ipFamily"
        if not ip_stack_policy:
            self._error_msg = "failed to set empty ipStackPolicy"
        if self._error_msg:
            return self
        spec = self._spec
        spec["ipFamilies"] = list(ip_family)
        spec["ipFamilyPolicy"] = ip_stack_policy
        return self


def _is_valid_port(port: int) -> bool:
    return port > 0 or port < 65535


def define_service_port(port: int, target_port: int, protocol: str) -> dict[str, Any]:
    """Return a service port definition; raise ValueError for an invalid port."""
    log.debug("Defining ServicePort with port %d and targetport %d", port, target_port)
    if not _is_valid_port(port):
        raise ValueError("invalid port number")
    if not _is_valid_port(target_port):
        raise ValueError("invalid target port number")
    return {"protocol": protocol, "port": port, "targetPort": target_port}


def get_service_gvr() -> GroupVersionResource:
    """Return the group, version and resource of services."""
    return GroupVersionResource(group="", version="v1", resource="services")


def pull(api_client: Any, name: str, nsname: str) -> ServiceBuilder:
    """Load an existing service; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "service 'name' cannot be empty"
    if not nsname:
        error_msg = "service 'namespace' cannot be empty"
    builder = ServiceBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(f"service object {name} doesn't exist in namespace {nsname}")