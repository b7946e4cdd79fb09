"""Builder for SR-IOV networks."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ecoinfra.api import ApiError, GroupVersionResource, ResourceBuilder

log = logging.getLogger(__name__)

ALLOWED_LINK_STATES = ("enable", "disable", "auto")
MAX_VLAN_ID = 4094
MAX_VLAN_QOS = 7


class NetworkBuilder(ResourceBuilder):
    """Defines an SR-IOV network and keeps it in step with the cluster."""

    kind = "SriovNetwork"
    resource = "sriovnetworks"

    def __init__(
        self, api_client: Any, name: str, nsname: str, target_nsname: str, res_name: str
    ) -> None:
        super().__init__(
            api_client,
            {
                "metadata": {"name": name, "namespace": nsname},
                "spec": {"resourceName": res_name, "networkNamespace": target_nsname},
            },
        )
        if not name:
            self._error_msg = "SrIovNetwork 'name' cannot be empty"
        if not nsname:
            self._error_msg = "SrIovNetwork 'nsname' cannot be empty"
        if not target_nsname:
            self._error_msg = "SrIovNetwork 'targetNsname' cannot be empty"
        if not res_name:
            self._error_msg = "SrIovNetwork 'resName' cannot be empty"

    @property
    def _spec(self) -> dict[str, Any]:
        return self.definition.setdefault("spec", {})

    def _set(self, key: str, value: Any) -> "NetworkBuilder":
        if not self._is_valid():
            return self
        self._spec[key] = value
        return self

    def with_vlan(self, vlan_id: int) -> "NetworkBuilder":
        """Set the VLAN id, which must lie in 0-4094."""
        if not self._is_valid():
            return self
        if not 0 <= vlan_id <= MAX_VLAN_ID:
            self._error_msg = "invalid vlanID, allowed vlanID values are between 0-4094"
        if self._error_msg:
            return self
        self._spec["vlan"] = int(vlan_id)
        return self

    def with_spoof(self, enabled: bool) -> "NetworkBuilder":
        """Turn spoof checking on or off."""
        return self._set("spoofChk", "on" if enabled else "off")

    def with_link_state(self, link_state: str) -> "NetworkBuilder":
        """Set the link state: enable, disable or auto."""
        if not self._is_valid():
            return self
        if link_state not in ALLOWED_LINK_STATES:
            self._error_msg = "invalid 'linkState' parameters"
        if self._error_msg:
            return self
        self._spec["linkState"] = link_state
        return self

    def with_max_tx_rate(self, max_tx_rate: int) -> "NetworkBuilder":
        """Set the maximum transmit rate."""
        return self._set("maxTxRate", int(max_tx_rate))

    def with_min_tx_rate(self, min_tx_rate: int) -> "NetworkBuilder":
        """Set the transmit rate limit field from the given rate."""
        return self._set("maxTxRate", int(min_tx_rate))

    def with_trust_flag(self, enabled: bool) -> "NetworkBuilder":
        """Turn the trust flag on or off."""
        return self._set("trust", "on" if enabled else "off")

    def with_vlan_qos(self, qos_class: int) -> "NetworkBuilder":
        """Set the VLAN QoS class, which must lie in 0...7."""
        if not self._is_valid():
            return self
        if not 0 <= qos_class <= MAX_VLAN_QOS:
            self._error_msg = "Invalid QoS class. Supported vlan QoS class values are between 0...7"
        if self._error_msg:
            return self
        self._spec["vlanQoS"] = int(qos_class)
        return self

    def with_ip_address_support(self) -> "NetworkBuilder":
        """Enable the ips capability."""
        return self._with_capabilities("ips")

    def with_mac_address_support(self) -> "NetworkBuilder":
        """Enable the mac capability."""
        return self._with_capabilities("mac")

    def with_static_ipam(self) -> "NetworkBuilder":
        """Use static IP address management."""
        return self._with_ipam("static")

    def _with_capabilities(self, capability: str) -> "NetworkBuilder":
        return self._set("capabilities", f'{{ "{capability}": true }}')

    def _with_ipam(self, ipam_type: str) -> "NetworkBuilder":
        if not self._is_valid():
            return self
        if not ipam_type:
            self._error_msg = "failed to configure IPAM, 'ipamType' parameter is empty"
        if self._error_msg:
            return self
        self._spec["ipam"] = f'{{ "type": "{ipam_type}" }}'
        return self

    def update(self, force: bool = False) -> "NetworkBuilder":
        """Replace the stored network; with force, fall back to delete and create."""
        if not self._is_valid():
            return self
        log.debug("Updating the SrIovNetwork object %s in namespace %s", self._name, self._namespace)
        try:
            self.object = self.api_client.update(self.resource, self.definition)
        except ApiError:
            if not force:
                raise
            log.debug(
                "Failed to update the SrIovNetwork object %s in namespace %s; recreating it",
                self._name,
                self._namespace,
            )
            self.delete()
            return self.create()
        return self


def pull_network(api_client: Any, name: str, nsname: str) -> NetworkBuilder:
    """Load an existing SR-IOV network; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "sriovnetwork 'name' cannot be empty"
    if not nsname:
        error_msg = "sriovnetwork 'namespace' cannot be empty"
    builder = NetworkBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(f"sriovnetwork object {name} doesn't exist in namespace {nsname}")


def list_networks(
    api_client: Any, nsname: str, options: Mapping[str, Any] | None = None
) -> list[NetworkBuilder]:
    """Return builders for the SR-IOV networks in a namespace."""
    log.debug("Listing sriov networks in the namespace %s with the options %s", nsname, options)
    if not nsname:
        raise ValueError("failed to list sriov networks, 'nsname' parameter is empty")
    builders = []
    for item in api_client.list(NetworkBuilder.resource, nsname, options):
        builder = NetworkBuilder._from_definition(api_client, item)
        builder.object = item
        builders.append(builder)
    return builders


def get_sriov_networks_gvr() -> GroupVersionResource:
    """Return the group, version and resource of SR-IOV networks."""
    return GroupVersionResource(group="sriovnetwork.openshift.io", version="v1", resource="sriovnetworks")


def clean_all_networks_by_target_namespace(
    api_client: Any,
    operator_nsname: str,
    target_nsname: str,
    options: Mapping[str, Any] | None = None,
) -> None:
    """Delete the networks in the operator namespace that target the given namespace."""
    log.debug(
        "Cleaning up sriov networks in the %s namespace with %s NetworkNamespace spec",
        operator_nsname,
        target_nsname,
    )
    if not operator_nsname:
        raise ValueError("failed to clean up sriov networks, 'operatornsname' parameter is empty")
    if not target_nsname:
        raise ValueError("failed to clean up sriov networks, 'targetnsname' parameter is empty")
    for network in list_networks(api_client, operator_nsname, options):
        spec = network.object.get("spec") or {}
        if spec.get("networkNamespace") == target_nsname:
            network.delete()