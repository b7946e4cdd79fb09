"""Builder for SR-IOV network node policies."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ecoinfra.api import ResourceBuilder

log = logging.getLogger(__name__)

ALLOWED_DEV_TYPES = ("vfio-pci", "netdevice")
DEFAULT_POLICY_NAME = "default"


class PolicyBuilder(ResourceBuilder):
    """Defines an SR-IOV network node policy and keeps it in step with the cluster."""

    kind = "SriovNetworkNodePolicy"
    resource = "sriovnetworknodepolicies"

    def __init__(
        self,
        api_client: Any,
        name: str,
        nsname: str,
        res_name: str,
        vfs_number: int,
        nic_names: Iterable[str] | None,
        node_selector: Mapping[str, str] | None,
    ) -> None:
        nic_list = list(nic_names) if nic_names is not None else None
        selector = dict(node_selector) if node_selector is not None else None
        super().__init__(
            api_client,
            {
                "metadata": {"name": name, "namespace": nsname},
                "spec": {
                    "nodeSelector": selector,
                    "numVfs": vfs_number,
                    "resourceName": res_name,
                    "priority": 1,
                    "nicSelector": {"pfNames": nic_list},
                },
            },
        )
        if not name:
            self._error_msg = "SriovNetworkNodePolicy 'name' cannot be empty"
        if not nsname:
            self._error_msg = "SriovNetworkNodePolicy 'nsname' cannot be empty"
        if not nic_list:
            self._error_msg = "SriovNetworkNodePolicy 'nicNames' cannot be empty list"
        if not selector:
            self._error_msg = "SriovNetworkNodePolicy 'nodeSelector' cannot be empty map"
        if vfs_number <= 0:
            self._error_msg = "SriovNetworkNodePolicy 'vfsNumber' cannot be zero of negative"

    @property
    def _spec(self) -> dict[str, Any]:
        return self.definition.setdefault("spec", {})

    def with_dev_type(self, dev_type: str) -> "PolicyBuilder":
        """Set the device type: vfio-pci or netdevice."""
        if not self._is_valid():
            return self
        if dev_type not in ALLOWED_DEV_TYPES:
            self._error_msg = "invalid device type, allowed devType values are: vfio-pci or netdevice"
            return self
        self._spec["deviceType"] = dev_type
        return self

    def with_vf_range(self, first_vf: int, last_vf: int) -> "PolicyBuilder":
        """Restrict every physical function to the given virtual function range."""
        if not self._is_valid():
            return self
        if first_vf > last_vf:
            self._error_msg = "firstPF argument can not be greater than lastPF"
        if last_vf > 63:
            self._error_msg = "lastVF can not be greater than 63"
        if self._error_msg:
            return self
        nic_selector = self._spec.setdefault("nicSelector", {})
        nic_selector["pfNames"] = [
            f"{pf}#{first_vf}-{last_vf}" for pf in nic_selector.get("pfNames") or ()
        ]
        return self

    def with_mtu(self, mtu: int) -> "PolicyBuilder":
        """Set the MTU, which must lie in 1...9192."""
        if not self._is_valid():
            return self
        if not 1 <= mtu <= 9192:
            self._error_msg = f"invalid mtu size {mtu} allowed mtu should be in range 1...9192"
        if self._error_msg:
            return self
        self._spec["mtu"] = mtu
        return self

    def with_rdma(self, rdma: bool) -> "PolicyBuilder":
        """Set RDMA mode."""
        if not self._is_valid():
            return self
        self._spec["isRdma"] = bool(rdma)
        return self

    def with_vhost_net(self, vhost: bool) -> "PolicyBuilder":
        """Set whether vhost-net is needed."""
        if not self._is_valid():
            return self
        log.debug("Redefining SriovNetworkNodePolicy %s with NeedVhostNet: %s", self._name, vhost)
        self._spec["needVhostNet"] = bool(vhost)
        return self

    def with_externally_created(self, externally_created: bool) -> "PolicyBuilder":
        """Set whether the virtual functions are created outside the operator."""
        if not self._is_valid():
            return self
        log.debug(
            "Redefining SriovNetworkNodePolicy %s with externallyCreated: %s",
            self._name,
            externally_created,
        )
        self._spec["externallyCreated"] = bool(externally_created)
        return self


def pull_policy(api_client: Any, name: str, nsname: str) -> PolicyBuilder:
    """Load an existing policy; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "sriovnetworknodepolicy 'name' cannot be empty"
    if not nsname:
        error_msg = "sriovnetworknodepolicy 'namespace' cannot be empty"
    builder = PolicyBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(
        f"sriovnetworknodepolicy object {name} doesn't exist in namespace {nsname}"
    )


def list_policy(
    api_client: Any, nsname: str, options: Mapping[str, Any] | None = None
) -> list[PolicyBuilder]:
    """Return builders for the policies in a namespace."""
    log.debug("Listing SriovNetworkNodePolicies in the namespace %s with the options %s", nsname, options)
    if not nsname:
        raise ValueError("failed to list SriovNetworkNodePolicies, 'nsname' parameter is empty")
    builders = []
    for item in api_client.list(PolicyBuilder.resource, nsname, options):
        builder = PolicyBuilder._from_definition(api_client, item)
        builder.object = item
        builders.append(builder)
    return builders


def clean_all_network_node_policies(
    api_client: Any, operator_nsname: str, options: Mapping[str, Any] | None = None
) -> None:
    """Delete every policy in the operator namespace except the default one."""
    log.debug("Cleaning up SriovNetworkNodePolicies in the %s namespace", operator_nsname)
    if not operator_nsname:
        raise ValueError(
            "failed to clean up SriovNetworkNodePolicies, 'operatornsname' parameter is empty"
        )
    for policy in list_policy(api_client, operator_nsname, options):
        if policy.object["metadata"]["name"] != DEFAULT_POLICY_NAME:
            policy.delete()