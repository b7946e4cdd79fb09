"""Builder for stateful sets."""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Iterable, Mapping

from ecoinfra.api import ApiError, GroupVersionResource, ResourceBuilder

log = logging.getLogger(__name__)

POLL_INTERVAL = 1.0


class StatefulSetBuilder(ResourceBuilder):
    """Defines a stateful set and keeps it in step with the cluster."""

    kind = "StatefulSet"
    resource = "statefulsets"

    def __init__(
        self,
        api_client: Any,
        name: str,
        nsname: str,
        labels: Mapping[str, str] | None,
        container_spec: Mapping[str, Any],
    ) -> None:
        label_copy = dict(labels) if labels is not None else None
        super().__init__(
            api_client,
            {
                "metadata": {"name": name, "namespace": nsname},
                "spec": {
                    "selector": {"matchLabels": label_copy},
                    "template": {
                        "metadata": {"labels": dict(label_copy) if label_copy is not None else None},
                        "spec": {},
                    },
                },
            },
        )
        self.with_additional_container_specs([container_spec])
        if not name:
            log.debug("The name of the statefulset is empty")
            self._error_msg = "statefulset 'name' cannot be empty"
        if not nsname:
            log.debug("The namespace of the statefulset is empty")
            self._error_msg = "statefulset 'namespace' cannot be empty"
        if labels is None:
            log.debug("There are no labels for the statefulset")
            self._error_msg = "statefulset 'labels' cannot be empty"

    @property
    def _pod_spec(self) -> dict[str, Any]:
        spec = self.definition.setdefault("spec", {})
        template = spec.setdefault("template", {})
        return template.setdefault("spec", {})

    def with_additional_container_specs(
        self, specs: Iterable[Mapping[str, Any]] | None
    ) -> "StatefulSetBuilder":
        """Append container specs to the pod template."""
        if not self._is_valid():
            return self
        log.debug("Appending container specs %s to statefulset %s", specs, self._name)
        if specs is None:
            log.debug("The container specs are empty")
            self._error_msg = "cannot accept nil or empty list as container specs"
        if self._error_msg:
            return self
        containers = [dict(spec) for spec in specs]
        pod_spec = self._pod_spec
        existing = pod_spec.get("containers")
        if existing is None:
            pod_spec["containers"] = containers
        else:
            existing.extend(containers)
        return self

    def is_ready(self, timeout: float | timedelta) -> bool:
        """Poll until every replica is ready or the timeout (seconds) passes."""
        if not self._is_valid():
            return False
        log.debug("Waiting until statefulset %s in namespace %s is ready", self._name, self._namespace)
        if not self.exists():
            return False
        seconds = timeout.total_seconds() if isinstance(timeout, timedelta) else float(timeout)
        deadline = time.monotonic() + seconds
        while True:
            try:
                self.object = self.api_client.get(self.resource, self._name, self._namespace)
            except ApiError:
                return False
            status = (self.object or {}).get("status") or {}
            ready = status.get("readyReplicas") or 0
            if ready > 0 and (status.get("replicas") or 0) == ready:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            time.sleep(min(POLL_INTERVAL, remaining))


def pull(api_client: Any, name: str, nsname: str) -> StatefulSetBuilder:
    """Load an existing stateful set; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "statefulset 'name' cannot be empty"
    if not nsname:
        error_msg = "statefulset 'namespace' cannot be empty"
    builder = StatefulSetBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(f"statefulset object {name} doesn't exist in namespace {nsname}")


def list_statefulsets(
    api_client: Any, nsname: str, options: Mapping[str, Any] | None = None
) -> list[StatefulSetBuilder]:
    """Return builders for the stateful sets in a namespace."""
    log.debug("Listing statefulsets in the namespace %s with the options %s", nsname, options)
    if not nsname:
        raise ValueError("failed to list statefulsets, 'nsname' parameter is empty")
    builders = []
    for item in api_client.list(StatefulSetBuilder.resource, nsname, options):
        builder = StatefulSetBuilder._from_definition(api_client, item)
        builder.object = item
        builders.append(builder)
    return builders


def get_gvr() -> GroupVersionResource:
    """Return the group, version and resource of stateful sets."""
    return GroupVersionResource(group="apps", version="v1", resource="statefulsets")