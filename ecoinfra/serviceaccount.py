"""Builder for service accounts."""

from __future__ import annotations

import logging
from typing import Any

from ecoinfra.api import ResourceBuilder

log = logging.getLogger(__name__)


class ServiceAccountBuilder(ResourceBuilder):
    """Defines a service account and keeps it in step with the cluster."""

    kind = "ServiceAccount"
    resource = "serviceaccounts"

    def __init__(self, api_client: Any, name: str, nsname: str) -> None:
        super().__init__(api_client, {"metadata": {"name": name, "namespace": nsname}})
        if not name:
            log.debug("The name of the serviceaccount is empty")
            self._error_msg = "serviceaccount 'name' cannot be empty"
        if not nsname:
            log.debug("The namespace of the serviceaccount is empty")
            self._error_msg = "serviceaccount 'nsname' cannot be empty"


def pull(api_client: Any, name: str, nsname: str) -> ServiceAccountBuilder:
    """Load an existing service account; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "serviceaccount 'name' cannot be empty"
    if not nsname:
        error_msg = "serviceaccount 'namespace' cannot be empty"
    builder = ServiceAccountBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(
        f"serviceaccount object {name} doesn't exist in namespace {nsname}"
    )