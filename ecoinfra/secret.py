"""Builder for secrets."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ecoinfra.api import ResourceBuilder

log = logging.getLogger(__name__)


class SecretBuilder(ResourceBuilder):
    """Defines a secret and keeps it in step with the cluster."""

    kind = "Secret"
    resource = "secrets"

    def __init__(self, api_client: Any, name: str, nsname: str, secret_type: str) -> None:
        super().__init__(
            api_client,
            {"metadata": {"name": name, "namespace": nsname}, "type": secret_type},
        )
        if not name:
            self._error_msg = "secret 'name' cannot be empty"
        if not nsname:
            self._error_msg = "secret 'nsname' cannot be empty"

    def with_data(self, data: Mapping[str, bytes]) -> "SecretBuilder":
        """Set the data held by the secret."""
        if not self._is_valid():
            return self
        log.debug("Setting data of secret %s in namespace %s", self._name, self._namespace)
        if not data:
            self._error_msg = "'data' cannot be empty"
        if self._error_msg:
            return self
        self.definition["data"] = dict(data)
        return self


def pull(api_client: Any, name: str, nsname: str) -> SecretBuilder:
    """Load an existing secret; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "secret 'name' cannot be empty"
    if not nsname:
        error_msg = "secret 'namespace' cannot be empty"
    builder = SecretBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(f"secret object {name} doesn't exist in namespace {nsname}")