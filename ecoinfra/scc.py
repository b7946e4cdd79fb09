"""Builder for security context constraints."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from ecoinfra.api import ResourceBuilder

log = logging.getLogger(__name__)


class SecurityContextConstraintsBuilder(ResourceBuilder):
    """Defines security context constraints and keeps them in step with the cluster."""

    kind = "SecurityContextConstraints"
    resource = "securitycontextconstraints"
    namespaced = False

    def __init__(self, api_client: Any, name: str, run_as_user: str, selinux_context: str) -> None:
        super().__init__(
            api_client,
            {
                "metadata": {"name": name},
                "runAsUser": {"type": run_as_user},
                "seLinuxContext": {"type": selinux_context},
            },
        )
        if not name:
            log.debug("The name of the SecurityContextConstraints is empty")
            self._error_msg = "SecurityContextConstraints 'name' cannot be empty"
        if not run_as_user:
            log.debug("The runAsUser of the SecurityContextConstraints is empty")
            self._error_msg = "SecurityContextConstraints 'runAsUser' cannot be empty"
        if not selinux_context:
            log.debug("The selinuxContext of the SecurityContextConstraints is empty")
            self._error_msg = "SecurityContextConstraints 'selinuxContext' cannot be empty"

    def _append_list(self, key: str, values: Iterable[str] | None, label: str):
        if not self._is_valid():
            return self
        values = list(values or ())
        log.debug("Redefining SecurityContextConstraints %s with %s: %s", self._name, label, values)
        if not values:
            self._error_msg = f"SecurityContextConstraints '{label}' cannot be empty list"
            return self
        existing = self.definition.get(key)
        if existing is None:
            self.definition[key] = values
        else:
            existing.extend(values)
        return self

    def _set_strategy(self, key: str, value: str, label: str):
        if not self._is_valid():
            return self
        log.debug("Redefining SecurityContextConstraints %s with %s: %s", self._name, label, value)
        if not value:
            self._error_msg = f"SecurityContextConstraints '{label}' cannot be empty string"
            return self
        self.definition.setdefault(key, {})["type"] = value
        return self

    def with_privileged_container(self, allow_privileged: bool) -> "SecurityContextConstraintsBuilder":
        """Set whether privileged containers are allowed."""
        if not self._is_valid():
            return self
        self.definition["allowPrivilegedContainer"] = bool(allow_privileged)
        return self

    def with_privileged_escalation(
        self, allow_privileged_escalation: bool
    ) -> "SecurityContextConstraintsBuilder":
        """Set whether privilege escalation is allowed by default."""
        if not self._is_valid():
            return self
        self.definition["defaultAllowPrivilegeEscalation"] = bool(allow_privileged_escalation)
        return self

    def with_drop_capabilities(self, capabilities: Iterable[str]) -> "SecurityContextConstraintsBuilder":
        """Append capabilities that must be dropped."""
        return self._append_list("requiredDropCapabilities", capabilities, "requiredDropCapabilities")

    def with_allow_capabilities(self, capabilities: Iterable[str]) -> "SecurityContextConstraintsBuilder":
        """Append capabilities that may be added."""
        return self._append_list("allowedCapabilities", capabilities, "allowCapabilities")

    def with_fs_group(self, fs_group: str) -> "SecurityContextConstraintsBuilder":
        """Set the fsGroup strategy type."""
        return self._set_strategy("fsGroup", fs_group, "fsGroup")

    def with_seccomp_profiles(self, seccomp_profiles: Iterable[str]) -> "SecurityContextConstraintsBuilder":
        """Append allowed seccomp profiles."""
        return self._append_list("seccompProfiles", seccomp_profiles, "seccompProfiles")

    def with_supplemental_groups(self, supplemental_groups_type: str) -> "SecurityContextConstraintsBuilder":
        """Set the supplemental groups strategy type."""
        return self._set_strategy("supplementalGroups", supplemental_groups_type, "SupplementalGroups")

    def with_users(self, users: Iterable[str]) -> "SecurityContextConstraintsBuilder":
        """Append users granted these constraints."""
        return self._append_list("users", users, "users")


def pull(api_client: Any, name: str) -> SecurityContextConstraintsBuilder:
    """Load existing security context constraints; raise NotFoundError if absent."""
    error_msg = "SecurityContextConstraints 'name' cannot be empty" if not name else ""
    builder = SecurityContextConstraintsBuilder._from_definition(
        api_client, {"metadata": {"name": name}}, error_msg
    )
    return builder._pull_existing(f"SecurityContextConstraints object {name} doesn't exist")