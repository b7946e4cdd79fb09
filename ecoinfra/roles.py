"""Builders for cluster roles and namespaced roles."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ecoinfra.api import ResourceBuilder

log = logging.getLogger(__name__)

_API_GROUPS = "apiGroups"
_VERBS = "verbs"
_RESOURCES = "resources"


def _copy_rule(rule: Mapping[str, Any]) -> dict[str, Any]:
    return {key: list(value) if isinstance(value, (list, tuple)) else value for key, value in rule.items()}


class ClusterRoleBuilder(ResourceBuilder):
    """Defines a cluster role and keeps it in step with the cluster."""

    kind = "ClusterRole"
    resource = "clusterroles"
    namespaced = False

    def __init__(self, api_client: Any, name: str, rule: Mapping[str, Any]) -> None:
        super().__init__(
            api_client,
            {"metadata": {"name": name}, "rules": [_copy_rule(rule)]},
        )
        if not name:
            log.debug("The name of the clusterrole is empty")
            self._error_msg = "clusterrole 'name' cannot be empty"
        self.with_rules([rule])

    def with_rules(self, rules: Iterable[Mapping[str, Any]]) -> "ClusterRoleBuilder":
        """Append rules to the definition; each needs API groups, verbs and resources."""
        if not self._is_valid():
            return self
        rules = [_copy_rule(rule) for rule in rules or ()]
        log.debug("Appending rules %s to clusterrole %s", rules, self._name)
        if not rules:
            self._error_msg = "cannot accept nil or empty slice as rules"
        if self._error_msg:
            return self
        for rule in rules:
            if not rule.get(_API_GROUPS):
                self._error_msg = "clusterrole rule must contain at least one APIGroup entry"
            if not rule.get(_VERBS):
                self._error_msg = "clusterrole rule must contain at least one Verb entry"
            if not rule.get(_RESOURCES):
                self._error_msg = "clusterrole rule must contain at least one Resource entry"
            if self._error_msg:
                return self
        existing = self.definition.get("rules")
        if existing is None:
            self.definition["rules"] = rules
        else:
            existing.extend(rules)
        return self


class RoleBuilder(ResourceBuilder):
    """Defines a namespaced role and keeps it in step with the cluster."""

    kind = "Role"
    resource = "roles"

    def __init__(self, api_client: Any, name: str, nsname: str, rule: Mapping[str, Any]) -> None:
        super().__init__(api_client, {"metadata": {"name": name, "namespace": nsname}})
        if not name:
            log.debug("The name of the role is empty")
            self._error_msg = "Role 'name' cannot be empty"
        if not nsname:
            log.debug("The namespace of the role is empty")
            self._error_msg = "Role 'nsname' cannot be empty"
        self.with_rules([rule])

    def with_rules(self, rules: Iterable[Mapping[str, Any]]) -> "RoleBuilder":
        """Add rules to the role; each needs verbs, resources and API groups."""
        if not self._is_valid():
            return self
        rules = [_copy_rule(rule) for rule in rules or ()]
        log.debug("Adding rules %s to role %s", rules, self._name)
        if not rules:
            self._error_msg = "cannot create role with empty rule"
        if self._error_msg:
            return self
        for rule in rules:
            if not rule.get(_VERBS):
                self._error_msg = "role must contain at least one Verb"
            if not rule.get(_RESOURCES):
                self._error_msg = "role must contain at least one Resource"
            if not rule.get(_API_GROUPS):
                self._error_msg = "role must contain at least one APIGroup"
            if self._error_msg:
                return self
        existing = self.definition.get("rules")
        if existing is None:
            self.definition["rules"] = rules
        else:
            existing.extend(rules)
        return self


def pull_cluster_role(api_client: Any, name: str) -> ClusterRoleBuilder:
    """Load an existing cluster role; raise NotFoundError if it is absent."""
    error_msg = "clusterrole 'name' cannot be empty" if not name else ""
    builder = ClusterRoleBuilder._from_definition(api_client, {"metadata": {"name": name}}, error_msg)
    return builder._pull_existing(f"clusterrole object {name} doesn't exist")


def pull_role(api_client: Any, name: str, nsname: str) -> RoleBuilder:
    """Load an existing role; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "role 'name' cannot be empty"
    if not nsname:
        error_msg = "role 'namespace' cannot be empty"
    builder = RoleBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(f"role object {name} doesn't exist in namespace {nsname}")