"""Builders for cluster role bindings and namespaced role bindings."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from ecoinfra.api import ResourceBuilder

log = logging.getLogger(__name__)

RBAC_API_GROUP = "rbac.authorization.k8s.io"
ALLOWED_SUBJECT_KINDS = ("ServiceAccount", "User", "Group")


def _copy_subjects(subjects: Iterable[Mapping[str, Any]] | None) -> list[dict[str, Any]]:
    return [dict(subject) for subject in subjects or ()]


def _subject_error(subjects: list[dict[str, Any]], kind_message: str, name_message: str) -> str:
    """Return the message for the first subject that is invalid, or an empty string."""
    for subject in subjects:
        error = ""
        if subject.get("kind") not in ALLOWED_SUBJECT_KINDS:
            error = kind_message
        if not subject.get("name"):
            error = name_message
        if error:
            return error
    return ""


class ClusterRoleBindingBuilder(ResourceBuilder):
    """Defines a cluster role binding and keeps it in step with the cluster."""

    kind = "ClusterRoleBinding"
    resource = "clusterrolebindings"
    namespaced = False

    def __init__(
        self, api_client: Any, name: str, cluster_role: str, subject: Mapping[str, Any]
    ) -> None:
        super().__init__(
            api_client,
            {
                "metadata": {"name": name},
                "roleRef": {"apiGroup": RBAC_API_GROUP, "name": cluster_role, "kind": "ClusterRole"},
            },
        )
        self.with_subjects([subject])
        if not name:
            log.debug("The name of the clusterrolebinding is empty")
            self._error_msg = "clusterrolebinding 'name' cannot be empty"

    def with_subjects(self, subjects: Iterable[Mapping[str, Any]]) -> "ClusterRoleBindingBuilder":
        """Append subjects; each needs an allowed kind and a name."""
        if not self._is_valid():
            return self
        subjects = _copy_subjects(subjects)
        log.debug("Appending subjects %s to clusterrolebinding %s", subjects, self._name)
        if not subjects:
            self._error_msg = "cannot accept nil or empty slice as subjects"
        if self._error_msg:
            return self
        error = _subject_error(
            subjects,
            "clusterrolebinding subject kind must be one of 'ServiceAccount', 'User', or 'Group'",
            "clusterrolebinding subject name cannot be empty",
        )
        if error:
            self._error_msg = error
            return self
        self.definition.setdefault("subjects", []).extend(subjects)
        return self


class RoleBindingBuilder(ResourceBuilder):
    """Defines a namespaced role binding and keeps it in step with the cluster."""

    kind = "RoleBinding"
    resource = "rolebindings"

    def __init__(
        self, api_client: Any, name: str, nsname: str, role: str, subject: Mapping[str, Any]
    ) -> None:
        super().__init__(
            api_client,
            {
                "metadata": {"name": name, "namespace": nsname},
                "roleRef": {"apiGroup": RBAC_API_GROUP, "name": role, "kind": "Role"},
            },
        )
        if not name:
            log.debug("The name of the rolebinding is empty")
            self._error_msg = "RoleBinding 'name' cannot be empty"
        if not nsname:
            log.debug("The namespace of the rolebinding is empty")
            self._error_msg = "RoleBinding 'nsname' cannot be empty"
        self.with_subjects([subject])

    def with_subjects(self, subjects: Iterable[Mapping[str, Any]]) -> "RoleBindingBuilder":
        """Add subjects; each needs an allowed kind and a name."""
        if not self._is_valid():
            return self
        subjects = _copy_subjects(subjects)
        log.debug("Adding subjects %s to rolebinding %s", subjects, self._name)
        if not subjects:
            self._error_msg = "cannot create rolebinding with empty subject"
        if self._error_msg:
            return self
        error = _subject_error(
            subjects,
            "rolebinding subject kind must be one of 'ServiceAccount', 'User', 'Group'",
            "rolebinding subject name cannot be empty",
        )
        if error:
            self._error_msg = error
            return self
        self.definition.setdefault("subjects", []).extend(subjects)
        return self


def pull_cluster_role_binding(api_client: Any, name: str) -> ClusterRoleBindingBuilder:
    """Load an existing cluster role binding; raise NotFoundError if it is absent."""
    error_msg = "clusterrolebinding 'name' cannot be empty" if not name else ""
    builder = ClusterRoleBindingBuilder._from_definition(
        api_client, {"metadata": {"name": name}}, error_msg
    )
    return builder._pull_existing(f"clusterrolebinding object {name} doesn't exist")


def pull_role_binding(api_client: Any, name: str, nsname: str) -> RoleBindingBuilder:
    """Load an existing role binding; raise NotFoundError if it is absent."""
    error_msg = ""
    if not name:
        error_msg = "rolebinding 'name' cannot be empty"
    if not nsname:
        error_msg = "rolebinding 'namespace' cannot be empty"
    builder = RoleBindingBuilder._from_definition(
        api_client, {"metadata": {"name": name, "namespace": nsname}}, error_msg
    )
    return builder._pull_existing(
        f"rolebinding object {name} doesn't exist in namespace {nsname}"
    )