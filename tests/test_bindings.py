import pytest

from ecoinfra.api import BuilderError, InMemoryClient, NotFoundError
from ecoinfra.bindings import (
    ClusterRoleBindingBuilder,
    RoleBindingBuilder,
    pull_cluster_role_binding,
    pull_role_binding,
)

SA = {"kind": "ServiceAccount", "name": "sa1", "namespace": "ns1"}
USER = {"kind": "User", "name": "alice"}


@pytest.fixture
def client():
    return InMemoryClient()


def test_cluster_role_binding_create_stores_definition(client):
    builder = ClusterRoleBindingBuilder(client, "crb", "admin", SA).create()
    stored = client.get("clusterrolebindings", "crb")
    assert stored["roleRef"] == {
        "apiGroup": "rbac.authorization.k8s.io",
        "name": "admin",
        "kind": "ClusterRole",
    }
    assert stored["subjects"] == [SA]
    assert builder.object == stored


def test_cluster_role_binding_with_subjects_appends(client):
    builder = ClusterRoleBindingBuilder(client, "crb", "admin", SA).with_subjects([USER])
    assert builder.definition["subjects"] == [SA, USER]


def test_cluster_role_binding_empty_name_keeps_subject_but_fails(client):
    builder = ClusterRoleBindingBuilder(client, "", "admin", SA)
    assert builder.definition["subjects"] == [SA]
    with pytest.raises(BuilderError, match="clusterrolebinding 'name' cannot be empty"):
        builder.create()


def test_cluster_role_binding_bad_kind(client):
    builder = ClusterRoleBindingBuilder(client, "crb", "admin", {"kind": "Pod", "name": "x"})
    with pytest.raises(BuilderError, match="subject kind must be one of"):
        builder.create()
    assert "subjects" not in builder.definition


def test_cluster_role_binding_empty_subject_name(client):
    builder = ClusterRoleBindingBuilder(client, "crb", "admin", {"kind": "User", "name": ""})
    with pytest.raises(BuilderError, match="clusterrolebinding subject name cannot be empty"):
        builder.create()


def test_cluster_role_binding_empty_subject_list(client):
    builder = ClusterRoleBindingBuilder(client, "crb", "admin", SA).with_subjects([])
    with pytest.raises(BuilderError, match="cannot accept nil or empty slice as subjects"):
        builder.update()


def test_cluster_role_binding_nil_client():
    builder = ClusterRoleBindingBuilder(None, "crb", "admin", SA)
    assert builder.exists() is False
    with pytest.raises(BuilderError, match="ClusterRoleBinding builder cannot have nil apiClient"):
        builder.create()


def test_pull_cluster_role_binding_round_trip(client):
    ClusterRoleBindingBuilder(client, "crb", "admin", SA).create()
    pulled = pull_cluster_role_binding(client, "crb")
    assert pulled.definition["subjects"] == [SA]
    assert pulled.definition["roleRef"]["name"] == "admin"


def test_pull_cluster_role_binding_missing(client):
    with pytest.raises(NotFoundError, match="clusterrolebinding object nope doesn't exist"):
        pull_cluster_role_binding(client, "nope")


def test_cluster_role_binding_delete(client):
    builder = ClusterRoleBindingBuilder(client, "crb", "admin", SA).create()
    builder.delete()
    assert builder.object is None
    assert builder.exists() is False


def test_role_binding_create_and_pull(client):
    RoleBindingBuilder(client, "rb", "ns1", "reader", USER).create()
    pulled = pull_role_binding(client, "rb", "ns1")
    assert pulled.definition["roleRef"] == {
        "apiGroup": "rbac.authorization.k8s.io",
        "name": "reader",
        "kind": "Role",
    }
    assert pulled.definition["subjects"] == [USER]


def test_role_binding_empty_namespace_skips_subjects(client):
    builder = RoleBindingBuilder(client, "rb", "", "reader", USER)
    assert "subjects" not in builder.definition
    with pytest.raises(BuilderError, match="RoleBinding 'nsname' cannot be empty"):
        builder.create()


def test_role_binding_bad_kind(client):
    builder = RoleBindingBuilder(client, "rb", "ns1", "reader", {"kind": "Node", "name": "n"})
    with pytest.raises(
        BuilderError,
        match="rolebinding subject kind must be one of 'ServiceAccount', 'User', 'Group'",
    ):
        builder.create()


def test_role_binding_empty_subject_list(client):
    builder = RoleBindingBuilder(client, "rb", "ns1", "reader", USER).with_subjects([])
    with pytest.raises(BuilderError, match="cannot create rolebinding with empty subject"):
        builder.create()


def test_role_binding_update_persists_new_subjects(client):
    builder = RoleBindingBuilder(client, "rb", "ns1", "reader", USER).create()
    builder.with_subjects([SA]).update()
    assert client.get("rolebindings", "rb", "ns1")["subjects"] == [USER, SA]


def test_pull_role_binding_missing(client):
    with pytest.raises(NotFoundError, match="rolebinding object rb doesn't exist in namespace ns1"):
        pull_role_binding(client, "rb", "ns1")


def test_pull_role_binding_empty_name(client):
    RoleBindingBuilder(client, "rb", "ns1", "reader", USER).create()
    with pytest.raises(NotFoundError):
        pull_role_binding(client, "", "ns1")


def test_role_binding_option_error_recorded(client):
    def failing(builder):
        raise ValueError("option failed")

    builder = RoleBindingBuilder(client, "rb", "ns1", "reader", USER).with_options(failing)
    with pytest.raises(BuilderError, match="option failed"):
        builder.create()


def test_role_binding_delete(client):
    builder = RoleBindingBuilder(client, "rb", "ns1", "reader", USER).create()
    builder.delete()
    with pytest.raises(NotFoundError):
        client.get("rolebindings", "rb", "ns1")