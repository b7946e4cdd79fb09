import pytest

from ecoinfra.api import BuilderError, InMemoryClient, NotFoundError
from ecoinfra.roles import ClusterRoleBuilder, RoleBuilder, pull_cluster_role, pull_role


def make_rule(**overrides):
    rule = {"apiGroups": [""], "verbs": ["get"], "resources": ["pods"]}
    rule.update(overrides)
    return rule


@pytest.fixture
def client():
    return InMemoryClient()


def test_cluster_role_definition_holds_rule_and_name(client):
    builder = ClusterRoleBuilder(client, "reader", make_rule())
    assert builder.definition["metadata"]["name"] == "reader"
    assert builder.definition["rules"] == [make_rule(), make_rule()]


def test_cluster_role_create_and_pull(client):
    ClusterRoleBuilder(client, "reader", make_rule()).create()
    pulled = pull_cluster_role(client, "reader")
    assert pulled.definition["metadata"]["name"] == "reader"
    assert pulled.exists() is True


def test_cluster_role_empty_name_fails_on_create(client):
    builder = ClusterRoleBuilder(client, "", make_rule())
    with pytest.raises(BuilderError, match="clusterrole 'name' cannot be empty"):
        builder.create()


@pytest.mark.parametrize(
    "rule, message",
    [
        (make_rule(apiGroups=[]), "clusterrole rule must contain at least one APIGroup entry"),
        (make_rule(verbs=[]), "clusterrole rule must contain at least one Verb entry"),
        (make_rule(resources=[]), "clusterrole rule must contain at least one Resource entry"),
        ({"apiGroups": [], "verbs": [], "resources": []}, "clusterrole rule must contain at least one Resource entry"),
    ],
)
def test_cluster_role_rule_validation(client, rule, message):
    builder = ClusterRoleBuilder(client, "reader", rule)
    with pytest.raises(BuilderError, match=message):
        builder.create()


def test_cluster_role_with_empty_rules(client):
    builder = ClusterRoleBuilder(client, "reader", make_rule()).with_rules([])
    with pytest.raises(BuilderError, match="cannot accept nil or empty slice as rules"):
        builder.create()


def test_cluster_role_with_rules_appends(client):
    extra = make_rule(verbs=["list"])
    builder = ClusterRoleBuilder(client, "reader", make_rule()).with_rules([extra])
    assert builder.definition["rules"][-1] == extra


def test_cluster_role_delete(client):
    builder = ClusterRoleBuilder(client, "reader", make_rule()).create()
    builder.delete()
    assert builder.object is None
    assert builder.exists() is False


def test_pull_missing_cluster_role(client):
    with pytest.raises(NotFoundError, match="clusterrole object ghost doesn't exist"):
        pull_cluster_role(client, "ghost")


def test_role_create_update_and_pull(client):
    builder = RoleBuilder(client, "reader", "ns1", make_rule()).create()
    builder.with_rules([make_rule(verbs=["watch"])]).update()
    pulled = pull_role(client, "reader", "ns1")
    assert pulled.definition["rules"] == builder.definition["rules"]
    assert pulled.definition["metadata"]["namespace"] == "ns1"


def test_role_definition_has_single_rule(client):
    builder = RoleBuilder(client, "reader", "ns1", make_rule())
    assert builder.definition["rules"] == [make_rule()]


@pytest.mark.parametrize(
    "name, nsname, message",
    [
        ("", "ns1", "Role 'name' cannot be empty"),
        ("reader", "", "Role 'nsname' cannot be empty"),
    ],
)
def test_role_empty_identifiers(client, name, nsname, message):
    builder = RoleBuilder(client, name, nsname, make_rule())
    assert "rules" not in builder.definition
    with pytest.raises(BuilderError, match=message):
        builder.create()


@pytest.mark.parametrize(
    "rule, message",
    [
        (make_rule(verbs=[]), "role must contain at least one Verb"),
        (make_rule(resources=[]), "role must contain at least one Resource"),
        (make_rule(apiGroups=[]), "role must contain at least one APIGroup"),
        ({"apiGroups": [], "verbs": [], "resources": []}, "role must contain at least one APIGroup"),
    ],
)
def test_role_rule_validation(client, rule, message):
    builder = RoleBuilder(client, "reader", "ns1", rule)
    with pytest.raises(BuilderError, match=message):
        builder.delete()


def test_role_with_empty_rules(client):
    builder = RoleBuilder(client, "reader", "ns1", make_rule()).with_rules([])
    with pytest.raises(BuilderError, match="cannot create role with empty rule"):
        builder.update()


def test_role_with_options_records_error(client):
    def failing(_builder):
        raise ValueError("option failed")

    builder = RoleBuilder(client, "reader", "ns1", make_rule()).with_options(failing)
    with pytest.raises(BuilderError, match="option failed"):
        builder.create()


def test_pull_role_missing(client):
    with pytest.raises(NotFoundError, match="role object ghost doesn't exist in namespace ns1"):
        pull_role(client, "ghost", "ns1")


def test_pull_role_empty_namespace(client):
    RoleBuilder(client, "reader", "ns1", make_rule()).create()
    with pytest.raises(NotFoundError, match="doesn't exist in namespace"):
        pull_role(client, "reader", "")