import pytest

from ecoinfra.api import BuilderError, InMemoryClient, NotFoundError
from ecoinfra.secret import SecretBuilder, pull


def test_new_builder_definition():
    builder = SecretBuilder(InMemoryClient(), "creds", "ns", "Opaque")
    assert builder.definition["metadata"] == {"name": "creds", "namespace": "ns"}
    assert builder.definition["type"] == "Opaque"


def test_create_with_data_round_trip():
    client = InMemoryClient()
    data = {"token": b"token"}
    SecretBuilder(client, "creds", "ns", "Opaque").with_data(data).create()
    stored = client.get("secrets", "creds", "ns")
    assert stored["data"] == data
    assert stored["type"] == "Opaque"


def test_empty_data_is_rejected():
    client = InMemoryClient()
    builder = SecretBuilder(client, "creds", "ns", "Opaque").with_data({})
    with pytest.raises(BuilderError, match="'data' cannot be empty"):
        builder.create()
    assert client.list("secrets", "ns") == []


def test_empty_name_is_rejected():
    builder = SecretBuilder(InMemoryClient(), "", "ns", "Opaque")
    with pytest.raises(BuilderError, match="secret 'name' cannot be empty"):
        builder.create()


def test_empty_namespace_message_wins():
    builder = SecretBuilder(InMemoryClient(), "", "", "Opaque")
    with pytest.raises(BuilderError, match="secret 'nsname' cannot be empty"):
        builder.create()


def test_with_data_on_invalid_builder_leaves_definition():
    builder = SecretBuilder(InMemoryClient(), "", "ns", "Opaque").with_data({"token": b"token"})
    assert "data" not in builder.definition


def test_pull_existing_secret():
    client = InMemoryClient()
    SecretBuilder(client, "creds", "ns", "Opaque").with_data({"token": b"token"}).create()
    pulled = pull(client, "creds", "ns")
    assert pulled.definition["data"] == {"token": b"token"}
    assert pulled.definition == pulled.object


def test_pull_missing_secret():
    with pytest.raises(NotFoundError, match="secret object creds doesn't exist in namespace ns"):
        pull(InMemoryClient(), "creds", "ns")


def test_pull_with_empty_name_fails():
    with pytest.raises(NotFoundError):
        pull(InMemoryClient(), "", "ns")


def test_delete_removes_secret():
    client = InMemoryClient()
    builder = SecretBuilder(client, "creds", "ns", "Opaque").with_data({"token": b"token"}).create()
    builder.delete()
    assert builder.object is None
    assert builder.exists() is False