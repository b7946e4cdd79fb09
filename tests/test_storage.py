import pytest

from ecoinfra.api import InMemoryClient, NotFoundError
from ecoinfra.storage import pull_persistent_volume, pull_persistent_volume_claim


def _pv(name="pv1"):
    return {"metadata": {"name": name}, "spec": {"capacity": {"storage": "1Gi"}}}


def _pvc(name="claim", namespace="ns"):
    return {"metadata": {"name": name, "namespace": namespace}, "spec": {"volumeName": "pv1"}}


def test_pull_persistent_volume_loads_definition():
    client = InMemoryClient([("persistentvolumes", _pv())])
    builder = pull_persistent_volume(client, "pv1")
    assert builder.definition == _pv()
    assert builder.object == _pv()


def test_pull_missing_persistent_volume():
    with pytest.raises(NotFoundError, match="PersistentVolume object pv1 doesn't exist"):
        pull_persistent_volume(InMemoryClient(), "pv1")


def test_persistent_volume_exists_follows_client():
    client = InMemoryClient([("persistentvolumes", _pv())])
    builder = pull_persistent_volume(client, "pv1")
    client.delete("persistentvolumes", "pv1")
    assert builder.exists() is False
    assert builder.object is None


def test_pull_persistent_volume_claim():
    client = InMemoryClient([("persistentvolumeclaims", _pvc())])
    builder = pull_persistent_volume_claim(client, "claim", "ns")
    assert builder.definition == _pvc()
    assert builder.exists() is True


def test_pull_claim_from_other_namespace_fails():
    client = InMemoryClient([("persistentvolumeclaims", _pvc())])
    with pytest.raises(
        NotFoundError, match="PersistentVolumeClaim object claim doesn't exist in namespace other"
    ):
        pull_persistent_volume_claim(client, "claim", "other")


def test_pull_with_no_client_fails():
    with pytest.raises(NotFoundError):
        pull_persistent_volume(None, "pv1")