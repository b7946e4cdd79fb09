# ecoinfra

Fluent builders for cluster resources: roles and cluster roles, role
bindings, service accounts, secrets, services, stateful sets, security
context constraints, the cluster proxy, persistent volumes and claims, and
SR-IOV policies, networks and node states.

Each builder holds a `definition` (the object you want, as a plain
dictionary) and an `object` (the one last read back from the client). It
talks to the cluster through a client object passed as `api_client`. The
package ships `ecoinfra.api.InMemoryClient`, which keeps objects in memory
and is useful for tests and dry runs.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Concepts

- **Builders** derive from `ecoinfra.api.ResourceBuilder` and share
  `exists()`, `create()`, `update()`, `delete()` and `with_options(...)`.
  `create()` does nothing if the object already exists; `delete()` does
  nothing if it does not.
- **`with_*` methods** change the definition and return the builder, so calls
  can be chained. An invalid argument is recorded on the builder rather than
  raised. It is raised as `BuilderError` (a `ValueError`) on the next
  `create()`, `update()` or `delete()`; `exists()` simply returns `False`, and
  further `with_*` calls leave the builder unchanged.
- **`with_options(*callables)`** calls each callable with the builder. An
  exception from one is recorded as the builder's error and stops the rest.
- **`pull` functions** load an existing object and return a builder whose
  definition is that object. They raise `NotFoundError` when the object is
  absent or the name or namespace given is empty.
- **`list_*` functions** return one builder per object in a namespace and
  raise `ValueError` for an empty namespace. Their `options` may hold a
  `labelSelector` such as `"app=web,tier"`.
- **Errors**: `ApiError` is raised by a client for a failed request;
  `NotFoundError`, its subclass, when the object does not exist.
- **`GroupVersionResource`** values are returned by
  `service.get_service_gvr()`, `statefulset.get_gvr()` and
  `sriov_network.get_sriov_networks_gvr()`.

## Example

```python
from ecoinfra import secret, service
from ecoinfra.api import InMemoryClient
from ecoinfra.secret import SecretBuilder
from ecoinfra.service import ServiceBuilder, define_service_port

client = InMemoryClient()

SecretBuilder(client, "app-credentials", "demo", "Opaque") \
    .with_data({"token": b"token"}) \
    .create()

pulled = secret.pull(client, "app-credentials", "demo")
print(pulled.definition["data"])

port = define_service_port(8080, 8080, "TCP")
ServiceBuilder(client, "web", "demo", {"app": "web"}, port) \
    .with_node_port() \
    .create()

service.pull(client, "web", "demo").delete()
```

`InMemoryClient` can be seeded with `(resource, object)` pairs, for example
`InMemoryClient([("persistentvolumes", {"metadata": {"name": "pv0"}})])`.
Each builder class names its resource in its `resource` attribute.

### RBAC

```python
from ecoinfra.roles import RoleBuilder, ClusterRoleBuilder
from ecoinfra.bindings import RoleBindingBuilder

rule = {"apiGroups": [""], "resources": ["pods"], "verbs": ["get", "list"]}
RoleBuilder(client, "pod-reader", "demo", rule).create()

subject = {"kind": "ServiceAccount", "name": "reader", "namespace": "demo"}
RoleBindingBuilder(client, "pod-reader", "demo", "pod-reader", subject).create()
```

Every rule needs `apiGroups`, `verbs` and `resources`. Subject kinds must be
one of `ServiceAccount`, `User` or `Group`, and subjects need a name.

### Security context constraints and stateful sets

`SecurityContextConstraintsBuilder` sets privileged containers and
escalation, drop and allowed capabilities, the fsGroup and supplemental
groups strategies, seccomp profiles and users.
`StatefulSetBuilder.is_ready(timeout)` polls once a second until every
replica is ready and returns `False` when the timeout (seconds or a
`timedelta`) passes.

### SR-IOV

```python
from ecoinfra.sriov_policy import PolicyBuilder, clean_all_network_node_policies
from ecoinfra.sriov_network import NetworkBuilder

PolicyBuilder(client, "policy", "sriov-op", "resA", 4, ["ens1f0"],
              {"node-role/worker": ""}) \
    .with_dev_type("netdevice").with_mtu(1500).create()

NetworkBuilder(client, "net", "sriov-op", "demo", "resA") \
    .with_vlan(100).with_spoof(True).with_static_ipam().create()

clean_all_network_node_policies(client, "sriov-op", {})
```

`clean_all_network_node_policies` keeps the policy named `default`;
`clean_all_networks_by_target_namespace` deletes networks whose
`networkNamespace` matches. `NetworkBuilder.update(force=True)` deletes and
recreates the network if the update fails. Note that `with_min_tx_rate`
writes the `maxTxRate` field.

`NetworkNodeStateBuilder` reads one node's state: `get_nics()`,
`get_up_nics()` (link speed set and not `-1 Mb/s`), `get_num_vfs(name)`
(raises `LookupError` for an unknown interface) and
`wait_until_sync_status(status, timeout)` (raises `TimeoutError`).

## Using a real cluster

Any object with the methods `get`, `list`, `create`, `update` and `delete`
can be passed as `api_client`, taking the same arguments as those of
`InMemoryClient`. A missing object must raise `NotFoundError`.

## What this package does not do

It has no client for a real API server: it does not read kubeconfig files
or make network requests. You supply such a client yourself. It has no
command-line tool.