"""Fluent builders for defining, pulling, creating and cleaning cluster resources."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "bindings",
    "proxy",
    "roles",
    "scc",
    "secret",
    "service",
    "serviceaccount",
    "sriov_network",
    "sriov_nodestate",
    "sriov_policy",
    "statefulset",
    "storage",
]