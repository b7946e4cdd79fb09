"""Shared pieces for resource builders: errors, an in-memory API client and the builder base."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterable, Mapping

log = logging.getLogger(__name__)


class ApiError(Exception):
    """An API request failed."""


class NotFoundError(ApiError):
    """The requested object does not exist."""


class BuilderError(ValueError):
    """A builder was used while its definition is invalid or incomplete."""


@dataclass(frozen=True)
class GroupVersionResource:
    """Identifies a kind of resource by API group, version and plural name."""

    group: str
    version: str
    resource: str


def _identity(obj: Mapping[str, Any]) -> tuple[str, str]:
    metadata = obj.get("metadata") or {}
    return metadata.get("name") or "", metadata.get("namespace") or ""


def _matches_selector(obj: Mapping[str, Any], options: Mapping[str, Any] | None) -> bool:
    selector = (options or {}).get("labelSelector") or ""
    labels = (obj.get("metadata") or {}).get("labels") or {}
    for term in (part.strip() for part in selector.split(",")):
        if not term:
            continue
        key, sep, value = term.partition("=")
        key = key.strip()
        if not sep:
            if key not in labels:
                return False
            continue
        if labels.get(key) != value.lstrip("=").strip():
            return False
    return True


class InMemoryClient:
    """An API client that keeps objects in memory, keyed by resource, namespace and name.

    Objects are plain dictionaries shaped like API objects, with a ``metadata``
    mapping holding ``name`` and, for namespaced resources, ``namespace``.
    Every object handed in or out is copied, as an API server would.
    """

    def __init__(self, objects: Iterable[tuple[str, Mapping[str, Any]]] = ()) -> None:
        self._store: dict[tuple[str, str, str], dict[str, Any]] = {}
        for resource, obj in objects:
            self.create(resource, obj)

    def get(self, resource: str, name: str, namespace: str | None = None) -> dict[str, Any]:
        """Return a copy of the named object or raise NotFoundError."""
        key = (resource, namespace or "", name)
        try:
            return copy.deepcopy(self._store[key])
        except KeyError:
            raise NotFoundError(f'{resource} "{name}" not found') from None

    def list(
        self,
        resource: str,
        namespace: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Return copies of the objects of a resource, optionally within one namespace."""
        found = [
            copy.deepcopy(obj)
            for (kind, ns, _), obj in sorted(self._store.items())
            if kind == resource and (not namespace or ns == namespace) and _matches_selector(obj, options)
        ]
        return found

    def create(self, resource: str, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Store a new object and return a copy of what was stored."""
        name, namespace = _identity(obj)
        if not name:
            raise ApiError(f"{resource}: metadata.name is required")
        key = (resource, namespace, name)
        if key in self._store:
            raise ApiError(f'{resource} "{name}" already exists')
        self._store[key] = copy.deepcopy(dict(obj))
        log.debug("created %s %s/%s", resource, namespace, name)
        return copy.deepcopy(self._store[key])

    def update(self, resource: str, obj: Mapping[str, Any]) -> dict[str, Any]:
        """Replace an existing object and return a copy of what was stored."""
        name, namespace = _identity(obj)
        key = (resource, namespace, name)
        if key not in self._store:
            raise NotFoundError(f'{resource} "{name}" not found')
        self._store[key] = copy.deepcopy(dict(obj))
        return copy.deepcopy(self._store[key])

    def delete(self, resource: str, name: str, namespace: str | None = None) -> None:
        """Remove the named object or raise NotFoundError."""
        key = (resource, namespace or "", name)
        if key not in self._store:
            raise NotFoundError(f'{resource} "{name}" not found')
        del self._store[key]


class ResourceBuilder:
    """Base for builders that define an object and keep it in step with the cluster.

    ``definition`` is the desired object, ``object`` the one last read back
    from the client. Mutating methods record a problem instead of raising;
    it is raised as BuilderError when the builder is next used against the
    client.
    """

    kind: ClassVar[str] = "Resource"
    resource: ClassVar[str] = ""
    namespaced: ClassVar[bool] = True

    def __init__(self, api_client: Any, definition: dict[str, Any] | None) -> None:
        self.api_client = api_client
        self.definition = definition
        self.object: dict[str, Any] | None = None
        self._error_msg = ""

    @classmethod
    def _from_definition(cls, api_client: Any, definition: dict[str, Any], error_msg: str = ""):
        builder = cls.__new__(cls)
        ResourceBuilder.__init__(builder, api_client, definition)
        builder._error_msg = error_msg
        return builder

    @property
    def _name(self) -> str:
        return self.definition["metadata"].get("name") or ""

    @property
    def _namespace(self) -> str | None:
        if not self.namespaced:
            return None
        return self.definition["metadata"].get("namespace")

    def _validate(self) -> None:
        if self.definition is None:
            self._error_msg = f"can not redefine the undefined {self.kind}"
        if self.api_client is None:
            self._error_msg = f"{self.kind} builder cannot have nil apiClient"
        if self._error_msg:
            log.debug("The %s builder has error message: %s", self.kind, self._error_msg)
            raise BuilderError(self._error_msg)

    def _is_valid(self) -> bool:
        try:
            self._validate()
        except BuilderError:
            return False
        return True

    def _pull_existing(self, missing_message: str):
        if not self.exists():
            raise NotFoundError(missing_message)
        self.definition = self.object
        return self

    def exists(self) -> bool:
        """Read the object back from the client and report whether it is there."""
        if not self._is_valid():
            return False
        try:
            self.object = self.api_client.get(self.resource, self._name, self._namespace)
        except NotFoundError:
            self.object = None
            return False
        except ApiError:
            self.object = None
            return True
        return True

    def create(self):
        """Create the object unless it already exists."""
        self._validate()
        if not self.exists():
            self.object = self.api_client.create(self.resource, self.definition)
        return self

    def update(self):
        """Replace the stored object with the definition."""
        self._validate()
        self.object = self.api_client.update(self.resource, self.definition)
        return self

    def delete(self) -> None:
        """Delete the object if it exists."""
        self._validate()
        if not self.exists():
            return
        self.api_client.delete(self.resource, self._name, self._namespace)
        self.object = None

    def with_options(self, *options: Callable[[Any], Any] | None):
        """Apply mutation callables to the builder; an exception from one is recorded."""
        if not self._is_valid():
            return self
        for option in options:
            if option is None:
                continue
            try:
                option(self)
            except Exception as exc:  # options are arbitrary callables
                log.debug("Error occurred in mutation function: %s", exc)
                self._error_msg = str(exc)
                return self
        return self