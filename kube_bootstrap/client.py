"""Clients for creating resources in the API server."""

from abc import ABC, abstractmethod
import copy
from dataclasses import dataclass
import logging
from typing import Any

from .exceptions import AlreadyExistsError, ResourceClientException
from .mapping import ResourceMapping

__all__ = [
    "ResourceClient",
    "InMemoryResourceClient",
    "CreateCall",
]

_LOGGER = logging.getLogger(__name__)


class ResourceClient(ABC):
    """Client that creates objects for a resource endpoint."""

    @abstractmethod
    async def create(
        self,
        mapping: ResourceMapping,
        namespace: str | None,
        doc: dict[str, Any],
    ) -> dict[str, Any]:
        """Create the object and return the object stored by the server.

        The namespace is only set for namespaced resources.

        Raises:
            AlreadyExistsError: If an object with the same identity exists.
            ResourceClientException: If the server rejected the request.
        """


@dataclass(frozen=True)
class CreateCall:
    """A create request received by the InMemoryResourceClient."""

    resource: str
    namespace: str | None
    name: str


class InMemoryResourceClient(ResourceClient):
    """In-memory implementation of the ResourceClient interface.

    Objects are keyed by resource, namespace and name. Failures can be
    injected per object name with `fail`.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryResourceClient."""
        self._objects: dict[tuple[str, str | None, str], dict[str, Any]] = {}
        self._failures: dict[str, str] = {}
        self.calls: list[CreateCall] = []

    def add_object(
        self, mapping: ResourceMapping, namespace: str | None, doc: dict[str, Any]
    ) -> None:
        """Add an object as if it already existed in the cluster."""
        name = doc.get("metadata", {}).get("name", "")
        self._objects[(mapping.resource, namespace, name)] = copy.deepcopy(doc)

    def fail(self, name: str, message: str) -> None:
        """Reject any create request for objects with the name."""
        self._failures[name] = message

    def clear_failures(self) -> None:
        """Stop rejecting create requests."""
        self._failures.clear()

    def list_objects(self, resource: str | None = None) -> list[dict[str, Any]]:
        """Return the stored objects, optionally only for one resource."""
        return [
            obj
            for (obj_resource, _, _), obj in self._objects.items()
            if resource is None or obj_resource == resource
        ]

    async def create(
        self,
        mapping: ResourceMapping,
        namespace: str | None,
        doc: dict[str, Any],
    ) -> dict[str, Any]:
        """Store the object unless it already exists."""
        name = doc.get("metadata", {}).get("name", "")
        self.calls.append(CreateCall(mapping.resource, namespace, name))
        if (message := self._failures.get(name)) is not None:
            raise ResourceClientException(message)
        if mapping.namespaced and not namespace:
            raise ResourceClientException(
                f"an empty namespace may not be set during creation of {mapping.resource}"
            )
        key = (mapping.resource, namespace, name)
        if key in self._objects:
            raise AlreadyExistsError(f'{mapping.resource} "{name}" already exists')
        _LOGGER.debug("Creating %s %s in namespace %s", mapping.resource, name, namespace)
        self._objects[key] = copy.deepcopy(doc)
        return copy.deepcopy(doc)
