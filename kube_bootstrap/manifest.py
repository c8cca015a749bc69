"""Representation of the manifests that are created in a cluster.

A manifest is a single decoded resource document read from a file on disk,
keyed by the path of that file relative to the manifest directory.
"""

from dataclasses import dataclass, field
import logging
from typing import Any

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

from .exceptions import InputException

__all__ = [
    "GroupVersionKind",
    "Manifest",
    "parse_api_version",
]

_LOGGER = logging.getLogger(__name__)

CORE_GROUP = ""


def parse_api_version(api_version: str) -> tuple[str, str]:
    """Split an apiVersion into its group and version.

    The core API group has no group prefix e.g. `v1`.
    """
    if not api_version:
        raise InputException("Invalid empty apiVersion")
    if "/" not in api_version:
        return CORE_GROUP, api_version
    group, version = api_version.split("/", 1)
    if not group or not version or "/" in version:
        raise InputException(f"Invalid apiVersion '{api_version}'")
    return group, version


@dataclass(frozen=True, order=True)
class GroupVersionKind:
    """Identifier for the type of a kubernetes resource."""

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        """Return the group and version formatted as an apiVersion."""
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    @classmethod
    def from_doc(cls, doc: dict[str, Any]) -> "GroupVersionKind":
        """Parse the type of a raw kubernetes object."""
        if not (kind := doc.get("kind")):
            raise InputException("Object 'Kind' is missing")
        if not (api_version := doc.get("apiVersion")):
            raise InputException("Object 'apiVersion' is missing")
        if not isinstance(kind, str) or not isinstance(api_version, str):
            raise InputException("Object 'Kind' and 'apiVersion' must be strings")
        group, version = parse_api_version(api_version)
        return cls(group=group, version=version, kind=kind)

    def __str__(self) -> str:
        """Return a human readable identifier e.g. `apps/v1, Kind=Deployment`."""
        return f"{self.api_version}, Kind={self.kind}"


@dataclass
class Manifest(DataClassDictMixin):
    """A resource document waiting to be created in the cluster."""

    path: str
    """The path of the source file, relative to the manifest directory."""

    gvk: GroupVersionKind
    """The type of the object."""

    name: str
    """The name of the object, empty when the server generates the name."""

    namespace: str | None = None
    """The namespace of the object, if any."""

    doc: dict[str, Any] = field(default_factory=dict)
    """The full document sent to the API server."""

    @classmethod
    def parse_doc(cls, path: str, doc: Any) -> "Manifest":
        """Parse a Manifest from a raw kubernetes object."""
        if not isinstance(doc, dict):
            raise InputException(
                f"Expected an object but got {type(doc).__name__}"
            )
        gvk = GroupVersionKind.from_doc(doc)
        metadata = doc.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise InputException("Object 'metadata' must be a map")
        return cls(
            path=path,
            gvk=gvk,
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace") or None,
            doc=doc,
        )

    @property
    def namespaced_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    def compact_dict(self) -> dict[str, Any]:
        """Return a summary of the object without the document body."""
        return {
            "path": self.path,
            "api_version": self.gvk.api_version,
            "kind": self.gvk.kind,
            "namespace": self.namespace or "",
            "name": self.name,
        }

    def __str__(self) -> str:
        return f"{self.gvk.kind}/{self.namespaced_name} ({self.path})"

    class Config(BaseConfig):
        omit_none = True
