"""Mapping of resource types to API server endpoints.

A `TypeMapper` answers which resource serves a given group/version/kind and
whether it is namespaced. It is built from a discovery snapshot and never
changes afterwards: when the snapshot is found to be out of date (e.g. a
CustomResourceDefinition was just created) a new mapper is built with
`refresh()` and replaces the old one.
"""

from dataclasses import dataclass
import logging

from .discovery import APIGroupResources, Discovery
from .exceptions import DiscoveryException, MappingRefreshError, TypeMappingError
from .manifest import GroupVersionKind

__all__ = [
    "ResourceMapping",
    "TypeMapper",
]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceMapping:
    """The resource endpoint serving a kind."""

    resource: str
    """The plural resource name e.g. `configmaps`."""

    group: str
    version: str
    kind: str

    namespaced: bool
    """False when the resource is cluster scoped."""

    @property
    def api_version(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version

    @property
    def path(self) -> str:
        """The API path prefix for the group version e.g. `/apis/apps/v1`."""
        if self.group:
            return f"/apis/{self.group}/{self.version}"
        return f"/api/{self.version}"


class TypeMapper:
    """Immutable snapshot of the types known to the API server."""

    def __init__(
        self,
        groups: list[APIGroupResources],
        discovery: Discovery | None = None,
    ) -> None:
        """Initialize TypeMapper from the discovered groups."""
        self._discovery = discovery
        mappings: dict[GroupVersionKind, ResourceMapping] = {}
        preferred: dict[str, str] = {}
        for group_resources in groups:
            group = group_resources.group
            if group.preferred_version:
                preferred[group.name] = group.preferred_version.version
            for version, resources in group_resources.versioned_resources.items():
                for resource in resources:
                    if resource.is_subresource:
                        continue
                    gvk = GroupVersionKind(group.name, version, resource.kind)
                    # The first resource for a kind wins, matching the order
                    # the API server lists them in.
                    mappings.setdefault(
                        gvk,
                        ResourceMapping(
                            resource=resource.name,
                            group=group.name,
                            version=version,
                            kind=resource.kind,
                            namespaced=resource.namespaced,
                        ),
                    )
        self._mappings = mappings
        self._preferred = preferred

    @classmethod
    async def from_discovery(cls, discovery: Discovery) -> "TypeMapper":
        """Build a mapper from a fresh discovery snapshot.

        Raises:
            DiscoveryException: If the discovery information can't be fetched.
        """
        groups = await discovery.discover()
        mapper = cls(groups, discovery)
        _LOGGER.debug("Built type mapping with %d kinds", len(mapper))
        return mapper

    async def refresh(self) -> "TypeMapper":
        """Return a new mapper from a fresh discovery snapshot.

        Raises:
            MappingRefreshError: If the discovery information can't be fetched.
        """
        if self._discovery is None:
            raise MappingRefreshError("Type mapping has no discovery source")
        try:
            return await TypeMapper.from_discovery(self._discovery)
        except DiscoveryException as err:
            raise MappingRefreshError(f"unable to refresh type mapping: {err}") from err

    def resolve(self, gvk: GroupVersionKind) -> ResourceMapping:
        """Return the resource serving the kind.

        An empty version resolves to the preferred version of the group.

        Raises:
            TypeMappingError: If the kind is not served by the API server.
        """
        version = gvk.version or self._preferred.get(gvk.group, "")
        if mapping := self._mappings.get(GroupVersionKind(gvk.group, version, gvk.kind)):
            return mapping
        if gvk.version:
            raise TypeMappingError(
                f'no matches for kind "{gvk.kind}" in version "{gvk.api_version}"'
            )
        raise TypeMappingError(
            f'no matches for kind "{gvk.kind}" in group "{gvk.group}"'
        )

    def __len__(self) -> int:
        return len(self._mappings)
