"""API server discovery.

Discovery describes the resources served by the API server for every API
group and version. The records here mirror the shape of the discovery
documents returned by the `/api` and `/apis` endpoints so they can be
decoded directly from the server responses.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging

from mashumaro import DataClassDictMixin, field_options
from mashumaro.config import BaseConfig

__all__ = [
    "APIResource",
    "APIResourceList",
    "GroupVersionForDiscovery",
    "APIGroup",
    "APIGroupResources",
    "Discovery",
    "StaticDiscovery",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class APIResource(DataClassDictMixin):
    """A resource served by the API server."""

    name: str
    """The plural resource name used in the request path e.g. `configmaps`."""

    kind: str
    """The kind of the objects served by the resource."""

    namespaced: bool = False
    """Whether objects are scoped to a namespace."""

    verbs: list[str] = field(default_factory=list)
    """The verbs supported by the resource."""

    @property
    def is_subresource(self) -> bool:
        """Return true for subresources such as `pods/log`."""
        return "/" in self.name


@dataclass
class APIResourceList(DataClassDictMixin):
    """The resources served for a single group version."""

    group_version: str = field(metadata=field_options(alias="groupVersion"))
    resources: list[APIResource] = field(default_factory=list)


@dataclass
class GroupVersionForDiscovery(DataClassDictMixin):
    """A version of an API group."""

    group_version: str = field(metadata=field_options(alias="groupVersion"))
    version: str


@dataclass
class APIGroup(DataClassDictMixin):
    """An API group and the versions it serves."""

    name: str
    versions: list[GroupVersionForDiscovery] = field(default_factory=list)
    preferred_version: GroupVersionForDiscovery | None = field(
        metadata=field_options(alias="preferredVersion"), default=None
    )

    class Config(BaseConfig):
        omit_none = True


@dataclass
class APIGroupResources:
    """An API group with the resources served by each of its versions."""

    group: APIGroup
    versioned_resources: dict[str, list[APIResource]] = field(default_factory=dict)


class Discovery(ABC):
    """Source of the discovery information for an API server."""

    @abstractmethod
    async def discover(self) -> list[APIGroupResources]:
        """Return the groups and resources currently served.

        Raises:
            DiscoveryException: If the discovery information can't be fetched.
        """


class StaticDiscovery(Discovery):
    """Discovery backed by a fixed list of groups.

    The groups may be replaced with `set_groups` e.g. to model resources
    registered by a CustomResourceDefinition.
    """

    def __init__(self, groups: list[APIGroupResources] | None = None) -> None:
        """Initialize StaticDiscovery."""
        self._groups = list(groups or [])
        self.calls = 0

    def set_groups(self, groups: list[APIGroupResources]) -> None:
        """Replace the groups returned by the next discovery."""
        self._groups = list(groups)

    async def discover(self) -> list[APIGroupResources]:
        """Return a copy of the configured groups."""
        self.calls += 1
        _LOGGER.debug("Static discovery returning %d groups", len(self._groups))
        return list(self._groups)
