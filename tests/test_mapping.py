"""Tests for the type mapping."""

import pytest

from kube_bootstrap.discovery import APIGroupResources, StaticDiscovery
from kube_bootstrap.exceptions import (
    DiscoveryException,
    MappingRefreshError,
    TypeMappingError,
)
from kube_bootstrap.manifest import GroupVersionKind
from kube_bootstrap.mapping import ResourceMapping, TypeMapper

from .conftest import ALL_GROUPS, GROUPS_WITHOUT_OPERATOR

OPERATOR_CONFIG = GroupVersionKind(
    "kubeapiserver.operator.openshift.io", "v1alpha1", "KubeAPIServerOperatorConfig"
)


class FailingDiscovery(StaticDiscovery):
    """Discovery that fails after the first snapshot."""

    async def discover(self) -> list[APIGroupResources]:
        if self.calls:
            raise DiscoveryException("connection refused")
        return await super().discover()


def test_resolve_namespaced() -> None:
    """Test resolving a namespaced core type."""
    mapper = TypeMapper(ALL_GROUPS)
    mapping = mapper.resolve(GroupVersionKind("", "v1", "ConfigMap"))
    assert mapping == ResourceMapping(
        resource="configmaps",
        group="",
        version="v1",
        kind="ConfigMap",
        namespaced=True,
    )
    assert mapping.api_version == "v1"
    assert mapping.path == "/api/v1"


def test_resolve_cluster_scoped() -> None:
    """Test resolving a cluster scoped type in a named group."""
    mapper = TypeMapper(ALL_GROUPS)
    mapping = mapper.resolve(OPERATOR_CONFIG)
    assert mapping.resource == "kubeapiserveroperatorconfigs"
    assert not mapping.namespaced
    assert mapping.path == "/apis/kubeapiserver.operator.openshift.io/v1alpha1"


def test_resolve_missing_kind() -> None:
    """Test resolving a type that is not served."""
    mapper = TypeMapper(GROUPS_WITHOUT_OPERATOR)
    with pytest.raises(TypeMappingError, match="no matches for kind"):
        mapper.resolve(OPERATOR_CONFIG)


def test_resolve_missing_version() -> None:
    """Test resolving a type with a version that is not served."""
    mapper = TypeMapper(ALL_GROUPS)
    with pytest.raises(TypeMappingError, match='in version "v2"'):
        mapper.resolve(GroupVersionKind("", "v2", "ConfigMap"))


def test_resolve_preferred_version() -> None:
    """Test that an empty version resolves to the preferred version."""
    mapper = TypeMapper(ALL_GROUPS)
    mapping = mapper.resolve(GroupVersionKind("apiextensions.k8s.io", "", "CustomResourceDefinition"))
    assert mapping.version == "v1beta1"

    with pytest.raises(TypeMappingError, match='in group "example.com"'):
        mapper.resolve(GroupVersionKind("example.com", "", "Widget"))


def test_subresources_are_skipped() -> None:
    """Test that subresources don't shadow the resource for a kind."""
    mapper = TypeMapper(ALL_GROUPS)
    with pytest.raises(TypeMappingError):
        mapper.resolve(GroupVersionKind("", "v1", "Pod"))
    assert len(mapper) == 5


async def test_refresh_builds_new_mapper() -> None:
    """Test that refresh returns a new snapshot and leaves the old one alone."""
    discovery = StaticDiscovery(GROUPS_WITHOUT_OPERATOR)
    mapper = await TypeMapper.from_discovery(discovery)
    with pytest.raises(TypeMappingError):
        mapper.resolve(OPERATOR_CONFIG)

    discovery.set_groups(ALL_GROUPS)
    refreshed = await mapper.refresh()
    assert refreshed is not mapper
    assert refreshed.resolve(OPERATOR_CONFIG).resource == "kubeapiserveroperatorconfigs"
    with pytest.raises(TypeMappingError):
        mapper.resolve(OPERATOR_CONFIG)
    assert discovery.calls == 2


async def test_refresh_failure() -> None:
    """Test that a discovery failure during refresh is reported."""
    mapper = await TypeMapper.from_discovery(FailingDiscovery(ALL_GROUPS))
    with pytest.raises(MappingRefreshError, match="connection refused"):
        await mapper.refresh()


async def test_refresh_without_discovery() -> None:
    """Test refreshing a mapper built from a fixed list of groups."""
    mapper = TypeMapper(ALL_GROUPS)
    with pytest.raises(MappingRefreshError):
        await mapper.refresh()
