"""Test fixtures for kube-bootstrap."""

from pathlib import Path

import pytest

from kube_bootstrap.client import InMemoryResourceClient
from kube_bootstrap.discovery import (
    APIGroup,
    APIGroupResources,
    APIResource,
    GroupVersionForDiscovery,
    StaticDiscovery,
)
from kube_bootstrap.loader import load_manifests
from kube_bootstrap.manifest import Manifest
from kube_bootstrap.mapping import TypeMapper

TESTDATA_DIR = Path(__file__).parent / "testdata"
MANIFESTS_DIR = TESTDATA_DIR / "manifests"


def api_group(
    name: str, version: str, resources: list[APIResource]
) -> APIGroupResources:
    """Build discovery for a group with a single version."""
    group_version = GroupVersionForDiscovery(
        group_version=f"{name}/{version}" if name else version,
        version=version,
    )
    return APIGroupResources(
        group=APIGroup(
            name=name,
            versions=[group_version],
            preferred_version=group_version,
        ),
        versioned_resources={version: resources},
    )


OPERATOR_GROUP = api_group(
    "kubeapiserver.operator.openshift.io",
    "v1alpha1",
    [
        APIResource(
            name="kubeapiserveroperatorconfigs",
            kind="KubeAPIServerOperatorConfig",
            namespaced=False,
        ),
    ],
)
APIEXTENSIONS_GROUP = api_group(
    "apiextensions.k8s.io",
    "v1beta1",
    [
        APIResource(
            name="customresourcedefinitions",
            kind="CustomResourceDefinition",
            namespaced=False,
        ),
    ],
)
CORE_GROUP = api_group(
    "",
    "v1",
    [
        APIResource(name="namespaces", kind="Namespace", namespaced=False),
        APIResource(name="configmaps", kind="ConfigMap", namespaced=True),
        APIResource(name="secrets", kind="Secret", namespaced=True),
        APIResource(name="pods/log", kind="Pod", namespaced=True),
    ],
)

ALL_GROUPS = [OPERATOR_GROUP, APIEXTENSIONS_GROUP, CORE_GROUP]
GROUPS_WITHOUT_OPERATOR = [APIEXTENSIONS_GROUP, CORE_GROUP]


@pytest.fixture
def discovery() -> StaticDiscovery:
    """Discovery that serves every type used by the test manifests."""
    return StaticDiscovery(ALL_GROUPS)


@pytest.fixture
async def mapper(discovery: StaticDiscovery) -> TypeMapper:
    """Type mapping built from the discovery fixture."""
    return await TypeMapper.from_discovery(discovery)


@pytest.fixture
def client() -> InMemoryResourceClient:
    """An empty in-memory cluster."""
    return InMemoryResourceClient()


@pytest.fixture
async def manifests() -> dict[str, Manifest]:
    """The manifests in the test data directory."""
    return await load_manifests(MANIFESTS_DIR)
