"""Tests for manifest library."""

import pytest

from kube_bootstrap.exceptions import InputException
from kube_bootstrap.manifest import GroupVersionKind, Manifest, parse_api_version


@pytest.mark.parametrize(
    ("api_version", "expected"),
    [
        ("v1", ("", "v1")),
        ("apps/v1", ("apps", "v1")),
        ("apiextensions.k8s.io/v1beta1", ("apiextensions.k8s.io", "v1beta1")),
    ],
)
def test_parse_api_version(api_version: str, expected: tuple[str, str]) -> None:
    """Test splitting an apiVersion into group and version."""
    assert parse_api_version(api_version) == expected


@pytest.mark.parametrize("api_version", ["", "/v1", "apps/", "a/b/c"])
def test_parse_invalid_api_version(api_version: str) -> None:
    """Test apiVersions that can't be parsed."""
    with pytest.raises(InputException):
        parse_api_version(api_version)


def test_group_version_kind() -> None:
    """Test parsing the type of a document."""
    gvk = GroupVersionKind.from_doc({"apiVersion": "apps/v1", "kind": "Deployment"})
    assert gvk == GroupVersionKind("apps", "v1", "Deployment")
    assert gvk.api_version == "apps/v1"
    assert str(gvk) == "apps/v1, Kind=Deployment"

    core = GroupVersionKind.from_doc({"apiVersion": "v1", "kind": "ConfigMap"})
    assert core.api_version == "v1"
    assert str(core) == "v1, Kind=ConfigMap"


def test_parse_doc() -> None:
    """Test parsing a manifest from a document."""
    doc = {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "settings", "namespace": "podinfo"},
        "data": {"key": "value"},
    }
    manifest = Manifest.parse_doc("01_configmap.yaml", doc)
    assert manifest.path == "01_configmap.yaml"
    assert manifest.gvk == GroupVersionKind("", "v1", "ConfigMap")
    assert manifest.name == "settings"
    assert manifest.namespace == "podinfo"
    assert manifest.namespaced_name == "podinfo/settings"
    assert manifest.doc is doc
    assert str(manifest) == "ConfigMap/podinfo/settings (01_configmap.yaml)"
    assert manifest.compact_dict() == {
        "path": "01_configmap.yaml",
        "api_version": "v1",
        "kind": "ConfigMap",
        "namespace": "podinfo",
        "name": "settings",
    }


def test_parse_doc_cluster_scoped() -> None:
    """Test a manifest without a namespace."""
    manifest = Manifest.parse_doc(
        "00_namespace.yaml",
        {"apiVersion": "v1", "kind": "Namespace", "metadata": {"name": "podinfo"}},
    )
    assert manifest.namespace is None
    assert manifest.namespaced_name == "podinfo"
    assert manifest.to_dict()["gvk"] == {"group": "", "version": "v1", "kind": "Namespace"}


def test_parse_doc_generate_name() -> None:
    """Test a manifest relying on the server to generate a name."""
    manifest = Manifest.parse_doc(
        "job.yaml",
        {
            "apiVersion": "batch/v1",
            "kind": "Job",
            "metadata": {"generateName": "migrate-", "namespace": "db"},
        },
    )
    assert manifest.name == ""


@pytest.mark.parametrize(
    ("doc", "match"),
    [
        (None, "Expected an object but got NoneType"),
        (["a", "b"], "Expected an object but got list"),
        ({"apiVersion": "v1"}, "Object 'Kind' is missing"),
        ({"kind": "ConfigMap"}, "Object 'apiVersion' is missing"),
        ({"apiVersion": "v1", "kind": "ConfigMap", "metadata": "x"}, "must be a map"),
    ],
)
def test_parse_invalid_doc(doc: object, match: str) -> None:
    """Test documents that are not kubernetes objects."""
    with pytest.raises(InputException, match=match):
        Manifest.parse_doc("bad.yaml", doc)
