"""
kube-bootstrap creates the resources described by a directory of manifests
in a Kubernetes cluster, retrying until every resource exists.

The main entry point is `kube_bootstrap.ensure.ensure_manifests_created`.
"""

__all__ = [
    "apply",
    "client",
    "discovery",
    "ensure",
    "exceptions",
    "kube",
    "loader",
    "manifest",
    "mapping",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
