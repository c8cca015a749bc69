"""Exceptions related to kube-bootstrap."""

from collections.abc import Mapping
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .manifest import Manifest

__all__ = [
    "BootstrapException",
    "InputException",
    "DirectoryNotFoundError",
    "ManifestDecodeError",
    "TypeMappingError",
    "DiscoveryException",
    "MappingRefreshError",
    "ResourceClientException",
    "AlreadyExistsError",
    "ManifestsNotCreatedError",
    "DeadlineExceededError",
    "format_errors",
]


def format_errors(errors: Mapping[str, Any], header: str) -> str:
    """Render per-manifest failures as a single message.

    Paths are sorted so the same set of failures always produces the same
    output regardless of the order they were recorded in.
    """
    lines = [f"{json.dumps(path)}: {errors[path]}" for path in sorted(errors)]
    return "{}:\n{}\n".format(header, "\n".join(lines))


class BootstrapException(Exception):
    """Generic base exception used for this library."""


class InputException(BootstrapException):
    """Raised when the input files are not formatted as expected."""


class DirectoryNotFoundError(InputException):
    """Raised when the manifest directory does not exist."""

    def __init__(self, directory: str) -> None:
        super().__init__(f"directory {directory!r} does not exist")
        self.directory = directory


class ManifestDecodeError(InputException):
    """Raised when one or more manifest files could not be decoded.

    The manifests that did decode are still available in `manifests`.
    """

    def __init__(
        self,
        errors: Mapping[str, str],
        manifests: "dict[str, Manifest] | None" = None,
    ) -> None:
        super().__init__(format_errors(errors, "failed to decode some manifests"))
        self.errors = dict(errors)
        self.manifests = manifests or {}


class TypeMappingError(BootstrapException):
    """Raised when a type is not present in the discovery snapshot."""


class DiscoveryException(BootstrapException):
    """Raised when the API server discovery information can't be fetched."""


class MappingRefreshError(DiscoveryException):
    """Raised when the type mapping could not be rebuilt during a run."""


class ResourceClientException(BootstrapException):
    """Raised when the API server rejects a create request."""


class AlreadyExistsError(ResourceClientException):
    """Raised when the resource being created is already present."""


class ManifestsNotCreatedError(BootstrapException):
    """Raised with every manifest that is still failing to be created."""

    def __init__(self, errors: Mapping[str, str]) -> None:
        super().__init__(format_errors(errors, "failed to create some manifests"))
        self.errors = dict(errors)


class DeadlineExceededError(BootstrapException):
    """Raised when the deadline passed before any failure was observed."""
