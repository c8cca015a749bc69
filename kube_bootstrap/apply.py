"""A single apply round over the pending manifests.

Each manifest is created at most once per round. Manifests that are created,
or that already exist, are removed from the pending set so that repeated
rounds only attempt what is left. Failures are recorded per manifest and
returned together; they never stop the round early.
"""

from dataclasses import dataclass, field
import logging

from .client import ResourceClient
from .exceptions import (
    AlreadyExistsError,
    ManifestsNotCreatedError,
    ResourceClientException,
    TypeMappingError,
)
from .manifest import Manifest
from .mapping import TypeMapper

__all__ = [
    "ApplyOutcome",
    "apply_manifests",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class ApplyOutcome:
    """Result of a single apply round."""

    errors: dict[str, str] = field(default_factory=dict)
    """Failure reason for each manifest path that was not created."""

    refresh_mapping: bool = False
    """True when a type could not be resolved and the mapping is stale."""

    @property
    def error(self) -> ManifestsNotCreatedError | None:
        """The aggregated error for all failures, if any."""
        if not self.errors:
            return None
        return ManifestsNotCreatedError(self.errors)


async def apply_manifests(
    pending: dict[str, Manifest],
    client: ResourceClient,
    mapper: TypeMapper,
) -> ApplyOutcome:
    """Attempt to create every pending manifest.

    Manifests are created in order of their path so that numeric file name
    prefixes (e.g. a namespace in `00_namespace.yaml`) are created before the
    objects that depend on them.

    The pending set is modified in place: manifests that were created or
    already exist are removed.
    """
    outcome = ApplyOutcome()
    for path in sorted(pending):
        manifest = pending[path]
        try:
            mapping = mapper.resolve(manifest.gvk)
        except TypeMappingError as err:
            _LOGGER.debug("No type mapping for %s: %s", manifest, err)
            outcome.errors[path] = f"unable to get REST mapping: {err}"
            outcome.refresh_mapping = True
            continue

        namespace = manifest.namespace if mapping.namespaced else None
        try:
            await client.create(mapping, namespace, manifest.doc)
        except AlreadyExistsError:
            _LOGGER.debug("Already exists: %s", manifest)
            del pending[path]
            continue
        except ResourceClientException as err:
            _LOGGER.debug("Failed to create %s: %s", manifest, err)
            outcome.errors[path] = f"failed to create: {err}"
            continue

        _LOGGER.info("Created %s", manifest)
        del pending[path]

    return outcome
