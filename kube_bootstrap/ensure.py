"""Ensure that all manifests in a directory are created in a cluster.

Manifests are created in rounds until none are left or the deadline passes.
A round that fails to resolve the type of a manifest (typically because a
CustomResourceDefinition created in an earlier round is not in the type
mapping yet) causes the type mapping to be rebuilt from a fresh discovery
snapshot before the next round.

When the deadline passes the last set of failures is raised instead of a
generic timeout so the caller can see which manifests were not created.
"""

import asyncio
from dataclasses import dataclass, field
import logging
from pathlib import Path

from .apply import apply_manifests
from .client import ResourceClient
from .context import trace_context
from .discovery import Discovery
from .exceptions import DeadlineExceededError, ManifestsNotCreatedError
from .kube import ConnectionConfig, KubernetesDiscovery, KubernetesResourceClient
from .loader import FileInfoPredicate, load_manifests
from .manifest import Manifest
from .mapping import TypeMapper

__all__ = [
    "CreateOptions",
    "ensure_created",
    "create_from_directory",
    "ensure_manifests_created",
]

_LOGGER = logging.getLogger(__name__)

POLL_INTERVAL = 0.5


@dataclass
class CreateOptions:
    """Options for creating the manifests in a directory.

    Attributes:
        filters: Only files accepted by all of the filters are loaded.
        timeout: Seconds to keep retrying before giving up, or None to retry
            until cancelled.
        poll_interval: Seconds to wait between apply rounds.
    """

    filters: list[FileInfoPredicate] = field(default_factory=list)
    timeout: float | None = None
    poll_interval: float = POLL_INTERVAL


async def ensure_created(
    pending: dict[str, Manifest],
    client: ResourceClient,
    mapper: TypeMapper,
    *,
    timeout: float | None = None,
    poll_interval: float = POLL_INTERVAL,
) -> None:
    """Create the pending manifests, retrying until all of them exist.

    The first round runs immediately. The pending set is modified in place
    and is empty when this returns successfully.

    Raises:
        ManifestsNotCreatedError: The failures of the last round when the
            deadline passed.
        DeadlineExceededError: If the deadline passed before any round
            completed.
        MappingRefreshError: If the type mapping could not be rebuilt.
    """
    last_error: ManifestsNotCreatedError | None = None
    round_num = 0
    try:
        async with asyncio.timeout(timeout):
            while True:
                round_num += 1
                with trace_context(f"round {round_num}"):
                    outcome = await apply_manifests(pending, client, mapper)
                if (error := outcome.error) is None:
                    _LOGGER.info("All manifests created after %d round(s)", round_num)
                    return
                _LOGGER.warning(
                    "Round %d: %d manifest(s) not created yet",
                    round_num,
                    len(outcome.errors),
                )
                # Recorded before the refresh so a deadline during discovery
                # still reports these failures.
                last_error = error
                if outcome.refresh_mapping:
                    _LOGGER.info("Refreshing the type mapping from discovery")
                    mapper = await mapper.refresh()
                await asyncio.sleep(poll_interval)
    except TimeoutError as err:
        if last_error is not None:
            _LOGGER.error("Deadline exceeded with %d pending manifest(s)", len(pending))
            raise last_error from err
        raise DeadlineExceededError(
            f"timed out waiting for {len(pending)} manifest(s) to be created"
        ) from err


async def create_from_directory(
    manifest_dir: Path,
    client: ResourceClient,
    discovery: Discovery,
    options: CreateOptions | None = None,
) -> None:
    """Load the manifests in the directory and create them with the client.

    Raises:
        DirectoryNotFoundError: If the directory does not exist.
        ManifestDecodeError: If any of the manifests can't be decoded.
        DiscoveryException: If the initial type mapping can't be built.
    """
    options = options or CreateOptions()
    pending = await load_manifests(manifest_dir, options.filters)
    mapper = await TypeMapper.from_discovery(discovery)
    _LOGGER.info("Creating %d manifests from %s", len(pending), manifest_dir)
    await ensure_created(
        pending,
        client,
        mapper,
        timeout=options.timeout,
        poll_interval=options.poll_interval,
    )


async def ensure_manifests_created(
    manifest_dir: Path,
    connection: ConnectionConfig,
    options: CreateOptions | None = None,
) -> None:
    """Ensure all manifests in the directory are created in the cluster.

    Creation is retried until no errors are reported. Set `options.timeout`
    to bound how long to wait for all the resources to be created.
    """
    with connection.api_client() as api_client:
        await create_from_directory(
            manifest_dir,
            KubernetesResourceClient(api_client),
            KubernetesDiscovery(api_client),
            options,
        )
