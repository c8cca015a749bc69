"""Kubernetes API server backends for discovery and resource creation.

These use the `kubernetes` client library. The library is synchronous so
every request is issued from a worker thread to keep the event loop free.
"""

import asyncio
from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
import urllib3

from .client import ResourceClient
from .discovery import (
    APIGroup,
    APIGroupResources,
    APIResourceList,
    Discovery,
    GroupVersionForDiscovery,
)
from .exceptions import (
    AlreadyExistsError,
    DiscoveryException,
    InputException,
    ResourceClientException,
)
from .mapping import ResourceMapping

__all__ = [
    "ConnectionConfig",
    "KubernetesDiscovery",
    "KubernetesResourceClient",
    "is_already_exists",
]

_LOGGER = logging.getLogger(__name__)

ALREADY_EXISTS_REASON = "AlreadyExists"
_AUTH_SETTINGS = ["BearerToken"]
_JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}
# Every successful response is decoded as plain JSON
_RESPONSE_TYPES = {"2XX": "object"}


@dataclass
class ConnectionConfig:
    """Configuration for connecting to the API server.

    Attributes:
        kubeconfig: Path to a kubeconfig file. The default kubeconfig
            location (or $KUBECONFIG) is used when not set.
        context: The kubeconfig context to use instead of the current one.
        in_cluster: Use the service account of the pod the process runs in.
    """

    kubeconfig: Path | None = None
    context: str | None = None
    in_cluster: bool = False

    def api_client(self) -> client.ApiClient:
        """Build an ApiClient for the configured cluster."""
        try:
            if self.in_cluster:
                configuration = client.Configuration()
                config.load_incluster_config(client_configuration=configuration)
                return client.ApiClient(configuration)
            return config.new_client_from_config(
                config_file=str(self.kubeconfig) if self.kubeconfig else None,
                context=self.context,
            )
        except ConfigException as err:
            raise InputException(f"Invalid cluster connection config: {err}") from err


def _status_from(err: ApiException) -> dict[str, Any]:
    """Decode the Status object returned in an error response."""
    if not err.body:
        return {}
    try:
        status = json.loads(err.body)
    except (TypeError, ValueError):
        return {}
    return status if isinstance(status, dict) else {}


def is_already_exists(err: ApiException) -> bool:
    """Return true if the error reports the object already exists."""
    return err.status == 409 and _status_from(err).get("reason") == ALREADY_EXISTS_REASON


def _error_message(err: ApiException) -> str:
    if message := _status_from(err).get("message"):
        return str(message)
    return f"({err.status}) {err.reason}"


def _request(
    api_client: client.ApiClient,
    method: str,
    path: str,
    body: dict[str, Any] | None = None,
) -> Any:
    """Issue a request and return the decoded JSON response.

    Raises:
        ApiException: If the server responded with an error status.
    """
    request = api_client.param_serialize(
        method,
        path,
        header_params=dict(_JSON_HEADERS),
        body=body,
        auth_settings=_AUTH_SETTINGS,
    )
    response = api_client.call_api(*request)
    response.read()
    return api_client.response_deserialize(response, _RESPONSE_TYPES).data


class KubernetesDiscovery(Discovery):
    """Discovery that reads the `/api` and `/apis` endpoints."""

    def __init__(self, api_client: client.ApiClient) -> None:
        """Initialize KubernetesDiscovery."""
        self._api_client = api_client

    def _get(self, path: str) -> Any:
        return _request(self._api_client, "GET", path)

    def _group_resources(self, group: APIGroup) -> APIGroupResources:
        group_resources = APIGroupResources(group=group)
        for group_version in group.versions:
            if group.name:
                path = f"/apis/{group_version.group_version}"
            else:
                path = f"/api/{group_version.version}"
            try:
                resource_list = APIResourceList.from_dict(self._get(path))
            except ApiException as err:
                # A single unavailable group version (e.g. an aggregated API
                # that is not ready) should not hide the rest of the cluster.
                _LOGGER.warning(
                    "Unable to discover resources for %s: %s",
                    group_version.group_version,
                    _error_message(err),
                )
                continue
            group_resources.versioned_resources[group_version.version] = (
                resource_list.resources
            )
        return group_resources

    def _discover(self) -> list[APIGroupResources]:
        core_versions = self._get("/api").get("versions", [])
        core_group = APIGroup(
            name="",
            versions=[GroupVersionForDiscovery(v, v) for v in core_versions],
        )
        if core_group.versions:
            core_group.preferred_version = core_group.versions[0]
        groups = [core_group]
        groups.extend(
            APIGroup.from_dict(group) for group in self._get("/apis").get("groups", [])
        )
        return [self._group_resources(group) for group in groups]

    async def discover(self) -> list[APIGroupResources]:
        """Return the groups and resources served by the API server."""
        _LOGGER.debug("Fetching discovery information")
        try:
            return await asyncio.to_thread(self._discover)
        except ApiException as err:
            raise DiscoveryException(
                f"unable to retrieve the API group list: {_error_message(err)}"
            ) from err
        except urllib3.exceptions.HTTPError as err:
            raise DiscoveryException(
                f"unable to retrieve the API group list: {err}"
            ) from err


class KubernetesResourceClient(ResourceClient):
    """ResourceClient that issues create requests to the API server."""

    def __init__(self, api_client: client.ApiClient) -> None:
        """Initialize KubernetesResourceClient."""
        self._api_client = api_client

    def _create(self, path: str, doc: dict[str, Any]) -> dict[str, Any]:
        return _request(self._api_client, "POST", path, doc)

    async def create(
        self,
        mapping: ResourceMapping,
        namespace: str | None,
        doc: dict[str, Any],
    ) -> dict[str, Any]:
        """Create the object with a POST to the resource collection."""
        path = mapping.path
        if mapping.namespaced and namespace:
            path = f"{path}/namespaces/{namespace}"
        path = f"{path}/{mapping.resource}"
        _LOGGER.debug("POST %s", path)
        try:
            return await asyncio.to_thread(self._create, path, doc)
        except ApiException as err:
            if is_already_exists(err):
                raise AlreadyExistsError(_error_message(err)) from err
            raise ResourceClientException(_error_message(err)) from err
        except urllib3.exceptions.HTTPError as err:
            raise ResourceClientException(str(err)) from err
