"""Cloud Foundry API client.

Collection endpoints go through ``CollectionFetcher``; everything else is a
single request whose body is decoded into the matching model.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, TypeVar, Union
from urllib.parse import urlencode

from ._core._request import HttpExecutor, RawResponse, RequestExecutor
from ._core._validators import require_guid, require_non_empty
from .config import ClientConfig
from .envelope import Envelope, hydrate
from .exceptions import AppNotFound, DecodeError, RequestError
from .models import (
    App,
    AppEnv,
    AppInstance,
    AppStats,
    AppSummary,
    DropletRequest,
    MappedRoute,
    Model,
    Resource,
    Route,
    RouteMap,
    RouteRequest,
    V3DockerApp,
    V3DockerAppResponse,
    V3DockerBuild,
    V3DockerBuildResponse,
    V3DockerPackage,
    V3DockerPackageResponse,
)
from .pagination import CollectionFetcher

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Resource)
M = TypeVar("M", bound=Model)

Query = Mapping[str, Union[str, Sequence[str]]]


def encode_query(query: Optional[Query]) -> str:
    """Encode query values with keys sorted and repeated keys kept in order."""
    if not query:
        return ""
    pairs = []
    for key in sorted(query):
        values = query[key]
        if isinstance(values, str):
            values = [values]
        pairs.extend((key, v) for v in values)
    return urlencode(pairs)


def _with_query(path: str, query: Optional[Query]) -> str:
    encoded = encode_query(query)
    return f"{path}?{encoded}" if encoded else path


def _mapping_of(build: Callable[[Any], M]) -> Callable[[Any], Dict[str, M]]:
    def decode(raw: Any) -> Dict[str, M]:
        if not isinstance(raw, Mapping):
            raise TypeError(f"expected a JSON object, got {type(raw).__name__}")
        return {key: build(value) for key, value in raw.items()}

    return decode


class Client:
    """Entry point for talking to a Cloud Foundry API.

    Parameters:
        config: Connection settings.
        executor: Transport to use; defaults to an ``HttpExecutor`` built from ``config``.

    Examples:
        >>> client = Client(ClientConfig.from_environ())  # doctest: +SKIP
        >>> apps = client.list_apps()  # doctest: +SKIP
        >>> apps[0].space().name  # doctest: +SKIP
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        executor: Optional[RequestExecutor] = None,
    ) -> None:
        if executor is None:
            if config is None:
                config = ClientConfig.from_environ()
            executor = HttpExecutor(config)
        self.config = config
        self.executor = executor

    def __repr__(self) -> str:
        return f"Client(config={self.config!r})"

    # plumbing

    def _fetch(self, url: str, resource_type: Type[R], total_pages: int = -1) -> List[R]:
        fetcher = CollectionFetcher(
            self.executor, resource_type, page_bound=total_pages, context=self
        )
        return fetcher.fetch(url)

    def _send(self, method: str, url: str, body: Optional[Model] = None) -> RawResponse:
        payload = None
        if body is not None:
            payload = json.dumps(body.to_dict()).encode("utf-8")
        return self.executor.execute(method, url, payload)

    def _decode(self, response: RawResponse, url: str, build: Callable[[Any], Any]) -> Any:
        if not response.ok:
            raise RequestError(
                "Unexpected response",
                url=url,
                status_code=response.status_code,
                body=response.body,
            )
        try:
            return build(json.loads(response.body))
        except (TypeError, ValueError) as exc:
            raise DecodeError(url, None, response.body, exc) from exc

    def _call(
        self,
        method: str,
        url: str,
        build: Callable[[Any], Any],
        body: Optional[Model] = None,
    ) -> Any:
        return self._decode(self._send(method, url, body), url, build)

    def get_resource(self, url: str, resource_type: Type[R]) -> R:
        """Fetch a single enveloped resource and hydrate it.

        Used by entity follow-up methods such as ``App.space()``.
        """
        require_non_empty({"url": url}, ["url"])
        return self._call(
            "GET", url, lambda raw: hydrate(Envelope.from_dict(raw), resource_type, self)
        )

    # apps

    def list_apps(self) -> List[App]:
        """List every app, with space and organization inlined."""
        return self.list_apps_by_query({"inline-relations-depth": "2"})

    def list_apps_by_query(self, query: Optional[Query]) -> List[App]:
        """List every app matching ``query`` (e.g. ``{"q": ["name:web"]}``)."""
        return self.list_apps_by_query_with_limits(query, -1)

    def list_apps_by_query_with_limits(
        self, query: Optional[Query], total_pages: int
    ) -> List[App]:
        """List apps matching ``query``, reading at most ``total_pages`` pages.

        Parameters:
            query: Query parameters, multi-valued keys as sequences.
            total_pages: Page bound; ``<= 0`` reads every page.

        Returns:
            Apps in server order. When the server has fewer pages than
            ``total_pages`` every app is returned.
        """
        apps = self._fetch(_with_query("/v2/apps", query), App, total_pages)
        logger.info("Apps found: %s", len(apps))
        return apps

    def list_apps_by_route(self, route_guid: str) -> List[App]:
        require_guid(route_guid, "route_guid")
        return self._fetch(f"/v2/routes/{route_guid}/apps", App)

    def get_app_by_guid(self, guid: str) -> App:
        """Fetch one app with space and organization inlined."""
        require_guid(guid)
        return self.get_resource(f"/v2/apps/{guid}?inline-relations-depth=2", App)

    def app_by_guid(self, guid: str) -> App:
        return self.get_app_by_guid(guid)

    def app_by_name(self, app_name: str, space_guid: str, org_guid: str) -> App:
        """Look up an app by name inside a space and organization.

        Raises:
            AppNotFound: if no app matches.
        """
        query = {
            "q": [
                f"organization_guid:{org_guid}",
                f"space_guid:{space_guid}",
                f"name:{app_name}",
            ]
        }
        apps = self.list_apps_by_query(query)
        if not apps:
            raise AppNotFound(
                f"No app found with name: `{app_name}` in space with GUID "
                f"`{space_guid}` and org with GUID `{org_guid}`"
            )
        return apps[0]

    def get_app_instances(self, guid: str) -> Dict[str, AppInstance]:
        require_guid(guid)
        return self._call(
            "GET",
            f"/v2/apps/{guid}/instances",
            _mapping_of(AppInstance.from_dict),
        )

    def get_app_env(self, guid: str) -> AppEnv:
        require_guid(guid)
        return self._call("GET", f"/v2/apps/{guid}/env", AppEnv.from_dict)

    def get_app_routes(self, guid: str) -> List[Route]:
        require_guid(guid)
        return self._fetch(f"/v2/apps/{guid}/routes", Route)

    def get_app_stats(self, guid: str) -> Dict[str, AppStats]:
        require_guid(guid)
        return self._call(
            "GET",
            f"/v2/apps/{guid}/stats",
            _mapping_of(AppStats.from_dict),
        )

    def get_app_summary(self, guid: str) -> AppSummary:
        require_guid(guid)
        return self._call("GET", f"/v2/apps/{guid}/summary", AppSummary.from_dict)

    def kill_app_instance(self, guid: str, index: Union[int, str]) -> None:
        """Stop one instance of an app; the platform restarts it.

        Raises:
            RequestError: if the API does not answer ``204 No Content``.
        """
        require_guid(guid)
        url = f"/v2/apps/{guid}/instances/{index}"
        response = self._send("DELETE", url)
        if response.status_code != 204:
            raise RequestError(
                f"Error stopping app {guid} at index {index}",
                url=url,
                status_code=response.status_code,
                body=response.body,
            )

    # v3 docker flow

    def create_v3_docker_app(
        self,
        app_name: str,
        space_guid: str,
        environment_variables: Optional[Mapping[str, str]] = None,
    ) -> V3DockerAppResponse:
        """Create a docker lifecycle app in a space."""
        body = V3DockerApp(
            name=app_name,
            space_guid=space_guid,
            environment_variables=dict(environment_variables or {}),
        )
        return self._call("POST", "/v3/apps", V3DockerAppResponse.from_dict, body)

    def create_v3_docker_app_with_env(
        self, app_name: str, space_guid: str, environment_variables: Mapping[str, str]
    ) -> V3DockerAppResponse:
        return self.create_v3_docker_app(app_name, space_guid, environment_variables)

    def create_v3_docker_package(self, app_guid: str, image: str) -> V3DockerPackageResponse:
        """Create the docker package for an app; it then needs a build."""
        body = V3DockerPackage(app_guid=app_guid, image=image)
        return self._call("POST", "/v3/packages", V3DockerPackageResponse.from_dict, body)

    def create_v3_docker_build(self, package_guid: str) -> V3DockerBuildResponse:
        """Stage a package by creating a build for it."""
        body = V3DockerBuild(package_guid=package_guid)
        return self._call("POST", "/v3/builds", V3DockerBuildResponse.from_dict, body)

    def get_v3_build_info(self, build_guid: str) -> V3DockerBuildResponse:
        """Poll a build; once staged its ``droplet_guid`` is set."""
        require_guid(build_guid, "build_guid")
        return self._call("GET", f"/v3/builds/{build_guid}", V3DockerBuildResponse.from_dict)

    def assign_droplet_to_app(self, app_guid: str, droplet_guid: str) -> V3DockerAppResponse:
        """Make ``droplet_guid`` the current droplet of the app."""
        require_guid(app_guid, "app_guid")
        return self._call(
            "PATCH",
            f"/v3/apps/{app_guid}/relationships/current_droplet",
            V3DockerAppResponse.from_dict,
            DropletRequest(guid=droplet_guid),
        )

    def start_app(self, app_guid: str) -> V3DockerAppResponse:
        require_guid(app_guid, "app_guid")
        return self._call(
            "POST", f"/v3/apps/{app_guid}/actions/start", V3DockerAppResponse.from_dict
        )

    # routes

    def list_routes(self) -> List[Route]:
        return self.list_routes_by_query(None)

    def list_routes_by_query(self, query: Optional[Query]) -> List[Route]:
        routes = self._fetch(_with_query("/v2/routes", query), Route)
        logger.info("Routes found: %s", len(routes))
        return routes

    def create_tcp_route(self, route_request: RouteRequest) -> Route:
        """Create a route with a generated port."""
        envelope = self._create_route("/v2/routes?generate_port=true", route_request)
        return hydrate(envelope, Route, self)

    def create_http_route(self, route_request: RouteRequest) -> Envelope:
        """Create an HTTP route and return the raw envelope.

        Use ``cfaccess.hydrate(envelope, Route, client)`` for a ``Route``.
        """
        return self._create_route("/v2/routes", route_request)

    def _create_route(self, url: str, route_request: RouteRequest) -> Envelope:
        return self._call("POST", url, Envelope.from_dict, route_request)

    def map_route(self, route_map: RouteMap) -> MappedRoute:
        return self._call("POST", "/v2/route_mappings", MappedRoute.from_dict, route_map)
