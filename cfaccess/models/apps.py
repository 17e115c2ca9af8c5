"""Application entities, statistics and v3 docker request/response bodies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..timestamps import EpochSecondsTimestamp, FreeFormTimestamp, decode_optional
from .base import Model, Resource, wire
from .spaces import Space


def _free_form(raw: Any) -> Optional[datetime]:
    return decode_optional(FreeFormTimestamp, raw)


def _member(key: str) -> Callable[[Any], str]:
    """Decoder reading one string member of an embedded object."""

    def decode(raw: Any) -> str:
        if not isinstance(raw, Mapping):
            raise TypeError(f"expected a JSON object, got {type(raw).__name__}")
        return raw.get(key) or ""

    return decode


@dataclass
class App(Resource):
    """A v2 application.

    ``guid``, ``created_at`` and ``updated_at`` are promoted from the
    envelope metadata; ``space_data`` holds the inlined space when the
    request asked for ``inline-relations-depth`` of 1 or more.
    """

    created_at: Optional[datetime] = wire(default=None, decode=_free_form)
    updated_at: Optional[datetime] = wire(default=None, decode=_free_form)
    name: str = ""
    memory: int = 0
    instances: int = 0
    disk_quota: int = 0
    space_guid: str = ""
    stack_guid: str = ""
    state: str = ""
    package_state: str = ""
    command: str = ""
    buildpack: str = ""
    detected_buildpack: str = ""
    detected_buildpack_guid: str = ""
    health_check_http_endpoint: str = ""
    health_check_type: str = ""
    health_check_timeout: int = 0
    diego: bool = False
    enable_ssh: bool = False
    detected_start_command: str = ""
    docker_image: str = ""
    docker_credentials: Dict[str, Any] = wire(
        "docker_credentials_json", default_factory=dict
    )
    environment: Dict[str, Any] = wire("environment_json", default_factory=dict)
    staging_failed_reason: str = ""
    staging_failed_description: str = ""
    ports: List[int] = wire(default_factory=list)
    space_url: str = ""
    space_data: Optional[Space] = wire("space", default=None, nested=True)
    package_updated_at: Optional[datetime] = wire(default=None, decode=_free_form)

    def space(self) -> Space:
        """Fetch the space this app belongs to through ``space_url``."""
        return self._require_client().get_resource(self.space_url, Space)


@dataclass
class AppInstance(Model):
    state: str = ""
    since: Optional[datetime] = wire(default=None, decode=EpochSecondsTimestamp.decode)


@dataclass
class Usage(Model):
    time: Optional[datetime] = wire(default=None, decode=FreeFormTimestamp.decode)
    cpu: float = 0.0
    mem: int = 0
    disk: int = 0


@dataclass
class Stats(Model):
    name: str = ""
    uris: List[str] = wire(default_factory=list)
    host: str = ""
    port: int = 0
    uptime: int = 0
    mem_quota: int = 0
    disk_quota: int = 0
    fds_quota: int = 0
    usage: Usage = wire(default_factory=Usage, decode=Usage.from_dict)


@dataclass
class AppStats(Model):
    state: str = ""
    stats: Stats = wire(default_factory=Stats, decode=Stats.from_dict)


@dataclass
class AppSummary(Model):
    guid: str = ""
    name: str = ""
    service_count: int = 0
    running_instances: int = 0
    space_guid: str = ""
    stack_guid: str = ""
    buildpack: str = ""
    detected_buildpack: str = ""
    environment: Dict[str, Any] = wire("environment_json", default_factory=dict)
    memory: int = 0
    instances: int = 0
    disk_quota: int = 0
    state: str = ""
    command: str = ""
    package_state: str = ""
    health_check_type: str = ""
    health_check_timeout: int = 0
    staging_failed_reason: str = ""
    staging_failed_description: str = ""
    diego: bool = False
    docker_image: str = ""
    detected_start_command: str = ""
    enable_ssh: bool = False
    docker_credentials: Dict[str, Any] = wire(
        "docker_credentials_json", default_factory=dict
    )


@dataclass
class AppEnv(Model):
    # arbitrary JSON from the platform, kept as plain dicts
    environment: Dict[str, Any] = wire("environment_json", default_factory=dict)
    staging_env: Dict[str, Any] = wire("staging_env_json", default_factory=dict)
    running_env: Dict[str, Any] = wire("running_env_json", default_factory=dict)
    system_env: Dict[str, Any] = wire("system_env_json", default_factory=dict)
    application_env: Dict[str, Any] = wire(
        "application_env_json", default_factory=dict
    )


# v3 docker flow


@dataclass
class DropletRequest(Model):
    """Body of ``PATCH /v3/apps/:guid/relationships/current_droplet``."""

    guid: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"data": {"guid": self.guid} if self.guid else {}}


@dataclass
class V3DockerApp(Model):
    """Body of ``POST /v3/apps`` for a docker lifecycle app."""

    name: str = ""
    space_guid: str = ""
    environment_variables: Dict[str, str] = wire(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"name": self.name}
        if self.environment_variables:
            body["environment_variables"] = dict(self.environment_variables)
        body["relationships"] = {"space": {"data": {"guid": self.space_guid}}}
        body["lifecycle"] = {"type": "docker", "data": {}}
        return body


@dataclass
class V3DockerPackage(Model):
    """Body of ``POST /v3/packages``."""

    app_guid: str = ""
    image: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "docker",
            "relationships": {"app": {"data": {"guid": self.app_guid}}},
            "data": {"image": self.image},
        }


@dataclass
class V3DockerBuild(Model):
    """Body of ``POST /v3/builds``."""

    package_guid: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"package": {"guid": self.package_guid}}


@dataclass
class V3DockerPackageResponse(Model):
    guid: str = ""
    state: str = ""
    created_at: Optional[datetime] = wire(default=None, decode=_free_form)
    updated_at: Optional[datetime] = wire(default=None, decode=_free_form)


@dataclass
class V3DockerBuildResponse(Model):
    guid: str = ""
    state: str = ""
    created_at: Optional[datetime] = wire(default=None, decode=_free_form)
    updated_at: Optional[datetime] = wire(default=None, decode=_free_form)
    # the droplet is null until staging has finished
    droplet_guid: str = wire("droplet", default="", decode=_member("guid"))

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["droplet"] = {"guid": self.droplet_guid} if self.droplet_guid else None
        return body


@dataclass
class V3DockerAppResponse(Model):
    guid: str = ""
    created_at: Optional[datetime] = wire(default=None, decode=_free_form)
    updated_at: Optional[datetime] = wire(default=None, decode=_free_form)
    name: str = ""
    state: str = ""
    lifecycle_type: str = wire("lifecycle", default="", decode=_member("type"))

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["lifecycle"] = {"type": self.lifecycle_type, "data": {}}
        return body
