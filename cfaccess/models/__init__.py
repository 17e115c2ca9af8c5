"""Typed models for Cloud Foundry API resources."""

from .apps import (
    App,
    AppEnv,
    AppInstance,
    AppStats,
    AppSummary,
    DropletRequest,
    Stats,
    Usage,
    V3DockerApp,
    V3DockerAppResponse,
    V3DockerBuild,
    V3DockerBuildResponse,
    V3DockerPackage,
    V3DockerPackageResponse,
)
from .base import Model, Resource
from .routes import MappedRoute, Route, RouteMap, RouteRequest
from .spaces import Organization, Space

__all__ = [
    "Model",
    "Resource",
    # apps
    "App",
    "AppEnv",
    "AppInstance",
    "AppStats",
    "AppSummary",
    "Stats",
    "Usage",
    "DropletRequest",
    "V3DockerApp",
    "V3DockerAppResponse",
    "V3DockerBuild",
    "V3DockerBuildResponse",
    "V3DockerPackage",
    "V3DockerPackageResponse",
    # routes
    "MappedRoute",
    "Route",
    "RouteMap",
    "RouteRequest",
    # spaces
    "Organization",
    "Space",
]
