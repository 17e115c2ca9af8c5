"""Route entities and request bodies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..timestamps import FreeFormTimestamp, decode_optional
from .base import Model, Resource, wire


@dataclass
class Route(Resource):
    host: str = ""
    path: str = ""
    domain_guid: str = ""
    space_guid: str = ""
    service_instance_guid: str = ""
    port: Optional[int] = None


@dataclass
class RouteRequest(Model):
    """Body of ``POST /v2/routes``."""

    domain_guid: str = ""
    space_guid: str = ""
    host: str = wire(default="", omitempty=True)


@dataclass
class RouteMap(Model):
    """Body of ``POST /v2/route_mappings``."""

    app_guid: str = ""
    route_guid: str = ""


@dataclass
class MappedRoute(Model):
    """Response of ``POST /v2/route_mappings``."""

    guid: str = ""
    url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    app_port: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MappedRoute":
        if not isinstance(data, Mapping):
            raise TypeError(f"MappedRoute expects a JSON object, got {type(data).__name__}")
        meta = data.get("metadata") or {}
        entity = data.get("entity") or {}
        if not isinstance(meta, Mapping) or not isinstance(entity, Mapping):
            raise TypeError("route mapping 'metadata' and 'entity' must be JSON objects")
        return cls(
            guid=meta.get("guid") or "",
            url=meta.get("url") or "",
            created_at=decode_optional(FreeFormTimestamp, meta.get("created_at")),
            updated_at=decode_optional(FreeFormTimestamp, meta.get("updated_at")),
            app_port=entity.get("app_port"),
        )

    def to_dict(self) -> Dict[str, Any]:
        meta = {
            k: v
            for k, v in super().to_dict().items()
            if k in ("guid", "url", "created_at", "updated_at")
        }
        return {"metadata": meta, "entity": {"app_port": self.app_port}}
