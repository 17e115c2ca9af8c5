"""Metadata/entity envelopes and their hydration into typed resources.

Every v2 resource arrives as::

    {"metadata": {"guid": ..., "url": ..., "created_at": ..., "updated_at": ...},
     "entity": {...domain fields...}}

The entity payload does not carry its own identity, so after decoding the
metadata fields have to be copied onto the resource. Which fields are copied,
and which embedded envelopes are followed, is declared per resource type in
``HYDRATION_RULES``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from .models import App, Organization, Resource, Route, Space
from .timestamps import FreeFormTimestamp, decode_optional

R = TypeVar("R", bound=Resource)

IDENTITY: Tuple[str, ...] = ("guid",)
IDENTITY_AND_AUDIT: Tuple[str, ...] = ("guid", "created_at", "updated_at")

# resource attribute -> envelope attribute
_PROMOTABLE = {"guid": "identity", "created_at": "created_at", "updated_at": "updated_at"}


@dataclass(frozen=True)
class Envelope:
    """One decoded ``{metadata, entity}`` item."""

    identity: str
    entity: Mapping[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    url: str = ""

    @classmethod
    def from_dict(cls, raw: Any) -> Envelope:
        """Decode an envelope, including its metadata timestamps.

        Raises:
            TypeError: if ``raw`` or its sections are not JSON objects.
            ValueError: if the metadata has no guid.
            TimestampError: if a metadata timestamp cannot be decoded.
        """
        if not isinstance(raw, Mapping):
            raise TypeError(f"resource must be a JSON object, got {type(raw).__name__}")
        meta = raw.get("metadata")
        entity = raw.get("entity")
        if not isinstance(meta, Mapping):
            raise TypeError("resource has no 'metadata' object")
        if not isinstance(entity, Mapping):
            raise TypeError("resource has no 'entity' object")
        guid = meta.get("guid")
        if not isinstance(guid, str) or not guid:
            raise ValueError("resource metadata has no guid")
        return cls(
            identity=guid,
            entity=entity,
            created_at=decode_optional(FreeFormTimestamp, meta.get("created_at")),
            updated_at=decode_optional(FreeFormTimestamp, meta.get("updated_at")),
            url=meta.get("url") or "",
        )


@dataclass(frozen=True)
class Nested:
    """An embedded envelope (or list of envelopes) inside an entity payload."""

    attribute: str
    resource_type: Type[Resource]
    many: bool = False


@dataclass(frozen=True)
class HydrationRule:
    """What to promote onto a resource type and which payload keys to recurse into.

    Attributes:
        promote: Resource attributes filled from the envelope metadata.
        nested: Payload key -> ``Nested`` description.
    """

    promote: Tuple[str, ...] = IDENTITY
    nested: Mapping[str, Nested] = field(default_factory=dict)


HYDRATION_RULES: Dict[Type[Resource], HydrationRule] = {
    App: HydrationRule(
        promote=IDENTITY_AND_AUDIT,
        nested={"space": Nested("space_data", Space)},
    ),
    Space: HydrationRule(
        promote=IDENTITY,
        nested={"organization": Nested("org_data", Organization)},
    ),
    Organization: HydrationRule(promote=IDENTITY),
    Route: HydrationRule(promote=IDENTITY),
}


def register_rule(resource_type: Type[Resource], rule: HydrationRule) -> None:
    """Declare how a resource type is hydrated."""
    for name in rule.promote:
        if name not in _PROMOTABLE:
            raise ValueError(f"{name!r} cannot be promoted from envelope metadata")
    HYDRATION_RULES[resource_type] = rule


def hydrate(envelope: Envelope, resource_type: Type[R], context: Any = None) -> R:
    """Build a ``resource_type`` from ``envelope`` and promote its metadata.

    Embedded envelopes declared in the type's rule are hydrated recursively,
    and ``context`` (usually the owning client) is attached to every
    resource built along the way.

    Raises:
        KeyError: if ``resource_type`` has no hydration rule.
    """
    try:
        rule = HYDRATION_RULES[resource_type]
    except KeyError:
        raise KeyError(f"No hydration rule registered for {resource_type.__name__}") from None

    resource = resource_type.from_dict(envelope.entity)
    for name in rule.promote:
        setattr(resource, name, getattr(envelope, _PROMOTABLE[name]))

    for key, nested in rule.nested.items():
        raw = envelope.entity.get(key)
        if raw is None:
            continue
        if nested.many:
            if not isinstance(raw, list):
                raise TypeError(f"'{key}' must be a list of resources")
            value: Any = [
                hydrate(Envelope.from_dict(item), nested.resource_type, context)
                for item in raw
            ]
        else:
            value = hydrate(Envelope.from_dict(raw), nested.resource_type, context)
        setattr(resource, nested.attribute, value)

    resource._client = context
    return resource
