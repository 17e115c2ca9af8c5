"""Dataclass plumbing shared by the resource models.

Fields are declared with ``wire()`` so each model states how its JSON key
is named, how the raw value is decoded, and whether it is filled in later
by hydration rather than read from the payload.
"""

from __future__ import annotations

import dataclasses
from dataclasses import MISSING, dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from ..timestamps import encode

M = TypeVar("M", bound="Model")


def wire(
    name: Optional[str] = None,
    *,
    default: Any = MISSING,
    default_factory: Any = MISSING,
    decode: Optional[Callable[[Any], Any]] = None,
    nested: bool = False,
    omitempty: bool = False,
) -> Any:
    """Declare a model field.

    Parameters:
        name: JSON key, when it differs from the attribute name.
        decode: Converter applied to non-null raw values.
        nested: The value is an embedded envelope filled in by hydration.
        omitempty: Leave the key out of ``to_dict`` output when falsy.
    """
    metadata = {"json": name, "decode": decode, "nested": nested, "omitempty": omitempty}
    if default_factory is not MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Model):
        return value.to_dict()
    if isinstance(value, datetime):
        return encode(value)
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    return value


@dataclass
class Model:
    """Base for every decoded API object."""

    @classmethod
    def from_dict(cls: Type[M], data: Mapping[str, Any]) -> M:
        """Build an instance from a decoded JSON object.

        Unknown keys are ignored and ``null`` values keep the field default.

        Raises:
            TypeError: if ``data`` is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")
        kwargs: Dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if not f.init or f.metadata.get("nested") or f.metadata.get("serialize") is False:
                continue
            key = f.metadata.get("json") or f.name
            raw = data.get(key)
            if raw is None:
                continue
            decode = f.metadata.get("decode")
            kwargs[f.name] = decode(raw) if decode else raw
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-ready dict; back-references are never included."""
        out: Dict[str, Any] = {}
        for f in dataclasses.fields(self):
            if f.metadata.get("serialize") is False:
                continue
            value = getattr(self, f.name)
            if f.metadata.get("omitempty") and not value:
                continue
            out[f.metadata.get("json") or f.name] = _to_plain(value)
        return out


@dataclass
class Resource(Model):
    """A model that arrives wrapped in a metadata/entity envelope.

    ``_client`` is the owning client, attached during hydration so entity
    methods can issue follow-up requests. It takes no part in equality,
    hashing, ``repr`` or serialization.
    """

    _client: Any = field(
        default=None, repr=False, compare=False, metadata={"serialize": False}
    )
    guid: str = ""

    def _require_client(self) -> Any:
        if self._client is None:
            raise RuntimeError(
                f"{type(self).__name__} {self.guid!r} is not attached to a client"
            )
        return self._client
