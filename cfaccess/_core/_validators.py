"""Validation helpers used by the public API."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def require_non_empty(mapping: Mapping[str, Any], keys: Sequence[str]) -> None:
    """Raise ``ValueError`` if any of *keys* are missing or empty in *mapping*."""
    missing = [k for k in keys if not mapping.get(k)]
    if missing:
        raise ValueError(f"Missing required parameters: {', '.join(missing)}")


def require_guid(value: str, name: str = "guid") -> str:
    """Reject empty identifiers before they are interpolated into a URL path."""
    if not value or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    if "/" in value:
        raise ValueError(f"{name} must not contain '/' (got: {value!r})")
    return value


def parse_bool(value: str) -> bool:
    """Parse a boolean flag from an environment variable."""
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean")
