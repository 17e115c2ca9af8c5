"""Decoders for the timestamp encodings found in Cloud Foundry API payloads.

The API is not consistent about how it encodes instants. Which decoder
applies is a property of the field being read, never of its content:

* ``EpochSecondsTimestamp``: seconds since the Unix epoch, sent as a bare
  JSON number or a numeric string (e.g. app instance ``since``).
* ``FreeFormTimestamp``: a date string in one of several formats emitted by
  different API versions (e.g. metadata ``created_at``, stats ``usage.time``).

Both decoders return timezone-aware ``datetime`` objects.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Tuple, Type, Union

from .exceptions import MalformedTimestamp, UnrecognizedTimestampFormat

_RFC3339 = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)
_RFC3339_NANO = re.compile(
    r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})\.(\d{1,9})(Z|[+-]\d{2}:\d{2})"
)
_NUMERIC_ZONE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4}")
_NAMED_ZONE = re.compile(r"(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}) ([A-Z]{3,5})")
_EPOCH_SECONDS = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_UTC_NAMES = {"UTC", "GMT", "Z"}


def _from_parts(base: str, fraction: Optional[str], zone: str) -> datetime:
    # datetime stops at microseconds
    micros = (fraction or "")[:6].ljust(6, "0")
    return datetime.strptime(f"{base}.{micros}{zone}", "%Y-%m-%dT%H:%M:%S.%f%z")


def _parse_rfc3339(value: str) -> Optional[datetime]:
    match = _RFC3339.fullmatch(value)
    if not match:
        return None
    return _from_parts(*match.groups())


def _parse_rfc3339_nano(value: str) -> Optional[datetime]:
    match = _RFC3339_NANO.fullmatch(value)
    if not match:
        return None
    return _from_parts(*match.groups())


def _parse_numeric_zone(value: str) -> Optional[datetime]:
    if not _NUMERIC_ZONE.fullmatch(value):
        return None
    return datetime.strptime(value, "%Y-%m-%d %H:%M:%S %z")


def _parse_named_zone(value: str) -> Optional[datetime]:
    match = _NAMED_ZONE.fullmatch(value)
    if not match:
        return None
    base, name = match.groups()
    parsed = datetime.strptime(base, "%Y-%m-%d %H:%M:%S")
    # Abbreviations other than UTC/GMT are ambiguous; keep the name at zero offset.
    tz = timezone.utc if name in _UTC_NAMES else timezone(timedelta(0), name)
    return parsed.replace(tzinfo=tz)


#: Ordered list of free-form formats. The order is part of the wire contract.
FREE_FORM_FORMATS: Tuple[Tuple[str, Callable[[str], Optional[datetime]]], ...] = (
    ("RFC3339", _parse_rfc3339),
    ("RFC3339Nano", _parse_rfc3339_nano),
    ("%Y-%m-%d %H:%M:%S %z", _parse_numeric_zone),
    ("%Y-%m-%d %H:%M:%S %Z", _parse_named_zone),
)


class EpochSecondsTimestamp:
    """Seconds since the Unix epoch, truncated to whole seconds."""

    kind = "epoch-seconds"

    @staticmethod
    def decode(raw: Any) -> datetime:
        """Decode a JSON number or numeric string.

        Parameters:
            raw: The JSON scalar as produced by ``json.loads``.

        Returns:
            A UTC ``datetime``; sub-second precision is discarded.

        Raises:
            MalformedTimestamp: if ``raw`` is not numeric.
        """
        if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
            raise MalformedTimestamp(raw)
        # float() also takes underscores and surrounding whitespace
        if isinstance(raw, str) and not _EPOCH_SECONDS.fullmatch(raw):
            raise MalformedTimestamp(raw)
        try:
            seconds = float(raw)
        except ValueError as exc:
            raise MalformedTimestamp(raw) from exc
        if not math.isfinite(seconds):
            raise MalformedTimestamp(raw)
        try:
            return datetime.fromtimestamp(int(seconds), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise MalformedTimestamp(raw) from exc


class FreeFormTimestamp:
    """A date string in one of ``FREE_FORM_FORMATS``."""

    kind = "free-form"

    @staticmethod
    def decode(raw: Any) -> datetime:
        """Decode a date string, trying each known format in order.

        Raises:
            MalformedTimestamp: if ``raw`` is not a string.
            UnrecognizedTimestampFormat: if no format matches.
        """
        if not isinstance(raw, str):
            raise MalformedTimestamp(raw)
        for _, parser in FREE_FORM_FORMATS:
            try:
                value = parser(raw)
            except ValueError:
                # matched the shape but not the calendar (e.g. month 13)
                continue
            if value is not None:
                return value
        raise UnrecognizedTimestampFormat(raw, [name for name, _ in FREE_FORM_FORMATS])


TimestampKind = Union[Type[EpochSecondsTimestamp], Type[FreeFormTimestamp]]


def decode_optional(kind: TimestampKind, raw: Any) -> Optional[datetime]:
    """Decode ``raw`` with ``kind``, mapping ``None`` and ``""`` to ``None``."""
    if raw is None or raw == "":
        return None
    return kind.decode(raw)


def encode(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp as RFC3339 for ``to_dict`` output."""
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")
