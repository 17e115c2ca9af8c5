"""Exceptions raised by cfaccess."""

from __future__ import annotations

from typing import Optional, Sequence

_BODY_PREVIEW = 200


def _preview(body: Optional[bytes]) -> str:
    if not body:
        return ""
    text = body[:_BODY_PREVIEW].decode("utf-8", errors="replace")
    if len(body) > _BODY_PREVIEW:
        text += "..."
    return text


class CFAccessError(Exception):
    """Base class for every error raised by this package."""


class RequestError(CFAccessError):
    """An HTTP exchange with the API did not succeed.

    Attributes:
        url: The URL that was requested.
        page_index: Zero-based page index for paginated fetches, ``None`` otherwise.
        status_code: HTTP status, ``None`` when no response was received.
        body: Raw response body, if any.
    """

    def __init__(
        self,
        message: str,
        url: str,
        page_index: Optional[int] = None,
        status_code: Optional[int] = None,
        body: Optional[bytes] = None,
    ) -> None:
        self.url = url
        self.page_index = page_index
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.args[0], f"url={self.url}"]
        if self.page_index is not None:
            parts.append(f"page={self.page_index}")
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.body:
            parts.append(f"body={_preview(self.body)!r}")
        return " ".join(parts)


class TransportError(RequestError):
    """The executor could not complete the exchange (DNS, connection, timeout)."""


class DecodeError(CFAccessError):
    """A response body did not match the expected shape."""

    def __init__(
        self,
        url: str,
        page_index: Optional[int],
        body: Optional[bytes],
        cause: BaseException,
    ) -> None:
        self.url = url
        self.page_index = page_index
        self.body = body
        self.cause = cause
        location = f"url={url}"
        if page_index is not None:
            location += f" page={page_index}"
        super().__init__(f"Error decoding response ({location}): {cause}")


class TimestampError(CFAccessError, ValueError):
    """A timestamp field could not be decoded."""

    def __init__(self, message: str, value: object) -> None:
        self.value = value
        super().__init__(message)


class MalformedTimestamp(TimestampError):
    """The raw value is not usable as a timestamp of the expected kind."""

    def __init__(self, value: object) -> None:
        super().__init__(f"{value!r} is not a valid timestamp", value)


class UnrecognizedTimestampFormat(TimestampError):
    """A date string matched none of the known formats."""

    def __init__(self, value: str, formats: Sequence[str]) -> None:
        self.formats = tuple(formats)
        super().__init__(
            f"{value} was not in any of the expected date formats {list(self.formats)}",
            value,
        )


class AppNotFound(CFAccessError, LookupError):
    """No application matched a lookup by name."""
