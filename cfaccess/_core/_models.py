"""Page shape shared by every paginated v2 collection."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from ..envelope import Envelope
from ..exceptions import DecodeError


@dataclass(frozen=True)
class PageCursor:
    """Container for one page of a v2 collection response.

    ``next_cursor`` is the server's ``next_url``; an empty string means the
    collection is exhausted.
    """

    items: List[Envelope]
    count: int = 0
    total_pages: int = 0
    next_cursor: str = ""

    @property
    def is_last(self) -> bool:
        return not self.next_cursor

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> PageCursor:
        """Build a cursor from a decoded response object.

        Raises:
            TypeError, ValueError: if the payload is not a collection page.
        """
        if not isinstance(payload, Mapping):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
        resources = payload.get("resources")
        if resources is None:
            resources = []
        if not isinstance(resources, list):
            raise TypeError("'resources' must be a list")
        next_url = payload.get("next_url") or ""
        if not isinstance(next_url, str):
            raise TypeError("'next_url' must be a string")
        return cls(
            items=[Envelope.from_dict(item) for item in resources],
            count=int(payload.get("total_results") or 0),
            total_pages=int(payload.get("total_pages") or 0),
            next_cursor=next_url,
        )


def decode_page(body: bytes, url: str, page_index: Optional[int] = None) -> PageCursor:
    """Decode a raw response body into a ``PageCursor``.

    Raises:
        DecodeError: wrapping the JSON, shape or timestamp error.
    """
    try:
        return PageCursor.from_json(json.loads(body))
    except (TypeError, ValueError) as exc:
        raise DecodeError(url, page_index, body, exc) from exc
