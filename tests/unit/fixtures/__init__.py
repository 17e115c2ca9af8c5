"""Test fixture utilities for loading recorded API payloads.

- `pages/` - v2 collection pages and single-object responses as JSON

Usage:
    from fixtures import FakeExecutor, load_page_fixture

    def test_apps_page():
        executor = FakeExecutor()
        executor.add("/v2/apps", load_page_fixture("apps_page_2"))
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from cfaccess import RawResponse, TransportError

FIXTURES_DIR = Path(__file__).parent


def _resolve_fixture_path(directory: Path, name: str) -> Path:
    """Resolve a fixture name, with or without ``.json``, to a full path."""
    if not name.endswith(".json"):
        name = f"{name}.json"
    path = directory / name
    if not path.exists():
        raise FileNotFoundError(f"Fixture not found: {path}")
    return path


def load_page_fixture(name: str) -> Any:
    """Load a payload fixture by name.

    Args:
        name: Fixture name, e.g. "apps_page_1".

    Returns:
        The parsed JSON document.

    Raises:
        FileNotFoundError: If the fixture doesn't exist.
    """
    path = _resolve_fixture_path(FIXTURES_DIR / "pages", name)
    with open(path) as f:
        return json.load(f)


def page_fixture_bytes(name: str) -> bytes:
    """Return a payload fixture as a raw response body."""
    return _resolve_fixture_path(FIXTURES_DIR / "pages", name).read_bytes()


def make_page(guids, next_url=None, total_pages=1):
    """Build a minimal v2 collection page of route resources."""
    return {
        "total_results": len(guids),
        "total_pages": total_pages,
        "next_url": next_url,
        "resources": [
            {
                "metadata": {
                    "guid": guid,
                    "url": f"/v2/routes/{guid}",
                    "created_at": "2016-06-08T16:41:44Z",
                    "updated_at": None,
                },
                "entity": {"host": guid, "domain_guid": "d-guid"},
            }
            for guid in guids
        ],
    }


class FakeExecutor:
    """In-memory ``RequestExecutor`` keyed by URL.

    Each URL maps to a ``RawResponse`` or to an exception instance that is
    raised when the URL is requested. Every call is recorded.
    """

    def __init__(self, routes: Optional[Dict[str, Union[RawResponse, Exception]]] = None):
        self.routes = dict(routes or {})
        self.calls: List[Tuple[str, str, Optional[bytes]]] = []

    def add(self, url: str, payload: Any, status_code: int = 200) -> None:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        self.routes[url] = RawResponse(status_code=status_code, body=body)

    def fail(self, url: str) -> None:
        self.routes[url] = TransportError("connection refused", url=url)

    def execute(self, method: str, url: str, body: Optional[bytes] = None) -> RawResponse:
        self.calls.append((method, url, body))
        outcome = self.routes.get(url)
        if outcome is None:
            raise TransportError(f"no route for {url}", url=url)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def urls(self) -> List[str]:
        return [url for _, url, _ in self.calls]
