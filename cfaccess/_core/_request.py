"""Core HTTP request executor used throughout cfaccess."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Protocol
import requests

from ..config import ClientConfig
from ..exceptions import TransportError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawResponse:
    """Status and body of one completed HTTP exchange."""

    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class RequestExecutor(Protocol):
    """Anything able to perform one HTTP exchange.

    Implementations must be safe to share between threads and must raise
    ``TransportError`` when no response could be obtained.
    """

    def execute(
        self, method: str, url: str, body: Optional[bytes] = None
    ) -> RawResponse: ...


class HttpExecutor:
    """``RequestExecutor`` backed by ``requests``.

    Each thread gets its own ``requests.Session`` so one executor can serve
    concurrent fetches.
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self.thread_locals = threading.local()

    def _session(self) -> requests.Session:
        if not hasattr(self.thread_locals, "session"):
            session = requests.Session()
            session.headers.update(
                {
                    "Accept": "application/json",
                    "User-Agent": self.config.user_agent,
                }
            )
            if self.config.token:
                session.headers["Authorization"] = f"bearer {self.config.token}"
            session.verify = not self.config.skip_ssl_validation
            self.thread_locals.session = session
        return self.thread_locals.session

    def resolve(self, url: str) -> str:
        """Resolve an API path such as a ``next_url`` against the API address."""
        if url.startswith(("http://", "https://")):
            return url
        if not url.startswith("/"):
            url = "/" + url
        return self.config.api_address + url

    def execute(
        self, method: str, url: str, body: Optional[bytes] = None
    ) -> RawResponse:
        """Perform one request without retries.

        Raises:
            TransportError: if ``requests`` could not complete the exchange.
        """
        full_url = self.resolve(url)
        headers = {"Content-Type": "application/json"} if body is not None else {}
        log.debug("%s %s", method, full_url)
        try:
            resp = self._session().request(
                method=method,
                url=full_url,
                data=body,
                headers=headers,
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Error requesting {method} {url}", url=url) from exc
        log.debug("%s %s -> %s", method, full_url, resp.status_code)
        return RawResponse(status_code=resp.status_code, body=resp.content)
