"""Client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ._core._validators import parse_bool, require_non_empty

DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "cfaccess"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for a Cloud Foundry API endpoint.

    Attributes:
        api_address: Base URL of the Cloud Controller, e.g. ``https://api.example.com``.
        token: Bearer token sent with every request, if any.
        timeout: Per-request timeout in seconds.
        skip_ssl_validation: Disable TLS certificate verification.
        user_agent: Value of the ``User-Agent`` header.
    """

    api_address: str
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    skip_ssl_validation: bool = False
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        # normalise once so URL joins never produce "//"
        object.__setattr__(self, "api_address", self.api_address.rstrip("/"))

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"ClientConfig(api_address={self.api_address!r}, token={token!r}, "
            f"timeout={self.timeout!r}, skip_ssl_validation={self.skip_ssl_validation!r})"
        )

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
        """Build a config from ``CF_*`` environment variables.

        Reads ``CF_API`` (required), ``CF_TOKEN``, ``CF_TIMEOUT`` and
        ``CF_SKIP_SSL_VALIDATION``.

        Raises:
            ValueError: if ``CF_API`` is missing or a value cannot be parsed.
        """
        env = os.environ if environ is None else environ
        require_non_empty(env, ["CF_API"])
        return cls(
            api_address=env["CF_API"],
            token=env.get("CF_TOKEN") or None,
            timeout=float(env.get("CF_TIMEOUT", DEFAULT_TIMEOUT)),
            skip_ssl_validation=parse_bool(env.get("CF_SKIP_SSL_VALIDATION", "false")),
        )
