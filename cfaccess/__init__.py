"""cfaccess: a Python client for the Cloud Foundry API.

Quick Start:
    ```python
    from cfaccess import Client, ClientConfig

    client = Client(ClientConfig(api_address="https://api.example.com", token="..."))

    # Every app, following next_url until the server stops
    apps = client.list_apps()

    # Only the first two pages
    some = client.list_apps_by_query_with_limits({"q": "state:STARTED"}, 2)

    # Follow-up fetch through the app's owning client
    space = apps[0].space()
    ```

Key Features:
    - **Pagination**: cursor (``next_url``) walking with an optional page bound
    - **Hydration**: envelope metadata promoted onto typed resources, nested included
    - **Timestamps**: epoch-seconds and the free-form date formats of older API versions
"""

import logging
from importlib.metadata import version

from ._core._models import PageCursor, decode_page
from ._core._request import HttpExecutor, RawResponse, RequestExecutor
from .client import Client, encode_query
from .config import ClientConfig
from .envelope import HYDRATION_RULES, Envelope, HydrationRule, Nested, hydrate, register_rule
from .exceptions import (
    AppNotFound,
    CFAccessError,
    DecodeError,
    MalformedTimestamp,
    RequestError,
    TimestampError,
    TransportError,
    UnrecognizedTimestampFormat,
)
from .models import App, AppInstance, AppStats, MappedRoute, Organization, Route, Space
from .pagination import CollectionFetcher, Done, Failed, Fetching
from .timestamps import FREE_FORM_FORMATS, EpochSecondsTimestamp, FreeFormTimestamp

logger = logging.getLogger(__name__)

__all__ = [
    # client.py
    "Client",
    "ClientConfig",
    "encode_query",
    # transport
    "HttpExecutor",
    "RawResponse",
    "RequestExecutor",
    # pagination.py
    "CollectionFetcher",
    "Fetching",
    "Done",
    "Failed",
    "PageCursor",
    "decode_page",
    # envelope.py
    "Envelope",
    "HydrationRule",
    "Nested",
    "HYDRATION_RULES",
    "hydrate",
    "register_rule",
    # timestamps.py
    "EpochSecondsTimestamp",
    "FreeFormTimestamp",
    "FREE_FORM_FORMATS",
    # models
    "App",
    "AppInstance",
    "AppStats",
    "MappedRoute",
    "Organization",
    "Route",
    "Space",
    # exceptions.py
    "CFAccessError",
    "RequestError",
    "TransportError",
    "DecodeError",
    "TimestampError",
    "MalformedTimestamp",
    "UnrecognizedTimestampFormat",
    "AppNotFound",
]

__version__ = version("cfaccess")
