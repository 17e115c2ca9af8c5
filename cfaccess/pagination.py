"""Cursor-driven collection fetching.

A fetch is a small state machine::

    Fetching(url, pages) --page has next_url, bound not reached--> Fetching(next_url, pages + 1)
    Fetching(url, pages) --empty next_url or bound reached-------> Done(results)
    Fetching(url, pages) --transport, status or decode failure---> Failed(error)

Pages are requested strictly one after another since each URL is only
known once the previous page has been read. All state (accumulator, cursor,
page counter) lives inside a single ``run`` call, so one fetcher can be used
from several threads as long as its executor allows it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Type, TypeVar, Union

from ._core._models import PageCursor, decode_page
from ._core._request import RequestExecutor
from .envelope import HYDRATION_RULES, hydrate
from .exceptions import CFAccessError, DecodeError, RequestError
from .models import Resource

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Resource)


@dataclass(frozen=True)
class Fetching:
    """The next page to request and how many pages have been consumed so far."""

    url: str
    pages: int = 0


@dataclass(frozen=True)
class Done(Generic[T]):
    """Terminal success: every page up to the end or the page bound."""

    results: List[T] = field(default_factory=list)


@dataclass(frozen=True)
class Failed:
    """Terminal failure; results gathered before the error are discarded."""

    error: CFAccessError


State = Union[Fetching, Done, Failed]


def advance(next_cursor: str, pages: int, page_bound: int) -> Optional[Fetching]:
    """Return the next ``Fetching`` state, or ``None`` when the fetch is over.

    Parameters:
        next_cursor: ``next_url`` of the page just consumed.
        pages: Pages consumed before that page.
        page_bound: Maximum pages to fetch; ``<= 0`` means no bound.
    """
    if not next_cursor:
        return None
    pages += 1
    if page_bound > 0 and pages >= page_bound:
        return None
    return Fetching(next_cursor, pages)


class CollectionFetcher(Generic[T]):
    """Fetch a paginated v2 collection and hydrate every item.

    Examples:
        >>> fetcher = CollectionFetcher(executor, Route, context=client)  # doctest: +SKIP
        >>> routes = fetcher.fetch("/v2/routes")  # doctest: +SKIP
    """

    def __init__(
        self,
        executor: RequestExecutor,
        resource_type: Type[T],
        page_bound: int = -1,
        context: Any = None,
    ) -> None:
        """Initialize the fetcher.

        Parameters:
            executor: Performs the HTTP exchanges.
            resource_type: Resource each item is hydrated into; must have a hydration rule.
            page_bound: Maximum number of pages; ``<= 0`` fetches until the server stops.
            context: Back-reference attached to every hydrated resource.
        """
        if resource_type not in HYDRATION_RULES:
            raise KeyError(f"No hydration rule registered for {resource_type.__name__}")
        self.executor = executor
        self.resource_type = resource_type
        self.page_bound = page_bound
        self.context = context

    def _read_page(self, state: Fetching) -> PageCursor:
        response = self.executor.execute("GET", state.url)
        if not response.ok:
            raise RequestError(
                f"Error requesting {self.resource_type.__name__} page",
                url=state.url,
                page_index=state.pages,
                status_code=response.status_code,
                body=response.body,
            )
        return decode_page(response.body, state.url, state.pages)

    def _hydrate_page(self, page: PageCursor, state: Fetching) -> List[T]:
        try:
            return [hydrate(item, self.resource_type, self.context) for item in page.items]
        except (TypeError, ValueError) as exc:
            raise DecodeError(state.url, state.pages, None, exc) from exc

    def step(self, state: Fetching, accumulator: List[T]) -> State:
        """Consume one page, appending its resources to ``accumulator``."""
        try:
            page = self._read_page(state)
            resources = self._hydrate_page(page, state)
        except CFAccessError as exc:
            return Failed(exc)

        accumulator.extend(resources)
        logger.debug(
            "Fetched page %s of %s (%s items) from %s",
            state.pages + 1,
            page.total_pages,
            len(resources),
            state.url,
        )
        next_state = advance(page.next_cursor, state.pages, self.page_bound)
        if next_state is None:
            return Done(accumulator)
        return next_state

    def run(self, start_url: str) -> Union[Done, Failed]:
        """Drive the state machine from ``start_url`` to a terminal state."""
        accumulator: List[T] = []
        state: State = Fetching(start_url, 0)
        while isinstance(state, Fetching):
            state = self.step(state, accumulator)
        return state

    def fetch(self, start_url: str) -> List[T]:
        """Return every hydrated resource of the collection, in server order.

        Raises:
            RequestError: the page request failed (``TransportError`` when no response).
            DecodeError: a page body could not be decoded.
        """
        outcome = self.run(start_url)
        if isinstance(outcome, Failed):
            raise outcome.error
        return outcome.results
