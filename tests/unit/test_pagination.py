"""Tests for the cursor pagination state machine."""

import json
import logging
from unittest.mock import Mock

import pytest
from cfaccess import (
    App,
    CollectionFetcher,
    DecodeError,
    Done,
    Failed,
    Fetching,
    RawResponse,
    RequestError,
    Route,
    TimestampError,
    TransportError,
)
from cfaccess.models import Resource
from cfaccess.pagination import advance
from fixtures import FakeExecutor, load_page_fixture, make_page


def three_pages():
    executor = FakeExecutor()
    executor.add("/v2/routes", make_page(["r1", "r2"], "/v2/routes?page=2", 3))
    executor.add("/v2/routes?page=2", make_page(["r3", "r4"], "/v2/routes?page=3", 3))
    executor.add("/v2/routes?page=3", make_page(["r5"], None, 3))
    return executor


class TestAdvance:
    def test_empty_cursor_stops(self):
        assert advance("", 0, -1) is None

    def test_unbounded_continues(self):
        assert advance("/next", 4, -1) == Fetching("/next", 5)
        assert advance("/next", 4, 0) == Fetching("/next", 5)

    def test_bound_reached(self):
        assert advance("/next", 0, 1) is None
        assert advance("/next", 1, 3) == Fetching("/next", 2)
        assert advance("/next", 2, 3) is None


class TestFetch:
    def test_concatenates_pages_in_order(self):
        executor = three_pages()
        routes = CollectionFetcher(executor, Route).fetch("/v2/routes")

        assert [r.guid for r in routes] == ["r1", "r2", "r3", "r4", "r5"]
        assert executor.urls == ["/v2/routes", "/v2/routes?page=2", "/v2/routes?page=3"]
        assert all(method == "GET" for method, _, _ in executor.calls)

    @pytest.mark.parametrize("bound, expected_calls", [(1, 1), (2, 2), (3, 3), (10, 3)])
    def test_page_bound(self, bound, expected_calls):
        executor = three_pages()
        routes = CollectionFetcher(executor, Route, page_bound=bound).fetch("/v2/routes")

        assert len(executor.calls) == expected_calls
        assert len(routes) == min(2 * expected_calls, 5)

    @pytest.mark.parametrize("bound", [0, -1])
    def test_non_positive_bound_means_unbounded(self, bound):
        executor = three_pages()
        routes = CollectionFetcher(executor, Route, page_bound=bound).fetch("/v2/routes")

        assert len(routes) == 5
        assert len(executor.calls) == 3

    def test_empty_collection(self):
        executor = FakeExecutor()
        executor.add("/v2/routes", make_page([]))

        assert CollectionFetcher(executor, Route).fetch("/v2/routes") == []
        assert len(executor.calls) == 1

    def test_context_is_attached(self):
        context = object()
        executor = three_pages()
        routes = CollectionFetcher(executor, Route, context=context).fetch("/v2/routes")

        assert all(r._client is context for r in routes)

    def test_hydrates_apps_from_recorded_pages(self):
        executor = FakeExecutor()
        page_one = load_page_fixture("apps_page_1")
        executor.add("/v2/apps", page_one)
        executor.add(page_one["next_url"], load_page_fixture("apps_page_2"))

        apps = CollectionFetcher(executor, App).fetch("/v2/apps")

        assert [a.guid for a in apps] == ["a1-guid", "a2-guid", "a3-guid"]
        assert apps[0].space_data.org_data.guid == "o1-guid"

    def test_fetcher_can_be_reused(self):
        executor = three_pages()
        fetcher = CollectionFetcher(executor, Route)

        first = fetcher.fetch("/v2/routes")
        second = fetcher.fetch("/v2/routes")

        assert first == second
        assert len(executor.calls) == 6


class TestFailures:
    def test_transport_failure_discards_partial_results(self):
        executor = three_pages()
        executor.fail("/v2/routes?page=2")

        outcome = CollectionFetcher(executor, Route).run("/v2/routes")

        assert isinstance(outcome, Failed)
        assert isinstance(outcome.error, TransportError)
        assert executor.urls == ["/v2/routes", "/v2/routes?page=2"]

    def test_transport_failure_raises(self):
        executor = three_pages()
        executor.fail("/v2/routes?page=2")

        with pytest.raises(TransportError):
            CollectionFetcher(executor, Route).fetch("/v2/routes")
        assert len(executor.calls) == 2

    def test_error_status(self):
        executor = three_pages()
        executor.add("/v2/routes?page=2", {"error_code": "CF-NotAuthorized"}, status_code=403)

        with pytest.raises(RequestError) as exc_info:
            CollectionFetcher(executor, Route).fetch("/v2/routes")

        err = exc_info.value
        assert not isinstance(err, TransportError)
        assert err.status_code == 403
        assert err.page_index == 1
        assert err.url == "/v2/routes?page=2"
        assert b"CF-NotAuthorized" in err.body

    def test_bad_json(self):
        executor = FakeExecutor()
        executor.add("/v2/routes", b"{not json")

        with pytest.raises(DecodeError) as exc_info:
            CollectionFetcher(executor, Route).fetch("/v2/routes")
        assert exc_info.value.page_index == 0

    def test_bad_timestamp_is_a_decode_error(self):
        page = make_page(["r1"])
        page["resources"][0]["metadata"]["created_at"] = "yesterday"
        executor = FakeExecutor()
        executor.add("/v2/routes", page)

        with pytest.raises(DecodeError) as exc_info:
            CollectionFetcher(executor, Route).fetch("/v2/routes")
        assert isinstance(exc_info.value.cause, TimestampError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_bad_nested_field_is_a_decode_error(self):
        page = load_page_fixture("apps_page_2")
        page["resources"][0]["entity"]["space"] = {"metadata": {"guid": "s"}, "entity": []}
        executor = FakeExecutor()
        executor.add("/v2/apps", page)

        with pytest.raises(DecodeError) as exc_info:
            CollectionFetcher(executor, App).fetch("/v2/apps")
        assert isinstance(exc_info.value.cause, TypeError)

    def test_unregistered_type_fails_up_front(self):
        class Unknown(Resource):
            pass

        with pytest.raises(KeyError):
            CollectionFetcher(FakeExecutor(), Unknown)


class TestStateMachine:
    def test_step_moves_to_next_page(self):
        executor = three_pages()
        fetcher = CollectionFetcher(executor, Route)
        acc = []

        state = fetcher.step(Fetching("/v2/routes"), acc)

        assert state == Fetching("/v2/routes?page=2", 1)
        assert [r.guid for r in acc] == ["r1", "r2"]

    def test_run_returns_done(self):
        outcome = CollectionFetcher(three_pages(), Route).run("/v2/routes")

        assert isinstance(outcome, Done)
        assert len(outcome.results) == 5

    def test_logs_each_page(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="cfaccess.pagination"):
            CollectionFetcher(three_pages(), Route).fetch("/v2/routes")

        pages = [r for r in caplog.records if r.name == "cfaccess.pagination"]
        assert len(pages) == 3
        assert "page 1 of 3" in pages[0].getMessage()


def test_with_mock_executor():
    executor = Mock()
    executor.execute.side_effect = [
        RawResponse(200, json.dumps(make_page(["r1"], "/v2/routes?page=2", 2)).encode()),
        RawResponse(200, json.dumps(make_page(["r2"], None, 2)).encode()),
    ]

    routes = CollectionFetcher(executor, Route).fetch("/v2/routes")

    assert [r.guid for r in routes] == ["r1", "r2"]
    assert [c.args for c in executor.execute.call_args_list] == [
        ("GET", "/v2/routes"),
        ("GET", "/v2/routes?page=2"),
    ]
