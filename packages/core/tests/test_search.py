"""Tests for the paginated search fetcher."""

from unittest.mock import MagicMock

import pytest
import requests

from prdigest_core.config import ReportConfig
from prdigest_core.gh.errors import RateLimitError, SearchError
from prdigest_core.gh.search import build_search_query, build_session, search_pull_requests

NEXT_LINK = {"next": {"url": "https://api.github.com/search/issues?page=2", "rel": "next"}}


def _make_config(**overrides):
    values = dict(author="octocat", org="acme", token="tok", start_date="2024-04-01", end_date="2025-04-01")
    values.update(overrides)
    return ReportConfig(**values)


def _raw_item(number, repo="repoA"):
    return {
        "number": number,
        "title": f"PR {number}",
        "user": {"login": "octocat"},
        "created_at": "2024-05-01T10:00:00Z",
        "html_url": f"https://github.com/acme/{repo}/pull/{number}",
        "repository_url": f"https://api.github.com/repos/acme/{repo}",
        "pull_request": {"merged_at": None},
    }


def _page(items, has_next=False, status=200, headers=None):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.reason = "OK" if response.ok else "Forbidden"
    response.text = ""
    response.headers = headers or {}
    response.links = NEXT_LINK if has_next else {}
    response.json.return_value = {"items": items}
    return response


def _session(*responses):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return session


def test_query_encodes_author_org_and_date_range():
    query = build_search_query(_make_config())
    assert query == "is:pr author:octocat org:acme created:2024-04-01..2025-04-01"


def test_session_sends_bearer_token_and_user_agent():
    session = build_session("abc")
    assert session.headers["Authorization"] == "Bearer abc"
    assert session.headers["User-Agent"] == "prdigest"


def test_request_parameters():
    session = _session(_page([_raw_item(1)]))
    search_pull_requests("is:pr", _make_config(), session=session)

    args, kwargs = session.get.call_args
    assert args[0] == "https://api.github.com/search/issues"
    assert kwargs["params"] == {"q": "is:pr", "per_page": 100, "page": 1}


class TestPagination:
    def test_pages_concatenated_in_api_order(self):
        session = _session(
            _page([_raw_item(1), _raw_item(2)], has_next=True),
            _page([_raw_item(3)], has_next=False),
        )
        items = search_pull_requests("q", _make_config(), session=session)
        assert [i.number for i in items] == [1, 2, 3]
        assert [c.kwargs["params"]["page"] for c in session.get.call_args_list] == [1, 2]

    def test_stops_without_next_link(self):
        session = _session(_page([_raw_item(1)], has_next=False))
        items = search_pull_requests("q", _make_config(), session=session)
        assert len(items) == 1
        assert session.get.call_count == 1

    def test_stops_at_empty_page_even_with_next_link(self):
        session = _session(
            _page([_raw_item(1)], has_next=True),
            _page([], has_next=True),
        )
        items = search_pull_requests("q", _make_config(), session=session)
        assert len(items) == 1
        assert session.get.call_count == 2

    def test_empty_first_page_returns_nothing(self):
        session = _session(_page([]))
        assert search_pull_requests("q", _make_config(), session=session) == []
        assert session.get.call_count == 1

    def test_page_ceiling_truncates_with_warning(self, caplog):
        pages = [_page([_raw_item(n)], has_next=True) for n in range(1, 4)]
        session = _session(*pages)

        with caplog.at_level("WARNING"):
            items = search_pull_requests("q", _make_config(max_pages=3), session=session)

        assert [i.number for i in items] == [1, 2, 3]
        assert session.get.call_count == 3
        assert "page limit" in caplog.text

    def test_no_warning_when_last_page_coincides_with_ceiling(self, caplog):
        session = _session(_page([_raw_item(1)], has_next=True), _page([_raw_item(2)], has_next=False))

        with caplog.at_level("WARNING"):
            search_pull_requests("q", _make_config(max_pages=2), session=session)

        assert "page limit" not in caplog.text


class TestSearchFailures:
    def test_non_success_raises_search_error(self):
        response = _page([], status=422)
        response.text = '{"message": "Validation Failed"}'
        session = _session(response)

        with pytest.raises(SearchError) as exc:
            search_pull_requests("q", _make_config(), session=session)
        assert exc.value.status == 422
        assert "Validation Failed" in str(exc.value)

    def test_failure_on_later_page_aborts(self):
        session = _session(_page([_raw_item(1)], has_next=True), _page([], status=500))
        with pytest.raises(SearchError):
            search_pull_requests("q", _make_config(), session=session)

    def test_zero_remaining_quota_raises_rate_limit_error(self):
        response = _page([], status=403, headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1717243200"})
        session = _session(response)

        with pytest.raises(RateLimitError) as exc:
            search_pull_requests("q", _make_config(), session=session)
        assert exc.value.status == 403
        assert exc.value.reset_at is not None
        assert exc.value.reset_at.year == 2024

    def test_403_with_quota_left_is_plain_search_error(self):
        response = _page([], status=403, headers={"X-RateLimit-Remaining": "42"})
        session = _session(response)

        with pytest.raises(SearchError) as exc:
            search_pull_requests("q", _make_config(), session=session)
        assert not isinstance(exc.value, RateLimitError)

    def test_network_error_becomes_search_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(SearchError) as exc:
            search_pull_requests("q", _make_config(), session=session)
        assert "page 1" in str(exc.value)
        assert isinstance(exc.value.__cause__, requests.ConnectionError)

    def test_non_json_body_becomes_search_error(self):
        response = _page([])
        response.json.side_effect = ValueError("Expecting value")
        session = _session(response)

        with pytest.raises(SearchError) as exc:
            search_pull_requests("q", _make_config(), session=session)
        assert "Malformed" in str(exc.value)

    def test_malformed_timestamp_becomes_search_error(self):
        raw = _raw_item(1)
        raw["created_at"] = "last tuesday"
        session = _session(_page([raw]))

        with pytest.raises(SearchError):
            search_pull_requests("q", _make_config(), session=session)
