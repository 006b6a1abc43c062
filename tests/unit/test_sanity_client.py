"""Unit tests for the Sanity API client.

These tests use respx to mock HTTP responses, ensuring we never hit
the real Sanity API during unit tests.
"""

import logging

import httpx
import pytest
import respx

from sanity_newsletter.config import Config
from sanity_newsletter.exceptions import SanityAPIError
from sanity_newsletter.models import Newsletter
from sanity_newsletter.sanity_client import SanityClient, build_query

QUERY_URL = "https://qwsgqgyz.api.sanity.io/v2025-01-01/data/query/production"


# --- Fixtures ---


@pytest.fixture
def config() -> Config:
    """Provide a configuration without a token."""
    return Config(
        sanity_project_id="qwsgqgyz",
        sanity_dataset="production",
        sanity_api_version="v2025-01-01",
        sanity_token=None,
    )


@pytest.fixture
def client(config: Config) -> SanityClient:
    return SanityClient(config)


@pytest.fixture
def sample_api_response() -> dict:
    """Sample successful response from the Sanity query API."""
    return {
        "query": "*[_type == \"newsletter\"]",
        "result": [
            {
                "_id": "issue-2",
                "title": "Issue Two",
                "summary": "Second issue",
                "publishDate": "2025-10-01T09:00:00Z",
                "slug": "issue-two",
                "link": None,
            },
            {
                "_id": "issue-1",
                "title": "Issue One",
                "summary": None,
                "publishDate": "2025-09-03T00:00:00Z",
                "slug": "issue-one",
                "link": "https://example.com/issue-one.pdf",
            },
        ],
        "ms": 4,
    }


# --- Query Building Tests ---


def test_build_query_requests_limit_newest_first():
    query = build_query(10)

    assert query.startswith('*[_type == "newsletter"] | order(publishDate desc)[0...10]')
    for field in ["_id", "title", "summary", "publishDate", '"slug": slug.current', "link"]:
        assert field in query


@pytest.mark.parametrize("limit", [0, -1, 1.5, "10", True])
def test_build_query_rejects_invalid_limit(limit):
    with pytest.raises(ValueError, match="limit"):
        build_query(limit)  # type: ignore[arg-type]


def test_query_url_is_built_from_config(client: SanityClient):
    assert client.query_url == QUERY_URL


def test_query_url_adds_version_prefix():
    """API versions given as a bare date get the required leading 'v'."""
    client = SanityClient(Config(sanity_api_version="2023-05-03"))

    assert "/v2023-05-03/data/query/" in client.query_url


# --- Successful Query Tests ---


@respx.mock
def test_query_returns_list_of_newsletters(client: SanityClient, sample_api_response: dict):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json=sample_api_response))

    results = client.query(limit=10)

    assert len(results) == 2
    assert all(isinstance(item, Newsletter) for item in results)
    assert results[0].id == "issue-2"
    assert results[1].link == "https://example.com/issue-one.pdf"


@respx.mock
def test_query_preserves_server_order(client: SanityClient):
    """The client must not re-sort what the query returned."""
    response = {
        "result": [
            {"_id": "a", "publishDate": "2020-01-01T00:00:00Z"},
            {"_id": "b", "publishDate": "2025-01-01T00:00:00Z"},
            {"_id": "c", "publishDate": "2022-01-01T00:00:00Z"},
        ]
    }
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json=response))

    results = client.query(limit=10)

    assert [item.id for item in results] == ["a", "b", "c"]


@respx.mock
def test_query_sends_groq_query_parameter(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json={"result": []}))

    client.query(limit=20)

    request = respx.calls.last.request
    assert "[0...20]" in request.url.params["query"]


@respx.mock
def test_query_without_token_sends_no_authorization(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json={"result": []}))

    client.query(limit=10)

    assert "authorization" not in respx.calls.last.request.headers


@respx.mock
def test_query_with_token_sends_bearer_header(config: Config):
    client = SanityClient(config.model_copy(update={"sanity_token": "read-token"}))
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json={"result": []}))

    client.query(limit=10)

    request = respx.calls.last.request
    assert request.headers["Authorization"] == "Bearer read-token"
    assert "read-token" not in str(request.url)


@respx.mock
def test_query_handles_empty_result(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json={"result": []}))

    assert client.query(limit=10) == []


@respx.mock
def test_query_handles_missing_result_key(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json={"ms": 3}))

    assert client.query(limit=10) == []


# --- Error Handling Tests ---


@respx.mock
def test_query_raises_on_server_error(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(SanityAPIError) as exc_info:
        client.query(limit=10)

    assert exc_info.value.status_code == 500


@respx.mock
def test_query_raises_on_unauthorized(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(401, json={"error": "Unauthorized"}))

    with pytest.raises(SanityAPIError) as exc_info:
        client.query(limit=10)

    assert exc_info.value.status_code == 401


@respx.mock
def test_query_raises_on_network_failure(client: SanityClient):
    respx.get(QUERY_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(SanityAPIError) as exc_info:
        client.query(limit=10)

    assert exc_info.value.status_code is None


@respx.mock
def test_query_raises_on_invalid_json(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, text="<html>not json</html>"))

    with pytest.raises(SanityAPIError, match="invalid JSON"):
        client.query(limit=10)


@respx.mock
def test_query_raises_on_unexpected_envelope(client: SanityClient):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json={"result": {"_id": "x"}}))

    with pytest.raises(SanityAPIError):
        client.query(limit=10)


@respx.mock
def test_query_skips_record_without_id(client: SanityClient, caplog):
    """One bad record must not hide the valid ones around it."""
    response = {"result": [{"_id": "a", "title": "Good"}, {"title": "no id"}, {"_id": "b"}]}
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json=response))

    with caplog.at_level(logging.WARNING, logger="sanity_newsletter.sanity_client"):
        results = client.query(limit=10)

    assert [item.id for item in results] == ["a", "b"]
    assert "Skipping malformed newsletter record" in caplog.text


@respx.mock
def test_fetch_newsletters_keeps_valid_records_next_to_bad_ones(client: SanityClient):
    response = {"result": [{"_id": "a", "title": "Good"}, {"_id": "b", "title": 42}, "not a record"]}
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json=response))

    results = client.fetch_newsletters()

    assert [item.id for item in results] == ["a"]
    assert results[0].title == "Good"


@respx.mock
@pytest.mark.parametrize("status_code", [202, 204])
def test_query_accepts_other_2xx(client: SanityClient, status_code):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(status_code, json={"result": [{"_id": "a"}]}))

    assert [item.id for item in client.query(limit=10)] == ["a"]


@respx.mock
@pytest.mark.parametrize("status_code", [301, 304])
def test_query_raises_on_non_success_status(client: SanityClient, status_code):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(status_code, json={"result": [{"_id": "a"}]}))

    with pytest.raises(SanityAPIError) as exc_info:
        client.query(limit=10)

    assert exc_info.value.status_code == status_code


# --- Fail-soft Fetch Tests ---


@respx.mock
def test_fetch_newsletters_returns_records(client: SanityClient, sample_api_response: dict):
    respx.get(QUERY_URL).mock(return_value=httpx.Response(200, json=sample_api_response))

    results = client.fetch_newsletters()

    assert [item.id for item in results] == ["issue-2", "issue-1"]
    assert "[0...10]" in respx.calls.last.request.url.params["query"]


@respx.mock
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, text="unavailable"),
        httpx.Response(404, json={"error": "not found"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json=["not", "an", "envelope"]),
    ],
)
def test_fetch_newsletters_returns_empty_list_on_failure(client: SanityClient, response, caplog):
    respx.get(QUERY_URL).mock(return_value=response)

    with caplog.at_level(logging.ERROR, logger="sanity_newsletter.sanity_client"):
        results = client.fetch_newsletters()

    assert results == []
    assert "Error fetching newsletters" in caplog.text


@respx.mock
def test_fetch_newsletters_swallows_network_failure(client: SanityClient):
    respx.get(QUERY_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    assert client.fetch_newsletters() == []


@respx.mock
def test_fetch_newsletters_does_not_retry(client: SanityClient):
    route = respx.get(QUERY_URL).mock(return_value=httpx.Response(500))

    client.fetch_newsletters()

    assert route.call_count == 1
