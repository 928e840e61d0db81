"""Direct and relayed image retrieval."""

from __future__ import annotations

import asyncio
from urllib.parse import unquote

import httpx
import pytest

from studycard.services.catalog import ImageReference
from studycard.services.resource_fetcher import (
    DirectTransport,
    RelayTransport,
    ResourceFetcher,
    RetrievalCause,
    RetrievalError,
    TransportAttempt,
    TransportStrategy,
    classify_failure,
)

IMAGE_URL = "https://files.example.com/cards/3.png?rlkey=abc&raw=1"
RELAY_BASE = "https://relay.example/?"


def _fetcher(handler) -> ResourceFetcher:
    return ResourceFetcher(
        [DirectTransport(), RelayTransport(RELAY_BASE)],
        transport=httpx.MockTransport(handler),
    )


def test_direct_fetch_returns_body_without_relay():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.host)
        return httpx.Response(200, content=b"direct-bytes")

    content = asyncio.run(_fetcher(handler).fetch(IMAGE_URL))

    assert content == b"direct-bytes"
    assert seen == ["files.example.com"]


def test_network_failure_falls_back_to_relay():
    relayed: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "files.example.com":
            raise httpx.ConnectError("blocked", request=request)
        relayed.append(str(request.url))
        return httpx.Response(200, content=b"relay-bytes")

    content = asyncio.run(_fetcher(handler).fetch(IMAGE_URL))

    assert content == b"relay-bytes"
    assert len(relayed) == 1
    assert relayed[0].startswith(RELAY_BASE)
    assert unquote(relayed[0][len(RELAY_BASE):]) == IMAGE_URL


def test_non_ok_status_falls_back_to_relay():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "files.example.com":
            return httpx.Response(503)
        return httpx.Response(200, content=b"relay-bytes")

    assert asyncio.run(_fetcher(handler).fetch(IMAGE_URL)) == b"relay-bytes"


def test_relay_url_percent_encodes_original():
    relay = RelayTransport(RELAY_BASE)

    built = relay.build_url("https://a.example/x y.png?a=1&b=2")

    assert built == RELAY_BASE + "https%3A%2F%2Fa.example%2Fx%20y.png%3Fa%3D1%26b%3D2"


def test_both_paths_failing_raises_retrieval_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RetrievalError) as excinfo:
        asyncio.run(_fetcher(handler).fetch(IMAGE_URL))

    error = excinfo.value
    assert error.cause is RetrievalCause.CROSS_ORIGIN
    assert [attempt.strategy for attempt in error.attempts] == ["direct", "relay"]
    message = str(error)
    assert "link is invalid" in message
    assert "not public" in message
    assert "CORS" in message


def test_forbidden_responses_classify_as_not_public():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403)

    with pytest.raises(RetrievalError) as excinfo:
        asyncio.run(_fetcher(handler).fetch(IMAGE_URL))

    assert excinfo.value.cause is RetrievalCause.NOT_PUBLIC
    assert excinfo.value.attempts[0].status_code == 403


def test_malformed_url_classifies_as_invalid_link():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(RetrievalError) as excinfo:
        asyncio.run(_fetcher(handler).fetch("not-a-url"))

    assert excinfo.value.cause is RetrievalCause.INVALID_LINK
    assert excinfo.value.attempts[0].invalid_url


@pytest.mark.parametrize(
    ("attempts", "expected"),
    [
        ([TransportAttempt("direct", "x", status_code=404)], RetrievalCause.INVALID_LINK),
        ([TransportAttempt("direct", "x", status_code=401)], RetrievalCause.NOT_PUBLIC),
        (
            [TransportAttempt("direct", "x"), TransportAttempt("relay", "x", status_code=500)],
            RetrievalCause.CROSS_ORIGIN,
        ),
    ],
)
def test_classify_failure(attempts, expected):
    assert classify_failure(attempts) is expected


def test_every_call_refetches():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, content=b"bytes")

    fetcher = _fetcher(handler)
    asyncio.run(fetcher.fetch(IMAGE_URL))
    asyncio.run(fetcher.fetch(IMAGE_URL))

    assert len(calls) == 2


def test_fetch_reference_prefers_local_file():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("network should not be used")

    reference = ImageReference(id="upload-1", url="blob:local", local_file=b"local-bytes")

    assert asyncio.run(_fetcher(handler).fetch_reference(reference)) == b"local-bytes"


def test_fetcher_requires_a_strategy():
    with pytest.raises(ValueError):
        ResourceFetcher([])


def test_transport_strategy_requires_build_url():
    class Incomplete(TransportStrategy):
        name = "incomplete"

    with pytest.raises(TypeError):
        Incomplete()
