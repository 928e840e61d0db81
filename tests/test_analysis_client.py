"""Card image analysis and vocabulary normalization."""

from __future__ import annotations

import asyncio
import base64
import json

import httpx
import pytest

from conftest import FakeGeminiClient, text_response
from studycard.services.analysis_client import (
    AnalysisError,
    AnalysisResult,
    CardAnalysisService,
    normalize_vocab,
)
from studycard.services.catalog import ImageReference
from studycard.services.gemini_client import GeminiInvocationError
from studycard.services.resource_fetcher import (
    DirectTransport,
    RelayTransport,
    ResourceFetcher,
    RetrievalCause,
    RetrievalError,
)

IMAGE_URL = "https://files.example.com/cards/4.png"
LAYOUT = {"vocab": "①単語", "sentence": "例文です。", "reading": "たんご れいぶんです。"}


def _fetcher(handler) -> ResourceFetcher:
    return ResourceFetcher(
        [DirectTransport(), RelayTransport("https://relay.example/?")],
        transport=httpx.MockTransport(handler),
    )


def _always(content: bytes):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=content)

    return handler


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("①単語", "単語"),
        ("1. 単語", "単語"),
        ("単語", "単語"),
        ("⑳ 単語", "単語"),
        ("  12.単語", "単語"),
        ("単語1", "単語1"),
        ("㉑単語", "㉑単語"),
    ],
)
def test_normalize_vocab(raw, expected):
    assert normalize_vocab(raw) == expected


def test_combined_display_text_is_derived():
    result = AnalysisResult(vocab_text="単語", sentence_text="例文です。", reading_text="たんご")

    assert result.combined_display_text == "単語\n例文です。"


def test_analyze_sends_image_and_schema():
    client = FakeGeminiClient(text_response(json.dumps(LAYOUT, ensure_ascii=False)))
    service = CardAnalysisService(fetcher=_fetcher(_always(b"\xff\xd8jpeg")), client=client, model="vision-model")

    result = asyncio.run(service.analyze(IMAGE_URL))

    assert result.vocab_text == "単語"
    assert result.sentence_text == "例文です。"
    assert result.reading_text == "たんご れいぶんです。"
    assert result.combined_display_text == "単語\n例文です。"

    call = client.calls[0]
    assert call["model"] == "vision-model"
    image_part, text_part = call["contents"][0]["parts"]
    assert image_part["inlineData"]["mimeType"] == "image/jpeg"
    assert base64.b64decode(image_part["inlineData"]["data"]) == b"\xff\xd8jpeg"
    assert "3rd visual paragraph" in text_part["text"]
    config = call["generation_config"]
    assert config["responseMimeType"] == "application/json"
    assert config["responseSchema"]["required"] == ["vocab", "sentence", "reading"]


def test_analyze_uses_relay_bytes_when_direct_fetch_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "files.example.com":
            raise httpx.ConnectError("cors", request=request)
        return httpx.Response(200, content=b"relayed-image")

    client = FakeGeminiClient(text_response(json.dumps(LAYOUT)))
    service = CardAnalysisService(fetcher=_fetcher(handler), client=client)

    result = asyncio.run(service.analyze(IMAGE_URL))

    assert result.vocab_text == "単語"
    sent = client.calls[0]["contents"][0]["parts"][0]["inlineData"]["data"]
    assert base64.b64decode(sent) == b"relayed-image"


def test_analyze_reports_retrieval_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    client = FakeGeminiClient(text_response(json.dumps(LAYOUT)))
    service = CardAnalysisService(fetcher=_fetcher(handler), client=client)

    with pytest.raises(RetrievalError) as excinfo:
        asyncio.run(service.analyze(IMAGE_URL))

    error = excinfo.value
    assert isinstance(error, AnalysisError)
    assert isinstance(error.__cause__, RetrievalError)
    assert error.cause is RetrievalCause.CROSS_ORIGIN
    assert [attempt.strategy for attempt in error.attempts] == ["direct", "relay"]
    assert "CORS" in str(error)
    assert client.calls == []


def test_analyze_without_text_raises():
    client = FakeGeminiClient({"candidates": []})
    service = CardAnalysisService(fetcher=_fetcher(_always(b"img")), client=client)

    with pytest.raises(AnalysisError, match="no response text"):
        asyncio.run(service.analyze(IMAGE_URL))


@pytest.mark.parametrize(
    "reply",
    [
        "not json at all",
        json.dumps({"vocab": "単語", "sentence": "例文"}),
        json.dumps({"vocab": 1, "sentence": "例文", "reading": "れい"}),
    ],
)
def test_analyze_rejects_contract_violations(reply):
    client = FakeGeminiClient(text_response(reply))
    service = CardAnalysisService(fetcher=_fetcher(_always(b"img")), client=client)

    with pytest.raises(AnalysisError):
        asyncio.run(service.analyze(IMAGE_URL))


def test_analyze_accepts_fenced_json():
    reply = "```json\n" + json.dumps(LAYOUT) + "\n```"
    client = FakeGeminiClient(text_response(reply))
    service = CardAnalysisService(fetcher=_fetcher(_always(b"img")), client=client)

    assert asyncio.run(service.analyze(IMAGE_URL)).vocab_text == "単語"


def test_missing_paragraph_is_returned_verbatim():
    layout = {"vocab": "単語", "sentence": "", "reading": "たんご"}
    client = FakeGeminiClient(text_response(json.dumps(layout)))
    service = CardAnalysisService(fetcher=_fetcher(_always(b"img")), client=client)

    result = asyncio.run(service.analyze(IMAGE_URL))

    assert result.sentence_text == ""
    assert result.combined_display_text == "単語\n"


def test_service_failure_becomes_analysis_error():
    client = FakeGeminiClient(error=GeminiInvocationError("HTTP 500"))
    service = CardAnalysisService(fetcher=_fetcher(_always(b"img")), client=client)

    with pytest.raises(AnalysisError) as excinfo:
        asyncio.run(service.analyze(IMAGE_URL))

    assert not isinstance(excinfo.value, RetrievalError)


def test_analyze_image_bytes_skips_fetching():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("no fetch expected")

    client = FakeGeminiClient(text_response(json.dumps(LAYOUT)))
    service = CardAnalysisService(fetcher=_fetcher(handler), client=client)

    result = asyncio.run(service.analyze_image_bytes(b"png-bytes", "image/png"))

    assert result.vocab_text == "単語"
    assert client.calls[0]["contents"][0]["parts"][0]["inlineData"]["mimeType"] == "image/png"


def test_analyze_reference_uses_local_bytes_without_fetching():
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("network should not be used")

    client = FakeGeminiClient(text_response(json.dumps(LAYOUT)))
    service = CardAnalysisService(fetcher=_fetcher(handler), client=client)
    reference = ImageReference(id="upload-1", url="blob:local", local_file=b"local-image")

    result = asyncio.run(service.analyze_reference(reference))

    assert result.vocab_text == "単語"
    sent = client.calls[0]["contents"][0]["parts"][0]["inlineData"]["data"]
    assert base64.b64decode(sent) == b"local-image"


def test_analyze_reference_fetches_catalog_url():
    fetched: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        fetched.append(str(request.url))
        return httpx.Response(200, content=b"catalog-image")

    client = FakeGeminiClient(text_response(json.dumps(LAYOUT)))
    service = CardAnalysisService(fetcher=_fetcher(handler), client=client)

    asyncio.run(service.analyze_reference(ImageReference(id="img-0", url=IMAGE_URL)))

    assert fetched == [IMAGE_URL]
    sent = client.calls[0]["contents"][0]["parts"][0]["inlineData"]["data"]
    assert base64.b64decode(sent) == b"catalog-image"


def test_analyze_reference_reports_retrieval_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403)

    client = FakeGeminiClient(text_response(json.dumps(LAYOUT)))
    service = CardAnalysisService(fetcher=_fetcher(handler), client=client)

    with pytest.raises(AnalysisError) as excinfo:
        asyncio.run(service.analyze_reference(ImageReference(id="img-0", url=IMAGE_URL)))

    assert isinstance(excinfo.value, RetrievalError)
    assert excinfo.value.cause is RetrievalCause.NOT_PUBLIC
    assert client.calls == []
