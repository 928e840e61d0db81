"""Shared fixtures and fakes for the studycard test-suite."""

from __future__ import annotations

import base64
from pathlib import Path
import struct
import sys
from typing import Any, Iterable

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))


def pcm_payload(values: Iterable[int]) -> str:
    """Encode int16 samples as the base64 little-endian PCM the speech model returns."""

    values = list(values)
    raw = struct.pack(f"<{len(values)}h", *values)
    return base64.b64encode(raw).decode("ascii")


def text_response(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def audio_response(payload: str) -> dict[str, Any]:
    return {
        "candidates": [
            {"content": {"parts": [{"inlineData": {"mimeType": "audio/L16;rate=24000", "data": payload}}]}}
        ]
    }


class FakeGeminiClient:
    """Records generateContent calls and replays canned responses."""

    def __init__(self, response: dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.response = response or {}
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_content(self, model, *, contents, generation_config=None):
        self.calls.append(
            {"model": model, "contents": contents, "generation_config": generation_config}
        )
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_gemini() -> FakeGeminiClient:
    return FakeGeminiClient()
