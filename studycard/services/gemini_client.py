"""Thin Gemini REST client wrapper for generateContent invocations."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from studycard.config.settings import settings

logger = logging.getLogger(__name__)


class GeminiInvocationError(RuntimeError):
    """Raised when the Gemini call fails at the transport or HTTP level."""


def _first_parts(response: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    candidates = response.get("candidates") or []
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    return list(content.get("parts") or [])


def extract_text(response: Mapping[str, Any]) -> str | None:
    """Concatenate the text parts of the first candidate."""

    texts = [part.get("text", "") for part in _first_parts(response) if part.get("text")]
    joined = "".join(texts).strip()
    return joined or None


def extract_inline_data(response: Mapping[str, Any]) -> str | None:
    """Return the base64 payload of the first candidate's first part."""

    parts = _first_parts(response)
    if not parts:
        return None
    inline = parts[0].get("inlineData") or parts[0].get("inline_data") or {}
    return inline.get("data") or None


class GeminiClient:
    """Invoke Gemini models with standard configuration."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if api_key is None and settings.gemini.api_key is not None:
            api_key = settings.gemini.api_key.get_secret_value()
        if not api_key:
            logger.warning("GEMINI_API_KEY is not configured; model calls will fail")
        self._api_key = api_key
        self._base_url = (base_url or settings.gemini.base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.gemini.timeout_seconds
        self._transport = transport

    async def generate_content(
        self,
        model: str,
        *,
        contents: list[dict[str, Any]],
        generation_config: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """POST ``models/{model}:generateContent`` and return the decoded body."""

        payload: dict[str, Any] = {"contents": contents}
        if generation_config:
            payload["generationConfig"] = dict(generation_config)

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-goog-api-key"] = self._api_key

        url = f"{self._base_url}/models/{model}:generateContent"
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise GeminiInvocationError(
                    f"Gemini returned HTTP {exc.response.status_code} for {model}"
                ) from exc
            except httpx.HTTPError as exc:
                raise GeminiInvocationError(f"Unable to reach Gemini: {exc!r}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise GeminiInvocationError("Gemini returned a non-JSON body") from exc


__all__ = [
    "GeminiClient",
    "GeminiInvocationError",
    "extract_inline_data",
    "extract_text",
]
