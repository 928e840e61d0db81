"""Gemini text-to-speech returning raw base64 PCM."""

from __future__ import annotations

import logging
from typing import Optional

from studycard.config.settings import settings
from studycard.services.gemini_client import (
    GeminiClient,
    GeminiInvocationError,
    extract_inline_data,
)
from studycard.telemetry import record_upstream_call

logger = logging.getLogger(__name__)


class SynthesisError(RuntimeError):
    """Raised when the speech service returns no audio payload."""


class SpeechSynthesisService:
    """Request spoken audio for a text using a fixed prebuilt voice."""

    def __init__(
        self,
        *,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
        voice_name: Optional[str] = None,
    ) -> None:
        self._client = client or GeminiClient()
        self._model = model or settings.gemini.speech_model
        self._voice_name = voice_name or settings.gemini.voice_name

    @property
    def voice_name(self) -> str:
        return self._voice_name

    async def synthesize(self, text: str) -> str:
        """Return the base64 PCM payload for ``text``. No retries."""

        generation_config = {
            "responseModalities": ["AUDIO"],
            "speechConfig": {
                "voiceConfig": {
                    "prebuiltVoiceConfig": {"voiceName": self._voice_name},
                },
            },
        }
        try:
            response = await self._client.generate_content(
                self._model,
                contents=[{"parts": [{"text": text}]}],
                generation_config=generation_config,
            )
        except GeminiInvocationError as exc:
            record_upstream_call("speech", succeeded=False)
            logger.exception("Speech synthesis failed for voice '%s'", self._voice_name)
            raise SynthesisError(str(exc)) from exc

        payload = extract_inline_data(response)
        if not payload:
            record_upstream_call("speech", succeeded=False)
            raise SynthesisError("No audio data returned from the speech service")

        record_upstream_call("speech", succeeded=True)
        return payload


__all__ = ["SpeechSynthesisService", "SynthesisError"]
