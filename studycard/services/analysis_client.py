"""Vision-language analysis of a study-card image.

A card image carries three stacked paragraphs: the vocabulary item (often
prefixed with an index such as ``①`` or ``1.``), a translation, and an example
sentence. Gemini is asked to return paragraphs 1 and 3 plus a full kana
reading as a typed JSON object. The vocabulary is cleaned locally as well,
because the model does not always drop the index marker.
"""

from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass
from typing import Optional

from studycard.config.settings import settings
from studycard.services.catalog import ImageReference
from studycard.services.gemini_client import (
    GeminiClient,
    GeminiInvocationError,
    extract_text,
)
from studycard.services.resource_fetcher import ResourceFetcher, RetrievalError
from studycard.services.response_contract import CARD_LAYOUT_SCHEMA, CardLayoutResponse
from studycard.telemetry import record_upstream_call

logger = logging.getLogger(__name__)

# Whitespace, ASCII digits, periods and circled numerals U+2460..U+2473 (1-20).
_LEADING_MARKERS = re.compile(r"^[\s0-9.①-⑳]+")

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"

ANALYSIS_INSTRUCTION = """
Analyze the layout of the text in the image from top to bottom.

Task:
1. Extract the text from the **1st visual paragraph/block** (this is the 'vocab'). **IMPORTANT: Exclude any leading index numbers (like ①, 1., 1) or bullets.**
2. Extract the text from the **3rd visual paragraph/block** (this is the 'sentence').
3. Ignore the 2nd paragraph (translation) or any other text.

Return a JSON object with:
- 'vocab': The text of the 1st paragraph (clean, without numbers).
- 'sentence': The text of the 3rd paragraph.
- 'reading': The full hiragana reading (furigana) for both parts. **Do not include reading for index numbers.**
""".strip()


class AnalysisError(RuntimeError):
    """Raised when an image cannot be turned into an :class:`AnalysisResult`."""


class AnalysisRetrievalError(AnalysisError, RetrievalError):
    """The card image could not be retrieved.

    Callers catching either :class:`AnalysisError` or :class:`RetrievalError`
    see it; ``cause`` and ``attempts`` are copied from the fetcher's error.
    """

    def __init__(self, error: RetrievalError) -> None:
        RetrievalError.__init__(self, error.cause, error.attempts, str(error))


@dataclass(frozen=True)
class AnalysisResult:
    """Text fields extracted from one card image."""

    vocab_text: str
    sentence_text: str
    reading_text: str

    @property
    def combined_display_text(self) -> str:
        return f"{self.vocab_text}\n{self.sentence_text}"


def normalize_vocab(text: str) -> str:
    """Strip leading enumeration markers (``①``, ``1.``, spaces) from ``text``."""

    return _LEADING_MARKERS.sub("", text)


class CardAnalysisService:
    """Fetch a card image and extract vocabulary, sentence and reading."""

    def __init__(
        self,
        *,
        fetcher: Optional[ResourceFetcher] = None,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
    ) -> None:
        self._fetcher = fetcher or ResourceFetcher()
        self._client = client or GeminiClient()
        self._model = model or settings.gemini.analysis_model

    async def analyze(self, image_url: str) -> AnalysisResult:
        """Analyze the image at ``image_url``."""

        try:
            image_bytes = await self._fetcher.fetch(image_url)
        except RetrievalError as exc:
            raise AnalysisRetrievalError(exc) from exc
        return await self.analyze_image_bytes(image_bytes)

    async def analyze_reference(self, reference: ImageReference) -> AnalysisResult:
        """Analyze a catalog or local reference, preferring its local bytes."""

        try:
            image_bytes = await self._fetcher.fetch_reference(reference)
        except RetrievalError as exc:
            raise AnalysisRetrievalError(exc) from exc
        return await self.analyze_image_bytes(image_bytes)

    async def analyze_image_bytes(
        self,
        image_bytes: bytes,
        mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
    ) -> AnalysisResult:
        """Analyze an image already held in memory (uploads, local files)."""

        encoded = base64.b64encode(image_bytes).decode("ascii")
        contents = [
            {
                "parts": [
                    {"inlineData": {"mimeType": mime_type, "data": encoded}},
                    {"text": ANALYSIS_INSTRUCTION},
                ]
            }
        ]
        generation_config = {
            "responseMimeType": "application/json",
            "responseSchema": CARD_LAYOUT_SCHEMA,
        }

        try:
            response = await self._client.generate_content(
                self._model,
                contents=contents,
                generation_config=generation_config,
            )
        except GeminiInvocationError as exc:
            record_upstream_call("analysis", succeeded=False)
            logger.exception("Image analysis call failed")
            raise AnalysisError(str(exc)) from exc

        text = extract_text(response)
        if not text:
            record_upstream_call("analysis", succeeded=False)
            raise AnalysisError("no response text")

        try:
            layout = CardLayoutResponse.from_json(text)
        except ValueError as exc:
            record_upstream_call("analysis", succeeded=False)
            logger.warning("Analysis reply failed the layout contract: %s", exc)
            raise AnalysisError("response did not match the card layout schema") from exc

        record_upstream_call("analysis", succeeded=True)
        result = AnalysisResult(
            vocab_text=normalize_vocab(layout.vocab),
            sentence_text=layout.sentence,
            reading_text=layout.reading,
        )
        logger.info("Card analyzed vocab=%r sentence=%r", result.vocab_text, result.sentence_text)
        return result


__all__ = [
    "ANALYSIS_INSTRUCTION",
    "AnalysisError",
    "AnalysisResult",
    "AnalysisRetrievalError",
    "CardAnalysisService",
    "normalize_vocab",
]
