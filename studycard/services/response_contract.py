"""Pydantic models for validating the model's JSON layout response.

The analysis request asks Gemini for a typed JSON object; this module holds
both the schema we send and the model we validate the reply against, so the
two cannot drift apart.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from pydantic import BaseModel

CARD_LAYOUT_FIELDS = ("vocab", "sentence", "reading")

CARD_LAYOUT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {name: {"type": "STRING"} for name in CARD_LAYOUT_FIELDS},
    "required": list(CARD_LAYOUT_FIELDS),
}


class CardLayoutResponse(BaseModel):
    vocab: str
    sentence: str
    reading: str

    model_config = {"strict": True, "extra": "ignore"}

    @classmethod
    def from_json(cls, payload: str) -> "CardLayoutResponse":
        """Parse a raw reply; raises ``ValueError`` on bad JSON or schema mismatch."""

        data = json.loads(_clean_json_payload(payload))
        return cls.model_validate(data)


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "CARD_LAYOUT_FIELDS",
    "CARD_LAYOUT_SCHEMA",
    "CardLayoutResponse",
]
