"""Pydantic schemas for card catalog and analysis requests."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, model_validator

from studycard.services import AnalysisResult, ImageReference


class CardResponse(BaseModel):
    id: str
    url: str
    is_placeholder: bool = False

    @classmethod
    def from_reference(cls, reference: ImageReference) -> "CardResponse":
        return cls(
            id=reference.id,
            url=reference.url,
            is_placeholder=reference.is_placeholder,
        )


class AnalyzeCardRequest(BaseModel):
    """Either a direct image URL or the id of a catalog entry."""

    url: Optional[str] = Field(default=None, min_length=1)
    image_id: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def require_single_source(self) -> "AnalyzeCardRequest":
        if bool(self.url) == bool(self.image_id):
            raise ValueError("Provide exactly one of 'url' or 'image_id'")
        return self


class AnalysisResponse(BaseModel):
    vocab: str
    sentence: str
    japanese: str
    reading: str

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        return cls(
            vocab=result.vocab_text,
            sentence=result.sentence_text,
            japanese=result.combined_display_text,
            reading=result.reading_text,
        )
