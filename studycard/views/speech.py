"""Schemas for text-to-speech requests."""

from pydantic import BaseModel, Field


class SingleSpeechRequest(BaseModel):
    text: str = Field(min_length=1)


class SequentialSpeechRequest(BaseModel):
    vocab: str = Field(min_length=1)
    sentence: str = Field(min_length=1)
