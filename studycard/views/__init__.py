"""Pydantic schemas used as views in the MVC architecture."""

from .cards import AnalysisResponse, AnalyzeCardRequest, CardResponse
from .speech import SequentialSpeechRequest, SingleSpeechRequest

__all__ = [
    "AnalysisResponse",
    "AnalyzeCardRequest",
    "CardResponse",
    "SequentialSpeechRequest",
    "SingleSpeechRequest",
]
