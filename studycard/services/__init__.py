"""Service layer helpers for external integrations."""

from .analysis_client import (
    AnalysisError,
    AnalysisResult,
    AnalysisRetrievalError,
    CardAnalysisService,
    normalize_vocab,
)
from .catalog import ImageCatalog, ImageReference, get_image_catalog
from .gemini_client import GeminiClient, GeminiInvocationError
from .resource_fetcher import (
    ResourceFetcher,
    RetrievalCause,
    RetrievalError,
)
from .synthesis_client import SpeechSynthesisService, SynthesisError

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "AnalysisRetrievalError",
    "CardAnalysisService",
    "normalize_vocab",
    "ImageCatalog",
    "ImageReference",
    "get_image_catalog",
    "GeminiClient",
    "GeminiInvocationError",
    "ResourceFetcher",
    "RetrievalCause",
    "RetrievalError",
    "SpeechSynthesisService",
    "SynthesisError",
]
