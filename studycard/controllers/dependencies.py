"""Common FastAPI dependencies reused across controllers.

Services are created once by the application factory and stored on
``app.state``; tests replace them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from studycard.pipelines.speech import PlaybackHandle
from studycard.services import CardAnalysisService, ImageCatalog, SpeechSynthesisService


def get_catalog(request: Request) -> ImageCatalog:
    return request.app.state.catalog


def get_analysis_service(request: Request) -> CardAnalysisService:
    return request.app.state.analysis_service


def get_synthesis_service(request: Request) -> SpeechSynthesisService:
    return request.app.state.synthesis_service


def get_playback_handle(request: Request) -> PlaybackHandle:
    return request.app.state.playback


CatalogDep = Annotated[ImageCatalog, Depends(get_catalog)]
AnalysisServiceDep = Annotated[CardAnalysisService, Depends(get_analysis_service)]
SynthesisServiceDep = Annotated[SpeechSynthesisService, Depends(get_synthesis_service)]
PlaybackDep = Annotated[PlaybackHandle, Depends(get_playback_handle)]


__all__ = [
    "AnalysisServiceDep",
    "CatalogDep",
    "PlaybackDep",
    "SynthesisServiceDep",
    "get_analysis_service",
    "get_catalog",
    "get_playback_handle",
    "get_synthesis_service",
]
