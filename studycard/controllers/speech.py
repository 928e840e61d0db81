"""Text-to-speech endpoints returning WAV audio."""

import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from studycard.controllers.dependencies import PlaybackDep, SynthesisServiceDep
from studycard.pipelines.speech import (
    AudioBuffer,
    DecodeError,
    MismatchError,
    PlaybackBusyError,
    PlaybackHandle,
    synthesize_sequential,
    synthesize_single,
)
from studycard.services import SynthesisError
from studycard.views import SequentialSpeechRequest, SingleSpeechRequest

router = APIRouter(prefix="/speech", tags=["speech"])

logger = logging.getLogger(__name__)


async def _render(
    playback: PlaybackHandle,
    produce: Callable[[], Awaitable[AudioBuffer]],
) -> Response:
    try:
        async with playback.claim():
            buffer = await produce()
            audio_bytes = playback.render_wav(buffer)
    except PlaybackBusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except SynthesisError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except (DecodeError, MismatchError) as exc:
        logger.exception("Speech payload could not be assembled")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc

    return Response(content=audio_bytes, media_type="audio/wav")


@router.post("/single", response_class=Response)
async def speak_single(
    request: SingleSpeechRequest,
    synthesizer: SynthesisServiceDep,
    playback: PlaybackDep,
) -> Response:
    """Speak one phrase."""

    return await _render(playback, lambda: synthesize_single(synthesizer, request.text))


@router.post("/sequential", response_class=Response)
async def speak_sequential(
    request: SequentialSpeechRequest,
    synthesizer: SynthesisServiceDep,
    playback: PlaybackDep,
) -> Response:
    """Speak the vocabulary, pause, then speak the example sentence."""

    return await _render(
        playback,
        lambda: synthesize_sequential(synthesizer, request.vocab, request.sentence),
    )
