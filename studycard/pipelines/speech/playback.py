"""Owned playback resource for synthesized study audio.

The application factory creates exactly one :class:`PlaybackHandle` and keeps
it on ``app.state``; request handlers receive it by reference. The handle
allows one active synthesis/playback at a time: ``claim()`` refuses a second
request while the first is outstanding instead of queueing it.
"""

from __future__ import annotations

import io
import logging
import wave
from contextlib import asynccontextmanager
from typing import AsyncIterator

import numpy as np

from .types import PCM_FORMAT, AudioBuffer, PcmFormat

logger = logging.getLogger(__name__)


class PlaybackBusyError(RuntimeError):
    """Raised when a playback is requested while another one is active."""


class PlaybackHandle:
    """Single-owner, single-active-playback audio output."""

    def __init__(self, audio_format: PcmFormat = PCM_FORMAT) -> None:
        self._format = audio_format
        self._active = False

    @property
    def audio_format(self) -> PcmFormat:
        return self._format

    @property
    def is_active(self) -> bool:
        return self._active

    @asynccontextmanager
    async def claim(self) -> AsyncIterator["PlaybackHandle"]:
        """Hold the handle for the duration of one synthesis + render."""

        if self._active:
            raise PlaybackBusyError("Another playback is still in progress")
        self._active = True
        try:
            yield self
        finally:
            self._active = False

    def render_wav(self, buffer: AudioBuffer) -> bytes:
        """Encode ``buffer`` as a 16-bit PCM WAV file."""

        scale = float(self._format.full_scale)
        pcm16 = np.clip(np.round(buffer.samples * scale), -scale, scale - 1).astype("<i2")
        with io.BytesIO() as output:
            with wave.open(output, "wb") as wave_file:
                wave_file.setnchannels(buffer.channel_count)
                wave_file.setsampwidth(2)
                wave_file.setframerate(buffer.sample_rate)
                wave_file.writeframes(pcm16.tobytes())
            logger.debug(
                "Rendered %.2fs of audio at %d Hz",
                buffer.duration_seconds,
                buffer.sample_rate,
            )
            return output.getvalue()


__all__ = ["PlaybackBusyError", "PlaybackHandle"]
