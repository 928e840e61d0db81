"""Audio containers and the speech service's output format.

The Gemini speech model answers with raw 16-bit signed little-endian mono PCM
at 24 kHz. That contract belongs to the external service and may change on
its own schedule, so it is captured here once instead of being repeated as
literals across the decoder, the sequencer and the WAV renderer.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from studycard.config.settings import settings


@dataclass(frozen=True)
class PcmFormat:
    """Layout of the raw PCM stream produced by the speech service."""

    sample_rate: int
    channels: int
    sample_width: int

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(f"<i{self.sample_width}")

    @property
    def full_scale(self) -> float:
        return float(2 ** (8 * self.sample_width - 1))


PCM_FORMAT = PcmFormat(
    sample_rate=settings.audio.sample_rate,
    channels=settings.audio.channels,
    sample_width=settings.audio.sample_width,
)

DEFAULT_PAUSE_SECONDS = settings.audio.pause_seconds


@dataclass(frozen=True, eq=False)
class AudioBuffer:
    """Mono float32 samples in ``[-1.0, 1.0]`` at a fixed sample rate."""

    samples: np.ndarray
    sample_rate: int = PCM_FORMAT.sample_rate
    channel_count: int = PCM_FORMAT.channels

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_seconds(self) -> float:
        return len(self) / self.sample_rate


__all__ = ["AudioBuffer", "DEFAULT_PAUSE_SECONDS", "PCM_FORMAT", "PcmFormat"]
