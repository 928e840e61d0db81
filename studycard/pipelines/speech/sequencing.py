"""Composition of decoded phrases into one playable buffer."""

from __future__ import annotations

import numpy as np

from .types import DEFAULT_PAUSE_SECONDS, AudioBuffer


class MismatchError(ValueError):
    """Raised when buffers with different formats are combined."""


def gap_samples(sample_rate: int, pause_seconds: int = DEFAULT_PAUSE_SECONDS) -> int:
    return int(pause_seconds * sample_rate)


def sequence(
    first: AudioBuffer,
    second: AudioBuffer,
    pause_seconds: int = DEFAULT_PAUSE_SECONDS,
) -> AudioBuffer:
    """Return ``first``, a silent pause, then ``second`` as one buffer."""

    if first.sample_rate != second.sample_rate:
        raise MismatchError(
            f"Sample rates differ: {first.sample_rate} != {second.sample_rate}"
        )
    if first.channel_count != second.channel_count:
        raise MismatchError(
            f"Channel counts differ: {first.channel_count} != {second.channel_count}"
        )

    gap = gap_samples(first.sample_rate, pause_seconds)
    offset = len(first) + gap
    combined = np.zeros(offset + len(second), dtype=np.float32)
    combined[: len(first)] = first.samples
    combined[offset:] = second.samples
    return AudioBuffer(
        samples=combined,
        sample_rate=first.sample_rate,
        channel_count=first.channel_count,
    )


def single(buffer: AudioBuffer) -> AudioBuffer:
    """Single-phrase playback needs no composition."""

    return buffer


__all__ = ["MismatchError", "gap_samples", "sequence", "single"]
