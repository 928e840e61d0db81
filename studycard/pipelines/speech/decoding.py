"""Raw PCM to :class:`AudioBuffer` conversion."""

from __future__ import annotations

import base64
import binascii

import numpy as np

from .types import PCM_FORMAT, AudioBuffer, PcmFormat


class DecodeError(ValueError):
    """Raised when a speech payload is not valid base64 PCM."""


def decode_pcm(payload: str, audio_format: PcmFormat = PCM_FORMAT) -> AudioBuffer:
    """Decode base64 little-endian PCM into normalized float32 samples.

    Each integer sample ``v`` maps to ``v / 32768.0`` (for 16-bit audio), so the
    result holds exactly ``len(raw) // 2`` samples in the original order.
    """

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Speech payload is not valid base64: {exc}") from exc

    frame_size = audio_format.sample_width * audio_format.channels
    if len(raw) % frame_size:
        raise DecodeError(
            f"PCM byte length {len(raw)} is not a multiple of the {frame_size}-byte frame"
        )

    ints = np.frombuffer(raw, dtype=audio_format.dtype)
    samples = ints.astype(np.float32) / np.float32(audio_format.full_scale)
    return AudioBuffer(
        samples=samples,
        sample_rate=audio_format.sample_rate,
        channel_count=audio_format.channels,
    )


__all__ = ["DecodeError", "decode_pcm"]
