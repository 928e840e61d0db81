"""Speech pipeline package.

Modules follow the order in which a spoken card is produced:

1. `types` - audio containers and the speech service's PCM format.
2. `decoding` - base64 PCM to normalized float samples.
3. `sequencing` - vocabulary + pause + sentence composition.
4. `flow` - synthesis orchestration for single and sequential playback.
5. `playback` - the owned output handle that renders WAV bytes.
"""

from .decoding import DecodeError, decode_pcm
from .flow import synthesize_sequential, synthesize_single
from .playback import PlaybackBusyError, PlaybackHandle
from .sequencing import MismatchError, gap_samples, sequence, single
from .types import DEFAULT_PAUSE_SECONDS, PCM_FORMAT, AudioBuffer, PcmFormat

__all__ = [
    "AudioBuffer",
    "DEFAULT_PAUSE_SECONDS",
    "DecodeError",
    "MismatchError",
    "PCM_FORMAT",
    "PcmFormat",
    "PlaybackBusyError",
    "PlaybackHandle",
    "decode_pcm",
    "gap_samples",
    "sequence",
    "single",
    "synthesize_sequential",
    "synthesize_single",
]
