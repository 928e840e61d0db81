"""Speech orchestration: synthesis -> decoding -> sequencing.

``synthesize_sequential`` starts both synthesis requests before awaiting
either. The results are combined by argument position, so the vocabulary
always comes first even when the sentence response arrives earlier.
"""

from __future__ import annotations

import asyncio
import logging

from studycard.services.synthesis_client import SpeechSynthesisService

from .decoding import decode_pcm
from .sequencing import sequence, single
from .types import DEFAULT_PAUSE_SECONDS, AudioBuffer

logger = logging.getLogger(__name__)


async def synthesize_single(
    synthesizer: SpeechSynthesisService,
    text: str,
) -> AudioBuffer:
    """Speak one phrase."""

    payload = await synthesizer.synthesize(text)
    return single(decode_pcm(payload))


async def synthesize_sequential(
    synthesizer: SpeechSynthesisService,
    vocab: str,
    sentence: str,
    pause_seconds: int = DEFAULT_PAUSE_SECONDS,
) -> AudioBuffer:
    """Speak ``vocab``, pause, then speak ``sentence``.

    Both requests are awaited to completion even when one fails, so no
    synthesis is still outstanding once this coroutine returns or raises. The
    first failure in argument order (vocab, then sentence) is re-raised.
    """

    outcomes = await asyncio.gather(
        synthesizer.synthesize(vocab),
        synthesizer.synthesize(sentence),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    vocab_payload, sentence_payload = outcomes
    combined = sequence(
        decode_pcm(vocab_payload),
        decode_pcm(sentence_payload),
        pause_seconds=pause_seconds,
    )
    logger.info(
        "Sequenced speech vocab=%r sentence=%r duration=%.2fs",
        vocab,
        sentence,
        combined.duration_seconds,
    )
    return combined


__all__ = ["synthesize_sequential", "synthesize_single"]
