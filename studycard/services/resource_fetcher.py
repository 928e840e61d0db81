"""Image retrieval with an ordered list of transport strategies.

Card images usually live on public file hosts that do not always serve them
directly (expired share links, hotlink protection, missing CORS headers). The
fetcher tries each strategy in order and returns the first successful body:

1. ``DirectTransport`` - a plain GET against the original URL.
2. ``RelayTransport`` - the same GET issued through a relay that re-serves the
   resource with permissive cross-origin headers; the original URL travels
   percent-encoded in the relay's query string.

Nothing is cached: every call goes back to the network.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Sequence
from urllib.parse import quote

import httpx

from studycard.config.settings import settings
from studycard.services.catalog import ImageReference
from studycard.telemetry import record_fetch_attempt

logger = logging.getLogger(__name__)

RETRIEVAL_FAILURE_MESSAGE = (
    "Unable to read the image file. Possible reasons: "
    "1. the link is invalid "
    "2. the file permissions are not public "
    "3. cross-origin (CORS) access was refused."
)

_INVALID_LINK_STATUSES = frozenset({400, 404, 410})
_NOT_PUBLIC_STATUSES = frozenset({401, 403})


class RetrievalCause(str, Enum):
    """Most likely reason an image could not be retrieved."""

    INVALID_LINK = "invalid_link"
    NOT_PUBLIC = "not_public"
    CROSS_ORIGIN = "cross_origin"


@dataclass(frozen=True)
class TransportAttempt:
    """Outcome of one failed strategy, kept for diagnostics."""

    strategy: str
    error: str
    status_code: int | None = None
    invalid_url: bool = False


class RetrievalError(RuntimeError):
    """Raised when every transport strategy failed to retrieve the resource."""

    def __init__(
        self,
        cause: RetrievalCause,
        attempts: Sequence[TransportAttempt] = (),
        message: str = RETRIEVAL_FAILURE_MESSAGE,
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.attempts = tuple(attempts)


class TransportFailure(Exception):
    """Internal signal that a single strategy did not produce a body."""

    def __init__(self, attempt: TransportAttempt) -> None:
        super().__init__(attempt.error)
        self.attempt = attempt


class TransportStrategy(ABC):
    """GET a URL through some route and return the response body."""

    name = "base"

    @abstractmethod
    def build_url(self, url: str) -> str:
        """Return the URL actually requested for ``url``."""

    async def retrieve(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            _require_absolute_http_url(url)
            target = self.build_url(url)
            response = await client.get(target)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise TransportFailure(
                TransportAttempt(self.name, str(exc), invalid_url=True)
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(TransportAttempt(self.name, repr(exc))) from exc

        if not response.is_success:
            raise TransportFailure(
                TransportAttempt(
                    self.name,
                    f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                    status_code=response.status_code,
                )
            )
        return response.content


def _require_absolute_http_url(url: str) -> None:
    parsed = httpx.URL(url)
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise httpx.InvalidURL(f"Not an absolute http(s) URL: {url!r}")


class DirectTransport(TransportStrategy):
    """Fetch the resource from its own origin."""

    name = "direct"

    def build_url(self, url: str) -> str:
        return url


class RelayTransport(TransportStrategy):
    """Fetch the resource through a CORS relay endpoint."""

    name = "relay"

    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = base_url or settings.fetch.relay_base_url

    def build_url(self, url: str) -> str:
        return f"{self._base_url}{quote(url, safe='')}"


def classify_failure(attempts: Sequence[TransportAttempt]) -> RetrievalCause:
    """Pick the user-facing cause that best explains a set of failed attempts."""

    if any(
        attempt.invalid_url or attempt.status_code in _INVALID_LINK_STATUSES
        for attempt in attempts
    ):
        return RetrievalCause.INVALID_LINK
    if any(attempt.status_code in _NOT_PUBLIC_STATUSES for attempt in attempts):
        return RetrievalCause.NOT_PUBLIC
    return RetrievalCause.CROSS_ORIGIN


class ResourceFetcher:
    """Retrieve raw bytes for a URL, falling back across transport strategies."""

    def __init__(
        self,
        strategies: Sequence[TransportStrategy] | None = None,
        *,
        timeout: float | None = None,
        follow_redirects: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._strategies = tuple(
            strategies if strategies is not None else (DirectTransport(), RelayTransport())
        )
        if not self._strategies:
            raise ValueError("At least one transport strategy is required")
        self._timeout = timeout if timeout is not None else settings.fetch.timeout_seconds
        self._follow_redirects = (
            follow_redirects
            if follow_redirects is not None
            else settings.fetch.follow_redirects
        )
        self._transport = transport

    @property
    def strategies(self) -> tuple[TransportStrategy, ...]:
        return self._strategies

    async def fetch(self, url: str) -> bytes:
        """Return the body of ``url`` or raise :class:`RetrievalError`."""

        attempts: list[TransportAttempt] = []
        async with httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=self._follow_redirects,
            transport=self._transport,
        ) as client:
            for strategy in self._strategies:
                try:
                    content = await strategy.retrieve(client, url)
                except TransportFailure as failure:
                    record_fetch_attempt(strategy.name, succeeded=False)
                    attempts.append(failure.attempt)
                    logger.warning(
                        "Image fetch via %s failed for %s: %s",
                        strategy.name,
                        url,
                        failure.attempt.error,
                    )
                    continue

                record_fetch_attempt(strategy.name, succeeded=True)
                if attempts:
                    logger.info(
                        "Image fetch recovered via %s after %d failed attempt(s)",
                        strategy.name,
                        len(attempts),
                    )
                return content

        cause = classify_failure(attempts)
        logger.error("Image fetch exhausted all strategies url=%s cause=%s", url, cause.value)
        raise RetrievalError(cause, attempts)

    async def fetch_reference(self, reference: ImageReference) -> bytes:
        """Prefer locally supplied bytes; otherwise fetch the reference URL."""

        if reference.local_file:
            return reference.local_file
        return await self.fetch(reference.url)


__all__ = [
    "DirectTransport",
    "RelayTransport",
    "ResourceFetcher",
    "RetrievalCause",
    "RetrievalError",
    "RETRIEVAL_FAILURE_MESSAGE",
    "TransportAttempt",
    "TransportStrategy",
    "classify_failure",
]
