"""Flashcard image catalog loaded once at start-up."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from studycard.config.settings import settings


@dataclass(frozen=True)
class ImageReference:
    """A candidate flashcard image."""

    id: str
    url: str
    local_file: Optional[bytes] = None
    is_placeholder: bool = False


class ImageCatalog:
    """Immutable, ordered collection of :class:`ImageReference` entries."""

    def __init__(self, references: Iterable[ImageReference]) -> None:
        self._references = tuple(references)
        self._by_id = {reference.id: reference for reference in self._references}

    @classmethod
    def from_urls(cls, urls: Iterable[str]) -> "ImageCatalog":
        cleaned = [url.strip() for url in urls if url and url.strip()]
        return cls(
            ImageReference(id=f"img-{index}", url=url)
            for index, url in enumerate(cleaned)
        )

    def list(self) -> tuple[ImageReference, ...]:
        return self._references

    def get(self, image_id: str) -> ImageReference:
        """Return the reference with ``image_id`` or raise ``KeyError``."""

        return self._by_id[image_id]

    def __len__(self) -> int:
        return len(self._references)


def get_image_catalog() -> ImageCatalog:
    """Build the catalog from configured URLs."""

    return ImageCatalog.from_urls(settings.catalog.urls)


__all__ = ["ImageCatalog", "ImageReference", "get_image_catalog"]
