"""Card image ingestion helpers used by the HTTP layer."""

from .ingestion import read_image_bytes, resolve_image_content_type

__all__ = ["read_image_bytes", "resolve_image_content_type"]
