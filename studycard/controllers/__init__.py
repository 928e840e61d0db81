"""FastAPI routers acting as controllers in the MVC architecture."""

from . import cards, speech

__all__ = ["cards", "speech"]
