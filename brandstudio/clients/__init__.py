"""API clients for external services."""

from .gemini import GeminiClient, image_part
from .media import MediaFetchResolver, MediaPayload

__all__ = ["GeminiClient", "MediaFetchResolver", "MediaPayload", "image_part"]
