"""Fetch arbitrary image URLs into inline bytes."""

import logging
from dataclasses import dataclass

import requests

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaPayload:
    """Fetched image bytes and their declared content type."""

    data: bytes
    mime_type: str


class MediaFetchResolver:
    """Resolve a URL to image bytes. Fails closed: returns None instead of raising."""

    def __init__(self, timeout: float = config.FETCH_TIMEOUT, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self, url: str) -> MediaPayload | None:
        """
        Download a URL and return it if it is an image.

        Returns None on non-2xx responses, missing or non-image content types,
        and any network error.
        """
        headers = {"User-Agent": config.FETCH_USER_AGENT}
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Failed to fetch image {url}: {e}")
            return None

        if not response.ok:
            logger.warning(f"Fetch of {url} returned {response.status_code}")
            return None

        content_type = response.headers.get("Content-Type", "")
        mime_type = content_type.split(";", 1)[0].strip().lower()
        if not mime_type.startswith("image/"):
            logger.warning(f"Fetched URL is not an image: {url} ({content_type or 'no content type'})")
            return None

        if not response.content:
            logger.warning(f"Fetched image is empty: {url}")
            return None

        return MediaPayload(data=response.content, mime_type=mime_type)
