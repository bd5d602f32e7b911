"""Logo discovery for a website - best effort, never raises."""

import logging
from urllib.parse import urlparse

from .. import config
from ..clients.media import MediaFetchResolver, MediaPayload

logger = logging.getLogger(__name__)


def extract_domain(website_url: str) -> str | None:
    """Host name of a website reference. Bare domains are accepted.

    Example: "https://www.stripe.com/pricing" -> "www.stripe.com"
    """
    value = (website_url or "").strip()
    if not value:
        return None
    if "://" not in value:
        value = f"https://{value}"
    try:
        host = urlparse(value).hostname
    except ValueError:
        return None
    if not host or "." not in host:
        return None
    return host


class LogoResolver:
    """Try each logo source in priority order until one yields an image."""

    def __init__(self, fetcher: MediaFetchResolver, sources: list[str] | None = None):
        self.fetcher = fetcher
        self.sources = sources or config.LOGO_SOURCES

    def candidate_urls(self, domain: str) -> list[str]:
        return [source.format(domain=domain) for source in self.sources]

    def resolve(self, website_url: str) -> MediaPayload | None:
        """
        Resolve a website's logo.

        Returns the first image any source produces, or None if the reference
        is unusable or every source fails. A failed source is not retried.
        """
        domain = extract_domain(website_url)
        if not domain:
            logger.warning(f"Invalid URL for logo fetching: {website_url!r}")
            return None

        for logo_url in self.candidate_urls(domain):
            logger.info(f"Trying logo source: {logo_url}")
            payload = self.fetcher.resolve(logo_url)
            if payload:
                logger.info(f"Fetched logo from: {logo_url}")
                return payload

        logger.warning(f"All logo sources failed for domain: {domain}")
        return None
