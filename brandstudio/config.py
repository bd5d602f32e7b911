import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .models.asset import AssetCategory

load_dotenv()

# API Keys and Config - loaded from .env
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

# Model names (override per deployment)
TEXT_MODEL = os.getenv("BRANDSTUDIO_TEXT_MODEL", "gemini-2.0-flash-exp")
IMAGE_MODEL = os.getenv("BRANDSTUDIO_IMAGE_MODEL", "gemini-3-pro-image-preview")
VIDEO_MODEL = os.getenv("BRANDSTUDIO_VIDEO_MODEL", "veo-3.1-generate-preview")

# Outbound media fetches (logos, inspiration URLs)
FETCH_TIMEOUT = float(os.getenv("BRANDSTUDIO_FETCH_TIMEOUT", "15"))
FETCH_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Logo sources, widest coverage first. {domain} is the bare host name.
LOGO_SOURCES = [
    "https://www.google.com/s2/favicons?domain={domain}&sz=128",
    "https://icons.duckduckgo.com/ip3/{domain}.ico",
    "https://logo.clearbit.com/{domain}",
]

# Pipeline constants
DRAFT_COUNT = 4
KEYFRAME_COUNT = 3
MIN_KEYFRAMES = 2
POLL_INTERVAL_SECONDS = 5.0
MAX_POLLS = 60  # ~5 minutes

# Video job configuration
VIDEO_RESOLUTION = "720p"
VIDEO_ASPECT_RATIO = "16:9"


@dataclass(frozen=True)
class CategorySettings:
    """Resolution defaults for one asset category."""

    aspect_ratio: str
    draft_size: str
    final_size: str


CATEGORY_SETTINGS: dict[AssetCategory, CategorySettings] = {
    AssetCategory.MERCHANDISE: CategorySettings("1:1", "1K", "2K"),
    AssetCategory.MARKETING: CategorySettings("3:4", "1K", "2K"),
    AssetCategory.DIGITAL: CategorySettings("1:1", "1K", "2K"),
    AssetCategory.VIDEO: CategorySettings("16:9", "1K", "2K"),
}


def get_category_settings(category: AssetCategory) -> CategorySettings:
    """Get resolution defaults for a category (merchandise settings if unknown)."""
    return CATEGORY_SETTINGS.get(category, CATEGORY_SETTINGS[AssetCategory.MERCHANDISE])
