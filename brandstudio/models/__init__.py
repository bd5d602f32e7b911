"""Data models."""

from .asset import AssetCategory, DraftSet, GeneratedAsset, SUBTYPE_CATALOG
from .brand import BrandSpecification, InspirationCue
from .credential import Credential, require_credential
from .job import JobState, VideoJob
from .session import BrandSession, EditSession

__all__ = [
    "AssetCategory",
    "BrandSession",
    "BrandSpecification",
    "Credential",
    "DraftSet",
    "EditSession",
    "GeneratedAsset",
    "InspirationCue",
    "JobState",
    "SUBTYPE_CATALOG",
    "VideoJob",
    "require_credential",
]
