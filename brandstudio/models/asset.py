"""Asset categories and generated artifacts."""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum


class AssetCategory(str, Enum):
    """Closed set of asset categories. Crossed with a free subtype string."""

    MERCHANDISE = "MERCHANDISE"
    MARKETING = "MARKETING"
    DIGITAL = "DIGITAL"
    VIDEO = "VIDEO"


# Standard subtypes offered per category
SUBTYPE_CATALOG: dict[AssetCategory, list[str]] = {
    AssetCategory.MERCHANDISE: ["Hoodie", "T-Shirt", "Cap", "Tote Bag"],
    AssetCategory.MARKETING: ["Poster", "Flyer", "Billboard", "Business Card"],
    AssetCategory.DIGITAL: ["Social Post", "Banner", "App Icon"],
    AssetCategory.VIDEO: ["Commercial"],
}


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class GeneratedAsset:
    """A finished gallery artifact (image data URL or video URI)."""

    category: AssetCategory
    subtype: str
    url: str
    prompt_used: str                     # provenance note
    is_draft: bool = False
    base_image: bytes | None = None      # set when derived from another image
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: int = field(default_factory=_now_ms)


@dataclass
class DraftSet:
    """Images from one fan-out call. Index position is the only identity."""

    images: list[bytes] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.images)

    def __getitem__(self, index: int) -> bytes:
        return self.images[index]

    def __iter__(self):
        return iter(self.images)

    def replace(self, index: int, image: bytes) -> None:
        """Swap in an edited image at a draft position."""
        self.images[index] = image
