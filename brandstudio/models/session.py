"""Session-level state: inspirations, gallery, and per-draft edit sessions."""

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..errors import SessionBusyError, SessionClosedError
from .asset import GeneratedAsset
from .brand import BrandSpecification, InspirationCue

if TYPE_CHECKING:
    from .credential import Credential


@dataclass
class BrandSession:
    """One user's working state. Nothing here is persisted across sessions."""

    brand: BrandSpecification | None = None
    inspirations: list[InspirationCue] = field(default_factory=list)
    assets: list[GeneratedAsset] = field(default_factory=list)

    def add_inspiration(self, inspiration: InspirationCue) -> None:
        self.inspirations.append(inspiration)

    def remove_inspiration(self, inspiration_id: str) -> None:
        self.inspirations = [i for i in self.inspirations if i.id != inspiration_id]

    def add_asset(self, asset: GeneratedAsset) -> None:
        """Add to the gallery, newest first."""
        self.assets.insert(0, asset)


class EditSession:
    """Working image for iterative editing of one draft.

    Edits are strictly ordered: each apply() consumes the previous output and
    concurrent applies on the same session are rejected.
    """

    def __init__(self, image: bytes):
        self.image = image
        self.instructions: list[str] = []
        self.mask: bytes | None = None
        self.closed = False
        self._lock = threading.Lock()

    @property
    def instruction_text(self) -> str:
        return "\n".join(self.instructions)

    def apply(
        self,
        credential: "Credential | None",
        applier,
        instruction: str,
        mask: bytes | None = None,
    ) -> bytes:
        """Run one edit through the applier and keep its output as the working image."""
        self._check_open()
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError("An edit is already in progress on this session")
        try:
            self.mask = mask
            new_image = applier.apply(credential, self.image, instruction, mask=mask)
            self.image = new_image
            self.instructions.append(instruction)
            return new_image
        finally:
            self.mask = None
            self._lock.release()

    def finalize(self, credential: "Credential | None", finalizer, brand, category, subtype) -> GeneratedAsset:
        """Hand the working image to the finalizer and close the session."""
        self._check_open()
        asset = finalizer.finalize(credential, brand, self.image, category, subtype)
        self.closed = True
        return asset

    def discard(self) -> None:
        self.closed = True

    def _check_open(self) -> None:
        if self.closed:
            raise SessionClosedError("Edit session is closed")
