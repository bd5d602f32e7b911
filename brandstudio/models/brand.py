"""Brand specification (brand DNA) and inspiration cues."""

from dataclasses import dataclass, field, replace

DEFAULT_PRIMARY_COLOR = "white"
DEFAULT_ACCENT_COLOR = "black"


@dataclass(frozen=True)
class BrandSpecification:
    """Structured creative identity that seeds every downstream prompt.

    Immutable once synthesized; only the logo can be replaced (via with_logo).
    """

    name: str
    description: str
    colors: tuple[str, ...] = ()
    typography: str = ""
    visual_essence: str = ""
    design_system: str = ""
    keywords: tuple[str, ...] = ()
    website_url: str | None = None
    logo: bytes | None = field(default=None, repr=False)

    @property
    def primary_color(self) -> str:
        return self.colors[0] if self.colors else DEFAULT_PRIMARY_COLOR

    @property
    def accent_color(self) -> str:
        return self.colors[1] if len(self.colors) > 1 else DEFAULT_ACCENT_COLOR

    @property
    def palette(self) -> tuple[str, ...]:
        """Colors for prompt construction, never empty."""
        return self.colors or (DEFAULT_PRIMARY_COLOR, DEFAULT_ACCENT_COLOR)

    @property
    def has_logo(self) -> bool:
        return bool(self.logo)

    def with_logo(self, logo: bytes | None) -> "BrandSpecification":
        """Return a copy with the logo replaced."""
        return replace(self, logo=logo)


@dataclass(frozen=True)
class InspirationCue:
    """A reference image with style cues extracted from it."""

    id: str
    image: bytes = field(repr=False)
    note: str
    cues: tuple[str, ...] = ()
