"""PromptComposer - builds generation requests from brand DNA.

Pure functions only: no I/O, no randomness. Identical inputs always produce
identical strings.
"""

from ..models.asset import AssetCategory
from ..models.brand import BrandSpecification, InspirationCue
from ..utils import normalize_subtype

# Garment construction details. The image model confuses similar garments
# unless each one is spelled out with explicit negative constraints.
GARMENT_DETAILS: list[tuple[tuple[str, ...], str]] = [
    (
        ("hoodie",),
        "A pullover hoodie with a drawstring hood, kangaroo front pocket, and ribbed cuffs and hem. "
        "This is specifically a HOODIE that has a hood and long sleeves, it is NOT a short-sleeved shirt.",
    ),
    (
        ("t-shirt", "tshirt"),
        "A short-sleeved t-shirt with a crew neck. "
        "This is specifically a T-SHIRT with short sleeves and no hood, it is NOT a hoodie.",
    ),
    (
        ("cap", "hat"),
        "A baseball cap with a curved brim and an adjustable back strap. It is NOT a beanie or a bucket hat.",
    ),
    (
        ("tote", "bag"),
        "A canvas tote bag with two sturdy handles. It is NOT a backpack.",
    ),
    (
        ("mug",),
        "A ceramic coffee mug with a handle.",
    ),
]

QUALITY_REQUIREMENTS = (
    "REQUIREMENTS:\n"
    "- Realism: Photorealistic (unless specified otherwise).\n"
    "- Quality: Production ready, sharp focus.\n"
    "- Consistency: Adhere strictly to the color palette."
)


def garment_details(subtype: str) -> str:
    """Construction detail for a merchandise subtype (generic fallback)."""
    normalized = normalize_subtype(subtype)
    for needles, details in GARMENT_DETAILS:
        if any(needle in normalized for needle in needles):
            return details
    return f"A {subtype}."


def logo_instruction(brand: BrandSpecification) -> str:
    """Use the supplied logo image if there is one, otherwise a wordmark."""
    if brand.has_logo:
        return (
            "IMPORTANT: Incorporate the provided Logo image into the design. "
            "It should be clearly visible, undistorted, and placed appropriately for this item. "
            "Do not invent a different logo."
        )
    return f'The design incorporates the brand name "{brand.name}" stylized as a logo wordmark.'


def format_inspiration_cues(inspirations: list[InspirationCue]) -> str:
    """Cues within one inspiration joined by ', ', inspirations joined by '; '."""
    groups = [", ".join(i.cues) for i in inspirations if i.cues]
    return "; ".join(groups)


def _merchandise_template(brand: BrandSpecification, subtype: str) -> str:
    return f"""CRITICAL INSTRUCTION: You MUST generate exactly a "{subtype}" and nothing else. Pay careful attention to the garment type.

{garment_details(subtype)}

PRODUCT DETAILS:
- Item: {subtype} (follow the exact specifications above)
- Base fabric/material color: {brand.primary_color}
- Features a bold, eye-catching graphic design printed on the front
- Material: High-quality, premium fabric/material with visible texture
- Photography style: Professional product photography, studio setting
- Background: Clean, neutral (white or light gray)
- Lighting: Soft, even studio lighting with subtle shadows

DESIGN ELEMENTS:
{logo_instruction(brand)}
- Design vibe: {brand.visual_essence}
- Accent color in design: {brand.accent_color}
- Design should be centered and prominent

CRITICAL: This must be a {subtype}, not any other garment type. Verify the item matches "{subtype}" exactly."""


def _marketing_template(brand: BrandSpecification, subtype: str) -> str:
    return f"""A professional {subtype} design for the brand "{brand.name}".
Layout: Modern, clean, and high-impact.
{logo_instruction(brand)}
Visuals: Incorporate the brand colors ({', '.join(brand.palette)}) and typography ({brand.typography}).
Content: It should convey the vibe: {brand.visual_essence}."""


def _digital_template(brand: BrandSpecification, subtype: str) -> str:
    return f"""A digital asset: {subtype} for the brand "{brand.name}".
Style: Optimized for screens, UI/UX friendly, digital art style.
{logo_instruction(brand)}
Colors: {', '.join(brand.palette)}.
Vibe: {brand.visual_essence}."""


def _generic_template(brand: BrandSpecification, subtype: str) -> str:
    return f"""A creative brand asset ({subtype}) for "{brand.name}".
{logo_instruction(brand)}
Colors: {', '.join(brand.palette)}."""


CATEGORY_TEMPLATES = {
    AssetCategory.MERCHANDISE: _merchandise_template,
    AssetCategory.MARKETING: _marketing_template,
    AssetCategory.DIGITAL: _digital_template,
}


def compose_prompt(
    brand: BrandSpecification,
    inspirations: list[InspirationCue],
    category: AssetCategory,
    subtype: str,
    instruction: str | None = None,
) -> str:
    """
    Build a single image-generation request.

    Args:
        brand: Brand DNA
        inspirations: Inspiration cues, in collection order
        category: Asset category (selects the template)
        subtype: Free subtype text, e.g. "Hoodie"
        instruction: Optional extra instruction (e.g. a draft variant angle)

    Returns:
        The prompt text
    """
    template = CATEGORY_TEMPLATES.get(category, _generic_template)
    sections = [template(brand, subtype)]

    if instruction:
        sections.append(f"Instruction: {instruction}")

    sections.append(f"BRAND DNA CONTEXT:\n- Keywords: {', '.join(brand.keywords)}")
    sections.append(
        "INSPIRATION CUES (Apply these artistic styles to the graphic design/layout):\n"
        f"{format_inspiration_cues(inspirations)}"
    )
    sections.append(QUALITY_REQUIREMENTS)

    return "\n\n".join(sections)


def compose_keyframe_prompt(brand: BrandSpecification, scene: str, script: str) -> str:
    """Prompt for one advertising still of a storyboard."""
    return f"""A cinematic advertising still for the brand "{brand.name}".
Scene: {scene}
{logo_instruction(brand)}
Color palette: {', '.join(brand.palette)}. Typography feel: {brand.typography}.
Visual essence: {brand.visual_essence}.
Voiceover context: {script}

{QUALITY_REQUIREMENTS}
- Framing: 16:9 widescreen, commercial film look, no on-screen subtitles."""
