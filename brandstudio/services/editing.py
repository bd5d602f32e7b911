"""Iterative editing: annotation interpretation, spell audit, and edit application."""

import logging
from dataclasses import dataclass, field
from io import BytesIO

from PIL import Image

from .. import config
from ..clients.gemini import GeminiClient, image_part
from ..errors import EditFailure, ParseFailure
from ..models.asset import AssetCategory
from ..models.credential import Credential, require_credential
from ..models.session import EditSession
from ..utils import parse_json_response

logger = logging.getLogger(__name__)

# Restated on every edit
PRESERVE_DIRECTIVE = (
    "IMPORTANT:\n"
    "- PRESERVE all original details, elements, colors, text, and composition EXACTLY as they are\n"
    "- ONLY make the specific changes requested in the instruction\n"
    "- DO NOT remove or change anything unless explicitly instructed to do so\n"
    "- Keep the same style, quality, and overall look of the original"
)

MASKED_DIRECTIVE = (
    "IMPORTANT:\n"
    "- PRESERVE all original details, elements, colors, text, and composition EXACTLY as they are\n"
    "- ONLY modify the specific areas marked with bright green annotations\n"
    "- DO NOT remove or change anything unless explicitly instructed to do so\n"
    "- Remove all green annotations from the final result and return a clean edited image\n"
    "- Keep the same style, quality, and overall look of the original"
)

SPELL_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "hasErrors": {"type": "BOOLEAN"},
        "errors": {"type": "ARRAY", "items": {"type": "STRING"}},
        "fixInstruction": {"type": "STRING"},
    },
    "required": ["hasErrors", "errors", "fixInstruction"],
}

SPELL_PROMPT = """Analyze all text visible in this image and check for spelling mistakes, typos, or grammatical errors.

Response format (JSON):
{
  "hasErrors": boolean,
  "errors": ["list of mistakes found with corrections"],
  "fixInstruction": "detailed instruction to fix all errors if any, or empty string if none"
}

Be thorough and check brand names, slogans, body text, and any visible text."""


def overlay_annotations(image: bytes, strokes: bytes) -> bytes:
    """
    Composite a transparent strokes layer over an image.

    Args:
        image: Working image bytes
        strokes: RGBA image with the user's highlight strokes on a transparent background

    Returns:
        PNG bytes of the annotated composite, at the working image's size
    """
    with Image.open(BytesIO(image)) as base_img, Image.open(BytesIO(strokes)) as stroke_img:
        base = base_img.convert("RGBA")
        layer = stroke_img.convert("RGBA")
        if layer.size != base.size:
            layer = layer.resize(base.size)
        composite = Image.alpha_composite(base, layer)

    output = BytesIO()
    composite.save(output, format="PNG")
    return output.getvalue()


class AnnotationInterpreter:
    """Turn an annotated composite plus a user instruction into a precise edit prompt."""

    def __init__(self, gemini: GeminiClient):
        self.gemini = gemini

    def interpret(self, composite: bytes, instruction: str) -> str:
        """Refined instruction. Falls back to the raw instruction on any service error."""
        prompt = (
            "The user has annotated this image with bright green highlights to indicate areas they want to modify. "
            f'User\'s instruction: "{instruction}"\n\n'
            "Analyze the annotated regions and the user's instruction, then create a detailed, "
            "specific prompt for image editing that:\n"
            "1. Identifies what objects/areas are highlighted\n"
            "2. Understands what the user wants to change based on the instruction and context\n"
            "3. Provides clear editing instructions\n\n"
            "Respond with ONLY the improved editing prompt, nothing else."
        )
        try:
            refined = self.gemini.generate_text([image_part(composite), prompt])
        except Exception as e:
            logger.warning(f"Annotation analysis failed, using raw instruction: {e}")
            return instruction

        if not refined:
            logger.warning("Annotation analysis returned no text, using raw instruction")
            return instruction
        return refined


@dataclass(frozen=True)
class SpellReport:
    """Result of a spelling audit."""

    has_errors: bool
    errors: list[str] = field(default_factory=list)
    fix_instruction: str = ""


class SpellAuditor:
    """Detect visible text errors and synthesize one corrective instruction."""

    def __init__(self, gemini: GeminiClient):
        self.gemini = gemini

    def audit(self, image: bytes) -> SpellReport:
        """
        Check an image for spelling mistakes.

        Raises:
            ParseFailure: the response is not valid JSON
        """
        raw = self.gemini.generate_json([image_part(image), SPELL_PROMPT], SPELL_SCHEMA)
        data = parse_json_response(raw or '{"hasErrors": false, "errors": [], "fixInstruction": ""}')
        if not isinstance(data, dict):
            raise ParseFailure("Spell check response is not a JSON object", raw_output=raw)

        errors = [str(e) for e in data.get("errors") or []]
        has_errors = bool(data.get("hasErrors"))
        fix_instruction = (data.get("fixInstruction") or "").strip() if has_errors else ""

        logger.info(f"Spell check: {len(errors)} issue(s) found")
        return SpellReport(
            has_errors=has_errors,
            errors=errors if has_errors else [],
            fix_instruction=fix_instruction,
        )

    def audit_and_fix(
        self,
        credential: Credential | None,
        session: EditSession,
        applier: "EditApplier",
    ) -> SpellReport:
        """Audit the session's working image and apply the fix (no mask) if needed."""
        report = self.audit(session.image)
        if report.has_errors and report.fix_instruction:
            session.apply(credential, applier, report.fix_instruction)
        return report


class EditApplier:
    """Apply an instruction (optionally mask-guided) to an image."""

    def __init__(
        self,
        gemini: GeminiClient,
        interpreter: AnnotationInterpreter | None = None,
        image_size: str | None = None,
    ):
        self.gemini = gemini
        self.interpreter = interpreter or AnnotationInterpreter(gemini)
        self.image_size = image_size or config.get_category_settings(AssetCategory.MERCHANDISE).draft_size

    def apply(
        self,
        credential: Credential | None,
        image: bytes,
        instruction: str,
        mask: bytes | None = None,
    ) -> bytes:
        """
        Edit an image.

        Args:
            credential: Verified credential
            image: Current working image
            instruction: User instruction
            mask: Annotated composite (working image + highlight strokes), or None
                for a global edit

        Returns:
            The edited image bytes

        Raises:
            ConfigurationError: no usable credential
            EditFailure: the service returned no image
        """
        require_credential(credential)

        if mask:
            # The composite steers the edit; its markings must not survive
            refined = self.interpreter.interpret(mask, instruction)
            parts = [
                image_part(mask),
                "Edit this image based on the following instruction. "
                f"The bright green annotations show the areas to modify: {refined}.\n\n{MASKED_DIRECTIVE}",
            ]
        else:
            parts = [image_part(image), f"{instruction}\n\n{PRESERVE_DIRECTIVE}"]

        logger.info(f"Applying edit (mask={bool(mask)})")
        edited = self.gemini.generate_image(parts, self.image_size)
        if not edited:
            raise EditFailure()
        return edited
