import base64
import json
import re
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from .errors import ParseFailure

_FENCE_START = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```\s*$")

_PIL_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "ICO": "image/x-icon",
    "BMP": "image/bmp",
}


def strip_json_fences(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence.

    Example: "```json\\n{}\\n```" -> "{}"
    """
    return _FENCE_END.sub("", _FENCE_START.sub("", text)).strip()


def normalize_subtype(subtype: str) -> str:
    """Lowercase and trim a subtype for substring matching.

    Example: "  T-Shirt " -> "t-shirt"
    """
    return subtype.strip().lower()


def subtype_matches(subtype: str, *needles: str) -> bool:
    """True if any needle occurs in the normalized subtype."""
    normalized = normalize_subtype(subtype)
    return any(needle in normalized for needle in needles)


def image_mime_type(data: bytes, default: str = "image/png") -> str:
    """Sniff the mime type of image bytes with Pillow."""
    try:
        with Image.open(BytesIO(data)) as img:
            return _PIL_MIME_TYPES.get(img.format or "", default)
    except (UnidentifiedImageError, OSError):
        return default


def to_data_url(data: bytes, mime_type: str | None = None) -> str:
    """Encode bytes as a base64 data URL."""
    mime = mime_type or image_mime_type(data)
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def from_data_url(value: str) -> bytes:
    """Decode a data URL (or bare base64 string) to bytes."""
    if value.startswith("data:"):
        _, _, value = value.partition(",")
    return base64.b64decode(value)


def parse_json_response(text: str):
    """Strip markdown fences and parse JSON. Unparseable output is a hard failure."""
    cleaned = strip_json_fences(text or "")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"Failed to parse JSON response: {e}", raw_output=text) from e
