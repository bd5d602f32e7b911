"""Event handler for asset generation actions (Lambda/SQS style or local CLI)."""

import json
import logging

from ..clients.gemini import GeminiClient
from ..clients.media import MediaFetchResolver
from ..config import DRAFT_COUNT, GEMINI_API_KEY
from ..errors import (
    ConfigurationError,
    GenerationFailure,
    JobCancelled,
    JobFailure,
    JobTimeout,
    ParseFailure,
)
from ..models import (
    AssetCategory,
    BrandSpecification,
    Credential,
    EditSession,
    GeneratedAsset,
    InspirationCue,
    require_credential,
)
from ..services import (
    DraftFanoutGenerator,
    EditApplier,
    Finalizer,
    LogoResolver,
    RealWorldPreviewService,
    SpellAuditor,
)
from ..utils import from_data_url, to_data_url

logger = logging.getLogger(__name__)

ACTIONS = ("logo", "drafts", "edit", "spellcheck", "finalize", "preview")


class BadRequest(ValueError):
    """Invalid or missing input field."""
    pass


def _response(status_code: int, body: dict) -> dict:
    return {"statusCode": status_code, "body": json.dumps(body)}


def _require(body: dict, key: str):
    if not body.get(key):
        raise BadRequest(f"Missing '{key}' field")
    return body[key]


def _decode(value, key: str) -> bytes:
    try:
        return from_data_url(value)
    except (ValueError, TypeError, AttributeError) as e:
        raise BadRequest(f"Invalid image in '{key}': {e}")


def _image(body: dict, key: str) -> bytes:
    return _decode(_require(body, key), key)


def parse_brand(data: dict) -> BrandSpecification:
    """Build brand DNA from its JSON shape (camelCase keys, logo as data URL)."""
    if not isinstance(data, dict) or not data.get("name"):
        raise BadRequest("Missing 'brand.name' field")
    logo = data.get("logoImage")
    return BrandSpecification(
        name=data["name"],
        description=data.get("description", ""),
        website_url=data.get("websiteUrl"),
        colors=tuple(data.get("colors") or ()),
        typography=data.get("typography", ""),
        visual_essence=data.get("visualEssence", ""),
        design_system=data.get("designSystem", ""),
        keywords=tuple(data.get("keywords") or ()),
        logo=_decode(logo, "brand.logoImage") if logo else None,
    )


def parse_inspirations(items: list[dict]) -> list[InspirationCue]:
    return [
        InspirationCue(
            id=str(item.get("id", i)),
            image=_decode(item["imageUrl"], f"inspirations[{i}].imageUrl") if item.get("imageUrl") else b"",
            note=item.get("description", ""),
            cues=tuple(item.get("extractedCues") or ()),
        )
        for i, item in enumerate(items or [])
    ]


def parse_category(value: str | None) -> AssetCategory:
    try:
        return AssetCategory(str(value or "").upper())
    except ValueError:
        raise BadRequest(f"Unknown category: {value!r}")


def serialize_asset(asset: GeneratedAsset) -> dict:
    return {
        "id": asset.id,
        "type": asset.category.value,
        "subtype": asset.subtype,
        "url": asset.url,
        "promptUsed": asset.prompt_used,
        "createdAt": asset.created_at,
        "isDraft": asset.is_draft,
    }


def run_action(action: str, body: dict, credential: Credential | None) -> tuple[int, dict]:
    """Dispatch one action. Returns (status_code, response body)."""
    if action not in ACTIONS:
        raise BadRequest(f"Unknown action: {action!r} (expected one of {', '.join(ACTIONS)})")

    if action == "logo":
        resolver = LogoResolver(MediaFetchResolver())
        payload = resolver.resolve(_require(body, "url"))
        return 200, {"logo": to_data_url(payload.data, payload.mime_type) if payload else None}

    # Everything below calls the generative service
    credential = require_credential(credential)
    gemini = GeminiClient.from_credential(credential)
    brand = parse_brand(body.get("brand"))

    if action == "drafts":
        category = parse_category(body.get("category"))
        drafts = DraftFanoutGenerator(gemini).generate(
            credential,
            brand,
            parse_inspirations(body.get("inspirations")),
            category,
            _require(body, "subtype"),
        )
        status_code = 200 if len(drafts) == DRAFT_COUNT else 207  # 207 = partial success
        return status_code, {"drafts": [to_data_url(d) for d in drafts], "count": len(drafts)}

    if action == "edit":
        image = _image(body, "image")
        mask = _image(body, "mask") if body.get("mask") else None
        edited = EditApplier(gemini).apply(credential, image, _require(body, "instruction"), mask=mask)
        return 200, {"image": to_data_url(edited)}

    if action == "spellcheck":
        session = EditSession(_image(body, "image"))
        auditor = SpellAuditor(gemini)
        if body.get("autoFix", True):
            report = auditor.audit_and_fix(credential, session, EditApplier(gemini))
        else:
            report = auditor.audit(session.image)
        fixed = to_data_url(session.image) if session.instructions else None
        return 200, {
            "hasErrors": report.has_errors,
            "errors": report.errors,
            "fixInstruction": report.fix_instruction,
            "image": fixed,
        }

    if action == "finalize":
        category = parse_category(body.get("category"))
        asset = Finalizer(gemini).finalize(credential, brand, _image(body, "image"), category, _require(body, "subtype"))
        return 200, {"asset": serialize_asset(asset)}

    # preview
    category = parse_category(body.get("category"))
    asset = RealWorldPreviewService(gemini).generate(
        credential, brand, _image(body, "image"), category, _require(body, "subtype")
    )
    return 200, {"asset": serialize_asset(asset)}


def handler(event, context):
    """
    Lambda-style handler - triggered by SQS or HTTP.

    Input payload:
    {
        "action": "drafts",
        "brand": {"name": "Acme", "colors": ["#111111"], ...},
        "category": "MERCHANDISE",
        "subtype": "Hoodie"
    }

    Images (brand.logoImage, image, mask) travel as data URLs.
    """
    # Handle SQS event format
    try:
        if "Records" in event:
            body = json.loads(event["Records"][0]["body"])
        else:
            body = json.loads(event.get("body") or "{}")
    except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
        return _response(400, {"error": f"Invalid event body: {e}"})

    action = body.get("action")
    if not action:
        return _response(400, {"error": "Missing 'action' field"})

    credential = Credential(api_key=GEMINI_API_KEY) if GEMINI_API_KEY else None

    try:
        logger.info(f"Processing action: {action}")
        status_code, result = run_action(action, body, credential)
        return _response(status_code, result)
    except BadRequest as e:
        return _response(400, {"error": str(e)})
    except ConfigurationError as e:
        return _response(401, {"error": str(e)})
    except JobTimeout as e:
        # The job may still finish remotely
        return _response(504, {"error": str(e), "retryable": True})
    except (GenerationFailure, ParseFailure, JobFailure, JobCancelled) as e:
        return _response(502, {"error": str(e)})
    except Exception as e:
        logger.exception(f"Action {action} failed")
        return _response(500, {"error": str(e)})


# Local testing
if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if len(sys.argv) < 3:
        print("Usage: python -m brandstudio.handlers.worker <action> <payload_json>")
        print()
        print(f"Actions: {', '.join(ACTIONS)}")
        print()
        print("Example (logo):")
        print('  python -m brandstudio.handlers.worker logo \'{"url": "https://stripe.com"}\'')
        print()
        print("Example (drafts):")
        print('  python -m brandstudio.handlers.worker drafts \'{"brand": {"name": "Acme"}, "category": "MERCHANDISE", "subtype": "Hoodie"}\'')
        sys.exit(1)

    payload = json.loads(sys.argv[2])
    payload["action"] = sys.argv[1]

    result = handler({"body": json.dumps(payload)}, None)
    print(f"Status: {result['statusCode']}")
    print(json.dumps(json.loads(result["body"]), indent=2)[:4000])
