"""Scene-direction templates for video generation, chosen by subtype."""

import json
from typing import Any, Callable

from ..models.brand import BrandSpecification
from ..utils import subtype_matches

SceneBuilder = Callable[[str, BrandSpecification], dict[str, Any]]


def _fidelity(subject: str) -> str:
    return (
        f"{subject} MUST match the reference image with pixel-level fidelity - exact colors, exact graphics, "
        "exact text, exact logo placement. No modifications allowed."
    )


def _apparel_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": "Professional corporate office environment during daytime",
        "subject": {
            "type": "Young professional, 25-30 years old",
            "wardrobe": f"Wearing the EXACT {subtype} design from reference image",
            "action": "Walking confidently through modern glass-walled office corridor with natural stride",
        },
        "camera": {
            "movement": "Smooth tracking shot following subject from side angle, steady cam",
            "framing": f"Medium shot keeping the {subtype} design clearly visible and centered",
            "transitions": "Cut to front view showing chest/design area in detail, then back to tracking",
        },
        "environment": {
            "setting": "Contemporary open-plan office with clean white walls, glass partitions, green plants",
            "lighting": "Natural window light from left side, soft ambient office lighting",
        },
        "technical_specs": {"duration": "6-8 seconds", "color_grading": "Clean, professional, slight warmth"},
        "critical_requirement": _fidelity(f"The {subtype} design"),
    }


def _billboard_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": "POV from inside a moving car on a multi-lane highway during golden hour",
        "billboard": {
            "size": "Large roadside billboard (48ft x 14ft standard)",
            "content": "Displays EXACT design from reference image - same layout, colors, text, graphics, logo position",
            "position": "Right side of highway, 50 meters ahead initially",
        },
        "camera": {
            "perspective": "Dashboard camera POV, slight right angle to capture billboard",
            "movement": "Smooth forward motion at highway speed, approaching then passing billboard",
            "framing": "Billboard starts small in frame, grows to fill 60% of frame at closest point, then passes",
        },
        "environment": {
            "road": "4-lane highway with light traffic",
            "time": "Late afternoon, golden hour lighting",
            "surroundings": "Green grass embankment, distant trees, other highway signs visible",
        },
        "technical_specs": {"duration": "6-8 seconds", "color_grading": "Warm golden hour tones"},
        "critical_requirement": _fidelity("Billboard design"),
    }


def _poster_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": "Modern office interior with cork or fabric notice board on white wall",
        "subject": {
            "type": "Professional hands",
            "action": f"Carefully positioning and smoothing the {subtype} onto the notice board",
        },
        "camera": {
            "angle": "Close-up, slightly elevated angle (15 degrees)",
            "movement": "Static initially, slow push-in to show design details mid-shot",
            "framing": f"Hands and {subtype} fill 80% of frame, maintaining focus on design",
        },
        "environment": {
            "wall": "Clean white wall or light gray cork board",
            "lighting": "Soft overhead office lighting, no harsh shadows on poster",
        },
        "technical_specs": {"duration": "6-8 seconds", "focus": f"Shallow depth of field, {subtype} design sharp"},
        "critical_requirement": _fidelity(f"The {subtype} design"),
    }


def _headwear_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": "Urban street environment, trendy neighborhood during daytime",
        "subject": {
            "type": "Stylish individual, 20-30 years old, contemporary streetwear",
            "headwear": f"Wearing the EXACT {subtype} design from reference image",
            "action": "Walking casually down sidewalk with confident stride",
        },
        "camera": {
            "movement": "Orbiting 270-degree arc around subject while they walk",
            "framing": f"Upper body and head shots, keeping {subtype} design visible throughout",
        },
        "environment": {
            "location": "Clean urban sidewalk with brick buildings, cafe storefronts",
            "lighting": f"Natural daylight, slight overcast for even lighting on {subtype}",
        },
        "technical_specs": {"duration": "6-8 seconds", "stabilization": "Smooth gimbal, no camera shake"},
        "critical_requirement": _fidelity(f"The {subtype} design"),
    }


def _bag_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": "Trendy coffee shop district, outdoor pedestrian area",
        "subject": {
            "type": "Fashionable person, casual-chic outfit",
            "carrying": f"The EXACT {subtype} design from reference image",
            "action": "Walking naturally through shopping street, bag swinging gently with stride",
        },
        "camera": {
            "movement": "Parallel side tracking at waist level, consistent distance",
            "framing": f"{subtype} visible throughout, occupying 30-40% of frame",
        },
        "environment": {
            "setting": "Upscale shopping district with cafe umbrellas, boutique windows",
            "time": "Mid-morning, soft natural light",
        },
        "technical_specs": {"duration": "6-8 seconds", "color_grading": "Lifestyle aesthetic, warm tones"},
        "critical_requirement": _fidelity(f"The {subtype} design"),
    }


def _commercial_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": f"Brand commercial for {brand.name} opening on the reference keyframe",
        "camera": {
            "movement": "Slow cinematic dolly-in from the opening frame, then gentle lateral drift",
            "framing": "Widescreen hero composition matching the reference keyframe",
        },
        "environment": {
            "setting": "Continuation of the environment shown in the reference keyframe",
            "lighting": "Cinematic, motivated lighting consistent with the keyframe",
        },
        "technical_specs": {"duration": "15-20 seconds", "aesthetic": brand.visual_essence},
        "critical_requirement": _fidelity("The opening frame"),
    }


def _showcase_scene(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    return {
        "scene_description": f"Professional showcase environment for {subtype}",
        "subject": f"The EXACT {subtype} design from reference image",
        "camera": {
            "movement": "Cinematic reveal with slow push-in and orbit",
            "framing": f"Hero product shot, {subtype} centered and prominent",
        },
        "environment": {"lighting": "Studio-quality three-point lighting, emphasizing design details"},
        "technical_specs": {"duration": "6-8 seconds", "aesthetic": brand.visual_essence},
        "critical_requirement": _fidelity(subtype),
    }


# First match wins
SCENE_TEMPLATES: list[tuple[tuple[str, ...], SceneBuilder]] = [
    (("hoodie", "shirt", "tshirt"), _apparel_scene),
    (("billboard",), _billboard_scene),
    (("banner", "poster", "flyer"), _poster_scene),
    (("cap", "hat"), _headwear_scene),
    (("tote", "bag"), _bag_scene),
    (("commercial", "advert", "video ad"), _commercial_scene),
]


def scene_direction(subtype: str, brand: BrandSpecification) -> dict[str, Any]:
    """Structured scene direction for a subtype (generic showcase if nothing matches)."""
    for needles, builder in SCENE_TEMPLATES:
        if subtype_matches(subtype, *needles):
            return builder(subtype, brand)
    return _showcase_scene(subtype, brand)


def build_video_prompt(direction: dict[str, Any], brand: BrandSpecification, script: str | None = None) -> str:
    """Serialize scene direction into the video request prompt."""
    prompt = f"Generate video based on this scene direction:\n\n{json.dumps(direction, indent=2)}\n\nBrand: {brand.name}"
    if script:
        prompt += f"\n\nVoiceover script:\n{script}"
    return prompt
