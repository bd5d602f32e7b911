"""Shared fixtures: a recording fake Gemini client, brands and small test images."""

import threading
from io import BytesIO

import pytest
from PIL import Image

from brandstudio.models import BrandSpecification, Credential, InspirationCue


def make_png(color=(255, 0, 0, 255), size=(8, 8)) -> bytes:
    img = Image.new("RGBA", size, color)
    output = BytesIO()
    img.save(output, format="PNG")
    return output.getvalue()


def make_jpeg(color=(0, 0, 255), size=(8, 8)) -> bytes:
    img = Image.new("RGB", size, color)
    output = BytesIO()
    img.save(output, format="JPEG")
    return output.getvalue()


class FakeGemini:
    """Stands in for GeminiClient. Records every call; returns queued or default results.

    Queued results may be exceptions, which are raised instead of returned.
    """

    def __init__(self, image=b"generated-image", text="generated text", json_text="{}"):
        self.default_image = image
        self.default_text = text
        self.default_json = json_text
        self.image_results = []
        self.text_results = []
        self.json_results = []
        self.image_calls = []
        self.text_calls = []
        self.json_calls = []
        self.video_results = []
        self.video_calls = []
        self._lock = threading.Lock()

    def _next(self, queue, default):
        with self._lock:
            result = queue.pop(0) if queue else default
        if isinstance(result, Exception):
            raise result
        return result

    def generate_image(self, parts, image_size, aspect_ratio=None):
        with self._lock:
            self.image_calls.append({"parts": parts, "image_size": image_size, "aspect_ratio": aspect_ratio})
        return self._next(self.image_results, self.default_image)

    def generate_text(self, parts, search=False):
        with self._lock:
            self.text_calls.append({"parts": parts, "search": search})
        return self._next(self.text_results, self.default_text)

    def generate_json(self, parts, schema):
        with self._lock:
            self.json_calls.append({"parts": parts, "schema": schema})
        return self._next(self.json_results, self.default_json)

    def submit_video(self, prompt, image):
        with self._lock:
            self.video_calls.append({"prompt": prompt, "image": image})
        return self._next(self.video_results, None)

    def get_operation(self, operation):
        return operation


def inline_images(parts) -> list:
    """Non-text parts of a request, in order."""
    return [p for p in parts if not isinstance(p, str)]


def text_parts(parts) -> list[str]:
    return [p for p in parts if isinstance(p, str)]


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def credential():
    return Credential(api_key="test-key")


@pytest.fixture
def logo():
    return make_png((0, 255, 0, 255))


@pytest.fixture
def brand():
    return BrandSpecification(
        name="Acme",
        description="Outdoor gear for city people",
        colors=("#112233", "#FFAA00"),
        typography="Geometric sans-serif",
        visual_essence="Rugged minimalism",
        design_system="- Generous whitespace\n- Bold headlines",
        keywords=("rugged", "urban", "bold"),
    )


@pytest.fixture
def brand_with_logo(brand, logo):
    return brand.with_logo(logo)


@pytest.fixture
def inspirations():
    return [
        InspirationCue(id="a", image=make_png(), note="grainy", cues=("Halftone patterns", "Film grain")),
        InspirationCue(id="b", image=make_png(), note="retro", cues=("Chromatic aberration",)),
    ]
