"""Tests for brand DNA synthesis, logo selection and inspiration analysis."""

import json
from unittest.mock import MagicMock

import pytest

from brandstudio.clients.media import MediaPayload
from brandstudio.errors import LogoMissingError, ParseFailure
from brandstudio.models import BrandSpecification
from brandstudio.services.brand import BrandService, choose_logo

from conftest import FakeGemini, make_png

DNA = {
    "colors": ["#000000", "#FF5500"],
    "typography": "Condensed grotesk",
    "visualEssence": "High-contrast streetwear",
    "designSystem": "- Big type",
    "keywords": ["loud", "street"],
    "logoUrl": "",
}


@pytest.fixture
def fetcher():
    fetcher = MagicMock()
    fetcher.resolve.return_value = None
    return fetcher


class TestChooseLogo:
    def test_manual_wins(self):
        assert choose_logo(b"manual", b"extracted", "acme.com") == b"manual"

    def test_extracted_used_without_manual(self):
        assert choose_logo(None, b"extracted", "acme.com") == b"extracted"

    def test_website_without_logo_blocks_save(self):
        with pytest.raises(LogoMissingError):
            choose_logo(None, None, "acme.com")

    def test_no_website_no_logo_is_allowed(self):
        assert choose_logo(None, None, None) is None


class TestSynthesize:
    def test_without_website_skips_search(self, fetcher):
        gemini = FakeGemini(json_text=json.dumps(DNA))
        brand = BrandService(gemini, fetcher).synthesize("Loud", "Streetwear label")

        assert gemini.text_calls == []
        assert brand.name == "Loud"
        assert brand.colors == ("#000000", "#FF5500")
        assert brand.keywords == ("loud", "street")
        assert brand.visual_essence == "High-contrast streetwear"
        assert brand.logo is None

    def test_fenced_json_is_accepted(self, fetcher):
        gemini = FakeGemini(json_text=f"```json\n{json.dumps(DNA)}\n```")
        brand = BrandService(gemini, fetcher).synthesize("Loud", "Streetwear label")
        assert brand.typography == "Condensed grotesk"

    def test_search_context_feeds_extraction(self, fetcher):
        gemini = FakeGemini(text="They use black and orange.", json_text=json.dumps(DNA))
        BrandService(gemini, fetcher).synthesize("Loud", "Streetwear", website_url="loud.example")

        assert gemini.text_calls[0]["search"] is True
        prompt = gemini.json_calls[0]["parts"][0]
        assert "Web Context: They use black and orange." in prompt

    def test_search_failure_is_absorbed(self, fetcher):
        gemini = FakeGemini(json_text=json.dumps(DNA))
        gemini.text_results = [RuntimeError("search unavailable")]
        statuses = []

        brand = BrandService(gemini, fetcher).synthesize(
            "Loud", "Streetwear", website_url="loud.example", on_status=statuses.append
        )

        assert brand.colors == ("#000000", "#FF5500")
        assert "Web Context" not in gemini.json_calls[0]["parts"][0]
        assert "Web scan skipped, proceeding with description..." in statuses
        assert statuses[-1] == "Brand DNA Forged."

    def test_logo_url_is_fetched(self, fetcher):
        fetcher.resolve.return_value = MediaPayload(data=b"logo", mime_type="image/png")
        gemini = FakeGemini(json_text=json.dumps({**DNA, "logoUrl": "https://loud.example/logo.png"}))

        brand = BrandService(gemini, fetcher).synthesize("Loud", "Streetwear")

        fetcher.resolve.assert_called_once_with("https://loud.example/logo.png")
        assert brand.logo == b"logo"

    def test_unparseable_output_raises(self, fetcher):
        gemini = FakeGemini(json_text="Sorry, I cannot help with that.")
        with pytest.raises(ParseFailure) as exc_info:
            BrandService(gemini, fetcher).synthesize("Loud", "Streetwear")
        assert exc_info.value.raw_output == "Sorry, I cannot help with that."

    def test_non_object_output_raises(self, fetcher):
        gemini = FakeGemini(json_text="[1, 2]")
        with pytest.raises(ParseFailure):
            BrandService(gemini, fetcher).synthesize("Loud", "Streetwear")


class TestSaveAndAutoLogo:
    def test_save_prefers_manual_logo(self, brand, fetcher):
        service = BrandService(FakeGemini(), fetcher)
        saved = service.save(brand.with_logo(b"extracted"), manual_logo=b"manual")
        assert saved.logo == b"manual"

    def test_save_blocks_website_brand_without_logo(self, fetcher):
        service = BrandService(FakeGemini(), fetcher)
        with pytest.raises(LogoMissingError):
            service.save(BrandSpecification(name="Acme", description="", website_url="acme.com"))

    def test_auto_logo_uses_resolver(self, fetcher):
        resolver = MagicMock()
        resolver.resolve.return_value = MediaPayload(data=b"favicon", mime_type="image/png")
        service = BrandService(FakeGemini(), fetcher, logo_resolver=resolver)

        assert service.auto_logo("acme.com") == b"favicon"
        resolver.resolve.assert_called_once_with("acme.com")


class TestAnalyzeInspiration:
    def test_extracts_cues(self, fetcher):
        gemini = FakeGemini(json_text='["Halftone patterns", " Film grain ", ""]')
        image = make_png()

        cue = BrandService(gemini, fetcher).analyze_inspiration(image, "gritty zine look")

        assert cue.cues == ("Halftone patterns", "Film grain")
        assert cue.note == "gritty zine look"
        assert cue.image == image
        assert cue.id
        assert 'User note: "gritty zine look"' in gemini.json_calls[0]["parts"][1]

    def test_non_array_raises(self, fetcher):
        gemini = FakeGemini(json_text='{"cues": []}')
        with pytest.raises(ParseFailure):
            BrandService(gemini, fetcher).analyze_inspiration(make_png(), "")
