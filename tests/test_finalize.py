"""Tests for draft finalization."""

import pytest

from brandstudio.errors import ConfigurationError, FailureStage, FinalizationFailure, SessionClosedError
from brandstudio.models import AssetCategory, EditSession
from brandstudio.services.finalize import LOGO_FIDELITY_DIRECTIVE, Finalizer
from brandstudio.utils import from_data_url

from conftest import FakeGemini, inline_images, make_png, text_parts


class TestFinalizer:
    def test_logo_is_sent_as_second_reference(self, brand_with_logo, credential, logo):
        gemini = FakeGemini(image=make_png((1, 2, 3, 255)))
        draft = make_png()

        Finalizer(gemini).finalize(credential, brand_with_logo, draft, AssetCategory.MERCHANDISE, "Hoodie")

        parts = gemini.image_calls[0]["parts"]
        images = inline_images(parts)
        assert len(images) == 2
        assert images[0].inline_data.data == draft
        assert images[1].inline_data.data == logo
        assert text_parts(parts).count(LOGO_FIDELITY_DIRECTIVE) == 1

    def test_without_logo_only_the_draft(self, brand, credential):
        gemini = FakeGemini()
        Finalizer(gemini).finalize(credential, brand, make_png(), AssetCategory.MERCHANDISE, "Hoodie")

        parts = gemini.image_calls[0]["parts"]
        assert len(inline_images(parts)) == 1
        assert LOGO_FIDELITY_DIRECTIVE not in text_parts(parts)

    def test_uses_final_size_and_category_ratio(self, brand, credential):
        gemini = FakeGemini()
        Finalizer(gemini).finalize(credential, brand, make_png(), AssetCategory.MARKETING, "Poster")

        call = gemini.image_calls[0]
        assert call["image_size"] == "2K"
        assert call["aspect_ratio"] == "3:4"
        assert "Item: Poster for brand Acme." in call["parts"][1]

    def test_asset_fields(self, brand, credential):
        final = make_png((9, 9, 9, 255))
        draft = make_png()
        gemini = FakeGemini(image=final)

        asset = Finalizer(gemini).finalize(credential, brand, draft, AssetCategory.DIGITAL, "Banner")

        assert asset.category == AssetCategory.DIGITAL
        assert asset.subtype == "Banner"
        assert asset.url.startswith("data:image/png;base64,")
        assert from_data_url(asset.url) == final
        assert asset.prompt_used == "Finalized from draft"
        assert asset.base_image == draft
        assert asset.is_draft is False

    def test_no_image_raises(self, brand, credential):
        gemini = FakeGemini(image=None)
        with pytest.raises(FinalizationFailure) as exc_info:
            Finalizer(gemini).finalize(credential, brand, make_png(), AssetCategory.DIGITAL, "Banner")
        assert exc_info.value.stage == FailureStage.FINALIZE

    def test_missing_credential(self, brand):
        gemini = FakeGemini()
        with pytest.raises(ConfigurationError):
            Finalizer(gemini).finalize(None, brand, make_png(), AssetCategory.DIGITAL, "Banner")
        assert gemini.image_calls == []


class TestSessionFinalize:
    def test_finalize_closes_session(self, brand, credential):
        session = EditSession(make_png())
        asset = session.finalize(credential, Finalizer(FakeGemini()), brand, AssetCategory.DIGITAL, "Banner")

        assert asset.base_image == session.image
        assert session.closed
        with pytest.raises(SessionClosedError):
            session.finalize(credential, Finalizer(FakeGemini()), brand, AssetCategory.DIGITAL, "Banner")

    def test_failed_finalize_leaves_session_open(self, brand, credential):
        session = EditSession(make_png())
        with pytest.raises(FinalizationFailure):
            session.finalize(credential, Finalizer(FakeGemini(image=None)), brand, AssetCategory.DIGITAL, "Banner")
        assert not session.closed
