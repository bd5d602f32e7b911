"""Tests for the storyboard (script, keyframes, confirmed render) flow."""

import json
from unittest.mock import MagicMock

import pytest

from brandstudio.errors import ConfigurationError, FailureStage, GenerationFailure, ParseFailure
from brandstudio.models import AssetCategory
from brandstudio.services.storyboard import ChatMessage, Keyframe, Storyboard, StoryboardOrchestrator

from conftest import FakeGemini

SCENES = json.dumps([
    {"description": "Runner laces up at dawn"},
    {"description": "City skyline blur"},
    {"description": "Logo on a wet jacket"},
])

CONVERSATION = [
    ChatMessage("user", "I want a gritty ad for our rain jackets"),
    ChatMessage("assistant", "How about a dawn run through the city?"),
    ChatMessage("user", "Yes, dawn run it is"),
]


@pytest.fixture
def renderer():
    renderer = MagicMock()
    renderer.render.return_value = "https://video.test/ad.mp4?key=test-key"
    return renderer


class TestConversation:
    def test_brainstorm_includes_transcript(self, brand):
        gemini = FakeGemini(text="Open on rain hitting the pavement.")
        reply = StoryboardOrchestrator(gemini).brainstorm(brand, CONVERSATION)

        assert reply == "Open on rain hitting the pavement."
        prompt = gemini.text_calls[0]["parts"][0]
        assert "USER: Yes, dawn run it is" in prompt
        assert "Brand: Acme" in prompt

    def test_empty_brainstorm_fails(self, brand):
        with pytest.raises(GenerationFailure) as exc_info:
            StoryboardOrchestrator(FakeGemini(text="")).brainstorm(brand, CONVERSATION)
        assert exc_info.value.stage == FailureStage.TEXT

    def test_empty_script_fails(self, brand):
        with pytest.raises(GenerationFailure) as exc_info:
            StoryboardOrchestrator(FakeGemini(text="")).write_script(brand, CONVERSATION)
        assert exc_info.value.stage == FailureStage.SCRIPT


class TestKeyframes:
    def test_three_keyframes_in_widescreen(self, brand, credential):
        gemini = FakeGemini(json_text=SCENES)
        gemini.image_results = [b"k1", b"k2", b"k3"]

        keyframes = StoryboardOrchestrator(gemini).create_keyframes(credential, brand, CONVERSATION, "Script")

        assert [k.description for k in keyframes] == [
            "Runner laces up at dawn",
            "City skyline blur",
            "Logo on a wet jacket",
        ]
        assert len(gemini.image_calls) == 3
        assert all(call["aspect_ratio"] == "16:9" for call in gemini.image_calls)

    def test_one_failed_keyframe_is_tolerated(self, brand, credential):
        gemini = FakeGemini(image=b"k", json_text=SCENES)
        gemini.image_results = [None]

        keyframes = StoryboardOrchestrator(gemini).create_keyframes(credential, brand, CONVERSATION, "Script")

        assert len(keyframes) == 2

    def test_too_few_keyframes_fail(self, brand, credential):
        gemini = FakeGemini(image=None, json_text=SCENES)
        gemini.image_results = [b"only"]

        with pytest.raises(GenerationFailure) as exc_info:
            StoryboardOrchestrator(gemini).create_keyframes(credential, brand, CONVERSATION, "Script")
        assert exc_info.value.stage == FailureStage.KEYFRAMES

    def test_service_error_propagates_unchanged(self, brand, credential):
        gemini = FakeGemini(image=b"k", json_text=SCENES)
        gemini.image_results = [ConnectionError("network down")]

        with pytest.raises(ConnectionError, match="network down"):
            StoryboardOrchestrator(gemini).create_keyframes(credential, brand, CONVERSATION, "Script")

    def test_unparseable_scene_plan(self, brand, credential):
        gemini = FakeGemini(json_text="three scenes, trust me")
        with pytest.raises(ParseFailure):
            StoryboardOrchestrator(gemini).create_keyframes(credential, brand, CONVERSATION, "Script")

    def test_missing_credential(self, brand):
        gemini = FakeGemini(json_text=SCENES)
        with pytest.raises(ConfigurationError):
            StoryboardOrchestrator(gemini).create_keyframes(None, brand, CONVERSATION, "Script")
        assert gemini.json_calls == []


class TestStoryboardFlow:
    def test_create_storyboard(self, brand, credential, renderer):
        gemini = FakeGemini(text="Acme. Built for the rain.", json_text=SCENES)
        statuses = []

        storyboard = StoryboardOrchestrator(gemini, renderer=renderer).create_storyboard(
            credential, brand, CONVERSATION, on_status=statuses.append
        )

        assert storyboard.script == "Acme. Built for the rain."
        assert storyboard.concept == "Yes, dawn run it is"
        assert len(storyboard.keyframes) == 3
        assert statuses == ["Generating the voiceover script...", "Creating keyframes..."]
        renderer.render.assert_not_called()

    def test_render_requires_confirmation(self, brand, credential, renderer):
        storyboard = Storyboard("concept", "script", [Keyframe(b"k1", "scene")])
        with pytest.raises(ValueError):
            StoryboardOrchestrator(FakeGemini(), renderer=renderer).render_video(credential, brand, storyboard)
        renderer.render.assert_not_called()

    def test_edited_script_is_sent(self, brand, credential, renderer):
        storyboard = Storyboard(
            "concept",
            "Original script.",
            [Keyframe(b"k1", "Runner laces up"), Keyframe(b"k2", "Skyline")],
        )
        storyboard.edit_script("Edited script. Acme.")

        asset = StoryboardOrchestrator(FakeGemini(), renderer=renderer).render_video(
            credential, brand, storyboard, confirmed=True
        )

        _, prompt, image, _ = renderer.render.call_args[0]
        assert "Voiceover script:\nEdited script. Acme." in prompt
        assert "Original script." not in prompt
        assert '"Runner laces up"' in prompt
        assert image == b"k1"
        assert asset.category == AssetCategory.VIDEO
        assert asset.url == "https://video.test/ad.mp4?key=test-key"
        assert asset.base_image == b"k1"

    def test_render_without_keyframes(self, brand, credential, renderer):
        storyboard = Storyboard("concept", "script", [])
        with pytest.raises(ValueError):
            StoryboardOrchestrator(FakeGemini(), renderer=renderer).render_video(
                credential, brand, storyboard, confirmed=True
            )
