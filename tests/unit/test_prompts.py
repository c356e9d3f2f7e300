"""Unit tests for prompt assembly."""

import pytest

from backend.assistant.prompts import (
    CHAT_RULES,
    DEFAULT_CHAT_PERSONA,
    DEFAULT_GOAL,
    DEFAULT_PROBLEM,
    FEATURE_LABELS,
    MARKET_SYSTEM_PROMPT,
    SOIL_VISION_SYSTEM_PROMPT,
    AssembledPrompt,
    Feature,
    assemble,
    market_location,
    market_subject,
)


class TestChatPrompt:

    def test_default_persona(self):
        prompt = assemble(Feature.CHAT, {"user_prompt": "When to sow wheat?"})
        assert prompt.system_prompt == DEFAULT_CHAT_PERSONA + CHAT_RULES
        assert prompt.user_prompt == "When to sow wheat?"
        assert prompt.image_url is None

    def test_custom_persona_and_language(self):
        prompt = assemble(Feature.CHAT, {
            "system_prompt": "You are a pest expert.",
            "user_prompt": "Aphids?",
            "lang_instruction": "\nRespond in Hindi.",
        })
        assert prompt.system_prompt.startswith("You are a pest expert.")
        assert prompt.system_prompt.endswith("\nRespond in Hindi.")

    def test_blank_persona_uses_default(self):
        prompt = assemble(Feature.CHAT, {"system_prompt": "   ", "user_prompt": "hi"})
        assert prompt.system_prompt.startswith(DEFAULT_CHAT_PERSONA)


class TestVisionPrompts:

    def test_vision_user_turn_is_single_image_part(self):
        prompt = assemble(Feature.VISION, {"image": "data:image/jpeg;base64,AAAA"})
        messages = prompt.to_messages()

        assert messages[1] == {
            "role": "user",
            "content": [{"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,AAAA"}}],
        }

    def test_soil_vision_ignores_caller_system_prompt(self):
        prompt = assemble(Feature.SOIL_VISION, {
            "image": "data:image/jpeg;base64,AAAA",
            "system_prompt": "ignored",
            "lang_instruction": "\nRespond in Tamil.",
        })
        assert prompt.system_prompt == SOIL_VISION_SYSTEM_PROMPT + "\nRespond in Tamil."
        assert "ignored" not in prompt.system_prompt


class TestStructuredPrompts:

    def test_crop_calendar_defaults(self):
        prompt = assemble(Feature.CROP_CALENDAR, {"crop": "rice"})
        assert prompt.user_prompt == "Generate a detailed crop calendar for rice in India during the current season."

    def test_crop_calendar_explicit_fields(self):
        prompt = assemble(Feature.CROP_CALENDAR, {"crop": "rice", "location": "Punjab", "season": "Kharif"})
        assert "rice in Punjab during Kharif" in prompt.user_prompt

    def test_irrigation_defaults(self):
        prompt = assemble(Feature.IRRIGATION, {"crop": "wheat"})
        assert "wheat at general growth stage" in prompt.user_prompt
        assert "Soil/climate condition: not specified." in prompt.user_prompt

    def test_fertilizer_defaults(self):
        prompt = assemble(Feature.FERTILIZER_GUIDE, {"crop": "tomato", "problem": ""})
        assert "- Crop: tomato" in prompt.user_prompt
        assert "- Soil type/condition: unspecified soil type" in prompt.user_prompt
        assert "- Region: India" in prompt.user_prompt
        assert f"- Main goal: {DEFAULT_GOAL}" in prompt.user_prompt
        assert f"- Field notes / problems: {DEFAULT_PROBLEM}" in prompt.user_prompt

    def test_whitespace_language_kept_verbatim(self):
        prompt = assemble(Feature.CROP_CALENDAR, {"crop": "rice", "lang_instruction": "  "})
        assert prompt.system_prompt.endswith("Focus on Indian agriculture context.  ")

    def test_language_appended_to_every_feature(self):
        fields = {"crop": "maize", "image": "data:x", "user_prompt": "q", "lang_instruction": "\nUSE MARATHI"}
        for feature in Feature:
            assert assemble(feature, fields).system_prompt.endswith("\nUSE MARATHI")


class TestMarketPrompt:

    def test_subject_fallback_chain(self):
        assert market_subject({"crop": "onion", "user_prompt": "price?"}) == "onion"
        assert market_subject({"user_prompt": "tomato price trend"}) == "tomato price trend"
        assert market_subject({}) == "crops"

    def test_location_fallback_chain(self):
        assert market_location({"district": "Nashik", "region": "Maharashtra"}) == "Nashik"
        assert market_location({"region": "Maharashtra"}) == "Maharashtra"
        assert market_location({"district": " "}) == "local region"

    def test_empty_request(self):
        prompt = assemble(Feature.MARKET_PRICES, {})
        assert prompt.system_prompt == MARKET_SYSTEM_PROMPT
        assert "market prices for crops in local region" in prompt.user_prompt


class TestAssembly:

    @pytest.mark.parametrize("feature", list(Feature))
    def test_deterministic(self, feature):
        fields = {"crop": "rice", "image": "data:x", "user_prompt": "hello", "district": "Pune"}
        assert assemble(feature, fields) == assemble(feature, fields)

    def test_every_feature_has_label(self):
        assert set(FEATURE_LABELS) == set(Feature)
        assert FEATURE_LABELS[Feature.CROP_CALENDAR] == "Crop Calendar"

    def test_accepts_feature_value_string(self):
        assert assemble("crop-calendar", {"crop": "rice"}) == assemble(Feature.CROP_CALENDAR, {"crop": "rice"})

    def test_text_messages(self):
        messages = AssembledPrompt(system_prompt="S", user_prompt="U").to_messages()
        assert messages == [{"role": "system", "content": "S"}, {"role": "user", "content": "U"}]
