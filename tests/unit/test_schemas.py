"""Unit tests for Pydantic API schemas."""

import pytest
from pydantic import ValidationError

from backend.api.schemas import (
    ChatRequest,
    CropCalendarRequest,
    ErrorResponse,
    FertilizerRequest,
    HealthResponse,
    IrrigationRequest,
    MarketPriceRequest,
    VisionRequest,
)


class TestChatRequest:

    def test_valid_request(self):
        req = ChatRequest(user_prompt="When to sow?", system_prompt="Expert")
        assert req.user_prompt == "When to sow?"
        assert req.lang_instruction == ""

    def test_missing_prompt_allowed_at_schema_level(self):
        req = ChatRequest()
        assert req.user_prompt is None

    def test_blank_prompt_treated_as_absent(self):
        assert ChatRequest(user_prompt="   ").user_prompt is None

    def test_unknown_fields_ignored(self):
        req = ChatRequest.model_validate({"user_prompt": "hi", "session": "x"})
        assert "session" not in req.model_dump()

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({"user_prompt": ["not", "a", "string"]})


class TestFeatureDefaults:

    def test_crop_calendar(self):
        req = CropCalendarRequest(crop="rice")
        assert req.location == "India"
        assert req.season == "the current season"

    def test_blank_language_instruction_kept(self):
        req = CropCalendarRequest.model_validate({"crop": "rice", "lang_instruction": "  "})
        assert req.lang_instruction == "  "

    def test_blank_location_gets_default(self):
        req = CropCalendarRequest.model_validate({"crop": "rice", "location": ""})
        assert req.location == "India"

    def test_irrigation(self):
        req = IrrigationRequest(crop="wheat")
        assert req.growth_stage == "general"
        assert req.climate == "not specified"

    def test_fertilizer(self):
        req = FertilizerRequest(crop="tomato")
        assert req.soil_type == "unspecified soil type"
        assert req.goal == "improve yield and soil health using only natural inputs"
        assert req.problem == ""
        assert req.region == "India"

    def test_market_nothing_required(self):
        req = MarketPriceRequest()
        assert req.crop is None and req.district is None

    def test_vision(self):
        req = VisionRequest(image="data:image/jpeg;base64,AAAA")
        assert req.system_prompt is None


class TestResponses:

    def test_error_response(self):
        body = ErrorResponse.model_validate({"error": {"message": "crop is required"}})
        assert body.error.message == "crop is required"

    def test_health_status_values(self):
        HealthResponse(status="degraded", components={"llm": "ok", "weather": "error"})
        with pytest.raises(ValidationError):
            HealthResponse(status="sleeping", components={})
