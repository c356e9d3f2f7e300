"""Pydantic models for the API layer.

Request shapes for every feature endpoint. Every field is optional at the
schema level so that missing required fields reach the handler and come back as
400 `{"error": {"message": ...}}` rather than a framework 422. Blank strings are
treated as absent, so documented defaults apply to them too.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from backend.assistant.prompts import (
    DEFAULT_CLIMATE,
    DEFAULT_GOAL,
    DEFAULT_GROWTH_STAGE,
    DEFAULT_LOCATION,
    DEFAULT_REGION,
    DEFAULT_SEASON,
    DEFAULT_SOIL_TYPE,
)


# Passed through untouched, even when blank.
_VERBATIM_FIELDS = frozenset({"lang_instruction"})


class FeatureRequest(BaseModel):
    """Base for all feature requests."""
    model_config = ConfigDict(extra="ignore")

    lang_instruction: str = Field(default="", description="Appended verbatim to the system prompt")

    @model_validator(mode="before")
    @classmethod
    def _drop_blank_strings(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: v for k, v in data.items()
                if k in _VERBATIM_FIELDS or not (isinstance(v, str) and not v.strip())
            }
        return data


class ChatRequest(FeatureRequest):
    """Free-text question for the general assistant."""
    system_prompt: str | None = None
    user_prompt: str | None = Field(default=None, description="Required")


class VisionRequest(FeatureRequest):
    """Image analysis; `image` is a data URL."""
    image: str | None = Field(default=None, description="Required data URL")
    system_prompt: str | None = None


class CropCalendarRequest(FeatureRequest):
    crop: str | None = Field(default=None, description="Required")
    location: str = DEFAULT_LOCATION
    season: str = DEFAULT_SEASON


class IrrigationRequest(FeatureRequest):
    crop: str | None = Field(default=None, description="Required")
    growth_stage: str = DEFAULT_GROWTH_STAGE
    climate: str = DEFAULT_CLIMATE


class FertilizerRequest(FeatureRequest):
    crop: str | None = Field(default=None, description="Required")
    soil_type: str = DEFAULT_SOIL_TYPE
    goal: str = DEFAULT_GOAL
    problem: str = ""
    region: str = DEFAULT_REGION


class MarketPriceRequest(FeatureRequest):
    """Nothing is required; subject and location fall back through defaults."""
    crop: str | None = None
    user_prompt: str | None = None
    district: str | None = None
    region: str | None = None


class ErrorDetail(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Body of every failed API call."""
    error: ErrorDetail


class HealthResponse(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    components: dict[str, Literal["ok", "error"]]
