"""Prompt templates and assembly for every assistant feature.

Each feature pairs a fixed expert-persona system prompt with a user template.
Absent fields fall back to the named defaults below. The caller's
`lang_instruction` is appended verbatim to the system prompt; it is the only
localization mechanism.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Feature(str, Enum):
    CHAT = "chat"
    VISION = "vision"
    SOIL_VISION = "soil-vision"
    CROP_CALENDAR = "crop-calendar"
    IRRIGATION = "irrigation"
    FERTILIZER_GUIDE = "natural-fertilizers"
    MARKET_PRICES = "market-prices"


FEATURE_LABELS: dict[Feature, str] = {
    Feature.CHAT: "AI Assistant",
    Feature.VISION: "Plant Vision",
    Feature.SOIL_VISION: "Soil Vision",
    Feature.CROP_CALENDAR: "Crop Calendar",
    Feature.IRRIGATION: "Irrigation Management",
    Feature.FERTILIZER_GUIDE: "Natural Fertilizer Guide",
    Feature.MARKET_PRICES: "Market Prices",
}

VISION_FEATURES = frozenset({Feature.VISION, Feature.SOIL_VISION})

# Field defaults
DEFAULT_CHAT_PERSONA = "You are an Expert AI Agriculture Assistant."
DEFAULT_VISION_PERSONA = "Analyze this crop image."
DEFAULT_LOCATION = "India"
DEFAULT_SEASON = "the current season"
DEFAULT_GROWTH_STAGE = "general"
DEFAULT_CLIMATE = "not specified"
DEFAULT_SOIL_TYPE = "unspecified soil type"
DEFAULT_GOAL = "improve yield and soil health using only natural inputs"
DEFAULT_PROBLEM = "none specified"
DEFAULT_REGION = "India"
DEFAULT_MARKET_SUBJECT = "crops"
DEFAULT_MARKET_LOCATION = "local region"

CHAT_RULES = (
    "\nRules: Provide expert agricultural guidance. Keep responses simple, clear, and farmer-friendly. "
    "Focus on Indian agriculture context. Provide concise, actionable, and practical answers."
)

VISION_RULES = (
    "\nRules: Identify crop type, growth stage, disease, pests, and nutrient deficiencies. "
    "Provide treatment recommendations. Keep responses clear and farmer-friendly."
)

SOIL_VISION_SYSTEM_PROMPT = """You are an expert soil scientist analysing a soil or field image.
Tasks:
1) Identify likely soil type (clay, loam, sandy, black soil, or mix).
2) Use soil colour and texture to estimate relative organic matter (low, medium, high).
3) Look for signs of erosion or land degradation (gullies, exposed roots, bare patches).
4) Analyse crack patterns or surface condition to infer moisture level (dry/cracked, moist, waterlogged).
5) Give short, practical recommendations for improving soil health and moisture management.
Keep the explanation simple and farmer-friendly. Answer in Markdown with clear sections and bullet points."""

CROP_CALENDAR_SYSTEM_PROMPT = (
    "You are an Expert AI Crop Calendar Generator. Include sowing, growth, irrigation phases, "
    "fertilization, and harvest timing. Keep responses simple, clear, and farmer-friendly. "
    "Focus on Indian agriculture context."
)
CROP_CALENDAR_USER_TEMPLATE = "Generate a detailed crop calendar for {crop} in {location} during {season}."

IRRIGATION_SYSTEM_PROMPT = (
    "You are an Irrigation Management Expert. Recommend schedules, promote water efficiency, "
    "and explain reasoning. Keep responses simple, clear, and farmer-friendly. "
    "Focus on Indian agriculture context."
)
IRRIGATION_USER_TEMPLATE = (
    "Recommend an irrigation schedule for {crop} at {growth_stage} growth stage. "
    "Soil/climate condition: {climate}."
)

FERTILIZER_SYSTEM_PROMPT = """You are an Organic & Natural Fertilizer Specialist for Indian agriculture.
ONLY recommend natural / organic inputs such as farmyard manure, vermicompost, compost, green manures,
neem cake, oil cakes, biofertilizers (Rhizobium, Azotobacter, PSB, etc.), liquid organic tonics (e.g. jeevamrut, panchagavya),
and on-farm residues. Do NOT recommend chemical / synthetic NPK or complex fertilizers.

For each answer:
1) Start with a short summary of the soil and crop situation.
2) Recommend 3-5 main organic fertilizer options with:
   - Material name and simple description
   - Approximate dose per acre / hectare and timing (basal, top dressing, foliar, etc.)
   - Method of application and safety notes
3) Add a simple "Farmer reference" section listing common organic fertilizers, what they mainly supply (N / P / K / micronutrients / organic matter)
   and when they are best used.
4) Emphasise soil health, long term organic matter build-up, and residue-free production.
5) Keep the language very simple, farmer-friendly, and practical.
If exact doses are unknown, give safe approximate ranges and clearly mark them as approximate.
Focus on Indian crops and conditions.
Answer in Markdown with clear headings and bullet points."""

FERTILIZER_USER_TEMPLATE = """Farmer details:
- Crop: {crop}
- Soil type/condition: {soil_type}
- Region: {region}
- Main goal: {goal}
- Field notes / problems: {problem}

Generate a natural / organic fertilizer management plan for this situation."""

MARKET_SYSTEM_PROMPT = (
    "You are a Market Price Analyst for Indian agriculture. Provide realistic price ranges, trends, "
    "and outlooks. Label estimates clearly. Keep responses simple, clear, and farmer-friendly."
)
MARKET_USER_TEMPLATE = (
    "Fetch or simulate market prices for {subject} in {location}. Provide current price range, trends, "
    "and a short-term outlook. Include approximate mandi prices in INR per quintal."
)


@dataclass(frozen=True)
class AssembledPrompt:
    """System and user turns for one upstream call.

    Vision features carry `image_url` instead of `user_prompt`; the user turn
    is then a single image part with no accompanying text.
    """
    system_prompt: str
    user_prompt: str | None = None
    image_url: str | None = None

    def to_messages(self) -> list[dict]:
        """Render as chat-completions messages."""
        if self.image_url is not None:
            user_content: Any = [{"type": "image_url", "image_url": {"url": self.image_url}}]
        else:
            user_content = self.user_prompt or ""
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": user_content},
        ]


def _get(fields: Mapping[str, Any], name: str, default: str = "") -> str:
    """Field value, or `default` when absent or blank."""
    value = fields.get(name)
    if value is None:
        return default
    value = str(value)
    return value if value.strip() else default


def _lang(fields: Mapping[str, Any]) -> str:
    """`lang_instruction` exactly as sent, whitespace included."""
    value = fields.get("lang_instruction")
    return "" if value is None else str(value)


def _chat(fields: Mapping[str, Any]) -> AssembledPrompt:
    persona = _get(fields, "system_prompt", DEFAULT_CHAT_PERSONA)
    return AssembledPrompt(
        system_prompt=persona + CHAT_RULES + _lang(fields),
        user_prompt=_get(fields, "user_prompt"),
    )


def _vision(fields: Mapping[str, Any]) -> AssembledPrompt:
    persona = _get(fields, "system_prompt", DEFAULT_VISION_PERSONA)
    return AssembledPrompt(
        system_prompt=persona + VISION_RULES + _lang(fields),
        image_url=_get(fields, "image"),
    )


def _soil_vision(fields: Mapping[str, Any]) -> AssembledPrompt:
    return AssembledPrompt(
        system_prompt=SOIL_VISION_SYSTEM_PROMPT + _lang(fields),
        image_url=_get(fields, "image"),
    )


def _crop_calendar(fields: Mapping[str, Any]) -> AssembledPrompt:
    return AssembledPrompt(
        system_prompt=CROP_CALENDAR_SYSTEM_PROMPT + _lang(fields),
        user_prompt=CROP_CALENDAR_USER_TEMPLATE.format(
            crop=_get(fields, "crop"),
            location=_get(fields, "location", DEFAULT_LOCATION),
            season=_get(fields, "season", DEFAULT_SEASON),
        ),
    )


def _irrigation(fields: Mapping[str, Any]) -> AssembledPrompt:
    return AssembledPrompt(
        system_prompt=IRRIGATION_SYSTEM_PROMPT + _lang(fields),
        user_prompt=IRRIGATION_USER_TEMPLATE.format(
            crop=_get(fields, "crop"),
            growth_stage=_get(fields, "growth_stage", DEFAULT_GROWTH_STAGE),
            climate=_get(fields, "climate", DEFAULT_CLIMATE),
        ),
    )


def _fertilizer_guide(fields: Mapping[str, Any]) -> AssembledPrompt:
    return AssembledPrompt(
        system_prompt=FERTILIZER_SYSTEM_PROMPT + _lang(fields),
        user_prompt=FERTILIZER_USER_TEMPLATE.format(
            crop=_get(fields, "crop"),
            soil_type=_get(fields, "soil_type", DEFAULT_SOIL_TYPE),
            region=_get(fields, "region", DEFAULT_REGION),
            goal=_get(fields, "goal", DEFAULT_GOAL),
            problem=_get(fields, "problem", DEFAULT_PROBLEM),
        ),
    )


def market_subject(fields: Mapping[str, Any]) -> str:
    """crop -> free-text prompt -> "crops"."""
    return _get(fields, "crop") or _get(fields, "user_prompt") or DEFAULT_MARKET_SUBJECT


def market_location(fields: Mapping[str, Any]) -> str:
    """district -> region -> "local region"."""
    return _get(fields, "district") or _get(fields, "region") or DEFAULT_MARKET_LOCATION


def _market_prices(fields: Mapping[str, Any]) -> AssembledPrompt:
    return AssembledPrompt(
        system_prompt=MARKET_SYSTEM_PROMPT + _lang(fields),
        user_prompt=MARKET_USER_TEMPLATE.format(
            subject=market_subject(fields),
            location=market_location(fields),
        ),
    )


_BUILDERS = {
    Feature.CHAT: _chat,
    Feature.VISION: _vision,
    Feature.SOIL_VISION: _soil_vision,
    Feature.CROP_CALENDAR: _crop_calendar,
    Feature.IRRIGATION: _irrigation,
    Feature.FERTILIZER_GUIDE: _fertilizer_guide,
    Feature.MARKET_PRICES: _market_prices,
}


def assemble(feature: Feature, fields: Mapping[str, Any]) -> AssembledPrompt:
    """Build the prompt for a feature from caller-supplied fields.

    Args:
        feature: Which assistant feature is being served.
        fields: Request fields; absent or blank values take the named defaults.

    Returns:
        The assembled system/user prompt pair.
    """
    return _BUILDERS[Feature(feature)](fields)
