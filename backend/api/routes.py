"""FastAPI endpoints for the Chisa API.

POST /api/chat, /api/vision, /api/soil-vision, /api/crop-calendar,
/api/irrigation, /api/natural-fertilizers, /api/market-prices - LLM features
POST /api/vision-local - always 503
GET /api/weather, /api/forecast - weather passthrough
GET /health - component health check
GET / - static landing page
"""

from pathlib import Path

import structlog
from fastapi import APIRouter
from fastapi.responses import FileResponse, JSONResponse

from backend.api.dependencies import GatewayDep, SettingsDep, WeatherDep
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
from backend.assistant.intent import is_market_request
from backend.assistant.prompts import FEATURE_LABELS, Feature, assemble
from backend.core.errors import ValidationError
from backend.core.llm_gateway import GatewayClient

logger = structlog.get_logger(__name__)

router = APIRouter()

INDEX_HTML = Path(__file__).resolve().parent.parent / "templates" / "index.html"

VISION_LOCAL_MESSAGE = (
    "Local vision stack is not available in this deployment. Use the Groq Vision engine instead."
)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _forward(feature: Feature, fields: dict, gateway: GatewayClient, model: str) -> dict:
    """Assemble the feature prompt, call the provider and tag the response."""
    prompt = assemble(feature, fields)
    upstream = await gateway.call_model(prompt.to_messages(), model)
    logger.info("feature.ok", feature=feature.value, model=model)
    return {**upstream, "function": FEATURE_LABELS[feature]}


def _require(value: str | None, message: str) -> None:
    if not value:
        raise ValidationError(message)


@router.post("/api/chat", responses=_ERROR_RESPONSES)
async def chat(request: ChatRequest, gateway: GatewayDep, settings: SettingsDep):
    """General assistant. Market-related prompts are redirected to the market-price feature."""
    _require(request.user_prompt, "user_prompt is required")
    logger.info("chat.request", prompt_len=len(request.user_prompt))

    if is_market_request(request.user_prompt):
        logger.info("chat.market_redirect")
        market = MarketPriceRequest(
            user_prompt=request.user_prompt,
            lang_instruction=request.lang_instruction,
        )
        return await _forward(Feature.MARKET_PRICES, market.model_dump(), gateway, settings.primary_model)

    return await _forward(Feature.CHAT, request.model_dump(), gateway, settings.primary_model)


@router.post("/api/vision", responses=_ERROR_RESPONSES)
async def vision(request: VisionRequest, gateway: GatewayDep, settings: SettingsDep):
    _require(request.image, "Image data is required")
    logger.info("vision.request", image_len=len(request.image))
    return await _forward(Feature.VISION, request.model_dump(), gateway, settings.vision_model)


@router.post("/api/soil-vision", responses=_ERROR_RESPONSES)
async def soil_vision(request: VisionRequest, gateway: GatewayDep, settings: SettingsDep):
    _require(request.image, "Image data is required")
    logger.info("soil_vision.request", image_len=len(request.image))
    return await _forward(Feature.SOIL_VISION, request.model_dump(), gateway, settings.vision_model)


@router.post("/api/vision-local", status_code=503, responses={503: {"model": ErrorResponse}})
async def vision_local():
    """On-device vision is not shipped; callers always get 503."""
    return JSONResponse(status_code=503, content={"error": {"message": VISION_LOCAL_MESSAGE}})


@router.post("/api/crop-calendar", responses=_ERROR_RESPONSES)
async def crop_calendar(request: CropCalendarRequest, gateway: GatewayDep, settings: SettingsDep):
    _require(request.crop, "crop is required")
    logger.info("crop_calendar.request", crop=request.crop, location=request.location)
    return await _forward(Feature.CROP_CALENDAR, request.model_dump(), gateway, settings.primary_model)


@router.post("/api/irrigation", responses=_ERROR_RESPONSES)
async def irrigation(request: IrrigationRequest, gateway: GatewayDep, settings: SettingsDep):
    _require(request.crop, "crop is required")
    logger.info("irrigation.request", crop=request.crop, growth_stage=request.growth_stage)
    return await _forward(Feature.IRRIGATION, request.model_dump(), gateway, settings.primary_model)


@router.post("/api/natural-fertilizers", responses=_ERROR_RESPONSES)
async def natural_fertilizers(request: FertilizerRequest, gateway: GatewayDep, settings: SettingsDep):
    _require(request.crop, "crop is required")
    logger.info("fertilizers.request", crop=request.crop, region=request.region)
    return await _forward(Feature.FERTILIZER_GUIDE, request.model_dump(), gateway, settings.primary_model)


@router.post("/api/market-prices", responses=_ERROR_RESPONSES)
async def market_prices(request: MarketPriceRequest, gateway: GatewayDep, settings: SettingsDep):
    logger.info("market.request", crop=request.crop, district=request.district, region=request.region)
    return await _forward(Feature.MARKET_PRICES, request.model_dump(), gateway, settings.primary_model)


@router.get("/api/weather", responses=_ERROR_RESPONSES)
async def weather(weather_client: WeatherDep, lat: str | None = None, lon: str | None = None):
    """Current conditions, provider JSON unmodified."""
    return await weather_client.get_weather(lat, lon)


@router.get("/api/forecast", responses=_ERROR_RESPONSES)
async def forecast(weather_client: WeatherDep, lat: str | None = None, lon: str | None = None):
    """5-day / 3-hour forecast, provider JSON unmodified."""
    return await weather_client.get_forecast(lat, lon)


@router.get("/health", response_model=HealthResponse)
def health(gateway: GatewayDep, weather_client: WeatherDep):
    """Report which upstream providers have credentials configured."""
    components = {
        "llm": "ok" if gateway.is_configured() else "error",
        "weather": "ok" if weather_client.is_configured() else "error",
    }

    errors = [k for k, v in components.items() if v == "error"]
    if not errors:
        status = "healthy"
    elif len(errors) == len(components):
        status = "unhealthy"
    else:
        status = "degraded"

    return {"status": status, "components": components}


@router.get("/", include_in_schema=False)
def index():
    return FileResponse(INDEX_HTML, media_type="text/html")
