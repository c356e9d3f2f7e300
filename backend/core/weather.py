"""OpenWeatherMap passthrough.

Current weather and 5-day / 3-hour forecast, metric units. Provider JSON is
returned as-is. Any provider or transport failure collapses into one generic
WeatherUnavailableError; the detail only goes to the log.
"""

import httpx
import structlog

from backend.core.config import Settings
from backend.core.errors import ValidationError, WeatherUnavailableError

logger = structlog.get_logger(__name__)


class WeatherClient:
    """Thin async client for the weather provider."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client

    def is_configured(self) -> bool:
        return bool(self.settings.openweather_api_key)

    async def get_weather(self, lat: str | None, lon: str | None) -> dict:
        return await self._fetch("weather", lat, lon, "Failed to fetch weather data")

    async def get_forecast(self, lat: str | None, lon: str | None) -> dict:
        return await self._fetch("forecast", lat, lon, "Failed to fetch forecast data")

    async def _fetch(self, endpoint: str, lat: str | None, lon: str | None, failure_message: str) -> dict:
        """GET `{weather_api_url}/{endpoint}` for a coordinate pair.

        Raises:
            ValidationError: If lat or lon is missing. No request is made.
            WeatherUnavailableError: On any provider or transport failure.
        """
        if not lat or not lon:
            raise ValidationError("lat and lon are required")

        params = {
            "lat": lat,
            "lon": lon,
            "appid": self.settings.openweather_api_key,
            "units": "metric",
        }
        url = f"{self.settings.weather_api_url}/{endpoint}"

        try:
            response = await self.http_client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("weather.failed", endpoint=endpoint, error=str(e))
            raise WeatherUnavailableError(failure_message) from e

        logger.debug("weather.ok", endpoint=endpoint)
        return data
