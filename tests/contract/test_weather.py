"""Contract tests for the weather passthrough (mocked transport)."""

import asyncio

import httpx
import pytest

from backend.core.errors import ValidationError, WeatherUnavailableError
from backend.core.weather import WeatherClient

CURRENT = {"main": {"temp": 26.1, "humidity": 80}, "weather": [{"description": "haze"}], "name": "Bengaluru"}


def make_client(settings, handler) -> WeatherClient:
    return WeatherClient(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestWeather:

    def test_metric_query(self, settings):
        seen = {}

        def handler(request: httpx.Request):
            seen["path"] = request.url.path
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=CURRENT)

        data = asyncio.run(make_client(settings, handler).get_weather("12.9", "77.6"))

        assert data == CURRENT
        assert seen["path"] == "/data/2.5/weather"
        assert seen["params"] == {"lat": "12.9", "lon": "77.6", "appid": "test-weather-key", "units": "metric"}

    def test_forecast_endpoint(self, settings):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            return httpx.Response(200, json={"list": []})

        asyncio.run(make_client(settings, handler).get_forecast("12.9", "77.6"))
        assert seen["path"] == "/data/2.5/forecast"

    @pytest.mark.parametrize("lat, lon", [(None, "77.6"), ("12.9", None), ("", "")])
    def test_missing_coordinates(self, settings, mocker, lat, lon):
        handler = mocker.Mock()

        with pytest.raises(ValidationError, match="lat and lon are required"):
            asyncio.run(make_client(settings, handler).get_weather(lat, lon))
        handler.assert_not_called()


class TestFailures:

    def test_provider_error_hidden(self, settings):
        client = make_client(settings, lambda r: httpx.Response(401, json={"message": "Invalid API key"}))

        with pytest.raises(WeatherUnavailableError) as exc_info:
            asyncio.run(client.get_weather("12.9", "77.6"))

        assert exc_info.value.message == "Failed to fetch weather data"
        assert exc_info.value.http_status == 500

    def test_transport_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        with pytest.raises(WeatherUnavailableError, match="Failed to fetch forecast data"):
            asyncio.run(make_client(settings, handler).get_forecast("12.9", "77.6"))

    def test_non_json_body(self, settings):
        client = make_client(settings, lambda r: httpx.Response(200, text="oops"))

        with pytest.raises(WeatherUnavailableError):
            asyncio.run(client.get_weather("1", "2"))
