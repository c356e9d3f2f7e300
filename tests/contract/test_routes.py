"""Contract tests for the HTTP API (FastAPI TestClient, fake gateway)."""

import httpx
import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from backend.api.dependencies import get_weather_client
from backend.api.routes import VISION_LOCAL_MESSAGE
from backend.assistant.prompts import MARKET_SYSTEM_PROMPT, SOIL_VISION_SYSTEM_PROMPT
from backend.core.config import Settings
from backend.core.errors import ForbiddenError, InvalidCredentialsError, RateLimitedError, TransportError
from backend.core.weather import WeatherClient
from backend.main import create_app

IMAGE = "data:image/jpeg;base64,/9j/4AAQSkZJRg=="


class TestRequiredFields:

    @pytest.mark.parametrize("path, body, message", [
        ("/api/chat", {}, "user_prompt is required"),
        ("/api/chat", {"user_prompt": "  "}, "user_prompt is required"),
        ("/api/vision", {"system_prompt": "x"}, "Image data is required"),
        ("/api/soil-vision", {}, "Image data is required"),
        ("/api/crop-calendar", {"location": "Punjab"}, "crop is required"),
        ("/api/irrigation", {"crop": ""}, "crop is required"),
        ("/api/natural-fertilizers", {}, "crop is required"),
    ])
    def test_missing_field_is_400_without_upstream_call(self, client, fake_gateway, path, body, message):
        resp = client.post(path, json=body)

        assert resp.status_code == 400
        assert resp.json() == {"error": {"message": message}}
        assert fake_gateway.calls == []

    def test_wrong_type_is_400(self, client, fake_gateway):
        resp = client.post("/api/crop-calendar", json={"crop": {"name": "rice"}})

        assert resp.status_code == 400
        assert "crop" in resp.json()["error"]["message"]
        assert fake_gateway.calls == []

    def test_malformed_json_is_400(self, client):
        resp = client.post("/api/chat", content=b"{not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "message" in resp.json()["error"]


class TestFeatures:

    def test_crop_calendar_defaults(self, client, fake_gateway):
        resp = client.post("/api/crop-calendar", json={"crop": "rice"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["function"] == "Crop Calendar"
        assert body["choices"][0]["message"]["content"] == "Test answer"
        assert "rice" in fake_gateway.last_user
        assert "India" in fake_gateway.last_user
        assert "the current season" in fake_gateway.last_user
        assert fake_gateway.calls[0]["model"] == "test-chat-model"

    def test_chat(self, client, fake_gateway):
        resp = client.post("/api/chat", json={
            "system_prompt": "You are a soil expert.",
            "user_prompt": "How to improve clay soil?",
            "lang_instruction": "\nRespond in Kannada.",
        })

        assert resp.json()["function"] == "AI Assistant"
        assert fake_gateway.last_system.startswith("You are a soil expert.")
        assert fake_gateway.last_system.endswith("\nRespond in Kannada.")
        assert fake_gateway.last_user == "How to improve clay soil?"

    def test_chat_market_redirect(self, client, fake_gateway):
        resp = client.post("/api/chat", json={
            "system_prompt": "You are a poet.",
            "user_prompt": "Onion mandi rates in Lasalgaon",
            "lang_instruction": "\nRespond in Marathi.",
        })

        assert resp.json()["function"] == "Market Prices"
        assert fake_gateway.last_system == MARKET_SYSTEM_PROMPT + "\nRespond in Marathi."
        assert "poet" not in fake_gateway.last_system
        assert "market prices for Onion mandi rates in Lasalgaon in local region" in fake_gateway.last_user

    def test_whitespace_language_instruction_appended_verbatim(self, client, fake_gateway):
        client.post("/api/crop-calendar", json={"crop": "rice", "lang_instruction": "  "})
        assert fake_gateway.last_system.endswith("context.  ")

    def test_vision_uses_vision_model(self, client, fake_gateway):
        resp = client.post("/api/vision", json={"image": IMAGE})

        assert resp.json()["function"] == "Plant Vision"
        assert fake_gateway.calls[0]["model"] == "test-vision-model"
        assert fake_gateway.last_user == [{"type": "image_url", "image_url": {"url": IMAGE}}]

    def test_soil_vision_fixed_prompt(self, client, fake_gateway):
        resp = client.post("/api/soil-vision", json={"image": IMAGE, "system_prompt": "ignore me"})

        assert resp.json()["function"] == "Soil Vision"
        assert fake_gateway.last_system == SOIL_VISION_SYSTEM_PROMPT

    def test_irrigation(self, client, fake_gateway):
        resp = client.post("/api/irrigation", json={"crop": "sugarcane", "growth_stage": "vegetative"})

        assert resp.json()["function"] == "Irrigation Management"
        assert "sugarcane at vegetative growth stage" in fake_gateway.last_user

    def test_natural_fertilizers(self, client, fake_gateway):
        resp = client.post("/api/natural-fertilizers", json={"crop": "chilli", "problem": "leaf curl"})

        assert resp.json()["function"] == "Natural Fertilizer Guide"
        assert "- Field notes / problems: leaf curl" in fake_gateway.last_user

    def test_market_defaults(self, client, fake_gateway):
        resp = client.post("/api/market-prices", json={})

        assert resp.status_code == 200
        assert resp.json()["function"] == "Market Prices"
        assert "market prices for crops in local region" in fake_gateway.last_user

    def test_market_district_over_region(self, client, fake_gateway):
        client.post("/api/market-prices", json={"crop": "onion", "district": "Nashik", "region": "Maharashtra"})
        assert "market prices for onion in Nashik" in fake_gateway.last_user

    def test_vision_local_always_503(self, client, fake_gateway):
        resp = client.post("/api/vision-local", json={"image": IMAGE})

        assert resp.status_code == 503
        assert resp.json() == {"error": {"message": VISION_LOCAL_MESSAGE}}
        assert fake_gateway.calls == []


class TestUpstreamErrors:

    @pytest.mark.parametrize("error, status", [
        (InvalidCredentialsError("Invalid Groq API Key.", status_code=401), 401),
        (ForbiddenError("Groq API Forbidden.", status_code=403), 403),
        (RateLimitedError("Rate limit exceeded.", status_code=429), 429),
        (TransportError("timeout of 60s exceeded"), 500),
    ])
    def test_status_propagates(self, client, fake_gateway, error, status):
        fake_gateway.error = error

        resp = client.post("/api/crop-calendar", json={"crop": "rice"})

        assert resp.status_code == status
        assert resp.json() == {"error": {"message": error.message}}

    def test_unexpected_exception_is_500(self, client, fake_gateway):
        fake_gateway.error = RuntimeError("boom")

        resp = client.post("/api/chat", json={"user_prompt": "hi"})

        assert resp.status_code == 500
        assert resp.json() == {"error": {"message": "boom"}}

    def test_unexpected_exception_is_access_logged(self, client, fake_gateway):
        fake_gateway.error = RuntimeError("boom")

        with capture_logs() as logs:
            client.post("/api/chat", json={"user_prompt": "hi"})

        access = [e for e in logs if e["event"] == "http.request"]
        assert len(access) == 1
        assert access[0]["status"] == 500
        assert access[0]["path"] == "/api/chat"


class TestWeatherRoutes:

    @pytest.fixture
    def provider(self, app, settings):
        requests = []

        def handler(request: httpx.Request):
            requests.append(request)
            return httpx.Response(200, json={"main": {"temp": 25}, "weather": [{"description": "clear sky"}]})

        weather = WeatherClient(settings, httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        app.dependency_overrides[get_weather_client] = lambda: weather
        return requests

    def test_weather_passthrough(self, client, provider):
        resp = client.get("/api/weather", params={"lat": "12.9", "lon": "77.6"})

        assert resp.status_code == 200
        assert resp.json()["main"]["temp"] == 25
        assert provider[0].url.params["units"] == "metric"
        assert provider[0].url.params["lat"] == "12.9"

    def test_forecast_passthrough(self, client, provider):
        resp = client.get("/api/forecast", params={"lat": "12.9", "lon": "77.6"})

        assert resp.status_code == 200
        assert provider[0].url.path.endswith("/forecast")

    def test_missing_coordinates(self, client, provider):
        resp = client.get("/api/weather", params={"lat": "12.9"})

        assert resp.status_code == 400
        assert resp.json() == {"error": {"message": "lat and lon are required"}}
        assert provider == []


class TestHealth:

    def test_healthy(self, client):
        resp = client.get("/health")
        assert resp.json() == {"status": "healthy", "components": {"llm": "ok", "weather": "ok"}}

    def test_degraded_without_weather_key(self):
        app = create_app(Settings(groq_api_key="k"))

        with TestClient(app) as c:
            body = c.get("/health").json()

        assert body["status"] == "degraded"
        assert body["components"]["weather"] == "error"

    def test_unhealthy_without_keys(self):

        with TestClient(create_app(Settings())) as c:
            assert c.get("/health").json()["status"] == "unhealthy"


def test_index_page(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
