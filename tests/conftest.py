"""Shared fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from backend.api.dependencies import get_gateway
from backend.core.config import Settings
from backend.core.errors import AssistantError
from backend.main import create_app


class FakeGateway:
    """Records every call_model invocation; returns a canned provider body or raises."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.calls: list[dict] = []
        self.response = {
            "id": "chatcmpl-test",
            "choices": [{"index": 0, "message": {"role": "assistant", "content": "Test answer"}}],
        }
        self.error: AssistantError | None = None

    def is_configured(self) -> bool:
        return bool(self.settings.groq_api_key)

    async def call_model(self, messages, model, api_key=None):
        self.calls.append({"messages": messages, "model": model})
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_system(self) -> str:
        return self.calls[-1]["messages"][0]["content"]

    @property
    def last_user(self):
        return self.calls[-1]["messages"][1]["content"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        groq_api_key="test-groq-key",
        openweather_api_key="test-weather-key",
        llm_api_url="https://llm.test/v1/chat/completions",
        primary_model="test-chat-model",
        vision_model="test-vision-model",
        llm_timeout=5.0,
        weather_api_url="https://weather.test/data/2.5",
    )


@pytest.fixture
def fake_gateway(settings) -> FakeGateway:
    return FakeGateway(settings)


@pytest.fixture
def app(settings, fake_gateway):
    app = create_app(settings)
    app.dependency_overrides[get_gateway] = lambda: fake_gateway
    return app


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
