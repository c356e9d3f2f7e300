"""FastAPI dependencies resolving the per-app clients built at startup."""

from typing import Annotated

from fastapi import Depends, Request

from backend.core.config import Settings
from backend.core.llm_gateway import GatewayClient
from backend.core.weather import WeatherClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> GatewayClient:
    return request.app.state.gateway


def get_weather_client(request: Request) -> WeatherClient:
    return request.app.state.weather


SettingsDep = Annotated[Settings, Depends(get_settings)]
GatewayDep = Annotated[GatewayClient, Depends(get_gateway)]
WeatherDep = Annotated[WeatherClient, Depends(get_weather_client)]
