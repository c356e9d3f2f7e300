"""FastAPI application entry point.

Startup sequence: read settings → configure logging → open shared HTTP client →
build gateway and weather clients.
"""

import logging
import time
from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from backend.api.routes import router
from backend.core.config import Settings
from backend.core.errors import AssistantError
from backend.core.llm_gateway import GatewayClient
from backend.core.weather import WeatherClient

load_dotenv()

logger = structlog.get_logger(__name__)


def configure_logging(level: str) -> None:
    """Filter structlog output at the configured level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings: Settings = app.state.settings
    logger.info("startup.begin")

    http_client = httpx.AsyncClient()
    app.state.gateway = GatewayClient(settings, http_client)
    app.state.weather = WeatherClient(settings, http_client)
    logger.info(
        "startup.clients_ready",
        llm_configured=app.state.gateway.is_configured(),
        weather_configured=app.state.weather.is_configured(),
        model=settings.primary_model,
    )
    if not app.state.gateway.is_configured():
        logger.warning("startup.llm_key_missing", hint="Set GROQ_API_KEY in .env")

    logger.info("startup.complete")
    yield
    await http_client.aclose()
    logger.info("shutdown.complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around an explicit settings object."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Chisa API",
        description="Farmer assistant: LLM prompt proxy and weather passthrough",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Access log: method, path, status and latency for every request."""
        start = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            logger.info(
                "http.request",
                method=request.method,
                path=request.url.path,
                status=500,
                latency_ms=int((time.monotonic() - start) * 1000),
            )
            raise
        latency_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "http.request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            latency_ms=latency_ms,
        )
        return response

    @app.exception_handler(AssistantError)
    async def assistant_error_handler(request: Request, exc: AssistantError):
        logger.error(
            "request.failed",
            path=request.url.path,
            kind=exc.kind.value,
            status=exc.http_status,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request body")
        logger.warning("request.invalid", path=request.url.path, error=message)
        return JSONResponse(status_code=400, content={"error": {"message": message}})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("request.unhandled", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": {"message": str(exc) or "Internal Server Error"}},
        )

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
