"""Error taxonomy shared by the gateway, weather client and route handlers.

Every error carries an explicit kind and an optional HTTP status. The app-level
exception handler turns them into `{"error": {"message": ...}}` responses.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    INVALID_CREDENTIALS = "invalid_credentials"
    FORBIDDEN = "forbidden"
    RATE_LIMITED = "rate_limited"
    UPSTREAM = "upstream"
    TRANSPORT = "transport"
    WEATHER_UNAVAILABLE = "weather_unavailable"


class AssistantError(Exception):
    """Base class for every error surfaced to API callers."""
    kind: ErrorKind = ErrorKind.UPSTREAM
    default_status: int | None = None

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status

    @property
    def http_status(self) -> int:
        """Status to respond with: the known status, else 500."""
        return self.status_code or 500

    def to_payload(self) -> dict:
        return {"error": {"message": self.message}}


class ValidationError(AssistantError):
    """A required request field is missing or malformed."""
    kind = ErrorKind.VALIDATION
    default_status = 400


class ConfigurationError(AssistantError):
    """A required setting (usually an API key) is not configured."""
    kind = ErrorKind.CONFIGURATION


class InvalidCredentialsError(AssistantError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_status = 401


class ForbiddenError(AssistantError):
    kind = ErrorKind.FORBIDDEN
    default_status = 403


class RateLimitedError(AssistantError):
    kind = ErrorKind.RATE_LIMITED
    default_status = 429


class UpstreamError(AssistantError):
    """Any other non-2xx answer from the LLM provider."""
    kind = ErrorKind.UPSTREAM


class TransportError(AssistantError):
    """Timeout or connection failure talking to the LLM provider."""
    kind = ErrorKind.TRANSPORT


class WeatherUnavailableError(AssistantError):
    """Weather provider failed. Provider detail is not propagated."""
    kind = ErrorKind.WEATHER_UNAVAILABLE
