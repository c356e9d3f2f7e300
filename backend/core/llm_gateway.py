"""Chat-completions gateway client.

Single attempt per call, 60s timeout. Upstream HTTP failures are classified
into the error taxonomy; 401/403/429 get fixed user-facing messages.
"""

import httpx
import structlog

from backend.core.config import Settings
from backend.core.errors import (
    AssistantError,
    ConfigurationError,
    ForbiddenError,
    InvalidCredentialsError,
    RateLimitedError,
    TransportError,
    UpstreamError,
)

logger = structlog.get_logger(__name__)

_STATUS_ERRORS: dict[int, tuple[type[AssistantError], str]] = {
    401: (InvalidCredentialsError, "Invalid Groq API Key."),
    403: (ForbiddenError, "Groq API Forbidden. Check account credits or model restrictions."),
    429: (RateLimitedError, "Rate limit exceeded. Please wait a moment and try again."),
}


def classify_http_error(response: httpx.Response) -> AssistantError:
    """Map a non-2xx provider response onto the error taxonomy.

    Args:
        response: The failed httpx response.

    Returns:
        An AssistantError subclass instance carrying the upstream status code.
    """
    status = response.status_code
    if status in _STATUS_ERRORS:
        error_cls, message = _STATUS_ERRORS[status]
        return error_cls(message, status_code=status)

    message = _provider_message(response) or f"Request failed with status code {status}"
    return UpstreamError(message, status_code=status)


def _provider_message(response: httpx.Response) -> str | None:
    """Pull `error.message` out of a provider error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None


class GatewayClient:
    """Wraps the provider's chat-completions endpoint."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.settings = settings
        self.http_client = http_client

    def is_configured(self) -> bool:
        return bool(self.settings.groq_api_key)

    def build_payload(self, messages: list[dict], model: str) -> dict:
        return {
            "model": model,
            "messages": messages,
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
        }

    async def call_model(self, messages: list[dict], model: str, api_key: str | None = None) -> dict:
        """POST messages to the provider and return its JSON body untouched.

        Args:
            messages: Ordered system/user messages in chat-completions shape.
            model: Provider model identifier.
            api_key: Bearer token. Defaults to the configured Groq key.

        Returns:
            The provider's response body.

        Raises:
            ConfigurationError: If no API key is available.
            TransportError: On timeout or connection failure.
            InvalidCredentialsError, ForbiddenError, RateLimitedError, UpstreamError:
                On a non-2xx provider response.
        """
        key = self.settings.groq_api_key if api_key is None else api_key
        if not key:
            raise ConfigurationError("Groq API Key is not configured.")

        timeout = self.settings.llm_timeout
        logger.debug("gateway.request", model=model, messages=len(messages))

        try:
            response = await self.http_client.post(
                self.settings.llm_api_url,
                json=self.build_payload(messages, model),
                headers={
                    "Authorization": f"Bearer {key}",
                    "Content-Type": "application/json",
                },
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            logger.error("gateway.timeout", model=model, threshold=timeout)
            raise TransportError(f"timeout of {timeout:g}s exceeded") from e
        except httpx.TransportError as e:
            logger.error("gateway.transport_failed", model=model, error=str(e))
            raise TransportError(str(e) or "Could not reach the language model provider.") from e

        if not response.is_success:
            error = classify_http_error(response)
            logger.error("gateway.http_error", model=model, status=response.status_code, kind=error.kind.value)
            raise error

        try:
            body = response.json()
        except ValueError as e:
            logger.error("gateway.bad_body", model=model, status=response.status_code)
            raise UpstreamError("Language model provider returned an invalid response.", status_code=502) from e

        logger.info("gateway.ok", model=model, status=response.status_code)
        return body
