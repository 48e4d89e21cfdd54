"""Chat providers: validate-forward-relay against one upstream LLM API each.

OpenAI and DeepSeek speak the chat-completions wire format over plain HTTP, so
their bodies are forwarded with httpx and passed back verbatim. Gemini goes
through Google's generative-model client and is reduced to {"response": text}.

No retries. A provider's 4xx/5xx is mapped once to a normalized RelayError and
returned to the caller; anything unexpected becomes InternalRelayError.
"""

import abc

import google.generativeai as genai
import httpx
import structlog

from backend.api.schemas import DeepSeekRelayRequest, GeminiRelayRequest, OpenAIRelayRequest
from backend.core.config import Settings

logger = structlog.get_logger(__name__)

DEEPSEEK_MODEL = "deepseek-chat"
DEEPSEEK_MAX_TOKENS = 4000
DEEPSEEK_TEMPERATURE = 0.7


class RelayError(Exception):
    """Base for every error a relay can return to the browser."""
    code = "internal_error"
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message, "code": self.code}


class InvalidRequestError(RelayError):
    """Caller supplied malformed or empty input, or the provider said 400."""
    code = "invalid_request"
    status_code = 400
    message = "Invalid request"


class MisconfiguredError(RelayError):
    """The server holds no credential for this provider."""
    code = "misconfigured"
    status_code = 500
    message = "API key not configured"


class InvalidCredentialError(RelayError):
    code = "invalid_credential"
    status_code = 401
    message = "Invalid API key"


class RateLimitedError(RelayError):
    code = "rate_limited"
    status_code = 429
    message = "Rate limit exceeded"


class ProviderError(RelayError):
    """Any other non-2xx from the provider. Carries the provider's status."""
    code = "provider_error"
    status_code = 502


class InternalRelayError(RelayError):
    """Network failure, undecodable body, or any other unexpected exception."""
    code = "internal_error"
    status_code = 500


def error_for_status(label: str, status_code: int, reason: str) -> RelayError:
    """Map a provider's non-2xx status to a normalized relay error.

    Args:
        label: Human-readable provider name used in the generic message.
        status_code: HTTP status returned by the provider.
        reason: The provider's status text (reason phrase).

    Returns:
        RelayError subclass instance; generic statuses keep their code,
        3xx becomes 502.
    """
    if status_code == 401:
        return InvalidCredentialError()
    if status_code == 429:
        return RateLimitedError()
    if status_code == 400:
        return InvalidRequestError()
    if 300 <= status_code < 400:
        # httpx does not follow redirects, so a 3xx is an upstream failure
        return ProviderError(f"{label} API error: {reason}", status_code=502)
    return ProviderError(f"{label} API error: {reason}", status_code=status_code)


class ChatProvider(abc.ABC):
    """One upstream chat API. Stateless across calls."""

    name = ""
    label = ""

    def __init__(self, api_key: str, timeout: float | None = None):
        self.api_key = api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, request) -> dict:
        """Forward one validated request and return the body for the browser.

        Raises:
            MisconfiguredError: No credential configured.
            RelayError: Provider rejected the call (mapped by status).
            InternalRelayError: Anything else went wrong.
        """
        if not self.is_configured():
            logger.error("relay.misconfigured", provider=self.name)
            raise MisconfiguredError(f"{self.label} API key not configured")

        try:
            return self._forward(request)
        except RelayError:
            raise
        except Exception as e:
            logger.error("relay.internal_error", provider=self.name,
                         error_type=type(e).__name__, error=str(e))
            raise InternalRelayError() from e

    @abc.abstractmethod
    def _forward(self, request) -> dict:
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} configured={self.is_configured()}>"


class ChatCompletionsProvider(ChatProvider):
    """Shared transport for OpenAI-compatible /chat/completions endpoints."""

    def __init__(self, api_key: str, base_url: str, timeout: float | None = None):
        super().__init__(api_key, timeout)
        self.endpoint = f"{base_url.rstrip('/')}/chat/completions"

    def _post(self, body: dict) -> dict:
        logger.debug("relay.forward", provider=self.name, model=body.get("model"),
                     messages=len(body.get("messages", [])))

        response = httpx.post(
            self.endpoint,
            json=body,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )

        if not response.is_success:
            logger.error("relay.provider_rejected", provider=self.name,
                         status=response.status_code, body=response.text[:500])
            raise error_for_status(self.label, response.status_code, response.reason_phrase)

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object from {self.label}, got {type(data).__name__}")
        return data


class OpenAIProvider(ChatCompletionsProvider):
    """Multi-turn relay; the caller may override model, temperature and max_tokens."""

    name = "openai"
    label = "OpenAI"

    def _forward(self, request: OpenAIRelayRequest) -> dict:
        data = self._post({
            "model": request.model,
            "messages": [m.model_dump() for m in request.messages],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
            "stream": False,
        })
        logger.info("relay.usage", provider=self.name, usage=data.get("usage"))
        return data


class DeepSeekProvider(ChatCompletionsProvider):
    """Single-message relay with fixed model parameters."""

    name = "deepseek"
    label = "DeepSeek"

    def _forward(self, request: DeepSeekRelayRequest) -> dict:
        return self._post({
            "model": DEEPSEEK_MODEL,
            "messages": [{"role": "user", "content": request.message}],
            "stream": False,
            "max_tokens": DEEPSEEK_MAX_TOKENS,
            "temperature": DEEPSEEK_TEMPERATURE,
        })


class GeminiProvider(ChatProvider):
    """Prompt-in, text-out relay through google-generativeai."""

    name = "gemini"
    label = "Gemini"

    def __init__(self, api_key: str, model_name: str, timeout: float | None = None):
        super().__init__(api_key, timeout)
        self.model_name = model_name

    def _forward(self, request: GeminiRelayRequest) -> dict:
        logger.debug("relay.forward", provider=self.name, model=self.model_name)

        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(self.model_name)
        # retry=None switches off the client library's built-in backoff
        options = {"retry": None}
        if self.timeout:
            options["timeout"] = self.timeout
        result = model.generate_content(request.prompt, request_options=options)

        # .text raises ValueError when the candidate was blocked or empty
        return {"response": result.text}


def build_providers(settings: Settings) -> dict[str, ChatProvider]:
    """Create one provider per relay route from the startup settings."""
    return {
        "openai": OpenAIProvider(settings.openai_api_key, settings.openai_base_url,
                                 timeout=settings.request_timeout),
        "deepseek": DeepSeekProvider(settings.deepseek_api_key, settings.deepseek_base_url,
                                     timeout=settings.request_timeout),
        "gemini": GeminiProvider(settings.gemini_api_key, settings.gemini_model,
                                 timeout=settings.request_timeout),
    }
