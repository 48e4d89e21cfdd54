"""FastAPI endpoints for the relay API.

POST /api/chatgpt  - forward a conversation to OpenAI
POST /api/deepseek - forward a single message to DeepSeek
POST /api/gemini   - forward a single prompt to Gemini
GET  /health       - credential presence per provider
"""

import structlog
from fastapi import APIRouter, Request

from backend.api.schemas import (
    DeepSeekRelayRequest,
    ErrorResponse,
    GeminiRelayRequest,
    GeminiRelayResponse,
    OpenAIRelayRequest,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

# Shown when validation fails on the required field, keyed by field name
REQUIRED_FIELD_MESSAGES = {
    "messages": "Messages are required",
    "message": "Message is required",
    "prompt": "Prompt is required",
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/api/chatgpt", responses={**_ERROR_RESPONSES, 401: {"model": ErrorResponse},
                                        429: {"model": ErrorResponse}})
def relay_chatgpt(request: OpenAIRelayRequest, req: Request):
    """Relay a conversation; the provider body comes back unchanged."""
    logger.info("chat.request", provider="openai", messages=len(request.messages), model=request.model)
    return req.app.state.providers["openai"].send(request)


@router.post("/api/deepseek", responses=_ERROR_RESPONSES)
def relay_deepseek(request: DeepSeekRelayRequest, req: Request):
    """Relay one message; the provider body comes back unchanged."""
    logger.info("chat.request", provider="deepseek", msg_len=len(request.message))
    return req.app.state.providers["deepseek"].send(request)


@router.post("/api/gemini", response_model=GeminiRelayResponse, responses=_ERROR_RESPONSES)
def relay_gemini(request: GeminiRelayRequest, req: Request):
    """Relay one prompt and return {"response": text}."""
    logger.info("chat.request", provider="gemini", msg_len=len(request.prompt))
    return req.app.state.providers["gemini"].send(request)


@router.get("/health")
def health(req: Request):
    """Report which providers have a credential configured."""
    components = {
        name: "ok" if provider.is_configured() else "error"
        for name, provider in req.app.state.providers.items()
    }

    errors = [k for k, v in components.items() if v == "error"]
    if not errors:
        status = "healthy"
    elif len(errors) == len(components):
        status = "unhealthy"
    else:
        status = "degraded"

    return {"status": status, "components": components}


@router.get("/")
@router.head("/")
def root_health():
    """Basic root health check for deployment platforms."""
    return {"status": "ok", "service": "chat-relays"}
