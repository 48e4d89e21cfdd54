"""Pydantic models for the API layer.

Request schemas differ per provider on purpose; each page knows its own
relay's shape. Success bodies for OpenAI/DeepSeek are passed through
untouched, so only the Gemini response has a model here.
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ChatMessage(BaseModel):
    """Single message in an OpenAI-style conversation."""
    role: Literal["user", "assistant", "system"]
    content: str


class OpenAIRelayRequest(BaseModel):
    """Full conversation from the ChatGPT page."""
    messages: list[ChatMessage] = Field(..., min_length=1, description="Conversation so far, oldest first")
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    max_tokens: int = 1000


class DeepSeekRelayRequest(BaseModel):
    """Single question from the DeepSeek page."""
    message: str = Field(..., description="User question")

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class GeminiRelayRequest(BaseModel):
    """Single prompt from the Gemini Lite page."""
    prompt: str = Field(..., description="User prompt")

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("prompt must not be blank")
        return v


class GeminiRelayResponse(BaseModel):
    response: str


class ErrorResponse(BaseModel):
    """Normalized error body returned by every relay."""
    error: str
    code: str
