"""Client-side conversation state for the three chat pages.

Kept free of Streamlit so it can be driven from tests. Each page stores one
session object in st.session_state and calls submit()/clear() from widget
callbacks; the page only renders whatever the state says.

  - ChatGPTSession: whole conversation, optimistic append with rollback
  - DeepSeekSession / GeminiSession: only the latest exchange
"""

import abc
import os
from dataclasses import dataclass, field
from datetime import datetime

import requests
import structlog

logger = structlog.get_logger(__name__)

API_URL = os.environ.get("API_URL", "http://localhost:8000")
CHATGPT_ENDPOINT = f"{API_URL}/api/chatgpt"
DEEPSEEK_ENDPOINT = f"{API_URL}/api/deepseek"
GEMINI_ENDPOINT = f"{API_URL}/api/gemini"
HEALTH_ENDPOINT = f"{API_URL}/health"

EMPTY_INPUT_MESSAGE = "Please enter a message"
INVALID_RESPONSE_MESSAGE = "Invalid response from API"

# Fallback classification when the relay body carries no code
_STATUS_CODES = {
    400: "invalid_request",
    401: "invalid_credential",
    429: "rate_limited",
}

_CODE_MESSAGES = {
    "invalid_request": "Invalid request",
    "invalid_credential": "Invalid API key",
    "rate_limited": "Rate limit exceeded. Please wait a moment and try again.",
    "misconfigured": "The server has no API key configured for this provider",
    "internal_error": "Internal server error",
}


def _client_timeout() -> float | None:
    raw = os.environ.get("RELAY_CLIENT_TIMEOUT", "")
    return float(raw) if raw.strip() else None


@dataclass(frozen=True)
class Message:
    """One chat turn. Never mutated after creation."""
    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_wire(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class ConversationState:
    messages: list[Message] = field(default_factory=list)
    pending_input: str = ""
    is_loading: bool = False
    last_error: str | None = None


class RelayCallError(Exception):
    """The relay answered with an error or could not be reached."""

    def __init__(self, message: str, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


def _error_from_response(resp: requests.Response) -> RelayCallError:
    server_message = None
    code = None
    try:
        body = resp.json()
        if isinstance(body, dict):
            server_message = body.get("error")
            code = body.get("code")
    except ValueError:
        pass

    code = code or _STATUS_CODES.get(resp.status_code)
    if code in ("invalid_credential", "rate_limited"):
        text = _CODE_MESSAGES[code]
    else:
        text = server_message or _CODE_MESSAGES.get(code) or resp.reason or "Request failed"
    return RelayCallError(f"Error {resp.status_code}: {text}", status=resp.status_code, code=code)


def post_relay(endpoint: str, payload: dict, timeout: float | None = None) -> dict:
    """POST a RelayRequest and return the decoded success body.

    Args:
        endpoint: Full URL of the relay route.
        payload: JSON body for that route.
        timeout: Seconds to wait; None blocks until the relay answers.

    Raises:
        RelayCallError: Non-2xx status, undecodable body, or transport failure.
    """
    try:
        resp = requests.post(endpoint, json=payload, timeout=timeout)
    except requests.Timeout as e:
        raise RelayCallError("Request timed out. The server may be overloaded.") from e
    except requests.ConnectionError as e:
        raise RelayCallError("Cannot connect to the backend. Is the API server running?") from e
    except requests.RequestException as e:
        raise RelayCallError(f"Connection error: {e}") from e

    if not resp.ok:
        raise _error_from_response(resp)

    try:
        data = resp.json()
    except ValueError as e:
        raise RelayCallError(INVALID_RESPONSE_MESSAGE, status=resp.status_code) from e
    if not isinstance(data, dict):
        raise RelayCallError(INVALID_RESPONSE_MESSAGE, status=resp.status_code)
    return data


def extract_choice_content(data: dict) -> str:
    """Assistant text from a chat-completions body, untouched."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise RelayCallError(INVALID_RESPONSE_MESSAGE) from e
    if not isinstance(content, str):
        raise RelayCallError(INVALID_RESPONSE_MESSAGE)
    return content


class RelaySession(abc.ABC):
    """Submit/clear state machine shared by the three pages."""

    def __init__(self, endpoint: str, timeout: float | None = None):
        self.endpoint = endpoint
        self.timeout = timeout if timeout is not None else _client_timeout()
        self.state = ConversationState()

    def submit(self, text: str) -> bool:
        """Send text to the relay.

        Returns:
            True if the exchange succeeded. False on local validation failure,
            on a call already in flight, or on any relay error (the error is
            left in state.last_error).
        """
        state = self.state
        if state.is_loading:
            logger.debug("chat.submit_ignored", endpoint=self.endpoint, reason="loading")
            return False

        state.pending_input = text
        if not text.strip():
            state.last_error = EMPTY_INPUT_MESSAGE
            return False

        state.is_loading = True
        state.last_error = None
        self._before_call(state, text)
        try:
            data = post_relay(self.endpoint, self._build_payload(state, text), timeout=self.timeout)
            reply = self._extract(data)
        except RelayCallError as e:
            logger.warning("chat.relay_failed", endpoint=self.endpoint, status=e.status, code=e.code)
            self._on_failure(state, text)
            state.pending_input = text
            state.last_error = e.message
            return False
        finally:
            state.is_loading = False

        self._on_success(state, text, reply)
        state.pending_input = ""
        state.last_error = None
        return True

    def clear(self) -> None:
        """Reset to an empty conversation in one step."""
        self.state = ConversationState()

    @property
    def response(self) -> str:
        """Text of the latest assistant message, or empty."""
        for message in reversed(self.state.messages):
            if message.role == "assistant":
                return message.content
        return ""

    def _before_call(self, state: ConversationState, text: str) -> None:
        pass

    @abc.abstractmethod
    def _build_payload(self, state: ConversationState, text: str) -> dict:
        ...

    @abc.abstractmethod
    def _extract(self, data: dict) -> str:
        ...

    def _on_failure(self, state: ConversationState, text: str) -> None:
        pass

    @abc.abstractmethod
    def _on_success(self, state: ConversationState, text: str, reply: str) -> None:
        ...


class ChatGPTSession(RelaySession):
    """Multi-turn chat. The user message shows up before the relay answers."""

    def __init__(self, endpoint: str = CHATGPT_ENDPOINT, timeout: float | None = None):
        super().__init__(endpoint, timeout)

    def _before_call(self, state, text):
        state.messages.append(Message("user", text))

    def _build_payload(self, state, text):
        return {"messages": [m.to_wire() for m in state.messages]}

    def _extract(self, data):
        return extract_choice_content(data)

    def _on_failure(self, state, text):
        # Drop the optimistic user message so only confirmed turns remain
        if state.messages and state.messages[-1].role == "user" and state.messages[-1].content == text:
            state.messages.pop()

    def _on_success(self, state, text, reply):
        state.messages.append(Message("assistant", reply))


class SingleExchangeSession(RelaySession):
    """Holds only the latest question and its answer."""

    def _before_call(self, state, text):
        state.messages.clear()

    def _on_success(self, state, text, reply):
        state.messages[:] = [Message("user", text), Message("assistant", reply)]


class DeepSeekSession(SingleExchangeSession):

    def __init__(self, endpoint: str = DEEPSEEK_ENDPOINT, timeout: float | None = None):
        super().__init__(endpoint, timeout)

    def _build_payload(self, state, text):
        return {"message": text}

    def _extract(self, data):
        return extract_choice_content(data)


class GeminiSession(SingleExchangeSession):

    def __init__(self, endpoint: str = GEMINI_ENDPOINT, timeout: float | None = None):
        super().__init__(endpoint, timeout)

    def _build_payload(self, state, text):
        return {"prompt": text}

    def _extract(self, data):
        response = data.get("response")
        if not isinstance(response, str):
            raise RelayCallError(INVALID_RESPONSE_MESSAGE)
        return response


def check_health(timeout: float = 3) -> dict:
    """Fetch /health; returns {"status": "offline"} when unreachable."""
    try:
        resp = requests.get(HEALTH_ENDPOINT, timeout=timeout)
        return resp.json()
    except (requests.RequestException, ValueError):
        return {"status": "offline", "components": {}}
