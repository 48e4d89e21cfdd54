"""Relay settings, built once at startup and injected into the providers.

Credentials are read from the process environment exactly once, by
Settings.from_env(). Handlers never touch os.environ mid-request, so tests
can hand the app a Settings with fake keys.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_DEEPSEEK_BASE_URL = "https://api.deepseek.com/v1"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-lite"


def _parse_timeout(raw: str | None) -> float | None:
    """Empty or unset means no timeout: block until the provider answers."""
    if raw is None or not raw.strip():
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError(f"RELAY_TIMEOUT must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """Process configuration for the three relays."""
    openai_api_key: str = ""
    deepseek_api_key: str = ""
    gemini_api_key: str = ""
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    deepseek_base_url: str = DEFAULT_DEEPSEEK_BASE_URL
    gemini_model: str = DEFAULT_GEMINI_MODEL
    request_timeout: float | None = None
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings instance. Missing API keys become empty strings; the
            relays report them as misconfigured at call time.
        """
        env = os.environ if environ is None else environ
        origins = env.get("CORS_ORIGINS", "*")
        return cls(
            openai_api_key=env.get("CHATGPT_API_KEY", "").strip(),
            deepseek_api_key=env.get("DEEPSEEK_API_KEY", "").strip(),
            gemini_api_key=env.get("GEMINI_API_KEY", "").strip(),
            openai_base_url=env.get("OPENAI_BASE_URL", DEFAULT_OPENAI_BASE_URL).rstrip("/"),
            deepseek_base_url=env.get("DEEPSEEK_BASE_URL", DEFAULT_DEEPSEEK_BASE_URL).rstrip("/"),
            gemini_model=env.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            request_timeout=_parse_timeout(env.get("RELAY_TIMEOUT")),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )

    def configured(self) -> dict[str, bool]:
        """Which providers have a credential. Never exposes the values."""
        return {
            "openai": bool(self.openai_api_key),
            "deepseek": bool(self.deepseek_api_key),
            "gemini": bool(self.gemini_api_key),
        }
