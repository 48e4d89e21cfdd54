"""FastAPI application entry point.

Startup sequence: load .env → build Settings → build one provider per relay.
Run with: uvicorn backend.main:app
"""

from contextlib import asynccontextmanager

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from backend.api.routes import REQUIRED_FIELD_MESSAGES, router
from backend.core.config import Settings
from backend.core.providers import InvalidRequestError, RelayError, build_providers

load_dotenv()

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the relay app.

    Args:
        settings: Injected configuration. When None, it is read from the
            environment once, here.
    """
    if settings is None:
        settings = Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logger.info("startup.begin")

        app.state.settings = settings
        app.state.providers = build_providers(settings)
        logger.info("startup.providers_ready", configured=settings.configured(),
                    timeout=settings.request_timeout)

        missing = [name for name, ok in settings.configured().items() if not ok]
        if missing:
            logger.warning("startup.missing_credentials", providers=missing,
                           hint="Set CHATGPT_API_KEY, DEEPSEEK_API_KEY or GEMINI_API_KEY in .env")

        logger.info("startup.complete")
        yield
        logger.info("shutdown.complete")

    app = FastAPI(
        title="Chat Relays API",
        description="OpenAI, DeepSeek and Gemini chat relays",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the Streamlit frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RelayError)
    async def _relay_error_handler(_request: Request, exc: RelayError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        locs = [tuple(err.get("loc", ())) for err in exc.errors()]
        logger.warning("chat.invalid_request", path=request.url.path,
                       fields=[".".join(str(p) for p in loc) for loc in locs])
        # loc is ("body", field, ...); only a failing required field gets its own message
        message = next((REQUIRED_FIELD_MESSAGES[loc[1]] for loc in locs
                        if len(loc) > 1 and loc[1] in REQUIRED_FIELD_MESSAGES), None)
        error = InvalidRequestError(message)
        return JSONResponse(status_code=error.status_code, content=error.to_body())

    app.include_router(router)
    return app


app = create_app()
