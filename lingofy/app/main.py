"""
FastAPI application entry point.

Run:
- dev: uvicorn lingofy.app.main:app --reload --port 3001
- prod: uvicorn lingofy.app.main:app --port 3001
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import yaml
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lingofy.app.errors import studio_error_handler
from lingofy.app.middleware import BodySizeLimitMiddleware
from lingofy.app.providers.gemini import GeminiProvider
from lingofy.app.routes import chat, save, status, studio
from lingofy.app.services.studio import SessionRegistry
from lingofy.core.logging import configure_logging
from lingofy.domain.constants import DEFAULT_CORS_ORIGINS
from lingofy.domain.errors import StudioError

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """Load the YAML config."""
    if config_path is None:
        # default.yaml at the project root
        config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


settings = load_config()


def get_cors_config(config: dict) -> dict:
    """CORS middleware kwargs."""
    server_config = config.get("server", {}) or {}
    return {
        "allow_origins": list(server_config.get("cors_origins", DEFAULT_CORS_ORIGINS)),
        "allow_credentials": False,
        "allow_methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type"],
    }


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifecycle.

    Startup: env + config, logging, shared HTTP client, AI provider, sessions
    Shutdown: close the HTTP client
    """
    # Startup
    load_dotenv()
    app.state.config = settings
    configure_logging(settings)

    persistence_config = settings.get("persistence", {}) or {}
    http_client = httpx.AsyncClient(timeout=persistence_config.get("timeout", 10.0))

    app.state.http_client = http_client
    app.state.provider = GeminiProvider.from_config(settings)
    app.state.sessions = SessionRegistry(
        provider=app.state.provider,
        http_client=http_client,
        config=settings,
    )

    yield

    # Shutdown
    await http_client.aclose()


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="Lingofy",
    description="Creator storefront studio: profile editing, product images, AI assistant",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware (last added = first executed)
app.add_middleware(BodySizeLimitMiddleware)
app.add_middleware(CORSMiddleware, **get_cors_config(settings))

app.add_exception_handler(StudioError, studio_error_handler)


# =============================================================================
# Routes
# =============================================================================

app.include_router(status.api_router, prefix="/api/v1", tags=["Status"])
app.include_router(save.api_router, prefix="/api/v1", tags=["Save"])
app.include_router(chat.api_router, prefix="/api/v1", tags=["Chat"])
app.include_router(studio.api_router, prefix="/api/v1/studio", tags=["Studio"])


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lingofy.app.main:app",
        host="127.0.0.1",
        port=3001,
        reload=True,
    )
