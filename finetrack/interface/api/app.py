"""FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finetrack.config import AuthSettings, Settings
from finetrack.interface.api.routes import comments, health
from finetrack.util.di.container import create_container, setup_di
from finetrack.util.error import ConfigurationError
from finetrack.util.observability import instrument_asyncpg, instrument_fastapi


def check_settings(settings: Settings) -> None:
    """Refuse to serve production traffic with development secrets.

    Raises:
        ConfigurationError: If the JWT secret was left at its default
    """
    if (
        settings.environment == "production"
        and settings.auth.jwt_secret == AuthSettings().jwt_secret
    ):
        raise ConfigurationError("AUTH__JWT_SECRET must be set in production")


def create_app() -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    """
    settings = Settings()
    check_settings(settings)

    # Trace the push channel's raw asyncpg connection
    instrument_asyncpg()

    container = create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Closes the engine and the push channel
        await container.close()

    app_instance = FastAPI(
        title="Fine Tracker API",
        description="Comment threads, counts and activity feed for team fines",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container)

    app_instance.include_router(health.router)
    app_instance.include_router(comments.router)
    app_instance.include_router(comments.feed_router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()
