"""
Application entry point.

One process serves two things:
- The Slack Socket Mode listener that turns shared videos into frames
- A FastAPI app exposing GET /health for the container platform

The Slack runtime is started and stopped by the FastAPI lifespan, so
uvicorn owns the event loop for both.

For local development:
    uvicorn video_extractor.main:create_app --factory --port 8080

For production:
    video-extractor
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI

from .api.routes import health
from .config.settings import Settings, get_settings
from .runtime import SlackRuntime

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level.upper(),
    )


def create_app(
    settings: Optional[Settings] = None,
    runtime_factory: Callable[[Settings], SlackRuntime] = SlackRuntime,
) -> FastAPI:
    """
    Application factory.

    Passing settings (and a runtime factory) lets tests build an app
    without real Slack credentials.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Start the Slack runtime on startup, close it on shutdown.

        Missing or rejected credentials are logged, not fatal: the
        health endpoint keeps serving so the misconfiguration is visible
        in logs rather than as a crash loop.
        """
        runtime = None
        missing_fields = settings.validate_required_fields()

        if missing_fields:
            logger.error(
                "Missing required configuration, Slack listener disabled",
                extra={"missing_fields": missing_fields}
            )
        else:
            runtime = runtime_factory(settings)
            try:
                await runtime.start()
            except Exception:
                logger.exception("Slack listener failed to start, continuing with health endpoint only")
                await runtime.close()
                runtime = None

        app.state.runtime = runtime

        logger.info(
            "Video extractor ready",
            extra={
                "service": settings.service_name,
                "port": settings.port,
                "frame_interval": settings.frame_interval,
                "max_frames": settings.max_frames,
                "slack_listener": runtime is not None,
            }
        )

        yield

        if runtime is not None:
            await runtime.close()
        logger.info("Video extractor shutting down")

    # Docs and slash redirects are off so any path but /health is a 404
    app = FastAPI(
        title=settings.service_name,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
