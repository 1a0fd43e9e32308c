"""
Process-scoped Slack runtime.

Everything that should exist exactly once per process lives here: the
Bolt app (and its shared AsyncWebClient), the Socket Mode connection, the
HTTP client used for downloads, and the event handler built on top of
them. It's constructed at startup and closed at shutdown by the FastAPI
lifespan, never reached through module globals.
"""

import logging
from typing import Optional

import httpx
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.async_app import AsyncApp

from .api.events import register_event_handlers
from .config.settings import Settings
from .core.extraction.handler import VideoEventHandler
from .core.extraction.workspace import Workspace
from .infrastructure.http.downloader import HttpVideoDownloader
from .infrastructure.slack.client import SlackChatClient
from .infrastructure.video.processor import create_frame_sampler

logger = logging.getLogger(__name__)


class SlackRuntime:
    """
    Owns the Slack connection and the collaborators of the event handler.

    start() opens the Socket Mode connection; close() tears everything
    down. Both are awaited from the application lifespan.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

        self.app = AsyncApp(
            token=settings.slack_bot_token,
            signing_secret=settings.slack_signing_secret or None,
        )
        self.http_client = httpx.AsyncClient(timeout=httpx.Timeout(60.0))

        self.handler = VideoEventHandler(
            chat=SlackChatClient(self.app.client),
            downloader=HttpVideoDownloader(
                self.http_client,
                token=settings.slack_bot_token,
                timeout_seconds=settings.download_timeout_seconds,
                max_bytes=settings.max_video_size_bytes,
            ),
            sampler=create_frame_sampler(settings),
            frame_interval=settings.frame_interval,
            max_frames=settings.max_frames,
            upload_delay_seconds=settings.upload_delay_seconds,
            workspace_factory=lambda: Workspace(parent=settings.temp_dir),
        )
        register_event_handlers(self.app, self.handler)

        self._socket_handler: Optional[AsyncSocketModeHandler] = None

    async def start(self) -> None:
        """Open the Socket Mode connection. Returns once connected."""
        self._socket_handler = AsyncSocketModeHandler(self.app, self.settings.slack_app_token)
        await self._socket_handler.connect_async()
        logger.info("Listening for Slack events via Socket Mode")

    async def close(self) -> None:
        """Also used after a failed start(); the HTTP client is always closed."""
        try:
            if self._socket_handler is not None:
                await self._socket_handler.close_async()
                self._socket_handler = None
        finally:
            await self.http_client.aclose()
        logger.info("Slack runtime closed")
