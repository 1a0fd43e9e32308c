"""
Slack event listeners.

We consume exactly one event type, file_shared. Bolt acknowledges the
event and runs each listener invocation as its own task, so a slow video
doesn't block other events.
"""

import logging
from typing import Any

from slack_bolt.async_app import AsyncApp

from ..core.extraction.handler import VideoEventHandler
from ..core.extraction.models import UploadEvent

logger = logging.getLogger(__name__)


def register_event_handlers(app: AsyncApp, handler: VideoEventHandler) -> None:
    """Attach the file_shared listener to a Bolt app."""

    @app.event("file_shared")
    async def on_file_shared(event: dict[str, Any]) -> None:
        try:
            upload = UploadEvent.from_payload(event)
        except ValueError as e:
            logger.warning("Ignoring malformed file_shared event", extra={"error": str(e)})
            return

        await handler.handle(upload)
