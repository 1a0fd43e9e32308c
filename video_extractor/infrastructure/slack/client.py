"""
Slack Web API client wrapper.

This module provides a thin wrapper around slack_sdk's AsyncWebClient that:
1. Implements our ChatClient protocol
2. Translates Slack's response shapes into our domain models
3. Converts SlackApiError into our TransferError hierarchy

The wrapper is intentionally thin. The AsyncWebClient itself is created
once per process (by the Bolt app) and shared across events.
"""

import logging
from pathlib import Path
from typing import Optional

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from video_extractor.core.extraction.errors import TransferError, UploadError
from video_extractor.core.extraction.models import FileDescriptor


logger = logging.getLogger(__name__)


class SlackClientError(TransferError):
    """Raised when a Slack API call fails."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error


def _error_code(e: SlackApiError) -> str:
    """Pull Slack's error code (e.g. "already_reacted") out of the response."""
    response = getattr(e, "response", None)
    if response is not None:
        try:
            return response.get("error") or str(e)
        except AttributeError:
            pass
    return str(e)


class SlackChatClient:
    """
    Implementation of ChatClient using the Slack Web API.

    Knows Slack's method names and payloads but nothing about videos.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def get_file_info(self, file_id: str) -> Optional[FileDescriptor]:
        """
        Fetch file metadata.

        Returns None when Slack can't resolve the file (deleted, not
        visible to the bot, ...) since that just means we ignore it.
        """
        try:
            response = await self._client.files_info(file=file_id)
        except SlackApiError as e:
            logger.warning(
                "files.info failed",
                extra={"file_id": file_id, "error": _error_code(e)}
            )
            return None

        data = response.get("file")
        if not data:
            return None

        return FileDescriptor.from_api(data)

    async def post_message(self, channel_id: str, text: str, thread_ts: Optional[str] = None) -> str:
        try:
            response = await self._client.chat_postMessage(
                channel=channel_id,
                text=text,
                thread_ts=thread_ts,
            )
        except SlackApiError as e:
            raise SlackClientError("chat.postMessage", _error_code(e)) from e

        return response["ts"]

    async def update_message(self, channel_id: str, ts: str, text: str) -> None:
        try:
            await self._client.chat_update(channel=channel_id, ts=ts, text=text)
        except SlackApiError as e:
            raise SlackClientError("chat.update", _error_code(e)) from e

    async def add_reaction(self, channel_id: str, ts: str, name: str) -> None:
        try:
            await self._client.reactions_add(channel=channel_id, timestamp=ts, name=name)
        except SlackApiError as e:
            raise SlackClientError("reactions.add", _error_code(e)) from e

    async def remove_reaction(self, channel_id: str, ts: str, name: str) -> None:
        try:
            await self._client.reactions_remove(channel=channel_id, timestamp=ts, name=name)
        except SlackApiError as e:
            raise SlackClientError("reactions.remove", _error_code(e)) from e

    async def upload_file(
        self,
        channel_id: str,
        path: Path,
        filename: str,
        comment: str,
        thread_ts: Optional[str] = None,
    ) -> None:
        """
        Upload a local file into a channel, optionally in a thread.

        files_upload_v2 handles Slack's external upload flow
        (getUploadURLExternal + completeUploadExternal) for us.
        """
        try:
            await self._client.files_upload_v2(
                channel=channel_id,
                thread_ts=thread_ts,
                file=str(path),
                filename=filename,
                initial_comment=comment,
            )
        except SlackApiError as e:
            logger.error(
                "File upload failed",
                extra={"channel_id": channel_id, "upload_filename": filename, "error": _error_code(e)}
            )
            raise UploadError(f"files_upload_v2 failed: {_error_code(e)}") from e

        logger.debug("Uploaded file", extra={"channel_id": channel_id, "upload_filename": filename})
