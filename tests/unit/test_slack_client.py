"""
Unit tests for the Slack Web API wrapper.

The AsyncWebClient is replaced with AsyncMock, so these tests check the
method names and arguments we send and how Slack errors are translated.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from slack_sdk.errors import SlackApiError

from video_extractor.core.extraction.errors import TransferError, UploadError
from video_extractor.infrastructure.slack.client import SlackChatClient, SlackClientError


def slack_error(code: str) -> SlackApiError:
    return SlackApiError(f"The request to the Slack API failed: {code}", {"ok": False, "error": code})


@pytest.fixture
def web_client() -> AsyncMock:
    client = AsyncMock()
    client.chat_postMessage.return_value = {"ok": True, "ts": "1700000001.000001"}
    client.files_info.return_value = {
        "ok": True,
        "file": {
            "id": "F123",
            "name": "clip.mp4",
            "mimetype": "video/mp4",
            "url_private_download": "https://files.slack.com/download/clip.mp4",
            "shares": {"public": {"C123": [{"ts": "1700000000.000100"}]}},
        },
    }
    return client


class TestGetFileInfo:
    """Tests for resolving file metadata."""

    @pytest.mark.asyncio
    async def test_returns_descriptor(self, web_client):
        chat = SlackChatClient(web_client)

        file = await chat.get_file_info("F123")

        web_client.files_info.assert_awaited_once_with(file="F123")
        assert file.name == "clip.mp4"
        assert file.thread_ts("C123") == "1700000000.000100"

    @pytest.mark.asyncio
    async def test_api_error_returns_none(self, web_client):
        web_client.files_info.side_effect = slack_error("file_not_found")
        chat = SlackChatClient(web_client)

        assert await chat.get_file_info("F404") is None

    @pytest.mark.asyncio
    async def test_missing_file_returns_none(self, web_client):
        web_client.files_info.return_value = {"ok": True}
        chat = SlackChatClient(web_client)

        assert await chat.get_file_info("F123") is None


class TestMessages:
    """Tests for posting and updating the status message."""

    @pytest.mark.asyncio
    async def test_post_message_returns_ts(self, web_client):
        chat = SlackChatClient(web_client)

        ts = await chat.post_message("C123", "hello", thread_ts="1700000000.000100")

        assert ts == "1700000001.000001"
        web_client.chat_postMessage.assert_awaited_once_with(
            channel="C123",
            text="hello",
            thread_ts="1700000000.000100",
        )

    @pytest.mark.asyncio
    async def test_update_message(self, web_client):
        chat = SlackChatClient(web_client)

        await chat.update_message("C123", "1700000001.000001", "done")

        web_client.chat_update.assert_awaited_once_with(channel="C123", ts="1700000001.000001", text="done")

    @pytest.mark.asyncio
    async def test_post_failure_raises_transfer_error(self, web_client):
        web_client.chat_postMessage.side_effect = slack_error("channel_not_found")
        chat = SlackChatClient(web_client)

        with pytest.raises(TransferError, match="channel_not_found"):
            await chat.post_message("C404", "hello")


class TestReactions:
    """Tests for reaction calls."""

    @pytest.mark.asyncio
    async def test_add_and_remove(self, web_client):
        chat = SlackChatClient(web_client)

        await chat.add_reaction("C123", "1.0", "hourglass_flowing_sand")
        await chat.remove_reaction("C123", "1.0", "hourglass_flowing_sand")

        web_client.reactions_add.assert_awaited_once_with(
            channel="C123", timestamp="1.0", name="hourglass_flowing_sand"
        )
        web_client.reactions_remove.assert_awaited_once_with(
            channel="C123", timestamp="1.0", name="hourglass_flowing_sand"
        )

    @pytest.mark.asyncio
    async def test_already_reacted_surfaces_error_code(self, web_client):
        """The caller decides to ignore it; we just report it."""
        web_client.reactions_add.side_effect = slack_error("already_reacted")
        chat = SlackChatClient(web_client)

        with pytest.raises(SlackClientError) as exc_info:
            await chat.add_reaction("C123", "1.0", "white_check_mark")

        assert exc_info.value.error == "already_reacted"
        assert exc_info.value.method == "reactions.add"


class TestUploadFile:
    """Tests for posting frames."""

    @pytest.mark.asyncio
    async def test_uploads_into_thread(self, web_client, tmp_path):
        frame = tmp_path / "frame_001.jpg"
        frame.write_bytes(b"jpg")
        chat = SlackChatClient(web_client)

        await chat.upload_file(
            "C123",
            frame,
            filename="frame_1_of_3.jpg",
            comment="🖼️ Frame 1/3 (0:00)",
            thread_ts="1700000000.000100",
        )

        web_client.files_upload_v2.assert_awaited_once_with(
            channel="C123",
            thread_ts="1700000000.000100",
            file=str(frame),
            filename="frame_1_of_3.jpg",
            initial_comment="🖼️ Frame 1/3 (0:00)",
        )

    @pytest.mark.asyncio
    async def test_upload_failure_raises_upload_error(self, web_client):
        web_client.files_upload_v2.side_effect = slack_error("ratelimited")
        chat = SlackChatClient(web_client)

        with pytest.raises(UploadError, match="ratelimited"):
            await chat.upload_file("C123", Path("frame_001.jpg"), filename="f.jpg", comment="c")
