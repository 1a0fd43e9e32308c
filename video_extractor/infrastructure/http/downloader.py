"""
Authenticated video download.

Slack's url_private / url_private_download require the bot token as a
bearer header. We stream the body straight to disk so large videos
never sit in memory. Disk writes run in a worker thread, like the FFmpeg
subprocesses, so a slow disk never stalls the event loop.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from video_extractor.core.extraction.errors import DownloadError

logger = logging.getLogger(__name__)


class HttpVideoDownloader:
    """
    Implementation of VideoDownloader using httpx.

    The AsyncClient is shared across events and closed by the runtime
    on shutdown.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        timeout_seconds: float = 300.0,
        max_bytes: Optional[int] = None,
    ) -> None:
        self._client = client
        self._token = token
        self._timeout = timeout_seconds
        self._max_bytes = max_bytes

    async def download(self, url: str, destination: Path) -> Path:
        """
        Stream `url` into `destination`.

        The whole transfer is bounded by timeout_seconds; a stalled
        stream counts as a failed download.
        """
        try:
            size = await asyncio.wait_for(self._stream(url, destination), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise DownloadError(f"Download timed out after {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise DownloadError(f"Download failed with HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise DownloadError(f"Download failed: {e}") from e
        except OSError as e:
            raise DownloadError(f"Could not write video to disk: {e}") from e

        logger.info(
            "Download complete",
            extra={"path": str(destination), "size_bytes": size}
        )
        return destination

    async def _stream(self, url: str, destination: Path) -> int:
        headers = {"Authorization": f"Bearer {self._token}"}
        written = 0

        async with self._client.stream("GET", url, headers=headers, follow_redirects=True) as response:
            response.raise_for_status()

            with open(destination, "wb") as f:
                async for chunk in response.aiter_bytes():
                    written += len(chunk)
                    if self._max_bytes is not None and written > self._max_bytes:
                        raise DownloadError(
                            f"Video exceeds the {self._max_bytes} byte download limit"
                        )
                    await asyncio.to_thread(f.write, chunk)

        return written
