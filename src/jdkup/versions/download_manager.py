"""Download manager for JDK archives."""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Awaitable, Callable, Optional

import aiofiles
import aiohttp

from ..config import InstallerConfig
from ..errors import DownloadError
from ..utils.async_http import AsyncHTTPClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], Awaitable[None]]


class DownloadManager:
    def __init__(self, config: InstallerConfig, chunk_size: int = 64 * 1024):
        self.config = config
        self.chunk_size = chunk_size

    def _client(self) -> AsyncHTTPClient:
        headers = {}
        if self.config.license_cookie:
            headers["Cookie"] = self.config.license_cookie
        timeout = aiohttp.ClientTimeout(total=self.config.download_timeout,
                                        sock_connect=self.config.connect_timeout)
        return AsyncHTTPClient(headers=headers,
                               max_redirects=self.config.max_redirects,
                               propagate_headers=self.config.propagate_redirect_headers,
                               timeout=timeout)

    async def download(self, url: str, progress_callback: Optional[ProgressCallback] = None) -> Path:
        """Download ``url`` into a private temp file and return its path.

        The temp file belongs to the caller. It is removed here only when the
        download itself fails.
        """
        fd, name = tempfile.mkstemp(prefix="jdkup-d-")
        os.close(fd)
        dest = Path(name)
        logger.debug("Saving %s to %s", url, dest)
        try:
            async with self._client() as client:
                async with client.open(url) as resp:
                    if resp.status >= 400:
                        raise DownloadError(f"GET {url} failed: {resp.status} {resp.reason}")
                    total_size = resp.content_length or 0
                    downloaded = 0

                    async with aiofiles.open(dest, 'wb') as f:
                        async for chunk in resp.content.iter_chunked(self.chunk_size):
                            await f.write(chunk)
                            downloaded += len(chunk)
                            if progress_callback:
                                await progress_callback(url, downloaded, total_size)
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            dest.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {err or type(err).__name__}") from err
        except BaseException:
            dest.unlink(missing_ok=True)
            raise
        return dest
