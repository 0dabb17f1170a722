"""Install orchestration: selector -> version -> staged archive -> installed JDK."""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from ..config import InstallerConfig
from ..errors import ParseError
from ..runtime.java_manager import JavaManager
from ..versions.download_manager import DownloadManager, ProgressCallback
from ..versions.manager import VersionManager, select_version
from ..versions.models import ReleaseCatalog, SourceDescriptor, Version
from ..versions.semver import parse_range, parse_version

logger = logging.getLogger(__name__)


def is_pinned(selector: str) -> bool:
    """True for ``<version>=<url>``; ``>=1.8`` and ``=1.8.0`` are ranges."""
    head, sep, _ = selector.partition("=")
    return bool(sep) and bool(head) and not any(c in head for c in "<>!~^ ")


class Installer:
    def __init__(self, config: Optional[InstallerConfig] = None,
                 versions: Optional[VersionManager] = None,
                 downloads: Optional[DownloadManager] = None,
                 java: Optional[JavaManager] = None,
                 progress_callback: Optional[ProgressCallback] = None):
        self.config = config or InstallerConfig.from_env()
        self.versions = versions or VersionManager(self.config)
        self.downloads = downloads or DownloadManager(self.config)
        self.java = java or JavaManager(self.config)
        self.progress_callback = progress_callback

    async def install(self, selector: str) -> str:
        """Install the JDK ``selector`` names and return its exact version.

        ``selector`` is a version (``1.8.0``), a range (``^1.8``) or a pin
        (``1.8.0=tgz+https://...``). Already installed versions are a no-op.
        """
        version: Optional[Version] = None
        catalog: Optional[ReleaseCatalog] = None
        if is_pinned(selector):
            selector, url = selector.split("=", 1)
            version = parse_version(selector)
            catalog = {version: url}
        else:
            try:
                version = parse_version(selector)
            except ParseError:
                version = None

        if version is not None and version in self.versions.installed_versions():
            logger.debug("%s is already installed", version)
            return str(version)

        if catalog is None:
            rng = parse_range(selector)
            catalog = await self.versions.fetch_catalog()
            version = select_version(rng, catalog)

        source = SourceDescriptor.parse(catalog[version])
        # unsupported OS / archive type fail here, before anything is fetched
        self.java.layout_for(source.archive_type)

        async with self._staged(version, source) as file:
            await asyncio.get_running_loop().run_in_executor(
                None, self.java.install, str(version), file, source.archive_type
            )
        return str(version)

    @asynccontextmanager
    async def _staged(self, version: Version, source: SourceDescriptor) -> AsyncIterator[Path]:
        """Yield a local path to the archive, downloading it if needed."""
        if source.is_local_file:
            yield Path(source.local_path)
            return

        logger.info("Downloading %s (%s)", version, source.url)
        file = await self.downloads.download(source.url, self.progress_callback)
        succeeded = False
        try:
            yield file
            succeeded = True
        finally:
            if succeeded or not self.config.keep_failed_downloads:
                file.unlink(missing_ok=True)
            else:
                logger.warning("Keeping %s for inspection", file)


async def install(selector: str, config: Optional[InstallerConfig] = None) -> str:
    """Shortcut for ``Installer(config).install(selector)``."""
    return await Installer(config).install(selector)
