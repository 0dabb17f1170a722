"""Installed versions and the remote release catalog."""

import asyncio
import logging
from typing import List, Optional

import aiohttp

from ..config import InstallerConfig
from ..errors import DownloadError, ParseError, ResolutionError
from ..utils.async_http import AsyncHTTPClient
from .models import ReleaseCatalog, ReleaseIndex, Version
from .semver import Range, parse_version

logger = logging.getLogger(__name__)


class VersionManager:
    OS_MAP = {
        "darwin": "darwin",
        "linux": "linux",
        "windows": "windows",
    }
    ARCH_MAP = {
        "amd64": "amd64",
        "x86_64": "amd64",
        "i386": "386",
        "i686": "386",
        "x86": "386",
        "arm64": "arm64",
        "aarch64": "arm64",
        "armv7l": "arm",
    }

    def __init__(self, config: InstallerConfig):
        self.config = config

    def installed_versions(self) -> List[Version]:
        """Versions with a directory under ``<install_root>/jdk``, ascending."""
        jdk_dir = self.config.jdk_dir
        if not jdk_dir.is_dir():
            return []
        versions = []
        for item in jdk_dir.iterdir():
            if not item.is_dir():
                continue
            try:
                versions.append(parse_version(item.name))
            except ParseError:
                logger.debug("Ignoring %s (not a version)", item)
        return sorted(versions)

    def index_keys(self) -> tuple:
        system = self.config.platform_name.lower()
        machine = self.config.machine.lower()
        return self.OS_MAP.get(system, system), self.ARCH_MAP.get(machine, machine)

    async def fetch_catalog(self) -> ReleaseCatalog:
        """Fetch the release index and return the entries for this host."""
        timeout = aiohttp.ClientTimeout(total=self.config.connect_timeout)
        try:
            async with AsyncHTTPClient(max_redirects=self.config.max_redirects, timeout=timeout) as client:
                data = await client.get(self.config.index_url)
            index = ReleaseIndex.from_json(data)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
            raise DownloadError(f"Failed to fetch release index {self.config.index_url}: {err}") from err
        os_name, arch = self.index_keys()
        catalog: ReleaseCatalog = {}
        for key, url in index.releases_for(os_name, arch).items():
            try:
                catalog[parse_version(key)] = url
            except ParseError:
                logger.debug("Skipping catalog entry %s (not a version)", key)
        return catalog


def select_version(rng: Range, catalog: ReleaseCatalog) -> Version:
    """Return the newest catalog version inside ``rng``."""
    candidates = sorted(catalog, reverse=True)
    match: Optional[Version] = next((v for v in candidates if rng.contains(v)), None)
    if match is None:
        raise ResolutionError(rng.text, [str(v) for v in candidates])
    return match
