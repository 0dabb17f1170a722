"""Platform-specific JDK installation."""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, NamedTuple, Tuple

from ..config import InstallerConfig
from ..errors import UnsupportedFormatError, ValidationError
from ..versions.models import ArchiveType
from .extractors import install_from_bin, install_from_dmg, install_from_tgz, install_from_zip

logger = logging.getLogger(__name__)


class HostOS(str, Enum):
    LINUX = "linux"
    DARWIN = "darwin"


class Layout(NamedTuple):
    extractor: Callable[[Path, Path], None]
    # extract straight into the home dir rather than the version dir
    into_home: bool


HOME_SUBDIR: Dict[HostOS, str] = {
    HostOS.LINUX: "",
    HostOS.DARWIN: "Contents/Home",
}

LAYOUTS: Dict[Tuple[HostOS, ArchiveType], Layout] = {
    (HostOS.LINUX, ArchiveType.BIN): Layout(install_from_bin, True),
    (HostOS.LINUX, ArchiveType.TGZ): Layout(install_from_tgz, True),
    (HostOS.LINUX, ArchiveType.ZIP): Layout(install_from_zip, True),
    (HostOS.DARWIN, ArchiveType.DMG): Layout(install_from_dmg, False),
    (HostOS.DARWIN, ArchiveType.ZIP): Layout(install_from_zip, True),
}


def assert_content_is_valid(home: Path):
    if not (home / "bin" / "java").exists():
        raise ValidationError(
            f"{home}/bin/java wasn't found. If you believe this is an error - please file an issue "
            "(specify OS and version/URL you tried to install)"
        )


class JavaManager:
    def __init__(self, config: InstallerConfig):
        self.config = config

    def host_os(self) -> HostOS:
        name = self.config.platform_name
        try:
            return HostOS(name.lower())
        except ValueError:
            raise UnsupportedFormatError(f"{name} OS is not supported") from None

    def layout_for(self, archive_type: ArchiveType) -> Layout:
        """Extractor for ``archive_type`` on this host; fails for unsupported pairs."""
        layout = LAYOUTS.get((self.host_os(), archive_type))
        if layout is None:
            raise UnsupportedFormatError(f"{archive_type.value} is not supported")
        return layout

    def target_for(self, version: str) -> Path:
        return self.config.target_for(version)

    def home_for(self, version: str) -> Path:
        """Directory expected to contain bin/java."""
        subdir = HOME_SUBDIR[self.host_os()]
        target = self.target_for(version)
        return target / subdir if subdir else target

    def install(self, version: str, source: Path, archive_type: ArchiveType) -> Path:
        """Extract ``source`` into the version's directory and validate it.

        On any failure the whole version directory is removed so a
        half-installed JDK never shows up as installed.
        """
        layout = self.layout_for(archive_type)
        target = self.target_for(version)
        home = self.home_for(version)
        try:
            layout.extractor(source, home if layout.into_home else target)
            assert_content_is_valid(home)
        except BaseException:
            logger.debug("Removing %s", target)
            shutil.rmtree(target, ignore_errors=True)
            raise
        return home
