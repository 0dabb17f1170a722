"""Data models for JDK versions and release sources."""

import re
from enum import Enum
from typing import Dict, Tuple, Union

from pydantic import BaseModel, ConfigDict

from ..errors import ParseError, UnsupportedFormatError


class Version(BaseModel):
    """An exact semantic version. Immutable once parsed."""

    model_config = ConfigDict(frozen=True)

    major: int
    minor: int
    patch: int
    prerelease: str = ""
    build: str = ""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text

    def _prerelease_key(self) -> tuple:
        # a release sorts above all of its prereleases
        if not self.prerelease:
            return (1,)
        identifiers = []
        for part in self.prerelease.split("."):
            if part.isdigit():
                identifiers.append((0, int(part), ""))
            else:
                identifiers.append((1, 0, part))
        return (0, tuple(identifiers))

    def precedence_key(self) -> tuple:
        """Semver precedence (build metadata ignored)."""
        return (self.major, self.minor, self.patch, self._prerelease_key())

    def sort_key(self) -> tuple:
        # build metadata only breaks ties so that the order stays total
        return self.precedence_key() + (self.build,)

    def release_tuple(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def compare(self, other: "Version") -> int:
        """Return -1, 0 or 1."""
        a, b = self.sort_key(), other.sort_key()
        return (a > b) - (a < b)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() >= other.sort_key()


class ArchiveType(str, Enum):
    DMG = "dmg"
    ZIP = "zip"
    TGZ = "tgz"
    BIN = "bin"


QUALIFIED_URL = re.compile(r"^\w+[+]\w+://")


class SourceDescriptor(BaseModel):
    """Where a version comes from and how to unpack it."""

    model_config = ConfigDict(frozen=True)

    archive_type: ArchiveType
    url: str

    @property
    def is_local_file(self) -> bool:
        return self.url.startswith("file://")

    @property
    def local_path(self) -> str:
        return self.url[len("file://"):]

    @classmethod
    def parse(cls, qualified: str) -> "SourceDescriptor":
        """Split ``<archiveType>+<url>`` on the first ``+``."""
        if not QUALIFIED_URL.match(qualified):
            raise ParseError("URL must contain qualifier, e.g. tgz+http://...")
        qualifier, url = qualified.split("+", 1)
        try:
            archive_type = ArchiveType(qualifier)
        except ValueError:
            raise UnsupportedFormatError(f"{qualifier} is not supported") from None
        return cls(archive_type=archive_type, url=url)


# Version -> "<archiveType>+<url>"
ReleaseCatalog = Dict[Version, str]


class ReleaseIndex(BaseModel):
    """Remote index: os -> arch -> package kind -> version -> qualified url."""

    root: Dict[str, Dict[str, Dict[str, Dict[str, str]]]] = {}

    @classmethod
    def from_json(cls, data: Union[dict, None]) -> "ReleaseIndex":
        return cls(root=data or {})

    def releases_for(self, os_name: str, arch: str, kind: str = "jdk") -> Dict[str, str]:
        return dict(self.root.get(os_name, {}).get(arch, {}).get(kind, {}))
