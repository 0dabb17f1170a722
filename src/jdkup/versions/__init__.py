"""Version management module."""

from .manager import VersionManager, select_version
from .download_manager import DownloadManager
from .models import ArchiveType, ReleaseCatalog, SourceDescriptor, Version
from .semver import Range, parse_range, parse_version

__all__ = [
    "VersionManager",
    "DownloadManager",
    "ArchiveType",
    "ReleaseCatalog",
    "SourceDescriptor",
    "Version",
    "Range",
    "parse_range",
    "parse_version",
    "select_version",
]
