"""Exceptions raised by the installer pipeline."""

from typing import List, Optional


class JdkupError(Exception):
    """Base class for all installer errors."""


class ParseError(JdkupError, ValueError):
    """Malformed version, range or selector."""


class ResolutionError(JdkupError):
    """No catalog version satisfies the requested range."""

    def __init__(self, selector: str, candidates: List[str]):
        self.selector = selector
        self.candidates = candidates
        super().__init__(
            f"No compatible version found for {selector}\n"
            f"Valid install targets: {', '.join(candidates)}"
        )


class UnsupportedFormatError(JdkupError):
    """Unknown archive type, or an archive type / OS the installer can't handle."""


class DownloadError(JdkupError):
    """Network or transport failure while fetching an artifact."""


class ExtractionError(JdkupError):
    """An extraction step failed."""

    def __init__(self, message: str, command: Optional[str] = None, output: str = ""):
        self.command = command
        self.output = output
        super().__init__(message)


class ValidationError(JdkupError):
    """The extracted tree doesn't look like a JDK."""
