"""Installer configuration."""

import os
import platform
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from .errors import ParseError

DEFAULT_INDEX_URL = "https://github.com/shyiko/jabba/raw/master/index.json"
LICENSE_COOKIE = "oraclelicense=accept-securebackup-cookie"


def _default_home() -> Path:
    home = os.environ.get("JDKUP_HOME")
    return Path(home) if home else Path.home() / ".jdkup"


class InstallerConfig(BaseModel):
    install_root: Path = Field(default_factory=_default_home)
    index_url: str = DEFAULT_INDEX_URL

    # seconds; None disables the limit
    download_timeout: Optional[float] = 600.0
    connect_timeout: Optional[float] = 30.0
    max_redirects: int = 10
    propagate_redirect_headers: bool = True
    license_cookie: str = LICENSE_COOKIE

    keep_failed_downloads: bool = False

    platform_name: str = Field(default_factory=platform.system)
    machine: str = Field(default_factory=platform.machine)

    @classmethod
    def from_env(cls) -> "InstallerConfig":
        """Build a config from JDKUP_* environment variables."""
        kwargs = {}
        if os.environ.get("JDKUP_INDEX_URL"):
            kwargs["index_url"] = os.environ["JDKUP_INDEX_URL"]
        if os.environ.get("JDKUP_DOWNLOAD_TIMEOUT"):
            raw = os.environ["JDKUP_DOWNLOAD_TIMEOUT"]
            try:
                kwargs["download_timeout"] = float(raw)
            except ValueError:
                raise ParseError(f"JDKUP_DOWNLOAD_TIMEOUT must be a number of seconds, got {raw!r}") from None
        if os.environ.get("JDKUP_KEEP_FAILED_DOWNLOADS"):
            kwargs["keep_failed_downloads"] = os.environ["JDKUP_KEEP_FAILED_DOWNLOADS"] not in ("", "0", "false")
        return cls(**kwargs)

    @property
    def jdk_dir(self) -> Path:
        return self.install_root / "jdk"

    def target_for(self, version: str) -> Path:
        """Directory a given version is installed into."""
        return self.jdk_dir / version
