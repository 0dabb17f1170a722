"""Shared fixtures: scratch config and on-the-fly archives."""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from jdkup.config import InstallerConfig


@pytest.fixture
def config(tmp_path: Path) -> InstallerConfig:
    return InstallerConfig(install_root=tmp_path / "home", platform_name="Linux", machine="x86_64")


def write_tgz(path: Path, files: Dict[str, bytes]) -> Path:
    """Write a gzipped tarball; every file gets mode 0755."""
    with tarfile.open(path, "w:gz") as tar:
        dirs = set()
        for name in files:
            parts = name.split("/")[:-1]
            for i in range(1, len(parts) + 1):
                dirs.add("/".join(parts[:i]))
        for d in sorted(dirs):
            info = tarfile.TarInfo(d)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return path


def write_zip(path: Path, entries: Dict[str, Optional[bytes]], mode: int = 0o644) -> Path:
    """Write a zip; names ending in ``/`` become directory entries."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            if name.endswith("/"):
                zf.writestr(name, b"")
                continue
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, data or b"")
    return path


@pytest.fixture
def make_tgz(tmp_path: Path):
    def _make(files: Dict[str, bytes], name: str = "jdk.tgz") -> Path:
        return write_tgz(tmp_path / name, files)
    return _make


@pytest.fixture
def make_zip(tmp_path: Path):
    def _make(entries: Dict[str, Optional[bytes]], name: str = "jdk.zip", mode: int = 0o644) -> Path:
        return write_zip(tmp_path / name, entries, mode)
    return _make
