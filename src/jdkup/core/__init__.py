"""Install orchestration."""

from .installer import Installer, install

__all__ = ["Installer", "install"]
