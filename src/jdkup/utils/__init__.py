"""HTTP and logging helpers shared by the installer."""

from .async_http import REDIRECT_STATUSES, AsyncHTTPClient
from .logger import setup_logging

__all__ = ["AsyncHTTPClient", "REDIRECT_STATUSES", "setup_logging"]
