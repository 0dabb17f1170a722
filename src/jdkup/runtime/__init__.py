"""JDK extraction and installation."""

from .java_manager import HostOS, JavaManager, assert_content_is_valid
from .shell import run_sequence

__all__ = ["HostOS", "JavaManager", "assert_content_is_valid", "run_sequence"]
