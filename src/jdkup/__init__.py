"""jdkup - resolve, download and install JDK builds."""

__version__ = "0.3.0"
