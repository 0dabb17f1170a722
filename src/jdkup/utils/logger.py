"""Logging setup."""

import logging
from pathlib import Path
from typing import Optional

LOG_FILE = "jdkup.log"


def setup_logging(log_dir: Optional[Path] = None, verbose: bool = False):
    """Log everything to ``<log_dir>/jdkup.log`` and INFO and up to the console.

    ``verbose`` lowers the console threshold to DEBUG, which shows shell
    commands and redirect hops as they happen.
    """
    log_dir = log_dir or (Path.home() / ".jdkup")
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Full trace on disk
    file_handler = logging.FileHandler(log_dir / LOG_FILE)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root.addHandler(file_handler)

    # Short form for the terminal
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root.addHandler(console_handler)

    # aiohttp is chatty at DEBUG
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
