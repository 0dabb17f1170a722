"""Run external commands one after another."""

import logging
import subprocess
from typing import Iterable, Tuple

from ..errors import ExtractionError

logger = logging.getLogger(__name__)


def run_sequence(steps: Iterable[Tuple[str, str]]) -> None:
    """Run ``(description, command line)`` pairs through ``sh -c``, in order.

    Stops at the first command that exits non-zero; its combined output is
    logged and carried by the raised :class:`ExtractionError`.
    """
    for description, command in steps:
        if description:
            logger.info(description)
        logger.debug("$ %s", command)
        try:
            result = subprocess.run(["sh", "-c", command], stdout=subprocess.PIPE,
                                    stderr=subprocess.STDOUT, text=True, errors="replace")
        except OSError as err:
            raise ExtractionError(f"'{command}' failed: {err}", command=command) from err
        if result.returncode != 0:
            logger.error(result.stdout)
            raise ExtractionError(f"'{command}' failed: exit status {result.returncode}",
                                  command=command, output=result.stdout)
