"""Command line front end."""

import argparse
import asyncio
import sys
from typing import List, Optional, TextIO

from .config import InstallerConfig
from .core.installer import Installer
from .errors import JdkupError
from .utils.logger import setup_logging


class ConsoleProgress:
    """Render download progress on one terminal line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stderr
        self._last = -1

    async def __call__(self, name: str, downloaded: int, total: int):
        if total > 0:
            percent = downloaded * 100 // total
            if percent == self._last:
                return
            self._last = percent
            self.stream.write(f"\r{downloaded // 1024} / {total // 1024} KiB ({percent}%)")
        else:
            self.stream.write(f"\r{downloaded // 1024} KiB")
        if total and downloaded >= total:
            self.stream.write("\n")
        self.stream.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jdkup", description="Install JDK builds.")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug output")
    sub = parser.add_subparsers(dest="command", required=True)
    install = sub.add_parser("install", help="install a JDK")
    install.add_argument("selector", help="version, range (e.g. ^1.8) or <version>=<type>+<url>")
    return parser


async def main(argv: Optional[List[str]] = None, config: Optional[InstallerConfig] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = config or InstallerConfig.from_env()
    except JdkupError as err:
        print(str(err), file=sys.stderr)
        return 1
    setup_logging(config.install_root, verbose=args.verbose)

    installer = Installer(config, progress_callback=ConsoleProgress())
    try:
        version = await installer.install(args.selector)
    except JdkupError as err:
        print(str(err), file=sys.stderr)
        return 1
    print(version)
    return 0


def run():
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)
