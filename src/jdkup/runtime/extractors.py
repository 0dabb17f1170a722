"""Archive-specific extraction strategies.

Every strategy takes the staged archive and the directory it should end up
in. Shell work goes through :func:`run_sequence`; globbing and the vendor
specific payload lookups are done here in Python so each attempt can be
checked on its own.
"""

import logging
import os
import shutil
import stat
import tempfile
import zipfile
from pathlib import Path
from shlex import quote
from typing import Callable, Dict, Iterable, Optional, Tuple

from ..errors import ExtractionError
from .shell import run_sequence

logger = logging.getLogger(__name__)


def _first_match(base: Path, pattern: str, dirs_only: bool = False) -> Optional[Path]:
    for match in sorted(base.glob(pattern)):
        if not dirs_only or match.is_dir():
            return match
    return None


def install_from_tgz(source: Path, target: Path):
    run_sequence([
        ("", f"mkdir -p {quote(str(target))}"),
        (f"Extracting {source} to {target}",
         f"tar xvf {quote(str(source))} --strip-components=1 -C {quote(str(target))}"),
    ])


def install_from_bin(source: Path, target: Path):
    """Run a self-extracting JDK installer and move what it unpacked to ``target``."""
    with tempfile.TemporaryDirectory(prefix="jdkup-i-") as tmp:
        scratch = Path(tmp)
        binary = scratch / source.name
        run_sequence([
            ("", f"cp {quote(str(source))} {quote(str(binary))}"),
            # "echo |" answers the license prompt
            (f"Extracting {binary} to {target}",
             f"cd {quote(tmp)} && echo | sh {quote(binary.name)}"),
        ])
        extracted = _first_match(scratch, "jdk*", dirs_only=True)
        if extracted is None:
            raise ExtractionError(f"{source} did not unpack a jdk* directory")
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(extracted), str(target))


def _oracle_payload(pkgdir: Path, target: Path) -> bool:
    payload = _first_match(pkgdir, "jdk*.pkg/Payload")
    if payload is None or not payload.is_file():
        return False
    run_sequence([("", f"tar xvf {quote(str(payload))} -C {quote(str(target))}")])
    return True


def _apple_payload(pkgdir: Path, target: Path) -> bool:
    payload = pkgdir / "JavaForOSX.pkg" / "Payload"
    if not payload.is_file():
        return False
    run_sequence([("", f"tar xzf {quote(str(payload))} -C {quote(str(pkgdir))}")])
    contents = _first_match(pkgdir, "Library/Java/JavaVirtualMachines/*/Contents", dirs_only=True)
    if contents is None:
        raise ExtractionError(f"{payload} has no Library/Java/JavaVirtualMachines/*/Contents")
    shutil.move(str(contents), str(target / "Contents"))
    return True


# tried in order; each one is a no-op when its payload isn't there
DMG_PAYLOAD_HANDLERS: Tuple[Callable[[Path, Path], bool], ...] = (_oracle_payload, _apple_payload)


def extract_dmg_payloads(pkgdir: Path, target: Path) -> int:
    """Apply every payload handler; return how many found something."""
    found = 0
    for handler in DMG_PAYLOAD_HANDLERS:
        if handler(pkgdir, target):
            logger.debug("%s extracted a payload from %s", handler.__name__, pkgdir)
            found += 1
    return found


def install_from_dmg(source: Path, target: Path):
    # The mount directory lives outside the scratch dir so a failed unmount
    # never has TemporaryDirectory walking into a mounted image.
    mount_root = Path(tempfile.mkdtemp(prefix="jdkup-m-"))
    mountpoint = mount_root / source.name
    unmount = [(f"Unmounting {source}", f"hdiutil unmount {quote(str(mountpoint))}")]
    with tempfile.TemporaryDirectory(prefix="jdkup-i-") as tmp:
        pkgdir = Path(tmp) / f"{source.name}-pkg"
        try:
            run_sequence([
                (f"Mounting {source}", f"hdiutil mount -mountpoint {quote(str(mountpoint))} {quote(str(source))}"),
            ])
        except ExtractionError:
            shutil.rmtree(mount_root, ignore_errors=True)
            raise
        try:
            run_sequence([
                (f"Extracting {source} to {target}",
                 f"pkgutil --expand {quote(str(mountpoint))}/*.pkg {quote(str(pkgdir))}"),
                ("", f"mkdir -p {quote(str(target))}"),
            ])
            extract_dmg_payloads(pkgdir, target)
        except Exception:
            try:
                run_sequence(unmount)
            except ExtractionError:
                logger.warning("Could not unmount %s; leaving %s in place", mountpoint, mount_root)
            else:
                shutil.rmtree(mount_root, ignore_errors=True)
            raise
    run_sequence(unmount)
    shutil.rmtree(mount_root, ignore_errors=True)


def install_from_zip(source: Path, target: Path):
    logger.info("Extracting %s to %s", source, target)
    unzip(source, target, strip=True)


def detect_prefix(entries: Iterable[zipfile.ZipInfo]) -> str:
    """Find the wrapping directory most zip distributions put everything in.

    Entries are grouped by depth (a file counts its own name as a level, a
    directory doesn't). The first level past the root holding more than one
    entry decides: the directory seen one level above it is the prefix.
    """
    entries_per_level: Dict[int, int] = {}
    prefix_by_level: Dict[int, str] = {}
    for info in entries:
        level = info.filename.count("/")
        if info.is_dir():
            prefix_by_level[level] = info.filename
        else:
            level += 1
        entries_per_level[level] = entries_per_level.get(level, 0) + 1
    for i in range(1, max(entries_per_level, default=0) + 1):
        if entries_per_level.get(i, 0) > 1:
            return prefix_by_level.get(i - 1, "")
    return ""


def _inside(root: Path, path: str) -> bool:
    path = os.path.normpath(path)
    return path == str(root) or path.startswith(str(root) + os.sep)


def _destination(target: Path, name: str) -> Path:
    root = Path(os.path.normpath(target))
    dest = Path(os.path.normpath(root / name))
    if not _inside(root, str(dest)):
        raise ExtractionError(f"zip entry {name!r} escapes {target}")
    return dest


def unzip(source: Path, target: Path, strip: bool = True):
    """Extract ``source`` into ``target``, keeping mode bits and symlinks.

    Entries are checked against the real path of ``target``, so neither a
    ``..`` name nor a symlink extracted earlier can place a file outside it.
    Symlinks must point somewhere inside ``target`` too.
    """
    try:
        with zipfile.ZipFile(source) as archive:
            entries = archive.infolist()
            prefix = detect_prefix(entries) if strip else ""
            if prefix:
                logger.debug("Stripping %s from %s", prefix, source)
            target.mkdir(parents=True, exist_ok=True)
            real_root = Path(os.path.realpath(target))
            for info in entries:
                name = info.filename
                if prefix and name.startswith(prefix):
                    name = name[len(prefix):]
                dest = _destination(target, name)
                if not _inside(real_root, os.path.realpath(dest.parent)):
                    raise ExtractionError(f"zip entry {info.filename!r} resolves outside {target}")
                if info.is_dir():
                    if dest.is_symlink():
                        raise ExtractionError(f"zip entry {info.filename!r} resolves outside {target}")
                    dest.mkdir(parents=True, exist_ok=True)
                    continue
                dest.parent.mkdir(parents=True, exist_ok=True)
                if dest.is_symlink() or dest.exists():
                    dest.unlink()
                mode = info.external_attr >> 16
                if stat.S_ISLNK(mode):
                    link = archive.read(info).decode("utf-8")
                    resolved = os.path.join(os.path.realpath(dest.parent), link)
                    if not _inside(real_root, os.path.realpath(resolved)):
                        raise ExtractionError(f"zip entry {info.filename!r} links outside {target}: {link}")
                    os.symlink(link, dest)
                    continue
                with archive.open(info) as src, open(dest, "wb") as out:
                    shutil.copyfileobj(src, out)
                os.chmod(dest, stat.S_IMODE(mode) or 0o644)
    except zipfile.BadZipFile as err:
        raise ExtractionError(f"{source} is not a valid zip archive: {err}") from err
    except OSError as err:
        raise ExtractionError(f"Failed to extract {source}: {err}") from err
