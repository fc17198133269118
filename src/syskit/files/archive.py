# src/syskit/files/archive.py

from __future__ import annotations

import logging
import os
import zipfile
from collections.abc import Iterable
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from ..errors import ArchiveError
from .fs_ops import delete, ensure_directory, is_excluded, walk_files

logger = logging.getLogger(__name__)


def zip_path(source: str | Path, destination: str | Path, exclude: Iterable[str | Path] = ()) -> bool:
    """
    Create (or overwrite) a ZIP from a file or a folder.

    Folders are added recursively with paths relative to the folder itself;
    only files are stored, so empty directories are not preserved.
    """
    src = Path(source)
    if not src.exists():
        raise ArchiveError(f"Invalid source path: {src}")
    src = src.resolve()
    dst = Path(destination)
    rules = list(exclude)

    try:
        ensure_directory(dst.parent)
        dst_resolved = dst.resolve()
        with ZipFile(dst, "w", compression=ZIP_DEFLATED) as z:
            if src.is_dir():
                for fp in walk_files(src, rules):
                    if fp.resolve() == dst_resolved:
                        continue
                    z.write(fp, fp.relative_to(src).as_posix())
            elif not is_excluded(src, rules):
                z.write(src, src.name)
    except OSError as exc:
        raise ArchiveError(f"Could not create ZIP at: {dst}") from exc

    logger.info("Created archive %s from %s", dst, src)
    return True


def _safe_extractall(z: ZipFile, path: Path) -> None:
    """Extract `z` into `path` ensuring no member escapes `path`."""
    base = os.path.abspath(path)
    for member in z.namelist():
        dest = os.path.abspath(os.path.join(base, member))
        if not dest.startswith(base + os.sep) and dest != base:
            raise ArchiveError(f"Unsafe path in archive: {member}")
    z.extractall(path)


def unzip(zip_file: str | Path, destination: str | Path) -> bool:
    """Extract a ZIP into `destination`, creating it if needed."""
    zf = Path(zip_file)
    if not zf.is_file():
        raise ArchiveError(f"ZIP not found: {zf}")

    dst = ensure_directory(destination)

    try:
        with ZipFile(zf) as z:
            _safe_extractall(z, dst)
    except zipfile.BadZipFile as exc:
        raise ArchiveError(f"Could not open ZIP: {zf}") from exc
    except OSError as exc:
        raise ArchiveError(f"Error extracting ZIP into: {dst}") from exc

    logger.info("Extracted archive %s into %s", zf, dst)
    return True


def archive_and_clean(source: str | Path, destination: str | Path) -> bool:
    """Zip `source` and remove it (backup + cleanup)."""
    zip_path(source, destination)
    if not delete(source):
        raise ArchiveError(f"Archived but could not remove source: {source}")
    return True
