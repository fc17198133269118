# src/syskit/files/fs_ops.py

"""
Filesystem helpers: recursive copy/move/delete, cleanup and inspection.

Exclusion rules (`exclude`) are matched against an entry's basename or its full
path with fnmatch, or compared with its resolved path. An excluded directory is
skipped together with everything under it.
"""

from __future__ import annotations

import fnmatch
import hashlib
import logging
import os
import shutil
import time
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from ..errors import FileOperationError

logger = logging.getLogger(__name__)

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def is_excluded(path: str | Path, exclude: Iterable[str | Path]) -> bool:
    p = Path(path)
    for rule in exclude:
        rule_s = str(rule)
        if fnmatch.fnmatch(p.name, rule_s) or fnmatch.fnmatch(str(p), rule_s):
            return True
        try:
            if p.resolve() == Path(rule_s).resolve():
                return True
        except OSError:
            continue
    return False


def ensure_directory(path: str | Path, mode: int = 0o775) -> Path:
    """Create `path` (and parents) if missing."""
    p = Path(path)
    try:
        p.mkdir(mode=mode, parents=True, exist_ok=True)
    except OSError as exc:
        raise FileOperationError(f"Could not create directory: {p}") from exc
    if not p.is_dir():
        raise FileOperationError(f"Could not create directory: {p}")
    return p


def walk_files(root: str | Path, exclude: Iterable[str | Path] = ()) -> Iterator[Path]:
    """Yield regular files under `root` (recursive), pruning excluded entries.

    Dangling symlinks and other non-files are skipped.
    """
    rules = list(exclude)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not is_excluded(Path(dirpath) / d, rules))
        for name in sorted(filenames):
            fp = Path(dirpath) / name
            if fp.is_file() and not is_excluded(fp, rules):
                yield fp


def copy(source: str | Path, destination: str | Path, exclude: Iterable[str | Path] = ()) -> bool:
    """Copy a file or a whole directory tree to `destination`."""
    src = Path(source)
    dst = Path(destination)
    rules = list(exclude)

    if src.is_dir():
        ensure_directory(dst)
        for dirpath, dirnames, filenames in os.walk(src):
            base = Path(dirpath)
            dirnames[:] = [d for d in dirnames if not is_excluded(base / d, rules)]
            target_dir = dst / base.relative_to(src)
            ensure_directory(target_dir)
            for name in filenames:
                item = base / name
                if is_excluded(item, rules):
                    continue
                try:
                    shutil.copy2(item, target_dir / name)
                except OSError as exc:
                    raise FileOperationError(f"Could not copy: {item}") from exc
        return True

    if not src.exists():
        raise FileOperationError(f"Could not copy: {src} does not exist")

    ensure_directory(dst.parent)
    try:
        shutil.copy2(src, dst)
    except OSError as exc:
        raise FileOperationError(f"Could not copy: {src}") from exc
    return True


def move(source: str | Path, destination: str | Path, exclude: Iterable[str | Path] = ()) -> bool:
    """Copy then delete the source. Excluded entries are lost with the source."""
    copy(source, destination, exclude)
    delete(source)
    return True


def delete(path: str | Path) -> bool:
    """
    Remove a file, symlink or directory tree.

    A missing path counts as deleted. Returns False if something could not be removed.
    """
    p = Path(path)
    if not p.exists() and not p.is_symlink():
        return True

    try:
        if p.is_file() or p.is_symlink():
            p.unlink()
        else:
            shutil.rmtree(p)
    except OSError:
        logger.warning("Could not delete %s", p, exc_info=True)
        return False
    return True


def list_files(path: str | Path, pattern: str | None = None) -> list[Path]:
    """Files (not directories) directly inside `path`, sorted."""
    p = Path(path)
    if not p.is_dir():
        return []
    out = [
        f for f in p.iterdir()
        if f.is_file() and (not pattern or fnmatch.fnmatch(f.name, pattern))
    ]
    return sorted(out)


def delete_old_files(
        path: str | Path,
        days: int,
        *,
        recursive: bool = False,
        exclude: Iterable[str | Path] = (),
        simulate: bool = False,
) -> int:
    """
    Delete files whose mtime is older than `days` days.

    With simulate=True nothing is removed; the return value is the number of files
    that matched either way.
    """
    p = Path(path)
    if not p.is_dir():
        return 0

    limit_ts = time.time() - days * 86400
    rules = list(exclude)
    files = walk_files(p, rules) if recursive else (
        f for f in p.iterdir() if f.is_file() and not is_excluded(f, rules)
    )

    count = 0
    for fp in files:
        try:
            if fp.stat().st_mtime >= limit_ts:
                continue
            if not simulate:
                fp.unlink()
        except OSError:
            logger.warning("Could not remove old file %s", fp, exc_info=True)
            continue
        count += 1

    if count:
        logger.info("delete_old_files path=%s days=%s removed=%s simulate=%s", p, days, count, simulate)
    return count


def keep_recent_files(path: str | Path, keep: int = 5, pattern: str = "*") -> int:
    """Keep only the `keep` most recently modified files matching `pattern`."""
    p = Path(path)
    if not p.is_dir():
        return 0

    files = [f for f in p.glob(pattern) if f.is_file()]
    files.sort(key=lambda f: f.stat().st_mtime, reverse=True)

    removed = 0
    for fp in files[max(0, keep):]:
        try:
            fp.unlink()
        except OSError:
            logger.warning("Could not remove %s", fp, exc_info=True)
            continue
        removed += 1
    return removed


def human_size(num_bytes: int | float) -> str:
    """12345678 -> '11.77 MB'."""
    size = float(num_bytes)
    i = 0
    while size >= 1024 and i < len(_SIZE_UNITS) - 1:
        size /= 1024
        i += 1
    text = f"{round(size, 2):.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[i]}"


def dir_size(path: str | Path) -> int:
    """Total size in bytes of a file, or of every file under a directory."""
    p = Path(path)
    if p.is_file():
        return p.stat().st_size
    if not p.is_dir():
        return 0
    return sum(f.stat().st_size for f in walk_files(p))


def stream_copy(source: str | Path, destination: str | Path, buffer: int = 8192) -> bool:
    """Chunked copy for large files. Returns False if either side cannot be opened."""
    try:
        with open(source, "rb") as fin, open(destination, "wb") as fout:
            while chunk := fin.read(buffer):
                fout.write(chunk)
    except OSError:
        logger.warning("stream_copy failed %s -> %s", source, destination, exc_info=True)
        return False
    return True


def verify_hash(file: str | Path, expected_hash: str, algo: str = "sha256") -> bool:
    p = Path(file)
    if not p.is_file():
        return False
    h = hashlib.new(algo)
    with open(p, "rb") as fh:
        for chunk in iter(lambda: fh.read(65536), b""):
            h.update(chunk)
    return h.hexdigest() == expected_hash.lower()


def mirror(source: str | Path, destination: str | Path, exclude: Iterable[str | Path] = ()) -> None:
    """Copy source into destination, then drop top-level destination entries missing in source."""
    src = Path(source)
    dst = Path(destination)
    copy(src, dst, exclude)

    for entry in dst.iterdir():
        if not (src / entry.name).exists():
            delete(entry)


def inspect(path: str | Path, recursive: bool = False) -> list[dict[str, Any]]:
    """Summary (name, path, size, modified) of the files in a folder."""
    p = Path(path)
    if not p.is_dir():
        return []

    files = walk_files(p) if recursive else sorted(f for f in p.iterdir() if f.is_file())
    out: list[dict[str, Any]] = []
    for f in files:
        st = f.stat()
        out.append(
            {
                "name": f.name,
                "path": str(f),
                "size": human_size(st.st_size),
                "modified": datetime.fromtimestamp(st.st_mtime).strftime("%Y-%m-%d %H:%M:%S"),
            }
        )
    return out
