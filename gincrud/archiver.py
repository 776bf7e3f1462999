"""ZIP packaging of a generated project tree.

Walks a finished staging directory depth-first in lexical order and stores
every regular file under its root-relative, forward-slash path.  Directories
are never stored as entries.  Entries carry a fixed timestamp, so the same
tree always produces the same archive bytes.
"""

from __future__ import annotations

import io
import os
import stat
import zipfile
from collections.abc import Iterator
from typing import BinaryIO
from pathlib import Path

# Earliest timestamp the ZIP format can represent.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


class ArchiveError(Exception):
    """Raised when the tree cannot be walked or the archive cannot be built."""


# ---------------------------------------------------------------------------
# Tree walking
# ---------------------------------------------------------------------------


def _iter_files(root: Path, directory: Path) -> Iterator[tuple[str, Path]]:
    """Yield ``(entry_name, path)`` for regular files in lexical walk order."""
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            yield from _iter_files(root, path)
        elif entry.is_file(follow_symlinks=False):
            yield path.relative_to(root).as_posix(), path


def archive_entries(root: str | Path) -> list[str]:
    """Return the entry names an archive of *root* would contain, in order.

    Raises:
        ArchiveError: If *root* is not a directory or cannot be walked.
    """
    root = Path(root)
    if not root.is_dir():
        raise ArchiveError(f"Not a directory: {root}")
    try:
        return [name for name, _ in _iter_files(root, root)]
    except OSError as exc:
        raise ArchiveError(f"Cannot walk {root}: {exc}") from exc


# ---------------------------------------------------------------------------
# Archive building
# ---------------------------------------------------------------------------


def _add_file(zf: zipfile.ZipFile, name: str, path: Path, compresslevel: int | None) -> None:
    info = zipfile.ZipInfo(name, date_time=_ZIP_EPOCH)
    mode = stat.S_IMODE(path.stat().st_mode)
    info.external_attr = (stat.S_IFREG | mode) << 16
    zf.writestr(
        info,
        path.read_bytes(),
        compress_type=zipfile.ZIP_DEFLATED,
        compresslevel=compresslevel,
    )


def _write_zip(root: Path, fileobj: BinaryIO, compresslevel: int | None) -> list[str]:
    names: list[str] = []
    with zipfile.ZipFile(fileobj, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, path in _iter_files(root, root):
            _add_file(zf, name, path, compresslevel)
            names.append(name)
    return names


def build_archive_with_entries(
    root: str | Path,
    compresslevel: int | None = None,
) -> tuple[bytes, list[str]]:
    """Package every regular file under *root* into an in-memory ZIP.

    Args:
        root: The finished project tree.
        compresslevel: Deflate level 0-9, or ``None`` for zlib's default.

    Returns:
        The archive bytes and the entry names written, in archive order.

    Raises:
        ArchiveError: On any walk, read or compression failure.  No bytes are
            returned in that case.
    """
    root = Path(root)
    if not root.is_dir():
        raise ArchiveError(f"Not a directory: {root}")

    buffer = io.BytesIO()
    try:
        names = _write_zip(root, buffer, compresslevel)
    except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        raise ArchiveError(f"Cannot archive {root}: {exc}") from exc
    return buffer.getvalue(), names


def build_archive(root: str | Path, compresslevel: int | None = None) -> bytes:
    """Like :func:`build_archive_with_entries`, returning only the bytes."""
    content, _ = build_archive_with_entries(root, compresslevel)
    return content


def write_archive(
    root: str | Path,
    target: str | Path,
    compresslevel: int | None = None,
) -> Path:
    """Package *root* into the ZIP file *target*.

    The archive is written to a temporary sibling first and renamed into
    place, so *target* is either a complete archive or untouched.

    Returns:
        The resolved target path.
    """
    root = Path(root)
    target = Path(target)
    if not root.is_dir():
        raise ArchiveError(f"Not a directory: {root}")

    partial = target.with_name(target.name + ".part")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with partial.open("wb") as fh:
            _write_zip(root, fh, compresslevel)
        os.replace(partial, target)
    except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        partial.unlink(missing_ok=True)
        raise ArchiveError(f"Cannot write {target}: {exc}") from exc
    return target.resolve()
