"""File I/O operations for staging and committing rendered trees."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

_BINARY_SNIFF_BYTES = 8192


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def read_source(path: Path, *, detect_binary: bool = True) -> tuple[str | bytes, int]:
    """Read a template file and its permission bits.

    Args:
        path: Template file path
        detect_binary: Return raw bytes for files that look binary

    Returns:
        Tuple of (text or bytes, permission bits)
    """
    raw = path.read_bytes()
    mode = stat.S_IMODE(path.stat().st_mode)
    if not detect_binary:
        return raw.decode("utf-8", errors="surrogateescape"), mode
    if b"\x00" in raw[:_BINARY_SNIFF_BYTES]:
        return raw, mode
    try:
        return raw.decode("utf-8"), mode
    except UnicodeDecodeError:
        return raw, mode


def write_file(path: Path, content: str | bytes, mode: int = 0o644) -> None:
    """Write staged content, preserving line endings as read.

    Args:
        path: Destination file path
        content: Text or raw bytes
        mode: File permissions (octal)
    """
    ensure_parent(path)
    data = (
        content
        if isinstance(content, bytes)
        else content.encode("utf-8", errors="surrogateescape")
    )
    with open(path, "wb") as handle:
        handle.write(data)
        handle.flush()
        os.fsync(handle.fileno())
    os.chmod(path, mode)


def write_symlink(path: Path, target: str) -> None:
    """Create a symlink at ``path`` pointing at ``target`` verbatim."""
    ensure_parent(path)
    os.symlink(target, path)


@contextmanager
def staging_area(parent: Path | None = None) -> Iterator[Path]:
    """Yield a private temporary directory that is always removed.

    Args:
        parent: Directory to create the staging area in (system temp if None)
    """
    if parent is not None:
        parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=".petridish-", dir=parent))
    logger.debug(f"Staging into {staging}")
    try:
        yield staging
    finally:
        shutil.rmtree(staging, ignore_errors=True)


def move_tree(src: Path, dest: Path) -> None:
    """Move a staged directory into place with a single rename.

    When the staging area lives on another filesystem the tree is copied to
    a hidden sibling of ``dest`` first, then renamed into place.
    """
    ensure_parent(dest)
    try:
        os.replace(src, dest)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        logger.warning(
            f"Staging area and {dest.parent} are on different filesystems; "
            "copying beside the destination before renaming"
        )
        sibling = Path(tempfile.mkdtemp(prefix=f".{dest.name}.", dir=str(dest.parent)))
        try:
            copied = sibling / dest.name
            shutil.copytree(src, copied, symlinks=True)
            os.replace(copied, dest)
        finally:
            shutil.rmtree(sibling, ignore_errors=True)


def replace_path(src: Path, dest: Path) -> None:
    """Move a single staged file or symlink over ``dest``."""
    ensure_parent(dest)
    try:
        os.replace(src, dest)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        # Stage beside dest; the final step must be a same-filesystem rename.
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", dir=str(dest.parent))
        os.close(fd)
        os.remove(tmp_name)
        try:
            if src.is_symlink():
                os.symlink(os.readlink(src), tmp_name)
            else:
                shutil.copy2(src, tmp_name)
            os.replace(tmp_name, dest)
        finally:
            if os.path.lexists(tmp_name):
                os.remove(tmp_name)
