"""File and directory helpers."""

from __future__ import annotations

import os
import re
import shutil
import zipfile
from typing import Optional


def file_exists(path: str) -> bool:
    """Return True if ``path`` exists, False if it does not.

    Errors other than a missing path are raised.
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def dir_exists(path: str) -> bool:
    """Return True if ``path`` is an existing directory; raise otherwise."""
    if not os.path.isdir(path):
        raise NotADirectoryError(
            f"path either doesn't exist, or is not a directory <{path}>"
        )
    return True


def touch(path: str) -> None:
    """Create an empty file at ``path`` if nothing exists there."""
    try:
        os.stat(path)
    except FileNotFoundError:
        with open(path, "w"):
            pass


def ensure_dir(path: str) -> None:
    """Create the directory ``path`` if it does not exist (parents must exist)."""
    if not file_exists(path):
        os.mkdir(path, 0o755)


def ensure_dir_all(path: str) -> None:
    """Create the directory ``path`` and any missing parents."""
    os.makedirs(path or ".", 0o755, exist_ok=True)


def remove_dir(path: str) -> None:
    """Remove ``path`` and everything below it; a missing path is not an error."""
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
    except FileNotFoundError:
        pass


def empty_dir(path: str) -> None:
    """Remove everything inside the directory ``path``, keeping the directory."""
    for name in os.listdir(path):
        remove_dir(os.path.join(path, name))


def list_dir(path: str) -> list[str]:
    """Return the subdirectories of ``path``, sorted by name.

    If ``path`` cannot be listed, its parent directory is listed instead.
    """
    try:
        entries = list(os.scandir(path))
    except OSError:
        path = os.path.dirname(path) or "."
        try:
            entries = list(os.scandir(path))
        except OSError:
            entries = []
    return [
        os.path.join(path, entry.name)
        for entry in sorted(entries, key=lambda e: e.name)
        if entry.is_dir(follow_symlinks=False)
    ]


def get_home_directory() -> str:
    """Return the current user's home directory."""
    home = os.path.expanduser("~")
    if home == "~":
        raise RuntimeError("cannot determine the home directory of the current user")
    return home


def safe_move(src: str, dst: str) -> None:
    """Move ``src`` to ``dst``, copying and deleting when a rename fails."""
    try:
        os.rename(src, dst)
        return
    except OSError as exc:
        print(
            f'[fileutil] unable to rename: "{src}" due to {exc}. Falling back to copying.',
            end="",
        )
    shutil.copyfile(src, dst)
    os.remove(src)


def is_zip_file_uncompressed(path: str) -> bool:
    """Return True if the first file stored in the zip archive is not compressed."""
    try:
        archive = zipfile.ZipFile(path)
    except (OSError, zipfile.BadZipFile) as exc:
        print(f"Error reading zip file {path}: {exc}")
        raise
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            return info.compress_type == zipfile.ZIP_STORED
    return False


def write_file(path: str, data: bytes) -> None:
    """Write ``data`` to ``path`` with mode 0600, creating parent directories."""
    try:
        ensure_dir_all(os.path.dirname(path) or ".")
    except OSError as exc:
        raise OSError(f"cannot ensure path {exc}") from exc
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise OSError(f"write error for thumbnail {path}: {exc} ") from exc


def get_intra_dir(pattern: str, depth: int, length: int) -> str:
    """Split the start of ``pattern`` into ``depth`` nested parts of ``length``.

    For example ``0af63ce3...`` with depth 2 and length 3 gives ``0af/63c``.
    Returns "" when the arguments do not allow it.
    """
    if depth < 1 or length < 1 or depth * length > len(pattern):
        return ""
    parts = [pattern[length * i:length * (i + 1)] for i in range(depth)]
    return os.path.join(*parts)


def get_parent(path: str) -> Optional[str]:
    """Return the parent directory of ``path``, or None if it ends with '/'."""
    if not path:
        raise ValueError("empty path")
    if path.endswith("/"):
        return None
    return os.path.normpath(path + "/..")


def match_entries(directory: str, pattern: str) -> list[str]:
    """Return the entries of ``directory`` whose names match ``pattern``.

    The search is not recursive; the pattern may match anywhere in a name.
    """
    regex = re.compile(pattern)
    return [
        os.path.join(directory, name)
        for name in os.listdir(directory)
        if regex.search(name)
    ]