"""Locate the current user's home directory."""

from __future__ import annotations

import os
import stat
import sys
from collections.abc import Mapping


def _current_system() -> str:
    return "windows" if sys.platform.startswith("win") else sys.platform


def _exists(path: str) -> bool:
    try:
        os.stat(path)
    except OSError:
        return False
    return True


def home_dir(environ: Mapping[str, str] | None = None, system: str | None = None) -> str:
    """Return the home directory of the current user.

    Outside Windows this is ``$HOME``. On Windows the first of HOME,
    HOMEDRIVE+HOMEPATH and USERPROFILE holding ``.apimachinery/config`` wins;
    failing that, the first of HOME, USERPROFILE, HOMEDRIVE+HOMEPATH that is a
    writeable directory, then the first that exists, then the first that is set.
    """
    env = os.environ if environ is None else environ
    system = _current_system() if system is None else system
    if system != "windows":
        return env.get("HOME", "")

    home = env.get("HOME", "")
    drive, drive_home = env.get("HOMEDRIVE", ""), env.get("HOMEPATH", "")
    drive_path = drive + drive_home if drive and drive_home else ""
    profile = env.get("USERPROFILE", "")

    for candidate in (home, drive_path, profile):
        if candidate and _exists(os.path.join(candidate, ".apimachinery", "config")):
            return candidate

    first_set = ""
    first_existing = ""
    for candidate in (home, profile, drive_path):
        if not candidate:
            continue
        first_set = first_set or candidate
        try:
            info = os.stat(candidate)
        except OSError:
            continue
        first_existing = first_existing or candidate
        if stat.S_ISDIR(info.st_mode) and info.st_mode & stat.S_IWUSR:
            return candidate

    return first_existing or first_set