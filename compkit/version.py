"""Build and runtime version information."""

from __future__ import annotations

import json
import platform as _platform
from dataclasses import dataclass

GIT_VERSION = "v0.0.0-master+$Format:%h$"
BUILD_DATE = "1970-01-01T00:00:00Z"
GIT_COMMIT = "$Format:%H$"
GIT_TREE_STATE = ""

_MAX_COL_WIDTH = 80


def _resize(text: str, width: int, right_align: bool) -> str:
    if len(text) > width:
        return text[: max(width - 3, 0)] + "..."
    return text.rjust(width) if right_align else text.ljust(width)


@dataclass(frozen=True)
class Info:
    """Versioning information about the running code."""

    git_version: str = ""
    git_commit: str = ""
    git_tree_state: str = ""
    build_date: str = ""
    python_version: str = ""
    compiler: str = ""
    platform: str = ""

    def _rows(self) -> list[tuple[str, str]]:
        return [
            ("gitVersion", self.git_version),
            ("gitCommit", self.git_commit),
            ("gitTreeState", self.git_tree_state),
            ("buildDate", self.build_date),
            ("pythonVersion", self.python_version),
            ("compiler", self.compiler),
            ("platform", self.platform),
        ]

    def text(self) -> str:
        """Return the information as an aligned two-column table."""
        rows = [(f"{key}:", value) for key, value in self._rows()]
        label_width = min(max(len(label) for label, _ in rows), _MAX_COL_WIDTH)
        value_width = min(max(len(value) for _, value in rows), _MAX_COL_WIDTH)
        lines = [
            _resize(label, label_width, True) + " " + _resize(value, value_width, False)
            for label, value in rows
        ]
        return "\n".join(lines)

    def to_json(self) -> str:
        """Return the information as a compact JSON object."""
        return json.dumps(dict(self._rows()), separators=(",", ":"))

    def __str__(self) -> str:
        return self.text()


def get() -> Info:
    """Return the version information of this build and runtime."""
    return Info(
        git_version=GIT_VERSION,
        git_commit=GIT_COMMIT,
        git_tree_state=GIT_TREE_STATE,
        build_date=BUILD_DATE,
        python_version=_platform.python_version(),
        compiler=_platform.python_implementation(),
        platform=f"{_platform.system().lower()}/{_platform.machine().lower()}",
    )