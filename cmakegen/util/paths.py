# SPDX-License-Identifier: MIT
"""Path relativization with an explicit separator convention.

Generated scripts must use one separator regardless of the host. Rather
than flipping a process-wide default, the convention lives in a
PathContext value that the emitter threads through every call, so two
projects can be emitted concurrently with different conventions.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePath


def to_posix(path: str | PurePath) -> str:
    """Return a path string using forward slashes."""
    return str(path).replace("\\", "/")


def is_absolute(path: str | PurePath) -> bool:
    """True for POSIX absolute paths and Windows drive/UNC paths on any host."""
    text = to_posix(path)
    if text.startswith("/"):
        return True
    return len(text) >= 3 and text[1] == ":" and text[2] == "/"


def _drive(path: str) -> str:
    if len(path) >= 2 and path[1] == ":":
        return path[:2].lower()
    return ""


@dataclass(frozen=True)
class PathContext:
    """Separator convention for paths written into a generated script.

    Attributes:
        separator: Separator used in every path this context renders.
    """

    separator: str = "/"

    def render(self, path: str | PurePath) -> str:
        """Render a path with this context's separator."""
        return to_posix(path).replace("/", self.separator)

    def join(self, *parts: str | PurePath) -> str:
        """Join path parts, a later absolute part discarding earlier ones."""
        result = ""
        for part in parts:
            text = to_posix(part)
            if not text:
                continue
            if is_absolute(text) or not result:
                result = text
            else:
                result = result.rstrip("/") + "/" + text
        return self.render(posixpath.normpath(result) if result else result)

    def absolute(self, path: str | PurePath, base: str | PurePath) -> str:
        """Anchor a relative path at base; absolute paths are only normalized."""
        return self.join(base, path)

    def relative(self, base: str | PurePath, target: str | PurePath) -> str:
        """Render target relative to base.

        Returns "." when both name the same directory. Paths on different
        drives have no relative form and are returned absolute.
        """
        base_text = posixpath.normpath(to_posix(base))
        target_text = posixpath.normpath(to_posix(target))
        if not is_absolute(target_text):
            return self.render(target_text)
        if _drive(base_text) != _drive(target_text):
            return self.render(target_text)
        if _drive(base_text):
            base_text = base_text[2:]
            target_text = target_text[2:]
        return self.render(posixpath.relpath(target_text, base_text))

    def relative_all(
        self, base: str | PurePath, targets: list[str] | tuple[str, ...]
    ) -> list[str]:
        return [self.relative(base, target) for target in targets]


def file_exists(path: str | PurePath) -> bool:
    """Check whether a file exists on the host file system."""
    return Path(path).is_file()
