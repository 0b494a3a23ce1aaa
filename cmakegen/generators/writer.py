# SPDX-License-Identifier: MIT
"""Buffered, indentation-aware line writer.

Generators write into a ScriptWriter and hand the finished text to
write_atomic(), so a generator that fails half way leaves the previous
file (or no file) in place.
"""

from __future__ import annotations

import logging
import os
import tempfile
from io import StringIO
from pathlib import Path

logger = logging.getLogger(__name__)


class ScriptWriter:
    """Collects lines of a generated script.

    Example:
        w = ScriptWriter()
        w.line(0, 'add_library("core" STATIC')
        w.line(1, '"src/a.cpp"')
        w.line(0, ")")
        write_atomic(Path("build/core.cmake"), w.getvalue())
    """

    def __init__(self, indent: str = "  ", eol: str = "\n") -> None:
        self._indent = indent
        self._eol = eol
        self._buffer = StringIO()

    def line(self, depth: int, text: str = "") -> None:
        """Write one line at an indentation depth."""
        if text:
            self._buffer.write(self._indent * depth + text)
        self._buffer.write(self._eol)

    def lines(self, depth: int, texts: list[str]) -> None:
        for text in texts:
            self.line(depth, text)

    def blank(self) -> None:
        self._buffer.write(self._eol)

    def getvalue(self) -> str:
        return self._buffer.getvalue()


def write_atomic(path: Path, text: str, *, bom: bool = False) -> None:
    """Write text via a temporary file in the same directory, then rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    encoding = "utf-8-sig" if bom else "utf-8"
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.info("Wrote %s", path)
