# SPDX-License-Identifier: MIT
"""GCC toolset.

Maps abstract compile settings to GCC driver flags. Clang shares most of
this table (see llvm.py).
"""

from __future__ import annotations

from typing import ClassVar

from cmakegen.tools.toolset import FlagTable, Toolset


class GccToolset(Toolset):
    """GNU Compiler Collection (gcc/g++)."""

    name = "gcc"
    family = "gcc"

    SHARED_FLAGS: ClassVar[FlagTable] = {
        "architecture": {
            "x86": ["-m32"],
            "x86_64": ["-m64"],
        },
        "optimize": {
            "Off": ["-O0"],
            "On": ["-O2"],
            "Debug": ["-Og"],
            "Full": ["-O3"],
            "Size": ["-Os"],
            "Speed": ["-O3"],
        },
        "symbols": {
            "On": ["-g"],
            "FastLink": ["-g"],
            "Full": ["-g"],
        },
        "warnings": {
            "Off": ["-w"],
            "High": ["-Wall"],
            "Extra": ["-Wall", "-Wextra"],
            "Everything": ["-Wall", "-Wextra"],
        },
        "floatingpoint": {
            "Fast": ["-ffast-math"],
            "Strict": ["-ffloat-store"],
        },
        "strict_aliasing": {
            "Off": ["-fno-strict-aliasing"],
            "Level1": ["-fstrict-aliasing", "-Wstrict-aliasing=1"],
            "Level2": ["-fstrict-aliasing", "-Wstrict-aliasing=2"],
            "Level3": ["-fstrict-aliasing", "-Wstrict-aliasing=3"],
        },
    }

    CXX_FLAGS: ClassVar[FlagTable] = {
        "exceptions": {
            "Off": ["-fno-exceptions"],
        },
        "rtti": {
            "Off": ["-fno-rtti"],
        },
    }

    FATAL_WARNINGS: ClassVar[list[str]] = ["-Werror"]

    def force_include_flag(self, path: str) -> str:
        return f"-include {path}"


# =============================================================================
# Registration
# =============================================================================

from cmakegen.tools.toolset import toolset_registry  # noqa: E402

toolset_registry.register(GccToolset, aliases=["gnu"])
