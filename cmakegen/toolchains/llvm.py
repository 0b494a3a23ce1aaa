# SPDX-License-Identifier: MIT
"""Clang/LLVM toolset.

Clang accepts the GCC driver syntax; only a few settings map differently.
"""

from __future__ import annotations

from typing import ClassVar

from cmakegen.toolchains.gcc import GccToolset
from cmakegen.tools.toolset import FlagTable


class ClangToolset(GccToolset):
    """Clang (clang/clang++)."""

    name = "clang"
    family = "gcc"

    SHARED_FLAGS: ClassVar[FlagTable] = {
        **GccToolset.SHARED_FLAGS,
        "optimize": {
            **GccToolset.SHARED_FLAGS["optimize"],
            # -Og is accepted but behaves like -O1
            "Debug": ["-O0"],
        },
        "warnings": {
            **GccToolset.SHARED_FLAGS["warnings"],
            "Everything": ["-Weverything"],
        },
    }


# =============================================================================
# Registration
# =============================================================================

from cmakegen.tools.toolset import toolset_registry  # noqa: E402

toolset_registry.register(ClangToolset, aliases=["llvm"])
