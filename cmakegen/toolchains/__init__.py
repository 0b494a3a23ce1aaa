# SPDX-License-Identifier: MIT
"""Toolset definitions (GCC, Clang, MSVC).

Importing this package registers every built-in toolset.
"""

from cmakegen.toolchains.gcc import GccToolset
from cmakegen.toolchains.llvm import ClangToolset
from cmakegen.toolchains.msvc import MsvcToolset

__all__ = [
    "ClangToolset",
    "GccToolset",
    "MsvcToolset",
]
