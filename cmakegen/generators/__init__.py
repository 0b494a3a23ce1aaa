# SPDX-License-Identifier: MIT
"""Build file generators for cmakegen."""

from cmakegen.generators.cmake import CMakeGenerator, CMakeProjectEmitter, EmitOptions

__all__ = [
    "CMakeGenerator",
    "CMakeProjectEmitter",
    "EmitOptions",
]
