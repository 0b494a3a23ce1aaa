# SPDX-License-Identifier: MIT
"""
cmakegen: emit CMake build scripts from a resolved project model.

A front end describes a workspace (projects, configurations, source
files, rules); cmakegen turns it into a CMakeLists.txt plus one script
per project, preserving per-configuration settings, generated files,
link order and custom build steps.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used classes for convenient imports
from cmakegen.core.errors import (  # noqa: E402
    CmakegenError,
    UnknownToolsetError,
    UnrecognizedDialectError,
)
from cmakegen.core.loader import load_workspace  # noqa: E402
from cmakegen.core.project import (  # noqa: E402
    CompileSettings,
    Configuration,
    FileConfig,
    Project,
    Workspace,
)
from cmakegen.core.rules import Rule, RuleProperty  # noqa: E402
from cmakegen.generators.cmake import CMakeGenerator, EmitOptions  # noqa: E402

# Public API exports
__all__ = [
    "__version__",
    # Model
    "CompileSettings",
    "Configuration",
    "FileConfig",
    "Project",
    "Rule",
    "RuleProperty",
    "Workspace",
    "load_workspace",
    # Generation
    "CMakeGenerator",
    "EmitOptions",
    # Errors
    "CmakegenError",
    "UnknownToolsetError",
    "UnrecognizedDialectError",
]
