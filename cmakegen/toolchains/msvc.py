# SPDX-License-Identifier: MIT
"""Microsoft Visual C++ toolset."""

from __future__ import annotations

from typing import ClassVar

from cmakegen.tools.toolset import FlagTable, Toolset


class MsvcToolset(Toolset):
    """MSVC (cl.exe).

    There is no architecture flag: the target machine is chosen by the
    compiler binary (and CMake's generator platform), not on the command
    line.
    """

    name = "msc"
    family = "msc"

    SHARED_FLAGS: ClassVar[FlagTable] = {
        "optimize": {
            "Off": ["/Od"],
            "On": ["/Ot"],
            "Debug": ["/Od"],
            "Full": ["/Ox"],
            "Size": ["/O1"],
            "Speed": ["/O2"],
        },
        "symbols": {
            "On": ["/Z7"],
            "FastLink": ["/Z7"],
            "Full": ["/Z7"],
        },
        "warnings": {
            "Off": ["/W0"],
            "High": ["/W4"],
            "Extra": ["/W4"],
            "Everything": ["/Wall"],
        },
        "floatingpoint": {
            "Fast": ["/fp:fast"],
            "Strict": ["/fp:strict"],
        },
    }

    CXX_FLAGS: ClassVar[FlagTable] = {
        "exceptions": {
            "Default": ["/EHsc"],
            "On": ["/EHsc"],
            "SEH": ["/EHa"],
        },
        "rtti": {
            "Off": ["/GR-"],
        },
    }

    FATAL_WARNINGS: ClassVar[list[str]] = ["/WX"]

    def force_include_flag(self, path: str) -> str:
        return f"/FI{path}"


# =============================================================================
# Registration
# =============================================================================

from cmakegen.tools.toolset import toolset_registry  # noqa: E402

toolset_registry.register(MsvcToolset, aliases=["msvc"])
