# SPDX-License-Identifier: MIT
"""Toolset protocol, registry and resolution.

A Toolset describes one compiler family's flag syntax: how abstract
settings (optimize, warnings, ...) become C and C++ flags, and how force
included headers are spelled. The set of toolsets is closed: GCC, Clang
and MSVC, each registered under its identifier and aliases.
"""

from __future__ import annotations

import logging
from abc import ABC
from dataclasses import fields
from typing import TYPE_CHECKING, ClassVar

from cmakegen.core.errors import UnknownToolsetError

if TYPE_CHECKING:
    from cmakegen.core.project import CompileSettings, Configuration
    from cmakegen.util.paths import PathContext

logger = logging.getLogger(__name__)

# setting name -> setting value -> flags
FlagTable = dict[str, dict[str, list[str]]]


class Toolset(ABC):
    """Base class for compiler toolsets.

    Subclasses fill in the flag tables; lookup and ordering are shared.
    Flags are produced in CompileSettings field order.
    """

    name: ClassVar[str]
    family: ClassVar[str]

    SHARED_FLAGS: ClassVar[FlagTable] = {}
    CXX_FLAGS: ClassVar[FlagTable] = {}
    FATAL_WARNINGS: ClassVar[list[str]] = []

    @property
    def is_gcc_family(self) -> bool:
        """True for toolsets that accept GNU linker/driver syntax."""
        return self.family == "gcc"

    def _lookup(self, table: FlagTable, settings: CompileSettings) -> list[str]:
        flags: list[str] = []
        for f in fields(settings):
            value = getattr(settings, f.name)
            if not isinstance(value, str) or f.name not in table:
                continue
            flags.extend(table[f.name].get(value, []))
        return flags

    def get_cflags(self, settings: CompileSettings) -> list[str]:
        """Flags for C sources."""
        flags = self._lookup(self.SHARED_FLAGS, settings)
        if settings.fatal_warnings:
            flags.extend(self.FATAL_WARNINGS)
        return flags

    def get_cxxflags(self, settings: CompileSettings) -> list[str]:
        """Flags for C++ sources: the C flags plus C++-only settings."""
        return self.get_cflags(settings) + self._lookup(self.CXX_FLAGS, settings)

    def force_include_flag(self, path: str) -> str:
        raise NotImplementedError

    def get_forceincludes(self, cfg: Configuration, paths: PathContext) -> list[str]:
        """Force-include flags, paths relative to the project location."""
        prj = cfg.bound_project
        result = []
        for header in cfg.forceincludes:
            rel = paths.relative(prj.location, prj.abspath(header))
            result.append(self.force_include_flag(quoted(rel)))
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def quoted(value: str) -> str:
    """Quote a value that contains whitespace."""
    if any(ch.isspace() for ch in value) and not value.startswith('"'):
        return f'"{value}"'
    return value


class ToolsetRegistry:
    """Registered toolset classes keyed by identifier and alias."""

    def __init__(self) -> None:
        self._classes: dict[str, type[Toolset]] = {}

    def register(self, cls: type[Toolset], aliases: list[str] | None = None) -> None:
        for key in [cls.name, *(aliases or [])]:
            self._classes[key.lower()] = cls

    def get(self, identifier: str) -> Toolset | None:
        """Instantiate the toolset for an identifier.

        A version suffix after the first '-' (gcc-13, msc-v143) is ignored.
        """
        family = identifier.lower().split("-", 1)[0]
        cls = self._classes.get(family)
        return cls() if cls is not None else None

    def names(self) -> list[str]:
        return sorted(self._classes)


toolset_registry = ToolsetRegistry()


def default_toolset_name(system: str | None) -> str:
    """Native compiler for Windows targets, Clang everywhere else."""
    if system is not None and system.lower() == "windows":
        return "msc"
    return "clang"


def resolve_toolset(cfg: Configuration, override: str | None = None) -> Toolset:
    """Pick the toolset for a configuration.

    Precedence: the user override, then the configuration's toolset,
    then the default for its target system.

    Raises:
        UnknownToolsetError: The chosen identifier is not registered.
    """
    import cmakegen.toolchains  # noqa: F401  # registers the built-in toolsets

    identifier = override or cfg.toolset or default_toolset_name(cfg.system)
    toolset = toolset_registry.get(identifier)
    if toolset is None:
        raise UnknownToolsetError(identifier)
    logger.debug("Configuration '%s' uses toolset %s", cfg.name, toolset.name)
    return toolset
