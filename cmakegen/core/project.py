# SPDX-License-Identifier: MIT
"""Resolved workspace model consumed by the generators.

The model is what a project-description front end produces after it has
merged configuration inheritance and computed per-file settings. The
generators only read it.

A Workspace holds Projects; each Project holds its source files and an
ordered list of Configurations (one per build type/platform). Paths may
be given absolute or relative to the project's base directory; the
accessors on Project return them absolute with forward slashes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, get_args

from cmakegen.core.errors import ModelError
from cmakegen.core.tree import SourceTree
from cmakegen.util.paths import PathContext, to_posix

if TYPE_CHECKING:
    from cmakegen.core.rules import Rule, RuleRegistry

logger = logging.getLogger(__name__)

ProjectKind = Literal[
    "StaticLib",
    "SharedLib",
    "ConsoleApp",
    "WindowedApp",
    "Utility",
]

PROJECT_KINDS: tuple[str, ...] = get_args(ProjectKind)
LIBRARY_KINDS = frozenset(["StaticLib", "SharedLib"])

_PATHS = PathContext("/")


@dataclass
class CompileSettings:
    """Abstract compiler settings mapped to flags by a toolset.

    None means "not set": the toolset emits nothing for it.

    Attributes:
        architecture: x86, x86_64, ARM, ARM64.
        optimize: Off, On, Debug, Size, Speed, Full.
        symbols: Off, On, Default, FastLink, Full.
        warnings: Off, Default, High, Extra, Everything.
        fatal_warnings: Treat compiler warnings as errors.
        floatingpoint: Default, Fast, Strict.
        strict_aliasing: Off, Level1, Level2, Level3.
        exceptions: Default, On, Off, SEH (C++ only).
        rtti: Default, On, Off (C++ only).
    """

    architecture: str | None = None
    optimize: str | None = None
    symbols: str | None = None
    warnings: str | None = None
    fatal_warnings: bool = False
    floatingpoint: str | None = None
    strict_aliasing: str | None = None
    exceptions: str | None = None
    rtti: str | None = None

    def is_empty(self) -> bool:
        return self == CompileSettings()


@dataclass
class FileConfig:
    """Per-file, per-configuration settings.

    Carries a custom build step (commands/inputs/outputs/message) and
    per-file compile options. `compile` holds only the settings that
    differ from the configuration; it is empty unless overridden.
    """

    path: str
    buildmessage: str | None = None
    buildcommands: list[str] = field(default_factory=list)
    buildinputs: list[str] = field(default_factory=list)
    buildoutputs: list[str] = field(default_factory=list)
    buildoptions: list[str] = field(default_factory=list)
    compile: CompileSettings = field(default_factory=CompileSettings)
    rule_vars: dict[str, dict[str, Any]] = field(default_factory=dict)

    def has_settings(self) -> bool:
        """True if anything is explicitly configured for this file."""
        return bool(
            self.buildmessage
            or self.buildcommands
            or self.buildinputs
            or self.buildoutputs
            or self.buildoptions
            or not self.compile.is_empty()
        )


@dataclass
class Configuration:
    """One build-type/platform variant of a project.

    A configuration is bound to exactly one project when added to it;
    its name must be unique within that project.
    """

    name: str
    platform: str | None = None
    kind: ProjectKind | None = None
    system: str = "linux"
    toolset: str | None = None

    target_dir: str | None = None
    target_name: str | None = None
    obj_dir: str | None = None

    includedirs: list[str] = field(default_factory=list)
    sysincludedirs: list[str] = field(default_factory=list)
    forceincludes: list[str] = field(default_factory=list)
    defines: list[str] = field(default_factory=list)
    libdirs: list[str] = field(default_factory=list)
    links: list[str] = field(default_factory=list)
    buildoptions: list[str] = field(default_factory=list)
    linkoptions: list[str] = field(default_factory=list)
    compile: CompileSettings = field(default_factory=CompileSettings)

    pic: bool = False
    lto: bool = False
    linkgroups: bool = False
    cppdialect: str | None = None

    pchheader: str | None = None
    no_pch: bool = False

    prebuildmessage: str | None = None
    prebuildcommands: list[str] = field(default_factory=list)
    postbuildmessage: str | None = None
    postbuildcommands: list[str] = field(default_factory=list)

    buildmessage: str | None = None
    buildcommands: list[str] = field(default_factory=list)
    buildinputs: list[str] = field(default_factory=list)
    buildoutputs: list[str] = field(default_factory=list)

    files: dict[str, FileConfig] = field(default_factory=dict)
    rule_vars: dict[str, dict[str, Any]] = field(default_factory=dict)

    project: Project | None = field(default=None, repr=False, compare=False)

    def add_file_config(self, file_config: FileConfig) -> FileConfig:
        """Attach per-file settings. The path is anchored when bound to a project."""
        key = to_posix(file_config.path)
        if self.project is not None:
            key = self.project.abspath(key)
        file_config.path = key
        self.files[key] = file_config
        return file_config

    def file_config(self, abspath: str) -> FileConfig | None:
        return self.files.get(to_posix(abspath))

    @property
    def buildcfg(self) -> str:
        return self.name

    def build_type(self, workspace: Workspace | None = None) -> str:
        """Value of CMAKE_BUILD_TYPE selecting this configuration.

        The platform is folded in only when the workspace declares more
        than one. Defaults to the workspace of the bound project.
        """
        if workspace is None and self.project is not None:
            workspace = self.project.workspace
        if self.platform and workspace is not None and workspace.multiplatform:
            return f"{self.platform}_{self.buildcfg}"
        return self.buildcfg

    @property
    def bound_project(self) -> Project:
        if self.project is None:
            raise ModelError(f"configuration '{self.name}' is not bound to a project")
        return self.project

    @property
    def target_directory(self) -> str:
        prj = self.bound_project
        if self.target_dir:
            return prj.abspath(self.target_dir)
        return _PATHS.join(prj.location, "bin", self.name)

    @property
    def object_directory(self) -> str:
        prj = self.bound_project
        if self.obj_dir:
            return prj.abspath(self.obj_dir)
        return _PATHS.join(prj.location, "obj", self.name)

    @property
    def target_basename(self) -> str:
        return self.target_name or self.bound_project.name

    def project_links(self) -> list[Project]:
        """Links naming linkable sibling projects, in declared order."""
        prj = self.bound_project
        result: list[Project] = []
        for link in self.links:
            sibling = prj.sibling(link)
            if sibling is not None and sibling.resolve_kind() in LIBRARY_KINDS:
                if sibling not in result:
                    result.append(sibling)
        return result

    def system_links(self) -> list[str]:
        """Links that do not name a project in the workspace.

        Entries that look like paths are anchored at the project base
        directory; plain library names pass through unchanged.
        """
        prj = self.bound_project
        result: list[str] = []
        for link in self.links:
            if prj.sibling(link) is not None:
                continue
            text = to_posix(link)
            if "/" in text:
                text = prj.abspath(text)
            if text not in result:
                result.append(text)
        return result


class Project:
    """A buildable project: files, configurations and dependencies.

    Example:
        prj = Project("core", basedir="/work/core", kind="StaticLib")
        prj.add_files(["src/a.cpp", "src/b.cpp"])
        prj.add_configuration(Configuration("Debug", cppdialect="C++17"))
        workspace.add_project(prj)
    """

    def __init__(
        self,
        name: str,
        basedir: str,
        *,
        kind: ProjectKind | None = None,
        location: str | None = None,
        files: list[str] | None = None,
        dependson: list[str] | None = None,
        rules: list[str] | None = None,
        executable_suffix: str | None = None,
    ) -> None:
        if kind is not None and kind not in PROJECT_KINDS:
            raise ModelError(f"project '{name}': unknown kind '{kind}'")
        self.name = name
        self.basedir = _PATHS.join(basedir)
        self.kind: ProjectKind | None = kind
        self.location = self.abspath(location) if location else self.basedir
        self.dependson: list[str] = list(dependson or [])
        self.rules: list[str] = list(rules or [])
        self.executable_suffix = executable_suffix
        self.workspace: Workspace | None = None
        self._files: list[str] = []
        self._configurations: list[Configuration] = []
        if files:
            self.add_files(files)

    def abspath(self, path: str) -> str:
        """Anchor a model path at the project base directory."""
        return _PATHS.absolute(path, self.basedir)

    def add_files(self, files: list[str]) -> None:
        for path in files:
            absolute = self.abspath(path)
            if absolute not in self._files:
                self._files.append(absolute)

    @property
    def files(self) -> list[str]:
        return list(self._files)

    def source_tree(self) -> SourceTree:
        return SourceTree.from_files(self._files, root=self.location)

    def add_configuration(self, cfg: Configuration) -> Configuration:
        if cfg.project is not None and cfg.project is not self:
            raise ModelError(
                f"configuration '{cfg.name}' already belongs to project "
                f"'{cfg.project.name}'"
            )
        if any(
            existing.name == cfg.name and existing.platform == cfg.platform
            for existing in self._configurations
        ):
            raise ModelError(
                f"project '{self.name}': duplicate configuration '{cfg.name}'"
            )
        if self.workspace is not None:
            build_type = cfg.build_type(self.workspace)
            if any(
                existing.build_type() == build_type for existing in self._configurations
            ):
                raise ModelError(
                    f"project '{self.name}': configuration '{cfg.name}' "
                    f"duplicates build type '{build_type}'"
                )
        cfg.project = self
        for key in list(cfg.files):
            file_config = cfg.files.pop(key)
            cfg.add_file_config(file_config)
        self._configurations.append(cfg)
        return cfg

    @property
    def configurations(self) -> list[Configuration]:
        return list(self._configurations)

    def check_build_types(self) -> None:
        """Raise ModelError if two configurations select the same build type.

        Build types depend on the workspace platforms, so a project that was
        filled before joining its workspace is only checked here.
        """
        seen: dict[str, str] = {}
        for cfg in self._configurations:
            build_type = cfg.build_type()
            if build_type in seen:
                raise ModelError(
                    f"project '{self.name}': configurations '{seen[build_type]}' "
                    f"and '{cfg.name}' share build type '{build_type}'"
                )
            seen[build_type] = cfg.name

    def resolve_kind(self) -> ProjectKind | None:
        """The project kind, promoted from the first configuration declaring one."""
        if self.kind is not None:
            return self.kind
        for cfg in self._configurations:
            if cfg.kind is not None:
                return cfg.kind
        return None

    def sibling(self, name: str) -> Project | None:
        """Another project of the same workspace, by name."""
        if self.workspace is None or name == self.name:
            return None
        return self.workspace.get_project(name)

    def dependencies(self) -> list[Project]:
        """Projects this one depends on: explicit dependson, then linked siblings."""
        result: list[Project] = []
        for name in self.dependson:
            dep = self.sibling(name)
            if dep is None:
                logger.warning(
                    "Project '%s' depends on unknown project '%s'", self.name, name
                )
                continue
            if dep not in result:
                result.append(dep)
        for cfg in self._configurations:
            for dep in cfg.project_links():
                if dep not in result:
                    result.append(dep)
        return result

    def rule_objects(self) -> list[Rule]:
        """Rules applicable to this project's files, in declared order."""
        if self.workspace is None:
            return []
        registry = self.workspace.rules
        result = []
        for name in self.rules:
            rule = registry.get(name)
            if rule is None:
                raise ModelError(f"project '{self.name}': unknown rule '{name}'")
            result.append(rule)
        return result

    def __repr__(self) -> str:
        return f"Project({self.name!r}, kind={self.kind!r})"


class Workspace:
    """A set of projects generated together.

    Attributes:
        name: Workspace name (the CMake project name).
        location: Directory the generated scripts live in; every
            workspace-relative path is relative to it.
        platforms: Declared platforms; more than one makes configuration
            guards platform-qualified.
        rules: Registry of custom build rules.
    """

    def __init__(
        self,
        name: str,
        location: str,
        *,
        platforms: list[str] | None = None,
        rules: RuleRegistry | None = None,
    ) -> None:
        from cmakegen.core.rules import RuleRegistry

        self.name = name
        self.location = _PATHS.join(location)
        self.platforms: list[str] = list(platforms or [])
        self.rules = rules if rules is not None else RuleRegistry()
        self._projects: dict[str, Project] = {}

    def add_project(self, project: Project) -> Project:
        if project.name in self._projects:
            raise ModelError(f"duplicate project '{project.name}'")
        project.workspace = self
        self._projects[project.name] = project
        return project

    def get_project(self, name: str) -> Project | None:
        return self._projects.get(name)

    @property
    def projects(self) -> list[Project]:
        return list(self._projects.values())

    @property
    def multiplatform(self) -> bool:
        return len(self.platforms) > 1

    def __repr__(self) -> str:
        return f"Workspace({self.name!r}, projects={list(self._projects)!r})"
