# SPDX-License-Identifier: MIT
"""CMake generator.

Emits one `<project>.cmake` script per project and a top-level
CMakeLists.txt that includes them. Each project script declares the
target with its flattened source list, then one
`if(CMAKE_BUILD_TYPE STREQUAL <cfg>)` block per configuration holding
that configuration's settings in a fixed order:

    dependencies, output properties, include directories, force includes,
    defines, library directories, link libraries, build/link options,
    toolset flags, per-file flags, C++ standard, precompiled header,
    pre/post-build steps, custom build commands

Later statements can rely on names introduced by earlier ones, so the
order is part of the output format.

Example:
    generator = CMakeGenerator()
    generator.generate(workspace)
    # Creates <workspace.location>/CMakeLists.txt and one .cmake per project
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cmakegen.core.errors import UnrecognizedDialectError
from cmakegen.core.resolver import BuildStep, resolve_build_step
from cmakegen.generators.writer import ScriptWriter, write_atomic
from cmakegen.toolchains.gcc import GccToolset
from cmakegen.toolchains.msvc import MsvcToolset
from cmakegen.tools.toolset import quoted, resolve_toolset
from cmakegen.util.commands import translate_commands_and_paths
from cmakegen.util.paths import PathContext, file_exists

if TYPE_CHECKING:
    from cmakegen.core.project import Configuration, Project, Workspace
    from cmakegen.core.rules import Rule
    from cmakegen.core.tree import FileNode, SourceTree
    from cmakegen.tools.toolset import Toolset

logger = logging.getLogger(__name__)

# C++ dialect token -> CMAKE_CXX_STANDARD level
CXX_STANDARDS: dict[str, int] = {
    "C++98": 98,
    "C++11": 11,
    "C++14": 14,
    "C++17": 17,
    "C++20": 20,
    "C++23": 23,
    "gnu++98": 98,
    "gnu++11": 11,
    "gnu++14": 14,
    "gnu++17": 17,
    "gnu++20": 20,
    "gnu++23": 23,
}

# Tokens meaning "no dialect requested"
_UNSET_DIALECTS = ("", "Default")

_TARGET_DECLARATIONS = {
    "StaticLib": 'add_library("{name}" STATIC',
    "SharedLib": 'add_library("{name}" SHARED',
    "ConsoleApp": 'add_executable("{name}"',
    "WindowedApp": 'add_executable("{name}"',
}


@dataclass(frozen=True)
class EmitOptions:
    """Options for one generation run.

    Attributes:
        cc: Toolset identifier overriding every configuration's toolset.
        path_separator: Separator for every path written into scripts.
        cmake_minimum_version: Version in cmake_minimum_required().
        bom: Write files with a UTF-8 byte order mark.
        indent: One indentation level.
    """

    cc: str | None = None
    path_separator: str = "/"
    cmake_minimum_version: str = "3.16"
    bom: bool = True
    indent: str = "  "


def cxx_standard(dialect: str, project: str, configuration: str) -> int:
    """Map a C++ dialect token to its CMake standard level.

    Raises:
        UnrecognizedDialectError: The token is not one of the known forms.
    """
    try:
        return CXX_STANDARDS[dialect]
    except KeyError:
        raise UnrecognizedDialectError(dialect, project, configuration) from None


def config_name(cfg: Configuration) -> str:
    """Value of CMAKE_BUILD_TYPE selecting a configuration."""
    return cfg.build_type(cfg.bound_project.workspace)


def escape_define(value: str) -> str:
    """Escape a define for an unquoted CMake argument."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace(" ", "\\ ")


def escape_string(value: str) -> str:
    """Escape text placed inside a quoted CMake argument."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


class CMakeProjectEmitter:
    """Emits the CMake script for a single project.

    The emitter holds no state beyond the project and options it was
    created with; emit() may be called repeatedly and yields the same
    text each time.
    """

    def __init__(self, project: Project, options: EmitOptions | None = None) -> None:
        self.project = project
        self.options = options or EmitOptions()
        self.paths = PathContext(self.options.path_separator)

    @property
    def workspace_location(self) -> str:
        wks = self.project.workspace
        return wks.location if wks is not None else self.project.location

    def emit(self) -> str | None:
        """Render the project script.

        Returns:
            The script text, or None when the project produces no target
            (utility projects, or no kind declared anywhere).

        Raises:
            ModelError: Two configurations select the same build type.
            UnknownToolsetError: A configuration names an unregistered toolset.
            UnrecognizedDialectError: A configuration names an unknown C++ dialect.
        """
        prj = self.project
        prj.check_build_types()
        kind = prj.resolve_kind()
        if kind is None:
            logger.warning("Project '%s' has no kind; skipping", prj.name)
            return None
        if kind == "Utility":
            logger.info("Project '%s' is a utility project; skipping", prj.name)
            return None

        logger.debug("Emitting project '%s' (%s)", prj.name, kind)
        w = ScriptWriter(indent=self.options.indent)
        tree = prj.source_tree()
        rules = prj.rule_objects()

        if kind not in ("StaticLib", "SharedLib") and prj.executable_suffix:
            w.line(0, f'set(CMAKE_EXECUTABLE_SUFFIX "{prj.executable_suffix}")')
        w.line(0, _TARGET_DECLARATIONS[kind].format(name=prj.name))
        self._write_files(w, tree, rules)
        w.line(0, ")")

        for cfg in prj.configurations:
            self._write_configuration(w, cfg, tree, rules)

        return w.getvalue()

    # =========================================================================
    # Source list
    # =========================================================================

    def _write_files(self, w: ScriptWriter, tree: SourceTree, rules: list[Rule]) -> None:
        """Flattened source list; generated outputs replace their source."""
        base = self.workspace_location
        for node in tree.leaves():
            outputs = self._generated_outputs(node, rules)
            for path in outputs or (node.abspath,):
                w.line(1, f'"{self.paths.relative(base, path)}"')

    def _generated_outputs(self, node: FileNode, rules: list[Rule]) -> tuple[str, ...]:
        """Outputs of the first configuration that resolves a step for node.

        A file is expected to generate the same outputs in every
        configuration; a mismatch is reported, and the first set is kept.
        """
        first: tuple[Configuration, BuildStep] | None = None
        for cfg in self.project.configurations:
            step = resolve_build_step(node, cfg, rules)
            if step is None:
                continue
            if first is None:
                first = (cfg, step)
            elif step.outputs != first[1].outputs:
                logger.warning(
                    "Project '%s': %s generates different outputs in '%s' and "
                    "'%s'; listing those of '%s'",
                    self.project.name,
                    node.path,
                    first[0].name,
                    cfg.name,
                    first[0].name,
                )
                break
        return first[1].outputs if first is not None else ()

    # =========================================================================
    # Per-configuration block
    # =========================================================================

    def _write_configuration(
        self,
        w: ScriptWriter,
        cfg: Configuration,
        tree: SourceTree,
        rules: list[Rule],
    ) -> None:
        toolset = resolve_toolset(cfg, self.options.cc)
        logger.debug(
            "Project '%s': configuration '%s' with %s",
            self.project.name,
            cfg.name,
            toolset.name,
        )

        w.line(0, f"if(CMAKE_BUILD_TYPE STREQUAL {config_name(cfg)})")
        self._write_dependencies(w)
        self._write_output_dirs(w, cfg)
        self._write_include_dirs(w, cfg)
        self._write_force_includes(w, cfg)
        self._write_defines(w, cfg)
        self._write_lib_dirs(w, cfg)
        self._write_links(w, cfg, toolset)
        self._write_options(w, cfg)
        self._write_toolset_flags(w, cfg, toolset)
        self._write_file_flags(w, cfg, toolset, tree)
        self._write_cxx_standard(w, cfg)
        self._write_pch(w, cfg)
        self._write_build_events(w, cfg)
        self._write_custom_commands(w, cfg, tree, rules)
        w.line(0, "endif()")

    def _write_dependencies(self, w: ScriptWriter) -> None:
        dependencies = self.project.dependencies()
        if not dependencies:
            return
        w.line(1, f'add_dependencies("{self.project.name}"')
        for dep in dependencies:
            w.line(2, f'"{dep.name}"')
        w.line(1, ")")

    def _write_output_dirs(self, w: ScriptWriter, cfg: Configuration) -> None:
        rel_bin_dir = self.paths.relative(self.workspace_location, cfg.target_directory)
        w.line(1, f'set_target_properties("{self.project.name}" PROPERTIES')
        w.line(2, f'OUTPUT_NAME "{cfg.target_basename}"')
        for kind in ("ARCHIVE", "LIBRARY", "RUNTIME"):
            w.line(2, f'{kind}_OUTPUT_DIRECTORY "${{CMAKE_SOURCE_DIR}}/{rel_bin_dir}"')
        w.line(1, ")")

    def _write_include_dirs(self, w: ScriptWriter, cfg: Configuration) -> None:
        prj = self.project
        if cfg.sysincludedirs:
            w.line(1, f'target_include_directories("{prj.name}" SYSTEM PRIVATE')
            for includedir in cfg.sysincludedirs:
                w.line(2, quoted(self.paths.render(prj.abspath(includedir))))
            w.line(1, ")")
        if cfg.includedirs:
            w.line(1, f'target_include_directories("{prj.name}" PRIVATE')
            for includedir in cfg.includedirs:
                w.line(2, quoted(self.paths.render(prj.abspath(includedir))))
            w.line(1, ")")

    def _write_force_includes(self, w: ScriptWriter, cfg: Configuration) -> None:
        if not cfg.forceincludes:
            return
        name = self.project.name
        msc_flags = " ".join(MsvcToolset().get_forceincludes(cfg, self.paths))
        gcc_flags = " ".join(GccToolset().get_forceincludes(cfg, self.paths))
        w.line(1, "if (MSVC)")
        w.line(2, f'target_compile_options("{name}" PRIVATE {msc_flags})')
        w.line(1, "else()")
        w.line(2, f'target_compile_options("{name}" PRIVATE {gcc_flags})')
        w.line(1, "endif()")

    def _write_defines(self, w: ScriptWriter, cfg: Configuration) -> None:
        if not cfg.defines:
            return
        w.line(1, f'target_compile_definitions("{self.project.name}" PRIVATE')
        for define in cfg.defines:
            w.line(2, escape_define(define))
        w.line(1, ")")

    def _write_lib_dirs(self, w: ScriptWriter, cfg: Configuration) -> None:
        if not cfg.libdirs:
            return
        prj = self.project
        w.line(1, f'target_link_directories("{prj.name}" PRIVATE')
        for libdir in cfg.libdirs:
            w.line(2, quoted(self.paths.render(prj.abspath(libdir))))
        w.line(1, ")")

    def _write_links(self, w: ScriptWriter, cfg: Configuration, toolset: Toolset) -> None:
        project_links = [dep.name for dep in cfg.project_links()]
        system_links = [quoted(self.paths.render(link)) for link in cfg.system_links()]
        if not project_links and not system_links:
            return

        # Project libraries may reference each other circularly; system
        # libraries are grouped separately since they never reference ours.
        use_groups = toolset.is_gcc_family and cfg.linkgroups
        w.line(1, f'target_link_libraries("{self.project.name}"')
        for group in (project_links, system_links):
            if not group:
                continue
            if use_groups:
                w.line(2, "-Wl,--start-group")
            w.lines(2, group)
            if use_groups:
                w.line(2, "-Wl,--end-group")
        w.line(1, ")")

    def _write_options(self, w: ScriptWriter, cfg: Configuration) -> None:
        name = self.project.name
        for options, variable, prop in (
            (cfg.buildoptions, "_TARGET_COMPILE_FLAGS", "COMPILE_FLAGS"),
            (cfg.linkoptions, "_TARGET_LINK_FLAGS", "LINK_FLAGS"),
        ):
            if not options:
                continue
            w.line(1, f"set({variable} {' '.join(options)})")
            w.line(1, f'string(REPLACE ";" " " {variable} "${{{variable}}}")')
            w.line(1, f'set_property(TARGET "{name}" PROPERTY {prop} ${{{variable}}})')
            w.line(1, f"unset({variable})")

    def _write_toolset_flags(
        self, w: ScriptWriter, cfg: Configuration, toolset: Toolset
    ) -> None:
        cflags = toolset.get_cflags(cfg.compile)
        cxxflags = toolset.get_cxxflags(cfg.compile)
        if not cflags and not cxxflags:
            return
        w.line(1, f'target_compile_options("{self.project.name}" PRIVATE')
        for flag in cflags:
            w.line(2, f"$<$<COMPILE_LANGUAGE:C>:{flag}>")
        for flag in cxxflags:
            w.line(2, f"$<$<COMPILE_LANGUAGE:CXX>:{flag}>")
        w.line(1, ")")

    def _write_file_flags(
        self,
        w: ScriptWriter,
        cfg: Configuration,
        toolset: Toolset,
        tree: SourceTree,
    ) -> None:
        for node in tree.leaves():
            file_config = cfg.file_config(node.abspath)
            if file_config is None:
                continue
            if node.is_c_file():
                flags = toolset.get_cflags(file_config.compile)
            else:
                flags = toolset.get_cxxflags(file_config.compile)
            options = " ".join(flags + file_config.buildoptions)
            if not options:
                continue
            path = self.paths.relative(self.workspace_location, node.abspath)
            w.line(
                1,
                f'set_source_files_properties("{path}" PROPERTIES '
                f'COMPILE_FLAGS "{escape_string(options)}")',
            )

    def _write_cxx_standard(self, w: ScriptWriter, cfg: Configuration) -> None:
        dialect = cfg.cppdialect
        if dialect is None or dialect in _UNSET_DIALECTS:
            return
        level = cxx_standard(dialect, self.project.name, cfg.name)
        extensions = "YES" if dialect.startswith("gnu") else "NO"
        w.line(1, f'set_target_properties("{self.project.name}" PROPERTIES')
        w.line(2, f"CXX_STANDARD {level}")
        w.line(2, "CXX_STANDARD_REQUIRED YES")
        w.line(2, f"CXX_EXTENSIONS {extensions}")
        w.line(2, f"POSITION_INDEPENDENT_CODE {cfg.pic}")
        w.line(2, f"INTERPROCEDURAL_OPTIMIZATION {cfg.lto}")
        w.line(1, ")")

    def resolve_pch(self, cfg: Configuration) -> str | None:
        """Locate the precompiled header, relative to the project location.

        Search order: the project base directory, then each include
        directory in declared order; when nothing matches, the declared
        name is taken as is.
        """
        if cfg.no_pch or not cfg.pchheader:
            return None
        prj = self.project
        header = cfg.pchheader
        candidates = [self.paths.join(prj.basedir, header)]
        candidates.extend(
            self.paths.join(prj.abspath(incdir), header) for incdir in cfg.includedirs
        )
        for candidate in candidates:
            if file_exists(candidate):
                return self.paths.relative(prj.location, candidate)
        return self.paths.relative(prj.location, prj.abspath(header))

    def _write_pch(self, w: ScriptWriter, cfg: Configuration) -> None:
        pch = self.resolve_pch(cfg)
        if pch is None:
            return
        w.line(1, f'target_precompile_headers("{self.project.name}" PUBLIC {quoted(pch)})')

    def _translate(self, cfg: Configuration, commands: list[str]) -> list[str]:
        prj = self.project
        return translate_commands_and_paths(
            commands, prj.basedir, prj.location, cfg.system, self.paths
        )

    def _event_commands(
        self, cfg: Configuration, message: str | None, commands: list[str]
    ) -> list[str]:
        if message:
            commands = ["{ECHO} " + message, *commands]
        return self._translate(cfg, commands)

    def _write_build_events(self, w: ScriptWriter, cfg: Configuration) -> None:
        name = self.project.name
        if cfg.prebuildmessage or cfg.prebuildcommands:
            # PRE_BUILD custom commands are not ordered before every other
            # rule of the target on all generators; a separate target is.
            w.line(1, f"add_custom_target(prebuild-{name}")
            for command in self._event_commands(
                cfg, cfg.prebuildmessage, cfg.prebuildcommands
            ):
                w.line(2, f"COMMAND {command}")
            w.line(1, ")")
            w.line(1, f"add_dependencies({name} prebuild-{name})")

        if cfg.postbuildmessage or cfg.postbuildcommands:
            w.line(1, f"add_custom_command(TARGET {name} POST_BUILD")
            for command in self._event_commands(
                cfg, cfg.postbuildmessage, cfg.postbuildcommands
            ):
                w.line(2, f"COMMAND {command}")
            w.line(1, ")")

    # =========================================================================
    # Custom build commands
    # =========================================================================

    def _write_custom_commands(
        self,
        w: ScriptWriter,
        cfg: Configuration,
        tree: SourceTree,
        rules: list[Rule],
    ) -> None:
        prj = self.project
        for node in tree.leaves():
            step = resolve_build_step(node, cfg, rules)
            if step is not None:
                relpath = self.paths.relative(prj.location, node.abspath)
                self._write_custom_command(w, cfg, step, relpath)
        self._write_custom_command(w, cfg, BuildStep.from_configuration(cfg), "")

    def _write_custom_command(
        self,
        w: ScriptWriter,
        cfg: Configuration,
        step: BuildStep,
        filename: str,
    ) -> None:
        """One add_custom_command(OUTPUT ...) for a step; nothing if it is empty."""
        if step.is_empty:
            return
        location = self.project.location
        outputs = " ".join(
            quoted(path) for path in self.paths.relative_all(location, step.outputs)
        )
        w.line(1, f"add_custom_command(OUTPUT {outputs}")
        for command in self._event_commands(cfg, step.message, list(step.commands)):
            w.line(2, f"COMMAND {command}")
        depends = [quoted(filename)] if filename else []
        depends.extend(
            quoted(path) for path in self.paths.relative_all(location, step.inputs)
        )
        if depends:
            w.line(2, f"DEPENDS {' '.join(depends)}")
        w.line(1, ")")


class CMakeGenerator:
    """Generator that produces CMake scripts for a workspace.

    All project scripts are rendered before anything is written, so a
    fatal error in one project leaves every previously generated file
    untouched.
    """

    name = "cmake"
    WORKSPACE_FILENAME = "CMakeLists.txt"

    def __init__(self, options: EmitOptions | None = None) -> None:
        self.options = options or EmitOptions()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.options!r})"

    def generate_project(self, project: Project) -> str | None:
        """Render one project's script (None when it produces no target)."""
        return CMakeProjectEmitter(project, self.options).emit()

    def project_filename(self, project: Project) -> str:
        return f"{project.name}.cmake"

    def write_project(self, project: Project, output_dir: Path) -> Path | None:
        """Render and commit one project's script."""
        text = self.generate_project(project)
        if text is None:
            return None
        path = output_dir / self.project_filename(project)
        write_atomic(path, text, bom=self.options.bom)
        return path

    def generate(self, workspace: Workspace, output_dir: Path | None = None) -> list[Path]:
        """Generate CMakeLists.txt plus one script per project.

        Args:
            workspace: The resolved workspace.
            output_dir: Destination (default: the workspace location).

        Returns:
            Paths of the files written, CMakeLists.txt last.
        """
        if output_dir is None:
            output_dir = Path(workspace.location)

        rendered: list[tuple[Project, str]] = []
        for project in workspace.projects:
            text = self.generate_project(project)
            if text is not None:
                rendered.append((project, text))

        written: list[Path] = []
        for project, text in rendered:
            path = output_dir / self.project_filename(project)
            write_atomic(path, text, bom=self.options.bom)
            written.append(path)

        path = output_dir / self.WORKSPACE_FILENAME
        write_atomic(
            path,
            self.workspace_script(workspace, [p for p, _ in rendered]),
            bom=self.options.bom,
        )
        written.append(path)
        return written

    def workspace_script(self, workspace: Workspace, projects: list[Project]) -> str:
        """Top-level CMakeLists.txt including each project script."""
        w = ScriptWriter(indent=self.options.indent)
        w.line(0, f"cmake_minimum_required(VERSION {self.options.cmake_minimum_version})")
        w.blank()
        w.line(0, f'project("{workspace.name}")')
        names: list[str] = []
        for project in workspace.projects:
            for cfg in project.configurations:
                name = config_name(cfg)
                if name not in names:
                    names.append(name)
        if names:
            w.line(0, f'set(CMAKE_CONFIGURATION_TYPES "{";".join(names)}")')
            w.line(0, "if(NOT CMAKE_BUILD_TYPE)")
            w.line(1, f'set(CMAKE_BUILD_TYPE "{names[0]}")')
            w.line(0, "endif()")
        if projects:
            w.blank()
        for project in projects:
            w.line(0, f"include({self.project_filename(project)})")
        return w.getvalue()
