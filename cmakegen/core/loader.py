# SPDX-License-Identifier: MIT
"""Load a resolved workspace model from a TOML description.

Directories at workspace and project level (`location`, `basedir`) are
relative to the TOML file; paths inside a project (files, include
directories, outputs, ...) are relative to the project's `basedir`.

    [workspace]
    name = "demo"

    [[rules]]
    name = "protobuf"
    patterns = ["*.proto"]
    buildcommands = ["protoc --cpp_out=${cfg.objdir} ${file.relpath}"]
    buildoutputs = ["${cfg.objdir}/${file.basename}.pb.cc"]

    [[projects]]
    name = "core"
    kind = "StaticLib"
    basedir = "core"
    files = ["src/core.cpp", "proto/msg.proto"]
    rules = ["protobuf"]

    [[projects.configurations]]
    name = "Debug"
    cppdialect = "C++17"
    compile = { optimize = "Off", symbols = "On" }
"""

from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from cmakegen.core.errors import ModelError
from cmakegen.core.project import (
    PROJECT_KINDS,
    CompileSettings,
    Configuration,
    FileConfig,
    Project,
    Workspace,
)
from cmakegen.core.rules import Rule, RuleProperty, RuleRegistry

logger = logging.getLogger(__name__)

_PROJECT_KEYS = frozenset(
    [
        "name",
        "kind",
        "basedir",
        "location",
        "files",
        "dependson",
        "rules",
        "executable_suffix",
        "configurations",
    ]
)


def load_workspace(path: Path | str) -> Workspace:
    """Read a workspace description file.

    Raises:
        ModelError: The file is not valid TOML or does not describe a
            valid workspace.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ModelError(f"{path}: {e}") from e
    logger.debug("Loaded model %s", path)
    return workspace_from_dict(data, path.parent.absolute())


def workspace_from_dict(data: dict[str, Any], root: Path) -> Workspace:
    """Build a Workspace from parsed TOML data anchored at root."""
    header = data.get("workspace")
    if not isinstance(header, dict) or "name" not in header:
        raise ModelError("missing [workspace] table with a name")

    registry = RuleRegistry()
    for rule_data in data.get("rules", []):
        registry.register(_rule_from_dict(rule_data))

    workspace = Workspace(
        header["name"],
        str(root / header.get("location", ".")),
        platforms=header.get("platforms", []),
        rules=registry,
    )
    for project_data in data.get("projects", []):
        workspace.add_project(_project_from_dict(project_data, root))
    return workspace


def _check_keys(label: str, data: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ModelError(f"{label}: unknown keys {', '.join(unknown)}")


def _field_names(cls: type) -> frozenset[str]:
    return frozenset(f.name for f in fields(cls))


def _rule_from_dict(data: dict[str, Any]) -> Rule:
    _check_keys(f"rule '{data.get('name', '?')}'", data, _field_names(Rule))
    if "name" not in data:
        raise ModelError("rule without a name")
    properties = []
    for prop in data.get("properties", []):
        label = f"rule property '{prop.get('name', '?')}'"
        _check_keys(label, prop, _field_names(RuleProperty))
        properties.append(RuleProperty(**prop))
    return Rule(**{**data, "properties": properties})


def _compile_settings(data: dict[str, Any] | None, owner: str) -> CompileSettings:
    data = data or {}
    _check_keys(f"{owner}: compile settings", data, _field_names(CompileSettings))
    return CompileSettings(**data)


def _project_from_dict(data: dict[str, Any], root: Path) -> Project:
    _check_keys(f"project '{data.get('name', '?')}'", data, _PROJECT_KEYS)
    if "name" not in data:
        raise ModelError("project without a name")
    name = data["name"]
    basedir = root / data.get("basedir", ".")
    location = data.get("location")
    project = Project(
        name,
        str(basedir),
        kind=data.get("kind"),
        location=str(root / location) if location is not None else None,
        files=data.get("files", []),
        dependson=data.get("dependson", []),
        rules=data.get("rules", []),
        executable_suffix=data.get("executable_suffix"),
    )
    for cfg_data in data.get("configurations", []):
        project.add_configuration(_configuration_from_dict(cfg_data, name))
    return project


_CONFIGURATION_KEYS = _field_names(Configuration) - {"project"}


def _configuration_from_dict(data: dict[str, Any], project: str) -> Configuration:
    _check_keys(
        f"project '{project}': configuration '{data.get('name', '?')}'",
        data,
        _CONFIGURATION_KEYS,
    )
    if "name" not in data:
        raise ModelError(f"project '{project}': configuration without a name")
    values = dict(data)
    owner = f"{project}/{data['name']}"
    if data.get("kind") is not None and data["kind"] not in PROJECT_KINDS:
        raise ModelError(f"{owner}: unknown kind '{data['kind']}'")
    values["compile"] = _compile_settings(values.get("compile"), owner)
    file_configs = values.pop("files", [])
    cfg = Configuration(**values)
    for file_data in file_configs:
        _check_keys(
            f"{owner}: file configuration", file_data, _field_names(FileConfig)
        )
        if "path" not in file_data:
            raise ModelError(f"{owner}: file configuration without a path")
        file_values = dict(file_data)
        file_values["compile"] = _compile_settings(
            file_values.get("compile"), f"{owner}:{file_data['path']}"
        )
        cfg.add_file_config(FileConfig(**file_values))
    return cfg
