# SPDX-License-Identifier: MIT
"""Tests for cmakegen.core.loader."""

from pathlib import Path

import pytest

from cmakegen.core.errors import ModelError
from cmakegen.core.loader import load_workspace, workspace_from_dict

WORKSPACE_TOML = """\
[workspace]
name = "demo"
platforms = ["x64"]

[[rules]]
name = "protobuf"
patterns = ["*.proto"]
buildmessage = "Compiling ${file.name}"
buildcommands = ["protoc $Flags --cpp_out=${cfg.objdir} ${file.relpath}"]
buildoutputs = ["${cfg.objdir}/${file.basename}.pb.cc"]

[[rules.properties]]
name = "Flags"
kind = "list"
default = ["-I."]

[[projects]]
name = "core"
kind = "StaticLib"
basedir = "core"
files = ["src/core.cpp", "proto/msg.proto"]
rules = ["protobuf"]

[[projects.configurations]]
name = "Debug"
platform = "x64"
cppdialect = "C++17"
defines = ["DEBUG"]
compile = { optimize = "Off", symbols = "On" }
rule_vars = { protobuf = { Flags = ["-Iproto"] } }

[[projects.configurations.files]]
path = "src/core.cpp"
buildoptions = ["-Wno-unused"]
compile = { rtti = "Off" }

[[projects.configurations]]
name = "Release"
platform = "x64"
compile = { optimize = "Speed" }

[[projects]]
name = "app"
kind = "ConsoleApp"
basedir = "app"
location = "build/app"
files = ["main.cpp"]
dependson = ["core"]

[[projects.configurations]]
name = "Debug"
links = ["core", "pthread"]
linkgroups = true
"""


def write_model(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "workspace.toml"
    path.write_text(text)
    return path


class TestLoadWorkspace:
    def test_full_model(self, tmp_path):
        wks = load_workspace(write_model(tmp_path, WORKSPACE_TOML))
        root = tmp_path.as_posix()

        assert wks.name == "demo"
        assert wks.location == root
        assert wks.platforms == ["x64"]
        assert [p.name for p in wks.projects] == ["core", "app"]

        core = wks.get_project("core")
        assert core.kind == "StaticLib"
        assert core.basedir == f"{root}/core"
        assert core.files == [f"{root}/core/src/core.cpp", f"{root}/core/proto/msg.proto"]
        assert [r.name for r in core.rule_objects()] == ["protobuf"]

        debug, release = core.configurations
        assert debug.cppdialect == "C++17"
        assert debug.defines == ["DEBUG"]
        assert debug.compile.optimize == "Off"
        assert debug.compile.symbols == "On"
        assert debug.rule_vars == {"protobuf": {"Flags": ["-Iproto"]}}
        assert release.compile.optimize == "Speed"

        fc = debug.file_config(f"{root}/core/src/core.cpp")
        assert fc is not None
        assert fc.buildoptions == ["-Wno-unused"]
        assert fc.compile.rtti == "Off"

        app = wks.get_project("app")
        assert app.location == f"{root}/build/app"
        assert app.dependson == ["core"]
        assert app.configurations[0].linkgroups is True

    def test_rule_properties(self, tmp_path):
        wks = load_workspace(write_model(tmp_path, WORKSPACE_TOML))
        rule = wks.rules.get("protobuf")
        assert rule is not None
        assert rule.patterns == ["*.proto"]
        assert [p.name for p in rule.properties] == ["Flags"]
        assert rule.properties[0].kind == "list"
        assert rule.properties[0].default == ["-I."]

    def test_workspace_location(self, tmp_path):
        text = '[workspace]\nname = "w"\nlocation = "out"\n'
        wks = load_workspace(write_model(tmp_path, text))
        assert wks.location == f"{tmp_path.as_posix()}/out"

    def test_accepts_string_path(self, tmp_path):
        path = write_model(tmp_path, '[workspace]\nname = "w"\n')
        assert load_workspace(str(path)).name == "w"

    def test_invalid_toml(self, tmp_path):
        with pytest.raises(ModelError, match="workspace.toml"):
            load_workspace(write_model(tmp_path, "[workspace\n"))


class TestValidation:
    def test_missing_workspace_table(self):
        with pytest.raises(ModelError, match=r"\[workspace\]"):
            workspace_from_dict({}, Path("/w"))

    def test_missing_workspace_name(self):
        with pytest.raises(ModelError):
            workspace_from_dict({"workspace": {}}, Path("/w"))

    def test_unknown_project_key(self):
        data = {"workspace": {"name": "w"}, "projects": [{"name": "p", "sources": []}]}
        with pytest.raises(ModelError, match="project 'p': unknown keys sources"):
            workspace_from_dict(data, Path("/w"))

    def test_project_without_name(self):
        data = {"workspace": {"name": "w"}, "projects": [{"kind": "StaticLib"}]}
        with pytest.raises(ModelError, match="project without a name"):
            workspace_from_dict(data, Path("/w"))

    def test_invalid_project_kind(self):
        data = {"workspace": {"name": "w"}, "projects": [{"name": "p", "kind": "Lib"}]}
        with pytest.raises(ModelError, match="unknown kind"):
            workspace_from_dict(data, Path("/w"))

    def test_invalid_configuration_kind(self):
        data = {
            "workspace": {"name": "w"},
            "projects": [{"name": "p", "configurations": [{"name": "D", "kind": "X"}]}],
        }
        with pytest.raises(ModelError, match="p/D: unknown kind 'X'"):
            workspace_from_dict(data, Path("/w"))

    def test_unknown_configuration_key(self):
        data = {
            "workspace": {"name": "w"},
            "projects": [{"name": "p", "configurations": [{"name": "D", "optimise": 1}]}],
        }
        with pytest.raises(ModelError, match="unknown keys optimise"):
            workspace_from_dict(data, Path("/w"))

    def test_back_reference_key_rejected(self):
        data = {
            "workspace": {"name": "w"},
            "projects": [{"name": "p", "configurations": [{"name": "D", "project": "q"}]}],
        }
        with pytest.raises(ModelError, match="unknown keys project"):
            workspace_from_dict(data, Path("/w"))

    def test_configuration_without_name(self):
        data = {"workspace": {"name": "w"}, "projects": [{"name": "p", "configurations": [{}]}]}
        with pytest.raises(ModelError, match="configuration without a name"):
            workspace_from_dict(data, Path("/w"))

    def test_unknown_compile_setting(self):
        data = {
            "workspace": {"name": "w"},
            "projects": [
                {
                    "name": "p",
                    "configurations": [{"name": "D", "compile": {"optimization": "On"}}],
                }
            ],
        }
        with pytest.raises(ModelError, match="compile settings"):
            workspace_from_dict(data, Path("/w"))

    def test_file_configuration_without_path(self):
        data = {
            "workspace": {"name": "w"},
            "projects": [
                {"name": "p", "configurations": [{"name": "D", "files": [{"buildoptions": []}]}]}
            ],
        }
        with pytest.raises(ModelError, match="without a path"):
            workspace_from_dict(data, Path("/w"))

    def test_rule_without_name(self):
        data = {"workspace": {"name": "w"}, "rules": [{"patterns": ["*.x"]}]}
        with pytest.raises(ModelError, match="rule without a name"):
            workspace_from_dict(data, Path("/w"))

    def test_unknown_rule_property_key(self):
        data = {
            "workspace": {"name": "w"},
            "rules": [{"name": "r", "properties": [{"name": "P", "type": "list"}]}],
        }
        with pytest.raises(ModelError, match="unknown keys type"):
            workspace_from_dict(data, Path("/w"))

    def test_duplicate_configuration(self):
        data = {
            "workspace": {"name": "w"},
            "projects": [{"name": "p", "configurations": [{"name": "D"}, {"name": "D"}]}],
        }
        with pytest.raises(ModelError, match="duplicate configuration"):
            workspace_from_dict(data, Path("/w"))

    def test_duplicate_project(self):
        data = {"workspace": {"name": "w"}, "projects": [{"name": "p"}, {"name": "p"}]}
        with pytest.raises(ModelError, match="duplicate project"):
            workspace_from_dict(data, Path("/w"))
