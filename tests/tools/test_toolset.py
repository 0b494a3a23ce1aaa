# SPDX-License-Identifier: MIT
"""Tests for cmakegen.tools.toolset."""

import pytest

from cmakegen.core.errors import UnknownToolsetError
from cmakegen.core.project import Configuration, Project
from cmakegen.toolchains import ClangToolset, GccToolset, MsvcToolset
from cmakegen.tools.toolset import (
    ToolsetRegistry,
    default_toolset_name,
    quoted,
    resolve_toolset,
    toolset_registry,
)


def configuration(**kwargs):
    return Project("p", "/w").add_configuration(Configuration("Debug", **kwargs))


class TestRegistry:
    @pytest.mark.parametrize(
        "identifier,cls",
        [
            ("gcc", GccToolset),
            ("gnu", GccToolset),
            ("clang", ClangToolset),
            ("llvm", ClangToolset),
            ("msc", MsvcToolset),
            ("msvc", MsvcToolset),
        ],
    )
    def test_builtin_identifiers(self, identifier, cls):
        assert type(toolset_registry.get(identifier)) is cls

    def test_version_suffix_ignored(self):
        assert isinstance(toolset_registry.get("gcc-13"), GccToolset)
        assert isinstance(toolset_registry.get("msc-v143"), MsvcToolset)
        assert isinstance(toolset_registry.get("Clang-17"), ClangToolset)

    def test_unknown(self):
        assert toolset_registry.get("tcc") is None

    def test_fresh_instances(self):
        assert toolset_registry.get("gcc") is not toolset_registry.get("gcc")

    def test_separate_registry(self):
        registry = ToolsetRegistry()
        registry.register(GccToolset, aliases=["GNU"])
        assert registry.names() == ["gcc", "gnu"]
        assert registry.get("clang") is None


class TestDefaultToolset:
    def test_windows(self):
        assert default_toolset_name("windows") == "msc"
        assert default_toolset_name("Windows") == "msc"

    def test_other_systems(self):
        assert default_toolset_name("linux") == "clang"
        assert default_toolset_name("macosx") == "clang"
        assert default_toolset_name(None) == "clang"


class TestResolveToolset:
    def test_default_for_system(self):
        assert resolve_toolset(configuration()).name == "clang"
        assert resolve_toolset(configuration(system="windows")).name == "msc"

    def test_configuration_toolset(self):
        assert resolve_toolset(configuration(toolset="gcc")).name == "gcc"

    def test_override_wins(self):
        cfg = configuration(toolset="gcc", system="windows")
        assert resolve_toolset(cfg, "clang").name == "clang"

    def test_unknown_configuration_toolset(self):
        with pytest.raises(UnknownToolsetError) as excinfo:
            resolve_toolset(configuration(toolset="tcc"))
        assert excinfo.value.toolset == "tcc"
        assert str(excinfo.value) == "invalid toolset 'tcc'"

    def test_unknown_override(self):
        with pytest.raises(UnknownToolsetError):
            resolve_toolset(configuration(toolset="gcc"), "icc")


class TestQuoted:
    def test_plain(self):
        assert quoted("a/b.h") == "a/b.h"

    def test_whitespace(self):
        assert quoted("my dir/b.h") == '"my dir/b.h"'

    def test_already_quoted(self):
        assert quoted('"my dir/b.h"') == '"my dir/b.h"'
