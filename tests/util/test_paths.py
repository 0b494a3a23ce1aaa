# SPDX-License-Identifier: MIT
"""Tests for cmakegen.util.paths."""

import pytest

from cmakegen.util.paths import PathContext, file_exists, is_absolute, to_posix


class TestHelpers:
    def test_to_posix(self):
        assert to_posix("a\\b\\c.h") == "a/b/c.h"
        assert to_posix("a/b") == "a/b"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/usr/include", True),
            ("C:\\sdk", True),
            ("c:/sdk", True),
            ("include", False),
            ("../include", False),
            ("C:", False),
        ],
    )
    def test_is_absolute(self, path, expected):
        assert is_absolute(path) is expected

    def test_file_exists(self, tmp_path):
        header = tmp_path / "pch.h"
        assert not file_exists(header)
        header.write_text("")
        assert file_exists(str(header))
        assert not file_exists(tmp_path)


class TestPathContext:
    def test_join(self):
        paths = PathContext()
        assert paths.join("/w", "src", "a.c") == "/w/src/a.c"
        assert paths.join("/w/core", "../lib") == "/w/lib"
        assert paths.join("/w", "/abs/x") == "/abs/x"
        assert paths.join("/w", "") == "/w"

    def test_join_renders_separator(self):
        assert PathContext("\\").join("C:/w", "src") == "C:\\w\\src"

    def test_absolute(self):
        paths = PathContext()
        assert paths.absolute("inc", "/w") == "/w/inc"
        assert paths.absolute("/usr/inc", "/w") == "/usr/inc"

    @pytest.mark.parametrize(
        "base,target,expected",
        [
            ("/w", "/w/src/a.c", "src/a.c"),
            ("/w/build", "/w/src/a.c", "../src/a.c"),
            ("/w", "/w", "."),
            ("/w/", "/w/./x/../y", "y"),
            ("C:/w", "C:/w/src", "src"),
            ("C:/w", "D:/lib", "D:/lib"),
            ("/w", "rel/x.h", "rel/x.h"),
        ],
    )
    def test_relative(self, base, target, expected):
        assert PathContext().relative(base, target) == expected

    def test_relative_with_backslash(self):
        paths = PathContext("\\")
        assert paths.relative("/w", "/w/src/a.c") == "src\\a.c"
        assert paths.relative("C:\\w", "C:\\w\\sub\\b.c") == "sub\\b.c"

    def test_contexts_are_independent(self):
        forward = PathContext("/")
        backward = PathContext("\\")
        assert backward.relative("/w", "/w/a/b") == "a\\b"
        assert forward.relative("/w", "/w/a/b") == "a/b"

    def test_relative_all(self):
        assert PathContext().relative_all("/w", ["/w/a", "/w/b/c"]) == ["a", "b/c"]
