# SPDX-License-Identifier: MIT
"""Tests for cmakegen.util.commands."""

from cmakegen.util.commands import (
    POSIX_COMMANDS,
    WINDOWS_COMMANDS,
    commands_for_system,
    translate_command,
    translate_commands_and_paths,
)
from cmakegen.util.paths import PathContext


class TestCommandTables:
    def test_same_tokens(self):
        assert set(POSIX_COMMANDS) == set(WINDOWS_COMMANDS)

    def test_system_selection(self):
        assert commands_for_system("windows") is WINDOWS_COMMANDS
        assert commands_for_system("Windows") is WINDOWS_COMMANDS
        assert commands_for_system("linux") is POSIX_COMMANDS
        assert commands_for_system("macosx") is POSIX_COMMANDS
        assert commands_for_system(None) is POSIX_COMMANDS


class TestTranslateCommand:
    def test_tokens_posix(self):
        assert translate_command("{MKDIR} out", "/w", "/w", "linux") == "mkdir -p out"
        assert translate_command("{COPYFILE} a b", "/w", "/w") == "cp -f a b"

    def test_tokens_windows(self):
        assert (
            translate_command("{COPYFILE} a b", "/w", "/w", "windows")
            == "copy /B /Y a b"
        )
        assert translate_command("{RMDIR} x", "/w", "/w", "windows") == "rmdir /S /Q x"

    def test_unknown_token_kept(self):
        assert translate_command("{FROB} x", "/w", "/w") == "{FROB} x"

    def test_lowercase_braces_untouched(self):
        assert translate_command("echo {a}", "/w", "/w") == "echo {a}"

    def test_paths_rebased(self):
        command = "{COPYFILE} %[data/a.ini] %[gen/a.ini]"
        assert (
            translate_command(command, "/w/core", "/w/build/core")
            == "cp -f ../../core/data/a.ini ../../core/gen/a.ini"
        )

    def test_absolute_marked_path(self):
        assert translate_command("cat %[/etc/hosts]", "/w", "/w/b") == "cat /etc/hosts"

    def test_windows_default_separator(self):
        command = "{MKDIR} %[gen/sub]"
        assert translate_command(command, "/w", "/w", "windows") == "mkdir gen\\sub"

    def test_explicit_path_context(self):
        command = "{MKDIR} %[gen/sub]"
        result = translate_command(command, "/w", "/w", "windows", PathContext("/"))
        assert result == "mkdir gen/sub"

    def test_plain_text_unchanged(self):
        assert translate_command("python3 gen.py", "/w", "/w") == "python3 gen.py"


class TestTranslateCommandsAndPaths:
    def test_string_in_string_out(self):
        result = translate_commands_and_paths("{ECHO} hi", "/w", "/w")
        assert result == "echo hi"

    def test_list_in_list_out(self):
        result = translate_commands_and_paths(["{ECHO} hi", "{TOUCH} %[x]"], "/w", "/w")
        assert result == ["echo hi", "touch x"]

    def test_generator_input(self):
        result = translate_commands_and_paths(
            (c for c in ["{DELETE} a"]), "/w", "/w", "windows"
        )
        assert result == ["del a"]

    def test_empty(self):
        assert translate_commands_and_paths([], "/w", "/w") == []
