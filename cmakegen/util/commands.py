# SPDX-License-Identifier: MIT
"""Cross-platform command translation for generated build steps.

Build commands in the model are written with portable tokens so the same
project description works on every target system:

    {MKDIR} %[gen]
    {COPYFILE} %[data/config.ini] %[gen/config.ini]

Tokens in braces are replaced by the target system's shell command, and
paths marked with %[...] (relative to the project base directory) are
rewritten relative to the project location, where the generated build
runs them from.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import overload

from cmakegen.util.paths import PathContext, is_absolute

POSIX_COMMANDS: dict[str, str] = {
    "CHDIR": "cd",
    "COPYFILE": "cp -f",
    "COPYDIR": "cp -rf",
    "DELETE": "rm -rf",
    "ECHO": "echo",
    "MKDIR": "mkdir -p",
    "MOVE": "mv -f",
    "RMDIR": "rm -rf",
    "TOUCH": "touch",
}

WINDOWS_COMMANDS: dict[str, str] = {
    "CHDIR": "chdir",
    "COPYFILE": "copy /B /Y",
    "COPYDIR": "xcopy /Q /E /Y /I",
    "DELETE": "del",
    "ECHO": "echo",
    "MKDIR": "mkdir",
    "MOVE": "move /Y",
    "RMDIR": "rmdir /S /Q",
    "TOUCH": "type nul >>",
}

_COMMAND_TOKEN = re.compile(r"\{([A-Z]+)\}")
_PATH_MARKER = re.compile(r"%\[([^\]]*)\]")


def commands_for_system(system: str | None) -> dict[str, str]:
    """Return the token table for a target system name."""
    if system is not None and system.lower() == "windows":
        return WINDOWS_COMMANDS
    return POSIX_COMMANDS


def translate_command(
    command: str,
    basedir: str,
    location: str,
    system: str | None = None,
    paths: PathContext | None = None,
) -> str:
    """Translate one command string for a target system.

    Args:
        command: Command with {TOKEN}s and %[path] markers.
        basedir: Directory the marked paths are relative to.
        location: Directory the generated command runs from.
        system: Target system name; "windows" selects cmd.exe commands.
        paths: Path convention for rewritten paths.

    Returns:
        The translated command. Unknown tokens are left untouched.
    """
    if paths is None:
        paths = PathContext("\\" if system == "windows" else "/")
    table = commands_for_system(system)

    def replace_token(match: re.Match[str]) -> str:
        return table.get(match.group(1), match.group(0))

    def replace_path(match: re.Match[str]) -> str:
        marked = match.group(1)
        if is_absolute(marked):
            return paths.render(marked)
        return paths.relative(location, paths.join(basedir, marked))

    command = _PATH_MARKER.sub(replace_path, command)
    return _COMMAND_TOKEN.sub(replace_token, command)


@overload
def translate_commands_and_paths(
    commands: str,
    basedir: str,
    location: str,
    system: str | None = ...,
    paths: PathContext | None = ...,
) -> str: ...


@overload
def translate_commands_and_paths(
    commands: Iterable[str],
    basedir: str,
    location: str,
    system: str | None = ...,
    paths: PathContext | None = ...,
) -> list[str]: ...


def translate_commands_and_paths(
    commands: str | Iterable[str],
    basedir: str,
    location: str,
    system: str | None = None,
    paths: PathContext | None = None,
) -> str | list[str]:
    """Translate a command or a list of commands.

    A single string yields a single string; any other iterable yields a
    list in the same order.
    """
    if isinstance(commands, str):
        return translate_command(commands, basedir, location, system, paths)
    return [
        translate_command(command, basedir, location, system, paths)
        for command in commands
    ]
