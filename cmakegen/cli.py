# SPDX-License-Identifier: MIT
"""Command-line interface for cmakegen."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from cmakegen.core.errors import CmakegenError

# Set up logging
logger = logging.getLogger("cmakegen")

DEFAULT_MODEL = "workspace.toml"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def find_model(name: str = DEFAULT_MODEL, search_dir: Path | None = None) -> Path | None:
    """Find a workspace description by name.

    Args:
        name: File name (e.g., 'workspace.toml')
        search_dir: Directory to search in (default: current dir)

    Returns:
        Path to the file if found, None otherwise.
    """
    if search_dir is None:
        search_dir = Path.cwd()

    model_path = search_dir / name
    if model_path.exists() and model_path.is_file():
        return model_path

    return None


def _resolve_model(args: argparse.Namespace) -> Path | None:
    if args.model:
        model = Path(args.model)
        if not model.is_file():
            logger.error("Workspace description not found: %s", args.model)
            return None
        return model
    found = find_model()
    if found is None:
        logger.error("No %s found in current directory", DEFAULT_MODEL)
    return found


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate CMake scripts for every project in the workspace."""
    from cmakegen.core.loader import load_workspace
    from cmakegen.generators.cmake import CMakeGenerator, EmitOptions

    setup_logging(args.verbose, args.debug)

    model = _resolve_model(args)
    if model is None:
        return 1

    options = EmitOptions(
        cc=args.cc or os.environ.get("CMAKEGEN_CC") or None,
        bom=not args.no_bom,
    )
    output_dir = Path(args.output_dir) if args.output_dir else None

    try:
        workspace = load_workspace(model)
        written = CMakeGenerator(options).generate(workspace, output_dir)
    except CmakegenError as e:
        logger.error("%s", e)
        return 1

    for path in written:
        print(f"Generated {path}")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Show the projects and configurations of a workspace."""
    from cmakegen.core.loader import load_workspace
    from cmakegen.tools.toolset import resolve_toolset

    setup_logging(args.verbose, args.debug)

    model = _resolve_model(args)
    if model is None:
        return 1

    try:
        workspace = load_workspace(model)
        print(f"Workspace: {workspace.name} ({workspace.location})")
        for project in workspace.projects:
            kind = project.resolve_kind() or "unknown"
            print(f"  {project.name} [{kind}] {len(project.files)} file(s)")
            for cfg in project.configurations:
                toolset = resolve_toolset(cfg, args.cc)
                platform = f" {cfg.platform}" if cfg.platform else ""
                print(f"    {cfg.name}{platform}: {cfg.system}, {toolset.name}")
    except CmakegenError as e:
        logger.error("%s", e)
        return 1
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "--cc",
        metavar="TOOLSET",
        help="Toolset overriding every configuration (gcc, clang, msc)",
    )
    parser.add_argument(
        "model",
        nargs="?",
        help=f"Workspace description (default: {DEFAULT_MODEL})",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the cmakegen CLI."""
    parser = argparse.ArgumentParser(
        prog="cmakegen",
        description="Generate CMake build scripts from a resolved workspace model.",
        epilog="Run 'cmakegen <command> --help' for command-specific help.",
    )
    from cmakegen import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # cmakegen generate
    gen_parser = subparsers.add_parser(
        "generate", help="Write CMakeLists.txt and one script per project"
    )
    add_common_args(gen_parser)
    gen_parser.add_argument(
        "-o",
        "--output-dir",
        help="Output directory (default: the workspace location)",
    )
    gen_parser.add_argument(
        "--no-bom",
        action="store_true",
        help="Write files without a UTF-8 byte order mark",
    )
    gen_parser.set_defaults(func=cmd_generate)

    # cmakegen list
    list_parser = subparsers.add_parser(
        "list", help="Show projects, configurations and toolsets"
    )
    add_common_args(list_parser)
    list_parser.set_defaults(func=cmd_list)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
