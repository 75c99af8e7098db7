#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Load a project's compile commands and show the flags used for each file.

Reads compile_commands.json (or falls back to scanning the project directory
when a .compdb marker file is present or no database can be loaded) and prints
the normalized compiler arguments of every file, or of specific files given
with --query. Files missing from the database get flags inferred from the most
similar known file.

Requirements:
    - Python 3.8+
    - colorama, packaging
    - clang (optional, to detect the resource directory)

Usage:
    compdbProject.py <project_directory> [--extra-flag=FLAG]... [--query FILE]... [--include-dirs] [--format=text|json]

Exit Codes:
    0: Success
    1: Invalid arguments, directory or configuration
    2: Runtime error
    130: Interrupted
"""

import os
import sys
import json
import signal
import logging
import argparse
from typing import Any, Dict, List, Optional

__version__ = "1.0.0"
__author__ = "Mana Battery"

from compdb.color_utils import Colors, print_error, print_warning, print_info, should_use_color
from compdb.compile_flags import Entry
from compdb.config import IndexConfig, load_config
from compdb.constants import EXIT_SUCCESS, EXIT_RUNTIME_ERROR, EXIT_KEYBOARD_INTERRUPT, CompdbError, ProjectDirectoryError
from compdb.package_verification import require_package
from compdb.path_utils import normalize_path
from compdb.project import Project
from compdb.tool_detection import detect_resource_dir

require_package("colorama", "compdb project loading")

# Export for tests
__all__ = ["EXIT_SUCCESS", "main"]

logger = logging.getLogger(__name__)


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def validate_project_directory(path: str) -> str:
    """Return the canonical project directory.

    Raises:
        ProjectDirectoryError: If path is not an existing directory
    """
    if not path:
        raise ProjectDirectoryError("Project directory must not be empty")
    project_dir = normalize_path(path)
    if not os.path.isdir(project_dir):
        raise ProjectDirectoryError(f"Project directory not found: {path}")
    return project_dir


def entry_to_dict(entry: Entry) -> Dict[str, Any]:
    """Convert an entry to a JSON-serializable dict."""
    return {"filename": entry.filename, "args": list(entry.args), "is_inferred": entry.is_inferred}


def format_json_output(entries: List[Entry], project: Project) -> str:
    """Format entries and include directories as JSON.

    Args:
        entries: Entries to output
        project: Loaded project (for include directories)

    Returns:
        JSON formatted string
    """
    output = {
        "summary": {"total_entries": len(project.entries), "shown_entries": len(entries), "version": __version__},
        "quote_include_directories": project.quote_include_directories,
        "angle_include_directories": project.angle_include_directories,
        "entries": [entry_to_dict(entry) for entry in entries],
    }
    return json.dumps(output, indent=2)


def format_entry_text(index: Optional[int], entry: Entry) -> str:
    """Format one entry for terminal output."""
    label = f"[{index}] " if index is not None else ""
    inferred = f" {Colors.YELLOW}(inferred){Colors.RESET}" if entry.is_inferred else ""
    lines = [f"{Colors.BRIGHT}{label}{entry.filename}{Colors.RESET}{inferred}"]
    if entry.args:
        lines.append(f"  {Colors.DIM}{' '.join(entry.args)}{Colors.RESET}")
    else:
        lines.append(f"  {Colors.DIM}(no flags){Colors.RESET}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description="Load compile commands for a project and show the flags used for each file.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s ~/src/myproject\n"
        f"  %(prog)s ~/src/myproject --compilation-database-dir ~/src/myproject/build\n"
        f"  %(prog)s ~/src/myproject --extra-flag=-DDEBUG --extra-flag=-Ithird_party\n"
        f"  %(prog)s ~/src/myproject --query src/new_file.cc --format json\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("project_directory", help="Project root directory")
    parser.add_argument("--compilation-database-dir", metavar="DIR", help="Directory containing compile_commands.json (default: project directory)")
    parser.add_argument("--resource-dir", metavar="DIR", help="Compiler resource directory (default: ask clang)")
    parser.add_argument("--extra-flag", action="append", default=[], metavar="FLAG", help="Flag appended to every entry; use the = form since flags start with '-' (e.g. --extra-flag=-DFOO, repeatable)")
    parser.add_argument("--config", metavar="FILE", help="JSON index configuration file")
    parser.add_argument("--query", action="append", default=[], metavar="FILE", help="Show the entry for FILE, inferring flags if needed (repeatable)")
    parser.add_argument("--include-dirs", action="store_true", help="Show quote and angle include directories")
    parser.add_argument("--whitelist", action="append", default=[], metavar="GLOB", help="Always list files matching GLOB (repeatable)")
    parser.add_argument("--blacklist", action="append", default=[], metavar="GLOB", help="Skip files matching GLOB unless whitelisted (repeatable)")
    parser.add_argument("--log-skipped", action="store_true", default=None, help="Log files skipped by the filters")
    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_project(project_dir: str, config: IndexConfig) -> Project:
    """Load the project described by config.

    Args:
        project_dir: Canonical project directory
        config: Effective index configuration

    Returns:
        Loaded project
    """
    resource_dir = config.resource_dir
    if not resource_dir:
        resource_dir = detect_resource_dir() or ""
        if not resource_dir:
            print_warning("Could not detect the clang resource directory; builtin headers may not resolve")

    compilation_db_dir = config.compilation_database_dir
    if compilation_db_dir:
        compilation_db_dir = normalize_path(compilation_db_dir)

    project = Project()
    project.load(config.extra_flags, compilation_db_dir, project_dir, resource_dir)
    return project


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script.

    Args:
        argv: Command line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    args = build_parser().parse_args(argv)

    if not should_use_color(no_color=args.no_color):
        Colors.disable()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    try:
        project_dir = validate_project_directory(args.project_directory)
        config = load_config(args.config).merged_with(
            extra_flags=args.extra_flag or None,
            compilation_database_dir=args.compilation_database_dir,
            resource_dir=args.resource_dir,
            index_whitelist=args.whitelist or None,
            index_blacklist=args.blacklist or None,
            log_skipped_paths=args.log_skipped,
        )
    except CompdbError as e:
        print_error(str(e))
        return e.exit_code

    if args.verbose:
        print(f"compdb project v{__version__}", file=sys.stderr)
        print(f"Loading: {project_dir}", file=sys.stderr)

    try:
        project = load_project(project_dir, config)
    except CompdbError as e:
        print_error(str(e))
        return e.exit_code

    if args.query:
        entries = [project.find_compilation_entry_for_file(normalize_path(path)) for path in args.query]
        indexed = [(None, entry) for entry in entries]
    else:
        indexed = []
        project.for_all_filtered_files(config, lambda i, entry: indexed.append((i, entry)))

    if args.format == "json":
        print(format_json_output([entry for _, entry in indexed], project))
        return EXIT_SUCCESS

    try:
        if args.include_dirs:
            print(f"\n{Colors.BRIGHT}{Colors.CYAN}=== Include Directories ==={Colors.RESET}")
            for path in project.quote_include_directories:
                print(f'  "{path}"')
            for path in project.angle_include_directories:
                print(f"  <{path}>")

        print(f"\n{Colors.BRIGHT}{Colors.CYAN}=== Compile Entries ==={Colors.RESET}")
        if not indexed:
            print_info("No entries found.")
        for index, entry in indexed:
            print(format_entry_text(index, entry))
    except BrokenPipeError:
        # Handle broken pipe gracefully (e.g., when piping to head)
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return EXIT_SUCCESS

    return EXIT_SUCCESS


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except CompdbError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(e.exit_code)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)
