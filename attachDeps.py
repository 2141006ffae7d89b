#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""
Dependency Attachment Tool

Applies the compile and link metadata of resolved packages to the targets of a
build description, and shows the resulting target configuration. Useful to
check what a target ends up with before handing the configuration to the build
system, in particular include directory precedence between overlay and
underlay workspaces and duplicate libraries.

USAGE:
    python3 attachDeps.py <description.json> [options]

EXAMPLES:
    # Show the mutations applied to every target
    python3 attachDeps.py build_description.json

    # Show the configuration each target is built with
    python3 attachDeps.py build_description.json --effective

    # Order include directories by an explicit prefix chain
    python3 attachDeps.py build_description.json --prefix-path /ws/install --prefix-path /opt/ros/jazzy

    # Machine readable output
    python3 attachDeps.py build_description.json --json

METHOD:
    For every attachment in the description, in file order:
    - Packages providing imported targets are linked with the requested scope
    - Otherwise include dirs are ordered by the prefix chain, libraries are
      de-duplicated, and library dirs and definitions lose exact duplicates
    - An unset scope is kept for libraries and becomes PUBLIC for everything else
"""

import sys
import json
import logging
import argparse
from typing import Any, Dict, List, Optional

from depattach.package_verification import require_package

require_package("networkx", "build graph")

from depattach.attach import attach_dependencies  # noqa: E402
from depattach.attach_types import scope_label  # noqa: E402
from depattach.build_description import BuildDescription, load_build_description  # noqa: E402
from depattach.color_utils import Colors, print_error, print_warning, should_use_color  # noqa: E402
from depattach.constants import EXIT_KEYBOARD_INTERRUPT, EXIT_RUNTIME_ERROR, EXIT_SUCCESS, DepAttachError  # noqa: E402
from depattach.include_order import prefixes_from_environment  # noqa: E402

logger = logging.getLogger(__name__)


def run_attachments(description: BuildDescription, prefixes: Optional[List[str]] = None) -> None:
    """Run every attachment request of a build description.

    Args:
        description: Loaded build description
        prefixes: Prefix chain overriding the description and the environment
    """
    if prefixes is None:
        prefixes = description.prefixes
    if prefixes is None:
        prefixes = prefixes_from_environment()
    logger.debug("Prefix chain: %s", prefixes)

    for request in description.requests:
        attach_dependencies(
            request.target,
            request.packages,
            description.graph,
            description.packages,
            scope=request.scope,
            system_includes=request.system,
            prefixes=prefixes,
        )


def reported_targets(description: BuildDescription) -> List[str]:
    """Project targets, in declaration order."""
    graph = description.graph
    return [name for name in graph.target_names if not graph.is_imported(name)]


def format_json_output(description: BuildDescription, effective: bool = False) -> str:
    """Format the outcome of all attachments as JSON."""
    graph = description.graph
    targets: Dict[str, Any] = {}
    for name in reported_targets(description):
        entry: Dict[str, Any] = {"kind": graph.kind(name), "mutations": [call.to_dict() for call in graph.calls_for(name)]}
        if effective:
            entry["effective"] = graph.effective_configuration(name).to_dict()
        targets[name] = entry
    return json.dumps({"targets": targets, "link_cycles": [sorted(cycle) for cycle in graph.link_cycles()]}, indent=2)


def print_mutations(description: BuildDescription) -> None:
    graph = description.graph
    for name in reported_targets(description):
        calls = graph.calls_for(name)
        print(f"\n{Colors.BRIGHT}{name}{Colors.RESET} {Colors.DIM}({graph.kind(name)}, {len(calls)} mutations){Colors.RESET}")
        for call in calls:
            system = f" {Colors.YELLOW}SYSTEM{Colors.RESET}" if call.system else ""
            print(f"  {Colors.CYAN}{call.operation}{Colors.RESET} [{scope_label(call.scope)}]{system}")
            for value in call.values:
                print(f"    {value}")


def print_effective_configuration(description: BuildDescription) -> None:
    graph = description.graph
    sections = (
        ("Include directories", "include_dirs"),
        ("System include directories", "system_include_dirs"),
        ("Link libraries", "link_libraries"),
        ("Link directories", "link_directories"),
        ("Compile definitions", "compile_definitions"),
    )
    for name in reported_targets(description):
        config = graph.effective_configuration(name).to_dict()
        print(f"\n{Colors.BRIGHT}{name}{Colors.RESET} {Colors.DIM}({graph.kind(name)}){Colors.RESET}")
        for title, key in sections:
            if not config[key]:
                continue
            print(f"  {Colors.CYAN}{title}:{Colors.RESET}")
            for value in config[key]:
                print(f"    {value}")


def main() -> int:
    """Main entry point for the dependency attachment tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Attach resolved package metadata to build targets and show the result.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s build_description.json
  %(prog)s build_description.json --effective
  %(prog)s build_description.json --prefix-path /ws/install --prefix-path /opt/ros/jazzy
  %(prog)s build_description.json --json
        """,
    )

    parser.add_argument("description", metavar="DESCRIPTION", help="Path to the JSON build description")
    parser.add_argument(
        "--prefix-path",
        action="append",
        metavar="DIR",
        help="Install prefix, highest precedence first (can be used multiple times). Overrides the description and AMENT_PREFIX_PATH",
    )
    parser.add_argument("--effective", action="store_true", help="Show the configuration each target is built with instead of the mutations")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if args.json or not should_use_color(no_color=args.no_color):
        Colors.disable()

    try:
        description = load_build_description(args.description)
        run_attachments(description, args.prefix_path)
    except DepAttachError as e:
        logging.error("%s", e)
        print_error(str(e))
        return e.exit_code

    if args.json:
        print(format_json_output(description, effective=args.effective))
        return EXIT_SUCCESS

    for cycle in description.graph.link_cycles():
        print_warning(f"Link cycle between: {', '.join(sorted(cycle))}")

    if args.effective:
        print_effective_configuration(description)
    else:
        print_mutations(description)

    return EXIT_SUCCESS


if __name__ == "__main__":
    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except DepAttachError as e:
        logging.error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:
        logging.error("Unexpected error: %s", e)
        if logging.getLogger().level == logging.DEBUG:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_RUNTIME_ERROR)
