# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the SADL command-line interface."""

import argparse
import sys
from pathlib import Path

from sadl.log import configure_logging
from sadl.model.entities import SadlFile
from sadl.parser.lexer import LexerError
from sadl.parser.parser import ParseError, parse
from sadl.validation.checks import validate
from sadl.views.flowchart import DIRECTIONS, to_mermaid
from sadl.views.layout import View, build_render_model, default_view
from sadl.workspace.config import (
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)
from sadl.workspace.resolver import FileSystemResolver, IncludeNotFoundError

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the SADL CLI."""
    parser = argparse.ArgumentParser(
        prog="sadl",
        description="SADL - system architecture description language tools",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log include resolution and layout details to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse",
        help="Print the syntax tree of a SADL file as JSON",
        description="Parse a SADL file, following includes, and print the result as JSON.",
    )
    _add_common_arguments(parse_parser)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check a SADL file for semantic errors",
        description="Parse a SADL file and report duplicate names, dangling references and suspicious values.",
    )
    _add_common_arguments(check_parser)

    # layout subcommand
    layout_parser = subparsers.add_parser(
        "layout",
        help="Print the computed layout as JSON",
        description="Lay out the schema or instances view and print the positioned entities as JSON.",
    )
    _add_common_arguments(layout_parser)
    _add_view_argument(layout_parser)

    # export subcommand
    export_parser = subparsers.add_parser(
        "export",
        help="Export a view as a Mermaid flowchart",
        description="Print the schema or instances view as Mermaid flowchart text.",
    )
    _add_common_arguments(export_parser)
    _add_view_argument(export_parser)
    export_parser.add_argument(
        "--direction",
        choices=DIRECTIONS,
        default="LR",
        help="Flowchart direction (default: LR)",
    )

    # serve subcommand
    serve_parser = subparsers.add_parser(
        "serve",
        help="Show the laid-out view in a browser",
        description="Launch a web-based UI showing the laid-out view.",
    )
    _add_common_arguments(serve_parser)
    _add_view_argument(serve_parser)
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8050,
        help="TCP port for the viewer (default: 8050)",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Interface the viewer listens on (default: 127.0.0.1)",
    )

    args = parser.parse_args()
    configure_logging(verbose=args.verbose)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("file", help="SADL source file")
    subparser.add_argument(
        "--config",
        default=None,
        help="Configuration file (default: .sadl.yaml next to FILE, if present)",
    )


def _add_view_argument(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--view",
        choices=[v.value for v in View],
        default=None,
        help="View to use (default: instances if the file declares any, else schema)",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Run the handler for the selected subcommand and return its exit code."""
    if args.command == "parse":
        return _cmd_parse(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "layout":
        return _cmd_layout(args)
    if args.command == "export":
        return _cmd_export(args)
    if args.command == "serve":
        return _cmd_serve(args)
    return 0


def _load(args: argparse.Namespace) -> tuple[SadlFile, WorkspaceConfig] | None:
    """Load configuration and parse the input file, printing any error to stderr."""
    source_file = Path(args.file).resolve()
    if not source_file.is_file():
        print(f"Error: file '{source_file}' does not exist.", file=sys.stderr)
        return None

    try:
        if args.config is not None:
            config = load_workspace_config(Path(args.config).resolve())
        else:
            config = find_workspace_config(source_file)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None

    resolver = FileSystemResolver(config.root, config.include_paths)
    try:
        text = source_file.read_text(encoding="utf-8")
        sadl_file = parse(text, resolver=resolver, file_path=str(source_file))
    except (LexerError, ParseError) as exc:
        print(f"Error: {source_file.name}: {exc}", file=sys.stderr)
        return None
    except IncludeNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None
    except UnicodeDecodeError as exc:
        print(f"Error: '{source_file}' or one of its includes is not valid UTF-8: {exc}", file=sys.stderr)
        return None
    except OSError as exc:
        print(f"Error: cannot read '{source_file}': {exc}", file=sys.stderr)
        return None
    return sadl_file, config


def _selected_view(args: argparse.Namespace, sadl_file: SadlFile) -> View:
    return View(args.view) if args.view is not None else default_view(sadl_file)


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse subcommand."""
    loaded = _load(args)
    if loaded is None:
        return 1
    sadl_file, _ = loaded
    print(sadl_file.model_dump_json(indent=2))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    loaded = _load(args)
    if loaded is None:
        return 1
    sadl_file, _ = loaded

    result = validate(sadl_file)
    for warning in result.warnings:
        print(f"Warning: {warning.message}")
    for error in result.errors:
        print(f"Error: {error.message}", file=sys.stderr)

    if result.has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_layout(args: argparse.Namespace) -> int:
    """Handle the layout subcommand."""
    loaded = _load(args)
    if loaded is None:
        return 1
    sadl_file, config = loaded
    model = build_render_model(sadl_file, _selected_view(args, sadl_file), config.layout)
    print(model.model_dump_json(indent=2))
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    """Handle the export subcommand."""
    loaded = _load(args)
    if loaded is None:
        return 1
    sadl_file, _ = loaded
    print(to_mermaid(sadl_file, _selected_view(args, sadl_file), direction=args.direction))
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    """Handle the serve subcommand."""
    loaded = _load(args)
    if loaded is None:
        return 1
    sadl_file, config = loaded

    from sadl.webui.app import create_app

    model = build_render_model(sadl_file, _selected_view(args, sadl_file), config.layout)
    print(f"SADL viewer for {Path(args.file).name} on http://{args.host}:{args.port}/")
    app = create_app(model, title=f"SADL: {Path(args.file).name}")
    app.run(host=args.host, port=args.port, debug=False)
    return 0
