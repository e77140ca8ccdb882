"""Command-line front end: parse a story file and print its structure."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from storydoc.core.config import load_config
from storydoc.data import ParseError, StoryLoadError, parse_file
from storydoc.presentation.cli.render import (
    debug_enabled,
    render_story_data,
    render_violations,
)
from storydoc.services import is_valid, validate_references

EXIT_OK = 0
EXIT_PARSE_ERROR = 1
EXIT_INVALID_REFERENCES = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storydoc",
        description="Parse a story document and print its structure.",
    )
    parser.add_argument("path", type=Path, help="story document (.sdc) to parse")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="resolve every reference and report violations",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="with --validate, treat warnings as failures",
    )
    parser.add_argument("--config", type=Path, default=None, help="parser config JSON file")
    parser.add_argument("--quiet", action="store_true", help="do not print the parsed structure")
    parser.add_argument("--width", type=int, default=78, help="wrap width for long text")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or debug_enabled() else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.verbose)
    config = load_config(args.config)

    print(f"Parsing file: {args.path}")
    try:
        data = parse_file(args.path, config=config)
    except StoryLoadError as exc:
        print(f"Error loading file: {exc}")
        return EXIT_PARSE_ERROR
    except ParseError as exc:
        print(f"Error parsing file: {exc}")
        return EXIT_PARSE_ERROR
    print("Parse successful!\n")

    if not args.quiet:
        render_story_data(data, width=args.width)

    if not args.validate:
        return EXIT_OK
    violations = validate_references(data)
    render_violations(violations)
    if not is_valid(violations, strict=args.strict):
        return EXIT_INVALID_REFERENCES
    return EXIT_OK
