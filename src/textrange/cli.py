"""
CLI interface for textrange.

Prints the visible text of an HTML file (or stdin), the character range of a
search match, the text of a character selection, or the word tokens.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import replace

from .config import get_config
from .dom import Node, find_all
from .engine import TextEngine
from .parser import parse_html


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="textrange",
        description="Visible text, search and character ranges over HTML",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Input HTML file (reads from stdin if not provided)",
    )

    parser.add_argument(
        "--find",
        "-f",
        type=str,
        help="Search term; prints START:END of the first match in the visible text",
    )

    parser.add_argument(
        "--regex",
        "-r",
        action="store_true",
        help="Treat the search term as a regular expression",
    )

    parser.add_argument(
        "--case-sensitive",
        "-c",
        action="store_true",
        default=None,
        help="Match case exactly (default from config)",
    )

    parser.add_argument(
        "--whole-words",
        "-w",
        action="store_true",
        default=None,
        help="Only accept matches that are whole words",
    )

    parser.add_argument(
        "--backward",
        "-b",
        action="store_true",
        help="Search from the end of the text toward the start",
    )

    parser.add_argument(
        "--wrap",
        action="store_true",
        default=None,
        help="Wrap around once when the search reaches the end",
    )

    parser.add_argument(
        "--select",
        "-s",
        type=str,
        help="Character range START:END; prints the visible text it covers",
    )

    parser.add_argument(
        "--words",
        action="store_true",
        help="Print word tokens, one per line",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging on stderr",
    )

    return parser.parse_args(args)


def read_input(filepath: str | None) -> str:
    """Read markup from file or stdin."""
    if filepath:
        with open(filepath, encoding="utf-8", errors="replace") as f:
            return f.read()
    return sys.stdin.read()


def parse_select(value: str) -> tuple[int, int]:
    """Parse START:END into two integers."""
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid selection: {value!r} (expected START:END)")
    try:
        start, end = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"Invalid selection: {value!r} (START and END must be integers)") from None
    if start > end:
        raise ValueError(f"Invalid selection: {value!r} (START must not exceed END)")
    return start, end


def text_container(root: Node) -> Node:
    """The body element if there is one, else the root."""
    bodies = find_all(root, "body")
    return bodies[0] if bodies else root


def find_match(engine: TextEngine, container: Node, parsed: argparse.Namespace) -> tuple[int, int] | None:
    """Character range of the first match, or None."""
    term: str | re.Pattern = parsed.find
    options = engine.defaults.find_options
    if parsed.case_sensitive is not None:
        options = replace(options, case_sensitive=parsed.case_sensitive)
    if parsed.whole_words is not None:
        options = replace(options, whole_words_only=parsed.whole_words)
    if parsed.wrap is not None:
        options = replace(options, wrap=parsed.wrap)
    if parsed.regex:
        term = re.compile(parsed.find, 0 if options.case_sensitive else re.IGNORECASE)

    with engine.session():
        rng = engine.create_range(container)
        scope = engine.create_range(container)
        scope.select_node_contents(container)
        rng.select_node_contents(container)
        rng.collapse(not parsed.backward)
        options = replace(options, within_range=scope, direction="backward" if parsed.backward else "forward")
        if not rng.find_text(term, options):
            return None
        found = rng.to_character_range(container)
    return found.start, found.end


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        markup = read_input(parsed.file)
    except FileNotFoundError:
        print(f"Error: File not found: {parsed.file}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    root = parse_html(markup)
    container = text_container(root)
    engine = TextEngine(config=get_config())

    if parsed.find:
        try:
            match = find_match(engine, container, parsed)
        except re.error as e:
            print(f"Error: Invalid regex: {e}", file=sys.stderr)
            return 1
        if match is None:
            print(f"No match for {parsed.find!r}", file=sys.stderr)
            return 1
        start, end = match
        selection = engine.create_selection()
        selection.select_characters(container, start, end)
        print(f"{start}:{end}\t{selection.text()}")
        return 0

    if parsed.select:
        try:
            start, end = parse_select(parsed.select)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        selection = engine.create_selection()
        selection.select_characters(container, start, end)
        print(selection.text())
        return 0

    if parsed.words:
        with engine.create_word_iterator(container, 0) as words:
            for token in words:
                if token.is_word:
                    print(str(token))
        return 0

    print(engine.inner_text(container))
    return 0


if __name__ == "__main__":
    sys.exit(main())
