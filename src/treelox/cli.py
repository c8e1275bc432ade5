"""Command-line driver: run a JSON-serialized syntax tree.

The scanner and parser live outside this package; they hand over a
``Program`` serialized with ``Program.model_dump_json()``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from treelox.constants import EXIT_STATIC_ERROR, EXIT_USAGE
from treelox.interpret import Session
from treelox.model.program import Program

logger = logging.getLogger(__name__)


def load_program(text: str) -> Program:
    return Program.model_validate_json(text)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="treelox",
        description="Resolve and evaluate a parsed program (JSON syntax tree)")
    parser.add_argument("file", nargs="?", default="-",
                        help="Program JSON file, or - for stdin (default: -)")
    parser.add_argument("--echo", action="store_true",
                        help="Print the value of top-level expression statements")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log resolution and evaluation milestones")

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return EXIT_USAGE if exc.code else 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.file == "-":
        text = sys.stdin.read()
    else:
        try:
            with open(args.file, encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            print(f"treelox: cannot read {args.file}: {exc.strerror}", file=sys.stderr)
            return EXIT_USAGE

    try:
        program = load_program(text)
    except ValidationError as exc:
        print(f"treelox: invalid syntax tree\n{exc}", file=sys.stderr)
        return EXIT_STATIC_ERROR

    logger.info("Loaded %d top-level statements", len(program.statements))
    result = Session(echo_expressions=args.echo).run(program)
    for line in result.diagnostics():
        print(line, file=sys.stderr)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
