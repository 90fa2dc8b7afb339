"""Pre-release check of the questions file.

Usage:
  python -m sentence_builder validate [--file PATH]
  sentence-builder-validate [--file PATH]

Prints one line per problem and exits 1 if anything is wrong, 0 otherwise.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

from sentence_builder.parsers.question_parser import parse_questions

DEFAULT_FILE = Path("data") / "questions.csv"


def validate_file(path: Path) -> int:
    print("--- Starting Data Validation ---")
    if not path.exists():
        print(f"Error: {path} not found!", file=sys.stderr)
        return 1

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        print(f"Error: {path} is not valid UTF-8", file=sys.stderr)
        return 1

    result = parse_questions(text, strict_columns=True)
    for err in result.errors:
        print(str(err), file=sys.stderr)

    if result.errors:
        print(f"--- Validation Failed: {len(result.errors)} errors found ---", file=sys.stderr)
        return 1
    if not result.questions:
        print("--- Validation Failed: no questions found ---", file=sys.stderr)
        return 1
    print(f"--- Validation Passed: {len(result.questions)} questions are correct! ---")
    return 0


def main(args: list[str] | None = None) -> None:
    # Row problems are printed below; keep the parser's log quiet.
    logging.basicConfig(level=logging.ERROR, format="%(name)s | %(message)s")
    args = sys.argv[1:] if args is None else args
    path = DEFAULT_FILE
    for i, a in enumerate(args):
        if a == "--file" and i + 1 < len(args):
            path = Path(args[i + 1])
    sys.exit(validate_file(path))


if __name__ == "__main__":
    main()
