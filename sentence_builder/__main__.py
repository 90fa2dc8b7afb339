"""CLI entry point for sentence-builder.

Usage:
  python -m sentence_builder serve [--port PORT] [--host HOST]
  python -m sentence_builder stop
  python -m sentence_builder status
  python -m sentence_builder validate [--file PATH]
  python -m sentence_builder generate [--count N] [--difficulty LEVEL]
  python -m sentence_builder stats
"""
from __future__ import annotations

import asyncio
import os
import signal
import sys
from pathlib import Path

PID_FILE = Path(__file__).resolve().parent.parent / ".server.pid"


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "stop":
        _stop()
    elif command == "status":
        _status()
    elif command == "validate":
        from sentence_builder.validate import main as validate_main
        validate_main(args[1:])
    elif command == "generate":
        _generate(args[1:])
    elif command == "stats":
        _stats()
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, stop, status, validate, generate, stats")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _read_pid() -> int | None:
    """Read PID from file, return None if stale or missing."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
        os.kill(pid, 0)
        return pid
    except (ValueError, ProcessLookupError, PermissionError):
        PID_FILE.unlink(missing_ok=True)
        return None


def _stop() -> bool:
    """Stop a running server. Returns True if a server was stopped."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return False
    try:
        os.kill(pid, signal.SIGTERM)
        print(f"Stopped server (PID {pid}).")
        return True
    except ProcessLookupError:
        print("Server was not running (stale PID file removed).")
        return False
    finally:
        PID_FILE.unlink(missing_ok=True)


def _status():
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
    else:
        print(f"Server is running (PID {pid}).")


def _serve(args: list[str]):
    import uvicorn

    existing = _read_pid()
    if existing is not None:
        print(f"Server already running (PID {existing}). Use 'stop' first.")
        sys.exit(1)

    port = int(_parse_flag(args, "--port", "8765"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    PID_FILE.write_text(str(os.getpid()))

    print(f"Starting Sentence Builder on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    try:
        uvicorn.run(
            "sentence_builder.app:app",
            host=host,
            port=port,
            reload=False,
            timeout_graceful_shutdown=5,
        )
    finally:
        PID_FILE.unlink(missing_ok=True)


def _generate(args: list[str]):
    from sentence_builder.config import load_settings
    from sentence_builder.errors import GenerationError, SourceUnreachableError
    from sentence_builder.models import DIFFICULTIES
    from sentence_builder.parsers.question_parser import HEADER_ROW, format_question_row
    from sentence_builder.question_generator import generate_questions, get_llm

    settings = load_settings()
    count = int(_parse_flag(args, "--count", str(settings.session_size)))
    difficulty = _parse_flag(args, "--difficulty", settings.default_difficulty)
    if difficulty not in DIFFICULTIES:
        print(f"Unknown difficulty: {difficulty} (choose from {', '.join(DIFFICULTIES)})")
        sys.exit(1)

    try:
        llm = get_llm(settings)
    except ValueError as e:
        print(e)
        sys.exit(1)

    print(f"Generating {count} {difficulty} questions using {llm.name()}...", file=sys.stderr)
    try:
        questions = asyncio.run(
            generate_questions(llm, count=count, difficulty=difficulty, thinking=settings.llm_thinking)
        )
    except (GenerationError, SourceUnreachableError) as e:
        print(f"Generation failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(HEADER_ROW)
    for q in questions:
        print(format_question_row(q))
    print(f"\nGenerated {len(questions)} valid questions", file=sys.stderr)


def _stats():
    from sentence_builder.config import load_settings
    from sentence_builder.errors import PoolEmptyError, SourceUnreachableError
    from sentence_builder.parsers.question_parser import load_question_pool

    settings = load_settings()
    try:
        pool = asyncio.run(load_question_pool(settings.questions_location))
    except (PoolEmptyError, SourceUnreachableError) as e:
        print(e)
        sys.exit(1)

    print("Sentence Builder Stats")
    print("=" * 40)
    print(f"Source:             {settings.questions_source}")
    print(f"Total questions:    {len(pool)}")
    for difficulty, n in pool.counts().items():
        print(f"  {difficulty + ':':<18}{n}")
    print(f"Rejected rows:      {len(pool.errors)}")


if __name__ == "__main__":
    main()
