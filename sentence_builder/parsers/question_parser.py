"""Parse the pipe-delimited questions file into Question objects.

One header row, then one question per line:
  id|context|template|scrambledWordsJSON|correctSentence|distractor|difficulty

Bad rows never abort a load. Each rejected row is logged and returned as a
RowError so the standalone validator can report every problem at once.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from sentence_builder.errors import PoolEmptyError, SourceUnreachableError
from sentence_builder.models import DIFFICULTIES, Question, RowError
from sentence_builder.selector import QuestionPool

log = logging.getLogger("sentence_builder.ingest")

BLANK_RE = re.compile(r"_{3,}")
COLUMNS = ("id", "context", "template", "scrambledWords", "correctSentence", "distractor", "difficulty")

MALFORMED = "malformed"
INVALID = "invalid"


@dataclass
class ParseResult:
    questions: list[Question] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)


def count_blanks(template: str) -> int:
    return len(BLANK_RE.findall(template))


def _parse_word_list(raw) -> list[str] | None:
    """Accept a JSON string or an already-decoded list; None if neither works."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return None
    if not isinstance(raw, list) or not all(isinstance(w, str) for w in raw):
        return None
    return raw


def validate_record(fields: dict, row: int, seen_ids: set[str]) -> Question | RowError:
    """Build a Question from already-split fields, or explain why not.

    *fields* uses the file's column names.  ``scrambledWords`` may be a JSON
    string (file rows) or a list (generated payloads).  Accepted ids are added
    to *seen_ids*.
    """
    qid = str(fields.get("id") or "").strip()
    ref = qid or None

    words = _parse_word_list(fields.get("scrambledWords"))
    if words is None:
        return RowError(row, ref, MALFORMED, "Failed to parse scrambledWords JSON.")

    context = str(fields.get("context") or "").strip()
    template = str(fields.get("template") or "").strip()
    correct = str(fields.get("correctSentence") or "").strip()
    distractor = str(fields.get("distractor") or "").strip()
    difficulty = str(fields.get("difficulty") or "").strip()

    missing = [
        name for name, value in (
            ("id", qid),
            ("context", context),
            ("template", template),
            ("correctSentence", correct),
            ("distractor", distractor),
            ("difficulty", difficulty),
        ) if not value
    ]
    if not words:
        missing.append("scrambledWords")
    if missing:
        return RowError(row, ref, INVALID, f"Missing required field(s): {', '.join(missing)}")

    # Only reachable for generated payloads; file rows are already split on it.
    if any("|" in v for v in (qid, context, template, correct, distractor, *words)):
        return RowError(row, ref, INVALID, "Fields must not contain '|'")

    blanks = count_blanks(template)
    if blanks != len(words):
        return RowError(
            row, ref, INVALID,
            f"Template has {blanks} blanks, but scrambledWords has {len(words)} words.",
        )

    if difficulty not in DIFFICULTIES:
        return RowError(row, ref, INVALID, f"Invalid difficulty '{difficulty}'")

    if qid in seen_ids:
        return RowError(row, ref, INVALID, f"Duplicate id '{qid}' (first occurrence kept)")
    seen_ids.add(qid)

    return Question(
        id=qid,
        context=context,
        template=template,
        scrambled_words=tuple(words),
        correct_sentence=correct,
        distractor=distractor,
        difficulty=difficulty,
    )


def parse_questions(text: str, strict_columns: bool = False) -> ParseResult:
    """Parse the whole file.

    With *strict_columns* any row whose field count is not exactly 7 is
    rejected; otherwise only short rows are, and extra fields are ignored.
    Row numbers are 1-based physical line numbers.
    """
    result = ParseResult()
    seen_ids: set[str] = set()
    header_seen = False

    for lineno, line in enumerate(text.splitlines(), 1):
        if not line.strip():
            continue
        if not header_seen:
            header_seen = True
            continue

        values = line.split("|")
        if len(values) < len(COLUMNS) or (strict_columns and len(values) != len(COLUMNS)):
            err = RowError(
                lineno, values[0].strip() or None, MALFORMED,
                f"Expected {len(COLUMNS)} columns, but found {len(values)}",
            )
            log.warning("%s", err)
            result.errors.append(err)
            continue

        fields = dict(zip(COLUMNS, (v.strip() for v in values)))
        outcome = validate_record(fields, lineno, seen_ids)
        if isinstance(outcome, RowError):
            log.warning("%s", outcome)
            result.errors.append(outcome)
        else:
            result.questions.append(outcome)

    log.info("Parsed %d questions (%d rows rejected)", len(result.questions), len(result.errors))
    return result


def format_question_row(q: Question) -> str:
    """Render a question as one line of the questions file."""
    return "|".join([
        q.id,
        q.context,
        q.template,
        json.dumps(list(q.scrambled_words), ensure_ascii=False),
        q.correct_sentence,
        q.distractor,
        q.difficulty,
    ])


HEADER_ROW = "|".join(COLUMNS)


async def fetch_questions_text(source: str | Path) -> str:
    """Read the questions file from disk or over HTTP."""
    src = str(source)
    if src.startswith(("http://", "https://")):
        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                resp = await client.get(src)
                resp.raise_for_status()
                return resp.text
        except httpx.HTTPError as e:
            raise SourceUnreachableError(f"Failed to fetch questions from {src}: {e}") from e
    try:
        return Path(src).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnreachableError(f"Failed to read questions file {src}: {e}") from e


async def load_question_pool(source: str | Path) -> QuestionPool:
    """Fetch, parse and wrap the questions in a QuestionPool.

    Raises PoolEmptyError if not a single row survives validation.
    """
    text = await fetch_questions_text(source)
    parsed = parse_questions(text)
    if not parsed.questions:
        raise PoolEmptyError(
            f"No valid questions in {source} ({len(parsed.errors)} rows rejected)",
            parsed.errors,
        )
    return QuestionPool(parsed.questions, errors=parsed.errors)
