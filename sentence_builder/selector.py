"""In-memory question pool and per-session question selection."""
from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Iterator

from sentence_builder.errors import NoQuestionsForDifficultyError
from sentence_builder.models import DIFFICULTIES, Question, RowError

log = logging.getLogger("sentence_builder.pool")


class QuestionPool:
    """Validated questions for one app session, keyed by id."""

    def __init__(self, questions: Iterable[Question] = (), errors: list[RowError] | None = None):
        self._questions: dict[str, Question] = {}
        self.errors: list[RowError] = list(errors or [])
        self.add(questions)

    def add(self, questions: Iterable[Question]) -> list[Question]:
        """Add questions, skipping ids already in the pool. Returns those added."""
        added = []
        for q in questions:
            if q.id in self._questions:
                log.warning("Skipping question '%s': id already in pool", q.id)
                continue
            self._questions[q.id] = q
            added.append(q)
        return added

    def for_difficulty(self, difficulty: str) -> list[Question]:
        return [q for q in self._questions.values() if q.difficulty == difficulty]

    def counts(self) -> dict[str, int]:
        counts = {d: 0 for d in DIFFICULTIES}
        for q in self._questions.values():
            counts[q.difficulty] = counts.get(q.difficulty, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions.values())


def select_questions(
    pool: QuestionPool,
    count: int,
    difficulty: str,
    rng: random.Random | None = None,
) -> list[Question]:
    """Draw up to *count* distinct questions of *difficulty* in random order.

    Asking for more than are available returns all of them.
    """
    candidates = pool.for_difficulty(difficulty)
    if not candidates:
        raise NoQuestionsForDifficultyError(difficulty)
    (rng or random).shuffle(candidates)
    return candidates[:max(0, min(count, len(candidates)))]
