"""Compare assembled sentences with the reference and total up a session."""
from __future__ import annotations

import time
from collections.abc import Callable

from sentence_builder.assembly import normalize_sentence
from sentence_builder.models import AnswerRecord, Question, SessionResult


def is_correct_answer(user_answer: str, correct_sentence: str) -> bool:
    return normalize_sentence(user_answer) == normalize_sentence(correct_sentence)


class SessionScorer:
    def __init__(self, total_questions: int, clock: Callable[[], float] = time.monotonic):
        self.total_questions = total_questions
        self.clock = clock
        self.started = clock()
        self.ended: float | None = None
        self.score = 0
        self.answers: list[AnswerRecord] = []

    def record(self, question: Question, user_answer: str) -> AnswerRecord:
        correct = is_correct_answer(user_answer, question.correct_sentence)
        if correct:
            self.score += 1
        answer = AnswerRecord(
            question_id=question.id,
            user_answer=normalize_sentence(user_answer),
            correct_answer=question.correct_sentence,
            is_correct=correct,
        )
        self.answers.append(answer)
        return answer

    def close(self) -> None:
        """Freeze the elapsed time."""
        if self.ended is None:
            self.ended = self.clock()

    @property
    def elapsed(self) -> float:
        end = self.ended if self.ended is not None else self.clock()
        return end - self.started

    def result(self) -> SessionResult:
        return SessionResult(
            score=self.score,
            total_questions=self.total_questions,
            time_taken=self.elapsed,
            answers=list(self.answers),
        )
