"""One timed quiz session: selected questions, assembly, timer and score."""
from __future__ import annotations

import logging
import random
import time
import uuid
from collections.abc import Callable

from sentence_builder.assembly import SentenceAssembly
from sentence_builder.errors import SessionFinishedError
from sentence_builder.models import AnswerRecord, Question, SessionResult
from sentence_builder.scoring import SessionScorer
from sentence_builder.timer import SessionTimer

log = logging.getLogger("sentence_builder.session")


class QuizSession:
    def __init__(
        self,
        questions: list[Question],
        time_limit: int,
        difficulty: str = "",
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
    ):
        self.id = uuid.uuid4().hex
        self.questions = list(questions)
        self.difficulty = difficulty
        self.rng = rng
        self.scorer = SessionScorer(len(self.questions), clock=clock)
        self.timer = SessionTimer(time_limit, self._time_up, interval=tick_interval)
        self.current_index = 0
        self.assembly: SentenceAssembly | None = None
        self.finished = False
        self.finish_reason = ""
        if self.questions:
            self.assembly = SentenceAssembly(self.questions[0], rng=rng)
        else:
            self.finish("completed")

    @property
    def current_question(self) -> Question | None:
        if self.finished or self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    def start_timer(self) -> None:
        if not self.finished:
            self.timer.start()

    def _require_active(self) -> SentenceAssembly:
        if self.finished or self.assembly is None:
            raise SessionFinishedError(f"Session {self.id} is finished")
        return self.assembly

    def place_word(self, word: str) -> int | None:
        return self._require_active().place_word(word)

    def remove_word(self, slot: int) -> str | None:
        return self._require_active().remove_word(slot)

    def submit(self) -> AnswerRecord:
        """Score the current sentence and move on to the next question."""
        assembly = self._require_active()
        sentence = assembly.finalize()
        answer = self.scorer.record(assembly.question, sentence)
        log.info("Session %s: %s %s", self.id[:8], answer.question_id,
                 "correct" if answer.is_correct else "wrong")

        self.current_index += 1
        if self.current_index >= len(self.questions):
            self.assembly = None
            self.finish("completed")
        else:
            self.assembly = SentenceAssembly(self.questions[self.current_index], rng=self.rng)
        return answer

    def _time_up(self) -> None:
        self.finish("timeout")

    def finish(self, reason: str = "completed") -> SessionResult:
        if not self.finished:
            self.finished = True
            self.finish_reason = reason
            self.assembly = None
            self.timer.stop()
            self.scorer.close()
            log.info("Session %s finished (%s): %d/%d", self.id[:8], reason,
                     self.scorer.score, len(self.questions))
        return self.scorer.result()

    def result(self) -> SessionResult:
        return self.scorer.result()

    def to_dict(self) -> dict:
        data = {
            "session_id": self.id,
            "difficulty": self.difficulty,
            "finished": self.finished,
            "progress": {
                "current": min(self.current_index + 1, len(self.questions)),
                "total": len(self.questions),
                "answered": len(self.scorer.answers),
                "correct": self.scorer.score,
            },
            "time_remaining": self.timer.remaining,
        }
        if self.finished:
            data["finish_reason"] = self.finish_reason
            data["result"] = self.result().to_dict()
        else:
            q = self.current_question
            data["question"] = {"id": q.id, "context": q.context}
            data["assembly"] = self.assembly.to_dict()
        return data
