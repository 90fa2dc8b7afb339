from __future__ import annotations

from dataclasses import dataclass, field

DIFFICULTIES = ("Middle School", "High School", "University")


@dataclass(frozen=True)
class Question:
    id: str
    context: str  # Person A's line
    template: str  # Person B's reply with _____ blanks
    scrambled_words: tuple[str, ...]
    correct_sentence: str
    distractor: str
    difficulty: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "context": self.context,
            "template": self.template,
            "scrambled_words": list(self.scrambled_words),
            "correct_sentence": self.correct_sentence,
            "distractor": self.distractor,
            "difficulty": self.difficulty,
        }


@dataclass(frozen=True)
class RowError:
    row: int
    question_id: str | None
    kind: str  # malformed | invalid
    reason: str

    def __str__(self) -> str:
        if self.question_id:
            return f"Row {self.row} [ID: {self.question_id}]: {self.reason}"
        return f"Row {self.row}: {self.reason}"


@dataclass(frozen=True)
class AnswerRecord:
    question_id: str
    user_answer: str
    correct_answer: str
    is_correct: bool

    def to_dict(self) -> dict:
        return {
            "question_id": self.question_id,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
        }


@dataclass
class SessionResult:
    score: int
    total_questions: int
    time_taken: float  # seconds
    answers: list[AnswerRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "total_questions": self.total_questions,
            "time_taken": round(self.time_taken, 1),
            "answers": [a.to_dict() for a in self.answers],
        }
