"""Word-by-word sentence assembly for one question.

The learner picks *which* word; the engine picks *which* blank (always the
leftmost empty one).  Clicking a filled blank sends its word back to the pool.
"""
from __future__ import annotations

import random
import re
from dataclasses import dataclass

from sentence_builder.errors import IncompleteSentenceError
from sentence_builder.models import Question

_SPLIT_RE = re.compile(r"(_{3,})")

INITIALIZED = "initialized"
IN_PROGRESS = "in_progress"
COMPLETE = "complete"


def normalize_sentence(text: str) -> str:
    """Collapse whitespace runs to one space and trim."""
    return " ".join(text.split())


@dataclass(frozen=True)
class Segment:
    text: str = ""
    slot: int | None = None  # set for blanks

    @property
    def is_blank(self) -> bool:
        return self.slot is not None


def split_template(template: str) -> list[Segment]:
    segments: list[Segment] = []
    slot = 0
    for token in _SPLIT_RE.split(template):
        if not token:
            continue
        if _SPLIT_RE.fullmatch(token):
            segments.append(Segment(slot=slot))
            slot += 1
        else:
            segments.append(Segment(text=token))
    return segments


class SentenceAssembly:
    def __init__(self, question: Question, rng: random.Random | None = None):
        self.question = question
        self.segments = split_template(question.template)
        blank_count = sum(1 for s in self.segments if s.is_blank)
        self.slots: list[str | None] = [None] * blank_count
        self.word_pool: list[str] = [*question.scrambled_words, question.distractor]
        (rng or random).shuffle(self.word_pool)
        self._touched = False

    @property
    def state(self) -> str:
        if self.is_complete:
            return COMPLETE
        return IN_PROGRESS if self._touched else INITIALIZED

    @property
    def is_complete(self) -> bool:
        return all(w is not None for w in self.slots)

    def _first_empty_slot(self) -> int | None:
        for i, w in enumerate(self.slots):
            if w is None:
                return i
        return None

    def place_word(self, word: str) -> int | None:
        """Put *word* into the leftmost empty blank; returns the slot or None."""
        slot = self._first_empty_slot()
        if slot is None or word not in self.word_pool:
            return None
        self.word_pool.remove(word)
        self.slots[slot] = word
        self._touched = True
        return slot

    def remove_word(self, slot: int) -> str | None:
        """Return the word in *slot* to the pool; None if nothing was there."""
        if not 0 <= slot < len(self.slots) or self.slots[slot] is None:
            return None
        word = self.slots[slot]
        self.slots[slot] = None
        self.word_pool.append(word)
        self._touched = True
        return word

    def finalize(self) -> str:
        if not self.is_complete:
            empty = sum(1 for w in self.slots if w is None)
            raise IncompleteSentenceError(f"{empty} blank(s) still empty")
        parts = [self.slots[s.slot] if s.is_blank else s.text for s in self.segments]
        return normalize_sentence("".join(parts))

    def to_dict(self) -> dict:
        return {
            "question_id": self.question.id,
            "segments": [
                {"blank": True, "slot": s.slot, "word": self.slots[s.slot]}
                if s.is_blank else {"blank": False, "text": s.text}
                for s in self.segments
            ],
            "slots": list(self.slots),
            "word_pool": list(self.word_pool),
            "state": self.state,
            "can_submit": self.is_complete,
        }
