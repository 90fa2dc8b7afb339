"""Tests for answer scoring and session results."""
from __future__ import annotations

from sentence_builder.scoring import SessionScorer, is_correct_answer


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class TestIsCorrectAnswer:
    def test_exact(self):
        assert is_correct_answer("very happy I'm glad", "very happy I'm glad")

    def test_whitespace_normalized(self):
        assert is_correct_answer("very  happy I'm glad ", " very happy  I'm glad")

    def test_case_sensitive(self):
        assert not is_correct_answer("Very happy I'm glad", "very happy I'm glad")

    def test_different_order(self):
        assert not is_correct_answer("happy very I'm glad", "very happy I'm glad")


class TestSessionScorer:
    def test_accumulates(self, question_factory):
        clock = FakeClock()
        scorer = SessionScorer(3, clock=clock)
        q1, q2 = question_factory("a"), question_factory("b")

        first = scorer.record(q1, "very happy I'm glad")
        second = scorer.record(q2, "sad happy I'm very")
        clock.now += 42.5

        assert first.is_correct
        assert not second.is_correct
        result = scorer.result()
        assert result.score == 1
        assert result.total_questions == 3
        assert result.time_taken == 42.5
        assert [a.question_id for a in result.answers] == ["a", "b"]
        assert result.answers[1].user_answer == "sad happy I'm very"
        assert result.answers[1].correct_answer == "very happy I'm glad"

    def test_close_freezes_time(self):
        clock = FakeClock()
        scorer = SessionScorer(1, clock=clock)
        clock.now += 10
        scorer.close()
        clock.now += 100
        assert scorer.result().time_taken == 10
        scorer.close()
        assert scorer.result().time_taken == 10

    def test_to_dict(self, sample_question):
        clock = FakeClock()
        scorer = SessionScorer(1, clock=clock)
        scorer.record(sample_question, "very happy I'm glad")
        d = scorer.result().to_dict()
        assert d["score"] == 1
        assert d["answers"][0] == {
            "question_id": "q1",
            "user_answer": "very happy I'm glad",
            "correct_answer": "very happy I'm glad",
            "is_correct": True,
        }
