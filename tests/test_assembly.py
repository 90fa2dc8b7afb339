"""Tests for the sentence assembly engine."""
from __future__ import annotations

import random
from collections import Counter

import pytest

from sentence_builder.assembly import (
    COMPLETE,
    IN_PROGRESS,
    INITIALIZED,
    SentenceAssembly,
    normalize_sentence,
    split_template,
)
from sentence_builder.errors import IncompleteSentenceError


def _check_invariant(a: SentenceAssembly):
    q = a.question
    placed = [w for w in a.slots if w is not None]
    assert len(a.word_pool) + len(placed) == len(q.scrambled_words) + 1
    assert Counter(a.word_pool + placed) == Counter([*q.scrambled_words, q.distractor])


class TestNormalizeSentence:
    def test_collapses_and_trims(self):
        assert normalize_sentence("  very   happy\tI'm \n glad ") == "very happy I'm glad"


class TestSplitTemplate:
    def test_segments(self):
        segs = split_template("_____ _____ I'm _____")
        assert [s.slot for s in segs if s.is_blank] == [0, 1, 2]
        assert [s.text for s in segs if not s.is_blank] == [" ", " I'm "]

    def test_literal_only(self):
        segs = split_template("No blanks here.")
        assert len(segs) == 1
        assert not segs[0].is_blank


class TestSentenceAssembly:
    def test_initial_state(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        assert a.slots == [None, None, None]
        assert sorted(a.word_pool) == ["glad", "happy", "sad", "very"]
        assert a.state == INITIALIZED
        assert not a.is_complete
        _check_invariant(a)

    def test_scenario_click_order(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        assert a.place_word("very") == 0
        assert a.place_word("happy") == 1
        assert a.place_word("glad") == 2
        assert a.slots == ["very", "happy", "glad"]
        assert a.word_pool == ["sad"]
        assert a.state == COMPLETE
        assert a.finalize() == "very happy I'm glad"

    def test_place_fills_leftmost_empty(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        a.place_word("very")
        a.place_word("happy")
        a.place_word("glad")
        a.remove_word(0)
        a.remove_word(2)
        assert a.place_word("sad") == 0
        assert a.place_word("very") == 2
        _check_invariant(a)

    def test_place_when_full_is_noop(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        for w in ("very", "happy", "glad"):
            a.place_word(w)
        assert a.place_word("sad") is None
        assert a.word_pool == ["sad"]
        _check_invariant(a)

    def test_place_unknown_word_is_noop(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        assert a.place_word("banana") is None
        assert a.slots == [None, None, None]
        assert a.state == INITIALIZED

    def test_same_word_cannot_be_placed_twice(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        assert a.place_word("very") == 0
        assert a.place_word("very") is None
        _check_invariant(a)

    def test_remove_returns_word_to_pool(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        a.place_word("glad")
        assert a.remove_word(0) == "glad"
        assert "glad" in a.word_pool
        assert a.slots == [None, None, None]
        assert a.state == IN_PROGRESS
        _check_invariant(a)

    def test_remove_empty_slot_is_noop(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        assert a.remove_word(1) is None
        assert a.remove_word(99) is None
        assert a.remove_word(-1) is None
        _check_invariant(a)

    def test_finalize_unavailable_until_complete(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        a.place_word("very")
        with pytest.raises(IncompleteSentenceError):
            a.finalize()
        assert not a.to_dict()["can_submit"]

    def test_leftover_need_not_be_distractor(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        for w in ("sad", "happy", "very"):
            a.place_word(w)
        assert a.is_complete
        assert a.word_pool == ["glad"]
        assert a.finalize() == "sad happy I'm very"

    def test_finalize_normalizes_whitespace(self, question_factory, rng):
        q = question_factory(
            template="  I   _____ \t it _____  ",
            words=("like", "a lot"),
            correct="I like it a lot",
        )
        a = SentenceAssembly(q, rng=rng)
        a.place_word("like")
        a.place_word("a lot")
        assert a.finalize() == "I like it a lot"

    def test_duplicate_words(self, question_factory, rng):
        q = question_factory(
            template="_____ _____ _____",
            words=("the", "the", "cat"),
            distractor="the",
            correct="the the cat",
        )
        a = SentenceAssembly(q, rng=rng)
        assert a.place_word("the") == 0
        assert a.place_word("the") == 1
        assert a.word_pool.count("the") == 1
        _check_invariant(a)

    def test_invariant_under_random_play(self, sample_question):
        rng = random.Random(99)
        a = SentenceAssembly(sample_question, rng=rng)
        for _ in range(500):
            if rng.random() < 0.6 and a.word_pool:
                a.place_word(rng.choice(a.word_pool))
            else:
                a.remove_word(rng.randrange(len(a.slots)))
            _check_invariant(a)

    def test_shuffle_covers_all_positions(self, sample_question):
        rng = random.Random(3)
        firsts = Counter(SentenceAssembly(sample_question, rng=rng).word_pool[0] for _ in range(4000))
        assert set(firsts) == {"very", "happy", "glad", "sad"}
        for n in firsts.values():
            assert 800 < n < 1200

    def test_to_dict(self, sample_question, rng):
        a = SentenceAssembly(sample_question, rng=rng)
        a.place_word("very")
        d = a.to_dict()
        assert d["question_id"] == sample_question.id
        assert d["segments"][0] == {"blank": True, "slot": 0, "word": "very"}
        assert d["segments"][1] == {"blank": False, "text": " "}
        assert d["state"] == IN_PROGRESS
        assert len(d["word_pool"]) == 3
