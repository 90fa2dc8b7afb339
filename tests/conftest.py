"""Shared test fixtures."""
from __future__ import annotations

import random

import pytest

from sentence_builder.models import Question
from sentence_builder.selector import QuestionPool


def make_question(
    qid: str = "q1",
    difficulty: str = "University",
    template: str = "_____ _____ I'm _____",
    words: tuple[str, ...] = ("happy", "very", "glad"),
    distractor: str = "sad",
    correct: str = "very happy I'm glad",
) -> Question:
    return Question(
        id=qid,
        context="How are you feeling today?",
        template=template,
        scrambled_words=words,
        correct_sentence=correct,
        distractor=distractor,
        difficulty=difficulty,
    )


@pytest.fixture
def sample_question():
    """The 'very happy I'm glad' question."""
    return make_question()


@pytest.fixture
def sample_questions():
    """Five University, three High School and two Middle School questions."""
    questions = [make_question(f"u-{i}", "University") for i in range(5)]
    questions += [make_question(f"h-{i}", "High School") for i in range(3)]
    questions += [make_question(f"m-{i}", "Middle School") for i in range(2)]
    return questions


@pytest.fixture
def pool(sample_questions):
    return QuestionPool(sample_questions)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def questions_csv_content():
    """Minimal questions file: three good rows and one per failure kind."""
    return """\
id|context|template|scrambledWords|correctSentence|distractor|difficulty
q1|Why are you so happy?|_____ _____ I'm _____|["happy","very","glad"]|very happy I'm glad|sad|Middle School
q2|Are you coming to the lecture?|I _____ _____ _____ _____ late.|["might","be","a","little"]|I might be a little late.|very|University
q3|What did the coach say?|She told _____ _____ _____ harder.|["us","to","practice"]|She told us to practice harder.|play|High School
q4|Missing difficulty|I _____ it.|["like"]|I like it.|love
q5|Bad JSON|I _____ it.|["like"|I like it.|love|University
q6|Mismatch|_____ _____ _____|["one","two"]|one two three|four|University
q7|Bad level|I _____ it.|["like"]|I like it.|love|College
q1|Duplicate|I _____ it.|["like"]|I like it.|love|University
"""


@pytest.fixture
def questions_file(tmp_path, questions_csv_content):
    path = tmp_path / "questions.csv"
    path.write_text(questions_csv_content)
    return path


@pytest.fixture
def question_factory():
    return make_question
