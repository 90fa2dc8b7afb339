"""Prompt templates for question generation."""
from __future__ import annotations

LEVEL_DESCRIPTIONS = {
    "Middle School": "middle school learners (everyday topics: family, hobbies, school life, weekend plans)",
    "High School": "high school learners (school clubs, part-time jobs, exams, travel, opinions on current topics)",
    "University": (
        "US undergraduate students (academic discussions, campus life, internship "
        "interviews, complex social interactions)"
    ),
}

BUILD_SENTENCE_PROMPT = """\
Generate {count} TOEFL Writing "Build a Sentence" tasks.
The level must be for {level_description}.

Format:
- context: A question or statement from Person A.
- template: A response from Person B containing several blanks (_____). \
Each blank is at least three underscores and holds exactly one word.
- scrambledWords: the words that fill the blanks, one per blank, so the number \
of words MUST equal the number of blanks.
- correctSentence: The full, grammatically correct response of Person B.
- distractor: ONE extra word that is grammatically or semantically plausible \
but NOT used in the correct sentence.

Example:
{{
  "id": "example-1",
  "context": "What did the professor say about the upcoming mid-term evaluation?",
  "template": "He mentioned that _____ _____ _____ _____ _____ _____ _____ criteria.",
  "scrambledWords": ["students", "should", "focus", "on", "the", "new", "grading"],
  "correctSentence": "He mentioned that students should focus on the new grading criteria.",
  "distractor": "study"
}}

Use short unique ids. Respond with ONLY a JSON array of objects with keys: \
id, context, template, scrambledWords, correctSentence, distractor. No other text.
"""


def format_build_sentence_prompt(count: int, difficulty: str) -> str:
    level = LEVEL_DESCRIPTIONS.get(difficulty, difficulty)
    return BUILD_SENTENCE_PROMPT.format(count=count, level_description=level)
