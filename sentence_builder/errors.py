"""Exceptions raised past the ingestion, selection and session boundaries.

Row-level problems are never raised: they are collected as
:class:`~sentence_builder.models.RowError` diagnostics instead.
"""
from __future__ import annotations


class SentenceBuilderError(Exception):
    pass


class SourceUnreachableError(SentenceBuilderError):
    """The question file or URL could not be read."""


class PoolEmptyError(SentenceBuilderError):
    """Ingestion finished without a single valid question."""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class NoQuestionsForDifficultyError(SentenceBuilderError):
    def __init__(self, difficulty: str):
        super().__init__(f"No questions available for difficulty '{difficulty}'")
        self.difficulty = difficulty


class GenerationError(SentenceBuilderError):
    """The generative service answered with something we cannot use."""


class IncompleteSentenceError(SentenceBuilderError, ValueError):
    pass


class SessionFinishedError(SentenceBuilderError):
    pass
