"""Ask an LLM for new Build-a-Sentence questions and vet them like file rows."""
from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING

import httpx

from sentence_builder.errors import GenerationError, SourceUnreachableError
from sentence_builder.models import DIFFICULTIES, Question, RowError
from sentence_builder.parsers.question_parser import validate_record
from sentence_builder.prompts import format_build_sentence_prompt

if TYPE_CHECKING:
    from sentence_builder.config import Settings
    from sentence_builder.providers.base import LLMProvider

_log = logging.getLogger("sentence_builder.qgen")


def get_llm(settings: Settings) -> LLMProvider:
    if settings.llm_provider == "ollama":
        from sentence_builder.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=settings.ollama_url, model=settings.llm_model)
    elif settings.llm_provider == "anthropic":
        from sentence_builder.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider()
    elif settings.llm_provider == "openai":
        from sentence_builder.providers.llm_openai import OpenAIProvider
        return OpenAIProvider()
    elif settings.llm_provider == "gemini":
        from sentence_builder.providers.llm_gemini import GeminiProvider
        return GeminiProvider()
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")


def _find_balanced(text: str, open_ch: str, close_ch: str) -> list[str]:
    """Find balanced top-level ``open_ch … close_ch`` substrings in *text*."""
    results: list[str] = []
    i = 0
    while i < len(text):
        if text[i] != open_ch:
            i += 1
            continue
        depth = 0
        in_str = False
        escape = False
        for j in range(i, len(text)):
            ch = text[j]
            if escape:
                escape = False
                continue
            if ch == "\\":
                escape = True
                continue
            if ch == '"':
                in_str = not in_str
                continue
            if in_str:
                continue
            if ch == open_ch:
                depth += 1
            elif ch == close_ch:
                depth -= 1
                if depth == 0:
                    results.append(text[i : j + 1])
                    i = j + 1
                    break
        else:
            # Unbalanced: skip this opening bracket
            i += 1
    return results


def _extract_items(text: str) -> list | None:
    """Pull the list of question objects out of an LLM response.

    Accepts a bare array, a code-fenced array, or an object wrapping the array
    under ``questions``.  Strips ``<think>`` blocks first.
    """
    text = re.sub(r"<think>.*?</think>", "", text, flags=re.DOTALL).strip()

    m = re.search(r"```(?:json)?\s*\n?(.*?)\s*\n?```", text, re.DOTALL)
    candidates = [m.group(1)] if m else []
    candidates.append(text)
    candidates += reversed(_find_balanced(text, "[", "]"))
    candidates += reversed(_find_balanced(text, "{", "}"))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and isinstance(data.get("questions"), list):
            data = data["questions"]
        if isinstance(data, list) and any(isinstance(d, dict) for d in data):
            return data
    return None


def validate_generated(
    items: list,
    difficulty: str,
    seen_ids: set[str] | None = None,
) -> tuple[list[Question], list[RowError]]:
    """Run every generated item through the same checks as file rows."""
    seen_ids = set() if seen_ids is None else seen_ids
    questions: list[Question] = []
    errors: list[RowError] = []
    for n, item in enumerate(items, 1):
        if not isinstance(item, dict):
            errors.append(RowError(n, None, "malformed", f"expected object, got {type(item).__name__}"))
            continue
        fields = dict(item)
        if not fields.get("difficulty"):
            fields["difficulty"] = difficulty
        outcome = validate_record(fields, n, seen_ids)
        if isinstance(outcome, RowError):
            errors.append(outcome)
        else:
            questions.append(outcome)
    for err in errors:
        _log.warning("Generated %s", err)
    return questions, errors


async def generate_questions(
    llm: LLMProvider,
    count: int = 9,
    difficulty: str = "University",
    seen_ids: set[str] | None = None,
    thinking: bool = False,
) -> list[Question]:
    """One request to the LLM; returns only the items that pass validation.

    *seen_ids* holds ids already taken (e.g. the current pool) so generated
    duplicates are dropped.
    """
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"Unknown difficulty: {difficulty}")

    prompt = format_build_sentence_prompt(count, difficulty)
    _log.info("Generating %d %s questions with %s", count, difficulty, llm.name())
    try:
        response = await llm.generate(prompt, temperature=0.7, thinking=thinking)
    except httpx.HTTPError as e:
        raise SourceUnreachableError(f"{llm.name()} unreachable: {e}") from e

    items = _extract_items(response)
    if items is None:
        _log.debug("Raw response: %.300s", response)
        raise GenerationError("Failed to parse generated questions: no JSON array in response")

    questions, errors = validate_generated(items, difficulty, seen_ids)
    _log.info("Generated %d valid questions (%d rejected)", len(questions), len(errors))
    return questions
