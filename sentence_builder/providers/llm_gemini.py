from __future__ import annotations

import os

from sentence_builder.providers.base import LLMProvider

QUESTION_FIELDS = ("id", "context", "template", "scrambledWords", "correctSentence", "distractor")


def question_schema(types):
    """Array-of-questions schema pinned on the response."""
    string = types.Schema(type=types.Type.STRING)
    properties = {name: string for name in QUESTION_FIELDS}
    properties["scrambledWords"] = types.Schema(type=types.Type.ARRAY, items=string)
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(
            type=types.Type.OBJECT,
            properties=properties,
            required=list(QUESTION_FIELDS),
        ),
    )


class GeminiProvider(LLMProvider):
    def __init__(self, model: str = "gemini-2.0-flash"):
        from google import genai
        from google.genai import types
        self._types = types
        self.client = genai.Client(api_key=os.environ.get("GEMINI_API_KEY", ""))
        self.model = model

    async def generate(self, prompt: str, temperature: float = 0.7, thinking: bool = True) -> str:
        resp = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self._types.GenerateContentConfig(
                temperature=temperature,
                response_mime_type="application/json",
                response_schema=question_schema(self._types),
            ),
        )
        return resp.text or ""

    def name(self) -> str:
        return f"gemini/{self.model}"
