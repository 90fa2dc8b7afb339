from __future__ import annotations

import logging
import time

import httpx

from sentence_builder.providers.base import LLMProvider

log = logging.getLogger("sentence_builder.llm")


class OllamaProvider(LLMProvider):
    def __init__(self, base_url: str = "http://localhost:11434", model: str = "qwen3:8b"):
        self.base_url = base_url.rstrip("/")
        self.model = model

    async def generate(self, prompt: str, temperature: float = 0.7, thinking: bool = True) -> str:
        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        t0 = time.monotonic()
        async with httpx.AsyncClient(timeout=180.0) as client:
            resp = await client.post(
                f"{self.base_url}/api/generate",
                json={
                    "model": self.model,
                    "prompt": prompt,
                    "temperature": temperature,
                    "stream": False,
                    "think": thinking,
                    "format": "json",
                },
            )
            resp.raise_for_status()
            data = resp.json()
        elapsed = time.monotonic() - t0
        response = data["response"]
        log.info("── RESPONSE (%.1fs, %s tokens) ──\n%s", elapsed, data.get("eval_count", "?"), response)
        return response

    def name(self) -> str:
        return f"ollama/{self.model}"
