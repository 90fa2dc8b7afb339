from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "llm_provider": "ollama",
    "llm_model": "qwen3:8b",
    "ollama_url": "http://localhost:11434",
    "llm_thinking": False,
    "questions_source": "data/questions.csv",
    "session_size": 9,
    "time_limit_seconds": 600,
    "default_difficulty": "University",
}


@dataclass
class Settings:
    llm_provider: str = DEFAULTS["llm_provider"]
    llm_model: str = DEFAULTS["llm_model"]
    ollama_url: str = DEFAULTS["ollama_url"]
    llm_thinking: bool = DEFAULTS["llm_thinking"]
    questions_source: str = DEFAULTS["questions_source"]
    session_size: int = DEFAULTS["session_size"]
    time_limit_seconds: int = DEFAULTS["time_limit_seconds"]
    default_difficulty: str = DEFAULTS["default_difficulty"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def questions_location(self) -> str | Path:
        """URL as-is, otherwise a path resolved against the project root."""
        if self.questions_source.startswith(("http://", "https://")):
            return self.questions_source
        return self.project_root / self.questions_source

    def to_dict(self) -> dict:
        return {
            "llm_provider": self.llm_provider,
            "llm_model": self.llm_model,
            "ollama_url": self.ollama_url,
            "llm_thinking": self.llm_thinking,
            "questions_source": self.questions_source,
            "session_size": self.session_size,
            "time_limit_seconds": self.time_limit_seconds,
            "default_difficulty": self.default_difficulty,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
