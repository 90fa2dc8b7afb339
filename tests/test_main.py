"""Tests for the command-line entry point."""
from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from sentence_builder import __main__ as cli
from sentence_builder.config import Settings


class FakeLLM:
    async def generate(self, prompt: str, temperature: float = 0.7, thinking: bool = True) -> str:
        return json.dumps([{
            "id": "gen-1",
            "context": "Are you free tonight?",
            "template": "I _____ _____ to study.",
            "scrambledWords": ["have", "plans"],
            "correctSentence": "I have plans to study.",
            "distractor": "had",
        }])

    def name(self) -> str:
        return "fake-llm"


def _run(argv):
    with patch("sys.argv", ["sentence_builder", *argv]):
        cli.main()


class TestMain:
    def test_unknown_command(self, capsys):
        with pytest.raises(SystemExit) as exc:
            _run(["dance"])
        assert exc.value.code == 1
        assert "Unknown command" in capsys.readouterr().out

    def test_validate(self, questions_file):
        with pytest.raises(SystemExit) as exc:
            _run(["validate", "--file", str(questions_file)])
        assert exc.value.code == 1

    def test_generate_prints_rows(self, capsys):
        with patch("sentence_builder.config.load_settings", return_value=Settings()), \
             patch("sentence_builder.question_generator.get_llm", return_value=FakeLLM()):
            _run(["generate", "--count", "1", "--difficulty", "High School"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("id|context|template")
        assert lines[1] == 'gen-1|Are you free tonight?|I _____ _____ to study.|["have", "plans"]|I have plans to study.|had|High School'

    def test_generate_bad_difficulty(self):
        with patch("sentence_builder.config.load_settings", return_value=Settings()):
            with pytest.raises(SystemExit):
                _run(["generate", "--difficulty", "Expert"])

    def test_stats(self, questions_file, capsys):
        settings = Settings(questions_source=str(questions_file))
        with patch("sentence_builder.config.load_settings", return_value=settings):
            _run(["stats"])
        out = capsys.readouterr().out
        assert "Total questions:    3" in out
        assert "Rejected rows:      5" in out
