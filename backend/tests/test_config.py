"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from faq_assistant.core.config import Settings


def test_defaults_without_config(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FAQA_EMBEDDING_BACKEND", "FAQA_EMBEDDING_DIM"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_yaml(Path("/nonexistent/config.yaml"))
    assert settings.embedding_dim == 1536
    assert settings.match_threshold == 0.5
    assert settings.match_count == 5
    assert settings.temperature == 0.7
    assert settings.max_tokens == 500
    assert settings.embedding_max_chars == 8000


def test_yaml_then_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text(
        "embeddings:\n  model: custom-embed\n  dim: 768\n"
        "retrieval:\n  match_threshold: 0.7\n  match_count: 3\n"
        "server:\n  cors_origins: [\"https://faq.example.com\"]\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("FAQA_MATCH_COUNT", "8")
    monkeypatch.setenv("FAQA_EMBEDDING_DIM", "768")
    settings = Settings.from_yaml(config)
    assert settings.embedding_model == "custom-embed"
    assert settings.embedding_dim == 768
    assert settings.match_threshold == 0.7
    assert settings.match_count == 8
    assert settings.cors_origins == ["https://faq.example.com"]


def test_env_origins_split(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAQA_CORS_ORIGINS", "https://a.example, https://b.example")
    settings = Settings.from_yaml(Path("/nonexistent/config.yaml"))
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
