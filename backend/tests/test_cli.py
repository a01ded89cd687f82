"""Tests for the command-line client."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from faq_assistant.cli import main as cli


class FakeResponse:
    def __init__(self, status: int, payload: dict) -> None:
        self.status_code = status
        self.ok = status < 400
        self._payload = payload
        self.text = json.dumps(payload)

    def json(self) -> dict:
        return self._payload


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    recorded: list[tuple] = []

    def fake_request(method, url, timeout=None, **kwargs):
        recorded.append((method, url, kwargs))
        if url.endswith("/api/chat") and not kwargs["json"].get("message"):
            return FakeResponse(400, {"error": "ValidationError", "message": "Message is required"})
        return FakeResponse(200, {"success": True, "jobId": "job_1", "pagesCrawled": 1})

    monkeypatch.setattr(cli.requests, "request", fake_request)
    monkeypatch.delenv("FAQA_HOST", raising=False)
    return recorded


def test_crawl_command(calls: list[tuple]) -> None:
    result = CliRunner().invoke(cli.app, ["crawl", "https://example.com/faq", "--selector", "main"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["jobId"] == "job_1"
    method, url, kwargs = calls[0]
    assert (method, url) == ("POST", "http://127.0.0.1:8787/api/crawl")
    assert kwargs["json"] == {"url": "https://example.com/faq", "maxPages": 10, "followLinks": False, "selector": "main"}


def test_chat_command_error_exit(calls: list[tuple]) -> None:
    result = CliRunner().invoke(cli.app, ["chat", "", "--host", "http://kb.local/"])
    assert result.exit_code == 1
    assert calls[0][1] == "http://kb.local/api/chat"
