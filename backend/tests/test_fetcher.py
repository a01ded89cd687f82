"""Tests for the page fetcher."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from faq_assistant.errors import FetchError
from faq_assistant.ingest.fetcher import PageFetcher


class FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.headers: dict[str, str] = {}
        self.response = response
        self.error = error
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def _response(status: int, text: str = "", reason: str = "OK"):
    return SimpleNamespace(ok=status < 400, status_code=status, reason=reason, text=text, url="https://e.com/")


def test_fetch_success_sets_user_agent() -> None:
    session = FakeSession(_response(200, "<p>hi</p>"))
    page = PageFetcher(timeout=5, user_agent="faq-test", session=session).fetch("https://e.com/")
    assert page.text == "<p>hi</p>"
    assert session.headers["User-Agent"] == "faq-test"
    assert session.calls == [("https://e.com/", 5)]


def test_fetch_non_success_status() -> None:
    session = FakeSession(_response(404, reason="Not Found"))
    with pytest.raises(FetchError, match="404 Not Found"):
        PageFetcher(session=session).fetch("https://e.com/")


def test_fetch_transport_error() -> None:
    session = FakeSession(error=requests.ConnectionError("connection refused"))
    with pytest.raises(FetchError, match="connection refused"):
        PageFetcher(session=session).fetch("https://e.com/")
