"""Test fixtures for FAQ Assistant."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Mapping, Sequence

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from faq_assistant.errors import FetchError  # noqa: E402
from faq_assistant.ingest.embeddings import HashedEmbeddingClient  # noqa: E402
from faq_assistant.ingest.fetcher import FetchedPage  # noqa: E402
from faq_assistant.store import InMemoryVectorStore  # noqa: E402

TEST_DIM = 256


class StubFetcher:
    """Serve canned pages keyed by URL; unknown URLs answer 404."""

    def __init__(self, pages: Mapping[str, str] | None = None, statuses: Mapping[str, int] | None = None) -> None:
        self.pages = dict(pages or {})
        self.statuses = dict(statuses or {})
        self.requested: list[str] = []

    def fetch(self, url: str) -> FetchedPage:
        self.requested.append(url)
        status = self.statuses.get(url, 200 if url in self.pages else 404)
        if status >= 400:
            raise FetchError(f"Failed to fetch URL: {status} Not Found")
        return FetchedPage(url=url, status_code=status, text=self.pages[url])


class StubCompletion:
    """Return a fixed reply and remember every request."""

    def __init__(self, reply: str = "Here is what I found.") -> None:
        self.reply = reply
        self.calls: list[dict[str, object]] = []

    def complete(self, messages: Sequence[Mapping[str, str]], temperature: float = 0.7, max_tokens: int = 500) -> str:
        self.calls.append({"messages": list(messages), "temperature": temperature, "max_tokens": max_tokens})
        return self.reply

    @property
    def last_system_prompt(self) -> str:
        return self.calls[-1]["messages"][0]["content"]


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("FAQA_DB_PATH", str(tmp_path / "kb.db"))
    monkeypatch.setenv("FAQA_EMBEDDING_BACKEND", "hashed")
    monkeypatch.setenv("FAQA_EMBEDDING_DIM", str(TEST_DIM))
    monkeypatch.delenv("FAQA_CONFIG", raising=False)

    from faq_assistant.api import dependencies as deps

    deps.reset_dependencies()
    yield
    deps.reset_dependencies()


@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore(dim=TEST_DIM)


@pytest.fixture
def embedder() -> HashedEmbeddingClient:
    return HashedEmbeddingClient(dim=TEST_DIM)


@pytest.fixture
def completion() -> StubCompletion:
    return StubCompletion()


@pytest.fixture(scope="session")
def faq_html() -> str:
    return """
    <html>
      <head><title>FAQ | Example</title><style>body { color: red; }</style></head>
      <body>
        <header>Example Inc</header>
        <nav><a href="/">Home</a> <a href="/pricing">Pricing</a></nav>
        <main>
          Contact us at
            help@example.com
        </main>
        <script>var tracking = true;</script>
        <footer>Copyright</footer>
      </body>
    </html>
    """
