"""Plain HTTP page fetching."""

from __future__ import annotations

from dataclasses import dataclass

import requests

from faq_assistant.errors import FetchError


@dataclass(slots=True)
class FetchedPage:
    url: str
    status_code: int
    text: str


class PageFetcher:
    """Issue a single GET per page; no retries, no politeness delays."""

    def __init__(
        self,
        timeout: float = 20.0,
        user_agent: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    def fetch(self, url: str) -> FetchedPage:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch URL: {exc}") from exc
        if not response.ok:
            reason = response.reason or "HTTP error"
            raise FetchError(f"Failed to fetch URL: {response.status_code} {reason}")
        return FetchedPage(url=response.url or url, status_code=response.status_code, text=response.text)


__all__ = ["FetchedPage", "PageFetcher"]
