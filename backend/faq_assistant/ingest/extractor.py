"""HTML content extraction."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urldefrag, urljoin, urlparse

import soupsieve
from bs4 import BeautifulSoup

from faq_assistant.errors import EmptyContentError, ValidationError
from faq_assistant.utils.text import normalize

# Never rendered, regardless of selector.
_INVISIBLE_TAGS = ["script", "style", "noscript", "template"]
# Page chrome dropped when the whole body is indexed.
_BOILERPLATE_TAGS = ["head", "title", "nav", "footer", "header"]
# Elements whose boundaries separate words in rendered text.
_BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt", "figcaption", "figure",
    "form", "h1", "h2", "h3", "h4", "h5", "h6", "hr", "li", "main", "ol", "p", "pre", "section",
    "table", "td", "th", "tr", "ul",
]


@dataclass(slots=True)
class ExtractedContent:
    content: str
    title: str


def validate_selector(selector: str) -> None:
    """Raise ``ValidationError`` when ``selector`` is not a valid CSS selector."""
    try:
        soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as exc:
        raise ValidationError(f"Invalid selector {selector!r}: {exc}") from exc


class ContentExtractor:
    """Turn raw HTML into normalized plain text and a title."""

    parser = "html.parser"

    def extract(self, html: str, selector: str | None = None, url: str | None = None) -> ExtractedContent:
        soup = BeautifulSoup(html, self.parser)
        title = _title_of(soup) or (url or "")

        for element in soup(_INVISIBLE_TAGS):
            element.decompose()
        _separate_blocks(soup)

        if selector:
            try:
                matches = soup.select(selector)
            except soupsieve.SelectorSyntaxError as exc:
                raise ValidationError(f"Invalid selector {selector!r}: {exc}") from exc
            parts = [element.get_text() for element in matches]
            content = normalize(" ".join(parts))
        else:
            for element in soup(_BOILERPLATE_TAGS):
                element.decompose()
            root = soup.body or soup
            content = normalize(root.get_text())

        if not content:
            raise EmptyContentError("No content extracted from page")
        return ExtractedContent(content=content, title=title)

    def discover_links(self, html: str, base_url: str) -> list[str]:
        """Return same-host http(s) links in document order, fragments removed."""
        soup = BeautifulSoup(html, self.parser)
        host = urlparse(base_url).netloc.lower()
        seen: set[str] = set()
        links: list[str] = []
        for anchor in soup.select("a[href]"):
            href, _ = urldefrag(urljoin(base_url, anchor["href"]))
            parsed = urlparse(href)
            if parsed.scheme not in {"http", "https"} or parsed.netloc.lower() != host:
                continue
            if href not in seen:
                seen.add(href)
                links.append(href)
        return links


def _separate_blocks(soup: BeautifulSoup) -> None:
    """Pad block-level elements with spaces so inline markup never splits words."""
    for br in soup("br"):
        br.replace_with(" ")
    for element in soup(_BLOCK_TAGS):
        element.insert_before(" ")
        element.append(" ")


def _title_of(soup: BeautifulSoup) -> str:
    if soup.title is None:
        return ""
    return normalize(soup.title.get_text())


__all__ = ["ContentExtractor", "ExtractedContent", "validate_selector"]
