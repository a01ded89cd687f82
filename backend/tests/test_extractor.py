"""Tests for HTML content extraction."""

from __future__ import annotations

import pytest

from faq_assistant.errors import EmptyContentError, ValidationError
from faq_assistant.ingest.extractor import ContentExtractor, validate_selector


def test_selector_text_is_normalized(faq_html: str) -> None:
    extracted = ContentExtractor().extract(faq_html, selector="main", url="https://example.com/faq")
    assert extracted.content == "Contact us at help@example.com"
    assert extracted.title == "FAQ | Example"


def test_body_text_drops_page_chrome(faq_html: str) -> None:
    extracted = ContentExtractor().extract(faq_html)
    assert extracted.content == "Contact us at help@example.com"
    assert "tracking" not in extracted.content
    assert "Copyright" not in extracted.content


def test_selector_concatenates_all_matches() -> None:
    html = "<body><p class='q'>First  question?</p><div>skip</div><p class='q'>Second\nquestion?</p></body>"
    extracted = ContentExtractor().extract(html, selector=".q")
    assert extracted.content == "First question? Second question?"


def test_inline_markup_does_not_split_words() -> None:
    html = (
        "<main>Contact us at <strong>help</strong>@example.com or "
        "<a href=\"/support\">sup<span>port</span></a> pages</main>"
    )
    extracted = ContentExtractor().extract(html, selector="main")
    assert extracted.content == "Contact us at help@example.com or support pages"


def test_block_boundaries_separate_words() -> None:
    html = "<body><h1>Returns</h1><p>Within<br>30 days</p><ul><li>Unused</li><li>Boxed</li></ul></body>"
    extracted = ContentExtractor().extract(html)
    assert extracted.content == "Returns Within 30 days Unused Boxed"


def test_title_falls_back_to_url() -> None:
    html = "<html><head><title>   </title></head><body><p>Hello</p></body></html>"
    extracted = ContentExtractor().extract(html, url="https://example.com/hello")
    assert extracted.title == "https://example.com/hello"


def test_selector_without_matches_is_empty(faq_html: str) -> None:
    with pytest.raises(EmptyContentError):
        ContentExtractor().extract(faq_html, selector="article")


def test_body_with_only_chrome_is_empty() -> None:
    html = "<body><nav>Menu</nav><script>x()</script><footer>f</footer></body>"
    with pytest.raises(EmptyContentError):
        ContentExtractor().extract(html)


def test_invalid_selector_rejected() -> None:
    with pytest.raises(ValidationError):
        validate_selector("main[")


def test_discover_links_same_host_only() -> None:
    html = """
    <a href="/a">A</a>
    <a href="/a#section">A again</a>
    <a href="https://example.com/b?x=1">B</a>
    <a href="https://other.org/c">C</a>
    <a href="mailto:help@example.com">Mail</a>
    """
    links = ContentExtractor().discover_links(html, "https://example.com/faq")
    assert links == ["https://example.com/a", "https://example.com/b?x=1"]
