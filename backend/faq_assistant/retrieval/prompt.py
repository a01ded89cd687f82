"""Context window and system instruction assembly."""

from __future__ import annotations

from typing import Sequence

from faq_assistant.models.entities import SearchResult
from faq_assistant.utils.text import excerpt

CONTEXT_SEPARATOR = "\n\n---\n\n"
DEFAULT_EXCERPT_CHARS = 500
NO_CONTEXT = "No relevant documents were found in the knowledge base."

SYSTEM_PROMPT_TEMPLATE = """You are a helpful FAQ assistant. Use the following context from the knowledge base to answer the user's question. If the context doesn't contain relevant information, say so politely and try to be helpful anyway.

Context:
{context}

Instructions:
- Answer based on the provided context when possible
- Be concise and helpful
- If you reference information, mention which document it came from
- If the context doesn't contain the answer, acknowledge that the knowledge base lacks relevant information and provide general guidance if appropriate"""


def build_context(results: Sequence[SearchResult], excerpt_chars: int = DEFAULT_EXCERPT_CHARS) -> str:
    """Render results in the order given; that order tells the model which ranks highest."""
    if not results:
        return NO_CONTEXT
    blocks = [
        f"Title: {result.title or 'Untitled'}\n"
        f"URL: {result.url or 'n/a'}\n"
        f"Content: {excerpt(result.content, excerpt_chars)}..."
        for result in results
    ]
    return CONTEXT_SEPARATOR.join(blocks)


def build_system_prompt(context: str) -> str:
    return SYSTEM_PROMPT_TEMPLATE.format(context=context)


__all__ = [
    "CONTEXT_SEPARATOR",
    "DEFAULT_EXCERPT_CHARS",
    "NO_CONTEXT",
    "build_context",
    "build_system_prompt",
]
