"""Retrieval orchestration components."""

from .completion import CompletionClient, OpenAICompletionClient
from .pipeline import ChatAnswer, PersistResult, RetrievalPipeline
from .prompt import build_context, build_system_prompt

__all__ = [
    "CompletionClient",
    "OpenAICompletionClient",
    "ChatAnswer",
    "PersistResult",
    "RetrievalPipeline",
    "build_context",
    "build_system_prompt",
]
