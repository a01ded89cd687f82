"""Embedding clients."""

from __future__ import annotations

import hashlib
import math
import re
from typing import Protocol, Sequence

import openai

from faq_assistant.core.logging import get_logger
from faq_assistant.errors import EmbeddingServiceError

logger = get_logger(__name__)

DEFAULT_MAX_CHARS = 8000

_TOKEN_RE = re.compile(r"\w+")


class EmbeddingClient(Protocol):
    """Turns text into vectors of a fixed dimension."""

    @property
    def dim(self) -> int: ...

    def embed(self, text: str) -> list[float]: ...

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]: ...


def truncate_for_embedding(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Keep the first ``max_chars`` characters of ``text``."""
    return text[:max_chars]


class OpenAIEmbeddingClient:
    """Embedding client backed by the OpenAI embeddings endpoint."""

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        dim: int = 1536,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: openai.OpenAI | None = None,
    ) -> None:
        self.model = model
        self._dim = dim
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

    @property
    def dim(self) -> int:
        return self._dim

    def embed(self, text: str) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            response = self._get_client().embeddings.create(
                model=self.model,
                input=list(texts),
                dimensions=self._dim,
            )
        except openai.OpenAIError as exc:
            logger.warning("Embedding request failed: %s", exc, extra={"ctx_model": self.model})
            raise EmbeddingServiceError(f"Embedding service error: {exc}") from exc
        try:
            items = sorted(response.data, key=lambda item: item.index)
            vectors = [[float(value) for value in item.embedding] for item in items]
        except (AttributeError, TypeError, ValueError) as exc:
            raise EmbeddingServiceError(f"Malformed embedding response: {exc}") from exc
        if len(vectors) != len(texts):
            raise EmbeddingServiceError(f"Expected {len(texts)} embeddings, received {len(vectors)}")
        for vector in vectors:
            if len(vector) != self._dim:
                raise EmbeddingServiceError(f"Expected embedding dimension {self._dim}, received {len(vector)}")
        return vectors

    def _get_client(self) -> openai.OpenAI:
        if self._client is None:
            self._client = openai.OpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,
            )
        return self._client


class HashedEmbeddingClient:
    """Lightweight hashed embedding model with deterministic output."""

    def __init__(self, dim: int = 1536) -> None:
        self._dim = dim

    @property
    def dim(self) -> int:
        return self._dim

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * self._dim
        for token in _tokenize(text):
            vector[_hash_token(token, self._dim)] += 1.0
        _normalize(vector)
        return vector

    def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        return [self.embed(text) for text in texts]


def _tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall(text.lower())


def _hash_token(token: str, dim: int) -> int:
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    value = int.from_bytes(digest, "big")
    return value % dim


def _normalize(vector: list[float]) -> None:
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0:
        return
    inv = 1.0 / norm
    for idx, value in enumerate(vector):
        vector[idx] = value * inv


__all__ = [
    "DEFAULT_MAX_CHARS",
    "EmbeddingClient",
    "OpenAIEmbeddingClient",
    "HashedEmbeddingClient",
    "truncate_for_embedding",
]
