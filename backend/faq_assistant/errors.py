"""Error taxonomy shared by the pipelines and the HTTP layer."""

from __future__ import annotations


class FaqAssistantError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "InternalError"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class ValidationError(FaqAssistantError):
    """Bad or missing input; raised before any record is written."""

    code = "ValidationError"
    status_code = 400


class FetchError(FaqAssistantError):
    """Target URL unreachable or answered with a non-success status."""

    code = "FetchError"
    status_code = 500


class EmptyContentError(FaqAssistantError):
    """Extraction produced no text."""

    code = "EmptyContentError"
    status_code = 400


class EmbeddingServiceError(FaqAssistantError):
    code = "EmbeddingServiceError"
    status_code = 500


class CompletionServiceError(FaqAssistantError):
    code = "CompletionServiceError"
    status_code = 500


class StoreError(FaqAssistantError):
    """Any datastore operation failure."""

    code = "StoreError"
    status_code = 500


__all__ = [
    "FaqAssistantError",
    "ValidationError",
    "FetchError",
    "EmptyContentError",
    "EmbeddingServiceError",
    "CompletionServiceError",
    "StoreError",
]
