"""Chat API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from faq_assistant.api.cors import preflight_response
from faq_assistant.api.dependencies import get_retrieval_pipeline, get_vector_store
from faq_assistant.core.metrics import REQUEST_COUNT
from faq_assistant.models.dto import ChatRequest, ChatResponse, MessageResponse, SourceRef
from faq_assistant.retrieval import RetrievalPipeline
from faq_assistant.store import VectorStore

router = APIRouter()


@router.post("/chat", response_model=ChatResponse, summary="Answer a question from the knowledge base")
def chat(
    request: ChatRequest,
    pipeline: RetrievalPipeline = Depends(get_retrieval_pipeline),
) -> ChatResponse:
    answer = pipeline.answer(
        message=request.message,
        conversation_id=request.conversation_id,
        user_id=request.user_id,
    )
    REQUEST_COUNT.labels(endpoint="chat", method="POST", status="200").inc()
    return ChatResponse(
        message=answer.message,
        conversation_id=answer.conversation_id,
        sources=[SourceRef(title=src.title, url=src.url, similarity=src.similarity) for src in answer.sources],
    )


# Options call for /chat
@router.options("/chat", summary="Options for /chat")
async def options_chat() -> Response:
    return preflight_response()


@router.get(
    "/conversations/{conversation_id}/messages",
    response_model=list[MessageResponse],
    summary="List stored messages of a conversation",
)
def list_messages(conversation_id: str, store: VectorStore = Depends(get_vector_store)) -> list[MessageResponse]:
    return [
        MessageResponse(id=message.id, role=message.role, content=message.content, created_at=message.created_at)
        for message in store.list_messages(conversation_id)
    ]


__all__ = ["router"]
