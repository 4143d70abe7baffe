"""
Guideline document management endpoints.
"""
from typing import Any, List

from fastapi import APIRouter, Depends, status

from app.core.dependencies import get_guideline_processor
from app.core.guideline_processor import GuidelineProcessor
from app.schemas.common import ErrorResponse, Message
from app.schemas.guideline import (
    EmbeddingBackfillResult,
    GuidelineChunk,
    GuidelineDocument,
    GuidelineDocumentCreate,
)

router = APIRouter()


@router.get("", response_model=List[GuidelineDocument])
def list_guidelines(processor: GuidelineProcessor = Depends(get_guideline_processor)) -> Any:
    """List every registered guideline document."""
    return processor.list_documents()


@router.post(
    "",
    response_model=GuidelineDocument,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def create_guideline(
    payload: GuidelineDocumentCreate,
    processor: GuidelineProcessor = Depends(get_guideline_processor),
) -> Any:
    """
    Register a documentation page and ingest it when active.

    Args:
        payload: Page URL with optional title, description and active flag
        processor: Ingestion pipeline

    Returns:
        Created guideline document
    """
    return processor.register_document(
        url=payload.url,
        title=payload.title,
        description=payload.description,
        active=payload.active,
    )


@router.post("/embeddings", response_model=EmbeddingBackfillResult)
def generate_missing_embeddings(processor: GuidelineProcessor = Depends(get_guideline_processor)) -> Any:
    """Embed every stored chunk that has no embedding yet."""
    return processor.generate_missing_embeddings()


@router.get(
    "/{document_id}/chunks",
    response_model=List[GuidelineChunk],
    responses={404: {"model": ErrorResponse}},
)
def list_guideline_chunks(
    document_id: int,
    processor: GuidelineProcessor = Depends(get_guideline_processor),
) -> Any:
    chunks = processor.list_chunks(document_id)
    return [
        GuidelineChunk(
            id=chunk.id,
            document_id=chunk.document_id,
            title=chunk.title,
            content=chunk.content,
            sequence=chunk.sequence,
            has_embedding=chunk.embedding is not None,
        )
        for chunk in chunks
    ]


@router.post(
    "/{document_id}/refresh",
    response_model=GuidelineDocument,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def refresh_guideline(
    document_id: int,
    processor: GuidelineProcessor = Depends(get_guideline_processor),
) -> Any:
    """Re-fetch the page and replace its chunks."""
    return processor.refresh_document(document_id)


@router.post(
    "/{document_id}/toggle",
    response_model=GuidelineDocument,
    responses={404: {"model": ErrorResponse}},
)
def toggle_guideline(
    document_id: int,
    processor: GuidelineProcessor = Depends(get_guideline_processor),
) -> Any:
    return processor.toggle_active(document_id)


@router.delete(
    "/{document_id}",
    response_model=Message,
    responses={404: {"model": ErrorResponse}},
)
def delete_guideline(
    document_id: int,
    processor: GuidelineProcessor = Depends(get_guideline_processor),
) -> Any:
    processor.delete_document(document_id)
    return {"message": f"Guideline document {document_id} deleted"}
