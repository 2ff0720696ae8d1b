"""Single-document indexing endpoints."""

from fastapi import APIRouter, status

from legal_rag.core.logging import get_logger
from legal_rag.dependencies import ProcessingPipelineDep
from legal_rag.schemas.documents import (
    ProcessDocumentRequest,
    ProcessingConfigResponse,
    ProcessingResultResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "/process",
    response_model=ProcessingResultResponse,
    summary="Index Document",
    description="Splits a document with the splitter matching its type and stores the segments",
    status_code=status.HTTP_200_OK,
)
async def process_document(
    request: ProcessDocumentRequest,
    pipeline: ProcessingPipelineDep,
) -> ProcessingResultResponse:
    """Index one document into the segment store.

    Processing failures are reported in the body with ``success=false`` rather than
    as an HTTP error.
    """
    result = await pipeline.process_document(
        request.content, request.metadata, request.document_type
    )
    if not result.success:
        logger.warning("Document was not indexed: %s", result.message)

    return ProcessingResultResponse(
        success=result.success,
        message=result.message,
        segment_count=result.segment_count,
        splitter_type=result.splitter_type,
        duration_ms=result.duration_ms,
    )


@router.get(
    "/config",
    response_model=ProcessingConfigResponse,
    summary="Processing Configuration",
)
async def processing_config(pipeline: ProcessingPipelineDep) -> ProcessingConfigResponse:
    return ProcessingConfigResponse(**pipeline.config_info())
