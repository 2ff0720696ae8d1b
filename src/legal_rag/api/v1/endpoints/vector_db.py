"""Vector database administration endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from legal_rag.core.exceptions import NotFoundException
from legal_rag.core.logging import get_logger
from legal_rag.dependencies import RebuildServiceDep
from legal_rag.schemas.vector_db import (
    RebuildAcceptedResponse,
    RebuildStatus,
    RebuildStatusResponse,
    VectorDatabaseHealthResponse,
    VectorDatabaseStatsResponse,
    VectorRebuildResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/vector-db", tags=["vector-db"])


@router.get(
    "/stats",
    response_model=VectorDatabaseStatsResponse,
    summary="Vector Database Statistics",
)
async def get_stats(rebuild_service: RebuildServiceDep) -> VectorDatabaseStatsResponse:
    """Point counts per store, corpus size and chunking parameters."""
    stats = await rebuild_service.get_stats()
    return VectorDatabaseStatsResponse.from_stats(stats)


@router.post(
    "/rebuild",
    response_model=RebuildAcceptedResponse,
    summary="Start Vector Rebuild",
    description=(
        "Clears both vector stores and reindexes the whole corpus in the background. "
        "Returns 409 while another rebuild is running."
    ),
    status_code=status.HTTP_202_ACCEPTED,
)
async def start_rebuild(rebuild_service: RebuildServiceDep) -> RebuildAcceptedResponse:
    handle = rebuild_service.start_rebuild()
    return RebuildAcceptedResponse(task_id=handle.task_id)


@router.post(
    "/rebuild-sync",
    response_model=VectorRebuildResponse,
    summary="Run Vector Rebuild",
    description="Runs a full rebuild and waits for it. Responds 500 when the rebuild did not succeed.",
)
async def rebuild_sync(rebuild_service: RebuildServiceDep) -> JSONResponse:
    result = await rebuild_service.rebuild()
    body = VectorRebuildResponse.from_result(result)
    status_code = status.HTTP_200_OK if result.success else status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.get(
    "/rebuild/{task_id}",
    response_model=RebuildStatusResponse,
    summary="Rebuild Status",
)
async def rebuild_status(task_id: str, rebuild_service: RebuildServiceDep) -> RebuildStatusResponse:
    handle = rebuild_service.get_handle(task_id)
    if handle is None:
        raise NotFoundException(f"Rebuild task {task_id} not found")

    result = handle.result()
    if not handle.done():
        state: RebuildStatus = "running"
    elif result is None or result.cancelled:
        state = "cancelled"
    elif result.success:
        state = "completed"
    else:
        state = "failed"

    return RebuildStatusResponse(
        task_id=task_id,
        status=state,
        result=VectorRebuildResponse.from_result(result) if result is not None else None,
    )


@router.get(
    "/health",
    response_model=VectorDatabaseHealthResponse,
    summary="Vector Database Health",
)
async def vector_db_health(rebuild_service: RebuildServiceDep) -> VectorDatabaseHealthResponse:
    try:
        counts = await rebuild_service.store_counts()
    except Exception as exc:
        logger.error("Vector database health check failed: %s", exc, exc_info=True)
        return VectorDatabaseHealthResponse(healthy=False, message=f"Vector database unreachable: {exc}")

    return VectorDatabaseHealthResponse(
        healthy=True,
        message="Vector database reachable",
        store_counts=counts,
    )
