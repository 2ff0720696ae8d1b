"""Main API v1 router that combines all endpoint routers."""

from fastapi import APIRouter

from legal_rag.api.v1.endpoints import documents, health, search, vector_db

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(search.router)
api_router.include_router(documents.router)
api_router.include_router(vector_db.router)
