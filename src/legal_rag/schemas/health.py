"""Health check schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Process liveness; says nothing about Qdrant or Supabase reachability."""

    status: str = Field(..., description="Health status")
    name: str = Field(..., description="Application name")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Environment name")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "name": "Legal RAG API",
                    "version": "0.1.0",
                    "environment": "development",
                }
            ]
        }
    }
