"""Common response schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    environment: str = Field(..., description="Current environment")
    registry_version: str = Field(..., description="Clause registry version in use")
    signing_available: bool = Field(..., description="Whether signed assessments can be issued")
    generative_available: bool = Field(..., description="Whether the generative review layer is configured")


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str = Field(..., description="Response message")
