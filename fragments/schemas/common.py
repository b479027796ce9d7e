"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    message: str
    code: int


class ErrorResponse(BaseModel):
    """Response model for errors."""
    status: str = "error"
    error: ErrorDetail


class StatusResponse(BaseModel):
    status: str = "ok"


class HealthResponse(BaseModel):
    """Response model for the health check."""
    status: str = "ok"
    author: str
    github_url: str = Field(serialization_alias="githubUrl")
    version: str
