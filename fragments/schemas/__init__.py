"""Pydantic schemas for API responses."""

from fragments.schemas.common import ErrorDetail, ErrorResponse, HealthResponse, StatusResponse
from fragments.schemas.fragments import FragmentListResponse, FragmentMetadata, FragmentResponse

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "StatusResponse",
    "FragmentListResponse",
    "FragmentMetadata",
    "FragmentResponse",
]
