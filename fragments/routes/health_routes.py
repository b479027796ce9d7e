"""Unauthenticated health check routes."""

from fastapi import APIRouter, Response

from fragments import __version__, config
from fragments.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/", response_model=HealthResponse)
async def root(response: Response):
    """
    Health check endpoint; never cached.
    """
    response.headers["Cache-Control"] = "no-cache"
    return HealthResponse(
        author=config.AUTHOR,
        github_url=config.GITHUB_URL,
        version=__version__,
    )


@router.get("/health")
async def health_check():
    """
    Liveness endpoint for container health checks.
    """
    return {"status": "healthy", "service": "fragments"}
