"""Health check endpoints."""

from fastapi import APIRouter, HTTPException
from starlette import status

from schemas import HealthResponse, ReadyResponse
from services.redirect_service import LoadState, get_redirect_resolver

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", service="video-redirects")


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={
        503: {
            "description": "Video lookup table not loaded yet",
            "content": {
                "application/json": {"example": {"detail": "Video data loading"}}
            },
        }
    },
)
async def ready() -> ReadyResponse:
    """Readiness endpoint.

    Returns 200 only once the video lookup table has been built. Does not
    trigger a load itself; the startup preload or the first legacy request
    does that.
    """
    resolver = get_redirect_resolver()
    if resolver.state is LoadState.LOADING:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Video data loading",
        )
    if resolver.state is not LoadState.LOADED:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Video data not loaded",
        )

    return ReadyResponse(
        status="ready",
        service="video-redirects",
        videos_loaded=resolver.entry_count,
    )
