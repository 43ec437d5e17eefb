"""Health check API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from ...repository import RepositoryError
from ...schemas.url import HealthResponse
from ...services import URLService
from ..dependencies import get_url_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status.
    """
    return {"status": "healthy"}


@router.get(
    "/ping",
    response_model=HealthResponse,
    responses={500: {"description": "Storage unavailable"}},
    summary="Storage check",
)
async def ping(service: URLService = Depends(get_url_service)) -> dict:
    """Check that the configured storage answers."""
    try:
        await run_in_threadpool(service.ping)
    except RepositoryError as e:
        logger.error(f"Storage ping failed: {e}")
        raise HTTPException(status_code=500, detail="storage unavailable")
    return {"status": "ok"}
