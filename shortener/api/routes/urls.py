"""URL shortening API routes.

This module contains all endpoints for URL operations:
- Shorten a plain-text URL (POST /)
- Shorten a JSON URL (POST /api/shorten)
- Shorten a batch of URLs (POST /api/shorten/batch)
- Redirect to original URL (GET /{short_url})
- List the caller's URLs (GET /api/user/urls)
- Delete the caller's URLs asynchronously (DELETE /api/user/urls)

Repository and service calls are blocking, so they run in the threadpool.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from ...core.config import Settings, get_settings
from ...models import URL, BatchShortenItem, ErrorResponse, ShortenRequest
from ...repository import FileStorage, URLNotFoundError
from ...schemas.url import BatchShortenResponse, ShortenResponse, UserURLResponse
from ...services import AuditManager, URLService
from ...utils.shortener import build_short_url
from ..compression import GzipRoute
from ..dependencies import get_audit_manager, get_file_storage, get_url_service, get_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["URLs"], route_class=GzipRoute)


def shorten_and_mirror(
    service: URLService,
    storage: Optional[FileStorage],
    original_url: str,
    url_id: str,
    user_id: str,
) -> tuple[URL, bool]:
    """Shorten a URL and append newly created records to the file mirror."""
    url, created = service.shorten(original_url, url_id, user_id)
    if created and storage is not None:
        storage.append(url)
    return url, created


@router.post(
    "/",
    response_class=PlainTextResponse,
    status_code=201,
    responses={
        201: {"description": "Short URL created"},
        400: {"model": ErrorResponse, "description": "Empty body"},
        409: {"description": "URL already shortened; body holds the existing short URL"},
    },
    summary="Shorten a plain-text URL",
)
async def shorten_text(
    request: Request,
    background_tasks: BackgroundTasks,
    service: URLService = Depends(get_url_service),
    storage: Optional[FileStorage] = Depends(get_file_storage),
    audit: AuditManager = Depends(get_audit_manager),
    settings: Settings = Depends(get_settings),
    user_id: str = Depends(get_user_id),
) -> PlainTextResponse:
    """Shorten the URL sent as the raw request body."""
    original_url = (await request.body()).decode("utf-8", errors="replace").strip()
    if not original_url:
        raise HTTPException(status_code=400, detail="empty url")

    url, created = await run_in_threadpool(
        shorten_and_mirror, service, storage, original_url, "", user_id
    )
    short_url = build_short_url(settings.base_url, url.short_url)
    if not created:
        return PlainTextResponse(short_url, status_code=409)

    if audit.enabled:
        background_tasks.add_task(audit.log_event, "shorten", user_id, original_url)
    return PlainTextResponse(short_url, status_code=201)


@router.post(
    "/api/shorten",
    response_model=ShortenResponse,
    status_code=201,
    responses={
        201: {"description": "Short URL created"},
        409: {"model": ShortenResponse, "description": "URL already shortened"},
        422: {"description": "Invalid request body"},
    },
    summary="Shorten a URL",
)
async def shorten_json(
    payload: ShortenRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    service: URLService = Depends(get_url_service),
    storage: Optional[FileStorage] = Depends(get_file_storage),
    audit: AuditManager = Depends(get_audit_manager),
    settings: Settings = Depends(get_settings),
    user_id: str = Depends(get_user_id),
) -> ShortenResponse:
    """Shorten the URL sent as ``{"url": ...}``."""
    url, created = await run_in_threadpool(
        shorten_and_mirror, service, storage, payload.url, "", user_id
    )
    if not created:
        response.status_code = 409
    elif audit.enabled:
        background_tasks.add_task(audit.log_event, "shorten", user_id, payload.url)
    return ShortenResponse(result=build_short_url(settings.base_url, url.short_url))


@router.post(
    "/api/shorten/batch",
    response_model=list[BatchShortenResponse],
    status_code=201,
    summary="Shorten a batch of URLs",
    description="Shorten several URLs at once. The correlation id is echoed back and used as the record id.",
)
async def shorten_batch(
    items: list[BatchShortenItem],
    service: URLService = Depends(get_url_service),
    storage: Optional[FileStorage] = Depends(get_file_storage),
    settings: Settings = Depends(get_settings),
    user_id: str = Depends(get_user_id),
) -> list[BatchShortenResponse]:
    """Shorten every item of the batch."""
    result = []
    for item in items:
        url, _ = await run_in_threadpool(
            shorten_and_mirror, service, storage, item.original_url, item.correlation_id, user_id
        )
        result.append(
            BatchShortenResponse(
                correlation_id=item.correlation_id,
                short_url=build_short_url(settings.base_url, url.short_url),
            )
        )
    return result


@router.get(
    "/api/user/urls",
    response_model=list[UserURLResponse],
    responses={
        200: {"description": "URLs created by the caller"},
        204: {"description": "The caller has no URLs"},
    },
    summary="List the caller's URLs",
)
async def list_user_urls(
    service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings),
    user_id: str = Depends(get_user_id),
):
    """List the live URLs created by the caller."""
    urls = await run_in_threadpool(service.get_user_urls, user_id)
    if not urls:
        return Response(status_code=204)

    logger.debug(f"Found {len(urls)} URLs for user {user_id}")
    return [
        UserURLResponse(
            short_url=build_short_url(settings.base_url, url.short_url),
            original_url=url.original_url,
        )
        for url in urls
    ]


@router.delete(
    "/api/user/urls",
    status_code=202,
    summary="Delete the caller's URLs",
    description="Schedule short URLs owned by the caller for deletion. Returns before the deletion is applied.",
)
async def delete_user_urls(
    short_urls: list[str] = Body(...),
    service: URLService = Depends(get_url_service),
    user_id: str = Depends(get_user_id),
) -> Response:
    """Queue a batch deletion."""
    # submit blocks while the delete queue is full
    await run_in_threadpool(service.batch_delete, short_urls, user_id)
    return Response(status_code=202)


@router.get(
    "/{short_url}",
    response_class=RedirectResponse,
    status_code=307,
    responses={
        307: {"description": "Redirect to original URL"},
        404: {"model": ErrorResponse, "description": "Short URL not found"},
        410: {"model": ErrorResponse, "description": "Short URL was deleted"},
    },
    summary="Redirect to original URL",
)
async def redirect_to_url(
    short_url: str,
    background_tasks: BackgroundTasks,
    service: URLService = Depends(get_url_service),
    audit: AuditManager = Depends(get_audit_manager),
    user_id: str = Depends(get_user_id),
) -> RedirectResponse:
    """Redirect to the original URL."""
    try:
        url = await run_in_threadpool(service.resolve, short_url)
    except URLNotFoundError:
        raise HTTPException(status_code=404, detail="Short URL not found")

    if url.is_deleted:
        raise HTTPException(status_code=410, detail="Short URL was deleted")

    if audit.enabled:
        background_tasks.add_task(audit.log_event, "follow", user_id, url.original_url)
    return RedirectResponse(url=url.original_url, status_code=307)
