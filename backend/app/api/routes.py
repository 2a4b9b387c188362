from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from structlog.contextvars import bind_contextvars, reset_contextvars

from backend.app.dependencies import get_gallery_service
from backend.app.models.video_contracts import ErrorResponse, VideosResponse
from backend.app.services.errors import ConfigurationError, UpstreamError
from backend.app.services.gallery_service import GalleryService

LOGGER = logging.getLogger("vpop_gallery.api")

UNEXPECTED_ERROR_MESSAGE = "Failed to fetch from YouTube API"

router = APIRouter()


def parse_page_param(raw_page: str | None) -> int:
    if raw_page is None:
        return 1
    try:
        parsed = int(raw_page.strip())
    except ValueError:
        return 1
    return max(1, parsed)


def _error_response(
    status_code: int,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=message, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.get(
    "/videos",
    response_model=VideosResponse,
    responses={
        500: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
    },
    tags=["videos"],
    operation_id="list_videos",
)
@router.get("/api/youtube/videos", include_in_schema=False)
def list_videos(
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    page: str | None = None,
) -> JSONResponse:
    requested_page = parse_page_param(page)
    context_tokens = bind_contextvars(requested_page=requested_page)
    try:
        gallery_page = service.list_videos(requested_page)
    except ConfigurationError as exc:
        return _error_response(500, str(exc))
    except UpstreamError as exc:
        return _error_response(exc.http_status, exc.message, details=exc.details)
    except Exception:
        LOGGER.exception("gallery request failed page=%s", requested_page)
        return _error_response(500, UNEXPECTED_ERROR_MESSAGE)
    finally:
        reset_contextvars(**context_tokens)

    body = VideosResponse.from_gallery_page(gallery_page)
    return JSONResponse(content=body.model_dump(by_alias=True, exclude_none=True))
