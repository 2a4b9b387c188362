from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from backend.app.api.routes import UNEXPECTED_ERROR_MESSAGE, parse_page_param
from backend.app.config import AppSettings
from backend.app.dependencies import get_gallery_service, get_settings
from backend.app.services.errors import ConfigurationError, UpstreamError
from backend.app.services.gallery_renderer import render_gallery_page
from backend.app.services.gallery_service import GalleryService

LOGGER = logging.getLogger("vpop_gallery.pages")

router = APIRouter()


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def gallery_page(
    service: Annotated[GalleryService, Depends(get_gallery_service)],
    settings: Annotated[AppSettings, Depends(get_settings)],
    page: str | None = None,
) -> HTMLResponse:
    requested_page = parse_page_param(page)
    delay_ms = settings.hover_preview_delay_ms
    try:
        gallery = service.list_videos(requested_page)
    except ConfigurationError:
        return HTMLResponse(render_gallery_page(None, hover_delay_ms=delay_ms), status_code=500)
    except UpstreamError as exc:
        html = render_gallery_page(None, error_message=exc.message, hover_delay_ms=delay_ms)
        return HTMLResponse(html, status_code=exc.http_status)
    except Exception:
        LOGGER.exception("gallery page render failed page=%s", requested_page)
        html = render_gallery_page(
            None,
            error_message=UNEXPECTED_ERROR_MESSAGE,
            hover_delay_ms=delay_ms,
        )
        return HTMLResponse(html, status_code=500)

    return HTMLResponse(render_gallery_page(gallery, hover_delay_ms=delay_ms))
