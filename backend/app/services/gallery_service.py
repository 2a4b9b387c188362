from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from backend.app.config import API_KEY_PLACEHOLDER, AppSettings
from backend.app.services.errors import ConfigurationError, UpstreamError
from backend.app.services.response_cache import ResponseCache
from backend.app.services.video_pipeline import (
    SHORTS_MAX_SECONDS,
    NormalizedVideo,
    PageResult,
    aggregate,
    paginate,
)
from backend.app.services.youtube_client import YouTubeDataClient, build_youtube_resource
from backend.app.telemetry import TelemetryClient

LOGGER = logging.getLogger("vpop_gallery.gallery")

MISSING_API_KEY_MESSAGE = "YOUTUBE_API_KEY is not configured. Add your key to .env"


@dataclass(frozen=True)
class GalleryConfig:
    api_key: str | None
    search_query: str = "vpop music videos"
    region_code: str = "VN"
    search_pages: int = 5
    max_videos: int | None = 100
    per_page: int = 25
    shorts_max_seconds: int = SHORTS_MAX_SECONDS

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key) and self.api_key != API_KEY_PLACEHOLDER

    @classmethod
    def from_settings(cls, settings: AppSettings) -> GalleryConfig:
        return cls(
            api_key=settings.youtube_api_key,
            search_query=settings.search_query,
            region_code=settings.region_code,
            search_pages=settings.search_pages,
            max_videos=settings.max_videos,
            per_page=settings.per_page,
            shorts_max_seconds=settings.shorts_max_seconds,
        )


def _empty_videos() -> list[NormalizedVideo]:
    return []


@dataclass(frozen=True)
class GalleryPage:
    pagination: PageResult
    videos: list[NormalizedVideo] = field(default_factory=_empty_videos)
    page_size: int = 25
    estimated_api_units: int = 0
    upstream_calls: int = 0

    @property
    def first_rank(self) -> int:
        return (self.pagination.page - 1) * self.page_size + 1

    @property
    def count(self) -> int:
        return len(self.videos)


EMPTY_PAGINATION = PageResult(
    page=1,
    total_pages=1,
    total_count=0,
    has_next_page=False,
    has_prev_page=False,
)


class GalleryService:
    def __init__(
        self,
        config: GalleryConfig,
        *,
        cache: ResponseCache | None = None,
        telemetry: TelemetryClient | None = None,
        resource_factory: Callable[[str], Any] = build_youtube_resource,
    ) -> None:
        self._config = config
        self._cache = cache
        self._telemetry = telemetry or TelemetryClient.disabled()
        self._resource_factory = resource_factory

    @property
    def config(self) -> GalleryConfig:
        return self._config

    def list_videos(self, page: int = 1) -> GalleryPage:
        if not self._config.api_key_configured or self._config.api_key is None:
            LOGGER.error("gallery fetch blocked: youtube api key missing")
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)

        with self._telemetry.span("gallery.fetch", requested_page=page) as outcome:
            client = YouTubeDataClient(
                self._resource_factory(self._config.api_key),
                cache=self._cache,
                telemetry=self._telemetry,
            )
            try:
                gallery_page = self._run_pipeline(client, page)
            except UpstreamError as exc:
                outcome.update(
                    status_code=exc.http_status,
                    failure_kind=exc.kind,
                    estimated_api_units=client.estimated_api_units,
                )
                raise

            outcome.update(
                page=gallery_page.pagination.page,
                total_count=gallery_page.pagination.total_count,
                count=gallery_page.count,
                upstream_calls=gallery_page.upstream_calls,
                estimated_api_units=gallery_page.estimated_api_units,
            )
        return gallery_page

    def _run_pipeline(self, client: YouTubeDataClient, page: int) -> GalleryPage:
        config = self._config
        video_ids = client.collect_video_ids(
            config.search_query,
            config.region_code,
            max_pages=config.search_pages,
        )
        if not video_ids:
            LOGGER.info("gallery search returned no videos query=%s", config.search_query)
            return GalleryPage(
                pagination=EMPTY_PAGINATION,
                page_size=config.per_page,
                estimated_api_units=client.estimated_api_units,
                upstream_calls=client.upstream_calls,
            )

        raw_details = client.fetch_details(video_ids)
        ranked = aggregate(
            raw_details,
            max_videos=config.max_videos,
            shorts_max_seconds=config.shorts_max_seconds,
        )
        items, pagination = paginate(ranked, page, config.per_page)
        LOGGER.info(
            (
                "gallery assembled ids=%s details=%s ranked=%s page=%s/%s "
                "upstream_calls=%s estimated_units=%s"
            ),
            len(video_ids),
            len(raw_details),
            len(ranked),
            pagination.page,
            pagination.total_pages,
            client.upstream_calls,
            client.estimated_api_units,
        )
        return GalleryPage(
            pagination=pagination,
            videos=items,
            page_size=config.per_page,
            estimated_api_units=client.estimated_api_units,
            upstream_calls=client.upstream_calls,
        )
