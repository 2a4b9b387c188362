from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.app.services.gallery_service import GalleryPage
from backend.app.services.video_pipeline import NormalizedVideo, PageResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class VideoSummary(_CamelModel):
    id: str
    title: str | None = None
    channel_title: str | None = None
    published_at: str | None = None
    thumbnail_url: str | None = None
    view_count: str | None = None
    like_count: str | None = None

    @classmethod
    def from_video(cls, video: NormalizedVideo) -> VideoSummary:
        return cls(
            id=video.video_id,
            title=video.title,
            channel_title=video.channel_title,
            published_at=video.published_at,
            thumbnail_url=video.thumbnail_url,
            view_count=video.view_count,
            like_count=video.like_count,
        )


class Pagination(_CamelModel):
    page: int = Field(ge=1)
    total_pages: int = Field(ge=1)
    total_count: int = Field(ge=0)
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_page_result(cls, result: PageResult) -> Pagination:
        return cls(
            page=result.page,
            total_pages=result.total_pages,
            total_count=result.total_count,
            has_next_page=result.has_next_page,
            has_prev_page=result.has_prev_page,
        )


class VideosResponse(_CamelModel):
    success: bool = True
    count: int = Field(ge=0)
    videos: list[VideoSummary]
    pagination: Pagination

    @classmethod
    def from_gallery_page(cls, page: GalleryPage) -> VideosResponse:
        videos = [VideoSummary.from_video(video) for video in page.videos]
        return cls(
            count=len(videos),
            videos=videos,
            pagination=Pagination.from_page_result(page.pagination),
        )


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error: str
    details: dict[str, Any] | None = None
