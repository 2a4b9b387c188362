from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from backend.app.services.payloads import as_dict

DURATION_PATTERN = re.compile(
    r"PT(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?",
    re.IGNORECASE,
)
SHORTS_MAX_SECONDS = 60
THUMBNAIL_PREFERENCE: tuple[str, ...] = ("high", "medium", "default")


@dataclass(frozen=True)
class NormalizedVideo:
    video_id: str
    title: str | None = None
    channel_title: str | None = None
    published_at: str | None = None
    thumbnail_url: str | None = None
    view_count: str | None = None
    like_count: str | None = None
    duration_seconds: int = 0


@dataclass(frozen=True)
class PageResult:
    page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_prev_page: bool


def parse_duration_seconds(raw_value: object) -> int:
    """
    Convert a `PT#H#M#S` duration into whole seconds.

    Missing components count as zero; absent or unrecognised input yields 0.
    """
    if not isinstance(raw_value, str):
        return 0
    matched = DURATION_PATTERN.search(raw_value)
    if matched is None:
        return 0

    try:
        hours = int(matched.group("hours") or 0)
        minutes = int(matched.group("minutes") or 0)
        seconds = int(matched.group("seconds") or 0)
    except ValueError:
        # Components past the interpreter's int digit limit.
        return 0
    return hours * 3_600 + minutes * 60 + seconds


def view_count_value(video: NormalizedVideo) -> int:
    return _numeric_count(video.view_count)


def normalize_video(raw_detail: dict[str, Any]) -> NormalizedVideo | None:
    raw_id = raw_detail.get("id")
    if not isinstance(raw_id, str) or not raw_id.strip():
        return None

    snippet = as_dict(raw_detail.get("snippet"))
    statistics = as_dict(raw_detail.get("statistics"))
    content_details = as_dict(raw_detail.get("contentDetails"))

    return NormalizedVideo(
        video_id=raw_id,
        title=_optional_text(snippet.get("title")),
        channel_title=_optional_text(snippet.get("channelTitle")),
        published_at=_optional_text(snippet.get("publishedAt")),
        thumbnail_url=_select_thumbnail_url(snippet),
        view_count=_optional_count(statistics.get("viewCount")),
        like_count=_optional_count(statistics.get("likeCount")),
        duration_seconds=parse_duration_seconds(content_details.get("duration")),
    )


def aggregate(
    raw_details: Iterable[dict[str, Any]],
    *,
    max_videos: int | None,
    shorts_max_seconds: int = SHORTS_MAX_SECONDS,
) -> list[NormalizedVideo]:
    normalized = [
        video
        for video in (normalize_video(as_dict(raw)) for raw in raw_details)
        if video is not None
    ]
    long_form = [video for video in normalized if video.duration_seconds > shorts_max_seconds]
    ranked = sorted(long_form, key=view_count_value, reverse=True)
    if max_videos is None:
        return ranked
    return ranked[: max(0, max_videos)]


def paginate(
    videos: Sequence[NormalizedVideo],
    requested_page: int,
    page_size: int,
) -> tuple[list[NormalizedVideo], PageResult]:
    if page_size < 1:
        raise ValueError("page_size must be positive")

    total_count = len(videos)
    total_pages = max(1, math.ceil(total_count / page_size))
    page = min(max(1, requested_page), total_pages)
    start = (page - 1) * page_size
    items = list(videos[start : start + page_size])
    return items, PageResult(
        page=page,
        total_pages=total_pages,
        total_count=total_count,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
    )


def _select_thumbnail_url(snippet: dict[str, Any]) -> str | None:
    thumbnails = as_dict(snippet.get("thumbnails"))
    for quality in THUMBNAIL_PREFERENCE:
        url_value = as_dict(thumbnails.get(quality)).get("url")
        if isinstance(url_value, str) and url_value.strip():
            return url_value
    return None


def _optional_text(raw_value: object) -> str | None:
    if isinstance(raw_value, str):
        return raw_value
    return None


def _optional_count(raw_value: object) -> str | None:
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return str(raw_value)
    if isinstance(raw_value, str):
        return raw_value
    return None


def _numeric_count(raw_value: str | None) -> int:
    if raw_value is None:
        return 0
    normalized = raw_value.strip()
    if not normalized:
        return 0
    try:
        return int(normalized)
    except ValueError:
        pass
    try:
        parsed = float(normalized)
    except ValueError:
        return 0
    if math.isnan(parsed) or math.isinf(parsed):
        return 0
    return int(parsed)
