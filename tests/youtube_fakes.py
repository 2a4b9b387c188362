from __future__ import annotations

import json
import types
from collections.abc import Callable, Sequence
from typing import Any

from googleapiclient.errors import HttpError


class _FakeRequest:
    def __init__(self, handler: Callable[[dict[str, Any]], dict[str, Any]], params: dict[str, Any]):
        self._handler = handler
        self._params = params

    def execute(self) -> dict[str, Any]:
        return self._handler(self._params)


class _FakeCollection:
    def __init__(self, handler: Callable[[dict[str, Any]], dict[str, Any]]) -> None:
        self._handler = handler

    def list(self, **kwargs: Any) -> _FakeRequest:
        return _FakeRequest(self._handler, dict(kwargs))


class FakeYouTubeResource:
    """Stands in for `googleapiclient.discovery.build("youtube", "v3", ...)`."""

    def __init__(
        self,
        *,
        search_pages: Sequence[dict[str, Any]] = (),
        videos: Sequence[dict[str, Any]] = (),
        search_error: Exception | None = None,
        videos_error: Exception | None = None,
    ) -> None:
        self._search_pages = list(search_pages)
        self._videos_by_id = {str(item["id"]): item for item in videos}
        self._search_error = search_error
        self._videos_error = videos_error
        self.search_calls: list[dict[str, Any]] = []
        self.videos_calls: list[dict[str, Any]] = []

    def search(self) -> _FakeCollection:
        return _FakeCollection(self._search_list)

    def videos(self) -> _FakeCollection:
        return _FakeCollection(self._videos_list)

    def _search_list(self, params: dict[str, Any]) -> dict[str, Any]:
        self.search_calls.append(params)
        if self._search_error is not None:
            raise self._search_error
        token = params.get("pageToken")
        index = 0 if token is None else int(str(token).removeprefix("page-")) - 1
        if index >= len(self._search_pages):
            return {"items": []}
        return self._search_pages[index]

    def _videos_list(self, params: dict[str, Any]) -> dict[str, Any]:
        self.videos_calls.append(params)
        if self._videos_error is not None:
            raise self._videos_error
        ids = [value for value in str(params["id"]).split(",") if value]
        return {"items": [self._videos_by_id[value] for value in ids if value in self._videos_by_id]}


def search_pages_for(video_ids: Sequence[str], *, page_size: int = 50) -> list[dict[str, Any]]:
    pages: list[dict[str, Any]] = []
    chunks = [list(video_ids[i : i + page_size]) for i in range(0, len(video_ids), page_size)]
    for index, chunk in enumerate(chunks):
        page: dict[str, Any] = {
            "items": [{"id": {"kind": "youtube#video", "videoId": value}} for value in chunk]
        }
        if index + 1 < len(chunks):
            page["nextPageToken"] = f"page-{index + 2}"
        pages.append(page)
    return pages


def video_item(
    video_id: str,
    *,
    views: int | str | None,
    duration: str | None = "PT4M13S",
    likes: int | str | None = 10,
    title: str | None = None,
    thumbnails: dict[str, Any] | None = None,
) -> dict[str, Any]:
    statistics: dict[str, Any] = {}
    if views is not None:
        statistics["viewCount"] = str(views)
    if likes is not None:
        statistics["likeCount"] = str(likes)
    content_details: dict[str, Any] = {}
    if duration is not None:
        content_details["duration"] = duration
    return {
        "kind": "youtube#video",
        "id": video_id,
        "snippet": {
            "title": title or f"Video {video_id}",
            "channelTitle": f"Channel {video_id}",
            "publishedAt": "2024-03-05T12:00:00Z",
            "thumbnails": thumbnails
            if thumbnails is not None
            else {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg"},
                "high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"},
            },
        },
        "statistics": statistics,
        "contentDetails": content_details,
    }


def http_error(status: int, reason: str | None, *, message: str = "request failed") -> HttpError:
    error: dict[str, Any] = {"code": status, "message": message}
    if reason is not None:
        error["errors"] = [{"domain": "youtube.quota", "reason": reason, "message": message}]
    content = json.dumps({"error": error}).encode("utf-8")
    return HttpError(types.SimpleNamespace(status=status, reason="Forbidden"), content)
