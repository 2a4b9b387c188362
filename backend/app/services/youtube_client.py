from __future__ import annotations

import json
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, cast
from urllib.parse import urlencode

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from backend.app.services.errors import UpstreamError, extract_error_reason
from backend.app.services.payloads import as_dict, as_list
from backend.app.services.response_cache import ResponseCache
from backend.app.telemetry import TelemetryClient

LOGGER = logging.getLogger("vpop_gallery.youtube")

YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"
MAX_RESULTS_PER_REQUEST = 50
SEARCH_LIST_UNITS = 100
VIDEOS_LIST_UNITS = 1
SEARCH_PART = "snippet"
DETAILS_PART = "snippet,statistics,contentDetails"


@dataclass(frozen=True)
class SearchPageResult:
    video_ids: list[str]
    next_page_token: str | None


def build_youtube_resource(api_key: str) -> Any:
    return build("youtube", "v3", developerKey=api_key, cache_discovery=False)


class YouTubeDataClient:
    """
    Thin wrapper over the YouTube Data API `search.list` and `videos.list` calls.

    Responses are served from `cache` when a fresh entry exists for the same
    request URL. `estimated_api_units` only counts calls that reached YouTube.
    """

    def __init__(
        self,
        resource: Any,
        *,
        cache: ResponseCache | None = None,
        telemetry: TelemetryClient | None = None,
    ) -> None:
        self._resource = resource
        self._cache = cache
        self._telemetry = telemetry or TelemetryClient.disabled()
        self.estimated_api_units = 0
        self.upstream_calls = 0

    def search_page(
        self,
        query: str,
        region_code: str,
        page_token: str | None = None,
    ) -> SearchPageResult:
        params: dict[str, object] = {
            "part": SEARCH_PART,
            "type": "video",
            "order": "viewCount",
            "regionCode": region_code,
            "q": query,
            "maxResults": MAX_RESULTS_PER_REQUEST,
        }
        if page_token is not None:
            params["pageToken"] = page_token

        response = self._execute(
            "search",
            params,
            lambda: self._resource.search().list(**params),
            units=SEARCH_LIST_UNITS,
        )

        video_ids: list[str] = []
        for item in as_list(response.get("items")):
            raw_id = as_dict(as_dict(item).get("id")).get("videoId")
            if isinstance(raw_id, str) and raw_id.strip():
                video_ids.append(raw_id)

        raw_next = response.get("nextPageToken")
        next_page_token = raw_next if isinstance(raw_next, str) and raw_next.strip() else None
        return SearchPageResult(video_ids=video_ids, next_page_token=next_page_token)

    def fetch_details(self, ids: Sequence[str]) -> list[dict[str, Any]]:
        details: list[dict[str, Any]] = []
        for index in range(0, len(ids), MAX_RESULTS_PER_REQUEST):
            chunk = list(ids[index : index + MAX_RESULTS_PER_REQUEST])
            params: dict[str, object] = {"part": DETAILS_PART, "id": ",".join(chunk)}
            response = self._execute(
                "videos",
                params,
                lambda params=params: self._resource.videos().list(**params),
                units=VIDEOS_LIST_UNITS,
            )
            for item in as_list(response.get("items")):
                item_dict = as_dict(item)
                if item_dict:
                    details.append(item_dict)
        return details

    def collect_video_ids(self, query: str, region_code: str, *, max_pages: int) -> list[str]:
        video_ids: list[str] = []
        page_token: str | None = None

        for page_index in range(max(1, max_pages)):
            page = self.search_page(query, region_code, page_token)
            video_ids.extend(page.video_ids)
            LOGGER.info(
                "youtube search page=%s fetched=%s total=%s next_page_token=%s",
                page_index + 1,
                len(page.video_ids),
                len(video_ids),
                bool(page.next_page_token),
            )
            page_token = page.next_page_token
            if page_token is None or not page.video_ids:
                break

        return video_ids

    def _execute(
        self,
        endpoint: str,
        params: dict[str, object],
        build_request: Callable[[], Any],
        *,
        units: int,
    ) -> dict[str, Any]:
        cache_key = request_cache_key(endpoint, params)
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                LOGGER.debug("youtube %s cache_hit key=%s", endpoint, cache_key)
                self._telemetry.emit("youtube.request", endpoint=endpoint, cache_hit=True)
                return cached

        try:
            response = cast(dict[str, Any], build_request().execute())
        except HttpError as exc:
            status = _http_error_status(exc)
            details = _http_error_payload(exc)
            reason = extract_error_reason(details)
            LOGGER.warning(
                "youtube %s failed status=%s reason=%s",
                endpoint,
                status,
                reason,
            )
            self._telemetry.emit(
                "youtube.request.error",
                endpoint=endpoint,
                status_code=status,
                reason=reason,
            )
            raise UpstreamError(http_status=status, reason=reason, details=details) from exc

        self.upstream_calls += 1
        self.estimated_api_units += units
        self._telemetry.emit("youtube.request", endpoint=endpoint, cache_hit=False)
        response_dict = as_dict(response)
        if self._cache is not None:
            self._cache.put(cache_key, response_dict)
        return response_dict


def request_cache_key(endpoint: str, params: dict[str, object]) -> str:
    query = urlencode(sorted((key, str(value)) for key, value in params.items()))
    return f"{YOUTUBE_API_BASE_URL}/{endpoint}?{query}"


def _http_error_status(exc: HttpError) -> int:
    raw_status = getattr(exc.resp, "status", None)
    try:
        return int(raw_status)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 500


def _http_error_payload(exc: HttpError) -> dict[str, Any]:
    content = exc.content
    if not isinstance(content, bytes):
        return {}
    raw_body = content.decode("utf-8", errors="replace")
    if not raw_body.strip():
        return {}
    try:
        parsed = json.loads(raw_body)
    except json.JSONDecodeError:
        return {}
    return as_dict(parsed)
