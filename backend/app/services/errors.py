from __future__ import annotations

from typing import Any, Literal

UpstreamFailureKind = Literal["quota", "rate_limit", "generic"]

_FAILURE_KIND_BY_REASON: dict[str, UpstreamFailureKind] = {
    "quotaexceeded": "quota",
    "ratelimitexceeded": "rate_limit",
}
_FAILURE_MESSAGES: dict[UpstreamFailureKind, str] = {
    "quota": (
        "YouTube API quota exceeded. Try again tomorrow or increase quota in "
        "Google Cloud Console."
    ),
    "rate_limit": "YouTube API rate limit exceeded. Please try again in a few minutes.",
    "generic": "YouTube API error",
}


class GalleryServiceError(Exception):
    pass


class ConfigurationError(GalleryServiceError):
    pass


class UpstreamError(GalleryServiceError):
    def __init__(
        self,
        *,
        http_status: int,
        reason: str | None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.http_status = http_status if 400 <= http_status <= 599 else 502
        self.reason = reason
        self.kind = classify_upstream_reason(reason)
        self.details = details or {}
        super().__init__(upstream_failure_message(self.kind))

    @property
    def message(self) -> str:
        return upstream_failure_message(self.kind)


def classify_upstream_reason(reason: str | None) -> UpstreamFailureKind:
    if reason is None:
        return "generic"
    return _FAILURE_KIND_BY_REASON.get(reason.strip().lower(), "generic")


def upstream_failure_message(kind: UpstreamFailureKind) -> str:
    return _FAILURE_MESSAGES[kind]


def extract_error_reason(payload: dict[str, Any]) -> str | None:
    """Read `error.errors[0].reason` from a Google API error body."""
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    errors = error.get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    first = errors[0]
    if not isinstance(first, dict):
        return None
    reason = first.get("reason")
    if isinstance(reason, str) and reason.strip():
        return reason.strip()
    return None
