from __future__ import annotations

from functools import lru_cache

from backend.app.config import AppSettings, load_settings
from backend.app.services.gallery_service import GalleryConfig, GalleryService
from backend.app.services.response_cache import ResponseCache
from backend.app.telemetry import TelemetryClient, build_telemetry_client


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return load_settings()


@lru_cache(maxsize=1)
def get_response_cache() -> ResponseCache:
    settings = get_settings()
    return ResponseCache(ttl_seconds=settings.response_cache_ttl_seconds)


@lru_cache(maxsize=1)
def get_gallery_service() -> GalleryService:
    settings = get_settings()
    return GalleryService(
        GalleryConfig.from_settings(settings),
        cache=get_response_cache(),
        telemetry=get_telemetry(),
    )


@lru_cache(maxsize=1)
def get_telemetry() -> TelemetryClient:
    settings = get_settings()
    return build_telemetry_client(
        enabled=settings.telemetry_enabled,
        sink=settings.telemetry_sink,
    )


def reset_cached_dependencies() -> None:
    get_gallery_service.cache_clear()
    get_response_cache.cache_clear()
    get_telemetry.cache_clear()
    get_settings.cache_clear()
