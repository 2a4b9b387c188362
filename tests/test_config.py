from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from backend.app.config import load_settings
from backend.app.services.gallery_service import GalleryConfig


def test_defaults(_isolated_runtime: Path) -> None:
    settings = load_settings()

    assert settings.youtube_api_key is None
    assert settings.search_query == "vpop music videos"
    assert settings.region_code == "VN"
    assert settings.search_pages == 5
    assert settings.max_videos == 100
    assert settings.per_page == 25
    assert settings.shorts_max_seconds == 60
    assert settings.response_cache_ttl_seconds == 3_600
    assert settings.hover_preview_delay_ms == 400
    assert settings.data_dir == _isolated_runtime.resolve()
    assert settings.log_dir == _isolated_runtime.resolve() / "logs"
    assert settings.telemetry_enabled is True
    assert settings.telemetry_sink == "log"
    assert settings.log_max_bytes == 5 * 1024 * 1024
    assert settings.log_backup_count == 3


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("YOUTUBE_API_KEY", "  AIza-test  ")
    monkeypatch.setenv("VPOP_GALLERY_REGION_CODE", "us")
    monkeypatch.setenv("VPOP_GALLERY_SEARCH_QUERY", "  kpop   dance ")
    monkeypatch.setenv("VPOP_GALLERY_PER_PAGE", "10")
    monkeypatch.setenv("VPOP_GALLERY_TELEMETRY_ENABLED", "off")
    monkeypatch.setenv("VPOP_GALLERY_TELEMETRY_SINK", " NONE ")
    monkeypatch.setenv("VPOP_GALLERY_LOG_DIR", str(tmp_path / "custom-logs"))

    settings = load_settings()

    assert settings.youtube_api_key == "AIza-test"
    assert settings.region_code == "US"
    assert settings.search_query == "kpop dance"
    assert settings.per_page == 10
    assert settings.telemetry_enabled is False
    assert settings.telemetry_sink == "none"
    assert settings.log_dir == (tmp_path / "custom-logs").resolve()


def test_api_key_is_read_from_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("YOUTUBE_API_KEY=from-dotenv\n", encoding="utf-8")

    settings = load_settings()

    assert settings.youtube_api_key == "from-dotenv"
    assert GalleryConfig.from_settings(settings).api_key_configured is True


def test_placeholder_key_is_not_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YOUTUBE_API_KEY", "paste_your_api_key_here")

    config = GalleryConfig.from_settings(load_settings())

    assert config.api_key_configured is False


@pytest.mark.parametrize(
    ("env_name", "raw_value"),
    [
        ("VPOP_GALLERY_REGION_CODE", "Vietnam"),
        ("VPOP_GALLERY_SEARCH_QUERY", "   "),
        ("VPOP_GALLERY_SEARCH_PAGES", "0"),
        ("VPOP_GALLERY_PER_PAGE", "500"),
        ("VPOP_GALLERY_TELEMETRY_SINK", "otlp"),
    ],
)
def test_invalid_values_are_rejected(
    monkeypatch: pytest.MonkeyPatch,
    env_name: str,
    raw_value: str,
) -> None:
    monkeypatch.setenv(env_name, raw_value)

    with pytest.raises(ValidationError):
        load_settings()
