from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATA_DIR = ".vpop-gallery"
API_KEY_PLACEHOLDER = "paste_your_api_key_here"
_DATA_DIR_RELATIVE_DEFAULTS: tuple[tuple[str, Path], ...] = (("log_dir", Path("logs")),)
_PATH_FIELDS: tuple[str, ...] = (
    "data_dir",
    *(field_name for field_name, _ in _DATA_DIR_RELATIVE_DEFAULTS),
)
_BOOLEAN_COERCION_FIELDS: tuple[str, ...] = ("telemetry_enabled",)


def _default_in_data_dir(relative_path: Path) -> Path:
    return Path(DEFAULT_DATA_DIR) / relative_path


def _resolve_path(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _parse_bool_with_default(value: Any, *, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value == 1:
            return True
        if value == 0:
            return False
        return default
    if not isinstance(value, str):
        return default

    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _normalize_optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    normalized = value.strip()
    if normalized:
        return normalized
    return None


class AppSettings(BaseSettings):
    """
    Canonical runtime configuration.

    Every option is read from `VPOP_GALLERY_*` environment variables (or `.env`),
    except the YouTube credential which keeps its conventional `YOUTUBE_API_KEY`
    name.
    """

    model_config = SettingsConfigDict(
        env_prefix="VPOP_GALLERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    data_dir: Path = Field(
        default=Path(DEFAULT_DATA_DIR),
        description="Root runtime directory for logs.",
    )

    # YouTube Data API access.
    youtube_api_key: str | None = Field(
        default=None,
        validation_alias="YOUTUBE_API_KEY",
        description=(
            "YouTube Data API v3 key. Missing or placeholder values make every "
            "gallery request fail fast with HTTP 500."
        ),
    )
    search_query: str = Field(
        default="vpop music videos",
        description="Query text sent to search.list.",
    )
    region_code: str = Field(
        default="VN",
        description="ISO 3166-1 alpha-2 region passed to search.list.",
    )
    search_pages: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Maximum search.list pages per request (100 quota units each).",
    )
    response_cache_ttl_seconds: int = Field(
        default=3_600,
        ge=0,
        description="Freshness window for cached upstream responses, keyed by request URL.",
    )

    # Gallery shaping.
    max_videos: int = Field(
        default=100,
        ge=1,
        description="Cap on the ranked corpus after the shorts filter.",
    )
    per_page: int = Field(
        default=25,
        ge=1,
        le=100,
        description="Videos per gallery page.",
    )
    shorts_max_seconds: int = Field(
        default=60,
        ge=0,
        description="Videos this long or shorter are treated as Shorts and dropped.",
    )
    hover_preview_delay_ms: int = Field(
        default=400,
        ge=0,
        description="Hover intent delay before a card swaps its thumbnail for an embed.",
    )

    # Logging.
    log_dir: Path = Field(
        default=_default_in_data_dir(Path("logs")),
        description="Directory for backend log files. Defaults to `${VPOP_GALLERY_DATA_DIR}/logs`.",
    )
    log_level: str = Field(
        default="INFO",
        description="Console log level (stdout).",
    )
    log_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=0,
        description="Rotate log files at this size. `0` keeps a single growing file.",
    )
    log_backup_count: int = Field(
        default=3,
        ge=0,
        description="Rotated log files to keep.",
    )

    # Telemetry.
    telemetry_enabled: bool = Field(
        default=True,
        description="Enable lightweight internal telemetry events.",
    )
    telemetry_sink: Literal["none", "log"] = Field(
        default="log",
        description=(
            "Telemetry sink backend. `log` emits structured telemetry locally; "
            "`none` disables sink output."
        ),
    )

    @field_validator("telemetry_sink", mode="before")
    @classmethod
    def _normalize_telemetry_sink(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("VPOP_GALLERY_TELEMETRY_SINK must be a string.")
        normalized = value.strip().lower()
        if normalized in {"none", "log"}:
            return normalized
        raise ValueError("VPOP_GALLERY_TELEMETRY_SINK must be set to: none, log.")

    @field_validator("region_code", mode="before")
    @classmethod
    def _normalize_region_code(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("VPOP_GALLERY_REGION_CODE must be a string.")
        normalized = value.strip().upper()
        if len(normalized) != 2 or not normalized.isalpha():
            raise ValueError("VPOP_GALLERY_REGION_CODE must be a two-letter region code.")
        return normalized

    @field_validator("search_query", mode="before")
    @classmethod
    def _normalize_search_query(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("VPOP_GALLERY_SEARCH_QUERY must be a string.")
        normalized = " ".join(value.split())
        if not normalized:
            raise ValueError("VPOP_GALLERY_SEARCH_QUERY must not be empty.")
        return normalized

    @field_validator(*_PATH_FIELDS, mode="before")
    @classmethod
    def _normalize_paths(cls, value: Any) -> Any:
        if value is None:
            return None
        return _resolve_path(value)

    @field_validator(*_BOOLEAN_COERCION_FIELDS, mode="before")
    @classmethod
    def _normalize_booleans(cls, value: Any, info: ValidationInfo) -> bool:
        field_name = info.field_name
        assert field_name is not None
        default_value = cls.model_fields[field_name].default
        assert isinstance(default_value, bool)
        return _parse_bool_with_default(value, default=default_value)

    @field_validator("youtube_api_key", mode="before")
    @classmethod
    def _normalize_optional_strings(cls, value: Any) -> str | None:
        return _normalize_optional_text(value)


def _apply_path_defaults(settings: AppSettings) -> AppSettings:
    updates: dict[str, Path] = {}
    for field_name, relative_default in _DATA_DIR_RELATIVE_DEFAULTS:
        if field_name in settings.model_fields_set:
            continue
        updates[field_name] = settings.data_dir / relative_default
    if not updates:
        return settings
    return settings.model_copy(update=updates)


def _resolve_path_fields(settings: AppSettings) -> AppSettings:
    resolved_updates = {
        field_name: _resolve_path(getattr(settings, field_name))
        for field_name in _PATH_FIELDS
    }
    return settings.model_copy(update=resolved_updates)


def load_settings() -> AppSettings:
    settings = AppSettings()
    settings = _apply_path_defaults(settings)
    return _resolve_path_fields(settings)
