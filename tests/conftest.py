from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app.dependencies import (
    get_gallery_service,
    get_response_cache,
    get_settings,
    get_telemetry,
    reset_cached_dependencies,
)
from backend.app.main import create_app
from backend.app.services.gallery_service import GalleryConfig, GalleryService
from youtube_fakes import FakeYouTubeResource

TEST_API_KEY = "test-api-key"


@pytest.fixture(autouse=True)
def _isolated_runtime(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:  # pyright: ignore[reportUnusedFunction]
    data_dir = tmp_path / "runtime-data"
    data_dir.mkdir(parents=True, exist_ok=True)
    # Keeps a developer's local .env out of the settings under test.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("VPOP_GALLERY_DATA_DIR", str(data_dir))
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    reset_cached_dependencies()
    yield data_dir
    reset_cached_dependencies()


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("YOUTUBE_API_KEY", TEST_API_KEY)
    reset_cached_dependencies()
    return TEST_API_KEY


@pytest.fixture
def client_for() -> Iterator[Callable[[FakeYouTubeResource | None], TestClient]]:
    clients: list[TestClient] = []

    def _build(resource: FakeYouTubeResource | None) -> TestClient:
        app = create_app()
        if resource is not None:
            service = GalleryService(
                GalleryConfig.from_settings(get_settings()),
                cache=get_response_cache(),
                telemetry=get_telemetry(),
                resource_factory=lambda _key: resource,
            )
            app.dependency_overrides[get_gallery_service] = lambda: service
        test_client = TestClient(app)
        test_client.__enter__()
        clients.append(test_client)
        return test_client

    yield _build

    for test_client in clients:
        test_client.__exit__(None, None, None)
