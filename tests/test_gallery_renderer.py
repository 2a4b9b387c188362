from __future__ import annotations

import pytest

from backend.app.services.gallery_renderer import (
    PAGE_TITLE,
    format_published_date,
    format_view_count,
    render_gallery_page,
    render_pagination_nav,
    render_video_card,
)
from backend.app.services.gallery_service import EMPTY_PAGINATION, GalleryPage
from backend.app.services.video_pipeline import NormalizedVideo, PageResult


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        ("1234567890", "1.2B"),
        ("2500000", "2.5M"),
        ("1500", "1.5K"),
        ("999", "999"),
        ("0", "0"),
        ("", ""),
        (None, ""),
        ("n/a", "n/a"),
    ],
)
def test_format_view_count(raw_value: str | None, expected: str) -> None:
    assert format_view_count(raw_value) == expected


def test_format_published_date() -> None:
    assert format_published_date("2024-03-05T12:00:00Z") == "Mar 5, 2024"
    assert format_published_date("yesterday") == ""
    assert format_published_date(None) == ""


def test_video_card_escapes_text_and_links_to_watch_page() -> None:
    video = NormalizedVideo(
        video_id="abc",
        title="<b>Hit</b> & more",
        channel_title="Sơn Tùng M-TP",
        published_at="2024-03-05T12:00:00Z",
        thumbnail_url="https://i.ytimg.com/vi/abc/hqdefault.jpg",
        view_count="2500000",
        like_count="1500",
    )

    html = render_video_card(video, rank=3)

    assert "&lt;b&gt;Hit&lt;/b&gt; &amp; more" in html
    assert "<b>Hit</b>" not in html
    assert 'href="https://www.youtube.com/watch?v=abc"' in html
    assert 'target="_blank"' in html
    assert "#3" in html
    assert "2.5M views" in html
    assert "1.5K likes" in html
    assert "Mar 5, 2024" in html
    assert "Sơn Tùng M-TP" in html


def test_video_card_without_thumbnail_or_stats() -> None:
    html = render_video_card(NormalizedVideo(video_id="bare"))

    assert "No thumbnail" in html
    assert "Untitled" in html
    assert "views" not in html
    assert 'class="rank"' not in html


def test_pagination_nav_hidden_for_single_page() -> None:
    assert render_pagination_nav(GalleryPage(pagination=EMPTY_PAGINATION)) == ""


def test_pagination_nav_links_neighbours() -> None:
    page = GalleryPage(
        pagination=PageResult(
            page=2,
            total_pages=4,
            total_count=100,
            has_next_page=True,
            has_prev_page=True,
        )
    )

    nav = render_pagination_nav(page)

    assert 'href="/?page=1"' in nav
    assert 'href="/?page=3"' in nav
    assert "Page 2 of 4" in nav


def test_gallery_page_ranks_continue_across_pages() -> None:
    page = GalleryPage(
        pagination=PageResult(
            page=2,
            total_pages=2,
            total_count=30,
            has_next_page=False,
            has_prev_page=True,
        ),
        videos=[NormalizedVideo(video_id=f"v{index}") for index in range(5)],
        page_size=25,
    )

    html = render_gallery_page(page)

    assert PAGE_TITLE in html
    assert "#26" in html
    assert "#30" in html
    assert 'rel="next"' not in html


def test_gallery_page_states() -> None:
    empty = render_gallery_page(GalleryPage(pagination=EMPTY_PAGINATION))
    missing_config = render_gallery_page(None)
    upstream = render_gallery_page(None, error_message="<quota> exceeded")

    assert "No videos to show." in empty
    assert "Could not load videos" in missing_config
    assert "<code>YOUTUBE_API_KEY</code>" in missing_config
    assert "&lt;quota&gt; exceeded" in upstream
    assert "var delay = 250;" in render_gallery_page(None, hover_delay_ms=250)
