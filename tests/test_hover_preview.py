from __future__ import annotations

import pytest

from backend.app.services.hover_preview import (
    HoverPreview,
    embed_url,
    hover_transition,
    watch_url,
)


@pytest.mark.parametrize(
    ("state", "event", "expected"),
    [
        ("idle", "enter", "pending"),
        ("pending", "enter", "pending"),
        ("showing", "enter", "pending"),
        ("idle", "leave", "idle"),
        ("pending", "leave", "idle"),
        ("showing", "leave", "idle"),
        ("pending", "timer_fired", "showing"),
        ("idle", "timer_fired", "idle"),
        ("showing", "timer_fired", "showing"),
    ],
)
def test_hover_transition_table(state: str, event: str, expected: str) -> None:
    assert hover_transition(state, event) == expected  # type: ignore[arg-type]


def test_unknown_event_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown hover event"):
        hover_transition("idle", "click")  # type: ignore[arg-type]


def test_leave_before_delay_never_shows_preview() -> None:
    preview = HoverPreview(video_id="abc").handle("enter")
    assert preview.timer_armed is True

    preview = preview.handle("leave").handle("timer_fired")

    assert preview.state == "idle"
    assert preview.show_preview is False


def test_hover_past_delay_shows_muted_embed() -> None:
    preview = HoverPreview(video_id="abc").handle("enter").handle("timer_fired")

    assert preview.show_preview is True
    assert preview.timer_armed is False
    assert preview.delay_ms == 400
    assert preview.embed_url == (
        "https://www.youtube.com/embed/abc?autoplay=1&mute=1&controls=1&rel=0&modestbranding=1"
    )


def test_urls_escape_video_ids() -> None:
    assert watch_url("dQw4w9WgXcQ") == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert embed_url("a/b?c").startswith("https://www.youtube.com/embed/a%2Fb%3Fc?")
