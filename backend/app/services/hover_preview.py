from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal
from urllib.parse import quote

HoverState = Literal["idle", "pending", "showing"]
HoverEvent = Literal["enter", "leave", "timer_fired"]

HOVER_DELAY_MS = 400
EMBED_URL_TEMPLATE = (
    "https://www.youtube.com/embed/{video_id}"
    "?autoplay=1&mute=1&controls=1&rel=0&modestbranding=1"
)
WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


def hover_transition(state: HoverState, event: HoverEvent) -> HoverState:
    """
    Card preview transitions.

    `enter` (re)arms the delay timer from any state, `leave` cancels everything,
    and `timer_fired` only promotes a pending hover. A timer firing after the
    pointer left is therefore a no-op.
    """
    if event == "enter":
        return "pending"
    if event == "leave":
        return "idle"
    if event == "timer_fired":
        return "showing" if state == "pending" else state
    raise ValueError(f"Unknown hover event: {event}")


@dataclass(frozen=True)
class HoverPreview:
    video_id: str
    state: HoverState = "idle"
    delay_ms: int = HOVER_DELAY_MS

    def handle(self, event: HoverEvent) -> HoverPreview:
        return replace(self, state=hover_transition(self.state, event))

    @property
    def timer_armed(self) -> bool:
        return self.state == "pending"

    @property
    def show_preview(self) -> bool:
        return self.state == "showing"

    @property
    def embed_url(self) -> str:
        return embed_url(self.video_id)


def embed_url(video_id: str) -> str:
    return EMBED_URL_TEMPLATE.format(video_id=quote(video_id, safe=""))


def watch_url(video_id: str) -> str:
    return WATCH_URL_TEMPLATE.format(video_id=quote(video_id, safe=""))
