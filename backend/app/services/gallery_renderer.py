from __future__ import annotations

import math
from datetime import datetime
from html import escape

from backend.app.services.gallery_service import GalleryPage
from backend.app.services.hover_preview import HOVER_DELAY_MS, embed_url, watch_url
from backend.app.services.video_pipeline import NormalizedVideo

PAGE_TITLE = "Top most viewed music videos in Vietnam"
PAGE_SUBTITLE = "Sorted by view count · Refreshes hourly"
CONFIG_ERROR_BANNER = (
    "Could not load videos. Check that <code>YOUTUBE_API_KEY</code> is set in "
    "<code>.env</code> and the API is enabled."
)

_STYLESHEET = """
body { margin: 0; background: #fafafa; color: #18181b; font-family: system-ui, sans-serif; }
main { max-width: 64rem; margin: 0 auto; padding: 2rem 1rem; }
h1 { font-size: 1.5rem; margin: 0 0 .25rem; }
.subtitle { color: #52525b; font-size: .875rem; margin: 0 0 2rem; }
.error { border: 1px solid #fecaca; background: #fef2f2; color: #991b1b;
  border-radius: .5rem; padding: .75rem 1rem; font-size: .875rem; }
.empty { color: #71717a; }
.grid { list-style: none; padding: 0; display: grid; gap: 1.5rem;
  grid-template-columns: repeat(auto-fill, minmax(18rem, 1fr)); }
.card { display: block; overflow: hidden; border: 1px solid #e4e4e7; border-radius: 1rem;
  background: #fff; color: inherit; text-decoration: none; }
.card:hover { border-color: #a1a1aa; }
.thumb { position: relative; aspect-ratio: 16 / 9; background: #e4e4e7; }
.thumb img, .thumb iframe { position: absolute; inset: 0; width: 100%; height: 100%;
  object-fit: cover; border: 0; }
.no-thumb { display: flex; height: 100%; align-items: center; justify-content: center;
  color: #71717a; font-size: .875rem; }
.rank { position: absolute; left: .5rem; top: .5rem; z-index: 2; border-radius: .375rem;
  background: rgba(0, 0, 0, .7); color: #fff; padding: .125rem .5rem; font-size: .75rem;
  font-weight: 600; }
.body { padding: 1rem; }
.body h2 { font-size: 1rem; margin: 0; }
.meta { margin-top: .5rem; color: #71717a; font-size: .75rem; display: flex; gap: 1rem; }
.channel { margin: .25rem 0 0; color: #71717a; font-size: .875rem; }
nav.pages { display: flex; justify-content: space-between; align-items: center;
  margin-top: 2rem; font-size: .875rem; }
"""

# Mirrors hover_transition(): enter arms the timer, leave resets, timer only
# promotes a pending card.
_HOVER_SCRIPT = """
(function () {
  var delay = %(delay_ms)d;
  document.querySelectorAll("[data-preview-card]").forEach(function (card) {
    var state = "idle";
    var timer = null;
    var thumb = card.querySelector(".thumb");
    function clearTimer() { if (timer !== null) { clearTimeout(timer); timer = null; } }
    function hidePreview() {
      var frame = thumb.querySelector("iframe");
      if (frame) { frame.remove(); }
    }
    function showPreview() {
      if (!thumb.querySelector("img")) { return; }
      var frame = document.createElement("iframe");
      frame.src = card.getAttribute("data-embed-url");
      frame.title = card.getAttribute("data-title") || "Video preview";
      frame.allow = "accelerometer; autoplay; clipboard-write; encrypted-media; " +
        "gyroscope; picture-in-picture";
      frame.allowFullscreen = true;
      thumb.appendChild(frame);
    }
    card.addEventListener("mouseenter", function () {
      clearTimer();
      state = "pending";
      timer = setTimeout(function () {
        timer = null;
        if (state === "pending") { state = "showing"; showPreview(); }
      }, delay);
    });
    card.addEventListener("mouseleave", function () {
      clearTimer();
      state = "idle";
      hidePreview();
    });
  });
})();
"""


def format_view_count(raw_value: str | None) -> str:
    if raw_value is None or raw_value == "":
        return ""
    try:
        number = float(raw_value)
    except ValueError:
        return raw_value
    if math.isnan(number):
        return raw_value
    if number >= 1_000_000_000:
        return f"{number / 1_000_000_000:.1f}B"
    if number >= 1_000_000:
        return f"{number / 1_000_000:.1f}M"
    if number >= 1_000:
        return f"{number / 1_000:.1f}K"
    if number.is_integer():
        return str(int(number))
    return str(number)


def format_published_date(raw_value: str | None) -> str:
    if not raw_value:
        return ""
    try:
        parsed = datetime.fromisoformat(raw_value.strip())
    except ValueError:
        return ""
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def render_video_card(
    video: NormalizedVideo,
    *,
    rank: int | None = None,
) -> str:
    title = video.title or "Untitled"
    channel = video.channel_title or "Unknown channel"

    if video.thumbnail_url:
        alt_text = escape(video.title or "Video")
        thumbnail = f'<img src="{escape(video.thumbnail_url)}" alt="{alt_text}">'
    else:
        thumbnail = '<div class="no-thumb">No thumbnail</div>'
    rank_badge = f'<span class="rank">#{rank}</span>' if rank is not None else ""

    meta_parts: list[str] = []
    if video.view_count:
        meta_parts.append(f"<span>{escape(format_view_count(video.view_count))} views</span>")
    if video.like_count:
        meta_parts.append(f"<span>{escape(format_view_count(video.like_count))} likes</span>")
    meta = f'<div class="meta">{"".join(meta_parts)}</div>' if meta_parts else ""

    published = format_published_date(video.published_at)
    published_line = f'<p class="channel">{escape(published)}</p>' if published else ""

    return (
        "<li>"
        f'<a class="card" href="{escape(watch_url(video.video_id))}" target="_blank" '
        'rel="noopener noreferrer" data-preview-card '
        f'data-embed-url="{escape(embed_url(video.video_id))}" '
        f'data-title="{escape(title)}">'
        f'<div class="thumb">{thumbnail}{rank_badge}</div>'
        '<div class="body">'
        f"<h2>{escape(title)}</h2>"
        f'<p class="channel">{escape(channel)}</p>'
        f"{meta}{published_line}"
        "</div></a></li>"
    )


def render_pagination_nav(page: GalleryPage, *, base_path: str = "/") -> str:
    pagination = page.pagination
    if pagination.total_pages <= 1:
        return ""
    previous_link = (
        f'<a href="{escape(base_path)}?page={pagination.page - 1}" rel="prev">&larr; Previous</a>'
        if pagination.has_prev_page
        else "<span></span>"
    )
    next_link = (
        f'<a href="{escape(base_path)}?page={pagination.page + 1}" rel="next">Next &rarr;</a>'
        if pagination.has_next_page
        else "<span></span>"
    )
    return (
        '<nav class="pages">'
        f"{previous_link}"
        f"<span>Page {pagination.page} of {pagination.total_pages} "
        f"&middot; {pagination.total_count} videos</span>"
        f"{next_link}"
        "</nav>"
    )


def render_gallery_page(
    page: GalleryPage | None,
    *,
    error_message: str | None = None,
    hover_delay_ms: int = HOVER_DELAY_MS,
    base_path: str = "/",
) -> str:
    if error_message is not None or page is None:
        banner = escape(error_message) if error_message is not None else CONFIG_ERROR_BANNER
        content = f'<div class="error" role="alert">{banner}</div>'
    elif not page.videos:
        content = '<p class="empty">No videos to show.</p>'
    else:
        cards = "".join(
            render_video_card(video, rank=page.first_rank + index)
            for index, video in enumerate(page.videos)
        )
        nav = render_pagination_nav(page, base_path=base_path)
        content = f'<ul class="grid">{cards}</ul>{nav}'

    script = _HOVER_SCRIPT % {"delay_ms": max(0, hover_delay_ms)}
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{escape(PAGE_TITLE)}</title>"
        f"<style>{_STYLESHEET}</style></head>"
        "<body><main>"
        f"<h1>{escape(PAGE_TITLE)}</h1>"
        f'<p class="subtitle">{escape(PAGE_SUBTITLE)}</p>'
        f"{content}"
        "</main>"
        f"<script>{script}</script>"
        "</body></html>"
    )
