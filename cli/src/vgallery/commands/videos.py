"""Gallery commands for the VPop Gallery CLI."""

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from backend.app.config import load_settings
from backend.app.services.errors import GalleryServiceError
from backend.app.services.gallery_renderer import format_published_date, format_view_count
from backend.app.services.gallery_service import GalleryConfig, GalleryService
from backend.app.services.hover_preview import watch_url
from backend.app.services.response_cache import ResponseCache

console = Console()


def build_service() -> GalleryService:
    settings = load_settings()
    return GalleryService(
        GalleryConfig.from_settings(settings),
        cache=ResponseCache(ttl_seconds=settings.response_cache_ttl_seconds),
    )


@click.command()
@click.option("--page", "-p", default=1, type=int, help="Gallery page to show (1-based).")
def top(page: int):
    """Show a page of the most viewed music videos."""
    service = build_service()

    try:
        gallery = service.list_videos(max(1, page))
    except GalleryServiceError as exc:
        console.print(f"[red]{exc}[/red]")
        raise SystemExit(1)

    if not gallery.videos:
        console.print("[yellow]No videos to show[/yellow]")
        return

    pagination = gallery.pagination
    table = Table(
        title=(
            f"Top music videos - page {pagination.page} of {pagination.total_pages} "
            f"({pagination.total_count} videos)"
        )
    )
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Channel")
    table.add_column("Views", justify="right")
    table.add_column("Likes", justify="right")
    table.add_column("Published")

    for index, video in enumerate(gallery.videos):
        table.add_row(
            str(gallery.first_rank + index),
            f"[link={watch_url(video.video_id)}]{escape(video.title or 'Untitled')}[/link]",
            escape(video.channel_title or ""),
            format_view_count(video.view_count),
            format_view_count(video.like_count),
            format_published_date(video.published_at),
        )

    console.print(table)
    console.print(
        f"[dim]{gallery.upstream_calls} upstream calls, "
        f"~{gallery.estimated_api_units} quota units[/dim]"
    )


@click.command()
def show_config():
    """Show the effective gallery settings (the API key is never printed)."""
    settings = load_settings()
    config = GalleryConfig.from_settings(settings)

    key_status = "[green]configured[/green]" if config.api_key_configured else "[red]missing[/red]"
    console.print(f"[bold]API key:[/bold] {key_status}")
    console.print(f"[bold]Query:[/bold] {config.search_query}")
    console.print(f"[bold]Region:[/bold] {config.region_code}")
    console.print(f"[bold]Search pages:[/bold] {config.search_pages}")
    console.print(f"[bold]Max videos:[/bold] {config.max_videos}")
    console.print(f"[bold]Per page:[/bold] {config.per_page}")
    console.print(f"[bold]Cache TTL:[/bold] {settings.response_cache_ttl_seconds}s")
    console.print(f"[bold]Log dir:[/bold] {settings.log_dir}")
