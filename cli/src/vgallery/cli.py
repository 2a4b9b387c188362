"""Main CLI entry point for VPop Gallery."""

import click

from .commands import server, videos


@click.group()
@click.version_option(version="0.1.0")
def main():
    """VPop Gallery - most viewed Vietnamese music videos in the terminal."""
    pass


main.add_command(videos.top)
main.add_command(videos.show_config, name="config")
main.add_command(server.serve)


if __name__ == "__main__":
    main()
