"""Run the gallery web app from the VPop Gallery CLI."""

import click
import uvicorn

APP_IMPORT_PATH = "backend.app.main:app"


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
@click.option("--reload", is_flag=True, help="Restart the server when source files change.")
def serve(host: str, port: int, reload: bool):
    """Serve the HTML gallery and the JSON API."""
    uvicorn.run(APP_IMPORT_PATH, host=host, port=port, reload=reload)
