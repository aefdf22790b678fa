#!/usr/bin/env python3
"""
Run the texsnap HTTP server.

Examples:\n

    serve.py                          # http://127.0.0.1:3001

    serve.py --host 0.0.0.0 --port 8080

    serve.py --log-level debug           # echo per-request compile logs
"""

from pathlib import Path
from typing import Optional

import typer
import uvicorn
from typing_extensions import Annotated

from texsnap.config import load_settings
from texsnap.contexts.serving.app import create_app

app = typer.Typer(help="Serve the texsnap compile API", add_completion=False)


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port")] = 3001,
    log_level: Annotated[str, typer.Option("--log-level", help="Console log level (debug, info, warning)")] = "info",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="YAML settings file", exists=True),
    ] = None,
):
    """Start the server. The scratch directory is emptied on startup."""
    settings = load_settings(config)
    uvicorn.run(create_app(settings, log_level=log_level), host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    app()
