"""Server and database CLI commands."""

import typer
from rich.panel import Panel

from user_registry.app.runtime.context import get_config
from user_registry.app.runtime.init_db import init_db

from .utils import console


def serve(
    host: str | None = typer.Option(None, help="Host to bind (default: app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (default: app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Uvicorn log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the user registry API server.
    """
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            f"[bold green]Starting {config.app.service_name}[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Store backend:[/blue] {config.store.backend}")
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "user_registry.app.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
        access_log=False,  # We handle access logging in middleware
    )


def init_database() -> None:
    """
    🗄️ Create the database tables for the configured database.
    """
    config = get_config()
    init_db()
    console.print(f"[green]✅ Tables created in {config.database.url}[/green]")
