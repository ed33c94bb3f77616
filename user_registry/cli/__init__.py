"""Command line interface for the user registry service."""

import typer

from .data_commands import list_users, seed
from .server_commands import init_database, serve

app = typer.Typer(
    name="user-registry",
    help="User Registry CLI - Run the API server and manage stored users",
    rich_markup_mode="rich",
)

app.command(name="serve")(serve)
app.command(name="init-db")(init_database)
app.command(name="seed")(seed)
app.command(name="list-users")(list_users)


if __name__ == "__main__":
    app()
