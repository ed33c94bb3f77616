"""User data CLI commands."""

import typer
from rich.table import Table

from user_registry.app.core.services.demo_data import seed_demo_data
from user_registry.app.runtime.config.config_data import DemoDataConfig
from user_registry.app.runtime.context import get_config

from .utils import console, open_store


def _require_persistent_store() -> None:
    if get_config().store.backend != "database":
        console.print(
            "[red]❌ The in-memory store does not outlive this command. "
            "Set store.backend to 'database' first.[/red]"
        )
        raise typer.Exit(1)


def seed(
    count: int | None = typer.Option(
        None, min=0, help="Generated users on top of the baseline pair"
    ),
    seed_value: int | None = typer.Option(
        None, "--seed", help="Random seed for reproducible data"
    ),
) -> None:
    """
    🌱 Fill an empty store with demo users.
    """
    _require_persistent_store()
    config = get_config()
    demo_config = DemoDataConfig(
        enabled=True,
        count=config.demo_data.count if count is None else count,
        seed=config.demo_data.seed if seed_value is None else seed_value,
    )

    with open_store(config) as store:
        created = seed_demo_data(store, demo_config)
        total = store.count()

    if created:
        console.print(f"[green]✅ Created {created} users ({total} in total)[/green]")
    else:
        console.print(f"[yellow]Store already holds {total} users; nothing seeded[/yellow]")


def list_users(
    page: int = typer.Option(0, min=0, help="Zero-based page index"),
    size: int = typer.Option(20, min=1, help="Users per page"),
) -> None:
    """
    📋 Print one page of stored users.
    """
    _require_persistent_store()
    config = get_config()

    with open_store(config) as store:
        result = store.page(page, size)

    table = Table(
        title=f"Users (page {result.page + 1} of {max(result.total_pages, 1)}, "
        f"{result.total_elements} total)"
    )
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Address")
    table.add_column("Email", style="green")
    table.add_column("Telephone")

    for user in result.content:
        table.add_row(str(user.id), user.name, user.address, user.email, user.telephone)

    console.print(table)
