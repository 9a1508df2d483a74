"""Command-line interface for librarydesk.

Built with Typer for commands and Rich for output.
"""

from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import configure_logging, get_config
from .db import get_db
from .errors import LibraryError

app = typer.Typer(
    name="librarydesk",
    help="Run and administer the library lending service.",
    no_args_is_help=True,
)

console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_overdue_table(records: list, now) -> Table:
    """Create a rich table for displaying overdue loans."""
    table = Table(title="Overdue Loans", show_header=True, header_style="bold magenta")
    table.add_column("Book", style="cyan", max_width=40)
    table.add_column("Borrower", style="green", max_width=30)
    table.add_column("Email", style="dim")
    table.add_column("Due", justify="center")
    table.add_column("Days Overdue", justify="right", style="red")

    for record in records:
        table.add_row(
            record.book.title,
            record.borrower.name,
            record.borrower.email,
            record.due_date.strftime("%Y-%m-%d"),
            str(record.days_overdue(now)),
        )

    return table


# ============================================================================
# Commands
# ============================================================================


@app.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    db = get_db()
    db.create_tables()
    print_success(f"Database ready at {db.url.render_as_string(hide_password=True)}")


@app.command()
def seed() -> None:
    """Load demo books, borrowers and loans into an empty database."""
    from .seed import DEMO_PASSWORD, DEMO_USERNAME, seed_database

    if seed_database(get_db()):
        print_success("Demo data loaded")
        console.print(f"Log in as [cyan]{DEMO_USERNAME}[/cyan] / [cyan]{DEMO_PASSWORD}[/cyan]")
    else:
        print_warning("Database already has books; nothing seeded")


@app.command("create-user")
def create_user(
    username: str = typer.Option(..., "--username", "-u", prompt="Username"),
    email: str = typer.Option(..., "--email", "-e", prompt="Email"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    role: str = typer.Option("librarian", "--role", "-r", help="Role stored in the token"),
) -> None:
    """Create an API user."""
    from .auth import AuthManager, RegisterRequest

    try:
        data = RegisterRequest(username=username, email=email, password=password, role=role)
        user = AuthManager(get_db()).register(data)
    except ValidationError as e:
        for err in e.errors():
            print_error(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}")
        raise typer.Exit(1)
    except LibraryError as e:
        print_error(e.message)
        raise typer.Exit(1)

    print_success(f"Created user {user.username} ({user.role})")


@app.command()
def overdue() -> None:
    """List loans that are past their due date."""
    from .db.models import utcnow
    from .lending import LendingManager

    records = LendingManager(get_db()).overdue_books()
    if not records:
        console.print("[dim]No overdue loans.[/dim]")
        return

    console.print(format_overdue_table(records, utcnow()))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    debug: bool = typer.Option(False, "--debug", help="Run Flask in debug mode"),
) -> None:
    """Run the HTTP API."""
    from .api import create_app

    config = get_config()
    configure_logging(config.log_level)

    flask_app = create_app(config, get_db())
    bind_host = host or config.host
    bind_port = port or config.port
    console.print(f"librarydesk API running at [cyan]http://{bind_host}:{bind_port}[/cyan]")
    flask_app.run(host=bind_host, port=bind_port, debug=debug)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"librarydesk version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
