"""Command-line interface for lendingdesk.

Built with Typer for commands and Rich for output.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from .config import get_config
from .db import get_db
from .lending import Book, Customer, LendingError, LendingManager
from .lending.library import SqliteLibraryService

# Create the main app
app = typer.Typer(
    name="lendingdesk",
    help="Lend and renew library books.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
book_app = typer.Typer(help="Manage books.")
app.add_typer(book_app, name="book")
customer_app = typer.Typer(help="Manage customers.")
app.add_typer(customer_app, name="customer")

# Rich console for pretty output
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


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def setup_logging(level: int) -> None:
    """Send library logs through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Lend and renew library books."""
    config = get_config()
    setup_logging(logging.DEBUG if verbose else config.log_level_value)


# ============================================================================
# Setup Commands
# ============================================================================


@app.command()
def init() -> None:
    """Create the database tables."""
    config = get_config()
    for problem in config.validate():
        print_error(problem)
        raise typer.Exit(1)

    db = get_db(str(config.db_path))
    db.create_tables()
    print_success(f"Database ready at {db.db_path}")


@book_app.command("add")
def book_add(
    book_id: str = typer.Argument(..., help="Book ID"),
    penalty: int = typer.Option(0, "--penalty", "-p", min=0, help="Late fee per day"),
    legacy: bool = typer.Option(False, "--legacy", help="Store in the legacy archive"),
) -> None:
    """Register a book."""
    db = get_db(str(get_config().db_path))
    try:
        db.add_book(Book(id=book_id, day_penalty=penalty), legacy=legacy)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    where = "legacy archive" if legacy else "library"
    print_success(f"Added book {book_id} to the {where}")


@customer_app.command("add")
def customer_add(
    customer_id: int = typer.Argument(..., help="Customer ID"),
    age: int = typer.Option(..., "--age", "-a", min=0, help="Age in years"),
    locked: bool = typer.Option(False, "--locked", help="Create the account locked"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Customer name"),
) -> None:
    """Register a customer."""
    db = get_db(str(get_config().db_path))
    try:
        db.add_customer(Customer(id=customer_id, age=age, is_locked=locked), name=name)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Added customer {customer_id}")


# ============================================================================
# Lending Commands
# ============================================================================


@app.command()
def lend(
    book_id: str = typer.Argument(..., help="Book ID to lend or renew"),
    customer_id: int = typer.Argument(..., help="Customer ID"),
) -> None:
    """Lend a book to a customer, or renew it if they already have it."""
    db = get_db(str(get_config().db_path))
    manager = LendingManager(SqliteLibraryService(db))

    try:
        held = db.find_book(book_id)
    except SQLAlchemyError as e:
        print_error(f"Database error: {e}")
        raise typer.Exit(1)
    renewing = held is not None and not held.is_available

    try:
        book = manager.lend_book(book_id, customer_id)
    except LendingError as e:
        print_error(str(e))
        raise typer.Exit(1)

    due = book.current_loan.due_at.astimezone(timezone.utc)
    if renewing:
        print_success(f"Book {book.id} renewed for customer {customer_id}")
    else:
        print_success(f"Book {book.id} lent to customer {customer_id}")
    print_info(f"Due: {due:%Y-%m-%d %H:%M} UTC")


@app.command()
def loans(
    customer_id: int = typer.Argument(..., help="Customer ID"),
) -> None:
    """List the books a customer has on loan."""
    db = get_db(str(get_config().db_path))
    books = db.list_loans(customer_id)

    if not books:
        print_info(f"Customer {customer_id} has no books on loan")
        return

    now = datetime.now(timezone.utc)
    table = Table(title=f"Loans for customer {customer_id}", show_header=True, header_style="bold magenta")
    table.add_column("Book", style="cyan")
    table.add_column("Due", style="green")
    table.add_column("Day penalty", justify="right")
    table.add_column("Overdue", justify="center")

    for book in books:
        loan = book.current_loan
        table.add_row(
            book.id,
            f"{loan.due_at:%Y-%m-%d %H:%M}",
            str(book.day_penalty),
            "[red]yes[/red]" if loan.is_overdue(now) else "-",
        )

    console.print(table)


@app.command()
def payments(
    customer_id: int = typer.Argument(..., help="Customer ID"),
) -> None:
    """List payments collected from a customer."""
    db = get_db(str(get_config().db_path))
    records = db.list_payments(customer_id)

    if not records:
        print_info(f"No payments collected from customer {customer_id}")
        return

    table = Table(title=f"Payments from customer {customer_id}", show_header=True, header_style="bold magenta")
    table.add_column("Collected", style="green")
    table.add_column("Amount", justify="right")

    for payment in records:
        table.add_row(payment.collected_at[:19].replace("T", " "), str(payment.amount))

    console.print(table)
    console.print(f"[bold]Total:[/bold] {sum(p.amount for p in records)}")


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"lendingdesk version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
