"""Command-line interface for smsexpense."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import ImportSettings
from .core.models import ExtractedExpense, ImportResult, RawMessage
from .importer.batch_importer import SMSImporter
from .importer.options import RANGE_KINDS, TYPE_FILTERS, build_import_options
from .importer.sms_parser import SMSParser
from .importer.stats import get_import_stats
from .sources.json_source import JsonFileMessageSource
from .storage.kv_store import KeyValueStore
from .storage.sync_state import SyncStateStore
from .storage.transaction_store import KeyValueTransactionStore

console = Console()
app = typer.Typer(
    name="smsexpense",
    help="Extract expenses and income from bank SMS messages",
    add_completion=False,
)


@app.callback()
def setup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging from the environment."""
    settings = ImportSettings.from_env()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def parse(
    text: str = typer.Argument(..., help="SMS body to parse"),
    sender: str = typer.Option("", "--sender", "-s", help="Sender address"),
) -> None:
    """Parse a single SMS body and show the extracted transaction."""
    message = RawMessage(
        id="cli",
        address=sender,
        body=text,
        date=int(time.time() * 1000),
    )
    expense = SMSParser().parse(message)

    if expense is None:
        rprint("[yellow]No transaction found in message[/yellow]")
        return

    _display_expense(expense)


@app.command("import")
def import_sms(
    sms_file: Path = typer.Argument(..., help="JSON export of the SMS inbox"),
    range_kind: str = typer.Option(
        "30d", "--range", "-r", help=f"Date range: {', '.join(RANGE_KINDS)}"
    ),
    days: int | None = typer.Option(None, "--days", help="Day count for --range days"),
    start: datetime | None = typer.Option(
        None, "--start", formats=["%Y-%m-%d"], help="First day for --range range"
    ),
    end: datetime | None = typer.Option(
        None, "--end", formats=["%Y-%m-%d"], help="Last day for --range range"
    ),
    type_filter: str = typer.Option(
        "all", "--type", "-t", help=f"Transaction type: {', '.join(TYPE_FILTERS)}"
    ),
    max_count: int | None = typer.Option(None, "--max-count", help="Messages to read"),
    save: bool = typer.Option(True, "--save/--no-save", help="Save accepted transactions"),
    store_path: Path | None = typer.Option(None, "--store", help="Transaction store file"),
    sync_path: Path | None = typer.Option(None, "--sync-state", help="Sync state file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write expenses to CSV"),
) -> None:
    """Import transactions from an exported SMS inbox."""
    if not sms_file.exists():
        rprint(f"[red]Error:[/red] SMS file not found: {sms_file}")
        raise typer.Exit(1)

    settings = ImportSettings.from_env()

    try:
        options = build_import_options(
            range_kind,
            days=days,
            start=start.date() if start else None,
            end=end.date() if end else None,
            type_filter=type_filter,
            max_count=max_count or settings.max_count,
            auto_save=save,
        )
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    importer = SMSImporter(
        source=JsonFileMessageSource(sms_file),
        store=KeyValueTransactionStore(KeyValueStore(store_path or settings.store_path))
        if save
        else None,
        sync_state=SyncStateStore(KeyValueStore(sync_path or settings.sync_path)),
        confidence_threshold=settings.confidence_threshold,
        default_days_back=settings.days_back,
    )
    result = asyncio.run(importer.import_expenses(options))

    if not result.success:
        rprint(f"[red]{result.to_summary()}[/red]")
        raise typer.Exit(1)

    _display_import_result(result)

    if output and result.expenses:
        output.parent.mkdir(parents=True, exist_ok=True)
        _save_expenses_csv(result.expenses, output)
        rprint(f"[green]Expenses saved to:[/green] {output}")


@app.command()
def stats(
    store_path: Path | None = typer.Option(None, "--store", help="Transaction store file"),
    sync_path: Path | None = typer.Option(None, "--sync-state", help="Sync state file"),
) -> None:
    """Show statistics for previously imported transactions."""
    settings = ImportSettings.from_env()
    store = KeyValueTransactionStore(KeyValueStore(store_path or settings.store_path))
    sync_state = SyncStateStore(KeyValueStore(sync_path or settings.sync_path))

    import_stats = asyncio.run(get_import_stats(store, sync_state))

    last = (
        import_stats.last_import_date.strftime("%Y-%m-%d %H:%M")
        if import_stats.last_import_date
        else "never"
    )
    summary_text = f"""
[bold]Imported transactions:[/bold] {import_stats.total_imported}
[bold]Last import:[/bold] {last}
[bold]Average confidence:[/bold] {import_stats.average_confidence:.0%}
"""
    console.print(Panel(summary_text.strip(), title="SMS Import Stats", border_style="blue"))


def _display_expense(expense: ExtractedExpense) -> None:
    summary_text = f"""
[bold]Amount:[/bold] {expense.amount:,.2f}
[bold]Type:[/bold] {expense.type.value}
[bold]Vendor:[/bold] {expense.vendor}
[bold]Category:[/bold] {expense.category}
[bold]Confidence:[/bold] {expense.confidence:.0%}
[bold]Sender:[/bold] {expense.sender}
"""
    console.print(Panel(summary_text.strip(), title="Extracted Transaction", border_style="blue"))


def _display_import_result(result: ImportResult) -> None:
    """Display import results in a formatted table."""
    summary_text = f"""
[bold]Messages processed:[/bold] {result.total_processed}
[bold]Bank SMS:[/bold] {result.bank_sms_count}
[bold]Transaction SMS:[/bold] {result.transaction_sms_count}
[bold]Extracted:[/bold] {len(result.expenses)}
[bold]Saved:[/bold] {result.saved_count}
[bold]Total amount:[/bold] {result.total_amount:,.2f}
"""
    console.print(Panel(summary_text.strip(), title=result.to_summary(), border_style="blue"))

    if result.expenses:
        table = Table(title="Extracted Transactions")
        table.add_column("Date", style="cyan")
        table.add_column("Vendor")
        table.add_column("Category")
        table.add_column("Type")
        table.add_column("Amount", justify="right")
        table.add_column("Confidence", justify="right")

        for e in result.expenses:
            amount_color = "green" if e.type.value == "income" else "red"
            table.add_row(
                datetime.fromtimestamp(e.timestamp / 1000).strftime("%Y-%m-%d %H:%M"),
                e.vendor,
                e.category,
                e.type.value,
                f"[{amount_color}]{e.amount:,.2f}[/{amount_color}]",
                f"{e.confidence:.0%}",
            )

        console.print(table)

    for error in result.errors:
        rprint(f"[yellow]Warning:[/yellow] {error}")


def _save_expenses_csv(expenses: list[ExtractedExpense], output_file: Path) -> None:
    """Save extracted expenses to CSV file."""
    import pandas as pd

    data = []
    for e in expenses:
        data.append(
            {
                "date": datetime.fromtimestamp(e.timestamp / 1000).strftime("%d/%m/%Y"),
                "vendor": e.vendor,
                "category": e.category,
                "type": e.type.value,
                "amount": f"{e.amount:.2f}",
                "confidence": f"{e.confidence:.3f}",
                "sender": e.sender,
                "description": e.description,
            }
        )

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
