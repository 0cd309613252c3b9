"""Command-line interface for Toolshed."""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Optional

import typer

from toolshed.assistant import analyze_work_task
from toolshed.barcode.resolver import build_barcode_resolver
from toolshed.barcode.variants import normalize_barcode
from toolshed.config import get_settings
from toolshed.db.items import find_items_by_barcode, list_inventory_snapshot
from toolshed.db.maintenance import get_reminder_counts, list_reminders, list_upcoming_reminders
from toolshed.llm.client import LLMError, build_llm_client
from toolshed.logging_utils import configure_logging
from toolshed.matching import match_all

app = typer.Typer(help="Toolshed workshop inventory commands.")


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _echo_json(payload: Any, pretty: bool) -> None:
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty))


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(
        settings.log_level,
        settings.log_format,
        [settings.api_token or "", settings.llm_api_key or ""],
    )


@app.command()
def lookup(
    barcode: str = typer.Argument(..., help="UPC/EAN/GTIN or other product code."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """
    Resolve a barcode against the public product databases and local inventory.
    """

    resolver = build_barcode_resolver()
    product = resolver.resolve(barcode)
    owned = find_items_by_barcode(barcode) if normalize_barcode(barcode) else []
    if product is None and not owned:
        typer.secho(f"No product found for barcode {barcode}.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    _echo_json(
        {
            "barcode": barcode,
            "product": product.model_dump(mode="json", by_alias=True) if product else None,
            "ownedItems": [item.model_dump(mode="json") for item in owned],
        },
        pretty,
    )


@app.command()
def match(
    requirements_path: str = typer.Argument(..., help="JSON file holding the requirement list."),
    inventory_path: Optional[str] = typer.Option(
        None,
        "--inventory",
        help="JSON inventory snapshot; the local database is used when omitted.",
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Classify required tools against the inventory without calling the AI provider."""

    requirements = _load_json(requirements_path)
    inventory = _load_json(inventory_path) if inventory_path else list_inventory_snapshot()
    matches = match_all(requirements, inventory)
    _echo_json([entry.model_dump(mode="json", by_alias=True) for entry in matches], pretty)


@app.command("analyze-task")
def analyze_task(
    task: str = typer.Argument(..., help="Description of the job, e.g. 'hang a shelf'."),
    add_missing: bool = typer.Option(
        False,
        "--add-missing",
        help="Put missing tools on the shopping list.",
    ),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty-print output JSON."),
) -> None:
    """Ask the AI provider which tools a task needs and check them against inventory."""

    llm = build_llm_client()
    if llm is None:
        typer.secho("AI provider is not configured.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    try:
        result = analyze_work_task(
            task,
            list_inventory_snapshot(),
            llm,
            add_missing_to_shopping_list=add_missing,
        )
    except (LLMError, ValueError) as exc:
        typer.secho(f"Task analysis failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    _echo_json(result.model_dump(mode="json", by_alias=True), pretty)


@app.command()
def reminders() -> None:
    """Show reminder badge counts and maintenance due within the next week."""

    counts = get_reminder_counts()
    typer.echo(
        f"Maintenance due: {counts.maintenance_due} | "
        f"Overdue loans: {counts.overdue_loans} | "
        f"Low stock: {counts.low_stock_items}"
    )
    today = date.today()
    for label, entries in (("Due", list_reminders(due_by=today)), ("Upcoming", list_upcoming_reminders(today))):
        for reminder in entries:
            owner = reminder.item_name or reminder.item_id
            typer.echo(f"{label} {reminder.next_due.isoformat()}  {owner}: {reminder.task_description}")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `toolshed` console script."""
    app(prog_name="toolshed", args=argv)


if __name__ == "__main__":
    main()
