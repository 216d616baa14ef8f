"""
PracticePilot CLI — command-line interface.

Usage:
    practicepilot analyze client.yaml
    practicepilot analyze client.yaml --as-of 2025-03-01 --output report.md
    practicepilot bubble client.yaml
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from practicepilot import __version__
from practicepilot.models.insight import InsightType
from practicepilot.models.report import ClientReport, ClientSnapshot

app = typer.Typer(
    name="practicepilot",
    help="PracticePilot — budget and progress analytics for therapy practices",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

INSIGHT_COLORS = {
    InsightType.DANGER: "red",
    InsightType.WARNING: "yellow",
    InsightType.INFO: "blue",
    InsightType.SUCCESS: "green",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]PracticePilot[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """PracticePilot — know where every plan dollar goes."""


def _load_snapshot(path: str) -> ClientSnapshot:
    """Load a YAML or JSON client snapshot, exiting with an error on failure."""
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        console.print(f"[red]Error:[/red] Snapshot file not found: {path}")
        raise typer.Exit(1)

    try:
        with open(snapshot_path) as f:
            data = yaml.safe_load(f) or {}
        return ClientSnapshot.model_validate(data)
    except (yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Error:[/red] Invalid snapshot {path}: {escape(str(e))}")
        raise typer.Exit(1) from e


def _parse_as_of(value: str | None) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid --as-of date '{value}', expected YYYY-MM-DD")
        raise typer.Exit(1) from e


@app.command()
def analyze(
    snapshot: str = typer.Argument(..., help="Path to a client snapshot (.yaml or .json)"),
    as_of: str = typer.Option(
        None,
        "--as-of",
        help="Reference date (YYYY-MM-DD), defaults to today",
    ),
    config: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    output: str = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (.md, .json)",
    ),
) -> None:
    """Analyze a client's budget and therapy progress."""
    from practicepilot.engine import PracticeAnalytics

    client = _load_snapshot(snapshot)
    reference = _parse_as_of(as_of)

    try:
        analytics = PracticeAnalytics.from_config(config)
    except ValidationError as e:
        console.print(f"[red]Error:[/red] Invalid config: {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print(Panel.fit(
        f"[bold blue]PracticePilot[/bold blue] — {client.client_name or analytics.config.default_client_name}",
        subtitle=f"as of {reference.isoformat()}",
    ))

    report = analytics.analyze(client, reference)
    _display_report(report, analytics.config.currency_symbol)

    if output:
        _save_report(report, output, analytics.config.currency_symbol)


@app.command()
def bubble(
    snapshot: str = typer.Argument(..., help="Path to a client snapshot (.yaml or .json)"),
    config: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Print the bubble-chart hierarchy of a client's budget items as JSON."""
    from practicepilot.analyzers.bubble import BubbleHierarchyBuilder
    from practicepilot.config import PracticePilotConfig

    client = _load_snapshot(snapshot)
    settings = PracticePilotConfig.load(config)
    root = BubbleHierarchyBuilder(settings.bubble).from_items(client.budget_items)
    console.print_json(root.model_dump_json(by_alias=True, exclude_none=True))


def _display_report(report: ClientReport, currency_symbol: str = "$") -> None:
    """Display report summary in the terminal."""
    console.print()

    table = Table(title="Client Summary", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    if report.budget is not None:
        budget = report.budget
        table.add_row("Total Budget", f"{currency_symbol}{budget.total_budget:,.2f}")
        table.add_row("Total Spent", f"{currency_symbol}{budget.total_spent:,.2f}")
        table.add_row("Utilization", f"{budget.utilization_rate:.1f}%")
        table.add_row("Spending Trend", budget.spending_patterns.trend.value)
        if budget.forecasted_depletion:
            table.add_row("Forecasted Depletion", budget.forecasted_depletion.isoformat())
    if report.progress is not None:
        table.add_row("Overall Progress", f"{report.progress.overall_progress:.1f}%")
        table.add_row("Attendance", f"{report.progress.attendance_rate:.1f}%")
    if report.efficiency is not None:
        table.add_row(
            "Cost per Progress Point",
            f"{currency_symbol}{report.efficiency.cost_per_progress_point:,.2f}",
        )

    console.print(table)
    console.print()

    ranked = report.insights.ranked()
    if not ranked:
        console.print("[dim]No budget or progress data to analyze.[/dim]")
        return

    console.print("[bold]Insights:[/bold]")
    for i, insight in enumerate(ranked, 1):
        color = INSIGHT_COLORS[insight.type]
        console.print(f"  {i}. [{color}][{insight.type.value.upper()}][/{color}] {insight.message}")
        if insight.recommendation:
            console.print(f"     [dim]→ {insight.recommendation}[/dim]")


def _save_report(report: ClientReport, output: str, currency_symbol: str = "$") -> None:
    """Save report to file."""
    path = Path(output)
    if path.suffix == ".json":
        content = report.to_json()
    else:
        content = report.to_markdown(currency_symbol=currency_symbol)

    path.write_text(content)
    console.print(f"[green]✓[/green] Report saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
