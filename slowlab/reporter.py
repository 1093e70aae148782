from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from slowlab.scenarios.abstract import ScenarioResult

DESCRIPTION_WIDTH = 40


def truncate_text(text: str, limit: int = DESCRIPTION_WIDTH) -> str:
    """Cut ``text`` to ``limit`` characters, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit] + "…"


def format_duration(seconds: float) -> str:
    if seconds >= 1:
        return f"{seconds:.2f}s"
    return f"{seconds * 1000:.2f}ms"


def print_plans(results: Sequence[ScenarioResult], console: Optional[Console] = None) -> None:
    """
    Print each scenario's captured plan; errored scenarios get a one-line note.
    """
    console = console or Console()
    for res in results:
        label = escape(f"[scenario: {res.name}]")
        if not res.ok:
            console.print(
                f"[yellow]{label} skipped plan due to error: {escape(res.error or '')}[/yellow]"
            )
            continue
        console.print(f"[bold cyan]{label}[/bold cyan] {escape(res.description)}")
        for line in res.plan:
            console.print(f"  {line}", markup=False, highlight=False)


def build_results_table(results: Sequence[ScenarioResult]) -> Table:
    """
    Build the results table, one section per comparison type.

    Rows inside a section are numbered from 1 so the slow/fast pair reads as
    "1 vs 2".
    """
    table = Table(
        title="Slow Query Lab Results",
        box=box.ROUNDED,
        caption="Scenarios in catalog order",
    )
    table.add_column("Type", style="magenta", no_wrap=True)
    table.add_column("#", justify="right", style="blue")
    table.add_column("Scenario", style="cyan", no_wrap=True)
    table.add_column(f"Description (first {DESCRIPTION_WIDTH})")
    table.add_column("Duration", justify="right", style="green")
    table.add_column("Rows", justify="right", style="yellow")
    table.add_column("Status")

    current_type: Optional[str] = None
    counter = 0
    for res in results:
        type_label = ""
        if res.type != current_type:
            if current_type is not None:
                table.add_section()
            current_type = res.type
            counter = 0
            type_label = res.type
        counter += 1
        status = "[green]OK[/green]" if res.ok else f"[red]{escape(res.status)}[/red]"
        table.add_row(
            type_label,
            str(counter),
            res.name,
            truncate_text(res.description),
            format_duration(res.duration_seconds),
            f"{res.row_count:,}",
            status,
        )
    return table


def print_results(results: Sequence[ScenarioResult], console: Optional[Console] = None) -> None:
    """
    Render scenario results as a rich table.
    """
    console = console or Console()

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    console.print(build_results_table(results))


__all__ = ["build_results_table", "print_plans", "print_results", "truncate_text"]
