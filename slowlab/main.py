from __future__ import annotations

import sys
from typing import Optional

import typer

from slowlab.config import get_settings
from slowlab.domain.hot_rows import HOT_CUSTOMER_TARGET
from slowlab.errors import SetupError
from slowlab.orchestrator import LabConfig, open_store, run_lab
from slowlab.reporter import print_plans, print_results
from slowlab.scenarios.catalog import default_scenarios
from slowlab.utils.logging import configure_logging

app = typer.Typer(help="Slow Query Lab CLI: seed synthetic orders and compare slow/fast queries.")

_STAGE_ACTIONS = {
    "connect": "connect to PostgreSQL",
    "schema": "migrate schema",
    "seed": "seed dataset",
}


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}:***@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?{settings.db_options} | orders={settings.seed_orders} "
        f"batch={settings.seed_batch_size} statement_timeout_ms={settings.db_statement_timeout_ms}"
    )


@app.command()
def scenarios() -> None:
    """
    List the built-in scenarios in run order.
    """
    for index, scenario in enumerate(default_scenarios(), start=1):
        typer.echo(f"{index}. [{scenario.type}] {scenario.name}: {scenario.description}")


@app.command()
def run(
    orders: Optional[int] = typer.Option(
        None,
        "--orders",
        "-o",
        help=f"Target number of orders to store (raised to {HOT_CUSTOMER_TARGET:,} if lower).",
    ),
    batch: Optional[int] = typer.Option(
        None,
        "--batch",
        "-b",
        help="Batch size for bulk inserts.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for the hot-phone and date-range random source.",
    ),
    skip_seed: bool = typer.Option(False, "--skip-seed", help="Skip inserting synthetic data."),
    skip_scenarios: bool = typer.Option(
        False, "--skip-scenarios", help="Skip running the slow query scenarios."
    ),
    explain: bool = typer.Option(
        True, "--explain/--no-explain", help="Print the query plan for each scenario."
    ),
) -> None:
    """
    Seed the dataset and run every scenario, then print the results table.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    config = LabConfig(
        orders=orders if orders is not None else settings.seed_orders,
        batch_size=batch if batch is not None else settings.seed_batch_size,
        seed=seed if seed is not None else settings.seed_random,
        skip_seed=skip_seed,
        skip_scenarios=skip_scenarios,
        show_plan=explain,
    )

    try:
        store = open_store()
    except SetupError as exc:
        typer.echo(f"failed to connect to PostgreSQL: {exc.cause}", err=True)
        raise typer.Exit(code=1)

    try:
        results = run_lab(config, store)
    except SetupError as exc:
        typer.echo(f"failed to {_STAGE_ACTIONS.get(exc.stage, exc.stage)}: {exc.cause}", err=True)
        raise typer.Exit(code=1)
    finally:
        store.close()

    if not results:
        return
    if config.show_plan:
        print_plans(results)
    print_results(results)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
