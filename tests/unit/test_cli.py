from __future__ import annotations

import pytest
from typer.testing import CliRunner

from slowlab import main
from slowlab.errors import SetupError
from slowlab.scenarios.abstract import ScenarioResult
from tests.fakes import InMemoryOrderStore

cli = CliRunner(env={"COLUMNS": "200"})


@pytest.fixture(autouse=True)
def _keep_test_logging(monkeypatch):
    # dictConfig would bind handlers to the runner's temporary streams.
    monkeypatch.setattr(main, "configure_logging", lambda **kwargs: None)


def _results() -> list[ScenarioResult]:
    return [
        ScenarioResult(
            type="bookmark lookup vs covering index",
            name="index + row fetch",
            description="heap fetch per row",
            duration_seconds=1.5,
            row_count=1_000_000,
            plan=["Index Scan using idx_orders_customer_id on orders"],
        ),
        ScenarioResult(
            type="bookmark lookup vs covering index",
            name="covering index",
            description="index only",
            error="setup: boom",
        ),
    ]


def _patch_store(monkeypatch) -> InMemoryOrderStore:
    store = InMemoryOrderStore()
    monkeypatch.setattr(main, "open_store", lambda: store)
    return store


def test_run_passes_flags_and_prints_results(monkeypatch) -> None:
    store = _patch_store(monkeypatch)
    captured = {}

    def fake_run_lab(config, store_arg):
        captured["config"] = config
        captured["store"] = store_arg
        return _results()

    monkeypatch.setattr(main, "run_lab", fake_run_lab)

    result = cli.invoke(
        main.app, ["run", "--orders", "5", "--batch", "200", "--seed", "11", "--skip-seed"]
    )

    assert result.exit_code == 0, result.output
    config = captured["config"]
    assert config.orders == 5
    assert config.batch_size == 200
    assert config.seed == 11
    assert config.skip_seed is True
    assert config.skip_scenarios is False
    assert config.show_plan is True
    assert captured["store"] is store
    assert store.closed is True
    assert "index + row fetch" in result.output
    assert "Index Scan using idx_orders_customer_id" in result.output
    assert "skipped plan due to error" in result.output


def test_run_no_explain_hides_plans(monkeypatch) -> None:
    _patch_store(monkeypatch)
    monkeypatch.setattr(main, "run_lab", lambda config, store: _results())

    result = cli.invoke(main.app, ["run", "--no-explain"])

    assert result.exit_code == 0, result.output
    assert "Index Scan using idx_orders_customer_id" not in result.output


def test_scenario_errors_do_not_change_exit_code(monkeypatch) -> None:
    _patch_store(monkeypatch)
    monkeypatch.setattr(main, "run_lab", lambda config, store: _results())

    result = cli.invoke(main.app, ["run"])

    assert result.exit_code == 0
    assert "ERR: setup: boom" in result.output


def test_seed_failure_exits_non_zero(monkeypatch) -> None:
    store = _patch_store(monkeypatch)

    def failing_run_lab(config, store_arg):
        raise SetupError("seed", RuntimeError("disk full"))

    monkeypatch.setattr(main, "run_lab", failing_run_lab)

    result = cli.invoke(main.app, ["run"])

    assert result.exit_code == 1
    assert "failed to seed dataset: disk full" in result.output
    assert store.closed is True


def test_connection_failure_exits_non_zero(monkeypatch) -> None:
    def refuse():
        raise SetupError("connect", OSError("connection refused"))

    monkeypatch.setattr(main, "open_store", refuse)

    result = cli.invoke(main.app, ["run"])

    assert result.exit_code == 1
    assert "failed to connect to PostgreSQL: connection refused" in result.output


def test_scenarios_command_lists_catalog() -> None:
    result = cli.invoke(main.app, ["scenarios"])

    assert result.exit_code == 0
    assert result.output.count("\n") == 6
    assert "covering index" in result.output


def test_info_masks_password() -> None:
    result = cli.invoke(main.app, ["info"])

    assert result.exit_code == 0
    assert "***" in result.output
    assert "slowpass" not in result.output
