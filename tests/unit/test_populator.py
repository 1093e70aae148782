from __future__ import annotations

import random

import pytest

from slowlab.domain.hot_rows import (
    DATE_RANGE_END,
    DATE_RANGE_START,
    HOT_CUSTOMER_ID,
    HOT_PHONE,
)
from slowlab.errors import PopulationError
from slowlab.seeding.builder import HOT_NOTE_PREFIX, build_synthetic_order
from slowlab.seeding.populator import (
    DATE_RANGE_FILTER,
    HOT_CUSTOMER_FILTER,
    HOT_PHONE_FILTER,
    PopulationTargets,
    Populator,
)
from tests.conftest import FIXED_NOW
from tests.fakes import InMemoryOrderStore

GENERAL_TARGET = 1_500


def test_general_top_up_from_empty_inserts_target(populator, memory_store) -> None:
    inserted = populator.ensure_general_orders(GENERAL_TARGET)

    assert inserted == GENERAL_TARGET
    assert len(memory_store.orders) == GENERAL_TARGET
    assert memory_store.insert_batches == [250] * 6


def test_general_top_up_is_idempotent(populator, memory_store) -> None:
    populator.ensure_general_orders(GENERAL_TARGET)
    calls_after_first = len(memory_store.insert_batches)

    assert populator.ensure_general_orders(GENERAL_TARGET) == 0
    assert len(memory_store.insert_batches) == calls_after_first
    assert len(memory_store.orders) == GENERAL_TARGET


def test_general_top_up_inserts_exactly_the_deficit(populator, memory_store) -> None:
    populator.ensure_general_orders(600)
    existing = list(memory_store.orders)

    inserted = populator.ensure_general_orders(GENERAL_TARGET)

    assert inserted == GENERAL_TARGET - 600
    assert len(memory_store.orders) == GENERAL_TARGET
    # The first 600 rows are untouched and not duplicated.
    assert memory_store.orders[:600] == existing
    assert len({order.id for order in memory_store.orders}) == GENERAL_TARGET


def test_general_population_is_deterministic(memory_store, small_targets) -> None:
    other_store = InMemoryOrderStore()
    for store in (memory_store, other_store):
        Populator(
            store, targets=small_targets, rng=random.Random(), clock=lambda: FIXED_NOW
        ).ensure_general_orders(300)

    assert memory_store.orders == other_store.orders


def test_general_top_up_resumes_at_global_index(populator, memory_store) -> None:
    populator.ensure_general_orders(900)
    populator.ensure_general_orders(1_100)

    hot = [order for order in memory_store.orders if order.customer_id == HOT_CUSTOMER_ID]
    # Indexes 0..999 are hot regardless of how the top-up was split.
    assert len(hot) >= 1_000
    assert all(order.customer_id == HOT_CUSTOMER_ID for order in memory_store.orders[:1_000])


def test_batches_flush_on_boundary_and_remainder(memory_store, small_targets) -> None:
    populator = Populator(memory_store, batch_size=7, targets=small_targets, clock=lambda: FIXED_NOW)

    populator.ensure_general_orders(20)

    assert memory_store.insert_batches == [7, 7, 6]


def test_non_positive_batch_size_falls_back_to_default(memory_store) -> None:
    assert Populator(memory_store, batch_size=0).batch_size == 1000
    assert Populator(memory_store, batch_size=-5).batch_size == 1000


def test_write_error_aborts_remaining_batches(populator, memory_store) -> None:
    memory_store.insert_failures[2] = RuntimeError("disk full")

    with pytest.raises(RuntimeError, match="disk full"):
        populator.ensure_general_orders(GENERAL_TARGET)

    # First batch stays; nothing after the failing call was attempted.
    assert len(memory_store.orders) == 250
    assert memory_store.insert_batches == [250, 250]


def test_hot_customer_top_up_clones_template(populator, memory_store, small_targets) -> None:
    populator.ensure_general_orders(GENERAL_TARGET)
    template = memory_store.first(HOT_CUSTOMER_FILTER)
    before = memory_store.count(HOT_CUSTOMER_FILTER)

    inserted = populator.ensure_hot_customer_orders()

    assert inserted == small_targets.hot_customer - before
    assert memory_store.count(HOT_CUSTOMER_FILTER) == small_targets.hot_customer
    clones = memory_store.orders[GENERAL_TARGET:]
    assert all(order.customer_id == HOT_CUSTOMER_ID for order in clones)
    assert all(order.note.startswith(HOT_NOTE_PREFIX) for order in clones)
    assert clones[0].note == f"{HOT_NOTE_PREFIX}#{before}"
    assert (clones[0].created_at - template.created_at).total_seconds() == before
    assert clones[0].phone == template.phone


def test_hot_customer_top_up_is_idempotent(populator, memory_store) -> None:
    populator.ensure_general_orders(GENERAL_TARGET)
    populator.ensure_hot_customer_orders()
    calls = len(memory_store.insert_batches)

    assert populator.ensure_hot_customer_orders() == 0
    assert len(memory_store.insert_batches) == calls


def test_hot_customer_top_up_without_template_fails(populator, memory_store) -> None:
    with pytest.raises(PopulationError, match="template"):
        populator.ensure_hot_customer_orders()
    assert memory_store.insert_batches == []


def test_phone_hot_top_up_reaches_target(populator, memory_store, small_targets) -> None:
    assert populator.ensure_phone_hot_orders() == small_targets.hot_phone
    assert memory_store.count(HOT_PHONE_FILTER) == small_targets.hot_phone
    assert all(order.phone == HOT_PHONE for order in memory_store.orders)
    assert populator.ensure_phone_hot_orders() == 0


def test_date_range_top_up_reaches_target(populator, memory_store, small_targets) -> None:
    assert populator.ensure_date_range_orders() == small_targets.date_range
    assert memory_store.count(DATE_RANGE_FILTER) == small_targets.date_range
    for order in memory_store.orders:
        assert DATE_RANGE_START <= order.created_at < DATE_RANGE_END
    assert populator.ensure_date_range_orders() == 0


def test_date_range_top_up_only_adds_missing_rows(populator, memory_store, small_targets) -> None:
    rng = random.Random(3)
    seeded = [
        build_synthetic_order(5_000 + i, rng, FIXED_NOW).model_copy(
            update={"created_at": DATE_RANGE_START, "updated_at": DATE_RANGE_START, "shipped_at": None}
        )
        for i in range(15)
    ]
    memory_store.insert_many(seeded)

    assert populator.ensure_date_range_orders() == small_targets.date_range - 15


def test_seed_dataset_fills_every_population(populator, memory_store, small_targets) -> None:
    report = populator.seed_dataset(orders=10)

    # orders is raised to the hot-customer target
    assert report.target_orders == small_targets.hot_customer
    assert report.general == small_targets.hot_customer
    assert memory_store.count(HOT_CUSTOMER_FILTER) == small_targets.hot_customer
    assert memory_store.count(DATE_RANGE_FILTER) == small_targets.date_range
    assert memory_store.count(HOT_PHONE_FILTER) == small_targets.hot_phone
    assert report.total_inserted == len(memory_store.orders)


def test_seed_dataset_second_run_writes_nothing(populator, memory_store) -> None:
    populator.seed_dataset(orders=GENERAL_TARGET)
    rows = len(memory_store.orders)
    calls = len(memory_store.insert_batches)

    report = populator.seed_dataset(orders=GENERAL_TARGET)

    assert report.total_inserted == 0
    assert len(memory_store.orders) == rows
    assert len(memory_store.insert_batches) == calls


def test_hot_customer_default_target_is_one_million() -> None:
    assert PopulationTargets().hot_customer == 1_000_000
    assert PopulationTargets().hot_phone == 2_000
    assert PopulationTargets().date_range == 2_000


def test_default_random_source_is_seeded(small_targets) -> None:
    stores = [InMemoryOrderStore(), InMemoryOrderStore()]
    for store in stores:
        Populator(store, targets=small_targets, clock=lambda: FIXED_NOW).seed_dataset(orders=10)

    first, second = stores
    phone_rows = [o for o in first.orders if HOT_PHONE_FILTER.matches(o)]
    date_rows = [o for o in first.orders if DATE_RANGE_FILTER.matches(o)]
    assert phone_rows == [o for o in second.orders if HOT_PHONE_FILTER.matches(o)]
    assert date_rows == [o for o in second.orders if DATE_RANGE_FILTER.matches(o)]
    assert first.orders == second.orders


def test_same_seed_gives_same_special_rows(small_targets) -> None:
    stores = [InMemoryOrderStore(), InMemoryOrderStore()]
    for store in stores:
        populator = Populator(store, targets=small_targets, rng=random.Random(99))
        populator.ensure_date_range_orders()
        populator.ensure_phone_hot_orders()

    date_rows = [o for o in stores[0].orders if DATE_RANGE_FILTER.matches(o)]
    assert date_rows == [o for o in stores[1].orders if DATE_RANGE_FILTER.matches(o)]
    phone_rows = [
        (o.status, o.total_amount) for o in stores[0].orders if HOT_PHONE_FILTER.matches(o)
    ]
    assert phone_rows == [
        (o.status, o.total_amount) for o in stores[1].orders if HOT_PHONE_FILTER.matches(o)
    ]


def test_general_indexes_skip_special_populations(populator, memory_store, small_targets) -> None:
    # Special populations first, as after a --skip-seed run on an empty table.
    populator.ensure_phone_hot_orders()
    populator.ensure_date_range_orders()
    special = small_targets.hot_phone + small_targets.date_range

    inserted = populator.ensure_general_orders(small_targets.hot_customer)

    assert inserted == small_targets.hot_customer - special
    general = memory_store.orders[special:]
    assert all(order.customer_id == HOT_CUSTOMER_ID for order in general[:1_000])
    template = memory_store.first(HOT_CUSTOMER_FILTER)
    assert template is not None
    assert template.id == general[0].id
