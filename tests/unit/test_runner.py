from __future__ import annotations

import random
import sqlite3

import pytest

from storebench.domain.errors import EngineFailure, SetupFailure
from storebench.domain.models import OperationKind, ScenarioDescriptor
from storebench.infrastructure.db_factory import open_engine
from storebench.runner import resolve_workload, run_scenario
from storebench.workloads import InsertWorkload, PointQueryWorkload, UpdateWorkload, Workload

INSERT_ROWS = 100
UPDATE_TABLE_ROWS = 50
UPDATE_OPS = 30
QUERY_TABLE_ROWS = 1_000
QUERY_OPS = 10_000
MATCHED_LOWER_BOUND = 100
MATCHED_UPPER_BOUND = 450


def test_resolve_workload_covers_every_kind() -> None:
    expected = {
        OperationKind.INSERT: InsertWorkload,
        OperationKind.POINT_QUERY: PointQueryWorkload,
        OperationKind.UPDATE: UpdateWorkload,
    }
    for kind, cls in expected.items():
        workload = resolve_workload(kind)
        assert isinstance(workload, cls)
        assert isinstance(workload, Workload)
        assert workload.kind is kind


@pytest.mark.parametrize("explicit", [False, True])
def test_insert_persists_every_point(sqlite_engine, make_scenario, rng, explicit: bool) -> None:
    scenario = make_scenario(
        OperationKind.INSERT, setup_row_count=INSERT_ROWS, use_explicit_transaction=explicit
    )

    result = run_scenario(scenario, sqlite_engine, rng)

    assert result.affected == INSERT_ROWS
    assert result.matched is None
    assert result.operations == INSERT_ROWS
    assert result.elapsed_millis >= 0
    assert sqlite_engine.count_rows() == INSERT_ROWS


def test_insert_zero_rows(sqlite_engine, make_scenario, rng) -> None:
    result = run_scenario(make_scenario(OperationKind.INSERT, setup_row_count=0), sqlite_engine, rng)

    assert result.affected == 0
    assert sqlite_engine.count_rows() == 0


def test_update_keeps_ids_and_bounds_affected(sqlite_engine, make_scenario, rng) -> None:
    scenario = make_scenario(
        OperationKind.UPDATE, setup_row_count=UPDATE_TABLE_ROWS, operation_count=UPDATE_OPS
    )

    result = run_scenario(scenario, sqlite_engine, rng)

    assert 0 <= result.affected <= UPDATE_OPS
    assert result.affected == UPDATE_OPS
    with sqlite3.connect(sqlite_engine.target) as conn:
        ids = [row[0] for row in conn.execute("SELECT id FROM points ORDER BY id")]
    conn.close()
    assert ids == list(range(1, UPDATE_TABLE_ROWS + 1))


def test_update_changes_coordinates(sqlite_engine, make_scenario) -> None:
    scenario = make_scenario(OperationKind.UPDATE, setup_row_count=1, operation_count=20)

    run_scenario(scenario, sqlite_engine, random.Random(7))

    replay = random.Random(7)
    replay.randint(-100, 100)
    replay.randint(-100, 100)
    last = None
    for _ in range(20):
        last = (replay.randint(-100, 100), replay.randint(-100, 100))
        replay.randint(1, 1)
    assert sqlite_engine.query(*last) == [1]


def test_update_sends_replayable_targets(recording_engine_factory, make_scenario) -> None:
    engine = recording_engine_factory()
    scenario = make_scenario(OperationKind.UPDATE, setup_row_count=3, operation_count=200)

    result = run_scenario(scenario, engine, random.Random(11))

    replay = random.Random(11)
    for _ in range(3):
        replay.randint(-100, 100)
        replay.randint(-100, 100)
    expected = []
    for _ in range(200):
        x = replay.randint(-100, 100)
        y = replay.randint(-100, 100)
        expected.append((replay.randint(1, 3), x, y))
    assert engine.updates == expected
    assert {point_id for point_id, _, _ in engine.updates} == {1, 2, 3}
    assert result.affected == 200


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_point_query_matches_within_statistical_band(sqlite_engine, make_scenario, seed) -> None:
    scenario = make_scenario(
        OperationKind.POINT_QUERY,
        setup_row_count=QUERY_TABLE_ROWS,
        operation_count=QUERY_OPS,
        use_explicit_transaction=True,
    )

    result = run_scenario(scenario, sqlite_engine, random.Random(seed))

    assert result.affected is None
    assert result.matched <= QUERY_OPS
    assert MATCHED_LOWER_BOUND <= result.matched <= MATCHED_UPPER_BOUND


def test_point_query_on_empty_table_matches_nothing(sqlite_engine, make_scenario, rng) -> None:
    scenario = make_scenario(OperationKind.POINT_QUERY, setup_row_count=0, operation_count=50)

    result = run_scenario(scenario, sqlite_engine, rng)

    assert result.matched == 0


def test_same_seed_produces_same_table() -> None:
    def final_rows(seed: int) -> list[tuple[int, int, int]]:
        scenario = ScenarioDescriptor(
            name="repeat",
            setup_row_count=200,
            operation_count=50,
            operation_kind=OperationKind.UPDATE,
        )
        with open_engine("sqlite") as engine:
            run_scenario(scenario, engine, random.Random(seed))
            with sqlite3.connect(engine.target) as conn:
                rows = conn.execute("SELECT id, x, y FROM points ORDER BY id").fetchall()
            conn.close()
        return rows

    assert final_rows(99) == final_rows(99)
    assert final_rows(99) != final_rows(100)


def test_timed_phase_excludes_baseline_setup(
    recording_engine_factory, make_scenario, rng
) -> None:
    engine = recording_engine_factory(insert_delay=0.002)
    scenario = make_scenario(OperationKind.POINT_QUERY, setup_row_count=50, operation_count=5)

    result = run_scenario(scenario, engine, rng)

    # 50 baseline inserts sleep ~100ms in total; the five lookups are instant
    assert result.elapsed_millis < 50


def test_call_sequence_for_explicit_transaction(
    recording_engine_factory, make_scenario, rng
) -> None:
    engine = recording_engine_factory()
    scenario = make_scenario(
        OperationKind.UPDATE, setup_row_count=2, operation_count=3, use_explicit_transaction=True
    )

    run_scenario(scenario, engine, rng)

    assert engine.calls == [
        "define_schema",
        "begin",
        "insert",
        "insert",
        "commit",
        "begin",
        "update",
        "update",
        "update",
        "commit",
    ]


def test_autocommit_scenario_skips_transaction_calls(
    recording_engine_factory, make_scenario, rng
) -> None:
    engine = recording_engine_factory()
    scenario = make_scenario(OperationKind.INSERT, setup_row_count=3)

    run_scenario(scenario, engine, rng)

    assert engine.calls == ["define_schema", "insert", "insert", "insert"]


def test_schema_failure_is_setup_failure(recording_engine_factory, make_scenario, rng) -> None:
    engine = recording_engine_factory(fail_on="define_schema")

    with pytest.raises(SetupFailure, match="schema") as excinfo:
        run_scenario(make_scenario(OperationKind.INSERT), engine, rng)

    assert isinstance(excinfo.value.__cause__, EngineFailure)


def test_baseline_failure_is_setup_failure_and_rolls_back(
    recording_engine_factory, make_scenario, rng
) -> None:
    engine = recording_engine_factory(fail_on="insert")

    with pytest.raises(SetupFailure, match="baseline"):
        run_scenario(make_scenario(OperationKind.UPDATE), engine, rng)

    assert engine.calls[-1] == "rollback"


def test_timed_phase_failure_propagates_engine_failure(
    recording_engine_factory, make_scenario, rng
) -> None:
    engine = recording_engine_factory(fail_on="query")
    scenario = make_scenario(OperationKind.POINT_QUERY, use_explicit_transaction=True)

    with pytest.raises(EngineFailure, match="recording query failed"):
        run_scenario(scenario, engine, rng)

    assert engine.calls[-2:] == ["query", "rollback"]
    assert engine.calls.count("update") == 0
