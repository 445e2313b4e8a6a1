from __future__ import annotations

import dataclasses
import math
import threading

import pytest

from sqlnode.config import ExecutionConfig, SqlMode
from sqlnode.db.models import ExecutionResult, ItemContext, Operation, QueryResult, Statement
from sqlnode.db.reshaper import BatchReshaper, _Job, sum_rows_affected
from sqlnode.errors import StatementExecutionError

from ..fakes import FakePool

LEGACY = ExecutionConfig(sql_mode=SqlMode.LEGACY)


def _insert_contexts(count: int, table: str = "t", columns: str = "id,name") -> list[ItemContext]:
    return [
        ItemContext(i, {"id": i, "name": f"n{i}"}, table=table, columns=columns)
        for i in range(count)
    ]


def _delete_contexts(count: int, table: str = "t", key: str = "id") -> list[ItemContext]:
    return [ItemContext(i, {"id": i}, table=table, key=key) for i in range(count)]


class TestInsert:
    """Tests for BatchReshaper.insert()."""

    def test_two_records_one_statement(self, fake_pool: FakePool) -> None:
        contexts = [
            ItemContext(0, {"id": 1, "name": "a"}, table="t", columns="id,name"),
            ItemContext(1, {"id": 2, "name": "b"}, table="t", columns="id,name"),
        ]

        BatchReshaper(fake_pool, LEGACY).insert(contexts)

        assert fake_pool.sql == ["INSERT INTO t(id,name) VALUES (1,'a'),(2,'b');"]

    @pytest.mark.parametrize("count", [1, 999, 1000, 1001, 2500])
    def test_statement_count_per_table(self, fake_pool: FakePool, count: int) -> None:
        contexts = _insert_contexts(count, table="a") + _insert_contexts(count, table="b")

        results = BatchReshaper(fake_pool).insert(contexts)

        assert len(fake_pool.statements) == 2 * math.ceil(count / 1000)
        assert len(results) == 2 * math.ceil(count / 1000)

    def test_chunks_preserve_order_and_indices(self, fake_pool: FakePool) -> None:
        results = BatchReshaper(fake_pool, ExecutionConfig(chunk_size=2)).insert(_insert_contexts(5))

        assert [list(r.indices) for r in results] == [[0, 1], [2, 3], [4]]
        assert all(r.operation == Operation.INSERT for r in results)

    def test_parameterized_is_the_default(self, fake_pool: FakePool) -> None:
        BatchReshaper(fake_pool).insert(_insert_contexts(1))
        statement = fake_pool.statements[0]
        assert statement.sql == "INSERT INTO t(id,name) VALUES (:v0,:v1)"
        assert statement.params == {"v0": 0, "v1": "n0"}


class TestUpdate:
    """Tests for BatchReshaper.update()."""

    def test_one_statement_per_record(self, fake_pool: FakePool) -> None:
        contexts = [
            ItemContext(0, {"id": 1, "name": "a"}, table="t", columns="name", key="id"),
            ItemContext(1, {"id": 2, "name": "b"}, table="t", columns="name", key="id"),
        ]

        BatchReshaper(fake_pool, LEGACY).update(contexts)

        assert sorted(fake_pool.sql) == [
            "UPDATE t SET name = 'a' WHERE id = 1;",
            "UPDATE t SET name = 'b' WHERE id = 2;",
        ]

    def test_set_clause_never_contains_key(self, fake_pool: FakePool) -> None:
        contexts = [
            ItemContext(i, {"id": i, "code": f"c{i}", "name": "x"}, table="t", columns="id,code,name", key=key)
            for i, key in enumerate(["id", "code", "id"])
        ]

        BatchReshaper(fake_pool, LEGACY).update(contexts)

        for sql in fake_pool.sql:
            set_clause, condition = sql[len("UPDATE t SET "):-1].split(" WHERE ")
            key = condition.split(" = ")[0]
            assert key not in [assignment.split(" = ")[0] for assignment in set_clause.split(",")]
        assert "UPDATE t SET code = 'c0',name = 'x' WHERE id = 0;" in fake_pool.sql
        assert "UPDATE t SET id = 1,name = 'x' WHERE code = 'c1';" in fake_pool.sql

    @pytest.mark.parametrize("columns", ["id", ""])
    def test_no_columns_besides_key_raises_before_dispatch(self, fake_pool: FakePool, columns: str) -> None:
        contexts = [
            ItemContext(0, {"id": 1, "name": "a"}, table="t", columns="name", key="id"),
            ItemContext(1, {"id": 2, "name": "b"}, table="u", columns=columns, key="id"),
        ]

        with pytest.raises(ValueError, match="item 1: no columns to update besides key 'id'"):
            BatchReshaper(fake_pool, LEGACY).update(contexts)

        assert fake_pool.statements == []


class TestDelete:
    """Tests for BatchReshaper.delete()."""

    def test_2500_records_in_three_chunks(self) -> None:
        pool = FakePool(respond=lambda statement: QueryResult(rows_affected=len(statement.params)))

        total = BatchReshaper(pool).delete(_delete_contexts(2500))

        assert len(pool.statements) == 3
        assert sorted(len(s.params) for s in pool.statements) == [500, 1000, 1000]
        assert total == 2500

    def test_nested_rows_affected_are_summed(self) -> None:
        pool = FakePool(respond=lambda statement: QueryResult(rows_affected=[2, 3]))

        total = BatchReshaper(pool, ExecutionConfig(chunk_size=10)).delete(_delete_contexts(25))

        assert total == 3 * 5

    def test_none_inside_nested_counts_is_not_a_failure(self) -> None:
        pool = FakePool(respond=lambda statement: QueryResult(rows_affected=[1, None]))

        assert BatchReshaper(pool).delete(_delete_contexts(3)) == 1

    def test_one_in_list_per_table_and_key(self, fake_pool: FakePool) -> None:
        contexts = [
            ItemContext(0, {"id": 1, "code": "A"}, table="t", key="id"),
            ItemContext(1, {"id": 2, "code": "B"}, table="t", key="code"),
            ItemContext(2, {"id": 3, "code": "C"}, table="t", key="id"),
        ]

        BatchReshaper(fake_pool, LEGACY).delete(contexts)

        assert sorted(fake_pool.sql) == [
            'DELETE FROM t WHERE "code" IN (\'B\');',
            'DELETE FROM t WHERE "id" IN (1,3);',
        ]


class TestDispatch:
    """Concurrency and failure behaviour shared by all operations."""

    def test_statements_run_concurrently(self) -> None:
        barrier = threading.Barrier(3, timeout=5)

        def respond(statement):
            # Times out unless three statements are in flight at once.
            barrier.wait()
            return QueryResult(rows_affected=1)

        pool = FakePool(respond=respond)
        config = ExecutionConfig(chunk_size=1, max_workers=3)

        assert BatchReshaper(pool, config).delete(_delete_contexts(3)) == 3

    def test_failure_waits_for_all_and_raises(self) -> None:
        pool = FakePool(fail_on=2)

        with pytest.raises(StatementExecutionError, match="ORA-00001") as excinfo:
            BatchReshaper(pool).delete(_delete_contexts(2500))

        assert len(pool.statements) == 3
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_no_jobs_dispatches_nothing(self, fake_pool: FakePool) -> None:
        assert BatchReshaper(fake_pool).delete([]) == 0
        assert BatchReshaper(fake_pool).insert([]) == []
        assert fake_pool.statements == []


def test_execute_query_returns_rows() -> None:
    rows = [{"id": 1}, {"id": 2}]
    pool = FakePool(respond=lambda statement: QueryResult(rows=rows))

    result = BatchReshaper(pool).execute_query("SELECT id FROM t")

    assert result == rows
    assert pool.statements[0].params is None


def test_execute_query_rejects_blank_query(fake_pool: FakePool) -> None:
    with pytest.raises(ValueError, match="query"):
        BatchReshaper(fake_pool).execute_query("  ")


def test_jobs_are_immutable() -> None:
    job = _Job("t", Operation.DELETE, [0], Statement("DELETE FROM t"))

    with pytest.raises(dataclasses.FrozenInstanceError):
        job.table = "u"


def test_sum_rows_affected_handles_ints_sequences_and_none() -> None:
    results = [
        ExecutionResult("t", Operation.DELETE, [0], rows_affected=4),
        ExecutionResult("t", Operation.DELETE, [1], rows_affected=[1, 2, 3]),
        ExecutionResult("t", Operation.DELETE, [2], rows_affected=None),
    ]
    assert sum_rows_affected(results) == 10
