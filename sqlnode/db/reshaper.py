from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Protocol

from ..config import ExecutionConfig
from ..errors import StatementExecutionError
from .formatting import make_statement_builder, update_key
from .grouping import group_for_delete, group_for_insert, group_for_update
from .helpers import chunked, count_rows_affected
from .metrics import observe_statement
from .models import (
    ExecutionResult,
    ItemContext,
    Operation,
    QueryResult,
    Record,
    Statement,
    StatementChunk,
    TableBatch,
)

logger = logging.getLogger(__name__)


class QueryExecutor(Protocol):
    def query(self, statement: Statement) -> QueryResult:
        ...


@dataclass(frozen=True)
class _Job:
    table: str
    operation: Operation
    indices: Sequence[int]
    statement: Statement


def sum_rows_affected(results: Iterable[ExecutionResult]) -> int:
    """Total rows affected across results, summing per-statement counts first."""
    return sum(count_rows_affected(result.rows_affected) for result in results)


class BatchReshaper:
    """
    Turns resolved input records into chunked statements and runs them.

    All statements of one operation are submitted to a thread pool at once.
    The reshaper waits for every submission to finish; if any failed, the
    first failure in submission order is raised as StatementExecutionError.
    Nothing is retried and no partial results are returned.
    """

    def __init__(self, executor: QueryExecutor, config: ExecutionConfig | None = None) -> None:
        self.executor = executor
        self.config = config or ExecutionConfig()
        self.builder = make_statement_builder(self.config.sql_mode)

    def chunks(self, batch: TableBatch) -> list[StatementChunk]:
        return [
            StatementChunk(
                table=batch.table,
                columns=batch.columns,
                key=batch.key,
                records=records,
                indices=indices,
            )
            for records, indices in zip(
                chunked(batch.records, self.config.chunk_size),
                chunked(batch.indices, self.config.chunk_size),
            )
        ]

    def execute_query(self, query: str) -> list[Record]:
        if not query or not query.strip():
            raise ValueError("query must not be empty")
        results = self._dispatch([_Job("", Operation.EXECUTE_QUERY, [0], Statement(query))])
        return [row for result in results for row in result.rows]

    def insert(self, contexts: Sequence[ItemContext]) -> list[ExecutionResult]:
        jobs = [
            _Job(chunk.table, Operation.INSERT, chunk.indices, self.builder.insert(chunk))
            for batch in group_for_insert(contexts)
            for chunk in self.chunks(batch)
        ]
        return self._dispatch(jobs)

    def update(self, contexts: Sequence[ItemContext]) -> list[ExecutionResult]:
        jobs = []
        for batch in group_for_update(contexts):
            for record, index in zip(batch.records, batch.indices):
                key = update_key(record)
                if not [column for column in batch.columns if column != key]:
                    raise ValueError(f"item {index}: no columns to update besides key {key!r}")
                statement = self.builder.update(batch.table, batch.columns, record)
                jobs.append(_Job(batch.table, Operation.UPDATE, [index], statement))
        return self._dispatch(jobs)

    def delete(self, contexts: Sequence[ItemContext]) -> int:
        jobs = [
            _Job(chunk.table, Operation.DELETE, chunk.indices, self.builder.delete(chunk))
            for keys in group_for_delete(contexts).values()
            for batch in keys.values()
            for chunk in self.chunks(batch)
        ]
        return sum_rows_affected(self._dispatch(jobs))

    def _run(self, job: _Job) -> ExecutionResult:
        start_time = time.monotonic()
        status = "success"
        rows_affected = 0
        try:
            result = self.executor.query(job.statement)
            rows_affected = count_rows_affected(result.rows_affected)
        except Exception:
            status = "error"
            raise
        finally:
            observe_statement(
                job.table,
                job.operation.value,
                status,
                time.monotonic() - start_time,
                rows_affected,
            )

        return ExecutionResult(
            table=job.table,
            operation=job.operation,
            indices=job.indices,
            rows=result.rows,
            rows_affected=result.rows_affected,
        )

    def _dispatch(self, jobs: Sequence[_Job]) -> list[ExecutionResult]:
        if not jobs:
            return []

        logger.debug(
            "Dispatching %d %s statement(s) on %d worker(s)",
            len(jobs), jobs[0].operation.value, self.config.max_workers,
        )

        with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(jobs))) as pool:
            futures = [pool.submit(self._run, job) for job in jobs]
            wait(futures)

        results = []
        for future in futures:
            exc = future.exception()
            if exc is not None:
                raise StatementExecutionError(str(exc)) from exc
            results.append(future.result())
        return results
