from __future__ import annotations

from ..metrics.registry import (
    ROWS_AFFECTED_TOTAL,
    STATEMENT_LATENCY_SECONDS,
    STATEMENT_TOTAL,
)


def observe_statement(
    table: str,
    op_type: str,
    status: str,
    latency_s: float,
    rows_affected: int = 0,
) -> None:
    STATEMENT_TOTAL.labels(table=table, op_type=op_type, status=status).inc()
    STATEMENT_LATENCY_SECONDS.labels(table=table, op_type=op_type).observe(latency_s)
    if rows_affected > 0:
        ROWS_AFFECTED_TOTAL.labels(table=table, op_type=op_type).inc(rows_affected)
