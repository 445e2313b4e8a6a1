from .registry import (
    ROWS_AFFECTED_TOTAL,
    STATEMENT_LATENCY_SECONDS,
    STATEMENT_TOTAL,
)

__all__ = [
    "STATEMENT_TOTAL",
    "STATEMENT_LATENCY_SECONDS",
    "ROWS_AFFECTED_TOTAL",
]
