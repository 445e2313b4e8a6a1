from .client import init_client
from .models import (
    ExecutionResult,
    ItemContext,
    Operation,
    QueryResult,
    Statement,
    StatementChunk,
    TableBatch,
)
from .pool import DbPool, EnginePool
from .reshaper import BatchReshaper, sum_rows_affected

__all__ = [
    "BatchReshaper",
    "DbPool",
    "EnginePool",
    "ExecutionResult",
    "ItemContext",
    "Operation",
    "QueryResult",
    "Statement",
    "StatementChunk",
    "TableBatch",
    "init_client",
    "sum_rows_affected",
]
