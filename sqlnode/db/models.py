from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import UnsupportedOperationError

Record = Dict[str, Any]

# Field under which an update record carries the name of its own key column.
UPDATE_KEY_FIELD = "updateKey"


class Operation(str, Enum):
    EXECUTE_QUERY = "executeQuery"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, name: Any) -> "Operation":
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedOperationError(
                f'The operation "{name}" is not supported!'
            ) from None


@dataclass(frozen=True)
class ItemContext:
    """
    An input record together with the node parameters resolved for it.

    Parameters may differ from row to row, so they are resolved once per record
    with that record's own index and carried alongside it from then on.
    """
    index: int
    item: Record
    table: str = ""
    columns: str = ""
    key: Optional[str] = None
    query: Optional[str] = None


@dataclass
class TableBatch:
    """
    Records bound for one table under one ColumnSpec.
    """
    table: str
    columns: Tuple[str, ...]
    key: Optional[str] = None
    records: List[Record] = field(default_factory=list)
    indices: List[int] = field(default_factory=list)

    def append(self, record: Record, index: int) -> None:
        self.records.append(record)
        self.indices.append(index)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class StatementChunk:
    table: str
    columns: Tuple[str, ...]
    key: Optional[str]
    records: Sequence[Record]
    indices: Sequence[int]


@dataclass(frozen=True)
class Statement:
    """
    SQL text ready for dispatch. ``params`` is None for literal (legacy) SQL.
    """
    sql: str
    params: Optional[Mapping[str, Any]] = None


@dataclass
class QueryResult:
    """
    What a query executor hands back for one statement.

    Some drivers report ``rows_affected`` as one count per statement in the
    batch, so it may be a sequence.
    """
    rows: List[Record] = field(default_factory=list)
    rows_affected: Union[int, Sequence[int], None] = None


@dataclass
class ExecutionResult:
    table: str
    operation: Operation
    indices: Sequence[int]
    rows: List[Record] = field(default_factory=list)
    rows_affected: Union[int, Sequence[int], None] = None
