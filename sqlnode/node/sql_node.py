from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..config import ConnectionConfig, ExecutionConfig
from ..db.grouping import resolve_contexts
from ..db.models import Operation
from ..db.pool import DbPool, EnginePool
from ..db.reshaper import BatchReshaper
from ..errors import ConnectionAcquireError, SqlNodeError, UnsupportedOperationError
from .context import NodeContext, NodeItem
from .description import credential_defaults

logger = logging.getLogger(__name__)

PoolFactory = Callable[[ConnectionConfig], DbPool]


@dataclass(frozen=True)
class ConnectionTestResult:
    status: str
    message: str

    @property
    def ok(self) -> bool:
        return self.status == "OK"


def _acquire(pool: DbPool) -> None:
    try:
        pool.connect()
    except ConnectionAcquireError:
        raise
    except Exception as exc:
        raise ConnectionAcquireError(str(exc)) from exc


def check_connection(config: ConnectionConfig, pool_factory: PoolFactory = EnginePool) -> ConnectionTestResult:
    """Credential test: open a connection, report, and release it."""
    pool = pool_factory(config)
    try:
        _acquire(pool)
    except ConnectionAcquireError as exc:
        return ConnectionTestResult(status="Error", message=str(exc))
    finally:
        pool.close()
    return ConnectionTestResult(status="OK", message="Connection successful!")


class SqlNode:
    """
    The workflow node: runs one operation over the host's input items.

    One pool is acquired per ``execute()`` and closed exactly once on every
    exit path. Unsupported operations and connection failures always raise.
    Statement failures raise too, unless the context asks to continue on
    failure, in which case the input items come back unchanged.

    Usage:
        node = SqlNode(ConnectionConfig(host="db", sid="ORCL", password="..."))
        output = node.execute(NodeContext(
            items=[{"id": 1, "name": "a"}],
            parameters={"operation": "insert", "table": "product", "columns": "id,name"},
        ))
    """

    def __init__(
        self,
        connection: ConnectionConfig,
        execution: ExecutionConfig | None = None,
        pool_factory: PoolFactory = EnginePool,
    ) -> None:
        self.connection = connection
        self.execution = execution or ExecutionConfig()
        self.pool_factory = pool_factory

    @classmethod
    def from_credentials(
        cls,
        credentials: Mapping[str, Any],
        execution: ExecutionConfig | None = None,
        pool_factory: PoolFactory = EnginePool,
    ) -> "SqlNode":
        config = ConnectionConfig.from_credentials({**credential_defaults(), **credentials})
        return cls(config, execution, pool_factory)

    def execute(self, context: NodeContext) -> list[NodeItem]:
        pool = self.pool_factory(self.connection)
        try:
            _acquire(pool)
            operation = Operation.parse(context.get_node_parameter("operation", 0))
            try:
                return self._run(pool, operation, context)
            except UnsupportedOperationError:
                raise
            except (SqlNodeError, TypeError, ValueError) as exc:
                if not context.continue_on_fail:
                    raise
                logger.warning(
                    "%s failed, continuing with input items unchanged: %s",
                    operation.value, exc,
                )
            return self._pass_through(context)
        finally:
            pool.close()

    def _run(self, pool: DbPool, operation: Operation, context: NodeContext) -> list[NodeItem]:
        reshaper = BatchReshaper(pool, self.execution)

        if operation == Operation.EXECUTE_QUERY:
            rows = reshaper.execute_query(context.get_node_parameter("query", 0))
            return [NodeItem(row, paired_item=0) for row in rows]

        contexts = resolve_contexts(context.get_node_parameter, context.items, operation)

        if operation == Operation.INSERT:
            reshaper.insert(contexts)
            return self._pass_through(context)

        if operation == Operation.UPDATE:
            reshaper.update(contexts)
            return self._pass_through(context)

        if operation == Operation.DELETE:
            rows_deleted = reshaper.delete(contexts)
            return [NodeItem({"rowsAffected": rows_deleted}, paired_item=0)]

        raise UnsupportedOperationError(f'The operation "{operation}" is not supported!')

    @staticmethod
    def _pass_through(context: NodeContext) -> list[NodeItem]:
        return [NodeItem(item, paired_item=index) for index, item in enumerate(context.items)]
