from __future__ import annotations

from typing import Any, Mapping, Protocol

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine

from ..config import ConnectionConfig
from ..errors import ConnectionAcquireError
from .client import init_client
from .models import QueryResult, Statement


class DbPool(Protocol):
    """
    Connection lifecycle and query execution, as the node sees it.

    ``connect()`` must succeed before any ``query()``; ``close()`` is called
    exactly once per node invocation.
    """

    def connect(self) -> None:
        """Acquire the underlying connection resource."""
        ...

    def query(self, statement: Statement) -> QueryResult:
        """Execute one statement and report its rows / rows affected."""
        ...

    def close(self) -> None:
        """Release the underlying connection resource."""
        ...


class EnginePool:
    """
    DbPool backed by a SQLAlchemy Engine and its connection pool.

    Every ``query()`` checks out its own connection and runs in its own
    transaction, so concurrent calls from worker threads are safe.

    Use as:
        with EnginePool(config) as pool:
            result = pool.query(Statement("SELECT 1 FROM DUAL"))
    """

    def __init__(
        self,
        config: ConnectionConfig,
        engine_options: Mapping[str, Any] | None = None,
    ) -> None:
        self.config = config
        self.engine_options = dict(engine_options or {})
        self._engine: Engine | None = None

    def __enter__(self) -> "EnginePool":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
        # propagate exceptions (if any)
        return False

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("EnginePool is not connected; call connect() first")
        return self._engine

    def connect(self) -> None:
        """
        Build the engine and open one connection to fail fast.

        Raises:
            ConnectionAcquireError: If the database cannot be reached
        """
        if self._engine is not None:
            raise RuntimeError("EnginePool is already connected")

        try:
            engine = self._create_engine()
        except Exception as exc:
            raise ConnectionAcquireError(str(exc)) from exc

        try:
            with engine.connect():
                pass
        except Exception as exc:
            engine.dispose()
            raise ConnectionAcquireError(str(exc)) from exc

        self._engine = engine

    def _create_engine(self) -> Engine:
        options: dict[str, Any] = {"pool_pre_ping": True}
        connect_args: dict[str, Any] = {}

        if self.config.is_oracle:
            init_client(self.config)
            connect_args["tcp_connect_timeout"] = self.config.connect_timeout / 1000

        if connect_args:
            options["connect_args"] = connect_args
        options.update(self.engine_options)

        engine = create_engine(self.config.sqlalchemy_url(), **options)

        if self.config.is_oracle:
            request_timeout = self.config.request_timeout

            @event.listens_for(engine, "connect")
            def _set_call_timeout(dbapi_connection, connection_record) -> None:
                dbapi_connection.call_timeout = request_timeout

        return engine

    def query(self, statement: Statement) -> QueryResult:
        """
        Execute one statement in its own transaction.

        Literal statements (``params is None``) go to the driver untouched so
        colons inside string literals are never read as bind markers.
        """
        with self.engine.begin() as conn:
            if statement.params is None:
                result = conn.exec_driver_sql(
                    statement.sql, execution_options={"no_parameters": True}
                )
            else:
                result = conn.execute(text(statement.sql), dict(statement.params))

            try:
                if result.returns_rows:
                    return QueryResult(rows=[dict(row) for row in result.mappings()])
                rowcount = result.rowcount
                return QueryResult(rows_affected=rowcount if rowcount is not None and rowcount >= 0 else None)
            finally:
                result.close()

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
