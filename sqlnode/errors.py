class SqlNodeError(Exception):
    """Base exception for sqlnode errors."""


class UnsupportedOperationError(SqlNodeError):
    """The requested operation is not one the node knows."""


class ConnectionAcquireError(SqlNodeError):
    """The database connection could not be established."""


class StatementExecutionError(SqlNodeError):
    """Any failure while dispatching a statement to the database."""
