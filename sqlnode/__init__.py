from .config import ConnectionConfig, ExecutionConfig, SqlMode
from .db.models import Operation
from .node import NodeContext, NodeItem, SqlNode, check_connection

__all__ = [
    "ConnectionConfig",
    "ExecutionConfig",
    "NodeContext",
    "NodeItem",
    "Operation",
    "SqlMode",
    "SqlNode",
    "check_connection",
]
