from .context import NodeContext, NodeItem
from .description import CREDENTIAL_PROPERTIES, NODE_DESCRIPTION
from .sql_node import ConnectionTestResult, SqlNode, check_connection

__all__ = [
    "CREDENTIAL_PROPERTIES",
    "ConnectionTestResult",
    "NODE_DESCRIPTION",
    "NodeContext",
    "NodeItem",
    "SqlNode",
    "check_connection",
]
