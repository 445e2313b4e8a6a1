"""
Declarative metadata for the node's form and its credential form.

The host renders these properties; the node itself only reads their
defaults when a parameter is not set.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from ..db.models import Operation


@dataclass(frozen=True)
class OptionValue:
    name: str
    value: str
    description: str = ""
    action: str = ""


@dataclass(frozen=True)
class NodeProperty:
    display_name: str
    name: str
    type: str
    default: Any = ""
    required: bool = False
    placeholder: str = ""
    description: str = ""
    show_for: Tuple[Operation, ...] = ()
    options: Tuple[OptionValue, ...] = ()
    password: bool = False

    def applies_to(self, operation: Operation) -> bool:
        return not self.show_for or operation in self.show_for


@dataclass(frozen=True)
class NodeDescription:
    display_name: str
    name: str
    description: str
    credentials: str
    properties: Tuple[NodeProperty, ...] = field(default_factory=tuple)

    def property_for(self, name: str, operation: Optional[Operation] = None) -> Optional[NodeProperty]:
        for prop in self.properties:
            if prop.name == name and (operation is None or prop.applies_to(operation)):
                return prop
        return None

    def default_for(self, name: str, operation: Optional[Operation] = None) -> Any:
        prop = self.property_for(name, operation)
        return None if prop is None else prop.default


_WRITE_OPERATIONS = (Operation.INSERT, Operation.UPDATE, Operation.DELETE)

NODE_DESCRIPTION = NodeDescription(
    display_name="Oracle DB",
    name="oracleDB",
    description="Get, add, delete and update data in Oracle Database",
    credentials="oracleDBApi",
    properties=(
        NodeProperty(
            "Operation", "operation", "options",
            default=Operation.INSERT.value,
            options=(
                OptionValue("Execute Query", Operation.EXECUTE_QUERY.value,
                            "Execute an SQL query", "Execute a SQL query"),
                OptionValue("Insert", Operation.INSERT.value,
                            "Insert rows in database", "Insert rows in database"),
                OptionValue("Update", Operation.UPDATE.value,
                            "Update rows in database", "Update rows in database"),
                OptionValue("Delete", Operation.DELETE.value,
                            "Delete rows in database", "Delete rows in database"),
            ),
        ),
        NodeProperty(
            "Query", "query", "string",
            required=True,
            placeholder="SELECT id, name FROM product WHERE id < 40",
            description="The SQL query to execute",
            show_for=(Operation.EXECUTE_QUERY,),
        ),
        NodeProperty(
            "Table", "table", "string",
            required=True,
            description="Name of the table to operate on",
            show_for=_WRITE_OPERATIONS,
        ),
        NodeProperty(
            "Columns", "columns", "string",
            placeholder="id,name,description",
            description="Comma-separated list of the properties which should used as columns for the new rows",
            show_for=(Operation.INSERT,),
        ),
        NodeProperty(
            "Update Key", "updateKey", "string",
            default="id",
            required=True,
            description=(
                "Name of the property which decides which rows in the database should be updated. "
                'Normally that would be "id".'
            ),
            show_for=(Operation.UPDATE,),
        ),
        NodeProperty(
            "Columns", "columns", "string",
            placeholder="name,description",
            description="Comma-separated list of the properties which should used as columns for rows to update",
            show_for=(Operation.UPDATE,),
        ),
        NodeProperty(
            "Delete Key", "deleteKey", "string",
            default="id",
            required=True,
            description=(
                "Name of the property which decides which rows in the database should be deleted. "
                'Normally that would be "id".'
            ),
            show_for=(Operation.DELETE,),
        ),
    ),
)

CREDENTIAL_PROPERTIES = (
    NodeProperty("Host", "host", "string", default="192.168.0.2"),
    NodeProperty("Port", "port", "number", default=1521),
    NodeProperty("SID", "sid", "string", default="WINT"),
    NodeProperty("User", "user", "string", default="system"),
    NodeProperty("Password", "password", "string", password=True),
    NodeProperty("Connect Timeout", "connectTimeout", "number", default=15000,
                 description="Connection timeout in ms"),
    NodeProperty("Request Timeout", "requestTimeout", "number", default=15000,
                 description="Request timeout in ms"),
)


def credential_defaults() -> dict[str, Any]:
    return {prop.name: prop.default for prop in CREDENTIAL_PROPERTIES if prop.default != ""}
