from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Optional

from ..db.models import Operation, Record
from .description import NODE_DESCRIPTION, NodeDescription


@dataclass(frozen=True)
class NodeItem:
    """One output item and the index of the input item it came from."""
    json: Any
    paired_item: int = 0


@dataclass
class NodeContext:
    """
    What the host hands the node for one invocation.

    ``parameters`` values are either constants or callables taking
    ``(index, record)``, for parameters whose expression differs per row.
    Unset parameters fall back to the node description's defaults.
    """
    items: Sequence[Record]
    parameters: Mapping[str, Any] = field(default_factory=dict)
    continue_on_fail: bool = False
    description: NodeDescription = NODE_DESCRIPTION

    def get_node_parameter(self, name: str, index: int) -> Any:
        value = self.parameters.get(name)
        if value is None:
            return self.description.default_for(name, self._operation())
        if callable(value):
            item = self.items[index] if index < len(self.items) else {}
            return value(index, item)
        return value

    def _operation(self) -> Optional[Operation]:
        name = self.parameters.get("operation")
        try:
            return Operation(name) if name is not None else None
        except ValueError:
            return None
