"""Read-only view over a node's wiring data.

Graph data carries the node's canvas position and its outgoing
connections, keyed ``connection type -> output index -> [target ids]``.
JSON-decoded graphs may store the index level as a list instead of a
mapping; both shapes are accepted.
"""

from typing import Any, Dict, List, Mapping, Union

from nodeflow.constants import DEFAULT_CONNECTION_INDEX

Index = Union[str, int]


class ConnectionGraphView:
    """Accessor for the ``position`` and ``connections`` of one node."""

    def __init__(self, node_data: Mapping[str, Any]):
        self._node_data = node_data

    def position(self) -> Dict[str, Any]:
        position = self._node_data.get("position")
        if position is None:
            return {"x": 0, "y": 0}
        return position

    def connections(self) -> Dict[str, Any]:
        return self._node_data.get("connections") or {}

    def _targets(self, connection_type: str, index: Index):
        outputs = self.connections().get(connection_type)
        if isinstance(outputs, Mapping):
            targets = outputs.get(str(index))
            if targets is None and not isinstance(index, str):
                targets = outputs.get(index)
            if targets is None and isinstance(index, str) and index.isdigit():
                targets = outputs.get(int(index))
            return targets
        if isinstance(outputs, list):
            try:
                position = int(index)
            except (TypeError, ValueError):
                return None
            if 0 <= position < len(outputs):
                return outputs[position]
        return None

    def has_connection(self, connection_type: str,
                       index: Index = DEFAULT_CONNECTION_INDEX) -> bool:
        return self._targets(connection_type, index) is not None

    def connected_node_ids(self, connection_type: str,
                           index: Index = DEFAULT_CONNECTION_INDEX) -> List[str]:
        targets = self._targets(connection_type, index)
        if targets is None:
            return []
        if isinstance(targets, str):
            return [targets]
        return list(targets)
