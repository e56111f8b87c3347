"""Execution state package.

Per-node state handed to a node by the workflow scheduler:
- ExecutionContext: references, inputs, scoped variables, child derivation
- ConnectionGraphView: read-only access to a node's position and wiring
- NodeExecutionResult: serializable outcome of one node invocation
"""

from .connections import ConnectionGraphView
from .context import ExecutionContext
from .models import NodeExecutionResult

__all__ = [
    "ConnectionGraphView",
    "ExecutionContext",
    "NodeExecutionResult",
]
