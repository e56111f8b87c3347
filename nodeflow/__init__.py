"""Node catalog and per-node execution state for workflow automation."""

from nodeflow.models.nodes import (
    InputSlot,
    NodeDescriptor,
    OutputSlot,
    PropertySchema,
)
from nodeflow.nodes.base import BaseNode
from nodeflow.services.catalog import NodeCatalog
from nodeflow.services.execution import (
    ConnectionGraphView,
    ExecutionContext,
    NodeExecutionResult,
)

__version__ = "0.1.0"

__all__ = [
    "BaseNode",
    "ConnectionGraphView",
    "ExecutionContext",
    "InputSlot",
    "NodeCatalog",
    "NodeDescriptor",
    "NodeExecutionResult",
    "OutputSlot",
    "PropertySchema",
]
