"""Base class every registrable node kind implements.

A node kind declares its metadata as class attributes and implements
``execute``. The catalog only ever sees the ``NodeDescriptor`` produced by
``describe()``, which carries the node instance as its capability handle.

Usage:
    class SetNode(BaseNode):
        node_id = "set"
        name = "Set"
        category = "transform"
        inputs = [InputSlot(name="main")]
        outputs = [OutputSlot(name="main")]

        def execute(self, context):
            return NodeExecutionResult.success_result([context.get_input_data()])
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Sequence, TYPE_CHECKING

from nodeflow.models.nodes import InputSlot, NodeDescriptor, OutputSlot, PropertySchema

if TYPE_CHECKING:
    from nodeflow.services.execution.context import ExecutionContext
    from nodeflow.services.execution.models import NodeExecutionResult


class BaseNode(ABC):
    """Capability contract for one node kind."""

    node_id: ClassVar[str] = ""
    name: ClassVar[str] = ""
    version: ClassVar[str] = "1.0.0"
    category: ClassVar[str] = "general"
    icon: ClassVar[str] = ""
    description: ClassVar[str] = ""
    properties: ClassVar[Dict[str, PropertySchema]] = {}
    inputs: ClassVar[Sequence[InputSlot]] = ()
    outputs: ClassVar[Sequence[OutputSlot]] = ()
    tags: ClassVar[Sequence[str]] = ()
    supports_async: ClassVar[bool] = False
    max_execution_time: ClassVar[int] = 300
    priority: ClassVar[int] = 0

    @abstractmethod
    def execute(self, context: "ExecutionContext") -> "NodeExecutionResult":
        """Run the node against one execution context."""

    def validate_properties(self, properties: Dict[str, Any]) -> bool:
        """Check that every required property has a value."""
        for key, schema in self.properties.items():
            if schema.required and properties.get(key) is None:
                return False
        return True

    def can_handle(self, input_data: Any) -> bool:
        return True

    def get_options(self) -> Dict[str, Any]:
        return {}

    def get_node_id(self) -> str:
        return self.node_id or self.__class__.__name__

    def get_name(self) -> str:
        return self.name or self.__class__.__name__.replace("Node", "")

    def get_description(self) -> str:
        return self.description or (self.__doc__ or "").strip()

    def get_tags(self) -> List[str]:
        return list(self.tags)

    def describe(self) -> NodeDescriptor:
        """Build the catalog descriptor for this node kind."""
        return NodeDescriptor(
            id=self.get_node_id(),
            name=self.get_name(),
            version=self.version,
            category=self.category,
            icon=self.icon,
            description=self.get_description(),
            properties=dict(self.properties),
            inputs=tuple(self.inputs),
            outputs=tuple(self.outputs),
            tags=self.get_tags(),
            supports_async=self.supports_async,
            max_execution_time=self.max_execution_time,
            node=self,
        )
