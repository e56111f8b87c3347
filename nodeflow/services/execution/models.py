"""Node execution result model.

All results are JSON-serializable via ``to_dict`` so the (external)
scheduler can persist them and feed outputs to downstream contexts.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class NodeExecutionResult:
    """Outcome of one node invocation.

    ``output_data`` is a list of output items; the first item is the
    primary output.
    """
    success: bool = True
    output_data: List[Any] = field(default_factory=list)
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    execution_time: float = 0.0
    data_size: int = 0
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def success_result(cls, output_data: Optional[List[Any]] = None,
                       metadata: Optional[Dict[str, Any]] = None) -> "NodeExecutionResult":
        """Factory for a successful result."""
        result = cls(success=True, metadata=dict(metadata or {}))
        return result.set_output_data(list(output_data or []))

    @classmethod
    def failure(cls, message: str,
                metadata: Optional[Dict[str, Any]] = None) -> "NodeExecutionResult":
        """Factory for a failed result with an error message."""
        return cls(success=False, error_message=message, metadata=dict(metadata or {}))

    @classmethod
    def from_exception(cls, exc: BaseException,
                       metadata: Optional[Dict[str, Any]] = None) -> "NodeExecutionResult":
        """Factory for a failed result built from a caught exception."""
        meta = {"exception_type": type(exc).__name__, **(metadata or {})}
        return cls(success=False, error_message=str(exc), metadata=meta)

    def set_output_data(self, data: List[Any]) -> "NodeExecutionResult":
        """Replace outputs and recompute the serialized data size."""
        self.output_data = data
        self.data_size = len(json.dumps(data, default=str))
        return self

    def add_output(self, item: Any) -> "NodeExecutionResult":
        self.output_data.append(item)
        return self

    def merge_outputs(self, items: List[Any]) -> "NodeExecutionResult":
        self.output_data.extend(items)
        return self

    def get_output(self, index: int) -> Optional[Any]:
        if 0 <= index < len(self.output_data):
            return self.output_data[index]
        return None

    @property
    def primary_output(self) -> Optional[Any]:
        return self.get_output(0)

    def has_output(self) -> bool:
        return bool(self.output_data)

    def add_metadata(self, key: str, value: Any) -> "NodeExecutionResult":
        self.metadata[key] = value
        return self

    def add_warning(self, warning: str) -> "NodeExecutionResult":
        self.warnings.append(warning)
        return self

    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "success": self.success,
            "output_data": self.output_data,
            "error_message": self.error_message,
            "metadata": self.metadata,
            "execution_time": self.execution_time,
            "data_size": self.data_size,
            "warnings": self.warnings,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeExecutionResult":
        """Create from dict."""
        return cls(
            success=data.get("success", True),
            output_data=list(data.get("output_data", [])),
            error_message=data.get("error_message"),
            metadata=dict(data.get("metadata", {})),
            execution_time=data.get("execution_time", 0.0),
            data_size=data.get("data_size", 0),
            warnings=list(data.get("warnings", [])),
        )
