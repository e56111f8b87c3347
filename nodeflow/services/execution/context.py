"""Per-node execution context.

The (external) scheduler builds one ``ExecutionContext`` per node
invocation from the workflow/execution/user references, the node's graph
data, its resolved input and its configured properties. The node reads
everything it needs from here and records variables for later nodes.

Ownership rule: a context belongs to exactly one flow of control. Parallel
branches and nested executions each get their own context; a child made by
``create_child_context`` owns independent copies of the previous-node
outputs and both variable maps, with no aliasing with its parent.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from nodeflow.constants import DEFAULT_CONNECTION_INDEX, DEFAULT_EXECUTION_TIMEOUT
from nodeflow.core.logging import get_logger
from nodeflow.services.execution.connections import ConnectionGraphView, Index

logger = get_logger(__name__)


class ExecutionContext:
    """State carried into one node invocation.

    Workflow variables are shared across every node of one workflow
    definition; execution variables are private to one run. Both start
    empty and are stored separately.
    """

    def __init__(
        self,
        workflow: Any,
        execution: Any,
        user: Any,
        node_id: str,
        node_data: Mapping[str, Any],
        input_data: Optional[Any] = None,
        properties: Optional[Dict[str, Any]] = None,
        execution_timeout: Optional[int] = None,
    ):
        if workflow is None or execution is None or user is None:
            raise ValueError("workflow, execution and user references are required")
        if not node_id:
            raise ValueError("node_id is required")
        if node_data is None:
            raise ValueError("node_data is required")

        self._workflow = workflow
        self._execution = execution
        self._user = user
        self._node_id = node_id
        self._node_data = node_data
        self._input_data = input_data if input_data is not None else {}
        self._properties = properties if properties is not None else {}
        self._graph = ConnectionGraphView(node_data)

        self._previous_nodes: Dict[str, Any] = {}
        self._workflow_variables: Dict[str, Any] = {}
        self._execution_variables: Dict[str, Any] = {}
        self._execution_timeout = (
            execution_timeout if execution_timeout is not None else DEFAULT_EXECUTION_TIMEOUT
        )
        self._is_test_execution = False

    # =========================================================================
    # REFERENCES & INPUTS
    # =========================================================================

    def get_workflow(self) -> Any:
        return self._workflow

    def get_execution(self) -> Any:
        return self._execution

    def get_user(self) -> Any:
        return self._user

    def get_node_id(self) -> str:
        return self._node_id

    def get_node_data(self) -> Mapping[str, Any]:
        return self._node_data

    def get_input_data(self) -> Any:
        return self._input_data

    def get_properties(self) -> Dict[str, Any]:
        return self._properties

    def get_property(self, key: str, default: Any = None) -> Any:
        value = self._properties.get(key)
        return default if value is None else value

    def has_property(self, key: str) -> bool:
        """True if the property is configured with a non-null value."""
        return self._properties.get(key) is not None

    # =========================================================================
    # PREVIOUS NODE OUTPUTS
    # =========================================================================

    def get_previous_nodes(self) -> Dict[str, Any]:
        return self._previous_nodes

    def add_previous_node(self, node_id: str, output_data: Any) -> "ExecutionContext":
        """Record (or overwrite) the output of an upstream node."""
        self._previous_nodes[node_id] = output_data
        return self

    def get_previous_node_output(self, node_id: str) -> Optional[Any]:
        return self._previous_nodes.get(node_id)

    # =========================================================================
    # SCOPED VARIABLES
    # =========================================================================

    def get_workflow_variables(self) -> Dict[str, Any]:
        return self._workflow_variables

    def set_workflow_variable(self, key: str, value: Any) -> "ExecutionContext":
        self._workflow_variables[key] = value
        return self

    def get_workflow_variable(self, key: str, default: Any = None) -> Any:
        value = self._workflow_variables.get(key)
        return default if value is None else value

    def get_execution_variables(self) -> Dict[str, Any]:
        return self._execution_variables

    def set_execution_variable(self, key: str, value: Any) -> "ExecutionContext":
        self._execution_variables[key] = value
        return self

    def get_execution_variable(self, key: str, default: Any = None) -> Any:
        value = self._execution_variables.get(key)
        return default if value is None else value

    # =========================================================================
    # ADVISORY SETTINGS
    # =========================================================================

    def get_execution_timeout(self) -> int:
        """Timeout in seconds; enforced by the scheduler, not here."""
        return self._execution_timeout

    def set_execution_timeout(self, timeout: int) -> "ExecutionContext":
        self._execution_timeout = timeout
        return self

    def is_test_execution(self) -> bool:
        return self._is_test_execution

    def set_test_execution(self, is_test: bool) -> "ExecutionContext":
        self._is_test_execution = bool(is_test)
        return self

    # =========================================================================
    # GRAPH DATA
    # =========================================================================

    def get_node_position(self) -> Dict[str, Any]:
        return self._graph.position()

    def get_node_connections(self) -> Dict[str, Any]:
        return self._graph.connections()

    def has_connection(self, connection_type: str,
                       index: Index = DEFAULT_CONNECTION_INDEX) -> bool:
        return self._graph.has_connection(connection_type, index)

    def get_connected_node_ids(self, connection_type: str,
                               index: Index = DEFAULT_CONNECTION_INDEX) -> list:
        return self._graph.connected_node_ids(connection_type, index)

    # =========================================================================
    # LOGGING & DERIVATION
    # =========================================================================

    def log(self, message: str, **data: Any) -> None:
        """Log an execution step bound to this node."""
        logger.info(f"Node {self._node_id}: {message}", node_id=self._node_id, **data)

    def create_child_context(self, child_node_id: str,
                             child_input_data: Optional[Any] = None,
                             child_node_data: Optional[Mapping[str, Any]] = None) -> "ExecutionContext":
        """Derive a context for a nested or parallel sub-execution.

        References, properties, timeout and test flag are shared. The child
        gets its own node id and input; graph data defaults to the parent's.
        Previous-node outputs and both variable maps are deep-copied.
        """
        child = ExecutionContext(
            workflow=self._workflow,
            execution=self._execution,
            user=self._user,
            node_id=child_node_id,
            node_data=self._node_data if child_node_data is None else child_node_data,
            input_data=child_input_data,
            properties=self._properties,
        )
        child._previous_nodes = copy.deepcopy(self._previous_nodes)
        child._workflow_variables = copy.deepcopy(self._workflow_variables)
        child._execution_variables = copy.deepcopy(self._execution_variables)
        child._execution_timeout = self._execution_timeout
        child._is_test_execution = self._is_test_execution

        logger.debug("Child context created", node_id=child_node_id,
                     parent_node_id=self._node_id)
        return child
