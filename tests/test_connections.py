"""Tests for graph-data access through the execution context."""

from nodeflow import ConnectionGraphView, ExecutionContext


def make_context(workflow, execution, user, node_data):
    return ExecutionContext(workflow, execution, user, "switch-1", node_data)


def test_position_and_connections(workflow, execution, user, node_data):
    context = make_context(workflow, execution, user, node_data)

    assert context.get_node_position() == {"x": 120, "y": 40}
    assert context.get_node_connections() == node_data["connections"]


def test_defaults_without_graph_data(workflow, execution, user):
    context = make_context(workflow, execution, user, {})

    assert context.get_node_position() == {"x": 0, "y": 0}
    assert context.get_node_connections() == {}
    assert context.has_connection("main") is False
    assert context.get_connected_node_ids("main") == []


def test_fan_out_per_output_index(workflow, execution, user, node_data):
    context = make_context(workflow, execution, user, node_data)

    assert context.has_connection("main") is True
    assert context.get_connected_node_ids("main") == ["set-1", "slack-1"]
    assert context.get_connected_node_ids("main", "1") == ["wait-1"]
    assert context.get_connected_node_ids("main", 1) == ["wait-1"]


def test_missing_type_or_index(workflow, execution, user, node_data):
    context = make_context(workflow, execution, user, node_data)

    assert context.has_connection("main", "2") is False
    assert context.get_connected_node_ids("main", "2") == []
    assert context.has_connection("error") is False
    assert context.get_connected_node_ids("error", "0") == []


def test_missing_index_on_sparse_graph(workflow, execution, user):
    context = make_context(workflow, execution, user, {"connections": {"main": {"0": ["a"]}}})

    assert context.get_connected_node_ids("main", "1") == []


def test_list_shaped_indexes():
    view = ConnectionGraphView({"connections": {"main": [["a", "b"], ["c"]]}})

    assert view.connected_node_ids("main") == ["a", "b"]
    assert view.connected_node_ids("main", "1") == ["c"]
    assert view.has_connection("main", 2) is False
    assert view.connected_node_ids("main", "true") == []


def test_returned_ids_are_copies():
    connections = {"main": {"0": ["a"]}}
    view = ConnectionGraphView({"connections": connections})

    view.connected_node_ids("main").append("b")

    assert connections["main"]["0"] == ["a"]


def test_digit_string_index_matches_int_keys():
    view = ConnectionGraphView({"connections": {"main": {0: ["a"], 1: ["x"]}}})

    assert view.connected_node_ids("main", "1") == ["x"]
    assert view.connected_node_ids("main") == ["a"]
    assert view.has_connection("main", "1") is True
    assert view.has_connection("main", "2") is False


def test_single_target_is_not_split():
    view = ConnectionGraphView({"connections": {"main": {"0": "wait-1"}}})

    assert view.connected_node_ids("main") == ["wait-1"]
