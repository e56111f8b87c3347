"""Shared fixtures for the node catalog and execution context tests."""

import pytest

from nodeflow import (
    BaseNode,
    InputSlot,
    NodeCatalog,
    NodeDescriptor,
    NodeExecutionResult,
    OutputSlot,
)
from nodeflow.core.cache import CacheService
from nodeflow.core.config import Settings


class EchoNode(BaseNode):
    """Return the input data unchanged"""

    node_id = "echo"
    name = "Echo"
    category = "transform"
    inputs = [InputSlot(name="main")]
    outputs = [OutputSlot(name="main")]
    tags = ["debug"]

    def execute(self, context):
        return NodeExecutionResult.success_result([context.get_input_data()])


def make_descriptor(node_id, category="action", *, name=None, description="",
                    tags=(), inputs=("main",), outputs=("main",), **extra):
    return NodeDescriptor(
        id=node_id,
        name=name or node_id.title(),
        category=category,
        description=description,
        tags=tags,
        inputs=[InputSlot(name=slot) for slot in inputs],
        outputs=[OutputSlot(name=slot) for slot in outputs],
        **extra,
    )


class FakeWorkflow:
    def __init__(self, workflow_id="wf-1"):
        self.id = workflow_id


class FakeExecution:
    def __init__(self, execution_id="ex-1"):
        self.id = execution_id


class FakeUser:
    def __init__(self, user_id=7):
        self.id = user_id


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def cache(settings):
    return CacheService(settings)


@pytest.fixture
def catalog(cache):
    return NodeCatalog(cache)


@pytest.fixture
def workflow():
    return FakeWorkflow()


@pytest.fixture
def execution():
    return FakeExecution()


@pytest.fixture
def user():
    return FakeUser()


@pytest.fixture
def node_data():
    return {
        "type": "switch",
        "position": {"x": 120, "y": 40},
        "connections": {
            "main": {
                "0": ["set-1", "slack-1"],
                "1": ["wait-1"],
            },
        },
    }
