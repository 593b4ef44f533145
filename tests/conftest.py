"""Pytest configuration and shared fixtures."""

import pytest

from chatflow.core import FlowEditor
from chatflow.infrastructure import InMemoryFlowStore
from chatflow.models import FlowGraph, FlowNode, Option


@pytest.fixture
def simple_graph():
    """Root and an FAQ step linking to each other."""
    return FlowGraph(
        order=["root", "faq"],
        nodes={
            "root": FlowNode(text="Hi", options=[Option(label="Start", next_id="faq")]),
            "faq": FlowNode(text="FAQ", options=[Option(label="Home", next_id="root")]),
        },
    )


@pytest.fixture
def root_only_graph():
    """Graph holding only the root step."""
    return FlowGraph(
        order=["root"],
        nodes={
            "root": FlowNode(text="Hi", options=[Option(label="Start", next_id="root")]),
        },
    )


@pytest.fixture
def sentinel_graph():
    """Graph whose root offers every kind of target."""
    return FlowGraph(
        order=["root", "faq"],
        nodes={
            "root": FlowNode(
                text="How can I help?",
                options=[
                    Option(label="FAQ", next_id="faq"),
                    Option(label="WhatsApp", next_id="whatsapp_action"),
                    Option(label="Blog", next_id="open:/blog"),
                    Option(label="Broken", next_id="missing_step"),
                ],
            ),
            "faq": FlowNode(
                text="FAQ",
                options=[
                    Option(label="Home", next_id="root"),
                    Option(label="Again", next_id="faq"),
                ],
            ),
        },
    )


@pytest.fixture
def editor(root_only_graph):
    """Editor over a root-only graph."""
    return FlowEditor(root_only_graph)


@pytest.fixture
def flow_store():
    """Empty in-memory flow store."""
    return InMemoryFlowStore()
