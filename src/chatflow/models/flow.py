"""Graph models for the chatbot dialogue flow.

Nodes live in a mapping keyed by id and options reference other nodes only
through their id, so cyclic flows never produce cyclic object graphs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

ROOT_ID = "root"
WHATSAPP_ACTION = "whatsapp_action"
OPEN_PREFIX = "open:"

DEFAULT_WHATSAPP_MESSAGE = "Hi! I need help regarding IGNOU materials."


def as_str(value: Any) -> str:
    """Coerce a loosely typed JSON value to a string ("" for None)."""
    if value is None:
        return ""
    return str(value)


# =============================================================================
# Resolved option targets
# =============================================================================


@dataclass(frozen=True)
class NodeRef:
    """Option pointing at another node of the same graph."""

    node_id: str


@dataclass(frozen=True)
class WhatsAppAction:
    """Option that opens the WhatsApp deep link."""


@dataclass(frozen=True)
class OpenPath:
    """Option that navigates the site to ``path``."""

    path: str


@dataclass(frozen=True)
class Dangling:
    """Option whose target names no node and no sentinel."""

    raw: str


Target = Union[NodeRef, WhatsAppAction, OpenPath, Dangling]


def is_sentinel(next_id: str) -> bool:
    """Check whether a next id is a reserved action instead of a node id."""
    return next_id == WHATSAPP_ACTION or next_id.startswith(OPEN_PREFIX)


# =============================================================================
# Graph
# =============================================================================


class Option(BaseModel):
    """A labelled choice inside a node."""

    model_config = ConfigDict(populate_by_name=True)

    label: str = ""
    next_id: str = Field(default="", alias="nextId")


class FlowNode(BaseModel):
    """A single dialogue step."""

    text: str = ""
    options: list[Option] = Field(default_factory=list)


class FlowGraph(BaseModel):
    """The dialogue graph: nodes, editor display order and the active flag.

    ``order`` only drives how the editor lists steps. Traversal always
    starts at ``root``.
    """

    model_config = ConfigDict(populate_by_name=True)

    is_active: bool = Field(default=True, alias="isActive")
    order: list[str] = Field(default_factory=list)
    nodes: dict[str, FlowNode] = Field(default_factory=dict)

    @classmethod
    def from_wire(cls, payload: dict[str, Any] | None) -> FlowGraph:
        """Build a graph from a loosely typed load/save payload.

        Args:
            payload: Dictionary in the ``{isActive, order, nodes}`` wire shape.

        Returns:
            A graph with every string coerced, node ids trimmed, empty ids
            skipped and malformed containers emptied.
        """
        payload = payload if isinstance(payload, dict) else {}

        raw_nodes = payload.get("nodes")
        nodes: dict[str, FlowNode] = {}
        if isinstance(raw_nodes, dict):
            for raw_id, raw_node in raw_nodes.items():
                raw_node = raw_node if isinstance(raw_node, dict) else {}
                raw_options = raw_node.get("options")
                options = []
                if isinstance(raw_options, list):
                    for raw_option in raw_options:
                        raw_option = raw_option if isinstance(raw_option, dict) else {}
                        options.append(
                            Option(
                                label=as_str(raw_option.get("label")),
                                next_id=as_str(raw_option.get("nextId")),
                            )
                        )
                node_id = as_str(raw_id).strip()
                if not node_id:
                    continue
                nodes[node_id] = FlowNode(
                    text=as_str(raw_node.get("text")), options=options
                )

        raw_order = payload.get("order")
        order = [as_str(x).strip() for x in raw_order] if isinstance(raw_order, list) else []

        return cls(
            is_active=payload.get("isActive") is not False,
            order=order,
            nodes=nodes,
        )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase wire shape."""
        return self.model_dump(by_alias=True)

    def resolve(self, next_id: str) -> Target:
        """Interpret an option's next id against this graph."""
        if next_id == WHATSAPP_ACTION:
            return WhatsAppAction()
        if next_id.startswith(OPEN_PREFIX):
            return OpenPath(next_id[len(OPEN_PREFIX) :] or "/")
        if next_id in self.nodes:
            return NodeRef(next_id)
        return Dangling(next_id)


class ChatbotConfig(BaseModel):
    """Site-wide chatbot settings stored apart from the flow."""

    model_config = ConfigDict(populate_by_name=True)

    is_enabled: bool = Field(default=False, alias="isEnabled")
    whatsapp_number: str = Field(default="", alias="whatsappNumber")
    whatsapp_message: str = Field(default=DEFAULT_WHATSAPP_MESSAGE, alias="whatsappMessage")
