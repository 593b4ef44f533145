"""Editor controller - command methods behind the admin flow editor.

Every operation mutates the in-memory working copy synchronously and never
raises. Half-edited states (empty labels, dangling targets) are allowed here
and only rejected by the validator at save time.
"""

import uuid
from typing import Any

from ..infrastructure.logging_config import get_logger
from ..models.flow import ROOT_ID, FlowGraph, FlowNode, Option, as_str
from .validator import find_dangling_references

logger = get_logger(__name__)

NEW_STEP_TEXT = "New step text..."
NEW_STEP_OPTION_LABEL = "Go to Main Menu"
NEW_OPTION_LABEL = "New option"


def generate_step_id(prefix: str = "step") -> str:
    """Generate a fresh step id."""
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


class FlowEditor:
    """Owns the working copy of a flow for one editing session."""

    def __init__(self, graph: FlowGraph | None = None) -> None:
        """Initialize the editor.

        Args:
            graph: Graph to edit. A deep copy is taken; the caller's graph is
                never touched.
        """
        self.graph = graph.model_copy(deep=True) if graph is not None else FlowGraph()
        self.selected = ROOT_ID

    def replace(self, graph: FlowGraph) -> None:
        """Swap in a new working copy, keeping the selection when it survives."""
        self.graph = graph.model_copy(deep=True)
        if self.selected not in self.graph.nodes:
            self.selected = ROOT_ID

    @property
    def selected_node(self) -> FlowNode | None:
        """Node currently selected in the editor."""
        return self.graph.nodes.get(self.selected)

    def select_step(self, step_id: str) -> None:
        """Select a step; unknown ids are ignored."""
        if step_id in self.graph.nodes:
            self.selected = step_id

    def set_active(self, is_active: bool) -> None:
        """Toggle whether the flow is served to visitors."""
        self.graph.is_active = is_active

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def add_step(self) -> str:
        """Add a placeholder step that links back to root and select it.

        Returns:
            The id of the new step.
        """
        step_id = generate_step_id()
        while step_id in self.graph.nodes:
            step_id = generate_step_id()

        self.graph.nodes[step_id] = FlowNode(
            text=NEW_STEP_TEXT,
            options=[Option(label=NEW_STEP_OPTION_LABEL, next_id=ROOT_ID)],
        )
        self.graph.order.append(step_id)
        self.selected = step_id
        logger.debug("flow_step_added", step_id=step_id)
        return step_id

    def delete_step(self, step_id: str) -> None:
        """Delete a step. Root can never be deleted."""
        if step_id == ROOT_ID or step_id not in self.graph.nodes:
            return
        del self.graph.nodes[step_id]
        self.graph.order = [x for x in self.graph.order if x != step_id]
        self.selected = ROOT_ID
        logger.debug("flow_step_deleted", step_id=step_id)

    def update_step_text(self, step_id: str, text: str) -> None:
        """Replace the message of a step."""
        node = self.graph.nodes.get(step_id)
        if node is not None:
            node.text = as_str(text)

    def move_step(self, step_id: str, direction: int) -> None:
        """Swap a step with its neighbour in the editor order.

        Args:
            step_id: Step to move.
            direction: -1 to move up, +1 to move down.
        """
        order = self.graph.order
        if step_id not in order:
            return
        i = order.index(step_id)
        j = i + direction
        if j < 0 or j >= len(order):
            return
        order[i], order[j] = order[j], order[i]

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    def add_option(self, step_id: str) -> None:
        """Append a placeholder option pointing at root."""
        node = self.graph.nodes.get(step_id)
        if node is not None:
            node.options.append(Option(label=NEW_OPTION_LABEL, next_id=ROOT_ID))

    def update_option(self, step_id: str, index: int, patch: dict[str, Any]) -> None:
        """Patch an option's label and/or target.

        Args:
            step_id: Step owning the option.
            index: Position of the option.
            patch: Keys ``label`` and ``next_id`` (or wire-style ``nextId``).
        """
        node = self.graph.nodes.get(step_id)
        if node is None or not 0 <= index < len(node.options):
            return

        option = node.options[index]
        if "label" in patch:
            option.label = as_str(patch["label"])
        if "next_id" in patch:
            option.next_id = as_str(patch["next_id"])
        elif "nextId" in patch:
            option.next_id = as_str(patch["nextId"])

    def remove_option(self, step_id: str, index: int) -> None:
        """Remove an option by position."""
        node = self.graph.nodes.get(step_id)
        if node is None or not 0 <= index < len(node.options):
            return
        del node.options[index]

    def dangling_references(self) -> list[tuple[str, int, str]]:
        """Options whose target step does not exist yet."""
        return find_dangling_references(self.graph)
