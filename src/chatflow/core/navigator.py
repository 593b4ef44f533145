"""Runtime navigator - walks a cleaned flow for a visitor or an admin preview.

The navigator is a pushdown machine: the current step plus a LIFO history of
the steps actually walked. ``back`` pops that history, it never follows graph
structure, so cycles are fine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..infrastructure.logging_config import get_logger
from ..models.flow import (
    ROOT_ID,
    FlowGraph,
    FlowNode,
    NodeRef,
    OpenPath,
    Option,
    Target,
    WhatsAppAction,
)
from .effects import EffectHandler
from .errors import NavigationError, ValidationError

logger = get_logger(__name__)


class TransitionKind(str, Enum):
    """Outcome of selecting an option."""

    MOVED = "moved"  # Pushed history, changed step
    WHATSAPP = "whatsapp"  # Effect only
    OPEN_PATH = "open_path"  # Effect only
    NOT_FOUND = "not_found"  # Target step missing, refused
    UNKNOWN_OPTION = "unknown_option"  # Label/index not on current step


@dataclass
class Transition:
    """Result of a selection."""

    kind: TransitionKind
    node_id: str
    target: Target | None = None
    error: NavigationError | None = None

    @property
    def moved(self) -> bool:
        return self.kind == TransitionKind.MOVED

    @property
    def message(self) -> str | None:
        """User-presentable text for a refused transition."""
        if self.error is not None:
            return str(self.error)
        return None


class FlowNavigator:
    """Traversal state over a read-only copy of a cleaned flow."""

    def __init__(self, graph: FlowGraph, effects: EffectHandler | None = None) -> None:
        """Initialize the navigator at root.

        Args:
            graph: Cleaned graph. A deep copy is taken.
            effects: Receiver for sentinel actions. Without one, sentinel
                options are still reported but nothing is performed.

        Raises:
            ValidationError: If the graph has no root step.
        """
        if ROOT_ID not in graph.nodes:
            raise ValidationError("root missing")

        self._graph = graph.model_copy(deep=True)
        self._effects = effects
        self._targets: dict[str, Target] = {}
        for node in self._graph.nodes.values():
            for option in node.options:
                self._targets.setdefault(option.next_id, self._graph.resolve(option.next_id))

        self.current_node_id = ROOT_ID
        self.history: list[str] = []

    @property
    def current_node(self) -> FlowNode:
        """Step being shown, falling back to root."""
        return self._graph.nodes.get(self.current_node_id) or self._graph.nodes[ROOT_ID]

    @property
    def can_go_back(self) -> bool:
        return bool(self.history)

    @property
    def state(self) -> dict[str, Any]:
        """Snapshot of the traversal state."""
        return {"current": self.current_node_id, "history": list(self.history)}

    def _resolve(self, next_id: str) -> Target:
        target = self._targets.get(next_id)
        if target is None:
            target = self._graph.resolve(next_id)
        return target

    def select(self, option: Option) -> Transition:
        """Follow an option from the current step.

        Sentinel targets fire their effect and leave the state alone. A
        missing target step is refused with a ``NOT_FOUND`` transition.
        """
        target = self._resolve(option.next_id)

        if isinstance(target, WhatsAppAction):
            if self._effects is not None:
                self._effects.open_whatsapp()
            return Transition(TransitionKind.WHATSAPP, self.current_node_id, target)

        if isinstance(target, OpenPath):
            if self._effects is not None:
                self._effects.navigate(target.path)
            return Transition(TransitionKind.OPEN_PATH, self.current_node_id, target)

        if isinstance(target, NodeRef):
            self.history.append(self.current_node_id)
            self.current_node_id = target.node_id
            return Transition(TransitionKind.MOVED, self.current_node_id, target)

        logger.warning(
            "navigation_target_missing", node_id=self.current_node_id, next_id=target.raw
        )
        return Transition(
            TransitionKind.NOT_FOUND,
            self.current_node_id,
            target,
            error=NavigationError(target.raw),
        )

    def select_label(self, label: str) -> Transition:
        """Follow the first option of the current step with this label."""
        for option in self.current_node.options:
            if option.label == label:
                return self.select(option)
        return Transition(TransitionKind.UNKNOWN_OPTION, self.current_node_id)

    def select_index(self, index: int) -> Transition:
        """Follow the option at ``index`` of the current step."""
        options = self.current_node.options
        if not 0 <= index < len(options):
            return Transition(TransitionKind.UNKNOWN_OPTION, self.current_node_id)
        return self.select(options[index])

    def back(self) -> None:
        """Return to the previously visited step, if any."""
        if self.history:
            self.current_node_id = self.history.pop()

    def reset(self) -> None:
        """Restart the conversation at root."""
        self.current_node_id = ROOT_ID
        self.history = []
