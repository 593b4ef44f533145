"""Validation and cleaning of flow graphs before they are persisted."""

from ..infrastructure.logging_config import get_logger
from ..models.flow import ROOT_ID, FlowGraph, FlowNode, Option, is_sentinel
from .errors import ValidationError

logger = get_logger(__name__)

DEFAULT_MAX_OPTIONS = 12


def clean_options(options: list[Option], max_options: int = DEFAULT_MAX_OPTIONS) -> list[Option]:
    """Trim options and drop the ones missing a label or a target.

    Args:
        options: Options as edited.
        max_options: Maximum number of options kept per node.

    Returns:
        New option list, capped at ``max_options``.
    """
    cleaned = []
    for option in options:
        label = option.label.strip()
        next_id = option.next_id.strip()
        if label and next_id:
            cleaned.append(Option(label=label, next_id=next_id))
    return cleaned[:max_options]


def is_valid_node(node: FlowNode | None, max_options: int = DEFAULT_MAX_OPTIONS) -> bool:
    """Check that a node has text and at least one well-formed option."""
    if node is None:
        return False
    return bool(node.text.strip()) and bool(clean_options(node.options, max_options))


def normalize_order(order: list[str], nodes: dict[str, FlowNode]) -> list[str]:
    """Repair an editor order so it lists exactly the keys of ``nodes``.

    Unknown and duplicate ids are dropped, ``root`` is moved first and node
    ids missing from the order are appended in mapping order.
    """
    seen: set[str] = set()
    cleaned = []
    for node_id in order:
        if node_id in nodes and node_id not in seen:
            seen.add(node_id)
            cleaned.append(node_id)

    for node_id in nodes:
        if node_id not in seen:
            seen.add(node_id)
            cleaned.append(node_id)

    if ROOT_ID in seen:
        cleaned = [ROOT_ID] + [x for x in cleaned if x != ROOT_ID]
    return cleaned


def validate_flow(graph: FlowGraph, max_options: int = DEFAULT_MAX_OPTIONS) -> FlowGraph:
    """Produce the cleaned copy of a graph that is safe to persist.

    Invalid nodes are dropped and malformed options trimmed. Dangling
    references are left in place.

    Args:
        graph: Working copy from the editor. It is not modified.
        max_options: Maximum number of options kept per node.

    Returns:
        A new cleaned graph whose order starts with ``root``.

    Raises:
        ValidationError: If ``root`` is missing or invalid after cleaning.
    """
    cleaned: dict[str, FlowNode] = {}
    dropped = []

    for node_id in normalize_order(graph.order, graph.nodes):
        node = graph.nodes[node_id]
        text = node.text.strip()
        options = clean_options(node.options, max_options)
        if not text or not options:
            dropped.append(node_id)
            continue
        cleaned[node_id] = FlowNode(text=text, options=options)

    if dropped:
        logger.info("flow_nodes_dropped", node_ids=dropped)

    if ROOT_ID not in cleaned:
        reason = "root missing" if ROOT_ID not in graph.nodes else "root invalid"
        logger.warning("flow_validation_failed", reason=reason)
        raise ValidationError(reason)

    order = [ROOT_ID] + [node_id for node_id in cleaned if node_id != ROOT_ID]
    return FlowGraph(is_active=graph.is_active, order=order, nodes=cleaned)


def find_dangling_references(graph: FlowGraph) -> list[tuple[str, int, str]]:
    """List options whose non-sentinel target names no existing step.

    Returns:
        ``(node_id, option_index, next_id)`` tuples in editor order.
    """
    dangling = []
    for node_id in normalize_order(graph.order, graph.nodes):
        for index, option in enumerate(graph.nodes[node_id].options):
            next_id = option.next_id
            if next_id and not is_sentinel(next_id) and next_id not in graph.nodes:
                dangling.append((node_id, index, next_id))
    return dangling
