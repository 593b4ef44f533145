"""Flow engine - one editing or visitor session over a chatbot flow.

Each session owns its own ``FlowEngine``; there is no module level flow
state, so a live visitor session and an admin preview never interfere.
"""

import uuid
from dataclasses import dataclass

from ..data.default_flow import default_graph, load_seed_flow
from ..infrastructure.flow_store import FlowStore, get_flow_store
from ..infrastructure.logging_config import bind_session, clear_session, get_logger
from ..models.config import Settings, get_settings
from ..models.flow import ROOT_ID, FlowGraph
from .editor import FlowEditor
from .effects import EffectHandler, PreviewEffects
from .errors import PersistenceError, ValidationError
from .navigator import FlowNavigator
from .validator import find_dangling_references, validate_flow

logger = get_logger(__name__)


@dataclass
class SaveResult:
    """Outcome of a save attempt."""

    ok: bool
    error: str | None = None  # Message for the editing user
    reason: str | None = None  # Underlying cause


class FlowEngine:
    """Holds the published flow and the editor working copy for a session.

    Example:
        engine = FlowEngine(InMemoryFlowStore())
        await engine.load()
        engine.editor.add_step()
        result = await engine.save()
    """

    def __init__(
        self,
        store: FlowStore,
        graph: FlowGraph | None = None,
        settings: Settings | None = None,
        session_id: str | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Persistence adapter for the flow.
            graph: Flow held until a load succeeds. Defaults to the seed flow,
                which also replaces a graph without a root step.
            settings: Engine settings.
            session_id: Identifier used in log context.
        """
        self.store = store
        self.settings = settings or get_settings()
        self.session_id = session_id or str(uuid.uuid4())
        if graph is not None and ROOT_ID not in graph.nodes:
            logger.warning("flow_graph_missing_root", node_count=len(graph.nodes))
            graph = None
        self.graph = graph if graph is not None else default_graph()
        self.editor = FlowEditor(self.graph)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "FlowEngine":
        """Create an engine with the store and seed flow named in settings."""
        settings = settings or get_settings()
        graph = load_seed_flow(settings.seed_flow_path) if settings.seed_flow_path else None
        return cls(get_flow_store(settings), graph=graph, settings=settings)

    async def load(self) -> bool:
        """Replace the held flow with the stored one.

        The stored flow goes through the validator first. A failed, empty or
        invalid load keeps the held flow.

        Returns:
            True if a stored flow was loaded.
        """
        bind_session(self.session_id, "editor")
        try:
            payload = await self.store.load_flow()
        except PersistenceError as e:
            logger.warning("flow_load_failed", error=str(e), status_code=e.status_code)
            return False

        graph = FlowGraph.from_wire(payload) if payload is not None else None
        if graph is None or not graph.nodes:
            logger.info("flow_load_empty")
            return False
        if ROOT_ID not in graph.nodes:
            logger.warning("flow_load_missing_root", node_count=len(graph.nodes))
            return False

        try:
            cleaned = validate_flow(graph, self.settings.max_options_per_node)
        except ValidationError as e:
            logger.warning("flow_load_invalid", reason=e.reason)
            return False

        self.graph = cleaned
        self.editor = FlowEditor(cleaned)
        logger.info("flow_loaded", node_count=len(cleaned.nodes), is_active=cleaned.is_active)
        return True

    async def save(self) -> SaveResult:
        """Validate the working copy and persist the cleaned flow.

        On failure the working copy is left untouched so the user can fix it
        and retry.
        """
        bind_session(self.session_id, "editor")
        try:
            cleaned = validate_flow(self.editor.graph, self.settings.max_options_per_node)
        except ValidationError as e:
            return SaveResult(ok=False, error=e.remediation, reason=e.reason)

        dangling = find_dangling_references(cleaned)
        if dangling:
            logger.warning("flow_dangling_references", references=dangling)

        try:
            await self.store.save_flow(cleaned)
        except PersistenceError as e:
            logger.error("flow_save_failed", error=str(e), status_code=e.status_code)
            return SaveResult(ok=False, error="Save failed", reason=str(e))

        self.graph = cleaned
        self.editor.replace(cleaned)
        logger.info("flow_saved", node_count=len(cleaned.nodes))
        return SaveResult(ok=True)

    def preview(self, effects: EffectHandler | None = None) -> FlowNavigator:
        """Navigator over the cleaned working copy, with effects blocked.

        Falls back to the held flow while the working copy does not validate.
        """
        bind_session(self.session_id, "preview")
        try:
            graph = validate_flow(self.editor.graph, self.settings.max_options_per_node)
        except ValidationError as e:
            logger.info("preview_using_saved_flow", reason=e.reason)
            graph = self.graph
        return FlowNavigator(graph, effects if effects is not None else PreviewEffects())

    def visitor(self, effects: EffectHandler | None = None) -> FlowNavigator | None:
        """Navigator over the held flow, or None when the flow is switched off."""
        if not self.graph.is_active:
            return None
        bind_session(self.session_id, "visitor")
        return FlowNavigator(self.graph, effects)

    async def close(self) -> None:
        """End the session: unbind its log context and release the store."""
        await self.store.close()
        logger.info("flow_session_closed")
        clear_session()
