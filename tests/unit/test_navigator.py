"""Tests for the runtime navigator."""

import pytest

from chatflow.core.effects import PreviewEffects
from chatflow.core.errors import NavigationError, ValidationError
from chatflow.core.navigator import FlowNavigator, TransitionKind
from chatflow.models import FlowGraph, FlowNode, NodeRef, OpenPath, Option, WhatsAppAction

INITIAL_STATE = {"current": "root", "history": []}


class TestInitialState:
    """Tests for navigator construction."""

    def test_starts_at_root(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        assert navigator.state == INITIAL_STATE
        assert not navigator.can_go_back
        assert navigator.current_node.text == "How can I help?"

    def test_requires_root(self):
        graph = FlowGraph(nodes={"a": FlowNode(text="A")})
        with pytest.raises(ValidationError):
            FlowNavigator(graph)

    def test_never_mutates_graph(self, simple_graph):
        before = simple_graph.model_copy(deep=True)
        navigator = FlowNavigator(simple_graph)
        navigator.select_label("Start")
        navigator.back()
        navigator.reset()
        assert simple_graph == before

    def test_later_graph_edits_not_seen(self, simple_graph):
        navigator = FlowNavigator(simple_graph)
        simple_graph.nodes["root"].text = "Edited"
        assert navigator.current_node.text == "Hi"


class TestSelect:
    """Tests for option selection."""

    def test_scenario_forward_and_back(self, simple_graph):
        navigator = FlowNavigator(simple_graph)

        transition = navigator.select_label("Start")

        assert transition.kind == TransitionKind.MOVED
        assert transition.moved
        assert transition.target == NodeRef("faq")
        assert navigator.state == {"current": "faq", "history": ["root"]}

        navigator.back()
        assert navigator.state == INITIAL_STATE

    def test_select_option_object(self, simple_graph):
        navigator = FlowNavigator(simple_graph)
        navigator.select(Option(label="anything", next_id="faq"))
        assert navigator.current_node_id == "faq"

    def test_select_index(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        transition = navigator.select_index(0)
        assert transition.node_id == "faq"

    def test_whatsapp_keeps_state_and_fires_effect(self, sentinel_graph):
        effects = PreviewEffects()
        navigator = FlowNavigator(sentinel_graph, effects)

        transition = navigator.select_label("WhatsApp")

        assert transition.kind == TransitionKind.WHATSAPP
        assert transition.target == WhatsAppAction()
        assert navigator.state == INITIAL_STATE
        assert effects.notices == ["This will open WhatsApp on real site. (Preview blocked)"]

    def test_open_path_keeps_state_and_fires_effect(self, sentinel_graph):
        effects = PreviewEffects()
        navigator = FlowNavigator(sentinel_graph, effects)
        navigator.select_label("FAQ")

        transition = navigator.select(Option(label="Blog", next_id="open:/blog"))

        assert transition.kind == TransitionKind.OPEN_PATH
        assert transition.target == OpenPath("/blog")
        assert navigator.state == {"current": "faq", "history": ["root"]}
        assert effects.notices == ["This will open: /blog (Preview blocked)"]

    def test_sentinels_without_effect_handler(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        assert navigator.select_label("WhatsApp").kind == TransitionKind.WHATSAPP
        assert navigator.select_label("Blog").kind == TransitionKind.OPEN_PATH
        assert navigator.state == INITIAL_STATE

    def test_missing_step_refused(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)

        transition = navigator.select_label("Broken")

        assert transition.kind == TransitionKind.NOT_FOUND
        assert isinstance(transition.error, NavigationError)
        assert transition.error.next_id == "missing_step"
        assert transition.message == 'Step not found: "missing_step"'
        assert navigator.state == INITIAL_STATE

    def test_unknown_label(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        transition = navigator.select_label("Nope")
        assert transition.kind == TransitionKind.UNKNOWN_OPTION
        assert transition.message is None
        assert navigator.state == INITIAL_STATE

    def test_unknown_index(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        assert navigator.select_index(10).kind == TransitionKind.UNKNOWN_OPTION
        assert navigator.select_index(-1).kind == TransitionKind.UNKNOWN_OPTION

    def test_cycles_grow_history(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        navigator.select_label("FAQ")
        navigator.select_label("Again")
        navigator.select_label("Again")
        assert navigator.state == {"current": "faq", "history": ["root", "faq", "faq"]}


class TestBackAndReset:
    """Tests for back and reset."""

    def test_back_on_empty_history_is_noop(self, simple_graph):
        navigator = FlowNavigator(simple_graph)
        navigator.back()
        assert navigator.state == INITIAL_STATE

    def test_n_backs_return_to_root(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        labels = ["FAQ", "Again", "Home", "FAQ", "Again"]
        for label in labels:
            assert navigator.select_label(label).moved

        for _ in labels:
            navigator.back()

        assert navigator.state == INITIAL_STATE

    def test_back_is_lifo(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        navigator.select_label("FAQ")
        navigator.select_label("Home")
        navigator.back()
        assert navigator.state == {"current": "faq", "history": ["root"]}

    def test_reset(self, sentinel_graph):
        navigator = FlowNavigator(sentinel_graph)
        navigator.select_label("FAQ")
        navigator.select_label("Again")

        navigator.reset()

        assert navigator.state == INITIAL_STATE

    def test_state_is_a_snapshot(self, simple_graph):
        navigator = FlowNavigator(simple_graph)
        state = navigator.state
        navigator.select_label("Start")
        assert state == INITIAL_STATE
