"""Tests for flow validation and cleaning."""

import pytest

from chatflow.core.errors import REMEDIATION_MESSAGE, ValidationError
from chatflow.core.validator import (
    clean_options,
    find_dangling_references,
    is_valid_node,
    normalize_order,
    validate_flow,
)
from chatflow.models import FlowGraph, FlowNode, Option


class TestCleanOptions:
    """Tests for option cleaning."""

    def test_trims_label_and_target(self):
        options = clean_options([Option(label="  Go ", next_id=" faq ")])
        assert options == [Option(label="Go", next_id="faq")]

    def test_drops_empty_label_or_target(self):
        options = clean_options(
            [
                Option(label="", next_id="x"),
                Option(label="Label", next_id="   "),
                Option(label="Keep", next_id="root"),
            ]
        )
        assert options == [Option(label="Keep", next_id="root")]

    def test_caps_number_of_options(self):
        options = [Option(label=f"o{i}", next_id="root") for i in range(20)]
        assert len(clean_options(options)) == 12
        assert len(clean_options(options, max_options=3)) == 3

    def test_cap_applies_after_dropping(self):
        options = [Option(label="", next_id="root")] * 5 + [Option(label="ok", next_id="root")]
        assert clean_options(options, max_options=1) == [Option(label="ok", next_id="root")]


class TestIsValidNode:
    """Tests for node validity."""

    def test_valid(self):
        assert is_valid_node(FlowNode(text="Hi", options=[Option(label="a", next_id="b")]))

    def test_whitespace_text_is_invalid(self):
        assert not is_valid_node(FlowNode(text="   ", options=[Option(label="a", next_id="b")]))

    def test_no_well_formed_option_is_invalid(self):
        assert not is_valid_node(FlowNode(text="Hi", options=[Option(label="", next_id="b")]))

    def test_none_is_invalid(self):
        assert not is_valid_node(None)


class TestNormalizeOrder:
    """Tests for order repair."""

    def test_root_moved_first(self):
        nodes = {"a": FlowNode(), "root": FlowNode()}
        assert normalize_order(["a", "root"], nodes) == ["root", "a"]

    def test_unknown_and_duplicate_ids_dropped(self):
        nodes = {"root": FlowNode(), "a": FlowNode()}
        assert normalize_order(["root", "ghost", "a", "a"], nodes) == ["root", "a"]

    def test_missing_ids_appended(self):
        nodes = {"root": FlowNode(), "a": FlowNode(), "b": FlowNode()}
        assert normalize_order(["b"], nodes) == ["root", "b", "a"]

    def test_without_root(self):
        nodes = {"a": FlowNode(), "b": FlowNode()}
        assert normalize_order([], nodes) == ["a", "b"]


class TestValidateFlow:
    """Tests for validate_flow."""

    def test_valid_graph_unchanged(self, simple_graph):
        assert validate_flow(simple_graph) == simple_graph

    def test_idempotent(self, simple_graph, sentinel_graph):
        for graph in (simple_graph, sentinel_graph):
            once = validate_flow(graph)
            assert validate_flow(once) == once

    def test_does_not_mutate_input(self):
        graph = FlowGraph(
            order=["root"],
            nodes={"root": FlowNode(text=" Hi ", options=[Option(label=" a ", next_id="root")])},
        )
        validate_flow(graph)
        assert graph.nodes["root"].text == " Hi "
        assert graph.nodes["root"].options[0].label == " a "

    def test_missing_root_fails(self):
        graph = FlowGraph(
            order=["faq"],
            nodes={"faq": FlowNode(text="FAQ", options=[Option(label="a", next_id="faq")])},
        )
        with pytest.raises(ValidationError, match="root missing"):
            validate_flow(graph)

    def test_root_with_empty_text_fails(self):
        graph = FlowGraph(
            order=["root"],
            nodes={"root": FlowNode(text="", options=[Option(label="a", next_id="root")])},
        )
        with pytest.raises(ValidationError) as exc_info:
            validate_flow(graph)
        assert exc_info.value.reason == "root invalid"
        assert exc_info.value.remediation == REMEDIATION_MESSAGE

    def test_root_without_well_formed_option_fails(self):
        graph = FlowGraph(
            order=["root"],
            nodes={"root": FlowNode(text="Hi", options=[Option(label="a", next_id="")])},
        )
        with pytest.raises(ValidationError):
            validate_flow(graph)

    def test_node_with_only_empty_label_dropped(self, simple_graph):
        simple_graph.nodes["bad"] = FlowNode(text="Bad", options=[Option(label="", next_id="x")])
        simple_graph.order.append("bad")

        cleaned = validate_flow(simple_graph)

        assert "bad" not in cleaned.nodes
        assert cleaned.order == ["root", "faq"]

    def test_malformed_options_trimmed_individually(self, simple_graph):
        simple_graph.nodes["faq"].options.append(Option(label="", next_id="root"))
        cleaned = validate_flow(simple_graph)
        assert cleaned.nodes["faq"].options == [Option(label="Home", next_id="root")]

    def test_order_recomputed_root_first(self, simple_graph):
        simple_graph.order = ["faq", "root"]
        assert validate_flow(simple_graph).order == ["root", "faq"]

    def test_keeps_relative_order(self, simple_graph):
        for step_id in ("c", "a", "b"):
            simple_graph.nodes[step_id] = FlowNode(
                text=step_id, options=[Option(label="Home", next_id="root")]
            )
        simple_graph.order = ["root", "c", "faq", "a", "b"]
        assert validate_flow(simple_graph).order == ["root", "c", "faq", "a", "b"]

    def test_nodes_missing_from_order_kept(self, simple_graph):
        simple_graph.order = ["root"]
        assert validate_flow(simple_graph).order == ["root", "faq"]

    def test_dangling_references_allowed(self, simple_graph):
        simple_graph.nodes["faq"].options.append(Option(label="Later", next_id="todo"))
        cleaned = validate_flow(simple_graph)
        assert cleaned.nodes["faq"].options[-1].next_id == "todo"

    def test_preserves_active_flag(self, simple_graph):
        simple_graph.is_active = False
        assert validate_flow(simple_graph).is_active is False


class TestFindDanglingReferences:
    """Tests for dangling reference detection."""

    def test_reports_missing_targets_only(self, sentinel_graph):
        assert find_dangling_references(sentinel_graph) == [("root", 3, "missing_step")]

    def test_clean_graph_has_none(self, simple_graph):
        assert find_dangling_references(simple_graph) == []

    def test_empty_target_not_reported(self, simple_graph):
        simple_graph.nodes["faq"].options.append(Option(label="x", next_id=""))
        assert find_dangling_references(simple_graph) == []
