"""Unit tests for path addressing."""

import pytest

from zplgrid.schema import LeafNode, TemplateDoc, TextElement

from .lib import (
    find_node_by_alias,
    get_node_by_id,
    is_leaf,
    is_node_id,
    is_split,
    list_nodes,
    resolve_node_ref,
    update_node_by_id,
)


@pytest.fixture
def layout(complex_template):
    return TemplateDoc.model_validate(complex_template).layout


class TestListNodes:
    """Tests for the pre-order node listing."""

    @pytest.mark.unit
    def test_pre_order_ids(self, layout):
        assert [e.node_id for e in list_nodes(layout)] == [
            "r",
            "r/0",
            "r/1",
            "r/1/0",
            "r/1/1",
            "r/1/1/0",
            "r/1/1/0/0",
            "r/1/1/0/1",
            "r/1/1/1",
        ]

    @pytest.mark.unit
    def test_entry_fields(self, layout):
        entries = {e.node_id: e for e in list_nodes(layout)}
        assert entries["r"].kind == "split"
        assert entries["r"].alias == "body"
        assert entries["r"].depth == 0
        assert entries["r/1/1/0/0"].kind == "leaf"
        assert entries["r/1/1/0/0"].alias == "qr"
        assert entries["r/1/1/0/0"].depth == 4
        assert entries["r/1/1/0/1"].alias is None

    @pytest.mark.unit
    def test_single_leaf(self):
        leaf = LeafNode(elements=(TextElement(text=""),))
        entries = list_nodes(leaf)
        assert len(entries) == 1
        assert entries[0].node is leaf


class TestGetNodeById:
    """Tests for identifier lookup."""

    @pytest.mark.unit
    def test_root(self, layout):
        assert get_node_by_id(layout, "r") is layout

    @pytest.mark.unit
    def test_nested(self, layout):
        node = get_node_by_id(layout, "r/1/1/1")
        assert is_leaf(node)
        assert node.alias == "dm"

    @pytest.mark.unit
    def test_descend_into_leaf_returns_none(self, layout):
        assert get_node_by_id(layout, "r/0/1") is None

    @pytest.mark.unit
    @pytest.mark.parametrize("node_id", ["", "x", "r/2", "r/", "/0", "r/0/", "R"])
    def test_malformed_returns_none(self, layout, node_id):
        assert get_node_by_id(layout, node_id) is None


class TestUpdateNodeById:
    """Tests for copy-on-write update."""

    @pytest.mark.unit
    def test_identity_keeps_root(self, layout):
        """An identity updater reallocates nothing."""
        for entry in list_nodes(layout):
            assert update_node_by_id(layout, entry.node_id, lambda n: n) is layout

    @pytest.mark.unit
    def test_unresolvable_is_noop(self, layout):
        calls = []

        def updater(node):
            calls.append(node)
            return node.model_copy(update={"alias": "changed"})

        assert update_node_by_id(layout, "r/0/0", updater) is layout
        assert update_node_by_id(layout, "bogus", updater) is layout
        assert calls == []

    @pytest.mark.unit
    def test_structural_sharing(self, layout):
        """Only nodes on the path to the target are rebuilt."""
        new_root = update_node_by_id(
            layout, "r/1/1/1", lambda n: n.model_copy(update={"alias": "matrix"})
        )
        assert new_root is not layout
        assert get_node_by_id(new_root, "r/1/1/1").alias == "matrix"
        assert get_node_by_id(layout, "r/1/1/1").alias == "dm"
        # Off-path subtrees are shared.
        assert get_node_by_id(new_root, "r/0") is get_node_by_id(layout, "r/0")
        assert get_node_by_id(new_root, "r/1/0") is get_node_by_id(layout, "r/1/0")
        assert get_node_by_id(new_root, "r/1/1/0") is get_node_by_id(layout, "r/1/1/0")
        # On-path ancestors are new.
        assert get_node_by_id(new_root, "r/1") is not get_node_by_id(layout, "r/1")

    @pytest.mark.unit
    def test_replace_root(self, layout):
        leaf = LeafNode(elements=(TextElement(text="only"),))
        assert update_node_by_id(layout, "r", lambda n: leaf) is leaf


class TestAliasLookup:
    """Tests for alias and reference resolution."""

    @pytest.mark.unit
    def test_find_by_alias(self, layout):
        assert find_node_by_alias(layout, "qr") == "r/1/1/0/0"
        assert find_node_by_alias(layout, "missing") is None

    @pytest.mark.unit
    def test_resolve_ref(self, layout):
        assert resolve_node_ref(layout, "header") == "r/0"
        assert resolve_node_ref(layout, "r/1") == "r/1"
        assert resolve_node_ref(layout, "r/0/0") is None
        assert resolve_node_ref(layout, "nope") is None


class TestPredicates:
    """Tests for identifier and kind predicates."""

    @pytest.mark.unit
    def test_is_node_id(self):
        assert is_node_id("r")
        assert is_node_id("r/0/1/1/0/1/0/0/1")
        assert not is_node_id("r/3")
        assert not is_node_id("root")

    @pytest.mark.unit
    def test_kind_predicates(self, layout):
        assert is_split(layout)
        assert not is_leaf(layout)
        assert not is_split(None)
