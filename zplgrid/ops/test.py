"""Unit tests for edit operations."""

import pytest

from zplgrid.ids import get_node_by_id, list_nodes
from zplgrid.schema import (
    DataMatrixElement,
    Direction,
    Divider,
    ImageElement,
    LeafNode,
    LineElement,
    QrElement,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    TextElement,
    default_template,
    dump_template,
)
from zplgrid.validation import validate_template

from .lib import (
    clamp_ratio,
    find_first_leaf,
    make_default_element,
    set_defaults,
    set_leaf_element,
    set_leaf_padding,
    set_node_alias,
    set_split_divider,
    set_split_gutter,
    set_split_ratio,
    set_template_name,
    split_leaf,
    toggle_leaf_debug_border,
    unsplit,
    update_leaf_element,
)


@pytest.fixture
def doc(sample_template):
    return TemplateDoc.model_validate(sample_template)


@pytest.fixture
def nested(complex_template):
    return TemplateDoc.model_validate(complex_template)


class TestSplitLeaf:
    """Tests for split_leaf."""

    @pytest.mark.unit
    def test_split_root_leaf(self):
        base = default_template()
        result = split_leaf(base, "r", "v")
        split = result.layout
        assert isinstance(split, SplitNode)
        assert split.direction == "v"
        assert split.ratio == 0.5
        assert split.gutter_mm == 0
        assert split.divider == Divider(visible=False, thickness_mm=0.3)
        assert split.children[0] is base.layout

    @pytest.mark.unit
    def test_new_leaf_inherits_padding_and_border(self, nested):
        result = split_leaf(nested, "r/1/1/0/1", "h")
        new_leaf = get_node_by_id(result.layout, "r/1/1/0/1/1")
        assert isinstance(new_leaf, LeafNode)
        assert new_leaf.debug_border is True
        assert new_leaf.alias is None
        assert new_leaf.element == TextElement(text="")

        header = split_leaf(nested, "r/0", "v")
        assert get_node_by_id(header.layout, "r/0/1").padding_mm == (1.0, 1.0, 1.0, 1.0)

    @pytest.mark.unit
    def test_split_of_split_is_noop(self, doc):
        assert split_leaf(doc, "r", "v") is doc

    @pytest.mark.unit
    def test_stale_id_is_noop(self, doc):
        assert split_leaf(doc, "r/0/1", "v") is doc
        assert split_leaf(doc, "garbage", "h") is doc

    @pytest.mark.unit
    def test_unknown_direction_is_noop(self, doc):
        assert split_leaf(doc, "r/0", "x") is doc
        assert split_leaf(default_template(), "r", "diagonal").layout.kind == "leaf"

    @pytest.mark.unit
    def test_direction_enum_accepted(self, doc):
        result = split_leaf(doc, "r/0", Direction.H)
        assert result.layout.children[0].direction == "h"

    @pytest.mark.unit
    def test_result_validates(self, doc):
        result = split_leaf(doc, "r/1", "h")
        assert validate_template(result).is_renderable


class TestUnsplit:
    """Tests for unsplit."""

    @pytest.mark.unit
    def test_round_trip(self, nested):
        """Unsplitting a fresh split restores the original leaf."""
        for entry in list_nodes(nested.layout):
            if entry.kind != "leaf":
                continue
            for direction in ("v", "h"):
                split = split_leaf(nested, entry.node_id, direction)
                restored = unsplit(split, entry.node_id)
                assert restored == nested
                assert get_node_by_id(restored.layout, entry.node_id) is entry.node

    @pytest.mark.unit
    def test_keeps_leftmost_leaf(self, nested):
        """The first leaf of the first child wins, others are dropped."""
        result = unsplit(nested, "r/1/1")
        merged = result.layout.children[1].children[1]
        assert isinstance(merged, LeafNode)
        assert merged.alias == "qr"
        assert isinstance(merged.element, QrElement)
        aliases = {e.alias for e in list_nodes(result.layout)}
        assert "dm" not in aliases

    @pytest.mark.unit
    def test_unsplit_root(self, nested):
        result = unsplit(nested, "r")
        assert result.layout is nested.layout.children[0]

    @pytest.mark.unit
    def test_unsplit_leaf_is_noop(self, doc):
        assert unsplit(doc, "r/0") is doc
        assert unsplit(doc, "r/1/0") is doc

    @pytest.mark.unit
    def test_find_first_leaf(self, nested):
        assert find_first_leaf(nested.layout.children[1]).alias == "logo"


class TestSetters:
    """Tests for the raw field setters."""

    @pytest.mark.unit
    def test_set_ratio(self, doc):
        result = set_split_ratio(doc, "r", 0.3)
        assert result.layout.ratio == 0.3
        assert result.layout.children[0] is doc.layout.children[0]
        assert doc.layout.ratio == 0.5

    @pytest.mark.unit
    def test_set_ratio_on_leaf_is_noop(self, doc):
        assert set_split_ratio(doc, "r/0", 0.3) is doc

    @pytest.mark.unit
    def test_set_gutter_does_not_couple_divider(self, doc):
        """Raw setters leave cross-field rules to the caller."""
        result = set_split_divider(doc, "r", Divider(visible=True, thickness_mm=1.0))
        assert result.layout.gutter_mm is None
        assert not validate_template(result).is_renderable

        result = set_split_gutter(result, "r", 1.0)
        assert validate_template(result).is_renderable

    @pytest.mark.unit
    def test_set_alias(self, doc):
        result = set_node_alias(doc, "r", "body")
        assert result.layout.alias == "body"
        cleared = set_node_alias(result, "r/0", None)
        assert cleared.layout.children[0].alias is None

    @pytest.mark.unit
    def test_set_padding(self, doc):
        result = set_leaf_padding(doc, "r/0", [1, 2, 3, 4])
        assert result.layout.children[0].padding_mm == (1.0, 2.0, 3.0, 4.0)
        assert set_leaf_padding(result, "r/0", None).layout.children[0].padding_mm is None
        assert set_leaf_padding(doc, "r", [1, 1, 1, 1]) is doc

    @pytest.mark.unit
    def test_debug_border(self, doc):
        result = toggle_leaf_debug_border(doc, "r/1", True)
        assert result.layout.children[1].debug_border is True

    @pytest.mark.unit
    def test_template_fields(self, doc):
        assert set_template_name(doc, "Bin").name == "Bin"
        defaults = TemplateDefaults(leaf_padding_mm=(1, 1, 1, 1))
        assert set_defaults(doc, defaults).defaults is defaults

    @pytest.mark.unit
    def test_clamp_ratio(self):
        assert clamp_ratio(0.0) == 0.01
        assert clamp_ratio(1.5) == 0.99
        assert clamp_ratio(0.42) == 0.42


class TestElements:
    """Tests for element replacement and patching."""

    @pytest.mark.unit
    def test_default_elements(self):
        assert make_default_element("text") == TextElement(text="")
        assert make_default_element("qr") == QrElement(data="")
        assert make_default_element("datamatrix") == DataMatrixElement(
            data="", module_size_mm=0.5, quality=200
        )
        assert make_default_element("line") == LineElement(
            orientation="h", thickness_mm=0.3, align="center"
        )
        image = make_default_element("image")
        assert image.type == "image"
        assert image.source.kind == "base64"
        assert image.source.data == ""

    @pytest.mark.unit
    def test_set_element(self, doc):
        element = QrElement(data="{sku}", magnification=4)
        result = set_leaf_element(doc, "r/0", element)
        assert result.layout.children[0].element is element

    @pytest.mark.unit
    def test_patch_merges(self, doc):
        result = update_leaf_element(doc, "r/0", {"font_height_mm": 5.0})
        element = result.layout.children[0].element
        assert element.text == "Hi {name}"
        assert element.font_height_mm == 5.0

    @pytest.mark.unit
    def test_patch_none_clears(self, doc):
        patched = update_leaf_element(doc, "r/0", {"wrap": "char"})
        cleared = update_leaf_element(patched, "r/0", {"wrap": None})
        assert cleared.layout.children[0].element.wrap is None

    @pytest.mark.unit
    def test_patch_type_switch_discards_fields(self, doc):
        result = update_leaf_element(doc, "r/1", {"type": "datamatrix"})
        element = result.layout.children[1].element
        assert isinstance(element, DataMatrixElement)
        assert element.data == ""
        assert element.module_size_mm == 0.5

    @pytest.mark.unit
    def test_invalid_patch_is_noop(self, doc):
        assert update_leaf_element(doc, "r/0", {"font_height_mm": -1}) is doc
        assert update_leaf_element(doc, "r/0", {"type": "barcode"}) is doc
        assert update_leaf_element(doc, "r/0", {"type": "image", "threshold": 999}) is doc
        assert update_leaf_element(doc, "r", {"text": "x"}) is doc

    @pytest.mark.unit
    def test_switch_to_image_keeps_pending_source(self, doc):
        """Switching to image applies even though the default source is empty."""
        result = update_leaf_element(doc, "r/0", {"type": "image", "fit": "contain"})
        element = result.layout.children[0].element
        assert isinstance(element, ImageElement)
        assert element.fit == "contain"
        assert element.source.data == ""

        check = validate_template(dump_template(result))
        assert not check.ok
        assert any(issue.path.endswith("source.data") for issue in check.issues)

    @pytest.mark.unit
    def test_patch_to_image_with_source(self, doc):
        result = update_leaf_element(
            doc, "r/0", {"type": "image", "source": {"kind": "url", "data": "https://x/y.png"}}
        )
        assert result.layout.children[0].element.source.kind == "url"
