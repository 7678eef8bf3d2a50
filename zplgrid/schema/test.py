"""Unit tests for the schema module."""

import json

import pytest
from pydantic import ValidationError

from .lib import (
    BUILTIN_DEFAULTS,
    Direction,
    LeafNode,
    QrElement,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    TextDefaults,
    TextElement,
    TextFit,
    TextWrap,
    default_template,
    dump_template,
    effective_leaf_padding,
    effective_text_options,
    export_json_schema,
    resolve,
    template_to_json,
)


class TestEnums:
    """Tests for closed value domains."""

    @pytest.mark.unit
    def test_direction_values(self):
        assert Direction.V.value == "v"
        assert Direction.H.value == "h"

    @pytest.mark.unit
    def test_text_fit_values(self):
        assert {f.value for f in TextFit} == {
            "overflow",
            "wrap",
            "shrink_to_fit",
            "truncate",
        }

    @pytest.mark.unit
    def test_text_wrap_values(self):
        assert {w.value for w in TextWrap} == {"none", "word", "char"}


class TestNodeModels:
    """Tests for node and element parsing."""

    @pytest.mark.unit
    def test_parse_nested_document(self, sample_template):
        """A split with two leaves parses into typed models."""
        doc = TemplateDoc.model_validate(sample_template)
        assert isinstance(doc.layout, SplitNode)
        assert doc.layout.direction == "v"
        left, right = doc.layout.children
        assert isinstance(left, LeafNode)
        assert isinstance(left.element, TextElement)
        assert isinstance(right.element, QrElement)

    @pytest.mark.unit
    def test_padding_is_tuple(self):
        leaf = LeafNode.model_validate(
            {
                "kind": "leaf",
                "padding_mm": [1, 2, 3, 4],
                "elements": [{"type": "text", "text": ""}],
            }
        )
        assert leaf.padding_mm == (1.0, 2.0, 3.0, 4.0)

    @pytest.mark.unit
    def test_models_are_frozen(self):
        leaf = LeafNode(elements=(TextElement(text="a"),))
        with pytest.raises(ValidationError):
            leaf.alias = "x"

    @pytest.mark.unit
    def test_leaf_requires_exactly_one_element(self):
        with pytest.raises(ValidationError):
            LeafNode.model_validate(
                {
                    "kind": "leaf",
                    "elements": [
                        {"type": "text", "text": "a"},
                        {"type": "text", "text": "b"},
                    ],
                }
            )

    @pytest.mark.unit
    def test_split_requires_two_children(self):
        with pytest.raises(ValidationError):
            SplitNode.model_validate(
                {
                    "kind": "split",
                    "direction": "h",
                    "ratio": 0.5,
                    "children": [
                        {"kind": "leaf", "elements": [{"type": "text", "text": ""}]}
                    ],
                }
            )

    @pytest.mark.unit
    @pytest.mark.parametrize("ratio", [0, 1, -0.2, 1.5])
    def test_ratio_is_exclusive(self, ratio):
        leaf = {"kind": "leaf", "elements": [{"type": "text", "text": ""}]}
        with pytest.raises(ValidationError):
            SplitNode.model_validate(
                {"kind": "split", "direction": "v", "ratio": ratio, "children": [leaf, leaf]}
            )

    @pytest.mark.unit
    def test_unknown_element_type_rejected(self):
        with pytest.raises(ValidationError):
            LeafNode.model_validate(
                {"kind": "leaf", "elements": [{"type": "barcode", "data": "x"}]}
            )

    @pytest.mark.unit
    def test_datamatrix_ranges(self):
        leaf = {
            "kind": "leaf",
            "elements": [{"type": "datamatrix", "data": "x", "rows": 50}],
        }
        with pytest.raises(ValidationError):
            LeafNode.model_validate(leaf)

    @pytest.mark.unit
    def test_unknown_keys_ignored(self):
        doc = TemplateDoc.model_validate(
            {
                "schema_version": 1,
                "colour": "red",
                "layout": {"kind": "leaf", "elements": [{"type": "text", "text": ""}]},
            }
        )
        assert "colour" not in dump_template(doc)


class TestResolution:
    """Tests for leaf -> template -> built-in inheritance."""

    @pytest.mark.unit
    def test_resolve_prefers_leaf(self):
        assert resolve(1, 2, 3) == 1

    @pytest.mark.unit
    def test_resolve_falls_back_to_template(self):
        assert resolve(None, 2, 3) == 2

    @pytest.mark.unit
    def test_resolve_falls_back_to_builtin(self):
        assert resolve(None, None, 3) == 3

    @pytest.mark.unit
    def test_resolve_keeps_falsy_values(self):
        """False and 0 are present values, not absent ones."""
        assert resolve(False, True, True) is False
        assert resolve(0, 5, 5) == 0

    @pytest.mark.unit
    def test_leaf_padding_inheritance(self):
        leaf = LeafNode(elements=(TextElement(text=""),))
        defaults = TemplateDefaults(leaf_padding_mm=(1, 1, 1, 1))
        assert effective_leaf_padding(leaf, None) == (0.0, 0.0, 0.0, 0.0)
        assert effective_leaf_padding(leaf, defaults) == (1.0, 1.0, 1.0, 1.0)
        own = leaf.model_copy(update={"padding_mm": (2.0, 2.0, 2.0, 2.0)})
        assert effective_leaf_padding(own, defaults) == (2.0, 2.0, 2.0, 2.0)

    @pytest.mark.unit
    def test_text_options(self):
        element = TextElement(text="x", wrap=TextWrap.CHAR)
        defaults = TemplateDefaults(text=TextDefaults(fit=TextFit.TRUNCATE, max_lines=3))
        options = effective_text_options(element, defaults)
        assert options.wrap == "char"
        assert options.fit == "truncate"
        assert options.max_lines == 3
        assert options.font_height_mm == BUILTIN_DEFAULTS.text.font_height_mm


class TestDefaultTemplate:
    """Tests for the new-template document."""

    @pytest.mark.unit
    def test_shape(self):
        doc = default_template()
        assert doc.schema_version == 1
        assert doc.name == "New template"
        assert isinstance(doc.layout, LeafNode)
        assert doc.layout.alias == "root"
        assert doc.defaults.leaf_padding_mm == (0.375, 0.375, 0.375, 0.375)

    @pytest.mark.unit
    def test_reparses(self):
        doc = default_template()
        assert TemplateDoc.model_validate(dump_template(doc)) == doc


class TestSerialization:
    """Tests for JSON serialization."""

    @pytest.mark.unit
    def test_absent_fields_omitted(self):
        doc = TemplateDoc(layout=LeafNode(elements=(TextElement(text="Hi"),)))
        assert dump_template(doc) == {
            "schema_version": 1,
            "layout": {"kind": "leaf", "elements": [{"type": "text", "text": "Hi"}]},
        }

    @pytest.mark.unit
    def test_enum_values_serialized(self, sample_template):
        doc = TemplateDoc.model_validate(sample_template)
        data = json.loads(template_to_json(doc))
        assert data["layout"]["direction"] == "v"

    @pytest.mark.unit
    def test_round_trip(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        assert TemplateDoc.model_validate(dump_template(doc)) == doc


class TestExportJsonSchema:
    """Tests for JSON schema export."""

    @pytest.mark.unit
    def test_schema_export(self):
        schema = export_json_schema()
        assert "$defs" in schema
        assert "SplitNode" in schema["$defs"]
        assert "LeafNode" in schema["$defs"]
        assert schema["title"] == "TemplateDoc"
