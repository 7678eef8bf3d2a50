"""Unit tests for the validation module."""

import pytest

from zplgrid.schema import QrElement, SplitNode, TemplateDoc, dump_template

from .lib import (
    check_alias_unique,
    check_divider_gutter,
    check_fit_wrap,
    check_qr_modes,
    is_valid,
    iter_node_paths,
    parse_template_json,
    validate_template,
)


def _leaf(element: dict, **extra) -> dict:
    return {"kind": "leaf", "elements": [element], **extra}


def _doc(layout: dict, **extra) -> dict:
    return {"schema_version": 1, "layout": layout, **extra}


class TestShapeErrors:
    """Tests for shape-invalid values."""

    @pytest.mark.unit
    def test_valid_document(self, complex_template):
        result = validate_template(complex_template)
        assert result.ok
        assert result.issues == []
        assert result.is_renderable

    @pytest.mark.unit
    def test_missing_layout(self):
        """Missing required fields yield no document."""
        result = validate_template({"schema_version": 1})
        assert not result.ok
        assert result.doc is None
        assert any(issue.path == "layout" for issue in result.issues)
        assert all(issue.issue_type == "shape" for issue in result.issues)

    @pytest.mark.unit
    def test_wrong_schema_version(self):
        result = validate_template(_doc(_leaf({"type": "text", "text": ""}), schema_version=2))
        assert not result.ok
        assert result.messages[0].startswith("schema_version: ")

    @pytest.mark.unit
    def test_ratio_out_of_range(self, sample_template):
        sample_template["layout"]["ratio"] = 1.0
        result = validate_template(sample_template)
        assert not result.ok
        assert any("ratio" in issue.path for issue in result.issues)

    @pytest.mark.unit
    def test_wrong_scalar_types_are_not_coerced(self, sample_template):
        """Numeric strings and booleans in number fields are shape errors."""
        sample_template["layout"]["ratio"] = "0.5"
        sample_template["layout"]["gutter_mm"] = True
        sample_template["layout"]["children"][0]["debug_border"] = "yes"
        result = validate_template(sample_template)
        assert not result.ok
        assert result.doc is None
        paths = [issue.path for issue in result.issues]
        assert any(path.endswith("ratio") for path in paths)
        assert any(path.endswith("gutter_mm") for path in paths)
        assert any(path.endswith("debug_border") for path in paths)
        assert all(issue.issue_type == "shape" for issue in result.issues)

    @pytest.mark.unit
    def test_integers_accepted_for_millimetres(self, sample_template):
        sample_template["layout"]["gutter_mm"] = 2
        sample_template["defaults"] = {"leaf_padding_mm": [1, 1, 1, 1]}
        result = validate_template(sample_template)
        assert result.ok
        assert result.doc.layout.gutter_mm == 2.0

    @pytest.mark.unit
    def test_non_dict_value_reports_root(self):
        result = validate_template([1, 2, 3])
        assert not result.ok
        assert result.issues[0].path == "$"

    @pytest.mark.unit
    def test_invalid_json(self):
        result = parse_template_json("{not json")
        assert not result.ok
        assert len(result.issues) == 1
        assert result.issues[0].issue_type == "invalid_json"
        assert result.messages[0].startswith("$: Invalid JSON")

    @pytest.mark.unit
    def test_json_text(self):
        result = parse_template_json(
            '{"schema_version":1,"layout":{"kind":"leaf","elements":[{"type":"text","text":"Hi {name}"}]}}'
        )
        assert result.is_renderable

    @pytest.mark.unit
    def test_accepts_parsed_document(self, sample_template):
        doc = TemplateDoc.model_validate(sample_template)
        result = validate_template(doc)
        assert result.doc is doc


class TestFitWrap:
    """Tests for the text fit/wrap rule."""

    @pytest.mark.unit
    def test_overflow_requires_wrap_none(self):
        issues = check_fit_wrap("overflow", "word", "x")
        assert [i.path for i in issues] == ["x.wrap"]

    @pytest.mark.unit
    def test_wrap_none_requires_overflow(self):
        issues = check_fit_wrap("shrink_to_fit", "none", "x")
        assert sorted(i.path for i in issues) == ["x.fit", "x.wrap"]

    @pytest.mark.unit
    def test_missing_values_are_skipped(self):
        assert check_fit_wrap("overflow", None, "x") == []
        assert check_fit_wrap(None, "none", "x") == []

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "fit,wrap",
        [("overflow", "none"), ("wrap", "word"), ("truncate", "char"), ("shrink_to_fit", "word")],
    )
    def test_valid_pairs(self, fit, wrap):
        assert check_fit_wrap(fit, wrap, "x") == []

    @pytest.mark.unit
    def test_default_overflow_with_leaf_wrap(self):
        """An inherited fit combines with an explicit leaf wrap."""
        result = validate_template(
            _doc(
                _leaf({"type": "text", "text": "Hi", "wrap": "word"}),
                defaults={"text": {"fit": "overflow"}},
            )
        )
        assert result.ok
        assert result.messages == ["layout.elements.0.wrap: wrap must be none when fit is overflow"]

    @pytest.mark.unit
    def test_element_without_fit_or_wrap_not_checked(self):
        result = validate_template(
            _doc(
                _leaf({"type": "text", "text": "Hi"}),
                defaults={"text": {"fit": "overflow"}},
            )
        )
        assert result.issues == []

    @pytest.mark.unit
    def test_defaults_block_checked(self):
        result = validate_template(
            _doc(
                _leaf({"type": "text", "text": "Hi"}),
                defaults={"text": {"fit": "overflow", "wrap": "char"}},
            )
        )
        assert [i.path for i in result.issues] == ["defaults.text.wrap"]

    @pytest.mark.unit
    def test_nested_path(self, sample_template):
        sample_template["layout"]["children"][0]["elements"][0]["wrap"] = "none"
        result = validate_template(sample_template)
        assert result.ok
        assert [i.path for i in result.issues] == ["layout.children.0.elements.0.wrap", "layout.children.0.elements.0.fit"]
        assert not result.is_renderable


class TestAliasRule:
    """Tests for alias uniqueness."""

    @pytest.mark.unit
    def test_second_occurrence_reported(self, sample_template):
        sample_template["layout"]["children"][1]["alias"] = "title"
        result = validate_template(sample_template)
        assert result.ok
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.path == "layout.children.1.alias"
        assert issue.message == "Duplicate alias: title"
        assert issue.issue_type == "duplicate_alias"

    @pytest.mark.unit
    def test_unique_aliases(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        assert check_alias_unique(list(iter_node_paths(doc.layout))) == []


class TestDividerRule:
    """Tests for the divider/gutter rule."""

    @pytest.mark.unit
    def test_visible_divider_without_gutter(self, sample_template):
        sample_template["layout"]["divider"] = {"visible": True}
        result = validate_template(sample_template)
        assert [i.path for i in result.issues] == ["layout.divider"]

    @pytest.mark.unit
    def test_hidden_divider_ignored(self, sample_template):
        sample_template["layout"]["divider"] = {"visible": False, "thickness_mm": 2.0}
        assert is_valid(sample_template)

    @pytest.mark.unit
    def test_gutter_equal_to_thickness(self, sample_template):
        sample_template["layout"]["gutter_mm"] = 0.5
        split = SplitNode.model_validate(
            {**sample_template["layout"], "divider": {"visible": True, "thickness_mm": 0.5}}
        )
        assert check_divider_gutter(split, "layout") == []

    @pytest.mark.unit
    def test_default_thickness_applies(self, sample_template):
        sample_template["layout"]["gutter_mm"] = 0.2
        split = SplitNode.model_validate(
            {**sample_template["layout"], "divider": {"visible": True}}
        )
        assert len(check_divider_gutter(split, "layout")) == 1


class TestQrRule:
    """Tests for QR input/character mode pairing."""

    @pytest.mark.unit
    def test_manual_mode_requires_character_mode(self):
        issues = check_qr_modes(QrElement(data="x", input_mode="M"), "p")
        assert [i.path for i in issues] == ["p.character_mode"]

    @pytest.mark.unit
    def test_character_mode_requires_manual_input(self):
        issues = check_qr_modes(QrElement(data="x", character_mode="N"), "p")
        assert [i.path for i in issues] == ["p.input_mode"]

    @pytest.mark.unit
    def test_valid_pairing(self):
        assert check_qr_modes(QrElement(data="x", input_mode="M", character_mode="A"), "p") == []
        assert check_qr_modes(QrElement(data="x", input_mode="A"), "p") == []

    @pytest.mark.unit
    def test_reported_through_document(self, sample_template):
        sample_template["layout"]["children"][1]["elements"][0]["input_mode"] = "M"
        result = validate_template(sample_template)
        assert result.messages == [
            "layout.children.1.elements.0.character_mode: character_mode is required when input_mode is M"
        ]


class TestRoundTrip:
    """Serialization round trip through validation."""

    @pytest.mark.unit
    def test_dump_and_validate(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        result = validate_template(dump_template(doc))
        assert result.doc == doc
