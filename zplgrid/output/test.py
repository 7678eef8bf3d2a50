"""Tests for output module."""

import pytest

from zplgrid.layout import RectPx, compute_template_layout
from zplgrid.schema import TemplateDoc, default_template

from .lib import format_layout_report, format_rect, format_template_tree


class TestFormatTemplateTree:
    """Tests for format_template_tree function."""

    @pytest.mark.unit
    def test_single_leaf(self):
        result = format_template_tree(default_template())
        assert result == 'New template\nr (root) [text, ""]'

    @pytest.mark.unit
    def test_sample_tree(self, sample_template):
        result = format_template_tree(TemplateDoc.model_validate(sample_template))
        assert result.splitlines() == [
            "Shelf label",
            "r [split, vertical, 50%]",
            '├── r/0 (title) [text, "Hi {name}"]',
            '└── r/1 (code) [qr, "{sku}"]',
        ]

    @pytest.mark.unit
    def test_nested_tree(self, complex_template):
        result = format_template_tree(TemplateDoc.model_validate(complex_template))
        lines = result.splitlines()
        assert lines[1] == "r (body) [split, horizontal, 40%, gutter 1mm, divider]"
        assert lines[2].startswith("├── r/0 (header) [text, ")
        assert "    ├── r/1/0 (logo) [image, url]" in lines
        assert "        │   ├── r/1/1/0/0 (qr) [qr, \"{sku}-{_counter_daily}\"]" in lines
        assert "        │   └── r/1/1/0/1 [line, h 0.3mm, debug]" in lines
        assert lines[-1] == '        └── r/1/1/1 (dm) [datamatrix, "{{literal}} {lot}"]'

    @pytest.mark.unit
    def test_long_text_truncated(self, sample_template):
        sample_template["layout"]["children"][0]["elements"][0]["text"] = "x" * 100
        result = format_template_tree(TemplateDoc.model_validate(sample_template))
        assert '"' + "x" * 21 + '..."' in result


class TestFormatLayoutReport:
    """Tests for format_layout_report function."""

    @pytest.mark.unit
    def test_format_rect(self):
        assert format_rect(RectPx(0, 0.5, 592.0, 208)) == "0,0.5 592x208"

    @pytest.mark.unit
    def test_sample_report(self, sample_template):
        render = compute_template_layout(TemplateDoc.model_validate(sample_template), 74, 26, 8)
        assert format_layout_report(render).splitlines() == [
            "r    0,0 592x208",
            "r/0  0,0 296x208  content 0,0 296x208",
            "r/1  296,0 296x208  content 296,0 296x208",
        ]

    @pytest.mark.unit
    def test_gutter_and_divider(self, complex_template):
        render = compute_template_layout(TemplateDoc.model_validate(complex_template), 74, 26, 8)
        first = format_layout_report(render).splitlines()[0]
        assert first.endswith("gutter 0,80 592x8  divider 0,82 592x4")
