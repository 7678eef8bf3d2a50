"""Unit tests for the geometry resolver."""

import pytest

from zplgrid.schema import LeafNode, SplitNode, TemplateDoc, TextElement

from .lib import RectPx, compute_layout, compute_template_layout, scale_for_dpi


def _leaf(**extra) -> LeafNode:
    return LeafNode(elements=(TextElement(text=""),), **extra)


def _split(direction: str, ratio: float, **extra) -> SplitNode:
    return SplitNode(direction=direction, ratio=ratio, children=(_leaf(), _leaf()), **extra)


class TestRootAndSplits:
    """Tests for split geometry."""

    @pytest.mark.unit
    def test_root_rect(self):
        render = compute_layout(_leaf(), 74, 26, 8)
        assert render.root_rect == RectPx(0, 0, 592, 208)
        assert render.rects == {"r": render.root_rect}

    @pytest.mark.unit
    def test_vertical_half_split(self):
        render = compute_layout(_split("v", 0.5, gutter_mm=0), 74, 26, 8)
        assert render.rects["r/0"] == RectPx(0, 0, 296, 208)
        assert render.rects["r/1"] == RectPx(296, 0, 296, 208)

    @pytest.mark.unit
    def test_horizontal_split_keeps_width(self):
        render = compute_layout(_split("h", 0.25), 74, 26, 8)
        assert render.rects["r/0"] == RectPx(0, 0, 592, 52)
        assert render.rects["r/1"] == RectPx(0, 52, 592, 156)

    @pytest.mark.unit
    @pytest.mark.parametrize("ratio", [0.01, 0.1, 0.333, 0.5, 0.77, 0.99])
    @pytest.mark.parametrize("gutter_mm", [0, 0.3, 1.25])
    def test_remainder_goes_to_second_child(self, ratio, gutter_mm):
        """child0 + gutter + child1 always equals the parent extent."""
        render = compute_layout(_split("v", ratio, gutter_mm=gutter_mm), 74, 26, 8)
        split = render.splits[0]
        child0, child1 = render.rects["r/0"], render.rects["r/1"]
        assert child0.w + split.gutter_rect.w + child1.w == pytest.approx(render.root_rect.w)
        assert child0.w == int(child0.w)
        assert child1.x == pytest.approx(child0.w + split.gutter_rect.w)
        assert child0.h == child1.h == render.root_rect.h

    @pytest.mark.unit
    def test_gutter_larger_than_parent(self):
        render = compute_layout(_split("v", 0.5, gutter_mm=100), 10, 10, 1)
        assert render.rects["r/0"].w == 0
        assert render.rects["r/1"].w == 0

    @pytest.mark.unit
    def test_divider_centered_in_gutter(self):
        split = _split("v", 0.5, gutter_mm=1.0, divider={"visible": True, "thickness_mm": 0.5})
        render = compute_layout(split, 74, 26, 8)
        gutter = render.splits[0].gutter_rect
        divider = render.splits[0].divider_rect
        assert gutter == RectPx(292, 0, 8, 208)
        assert divider == RectPx(294, 0, 4, 208)

    @pytest.mark.unit
    def test_divider_at_least_one_pixel(self):
        split = _split("h", 0.5, gutter_mm=0.05, divider={"visible": True, "thickness_mm": 0.05})
        divider = compute_layout(split, 74, 26, 8).splits[0].divider_rect
        assert divider.h == 1
        assert divider.w == 592

    @pytest.mark.unit
    def test_hidden_divider(self):
        split = _split("v", 0.5, divider={"visible": False})
        assert compute_layout(split, 74, 26, 8).splits[0].divider_rect is None


class TestLeafGeometry:
    """Tests for padding insets."""

    @pytest.mark.unit
    def test_complex_template(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        render = compute_template_layout(doc, 74, 26, 8)

        assert render.rects["r/0"] == RectPx(0, 0, 592, 80)
        assert render.splits[0].divider_rect == RectPx(0, 82, 592, 4)
        assert render.rects["r/1"] == RectPx(0, 88, 592, 120)

        header = render.leaf_by_id("r/0")
        assert header.content_rect == RectPx(8, 8, 576, 64)

        # Inherits defaults.leaf_padding_mm (0.5 mm = 4 px).
        logo = render.leaf_by_id("r/1/0")
        assert logo.rect == RectPx(0, 88, 148, 120)
        assert logo.content_rect == RectPx(4, 92, 140, 112)

        # Leaf padding then element padding.
        dm = render.leaf_by_id("r/1/1/1")
        assert dm.rect == RectPx(370, 88, 222, 120)
        assert dm.content_rect == RectPx(376, 94, 210, 108)
        assert dm.element.type == "datamatrix"

    @pytest.mark.unit
    def test_without_defaults_padding_is_zero(self):
        render = compute_layout(_leaf(), 10, 10, 2)
        assert render.leaves[0].content_rect == render.root_rect

    @pytest.mark.unit
    def test_inset_clamps_at_zero(self):
        render = compute_layout(_leaf(padding_mm=(5, 5, 5, 5)), 4, 4, 1)
        content = render.leaves[0].content_rect
        assert content.w == 0
        assert content.h == 0


class TestLookups:
    """Tests for alias map, hit testing and determinism."""

    @pytest.mark.unit
    def test_alias_map(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        render = compute_template_layout(doc, 74, 26, 8)
        assert render.alias_to_id == {
            "body": "r",
            "header": "r/0",
            "logo": "r/1/0",
            "qr": "r/1/1/0/0",
            "dm": "r/1/1/1",
        }
        assert len(render.rects) == 9
        assert len(render.leaves) == 5
        assert len(render.splits) == 4

    @pytest.mark.unit
    def test_leaf_at(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        render = compute_template_layout(doc, 74, 26, 8)
        assert render.leaf_at(10, 10).node_id == "r/0"
        assert render.leaf_at(591, 207).node_id == "r/1/1/1"
        assert render.leaf_at(10, 84) is None
        assert render.leaf_at(-1, 0) is None

    @pytest.mark.unit
    def test_deterministic(self, complex_template):
        doc = TemplateDoc.model_validate(complex_template)
        first = compute_template_layout(doc, 74, 26, 8)
        second = compute_template_layout(doc, 74, 26, 8)
        assert first.rects == second.rects

    @pytest.mark.unit
    def test_scale_for_dpi(self):
        assert scale_for_dpi(254) == pytest.approx(10.0)
        assert scale_for_dpi(203) == pytest.approx(7.992, rel=1e-3)
