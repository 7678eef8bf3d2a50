"""Integration tests for an interactive editing session.

Walks through the caller's control flow: each action runs one edit,
the result is validated and pushed onto history, and geometry and
variables are re-derived from the current document.
"""

import json

import pytest

from zplgrid import TemplateEditor, compute_template_layout, extract_template_variables
from zplgrid.ids import get_node_by_id
from zplgrid.validation import validate_template


@pytest.mark.integration
def test_build_label_from_scratch():
    editor = TemplateEditor()
    editor.set_template_name("Shelf label")

    editor.split_leaf_at("root", "v")
    editor.set_split_ratio("r", 0.65)
    editor.set_split_divider_visible("r", True)
    editor.set_alias("r/1", "code")
    editor.place_element_on_leaf("code", "qr")
    editor.patch_element("code", {"data": "{sku}", "error_correction": "M"})
    editor.patch_element("r/0", {"text": "{product}\n{price}"})
    editor.split_leaf_at("r/0", "h")
    editor.patch_element("r/0/1", {"text": "Printed {_date_yyyy_mm_dd}"})

    assert editor.validation_issues == []

    render = editor.compute_layout(74, 26, 8)
    split = render.splits[0]
    assert split.divider_rect is not None
    assert split.divider_rect.w >= 1
    left, right = render.rects["r/0"], render.rects["r/1"]
    assert left.w + split.gutter_rect.w + right.w == pytest.approx(592)

    variables = editor.variables()
    assert variables.variables == ["price", "product", "sku"]
    assert variables.macros == ["_date_yyyy_mm_dd"]


@pytest.mark.integration
def test_drag_ratio_then_undo_all():
    """Rapid ratio updates stay clamped and are fully undoable."""
    editor = TemplateEditor()
    start = editor.document
    editor.split_leaf_at("r", "h")

    for step in range(-20, 121, 7):
        editor.set_split_ratio("r", step / 100)
        ratio = editor.document.layout.ratio
        assert 0.01 <= ratio <= 0.99
        render = editor.compute_layout(74, 26, 8)
        assert render.rects["r/0"].h + render.rects["r/1"].h == pytest.approx(208)

    while editor.can_undo:
        editor.undo()
    assert editor.document is start


@pytest.mark.integration
def test_export_import_preserves_document(complex_template):
    source = TemplateEditor()
    assert source.import_json(json.dumps(complex_template)).ok

    source.unsplit_at("r/1/1")
    exported = source.export_json()

    target = TemplateEditor()
    assert target.import_json(exported).ok
    assert target.document == source.document
    assert validate_template(json.loads(exported)).is_renderable

    # The merged leaf is the leftmost one of the collapsed split.
    assert get_node_by_id(target.document.layout, "r/1/1").alias == "qr"
    render = compute_template_layout(target.document, 74, 26, 8)
    assert render.alias_to_id["qr"] == "r/1/1"
    assert "dm" not in render.alias_to_id
    assert extract_template_variables(target.document).variables == ["product", "sku"]
