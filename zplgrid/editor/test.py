"""Unit tests for the editor session."""

import json

import pytest

from zplgrid.schema import LeafNode, QrElement, SplitNode, TemplateDefaults, TemplateDoc, TextDefaults

from .lib import DIVIDER_THICKNESS_MIN_MM, TemplateEditor, snap_ratio


@pytest.fixture
def editor(sample_template):
    return TemplateEditor(TemplateDoc.model_validate(sample_template))


class TestSession:
    """Tests for session state and history."""

    @pytest.mark.unit
    def test_starts_from_default_template(self):
        editor = TemplateEditor()
        assert editor.document.name == "New template"
        assert editor.validation_issues == []
        assert not editor.can_undo
        assert not editor.can_redo

    @pytest.mark.unit
    def test_split_undo_redo(self):
        editor = TemplateEditor()
        original = editor.document
        editor.split_leaf_at("r", "v")
        assert isinstance(editor.document.layout, SplitNode)
        assert editor.can_undo

        editor.undo()
        assert editor.document is original
        assert editor.can_redo

        editor.redo()
        assert isinstance(editor.document.layout, SplitNode)

    @pytest.mark.unit
    def test_noop_action_not_recorded(self, editor):
        editor.unsplit_at("r/0")
        editor.split_leaf_at("r/5", "v")
        editor.set_split_ratio("title", 0.3)
        assert not editor.can_undo

    @pytest.mark.unit
    def test_alias_reference(self, editor):
        editor.split_leaf_at("code", "h")
        assert isinstance(editor.document.layout.children[1], SplitNode)

    @pytest.mark.unit
    def test_new_template_clears_history(self, editor):
        editor.set_template_name("Other")
        editor.new_template()
        assert editor.document.name == "New template"
        assert not editor.can_undo

    @pytest.mark.unit
    def test_undo_without_past(self, editor):
        doc = editor.document
        editor.undo()
        editor.redo()
        assert editor.document is doc


class TestClampingPolicy:
    """Tests for the ratio and gutter/divider policy."""

    @pytest.mark.unit
    @pytest.mark.parametrize("requested,expected", [(-1.0, 0.01), (0.0, 0.01), (0.5, 0.5), (1.0, 0.99), (7.0, 0.99)])
    def test_ratio_clamped(self, editor, requested, expected):
        editor.set_split_ratio("r", requested)
        assert editor.document.layout.ratio == expected
        assert editor.validation_issues == []

    @pytest.mark.unit
    def test_ratio_snapping(self, editor):
        editor.set_split_ratio("r", 0.333, snap=True)
        assert editor.document.layout.ratio == pytest.approx(0.35)

    @pytest.mark.unit
    def test_snap_ratio(self):
        assert snap_ratio(0.12, 5) == pytest.approx(0.1)
        assert snap_ratio(0.001, 5) == 0.01
        assert snap_ratio(0.999, 10) == 0.99
        assert snap_ratio(0.123, 0) == 0.123

    @pytest.mark.unit
    def test_showing_divider_widens_gutter(self, editor):
        editor.set_split_divider_visible("r", True)
        split = editor.document.layout
        assert split.divider.visible is True
        assert split.gutter_mm == pytest.approx(0.3)
        assert editor.validation_issues == []

    @pytest.mark.unit
    def test_thicker_divider_widens_gutter(self, editor):
        editor.set_split_divider_visible("r", True)
        editor.set_split_divider_thickness("r", 1.5)
        split = editor.document.layout
        assert split.divider.thickness_mm == 1.5
        assert split.gutter_mm == 1.5

    @pytest.mark.unit
    @pytest.mark.parametrize("requested", [0, -2.0, 0.05])
    def test_divider_thickness_floored(self, editor, requested):
        editor.set_split_divider_visible("r", True)
        editor.set_split_divider_thickness("r", requested)
        split = editor.document.layout
        assert split.divider.thickness_mm == DIVIDER_THICKNESS_MIN_MM
        assert split.gutter_mm == pytest.approx(0.3)
        assert editor.validation_issues == []

    @pytest.mark.unit
    def test_thin_divider_sets_gutter_to_its_thickness(self, editor):
        editor.set_split_divider_thickness("r", 0.1)
        editor.set_split_divider_visible("r", True)
        assert editor.document.layout.gutter_mm == pytest.approx(0.1)

    @pytest.mark.unit
    def test_hidden_divider_thickness_leaves_gutter(self, editor):
        editor.set_split_divider_thickness("r", 1.5)
        assert editor.document.layout.gutter_mm is None

    @pytest.mark.unit
    def test_gutter_not_below_visible_divider(self, editor):
        editor.set_split_divider_visible("r", True)
        editor.set_split_divider_thickness("r", 1.0)
        editor.set_split_gutter("r", 0.2)
        assert editor.document.layout.gutter_mm == 1.0
        editor.set_split_gutter("r", 2.0)
        assert editor.document.layout.gutter_mm == 2.0

    @pytest.mark.unit
    def test_gutter_not_negative(self, editor):
        editor.set_split_gutter("r", -3)
        assert editor.document.layout.gutter_mm == 0.0

    @pytest.mark.unit
    def test_divider_on_leaf_is_noop(self, editor):
        editor.set_split_divider_visible("r/0", True)
        editor.set_split_gutter("title", 1.0)
        assert not editor.can_undo


class TestLeafActions:
    """Tests for alias, padding and element actions."""

    @pytest.mark.unit
    def test_empty_alias_clears(self, editor):
        editor.set_alias("r/0", "")
        assert editor.document.layout.children[0].alias is None

    @pytest.mark.unit
    def test_duplicate_alias_is_advisory(self, editor):
        editor.set_alias("r/1", "title")
        assert editor.document.layout.children[1].alias == "title"
        assert [i.path for i in editor.validation_issues] == ["layout.children.1.alias"]
        editor.clear_alias("r/1")
        assert editor.validation_issues == []

    @pytest.mark.unit
    def test_padding_and_border(self, editor):
        editor.set_leaf_padding("r/0", [1, 1, 1, 1])
        editor.set_leaf_debug_border("r/0", True)
        leaf = editor.document.layout.children[0]
        assert leaf.padding_mm == (1.0, 1.0, 1.0, 1.0)
        assert leaf.debug_border is True

    @pytest.mark.unit
    def test_place_image_reports_missing_source(self, editor):
        editor.place_element_on_leaf("r/0", "image")
        assert editor.document.layout.children[0].element.type == "image"
        assert any("source" in i.path for i in editor.validation_issues)

    @pytest.mark.unit
    def test_place_unknown_type_is_noop(self, editor):
        before = editor.document
        editor.place_element_on_leaf("r/0", "barcode")
        assert editor.document is before
        assert not editor.can_undo

    @pytest.mark.unit
    def test_split_unknown_direction_is_noop(self, editor):
        editor.split_leaf_at("r/0", "x")
        assert not editor.can_undo

    @pytest.mark.unit
    def test_patch_switch_to_image(self, editor):
        editor.patch_element("title", {"type": "image"})
        assert editor.document.layout.children[0].element.type == "image"
        assert editor.can_undo
        assert any(i.path.endswith("source.data") for i in editor.validation_issues)

    @pytest.mark.unit
    def test_patch_element(self, editor):
        editor.patch_element("code", {"error_correction": "H", "magnification": 5})
        element = editor.document.layout.children[1].element
        assert isinstance(element, QrElement)
        assert element.error_correction == "H"
        assert element.magnification == 5

    @pytest.mark.unit
    def test_defaults_change_revalidates(self, editor):
        editor.patch_element("title", {"wrap": "word"})
        assert editor.validation_issues == []
        editor.set_defaults(TemplateDefaults(text=TextDefaults(fit="overflow")))
        assert [i.path for i in editor.validation_issues] == ["layout.children.0.elements.0.wrap"]


class TestImportExport:
    """Tests for JSON import and export."""

    @pytest.mark.unit
    def test_import_replaces_document(self, sample_template):
        editor = TemplateEditor()
        editor.split_leaf_at("r", "v")
        result = editor.import_json(json.dumps(sample_template))
        assert result.ok
        assert result.issues == []
        assert editor.document.name == "Shelf label"
        assert not editor.can_undo

    @pytest.mark.unit
    def test_rejected_import_keeps_session(self):
        editor = TemplateEditor()
        editor.split_leaf_at("r", "v")
        before = editor.document
        result = editor.import_json('{"schema_version": 1}')
        assert not result.ok
        assert result.issues
        assert editor.document is before
        assert editor.can_undo

        bad_json = editor.import_json("{")
        assert not bad_json.ok
        assert bad_json.issues[0].startswith("$: Invalid JSON")

    @pytest.mark.unit
    def test_export_round_trip(self, complex_template):
        editor = TemplateEditor(TemplateDoc.model_validate(complex_template))
        other = TemplateEditor()
        assert other.import_json(editor.export_json()).ok
        assert other.document == editor.document


class TestDerivedViews:
    """Tests for layout, variables and node listing."""

    @pytest.mark.unit
    def test_layout_from_config(self, editor, monkeypatch):
        monkeypatch.delenv("ZPLGRID_LABEL_WIDTH_MM", raising=False)
        monkeypatch.delenv("ZPLGRID_LABEL_HEIGHT_MM", raising=False)
        monkeypatch.delenv("ZPLGRID_SCALE_PX_PER_MM", raising=False)
        render = editor.compute_layout()
        assert (render.root_rect.w, render.root_rect.h) == (592, 208)
        assert render.rects["r/0"].w == 296

    @pytest.mark.unit
    def test_layout_explicit_size(self, editor):
        render = editor.compute_layout(10, 10, 1)
        assert render.root_rect.w == 10

    @pytest.mark.unit
    def test_variables_and_nodes(self, editor):
        assert editor.variables().variables == ["name", "sku"]
        assert [e.node_id for e in editor.nodes()] == ["r", "r/0", "r/1"]
        assert isinstance(editor.nodes()[1].node, LeafNode)
