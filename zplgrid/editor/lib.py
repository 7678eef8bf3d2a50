"""Editor session over a single template document.

`TemplateEditor` owns the current document and its undo/redo history.
Each action applies exactly one edit operation, pushes the result onto
the history and re-validates it. Validation issues are kept for display
and never block an edit.

Node references accept either a path identifier (`r/0/1`) or an alias.
A reference that does not resolve makes the action a no-op.

The session also layers the interactive clamping policy over the raw
setters of `zplgrid.ops`:
    - Split ratios stay within [0.01, 0.99]
    - Divider thickness stays at or above 0.1 mm
    - A visible divider never becomes wider than its gutter
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from zplgrid import ops
from zplgrid.config import EnvVar, get_environment, get_preview_target, get_scale_px_per_mm
from zplgrid.history import HistoryState, make_history, push, redo, reset, undo
from zplgrid.ids import NodeEntry, get_node_by_id, list_nodes, resolve_node_ref
from zplgrid.layout import LayoutRender, compute_template_layout
from zplgrid.schema import (
    DEFAULT_DIVIDER_THICKNESS_MM,
    Direction,
    Divider,
    ElementType,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    default_template,
    dump_template,
    template_to_json,
)
from zplgrid.validation import ValidationIssue, parse_template_json, validate_template
from zplgrid.variables import TemplateVariables, extract_template_variables

logger = logging.getLogger(__name__)

DIVIDER_THICKNESS_MIN_MM = 0.1


def _divider_thickness(divider: Divider) -> float:
    if divider.thickness_mm is None:
        return DEFAULT_DIVIDER_THICKNESS_MM
    return divider.thickness_mm


@dataclass
class ImportResult:
    """Outcome of an import. A rejected import leaves the session untouched."""

    ok: bool
    issues: list[str] = field(default_factory=list)


def snap_ratio(ratio: float, step_percent: int) -> float:
    """Round a ratio to the nearest `step_percent` and clamp it."""
    if step_percent <= 0:
        return ops.clamp_ratio(ratio)
    step = step_percent / 100
    return ops.clamp_ratio(round(round(ratio / step) * step, 4))


class TemplateEditor:
    """Single-document editing session with undo/redo.

    Example:
        >>> editor = TemplateEditor()
        >>> editor.split_leaf_at("r", "v")
        >>> editor.set_split_ratio("r", 0.3)
        >>> editor.undo()
        >>> editor.document.layout.ratio
        0.5

    Args:
        doc: Starting document. If None, starts from `default_template()`.
    """

    def __init__(self, doc: TemplateDoc | None = None):
        initial = doc if doc is not None else default_template()
        self._history: HistoryState[TemplateDoc] = make_history(initial)
        self._issues: list[ValidationIssue] = self._validate(initial)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def history(self) -> HistoryState[TemplateDoc]:
        return self._history

    @property
    def document(self) -> TemplateDoc:
        """The current document."""
        return self._history.present

    @property
    def validation_issues(self) -> list[ValidationIssue]:
        """Issues of the current document (empty when renderable)."""
        return list(self._issues)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @staticmethod
    def _validate(doc: TemplateDoc) -> list[ValidationIssue]:
        # Raw setters skip model validation, so re-parse from the dump.
        return validate_template(dump_template(doc)).issues

    def _commit(self, next_doc: TemplateDoc) -> None:
        self._history = push(self._history, next_doc)
        self._issues = self._validate(self._history.present)

    def _resolve(self, ref: str) -> str | None:
        node_id = resolve_node_ref(self.document.layout, ref)
        if node_id is None:
            logger.debug(f"Node reference {ref!r} does not resolve")
        return node_id

    def _split(self, ref: str) -> tuple[str, SplitNode] | None:
        node_id = self._resolve(ref)
        if node_id is None:
            return None
        node = get_node_by_id(self.document.layout, node_id)
        if not isinstance(node, SplitNode):
            logger.debug(f"Node {node_id!r} is not a split")
            return None
        return node_id, node

    # =========================================================================
    # Template
    # =========================================================================

    def new_template(self) -> None:
        """Replace the session with a fresh default document."""
        doc = default_template()
        self._history = reset(self._history, doc)
        self._issues = self._validate(doc)

    def set_template_name(self, name: str) -> None:
        self._commit(ops.set_template_name(self.document, name))

    def set_defaults(self, defaults: TemplateDefaults | None) -> None:
        self._commit(ops.set_defaults(self.document, defaults))

    # =========================================================================
    # Structure
    # =========================================================================

    def split_leaf_at(self, ref: str, direction: Direction | str) -> None:
        node_id = self._resolve(ref)
        if node_id is not None:
            self._commit(ops.split_leaf(self.document, node_id, direction))

    def unsplit_at(self, ref: str) -> None:
        node_id = self._resolve(ref)
        if node_id is not None:
            self._commit(ops.unsplit(self.document, node_id))

    # =========================================================================
    # Split parameters
    # =========================================================================

    def set_split_ratio(self, ref: str, ratio: float, snap: bool = False) -> None:
        """Set a split ratio, clamped to [0.01, 0.99].

        Args:
            ref: Split identifier or alias.
            ratio: Requested ratio.
            snap: Round to `ZPLGRID_SNAP_PERCENT_STEP` percent first.
        """
        node_id = self._resolve(ref)
        if node_id is None:
            return
        if snap:
            ratio = snap_ratio(ratio, get_environment(EnvVar.SNAP_PERCENT_STEP))
        self._commit(ops.set_split_ratio(self.document, node_id, ops.clamp_ratio(ratio)))

    def set_split_gutter(self, ref: str, gutter_mm: float) -> None:
        """Set a split gutter, never below 0 or below a visible divider."""
        target = self._split(ref)
        if target is None:
            return
        node_id, node = target

        gutter = max(0.0, gutter_mm)
        if node.divider is not None and node.divider.visible:
            gutter = max(gutter, _divider_thickness(node.divider))
        self._commit(ops.set_split_gutter(self.document, node_id, gutter))

    def _set_divider(self, node_id: str, node: SplitNode, divider: Divider) -> None:
        doc = ops.set_split_divider(self.document, node_id, divider)
        if divider.visible:
            thickness = _divider_thickness(divider)
            if (node.gutter_mm or 0.0) < thickness:
                doc = ops.set_split_gutter(doc, node_id, thickness)
        self._commit(doc)

    def set_split_divider_visible(self, ref: str, visible: bool) -> None:
        """Show or hide a divider; showing it widens the gutter if needed."""
        target = self._split(ref)
        if target is None:
            return
        node_id, node = target
        current = node.divider or Divider(visible=False, thickness_mm=DEFAULT_DIVIDER_THICKNESS_MM)
        self._set_divider(node_id, node, current.model_copy(update={"visible": visible}))

    def set_split_divider_thickness(self, ref: str, thickness_mm: float) -> None:
        """Change divider thickness, floored at `DIVIDER_THICKNESS_MIN_MM`.

        A visible divider widens the gutter if needed.
        """
        target = self._split(ref)
        if target is None:
            return
        node_id, node = target
        current = node.divider or Divider(visible=False, thickness_mm=DEFAULT_DIVIDER_THICKNESS_MM)
        thickness = max(DIVIDER_THICKNESS_MIN_MM, thickness_mm)
        self._set_divider(node_id, node, current.model_copy(update={"thickness_mm": thickness}))

    # =========================================================================
    # Node and leaf fields
    # =========================================================================

    def set_alias(self, ref: str, alias: str | None) -> None:
        """Set a node alias; an empty string clears it."""
        node_id = self._resolve(ref)
        if node_id is not None:
            self._commit(ops.set_node_alias(self.document, node_id, alias or None))

    def clear_alias(self, ref: str) -> None:
        self.set_alias(ref, None)

    def set_leaf_padding(self, ref: str, padding_mm: Sequence[float] | None) -> None:
        node_id = self._resolve(ref)
        if node_id is not None:
            self._commit(ops.set_leaf_padding(self.document, node_id, padding_mm))

    def set_leaf_debug_border(self, ref: str, value: bool) -> None:
        node_id = self._resolve(ref)
        if node_id is not None:
            self._commit(ops.toggle_leaf_debug_border(self.document, node_id, value))

    def place_element_on_leaf(self, ref: str, element_type: ElementType | str) -> None:
        """Replace a leaf's element with the default element of a type."""
        node_id = self._resolve(ref)
        if node_id is None:
            return
        try:
            element = ops.make_default_element(element_type)
        except ValueError:
            logger.debug(f"Cannot place element on {ref!r}: unknown type {element_type!r}")
            return
        self._commit(ops.set_leaf_element(self.document, node_id, element))

    def patch_element(self, ref: str, patch: dict[str, Any]) -> None:
        node_id = self._resolve(ref)
        if node_id is not None:
            self._commit(ops.update_leaf_element(self.document, node_id, patch))

    # =========================================================================
    # History
    # =========================================================================

    def undo(self) -> None:
        if not self.can_undo:
            return
        self._history = undo(self._history)
        self._issues = self._validate(self.document)
        logger.debug(f"Undo: {len(self._history.past)} step(s) left")

    def redo(self) -> None:
        if not self.can_redo:
            return
        self._history = redo(self._history)
        self._issues = self._validate(self.document)
        logger.debug(f"Redo: {len(self._history.future)} step(s) left")

    # =========================================================================
    # Import / export and derived views
    # =========================================================================

    def import_json(self, text: str) -> ImportResult:
        """Replace the session with a document parsed from JSON text.

        Returns:
            ImportResult: ok, or the issue messages of a rejected import.
        """
        result = parse_template_json(text)
        if not result.ok:
            logger.warning(f"Import rejected with {len(result.issues)} issue(s)")
            return ImportResult(ok=False, issues=result.messages)

        self._history = reset(self._history, result.doc)
        self._issues = result.issues
        logger.info(f"Imported template {result.doc.name or '(unnamed)'}")
        return ImportResult(ok=True)

    def export_json(self, indent: int | None = 2) -> str:
        return template_to_json(self.document, indent=indent)

    def compute_layout(
        self,
        width_mm: float | None = None,
        height_mm: float | None = None,
        scale_px_per_mm: float | None = None,
    ) -> LayoutRender:
        """Layout of the current document; missing sizes come from config."""
        target = get_preview_target()
        return compute_template_layout(
            self.document,
            width_mm if width_mm is not None else target["width_mm"],
            height_mm if height_mm is not None else target["height_mm"],
            get_scale_px_per_mm(scale_px_per_mm),
        )

    def variables(self) -> TemplateVariables:
        return extract_template_variables(self.document)

    def nodes(self) -> list[NodeEntry]:
        return list_nodes(self.document.layout)


__all__ = [
    "DIVIDER_THICKNESS_MIN_MM",
    "ImportResult",
    "TemplateEditor",
    "snap_ratio",
]
