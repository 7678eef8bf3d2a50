"""Pure document-to-document edit operations.

Every operation takes a document and returns a document. Edits are
applied with `update_node_by_id`, so only the nodes on the path to the
target are rebuilt. When the target does not resolve, has the wrong kind
for the edit, or an argument is not a known value, the input document
is returned unchanged.

The setters replace fields as given. Cross-field policies (such as
keeping the gutter at least as wide as a visible divider) belong to the
caller, see `zplgrid.editor`.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from zplgrid.ids import get_node_by_id, list_nodes, update_node_by_id
from zplgrid.schema import (
    DEFAULT_DIVIDER_THICKNESS_MM,
    DataMatrixElement,
    Direction,
    Divider,
    Element,
    ElementType,
    ImageElement,
    ImageSource,
    LeafNode,
    LineElement,
    Node,
    QrElement,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    TextElement,
)

logger = logging.getLogger(__name__)

RATIO_MIN = 0.01
RATIO_MAX = 0.99

_element_adapter: TypeAdapter = TypeAdapter(Element)


def clamp_ratio(value: float) -> float:
    """Clamp a split ratio to the editable range [0.01, 0.99]."""
    return min(RATIO_MAX, max(RATIO_MIN, value))


def _edit_node(doc: TemplateDoc, node_id: str, updater: Callable[[Node], Node]) -> TemplateDoc:
    layout = update_node_by_id(doc.layout, node_id, updater)
    if layout is doc.layout:
        logger.debug(f"No change at node {node_id!r}")
        return doc
    return doc.model_copy(update={"layout": layout})


def _edit_leaf(doc: TemplateDoc, node_id: str, **fields: Any) -> TemplateDoc:
    return _edit_node(
        doc,
        node_id,
        lambda n: n.model_copy(update=fields) if isinstance(n, LeafNode) else n,
    )


def _edit_split(doc: TemplateDoc, node_id: str, **fields: Any) -> TemplateDoc:
    return _edit_node(
        doc,
        node_id,
        lambda n: n.model_copy(update=fields) if isinstance(n, SplitNode) else n,
    )


# === TEMPLATE ===


def set_template_name(doc: TemplateDoc, name: str | None) -> TemplateDoc:
    return doc.model_copy(update={"name": name})


def set_defaults(doc: TemplateDoc, defaults: TemplateDefaults | None) -> TemplateDoc:
    return doc.model_copy(update={"defaults": defaults})


# === NODE FIELDS ===


def set_node_alias(doc: TemplateDoc, node_id: str, alias: str | None) -> TemplateDoc:
    """Set or clear (None) the alias of any node."""
    return _edit_node(doc, node_id, lambda n: n.model_copy(update={"alias": alias}))


def set_leaf_padding(
    doc: TemplateDoc, node_id: str, padding_mm: Sequence[float] | None
) -> TemplateDoc:
    """Set a leaf's [top, right, bottom, left] padding; None inherits the default."""
    padding = tuple(float(v) for v in padding_mm) if padding_mm is not None else None
    return _edit_leaf(doc, node_id, padding_mm=padding)


def toggle_leaf_debug_border(doc: TemplateDoc, node_id: str, value: bool) -> TemplateDoc:
    return _edit_leaf(doc, node_id, debug_border=value)


def set_split_ratio(doc: TemplateDoc, node_id: str, ratio: float) -> TemplateDoc:
    return _edit_split(doc, node_id, ratio=ratio)


def set_split_gutter(doc: TemplateDoc, node_id: str, gutter_mm: float | None) -> TemplateDoc:
    return _edit_split(doc, node_id, gutter_mm=gutter_mm)


def set_split_divider(doc: TemplateDoc, node_id: str, divider: Divider | None) -> TemplateDoc:
    return _edit_split(doc, node_id, divider=divider)


# === STRUCTURE ===


def split_leaf(doc: TemplateDoc, node_id: str, direction: Direction | str) -> TemplateDoc:
    """Replace a leaf with a split holding the leaf and a new blank text leaf.

    The new leaf copies the original's padding and debug border. The split
    starts at ratio 0.5 with no gutter and a hidden divider.

    Args:
        doc: Document to edit.
        node_id: Identifier of the leaf to split.
        direction: "v" for left/right, "h" for top/bottom.

    Returns:
        TemplateDoc: The edited document, or `doc` if the target is not a
        leaf or the direction is unknown.
    """
    try:
        direction = Direction(direction).value
    except ValueError:
        logger.debug(f"Cannot split {node_id!r}: unknown direction {direction!r}")
        return doc

    target = get_node_by_id(doc.layout, node_id)
    if not isinstance(target, LeafNode):
        logger.debug(f"Cannot split {node_id!r}: not a leaf")
        return doc

    blank = LeafNode(
        padding_mm=target.padding_mm,
        debug_border=target.debug_border,
        elements=(TextElement(text=""),),
    )
    split = SplitNode(
        direction=direction,
        ratio=0.5,
        gutter_mm=0.0,
        divider=Divider(visible=False, thickness_mm=DEFAULT_DIVIDER_THICKNESS_MM),
        children=(target, blank),
    )
    return _edit_node(doc, node_id, lambda _: split)


def find_first_leaf(node: Node) -> LeafNode:
    """Leftmost leaf of a subtree (first child searched before second)."""
    while isinstance(node, SplitNode):
        node = node.children[0]
    return node


def unsplit(doc: TemplateDoc, node_id: str) -> TemplateDoc:
    """Collapse a split into the first leaf of its subtree.

    Every other leaf under the split is discarded. The kept leaf is reused
    as is, so `unsplit(split_leaf(doc, id, d), id)` restores the original.

    Returns:
        TemplateDoc: The edited document, or `doc` if the target is not a split.
    """
    target = get_node_by_id(doc.layout, node_id)
    if not isinstance(target, SplitNode):
        logger.debug(f"Cannot unsplit {node_id!r}: not a split")
        return doc

    kept = find_first_leaf(target)
    discarded = sum(1 for entry in list_nodes(target) if entry.kind == "leaf") - 1
    if discarded:
        logger.info(f"Unsplit {node_id!r} keeps its first leaf and discards {discarded} other(s)")
    return _edit_node(doc, node_id, lambda _: kept)


# === ELEMENTS ===


def make_default_element(element_type: ElementType | str) -> Element:
    """Build the conservative starting element for a type.

    The image default carries an empty inline source, which validation
    reports until a real source is set.

    Raises:
        ValueError: If `element_type` is not a known element type.
    """
    element_type = ElementType(element_type)
    if element_type == ElementType.TEXT:
        return TextElement(text="")
    if element_type == ElementType.QR:
        return QrElement(data="")
    if element_type == ElementType.DATAMATRIX:
        return DataMatrixElement(data="", module_size_mm=0.5, quality=200)
    if element_type == ElementType.IMAGE:
        return ImageElement.model_construct(
            type="image", source=ImageSource.model_construct(kind="base64", data="")
        )
    return LineElement(orientation="h", thickness_mm=0.3, align="center")


def set_leaf_element(doc: TemplateDoc, node_id: str, element: Element) -> TemplateDoc:
    """Replace the single element of a leaf."""
    return _edit_leaf(doc, node_id, elements=(element,))


def update_leaf_element(doc: TemplateDoc, node_id: str, patch: dict[str, Any]) -> TemplateDoc:
    """Shallow-merge `patch` into the element of a leaf.

    A patch whose `type` differs from the current element starts from
    `make_default_element` for the new type instead of the old fields.
    A None value clears an optional field.

    A type switch is kept even when the new type's default fields are not
    yet valid (an image has no source until one is set); validation then
    reports them. Invalid values supplied by the patch itself are refused.

    Args:
        doc: Document to edit.
        node_id: Identifier of the leaf.
        patch: Field values to merge.

    Returns:
        TemplateDoc: The edited document, or `doc` if the target is not a
        leaf, the type is unknown, or a patched field is invalid.
    """
    target = get_node_by_id(doc.layout, node_id)
    if not isinstance(target, LeafNode):
        logger.debug(f"Cannot patch element at {node_id!r}: not a leaf")
        return doc

    current = target.element
    try:
        new_type = ElementType(patch.get("type", current.type)).value
    except ValueError:
        logger.debug(f"Rejected element patch at {node_id!r}: unknown type {patch.get('type')!r}")
        return doc
    base = current if new_type == current.type else make_default_element(new_type)

    try:
        element = _element_adapter.validate_python(
            {**base.model_dump(), **patch, "type": new_type}
        )
    except ValidationError as e:
        patched = [err for err in e.errors() if len(err["loc"]) > 1 and err["loc"][1] in patch]
        if base is current or patched:
            logger.debug(f"Rejected element patch at {node_id!r}: {e.error_count()} error(s)")
            return doc
        logger.debug(f"Switched {node_id!r} to {new_type} with {e.error_count()} pending error(s)")
        element = type(base).model_construct(**{**dict(base), **patch, "type": new_type})
    return set_leaf_element(doc, node_id, element)


__all__ = [
    "RATIO_MIN",
    "RATIO_MAX",
    "clamp_ratio",
    # Template
    "set_template_name",
    "set_defaults",
    # Node fields
    "set_node_alias",
    "set_leaf_padding",
    "toggle_leaf_debug_border",
    "set_split_ratio",
    "set_split_gutter",
    "set_split_divider",
    # Structure
    "split_leaf",
    "unsplit",
    "find_first_leaf",
    # Elements
    "make_default_element",
    "set_leaf_element",
    "update_leaf_element",
]
