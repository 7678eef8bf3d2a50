"""Output formatting for template visualization.

Generates human-readable text representations of template documents and
their computed geometry for the CLI and for review.
"""

from zplgrid.layout import LayoutRender, RectPx
from zplgrid.schema import (
    DataMatrixElement,
    ImageElement,
    LeafNode,
    LineElement,
    Node,
    QrElement,
    SplitNode,
    TemplateDoc,
    TextElement,
)

PREVIEW_CHARS = 24


def _preview(value: str) -> str:
    if len(value) > PREVIEW_CHARS:
        value = value[: PREVIEW_CHARS - 3] + "..."
    return f'"{value}"'


def _split_attrs(node: SplitNode) -> list[str]:
    attrs = ["split", "vertical" if node.direction == "v" else "horizontal"]
    attrs.append(f"{round(node.ratio * 100, 1):g}%")
    if node.gutter_mm:
        attrs.append(f"gutter {node.gutter_mm:g}mm")
    if node.divider is not None and node.divider.visible:
        attrs.append("divider")
    return attrs


def _leaf_attrs(node: LeafNode) -> list[str]:
    element = node.element
    attrs = [element.type]
    if isinstance(element, TextElement):
        attrs.append(_preview(element.text))
    elif isinstance(element, (QrElement, DataMatrixElement)):
        attrs.append(_preview(element.data))
    elif isinstance(element, ImageElement):
        attrs.append(element.source.kind)
    elif isinstance(element, LineElement):
        attrs.append(f"{element.orientation} {element.thickness_mm:g}mm")
    if node.debug_border:
        attrs.append("debug")
    return attrs


def format_template_tree(doc: TemplateDoc) -> str:
    """Format a template's layout as a human-readable tree.

    Example output:
        Shelf label
        r [split, vertical, 50%]
        ├── r/0 (title) [text, "Hi {name}"]
        └── r/1 (code) [qr, "{sku}"]

    Args:
        doc: Template to format.

    Returns:
        Formatted tree string, headed by the template name when set.
    """
    lines: list[str] = []
    if doc.name:
        lines.append(doc.name)
    _format_node(doc.layout, "r", lines, "", is_last=True, is_root=True)
    return "\n".join(lines)


def _format_node(
    node: Node,
    node_id: str,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool = False,
) -> None:
    """Recursively format a node and its children."""
    if is_root:
        connector = ""
        child_prefix = ""
    else:
        connector = "└── " if is_last else "├── "
        child_prefix = prefix + ("    " if is_last else "│   ")

    label = f"{node_id} ({node.alias})" if node.alias else node_id
    attrs = _split_attrs(node) if isinstance(node, SplitNode) else _leaf_attrs(node)
    lines.append(f"{prefix}{connector}{label} [{', '.join(attrs)}]")

    if isinstance(node, SplitNode):
        _format_node(node.children[0], f"{node_id}/0", lines, child_prefix, is_last=False)
        _format_node(node.children[1], f"{node_id}/1", lines, child_prefix, is_last=True)


def format_rect(rect: RectPx) -> str:
    """Format a rectangle as `x,y wxh`."""
    return f"{rect.x:g},{rect.y:g} {rect.w:g}x{rect.h:g}"


def format_layout_report(render: LayoutRender) -> str:
    """List every node's rectangle in tree order.

    Example output:
        r        0,0 592x208
        r/0      0,0 296x208  content 3,3 290x202
        r/1      296,0 296x208  content 299,3 290x202

    Args:
        render: Result of a layout pass.

    Returns:
        One line per node; leaves add their content rectangle, splits
        their gutter and divider rectangles.
    """
    leaves = {leaf.node_id: leaf for leaf in render.leaves}
    splits = {split.node_id: split for split in render.splits}
    width = max(len(node_id) for node_id in render.rects) + 2

    lines: list[str] = []
    for node_id, rect in render.rects.items():
        line = f"{node_id:<{width}}{format_rect(rect)}"
        if node_id in leaves:
            line += f"  content {format_rect(leaves[node_id].content_rect)}"
        elif node_id in splits:
            split = splits[node_id]
            if split.gutter_rect.w and split.gutter_rect.h:
                line += f"  gutter {format_rect(split.gutter_rect)}"
            if split.divider_rect is not None:
                line += f"  divider {format_rect(split.divider_rect)}"
        lines.append(line.rstrip())
    return "\n".join(lines)


__all__ = [
    "format_template_tree",
    "format_rect",
    "format_layout_report",
]
