"""Geometry resolver for layout trees.

Turns a layout tree plus a physical label size into pixel rectangles for
every node. The whole tree is recomputed on every call; the pass is
linear in node count and has no cached state, so identical inputs always
produce identical rectangles.

Rounding rule: along a split axis the first child gets
`floor(available * ratio)` pixels and the second child gets the rest, so
`child0 + gutter + child1` always equals the parent extent.
"""

import math
from dataclasses import dataclass, field

from zplgrid.ids import ROOT_ID, child_id
from zplgrid.schema import (
    DEFAULT_DIVIDER_THICKNESS_MM,
    ZERO_PADDING,
    Direction,
    LeafNode,
    Node,
    PaddingMm,
    SplitNode,
    TemplateDefaults,
    TemplateDoc,
    effective_leaf_padding,
)

MM_PER_INCH = 25.4


@dataclass(frozen=True)
class RectPx:
    """Axis-aligned rectangle in pixels, origin at the top-left corner."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.right and self.y <= py < self.bottom

    def inset(self, padding_px: tuple[float, float, float, float]) -> "RectPx":
        """Shrink by [top, right, bottom, left]; width and height stop at 0."""
        top, right, bottom, left = padding_px
        return RectPx(
            x=self.x + left,
            y=self.y + top,
            w=max(0.0, self.w - left - right),
            h=max(0.0, self.h - top - bottom),
        )


@dataclass(frozen=True)
class LeafRender:
    """Geometry of one leaf.

    Attributes:
        node_id: Path identifier of the leaf.
        alias: Leaf alias, if any.
        node: The leaf itself.
        rect: Full leaf rectangle.
        content_rect: Drawable area of the element, after leaf padding and
            element padding.
    """

    node_id: str
    alias: str | None
    node: LeafNode
    rect: RectPx
    content_rect: RectPx

    @property
    def element(self):
        return self.node.element


@dataclass(frozen=True)
class SplitRender:
    """Geometry of one split.

    Attributes:
        node_id: Path identifier of the split.
        alias: Split alias, if any.
        node: The split itself.
        rect: Full split rectangle.
        gutter_rect: Space between the two children.
        divider_rect: Visible divider inside the gutter, or None.
    """

    node_id: str
    alias: str | None
    node: SplitNode
    rect: RectPx
    gutter_rect: RectPx
    divider_rect: RectPx | None = None


@dataclass
class LayoutRender:
    """Result of a layout pass."""

    root_rect: RectPx
    leaves: list[LeafRender] = field(default_factory=list)
    splits: list[SplitRender] = field(default_factory=list)
    alias_to_id: dict[str, str] = field(default_factory=dict)
    rects: dict[str, RectPx] = field(default_factory=dict)

    def leaf_by_id(self, node_id: str) -> LeafRender | None:
        for leaf in self.leaves:
            if leaf.node_id == node_id:
                return leaf
        return None

    def leaf_at(self, px: float, py: float) -> LeafRender | None:
        """Hit test: the leaf whose rectangle contains the point, if any.

        Leaf rectangles never overlap, so at most one leaf matches. Points
        inside a gutter hit nothing.
        """
        for leaf in self.leaves:
            if leaf.rect.contains(px, py):
                return leaf
        return None


def scale_for_dpi(dpi: float) -> float:
    """Pixels per millimetre at a printer resolution."""
    return dpi / MM_PER_INCH


def _padding_px(padding: PaddingMm, scale: float) -> tuple[float, float, float, float]:
    top, right, bottom, left = padding
    return (top * scale, right * scale, bottom * scale, left * scale)


def _split_rects(
    split: SplitNode, rect: RectPx, scale: float
) -> tuple[RectPx, RectPx, RectPx, RectPx | None]:
    """Child, gutter and divider rectangles of one split."""
    gutter = (split.gutter_mm or 0.0) * scale
    divider = split.divider
    thickness = None
    if divider is not None and divider.visible:
        thickness_mm = divider.thickness_mm
        if thickness_mm is None:
            thickness_mm = DEFAULT_DIVIDER_THICKNESS_MM
        thickness = max(1.0, thickness_mm * scale)

    if split.direction == Direction.V.value:
        available = max(0.0, rect.w - gutter)
        first = math.floor(available * split.ratio)
        second = available - first
        child0 = RectPx(rect.x, rect.y, first, rect.h)
        gutter_rect = RectPx(rect.x + first, rect.y, gutter, rect.h)
        child1 = RectPx(rect.x + first + gutter, rect.y, second, rect.h)
        divider_rect = None
        if thickness is not None:
            divider_rect = RectPx(
                gutter_rect.x + (gutter_rect.w - thickness) / 2, rect.y, thickness, rect.h
            )
    else:
        available = max(0.0, rect.h - gutter)
        first = math.floor(available * split.ratio)
        second = available - first
        child0 = RectPx(rect.x, rect.y, rect.w, first)
        gutter_rect = RectPx(rect.x, rect.y + first, rect.w, gutter)
        child1 = RectPx(rect.x, rect.y + first + gutter, rect.w, second)
        divider_rect = None
        if thickness is not None:
            divider_rect = RectPx(
                rect.x, gutter_rect.y + (gutter_rect.h - thickness) / 2, rect.w, thickness
            )

    return child0, child1, gutter_rect, divider_rect


def compute_layout(
    root: Node,
    width_mm: float,
    height_mm: float,
    scale_px_per_mm: float,
    defaults: TemplateDefaults | None = None,
) -> LayoutRender:
    """Compute pixel rectangles for every node of a layout tree.

    Args:
        root: Root node of the layout tree.
        width_mm: Label width in millimetres.
        height_mm: Label height in millimetres.
        scale_px_per_mm: Pixels per millimetre.
        defaults: Template defaults; supplies padding for leaves without
            their own.

    Returns:
        LayoutRender: Root rectangle, per-leaf and per-split geometry, the
        alias map and a rectangle for every node identifier.

    Example:
        >>> render = compute_layout(doc.layout, 74, 26, 8)
        >>> render.root_rect
        RectPx(x=0, y=0, w=592, h=208)
    """
    scale = scale_px_per_mm
    render = LayoutRender(root_rect=RectPx(0, 0, width_mm * scale, height_mm * scale))

    def walk(node: Node, node_id: str, rect: RectPx) -> None:
        render.rects[node_id] = rect
        if node.alias:
            render.alias_to_id.setdefault(node.alias, node_id)

        if isinstance(node, LeafNode):
            padding = effective_leaf_padding(node, defaults)
            element_padding = node.element.padding_mm or ZERO_PADDING
            content = rect.inset(_padding_px(padding, scale)).inset(
                _padding_px(element_padding, scale)
            )
            render.leaves.append(
                LeafRender(
                    node_id=node_id,
                    alias=node.alias,
                    node=node,
                    rect=rect,
                    content_rect=content,
                )
            )
            return

        child0, child1, gutter_rect, divider_rect = _split_rects(node, rect, scale)
        render.splits.append(
            SplitRender(
                node_id=node_id,
                alias=node.alias,
                node=node,
                rect=rect,
                gutter_rect=gutter_rect,
                divider_rect=divider_rect,
            )
        )
        walk(node.children[0], child_id(node_id, 0), child0)
        walk(node.children[1], child_id(node_id, 1), child1)

    walk(root, ROOT_ID, render.root_rect)
    return render


def compute_template_layout(
    doc: TemplateDoc,
    width_mm: float,
    height_mm: float,
    scale_px_per_mm: float,
) -> LayoutRender:
    """Compute the layout of a document, using its own defaults."""
    return compute_layout(doc.layout, width_mm, height_mm, scale_px_per_mm, doc.defaults)


__all__ = [
    "MM_PER_INCH",
    "RectPx",
    "LeafRender",
    "SplitRender",
    "LayoutRender",
    "scale_for_dpi",
    "compute_layout",
    "compute_template_layout",
]
