"""Geometry resolver: layout trees to pixel rectangles."""

from .lib import (
    MM_PER_INCH,
    LayoutRender,
    LeafRender,
    RectPx,
    SplitRender,
    compute_layout,
    compute_template_layout,
    scale_for_dpi,
)

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
