"""Output formatting for template visualization."""

from .lib import format_layout_report, format_rect, format_template_tree

__all__ = [
    "format_template_tree",
    "format_rect",
    "format_layout_report",
]
