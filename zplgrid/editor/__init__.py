"""Editor session: one current document with history and clamping policy."""

from .lib import DIVIDER_THICKNESS_MIN_MM, ImportResult, TemplateEditor, snap_ratio

__all__ = [
    "DIVIDER_THICKNESS_MIN_MM",
    "ImportResult",
    "TemplateEditor",
    "snap_ratio",
]
