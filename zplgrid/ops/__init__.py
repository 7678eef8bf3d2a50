"""Pure edit operations over template documents.

Example usage:
    >>> from zplgrid.ops import split_leaf, unsplit
    >>> doc = split_leaf(doc, "r", "v")
    >>> doc = unsplit(doc, "r")
"""

from .lib import (
    RATIO_MAX,
    RATIO_MIN,
    clamp_ratio,
    find_first_leaf,
    make_default_element,
    set_defaults,
    set_leaf_element,
    set_leaf_padding,
    set_node_alias,
    set_split_divider,
    set_split_gutter,
    set_split_ratio,
    set_template_name,
    split_leaf,
    toggle_leaf_debug_border,
    unsplit,
    update_leaf_element,
)

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
