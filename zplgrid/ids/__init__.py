"""Path identifiers, lookup and copy-on-write update for layout trees.

Example usage:
    >>> from zplgrid.ids import get_node_by_id, list_nodes
    >>> [e.node_id for e in list_nodes(doc.layout)]
    ['r', 'r/0', 'r/1']
"""

from .lib import (
    ROOT_ID,
    NodeEntry,
    child_id,
    find_node_by_alias,
    get_node_by_id,
    is_leaf,
    is_node_id,
    is_split,
    list_nodes,
    resolve_node_ref,
    update_node_by_id,
)

__all__ = [
    "ROOT_ID",
    "NodeEntry",
    "is_leaf",
    "is_split",
    "is_node_id",
    "child_id",
    "list_nodes",
    "get_node_by_id",
    "update_node_by_id",
    "find_node_by_alias",
    "resolve_node_ref",
]
