"""Path addressing for layout trees.

Every node is addressed by a string identifier: `r` is the root and each
further `/0` or `/1` segment descends into the first or second child of a
split. Identifiers are opaque addresses with no depth bound.

Lookups and updates never raise on a bad address. A malformed identifier,
one that descends into a leaf, or one that names a missing child resolves
to nothing: `get_node_by_id` returns None and `update_node_by_id` returns
the root unchanged.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from zplgrid.schema import LeafNode, Node, SplitNode

ROOT_ID = "r"

_NODE_ID_RE = re.compile(r"r(/[01])*")


@dataclass(frozen=True)
class NodeEntry:
    """One row of the pre-order structure listing.

    Attributes:
        node_id: Path identifier of the node.
        kind: "split" or "leaf".
        alias: Node alias, if any.
        depth: Distance from the root (root is 0).
        node: The live node value.
    """

    node_id: str
    kind: str
    alias: str | None
    depth: int
    node: Node


def is_leaf(node: Node | None) -> bool:
    return isinstance(node, LeafNode)


def is_split(node: Node | None) -> bool:
    return isinstance(node, SplitNode)


def is_node_id(value: str) -> bool:
    """Check that a string follows the `r(/[01])*` identifier grammar."""
    return bool(_NODE_ID_RE.fullmatch(value))


def child_id(node_id: str, index: int) -> str:
    """Identifier of the first (0) or second (1) child of `node_id`."""
    return f"{node_id}/{index}"


def list_nodes(root: Node) -> list[NodeEntry]:
    """List every node of the tree in pre-order.

    Args:
        root: Root node of the layout tree.

    Returns:
        Entries in document order, the root first.
    """
    entries: list[NodeEntry] = []

    def walk(node: Node, node_id: str, depth: int) -> None:
        entries.append(
            NodeEntry(
                node_id=node_id,
                kind=node.kind,
                alias=node.alias,
                depth=depth,
                node=node,
            )
        )
        if isinstance(node, SplitNode):
            walk(node.children[0], child_id(node_id, 0), depth + 1)
            walk(node.children[1], child_id(node_id, 1), depth + 1)

    walk(root, ROOT_ID, 0)
    return entries


def _segments(node_id: str) -> list[int] | None:
    if not is_node_id(node_id):
        return None
    return [int(part) for part in node_id.split("/")[1:]]


def get_node_by_id(root: Node, node_id: str) -> Node | None:
    """Look up the node at `node_id`.

    Returns:
        The node, or None when the identifier does not resolve.
    """
    segments = _segments(node_id)
    if segments is None:
        return None

    current = root
    for index in segments:
        if not isinstance(current, SplitNode):
            return None
        current = current.children[index]
    return current


def update_node_by_id(
    root: Node, node_id: str, updater: Callable[[Node], Node]
) -> Node:
    """Return a new root with `updater` applied to the node at `node_id`.

    Only the nodes on the path from the root to the target are rebuilt.
    Whenever a child comes back reference-identical, its parent is returned
    as is, so an identity updater yields `root` itself.

    Args:
        root: Root node of the layout tree.
        node_id: Path identifier of the target.
        updater: Function from the current node to its replacement.

    Returns:
        The new root, or `root` unchanged if `node_id` does not resolve.
    """
    segments = _segments(node_id)
    if segments is None:
        return root

    def walk(node: Node, depth: int) -> Node:
        if depth == len(segments):
            return updater(node)
        if not isinstance(node, SplitNode):
            return node

        index = segments[depth]
        child = node.children[index]
        new_child = walk(child, depth + 1)
        if new_child is child:
            return node

        children = list(node.children)
        children[index] = new_child
        return node.model_copy(update={"children": tuple(children)})

    return walk(root, 0)


def find_node_by_alias(root: Node, alias: str) -> str | None:
    """Identifier of the first node (pre-order) carrying `alias`."""
    for entry in list_nodes(root):
        if entry.alias == alias:
            return entry.node_id
    return None


def resolve_node_ref(root: Node, ref: str) -> str | None:
    """Resolve a path identifier or an alias to a live node identifier.

    Path identifiers take precedence, so an alias spelled like a path
    (e.g. "r/0") is only reachable through its path.
    """
    if is_node_id(ref):
        return ref if get_node_by_id(root, ref) is not None else None
    return find_node_by_alias(root, ref)


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
