"""Tree node — one placement of an entity inside one actor tree."""

from typing import Any, List, Optional, Set


class TreeNode:
    """
    Wraps an entity with its position in a single actor tree.

    The same entity placed in both trees gets two TreeNode instances, since
    parent and depth differ per tree. Nodes are never re-parented, so depth
    is fixed at construction.
    """

    def __init__(
        self,
        node_id: str,
        node_type: str,
        data: Any,
        parent: Optional["TreeNode"] = None,
    ):
        self.node_id = node_id
        self.node_type = node_type
        self.data = data
        self.parent = parent
        self.children: Set["TreeNode"] = set()
        self.depth = parent.depth + 1 if parent is not None else 0

        if parent is not None:
            parent.children.add(self)

    def get_path_to_root(self) -> List[str]:
        """Node ids from the tree root down to this node, inclusive."""
        path = []
        current: Optional[TreeNode] = self
        while current is not None:
            path.append(current.node_id)
            current = current.parent
        path.reverse()
        return path

    def get_depth(self) -> int:
        return self.depth

    def is_root(self) -> bool:
        return self.parent is None

    def __repr__(self) -> str:
        return f"TreeNode({self.node_id}, depth={self.depth}, children={len(self.children)})"
