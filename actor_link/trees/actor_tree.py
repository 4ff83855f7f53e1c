"""
Actor Tree — the growing connection network of one starting actor.

Behavioral Contract:
- The root is the starting actor at depth 0.
- Grows only; nodes are never removed or re-parented.
- Re-inserting a known id is a no-op returning the existing node.
- Inserting under an unknown parent returns None (the entity does not
  reach this actor yet). It never raises.
"""

import logging
from typing import Any, Dict, List, Optional

from actor_link.models.entity import EntityType
from actor_link.models.trees import TreeStats
from actor_link.trees.node import TreeNode

logger = logging.getLogger(__name__)


class ActorTree:
    """One rooted tree per starting actor."""

    def __init__(self, root_actor_id: str, root_actor_data: Any = None):
        self.root_actor_id = root_actor_id
        self.root = TreeNode(root_actor_id, EntityType.PERSON.value, root_actor_data)
        self.node_map: Dict[str, TreeNode] = {root_actor_id: self.root}

        logger.info("Created actor tree for %s", root_actor_id)

    def add_node(
        self,
        node_id: str,
        node_type: str,
        node_data: Any,
        parent_node_id: str,
    ) -> Optional[TreeNode]:
        """Graft an entity under an existing node of this tree."""
        existing = self.node_map.get(node_id)
        if existing is not None:
            logger.debug("Node %s already in tree %s", node_id, self.root_actor_id)
            return existing

        parent = self.node_map.get(parent_node_id)
        if parent is None:
            logger.warning(
                "Parent node %s not found in tree %s", parent_node_id, self.root_actor_id
            )
            return None

        node = TreeNode(node_id, node_type, node_data, parent)
        self.node_map[node_id] = node
        logger.debug(
            "Added %s %s to tree %s (depth %d)",
            node_type, node_id, self.root_actor_id, node.depth,
        )
        return node

    def has_node(self, node_id: str) -> bool:
        return node_id in self.node_map

    def get_node(self, node_id: str) -> Optional[TreeNode]:
        return self.node_map.get(node_id)

    def get_path_to_node(self, node_id: str) -> Optional[List[str]]:
        """Path from this tree's root actor to the node, or None if absent."""
        node = self.node_map.get(node_id)
        return node.get_path_to_root() if node is not None else None

    def get_nodes_at_depth(self, depth: int) -> List[TreeNode]:
        return [n for n in self.node_map.values() if n.depth == depth]

    def get_stats(self) -> TreeStats:
        nodes_by_type = {t.value: 0 for t in EntityType}
        max_depth = 0
        for node in self.node_map.values():
            nodes_by_type[node.node_type] = nodes_by_type.get(node.node_type, 0) + 1
            max_depth = max(max_depth, node.depth)

        return TreeStats(
            total_nodes=len(self.node_map),
            nodes_by_type=nodes_by_type,
            max_depth=max_depth,
            root_actor=self.root_actor_id,
        )

    def __len__(self) -> int:
        return len(self.node_map)
