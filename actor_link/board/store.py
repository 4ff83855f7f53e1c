"""
Board Store — the entities the player has placed and the links between them.

Written by: GameSession when an entity is accepted
Read by: credit matching (new entity vs. placed ones) + the API
"""

from datetime import datetime
from typing import Dict, List, Optional

from actor_link.models.entity import Connection, Entity, EntityType
from actor_link.models.game import BoardNode


class BoardStore:
    """In-memory board for one game session. Lost on reset."""

    def __init__(self):
        self._nodes: Dict[str, BoardNode] = {}
        self._connections: List[Connection] = []

    def place(self, entity: Entity) -> BoardNode:
        """Put an entity on the board. Placing a known id returns the existing node."""
        existing = self._nodes.get(entity.node_key)
        if existing is not None:
            return existing
        node = BoardNode(
            node_id=entity.node_key,
            entity=entity,
            added_at=datetime.utcnow(),
        )
        self._nodes[node.node_id] = node
        return node

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[BoardNode]:
        return self._nodes.get(node_id)

    def get_nodes(self) -> List[BoardNode]:
        return list(self._nodes.values())

    def get_nodes_by_type(self, entity_type: EntityType) -> List[BoardNode]:
        return [n for n in self._nodes.values() if n.entity.type == entity_type]

    def add_connections(self, connections: List[Connection]) -> None:
        self._connections.extend(connections)

    def get_connections(self, node_id: Optional[str] = None) -> List[Connection]:
        """All links, or only those touching ``node_id``."""
        if node_id is None:
            return list(self._connections)
        return [c for c in self._connections if node_id in (c.source, c.target)]

    def get_snapshot(self) -> dict:
        """Serializable view of the board."""
        return {
            "nodes": [n.model_dump(mode="json") for n in self._nodes.values()],
            "connections": [c.model_dump(mode="json") for c in self._connections],
        }

    def clear(self) -> None:
        self._nodes.clear()
        self._connections.clear()

    def __len__(self) -> int:
        return len(self._nodes)
