"""
Tree Manager — tracks both starting actors' trees and detects when they meet.

Every entity the player places is grafted into each actor tree that already
holds one of its shared-credit neighbours. Once an entity sits in two trees
it is a bridge: the two starting actors are connected through it, and the
shortest chain is the root-to-bridge path of one tree joined with the
reversed root-to-bridge path of the other.

Behavioral Contract:
- Trees only grow during a session; reset() discards everything.
- The global index and the trees' node maps always agree: an id lists a
  tree key if and only if that tree holds the id.
- Steady-state insertions and queries never raise. Unknown neighbours and
  malformed connections are skipped; "not found" is None or empty.
- Misuse is rejected at the boundary: bad starting actors, inserting before
  initialize_trees(), or any use after dispose().
- Single writer. Callers running concurrently must serialize insertions
  for one manager (see SessionManager).
"""

import logging
from itertools import combinations
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from pydantic import ValidationError

from actor_link.models.entity import Connection, Edge, Entity, EntityType
from actor_link.models.trees import (
    BridgeResult,
    ConnectionResult,
    InsertionResult,
    TreeStats,
)
from actor_link.trees.actor_tree import ActorTree

logger = logging.getLogger(__name__)


class TreeManagerError(Exception):
    """Base class for tree manager misuse."""
    pass


class StartingActorsError(TreeManagerError):
    """Raised when the starting actors cannot root a game."""
    pass


class TreeManagerStateError(TreeManagerError):
    """Raised when the manager is used outside its lifecycle."""
    pass


class TreeManager:
    """
    Owns the actor trees of one game session plus the global index
    mapping every entity id to the tree keys that contain it.

    The bridge search is written for any number of trees, but the game only
    ever roots two.
    """

    def __init__(self, exhaustive_bridge_search: bool = True):
        self.exhaustive_bridge_search = exhaustive_bridge_search
        self.trees: Dict[str, ActorTree] = {}
        self.global_index: Dict[str, Set[str]] = {}
        self._initialized = False
        self._disposed = False

    # --- Lifecycle ---

    def initialize_trees(self, starting_actors: Sequence[Union[Entity, dict]]) -> None:
        """Root one fresh tree per starting actor, discarding any prior state."""
        self._ensure_not_disposed()
        actors = [self._coerce_actor(a) for a in starting_actors]

        if len(actors) < 2:
            raise StartingActorsError(
                f"Need at least two starting actors, got {len(actors)}"
            )
        keys = [a.node_key for a in actors]
        if len(set(keys)) != len(keys):
            raise StartingActorsError(f"Duplicate starting actors: {keys}")

        self.trees.clear()
        self.global_index.clear()

        for actor, key in zip(actors, keys):
            self.trees[key] = ActorTree(key, actor.payload)
            self.global_index.setdefault(key, set()).add(key)

        self._initialized = True
        logger.info("Initialized trees for %d starting actors: %s", len(keys), keys)

    def reset(self) -> None:
        """Discard all trees. initialize_trees() must be called again."""
        self.trees.clear()
        self.global_index.clear()
        self._initialized = False
        logger.info("Reset all actor trees")

    def dispose(self) -> None:
        """Release state for good; the manager cannot be reused afterwards."""
        self.reset()
        self._disposed = True

    @property
    def initialized(self) -> bool:
        return self._initialized

    # --- Insertion ---

    def add_entity_to_trees(
        self,
        node_id: str,
        node_type: Union[EntityType, str],
        node_data: object,
        connections: Iterable[Union[Connection, dict]],
    ) -> InsertionResult:
        """
        Graft a newly placed entity into every tree holding one of its
        neighbours, and report the shortest connection if it bridges trees.
        """
        self._ensure_ready()
        type_value = EntityType(node_type).value
        edges = self._normalize_connections(node_id, connections)

        connection_results: List[ConnectionResult] = []
        for edge in edges:
            neighbor_trees = self.global_index.get(edge.from_node)
            if not neighbor_trees:
                logger.debug(
                    "Neighbour %s of %s is not in any tree yet", edge.from_node, node_id
                )
                continue

            for tree_key in self._in_tree_order(neighbor_trees):
                tree = self.trees[tree_key]
                if tree.has_node(node_id):
                    continue
                added = tree.add_node(node_id, type_value, node_data, edge.from_node)
                if added is not None:
                    connection_results.append(ConnectionResult(
                        tree_actor_id=tree_key,
                        depth=added.depth,
                        parent_node_id=edge.from_node,
                    ))

        containing = [key for key, tree in self.trees.items() if tree.has_node(node_id)]
        if containing:
            self.global_index.setdefault(node_id, set()).update(containing)

        shortest = None
        bridge_node = None
        if len(containing) >= 2:
            bridge_node = node_id
            shortest = self.find_shortest_path_between_trees(containing, node_id)
            if self.exhaustive_bridge_search:
                shortest = self._shortest_over_common_nodes(containing, shortest)

        logger.info(
            "Added %s %s to %d tree(s)%s",
            type_value,
            node_id,
            len(containing),
            f"; connection found, path length {shortest.path_length}" if shortest else "",
        )

        return InsertionResult(
            trees_affected=containing,
            connection_results=connection_results,
            shortest_connection=shortest,
            bridge_node=bridge_node,
        )

    # --- Path search ---

    def find_shortest_path_between_trees(
        self,
        tree_keys: Sequence[str],
        bridge_node_id: str,
    ) -> Optional[BridgeResult]:
        """Shortest chain through one bridge node, over every pair of trees holding it."""
        if len(tree_keys) < 2:
            return None

        shortest: Optional[BridgeResult] = None
        for key1, key2 in combinations(tree_keys, 2):
            tree1 = self.trees.get(key1)
            tree2 = self.trees.get(key2)
            if tree1 is None or tree2 is None:
                continue

            candidate = self._bridge_through(tree1, tree2, bridge_node_id)
            if candidate is not None and (
                shortest is None or candidate.path_length < shortest.path_length
            ):
                shortest = candidate

        return shortest

    def check_actors_connected(self, actor1_key: str, actor2_key: str) -> Optional[BridgeResult]:
        """
        Exhaustive check: intersect both trees and keep the shortest chain
        across every shared entity. None while the trees are disjoint.
        """
        tree1 = self.trees.get(actor1_key)
        tree2 = self.trees.get(actor2_key)
        if tree1 is None or tree2 is None:
            return None

        shortest: Optional[BridgeResult] = None
        for node_id in tree1.node_map:
            if not tree2.has_node(node_id):
                continue
            candidate = self._bridge_through(tree1, tree2, node_id)
            if candidate is not None and (
                shortest is None or candidate.path_length < shortest.path_length
            ):
                shortest = candidate

        return shortest

    def is_connected(self) -> bool:
        """Whether any two trees share an entity."""
        return any(len(keys) >= 2 for keys in self.global_index.values())

    # --- Diagnostics ---

    def get_all_tree_stats(self) -> Dict[str, TreeStats]:
        return {key: tree.get_stats() for key, tree in self.trees.items()}

    def get_total_unique_nodes(self) -> int:
        """Distinct entities across all trees, starting actors excluded."""
        unique = set()
        for tree in self.trees.values():
            unique.update(tree.node_map)
        return len(unique - set(self.trees))

    # --- Internals ---

    def _bridge_through(
        self, tree1: ActorTree, tree2: ActorTree, bridge_node_id: str
    ) -> Optional[BridgeResult]:
        path1 = tree1.get_path_to_node(bridge_node_id)
        path2 = tree2.get_path_to_node(bridge_node_id)
        if path1 is None or path2 is None:
            return None

        # The bridge appears in both halves; count it once.
        total_length = len(path1) + len(path2) - 1
        full_path = path1 + list(reversed(path2[:-1]))

        logger.debug(
            "Path %s -> %s via %s: %s",
            tree1.root_actor_id, tree2.root_actor_id, bridge_node_id, full_path,
        )
        return BridgeResult(
            path_length=total_length - 2,
            bridge_node=bridge_node_id,
            full_path=full_path,
            path_from_actor1=path1,
            path_from_actor2=path2,
            start_actor1=tree1.root_actor_id,
            start_actor2=tree2.root_actor_id,
        )

    def _shortest_over_common_nodes(
        self, tree_keys: Sequence[str], current: Optional[BridgeResult]
    ) -> Optional[BridgeResult]:
        """Replace the single-bridge answer when an older shared entity is strictly shorter."""
        best = current
        for key1, key2 in combinations(tree_keys, 2):
            candidate = self.check_actors_connected(key1, key2)
            if candidate is not None and (
                best is None or candidate.path_length < best.path_length
            ):
                best = candidate
        return best

    def _normalize_connections(
        self, node_id: str, connections: Iterable[Union[Connection, dict]]
    ) -> List[Edge]:
        edges = []
        for raw in connections:
            try:
                connection = raw if isinstance(raw, Connection) else Connection.model_validate(raw)
            except ValidationError:
                logger.warning("Skipping malformed connection for %s: %r", node_id, raw)
                continue
            neighbor = connection.neighbor_of(node_id)
            if neighbor is None:
                logger.warning(
                    "Skipping connection %s -> %s: does not link %s to another entity",
                    connection.source, connection.target, node_id,
                )
                continue
            edges.append(Edge(from_node=neighbor, to_node=node_id))
        return edges

    def _in_tree_order(self, tree_keys: Set[str]) -> List[str]:
        return [key for key in self.trees if key in tree_keys]

    @staticmethod
    def _coerce_actor(actor: Union[Entity, dict]) -> Entity:
        if isinstance(actor, Entity):
            entity = actor
        else:
            if "id" not in actor:
                raise StartingActorsError(f"Starting actor has no id: {actor!r}")
            entity = Entity(
                id=actor["id"],
                type=actor.get("type") or actor.get("media_type") or EntityType.PERSON,
                payload=dict(actor),
            )
        if entity.type != EntityType.PERSON:
            raise StartingActorsError(
                f"Starting actors must be people, got {entity.node_key}"
            )
        return entity

    def _ensure_not_disposed(self) -> None:
        if self._disposed:
            raise TreeManagerStateError("Tree manager has been disposed")

    def _ensure_ready(self) -> None:
        self._ensure_not_disposed()
        if not self._initialized:
            raise TreeManagerStateError("initialize_trees() must be called first")
