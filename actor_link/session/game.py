"""
Game Session — one game between two starting actors.

Places entities on the board, finds which placed entities they share a
credit with, feeds each insertion to the session's own TreeManager and
declares the win the first time the two actors become connected.

Behavioral Contract:
- Each session owns its trees and board; nothing is shared between sessions.
- An entity is accepted only if it is not blacklisted, not already placed,
  and shares a credit with something already on the board.
- A game completes at most once. After that, placing more entities is only
  allowed in keep-playing mode, where the shortest path can still improve.
"""

import logging
import math
from datetime import datetime
from typing import List, Optional, Union
from uuid import uuid4

from actor_link.board.credits import find_connections, is_blocked
from actor_link.board.store import BoardStore
from actor_link.models.entity import Entity, EntityType
from actor_link.models.game import (
    AddOutcome,
    AddToBoardResult,
    GameCompletion,
    GameConfig,
    GameStatus,
)
from actor_link.models.trees import BridgeResult
from actor_link.trees.manager import StartingActorsError, TreeManager

logger = logging.getLogger(__name__)


class GameSessionError(Exception):
    """Raised when a session is driven out of order."""
    pass


def calculate_score(
    active_nodes: int,
    total_nodes: int,
    completion_seconds: int,
    time_factor: float = 100000.0,
) -> int:
    """
    Reward short chains found quickly:
    (active / total) * (time_factor / seconds), rounded half up.
    """
    if total_nodes <= 0 or completion_seconds <= 0:
        return 0
    return math.floor((active_nodes / total_nodes) * (time_factor / completion_seconds) + 0.5)


class GameSession:
    """Board, actor trees and win state for a single game."""

    def __init__(self, session_id: Optional[str] = None, config: Optional[GameConfig] = None):
        self.session_id = session_id or f"game_{uuid4().hex[:12]}"
        self.config = config or GameConfig()
        self.board = BoardStore()
        self.trees = TreeManager(exhaustive_bridge_search=self.config.exhaustive_bridge_search)
        self.status = GameStatus.NOT_STARTED
        self.starting_actors: List[Entity] = []
        self.started_at: Optional[datetime] = None
        self.shortest_path_length: Optional[int] = None
        self.best_connection: Optional[BridgeResult] = None
        self.completion: Optional[GameCompletion] = None

    # --- Lifecycle ---

    def start(
        self,
        actor1: Union[Entity, dict, None],
        actor2: Union[Entity, dict, None],
        now: Optional[datetime] = None,
    ) -> None:
        """Begin a new game between two distinct actors."""
        if actor1 is None or actor2 is None:
            raise StartingActorsError("Two actors are required to start a game")
        actors = [self._coerce_entity(a, EntityType.PERSON) for a in (actor1, actor2)]
        if actors[0].node_key == actors[1].node_key:
            raise StartingActorsError(
                f"Cannot start with the same actor twice: {actors[0].node_key}"
            )

        self.reset()
        self.trees.initialize_trees(actors)
        for actor in actors:
            self.board.place(actor)

        self.starting_actors = actors
        self.started_at = now or datetime.utcnow()
        self.status = GameStatus.IN_PROGRESS
        logger.info(
            "Session %s started: %s vs %s",
            self.session_id, actors[0].display_name, actors[1].display_name,
        )

    def reset(self) -> None:
        """Back to an empty, not-started session."""
        self.trees.reset()
        self.board.clear()
        self.status = GameStatus.NOT_STARTED
        self.starting_actors = []
        self.started_at = None
        self.shortest_path_length = None
        self.best_connection = None
        self.completion = None

    def dispose(self) -> None:
        self.board.clear()
        self.trees.dispose()
        self.status = GameStatus.NOT_STARTED

    @property
    def actor_keys(self) -> List[str]:
        return [a.node_key for a in self.starting_actors]

    # --- Play ---

    def add_to_board(
        self,
        entity: Union[Entity, dict],
        now: Optional[datetime] = None,
    ) -> AddToBoardResult:
        """Try to place an entity and report whether it connected the actors."""
        self._ensure_started()
        if self.status == GameStatus.COMPLETED and not self.config.keep_playing_after_win:
            raise GameSessionError(
                f"Session {self.session_id} is complete; enable keep_playing_after_win to continue"
            )

        entity = self._coerce_entity(entity)
        node_id = entity.node_key

        if is_blocked(entity, self.config):
            logger.warning(
                "Blocked %s from the board (challenge %s)", node_id, self.config.challenge_id
            )
            return AddToBoardResult(outcome=AddOutcome.BLOCKED, node_id=node_id)

        if self.board.has_node(node_id):
            return AddToBoardResult(outcome=AddOutcome.DUPLICATE, node_id=node_id)

        connections = find_connections(entity, self.board.get_nodes())
        if not connections:
            return AddToBoardResult(outcome=AddOutcome.NOT_CONNECTABLE, node_id=node_id)

        # Trees first: the board must not hold an entity the trees rejected.
        insertion = self.trees.add_entity_to_trees(
            node_id, entity.type, entity.payload, connections
        )
        self.board.place(entity)
        self.board.add_connections(connections)
        logger.info(
            "Placed %s with %d connection(s)", entity.display_name, len(connections)
        )

        connection = insertion.shortest_connection or self.trees.check_actors_connected(
            *self.actor_keys
        )

        completed_now = False
        if connection is not None:
            self._record_connection(connection)
            if self.status != GameStatus.COMPLETED:
                self._complete(connection, now or datetime.utcnow())
                completed_now = True

        return AddToBoardResult(
            outcome=AddOutcome.ADDED,
            node_id=node_id,
            connections=connections,
            insertion=insertion,
            connection=connection,
            game_completed_now=completed_now,
        )

    def check_connection(self) -> Optional[BridgeResult]:
        """Exhaustive re-check of the two starting actors."""
        self._ensure_started()
        return self.trees.check_actors_connected(*self.actor_keys)

    # --- Reporting ---

    def get_stats(self) -> dict:
        return {
            "trees": {
                key: stats.model_dump(mode="json")
                for key, stats in self.trees.get_all_tree_stats().items()
            },
            "total_unique_nodes": self.trees.get_total_unique_nodes(),
            "board_nodes": len(self.board),
        }

    def get_summary(self) -> dict:
        return {
            "session_id": self.session_id,
            "status": self.status.value,
            "starting_actors": self.actor_keys,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "shortest_path_length": self.shortest_path_length,
            "best_connection": (
                self.best_connection.model_dump(mode="json") if self.best_connection else None
            ),
            "completion": self.completion.model_dump(mode="json") if self.completion else None,
            "config": self.config.model_dump(mode="json"),
            "board": self.board.get_snapshot(),
        }

    # --- Internals ---

    def _record_connection(self, connection: BridgeResult) -> None:
        if self.shortest_path_length is None or connection.path_length < self.shortest_path_length:
            self.shortest_path_length = connection.path_length
            self.best_connection = connection
            logger.info(
                "Connection found via %s, path length %d: %s",
                connection.bridge_node, connection.path_length, connection.full_path,
            )

    def _complete(self, connection: BridgeResult, now: datetime) -> None:
        elapsed = max(0.0, (now - self.started_at).total_seconds())
        completion_seconds = math.floor(elapsed)
        total_nodes = self.trees.get_total_unique_nodes()
        score = calculate_score(
            connection.path_length,
            total_nodes,
            completion_seconds,
            self.config.score_time_factor,
        )

        self.completion = GameCompletion(
            score=score,
            completion_seconds=completion_seconds,
            active_nodes=connection.path_length,
            total_nodes=total_nodes,
            connection=connection,
            completed_at=now,
        )
        self.status = GameStatus.COMPLETED
        logger.info(
            "Session %s complete: score=%d active=%d total=%d time=%ds",
            self.session_id, score, connection.path_length, total_nodes, completion_seconds,
        )

    def _ensure_started(self) -> None:
        if self.status == GameStatus.NOT_STARTED:
            raise GameSessionError(f"Session {self.session_id} has not been started")

    @staticmethod
    def _coerce_entity(
        entity: Union[Entity, dict],
        default_type: Optional[EntityType] = None,
    ) -> Entity:
        if isinstance(entity, Entity):
            return entity
        return Entity.from_tmdb(entity, entity.get("media_type") or entity.get("type") or default_type)
