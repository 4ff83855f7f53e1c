"""Actor Link data models."""

from actor_link.models.entity import (
    Connection,
    Edge,
    Entity,
    EntityType,
    make_node_key,
    parse_node_key,
)
from actor_link.models.game import (
    AddOutcome,
    AddToBoardResult,
    BoardNode,
    GameCompletion,
    GameConfig,
    GameStatus,
)
from actor_link.models.trees import (
    BridgeResult,
    ConnectionResult,
    InsertionResult,
    TreeStats,
)

__all__ = [
    "AddOutcome",
    "AddToBoardResult",
    "BoardNode",
    "BridgeResult",
    "Connection",
    "ConnectionResult",
    "Edge",
    "Entity",
    "EntityType",
    "GameCompletion",
    "GameConfig",
    "GameStatus",
    "InsertionResult",
    "TreeStats",
    "make_node_key",
    "parse_node_key",
]
