"""Game session configuration, board nodes and completion records."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from actor_link.models.entity import Connection, Entity
from actor_link.models.trees import BridgeResult, InsertionResult


class GameConfig(BaseModel):
    """Configuration for one game session."""

    keep_playing_after_win: bool = False
    exhaustive_bridge_search: bool = True
    score_time_factor: float = Field(gt=0, default=100000.0)
    challenge_id: Optional[str] = None
    blocked_movie_ids: List[int] = []      # Challenge blacklist
    blocked_tv_ids: List[int] = []


class GameStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class BoardNode(BaseModel):
    """An entity as placed on the board."""

    node_id: str
    entity: Entity
    added_at: datetime


class AddOutcome(str, Enum):
    ADDED = "added"
    DUPLICATE = "duplicate"
    BLOCKED = "blocked"
    NOT_CONNECTABLE = "not_connectable"


class AddToBoardResult(BaseModel):
    """What happened when the player tried to place an entity."""

    outcome: AddOutcome
    node_id: str
    connections: List[Connection] = []
    insertion: Optional[InsertionResult] = None
    connection: Optional[BridgeResult] = None     # Set whenever the actors are connected
    game_completed_now: bool = False


class GameCompletion(BaseModel):
    """Score record produced the first time the two actors connect."""

    score: int = Field(ge=0)
    completion_seconds: int = Field(ge=0)
    active_nodes: int
    total_nodes: int
    connection: BridgeResult
    completed_at: datetime
