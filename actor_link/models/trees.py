"""Results reported by the actor trees back to the game session."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ConnectionResult(BaseModel):
    """Where a new entity landed in one actor tree."""

    tree_actor_id: str
    depth: int = Field(ge=1)
    parent_node_id: str


class BridgeResult(BaseModel):
    """
    The shortest discovered chain between two starting actors.

    ``path_length`` is the domain score: intermediate entities only, both
    starting actors excluded. ``full_path`` runs actor1 -> bridge -> actor2.
    """

    path_length: int = Field(ge=0)
    bridge_node: str
    full_path: List[str]
    path_from_actor1: List[str]            # [actor1, ..., bridge]
    path_from_actor2: List[str]            # [actor2, ..., bridge]
    start_actor1: str
    start_actor2: str


class InsertionResult(BaseModel):
    """Outcome of grafting one entity into the actor trees."""

    trees_affected: List[str] = []
    connection_results: List[ConnectionResult] = []
    shortest_connection: Optional[BridgeResult] = None
    bridge_node: Optional[str] = None


class TreeStats(BaseModel):
    """Diagnostic counters for one actor tree."""

    total_nodes: int
    nodes_by_type: Dict[str, int]
    max_depth: int
    root_actor: str
