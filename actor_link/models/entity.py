"""Board entities — people, movies and TV shows, keyed by composite id."""

from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel


class EntityType(str, Enum):
    PERSON = "person"
    MOVIE = "movie"
    TV = "tv"


def make_node_key(entity_type: Union[EntityType, str], entity_id: Union[int, str]) -> str:
    """Build the composite ``"{type}-{id}"`` key used across the whole system."""
    return f"{EntityType(entity_type).value}-{entity_id}"


def parse_node_key(node_key: str) -> Tuple[EntityType, str]:
    """Split a composite key back into its type and raw id."""
    type_part, sep, id_part = node_key.partition("-")
    if not sep or not id_part:
        raise ValueError(f"Malformed node key: {node_key!r}")
    return EntityType(type_part), id_part


class Entity(BaseModel):
    """
    A person, movie or TV show placed on the board.

    The payload is whatever the TMDB layer returned (names, credits, images).
    The core never interprets it, except for the credit lists the board reads
    when matching a new entity against the ones already placed.
    """

    id: Union[int, str]
    type: EntityType
    payload: dict = {}

    @property
    def node_key(self) -> str:
        return make_node_key(self.type, self.id)

    @property
    def display_name(self) -> str:
        return self.payload.get("name") or self.payload.get("title") or self.node_key

    @classmethod
    def from_tmdb(cls, data: dict, entity_type: Optional[Union[EntityType, str]] = None) -> "Entity":
        """Wrap a raw TMDB record. Falls back to its ``media_type`` field."""
        resolved = entity_type or data.get("media_type")
        if resolved is None:
            raise ValueError("Entity type missing: pass entity_type or include media_type")
        if data.get("id") is None:
            raise ValueError(f"Entity has no id: {data!r}")
        return cls(id=data["id"], type=EntityType(resolved), payload=dict(data))


class Connection(BaseModel):
    """
    An undirected shared-credit link, as produced by the board.
    Either side may be the newly added entity.
    """

    source: str
    target: str
    is_guest_appearance: bool = False

    def neighbor_of(self, node_id: str) -> Optional[str]:
        """The side that is not ``node_id``, or None if the link does not touch it."""
        if self.source == node_id and self.target != node_id:
            return self.target
        if self.target == node_id and self.source != node_id:
            return self.source
        return None


class Edge(BaseModel):
    """A connection normalized for one insertion: placed neighbour -> new entity."""

    from_node: str    # Already on the board
    to_node: str      # Being inserted
