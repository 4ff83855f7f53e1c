"""
Credit matching — which placed entities a new entity shares a credit with.

People connect to movies and TV shows; movies and TV shows connect to people.
Nothing connects directly to an entity of its own kind.
"""

import logging
from typing import Iterable, List

from actor_link.models.entity import Connection, Entity, EntityType
from actor_link.models.game import BoardNode, GameConfig

logger = logging.getLogger(__name__)


def _cast(payload: dict, section: str) -> List[dict]:
    return (payload.get(section) or {}).get("cast") or []


def _credit_ids(credits: Iterable[dict]) -> set:
    return {str(c.get("id")) for c in credits if c.get("id") is not None}


def find_person_connections(person: Entity, board_nodes: Iterable[BoardNode]) -> List[Connection]:
    """A person links to every placed movie/show in their own credits."""
    movie_credits = {str(c.get("id")): c for c in _cast(person.payload, "movie_credits")}
    tv_credits = {str(c.get("id")): c for c in _cast(person.payload, "tv_credits")}

    connections = []
    for node in board_nodes:
        placed_id = str(node.entity.id)
        if node.entity.type == EntityType.MOVIE and placed_id in movie_credits:
            connections.append(Connection(source=person.node_key, target=node.node_id))
        elif node.entity.type == EntityType.TV and placed_id in tv_credits:
            connections.append(Connection(
                source=person.node_key,
                target=node.node_id,
                is_guest_appearance=bool(tv_credits[placed_id].get("is_guest_appearance")),
            ))
    return connections


def find_movie_connections(movie: Entity, board_nodes: Iterable[BoardNode]) -> List[Connection]:
    """A movie links to every placed person in its cast."""
    cast_ids = _credit_ids(_cast(movie.payload, "credits"))
    return [
        Connection(source=node.node_id, target=movie.node_key)
        for node in board_nodes
        if node.entity.type == EntityType.PERSON and str(node.entity.id) in cast_ids
    ]


def find_tv_connections(show: Entity, board_nodes: Iterable[BoardNode]) -> List[Connection]:
    """
    A show links to every placed person in its regular or aggregate cast.
    Guest stars missing from both lists are found through the person's own
    TV credits instead.
    """
    cast_ids = _credit_ids(
        _cast(show.payload, "credits") + _cast(show.payload, "aggregate_credits")
    )

    connections = []
    for node in board_nodes:
        if node.entity.type != EntityType.PERSON:
            continue
        if str(node.entity.id) in cast_ids:
            connections.append(Connection(source=node.node_id, target=show.node_key))
            continue

        credit = next(
            (c for c in _cast(node.entity.payload, "tv_credits")
             if str(c.get("id")) == str(show.id)),
            None,
        )
        if credit is not None:
            connections.append(Connection(
                source=node.node_id,
                target=show.node_key,
                is_guest_appearance=bool(credit.get("is_guest_appearance")),
            ))
    return connections


_FINDERS = {
    EntityType.PERSON: find_person_connections,
    EntityType.MOVIE: find_movie_connections,
    EntityType.TV: find_tv_connections,
}


def find_connections(entity: Entity, board_nodes: Iterable[BoardNode]) -> List[Connection]:
    """All shared-credit links between ``entity`` and the entities already placed."""
    connections = _FINDERS[entity.type](entity, list(board_nodes))
    logger.debug("Found %d connection(s) for %s", len(connections), entity.node_key)
    return connections


def is_blocked(entity: Entity, config: GameConfig) -> bool:
    """Whether the active challenge blacklists this title."""
    if entity.type == EntityType.MOVIE:
        return str(entity.id) in {str(i) for i in config.blocked_movie_ids}
    if entity.type == EntityType.TV:
        return str(entity.id) in {str(i) for i in config.blocked_tv_ids}
    return False
