"""Tests for core data models."""

import pytest

from actor_link.models import (
    BridgeResult,
    Connection,
    Entity,
    EntityType,
    GameConfig,
    InsertionResult,
    make_node_key,
    parse_node_key,
)


class TestNodeKeys:
    def test_make_node_key(self):
        assert make_node_key(EntityType.PERSON, 1) == "person-1"
        assert make_node_key("movie", "603") == "movie-603"

    def test_parse_node_key(self):
        assert parse_node_key("tv-1399") == (EntityType.TV, "1399")

    def test_parse_malformed_key(self):
        with pytest.raises(ValueError):
            parse_node_key("person")
        with pytest.raises(ValueError):
            parse_node_key("album-12")


class TestEntity:
    def test_node_key_and_name(self):
        entity = Entity(id=100, type=EntityType.MOVIE, payload={"title": "Heat"})
        assert entity.node_key == "movie-100"
        assert entity.display_name == "Heat"

    def test_from_tmdb_reads_media_type(self):
        entity = Entity.from_tmdb({"id": 7, "media_type": "tv", "name": "Show"})
        assert entity.type == EntityType.TV
        assert entity.payload["name"] == "Show"

    def test_from_tmdb_explicit_type_wins(self):
        entity = Entity.from_tmdb({"id": 7, "media_type": "tv"}, EntityType.MOVIE)
        assert entity.node_key == "movie-7"

    def test_from_tmdb_requires_type(self):
        with pytest.raises(ValueError):
            Entity.from_tmdb({"id": 7})

    def test_from_tmdb_requires_id(self):
        with pytest.raises(ValueError, match="no id"):
            Entity.from_tmdb({"name": "Nobody"}, EntityType.PERSON)


class TestConnection:
    def test_neighbor_of_either_side(self):
        conn = Connection(source="movie-100", target="person-1")
        assert conn.neighbor_of("movie-100") == "person-1"
        assert conn.neighbor_of("person-1") == "movie-100"

    def test_neighbor_of_unrelated_node(self):
        conn = Connection(source="movie-100", target="person-1")
        assert conn.neighbor_of("tv-5") is None

    def test_self_loop_has_no_neighbor(self):
        conn = Connection(source="movie-100", target="movie-100")
        assert conn.neighbor_of("movie-100") is None


class TestResults:
    def test_insertion_defaults(self):
        result = InsertionResult()
        assert result.trees_affected == []
        assert result.shortest_connection is None
        assert result.bridge_node is None

    def test_bridge_result_rejects_negative_length(self):
        with pytest.raises(Exception):
            BridgeResult(
                path_length=-1,
                bridge_node="movie-1",
                full_path=[],
                path_from_actor1=[],
                path_from_actor2=[],
                start_actor1="person-1",
                start_actor2="person-2",
            )


class TestGameConfig:
    def test_defaults(self):
        config = GameConfig()
        assert config.keep_playing_after_win is False
        assert config.exhaustive_bridge_search is True
        assert config.score_time_factor == 100000.0
        assert config.blocked_movie_ids == []

    def test_time_factor_must_be_positive(self):
        with pytest.raises(Exception):
            GameConfig(score_time_factor=0)
