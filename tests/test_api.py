"""Tests for the FastAPI API endpoints."""

import pytest
from fastapi.testclient import TestClient

from actor_link.api.app import create_app
from actor_link.session.manager import SessionManager

ACTOR_1 = {"id": 1, "name": "Actor One"}
ACTOR_2 = {"id": 2, "name": "Actor Two"}


def _movie(movie_id: int, cast) -> dict:
    return {
        "id": movie_id,
        "title": f"Movie {movie_id}",
        "credits": {"cast": [{"id": c} for c in cast]},
    }


@pytest.fixture
def client():
    """Create a test client with a fresh session registry."""
    return TestClient(create_app(session_manager=SessionManager()))


@pytest.fixture
def game_id(client):
    response = client.post("/games", json={"actor1": ACTOR_1, "actor2": ACTOR_2})
    return response.json()["session_id"]


class TestGameEndpoints:
    def test_create_game(self, client):
        response = client.post("/games", json={"actor1": ACTOR_1, "actor2": ACTOR_2})
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "in_progress"
        assert data["starting_actors"] == ["person-1", "person-2"]

    def test_create_game_with_config(self, client):
        response = client.post("/games", json={
            "actor1": ACTOR_1,
            "actor2": ACTOR_2,
            "config": {"keep_playing_after_win": True, "blocked_movie_ids": [7]},
        })
        assert response.status_code == 200
        assert response.json()["config"]["blocked_movie_ids"] == [7]

    def test_duplicate_actors_rejected(self, client):
        response = client.post("/games", json={"actor1": ACTOR_1, "actor2": ACTOR_1})
        assert response.status_code == 400

    def test_actor_without_id_rejected(self, client):
        response = client.post("/games", json={"actor1": {"name": "No id"}, "actor2": ACTOR_2})
        assert response.status_code == 400
        assert client.get("/games").json() == []

    def test_list_and_get(self, client, game_id):
        listing = client.get("/games").json()
        assert listing == [{"session_id": game_id, "status": "in_progress"}]
        assert client.get(f"/games/{game_id}").status_code == 200

    def test_unknown_game(self, client):
        assert client.get("/games/nope").status_code == 404
        assert client.get("/games/nope/stats").status_code == 404
        assert client.post("/games/nope/entities", json={
            "entity_type": "movie", "entity": _movie(1, [1]),
        }).status_code == 404

    def test_delete_game(self, client, game_id):
        assert client.delete(f"/games/{game_id}").status_code == 200
        assert client.get(f"/games/{game_id}").status_code == 404
        assert client.delete(f"/games/{game_id}").status_code == 404


class TestBoardEndpoints:
    def test_connecting_movie_completes_game(self, client, game_id):
        response = client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie",
            "entity": _movie(100, [1, 2]),
        })
        assert response.status_code == 200
        data = response.json()
        assert data["outcome"] == "added"
        assert data["game_completed_now"] is True
        assert data["connection"]["path_length"] == 1
        assert data["connection"]["full_path"] == ["person-1", "movie-100", "person-2"]

        summary = client.get(f"/games/{game_id}").json()
        assert summary["status"] == "completed"
        assert summary["shortest_path_length"] == 1

    def test_not_connectable(self, client, game_id):
        response = client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie",
            "entity": _movie(100, [42]),
        })
        assert response.json()["outcome"] == "not_connectable"

    def test_missing_type_rejected(self, client, game_id):
        response = client.post(f"/games/{game_id}/entities", json={"entity": {"id": 5}})
        assert response.status_code == 400

    def test_missing_id_rejected(self, client, game_id):
        response = client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie", "entity": {"title": "No id"},
        })
        assert response.status_code == 400

    def test_move_after_completion_rejected(self, client, game_id):
        client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie", "entity": _movie(100, [1, 2]),
        })
        response = client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie", "entity": _movie(101, [1]),
        })
        assert response.status_code == 400

    def test_connection_endpoint(self, client, game_id):
        assert client.get(f"/games/{game_id}/connection").status_code == 404

        client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie", "entity": _movie(100, [1, 2]),
        })
        response = client.get(f"/games/{game_id}/connection")
        assert response.status_code == 200
        assert response.json()["bridge_node"] == "movie-100"

    def test_stats(self, client, game_id):
        client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie", "entity": _movie(100, [1]),
        })
        stats = client.get(f"/games/{game_id}/stats").json()
        assert stats["total_unique_nodes"] == 1
        assert stats["trees"]["person-1"]["max_depth"] == 1

    def test_reset(self, client, game_id):
        client.post(f"/games/{game_id}/entities", json={
            "entity_type": "movie", "entity": _movie(100, [1, 2]),
        })
        response = client.post(f"/games/{game_id}/reset")
        assert response.status_code == 200
        assert response.json()["status"] == "not_started"
        assert client.get(f"/games/{game_id}/connection").status_code == 400

    def test_reset_with_new_actors(self, client, game_id):
        response = client.post(f"/games/{game_id}/reset", json={
            "actor1": {"id": 3, "name": "Three"},
            "actor2": {"id": 4, "name": "Four"},
        })
        assert response.status_code == 200
        assert response.json()["starting_actors"] == ["person-3", "person-4"]

    def test_reset_with_actor_without_id_rejected(self, client, game_id):
        response = client.post(f"/games/{game_id}/reset", json={
            "actor1": {"name": "No id"},
            "actor2": {"id": 4, "name": "Four"},
        })
        assert response.status_code == 400
        assert client.get(f"/games/{game_id}").json()["status"] == "not_started"
