"""
Actor Link API — FastAPI endpoints.

Exposes game sessions over REST for:
- Starting a game between two actors
- Placing movies, TV shows and people on the board
- Checking whether the starting actors are connected
- Tree statistics and session reset
"""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from actor_link.models.entity import EntityType
from actor_link.models.game import GameConfig
from actor_link.session.game import GameSessionError
from actor_link.session.manager import SessionManager
from actor_link.trees.manager import TreeManagerError
from actor_link.utils.logging import setup_logging


# --- Request/Response Models ---

class GameCreateRequest(BaseModel):
    actor1: dict
    actor2: dict
    config: Optional[GameConfig] = None


class EntityAddRequest(BaseModel):
    entity: dict
    entity_type: Optional[EntityType] = None


class GameResetRequest(BaseModel):
    actor1: Optional[dict] = None
    actor2: Optional[dict] = None


# --- Application Factory ---

def create_app(
    session_manager: Optional[SessionManager] = None,
    default_config: Optional[GameConfig] = None,
    log_level: Optional[int] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    if log_level is not None:
        setup_logging(level=log_level)

    app = FastAPI(
        title="Actor Link API",
        description="Connect two actors through shared movie and TV credits",
        version="0.1.0",
    )

    sm = session_manager or SessionManager(default_config=default_config)
    app.state.session_manager = sm

    # === GAMES ===

    @app.post("/games")
    def create_game(req: GameCreateRequest):
        """Start a new game between two actors."""
        try:
            session = sm.create(req.actor1, req.actor2, config=req.config)
        except (TreeManagerError, GameSessionError, ValueError) as e:
            raise HTTPException(400, str(e))
        return session.get_summary()

    @app.get("/games")
    def list_games():
        """All live sessions."""
        return [
            {"session_id": s.session_id, "status": s.status.value}
            for s in sm.list_sessions()
        ]

    @app.get("/games/{session_id}")
    def get_game(session_id: str):
        with sm.acquire(session_id) as session:
            if session is None:
                raise HTTPException(404, "Game not found")
            return session.get_summary()

    @app.delete("/games/{session_id}")
    def delete_game(session_id: str):
        if not sm.delete(session_id):
            raise HTTPException(404, "Game not found")
        return {"status": "deleted", "session_id": session_id}

    @app.post("/games/{session_id}/reset")
    def reset_game(session_id: str, req: Optional[GameResetRequest] = None):
        """Clear the board; restart at once if new actors are given."""
        with sm.acquire(session_id) as session:
            if session is None:
                raise HTTPException(404, "Game not found")
            session.reset()
            if req is not None and req.actor1 is not None and req.actor2 is not None:
                try:
                    session.start(req.actor1, req.actor2)
                except (TreeManagerError, ValueError) as e:
                    raise HTTPException(400, str(e))
            return session.get_summary()

    # === BOARD ===

    @app.post("/games/{session_id}/entities")
    def add_entity(session_id: str, req: EntityAddRequest):
        """Place a movie, TV show or person on the board."""
        entity = dict(req.entity)
        if req.entity_type is not None:
            entity["media_type"] = req.entity_type.value
        if "id" not in entity:
            raise HTTPException(400, "Entity id is required")

        with sm.acquire(session_id) as session:
            if session is None:
                raise HTTPException(404, "Game not found")
            try:
                result = session.add_to_board(entity)
            except (TreeManagerError, GameSessionError, ValueError) as e:
                raise HTTPException(400, str(e))
            return result.model_dump(mode="json")

    @app.get("/games/{session_id}/connection")
    def get_connection(session_id: str):
        """Shortest chain between the starting actors, if any."""
        with sm.acquire(session_id) as session:
            if session is None:
                raise HTTPException(404, "Game not found")
            try:
                connection = session.check_connection()
            except GameSessionError as e:
                raise HTTPException(400, str(e))
            if connection is None:
                raise HTTPException(404, "Actors are not connected yet")
            return connection.model_dump(mode="json")

    @app.get("/games/{session_id}/stats")
    def get_stats(session_id: str):
        with sm.acquire(session_id) as session:
            if session is None:
                raise HTTPException(404, "Game not found")
            return session.get_stats()

    return app


# Default application instance
app = create_app()
