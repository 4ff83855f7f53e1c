"""
Session Manager — caller-owned registry of concurrent game sessions.

Each session is guarded by its own lock, so every insertion for one game is
applied in order by a single writer, while different games proceed
independently.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Union

from actor_link.models.entity import Entity
from actor_link.models.game import GameConfig
from actor_link.session.game import GameSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Creates, looks up and disposes game sessions."""

    def __init__(self, default_config: Optional[GameConfig] = None):
        self.default_config = default_config or GameConfig()
        self._sessions: Dict[str, GameSession] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def create(
        self,
        actor1: Union[Entity, dict],
        actor2: Union[Entity, dict],
        config: Optional[GameConfig] = None,
    ) -> GameSession:
        """Start a new game; nothing is registered if the actors are rejected."""
        session = GameSession(config=config or self.default_config.model_copy(deep=True))
        session.start(actor1, actor2)

        with self._registry_lock:
            self._sessions[session.session_id] = session
            self._locks[session.session_id] = threading.Lock()
        logger.info("Registered session %s", session.session_id)
        return session

    def get(self, session_id: str) -> Optional[GameSession]:
        with self._registry_lock:
            return self._sessions.get(session_id)

    @contextmanager
    def acquire(self, session_id: str) -> Iterator[Optional[GameSession]]:
        """Hold the session's lock for the duration of the block. Yields None if unknown."""
        with self._registry_lock:
            session = self._sessions.get(session_id)
            lock = self._locks.get(session_id)

        if session is None or lock is None:
            yield None
            return

        with lock:
            yield session

    def delete(self, session_id: str) -> bool:
        with self._registry_lock:
            session = self._sessions.pop(session_id, None)
            lock = self._locks.pop(session_id, None)
        if session is None:
            return False

        with lock:
            session.dispose()
        logger.info("Disposed session %s", session_id)
        return True

    def list_sessions(self) -> List[GameSession]:
        with self._registry_lock:
            return list(self._sessions.values())

    def count(self) -> int:
        with self._registry_lock:
            return len(self._sessions)
