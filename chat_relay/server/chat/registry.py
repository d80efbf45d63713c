"""
Session registry module.

This module keeps the authoritative set of live sessions, one per connection.
"""

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

from chat_relay.server.utils.logger import logger

SendCapability = Callable[[str], Awaitable[Any]]


class SessionExistsError(Exception):
    """Raised when a connection identity is registered twice."""


@dataclass(frozen=True)
class Session:
    """Server-side record of one live connection."""
    connection_id: Hashable
    send: SendCapability
    display_name: Optional[str] = None

    @property
    def is_named(self) -> bool:
        return bool(self.display_name)


class SessionRegistry:
    """Synchronized store mapping connection identity to Session."""

    def __init__(self):
        self._sessions: Dict[Hashable, Session] = {}  # insertion ordered
        self.lock = asyncio.Lock()

    async def add(self, connection_id: Hashable, send: SendCapability) -> Session:
        """Create an anonymous session. Never overwrites an existing one."""
        async with self.lock:
            if connection_id in self._sessions:
                raise SessionExistsError(f"Session already exists for {connection_id}")
            session = Session(connection_id=connection_id, send=send)
            self._sessions[connection_id] = session
        return session

    async def remove(self, connection_id: Hashable) -> Optional[Session]:
        """Remove and return the session, or None if it is already gone."""
        async with self.lock:
            return self._sessions.pop(connection_id, None)

    async def lookup(self, connection_id: Hashable) -> Optional[Session]:
        async with self.lock:
            return self._sessions.get(connection_id)

    async def set_name(self, connection_id: Hashable, name: str) -> Optional[Session]:
        """Replace the display name. Returns None if the session no longer exists."""
        async with self.lock:
            session = self._sessions.get(connection_id)
            if session is None:
                logger.debug(f"set_name ignored for unknown connection {connection_id}")
                return None
            # Swap in a new value; dict keeps the original insertion slot
            session = replace(session, display_name=name)
            self._sessions[connection_id] = session
            return session

    async def snapshot(self) -> List[Session]:
        """Consistent, insertion-ordered view of every live session."""
        async with self.lock:
            return list(self._sessions.values())

    async def names(self) -> List[str]:
        """Display names of registered sessions, in snapshot order."""
        return [s.display_name for s in await self.snapshot() if s.is_named]

    async def clear(self):
        async with self.lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, connection_id) -> bool:
        return connection_id in self._sessions
