"""
Broadcaster module.

This module fans encoded frames out to the live sessions of a registry.
"""

import asyncio
from typing import Hashable, Iterable, List, Optional

from chat_relay.server.chat.registry import Session, SessionRegistry
from chat_relay.server.utils.logger import logger


class Broadcaster:
    """Deliver already-encoded frames to sessions."""

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    async def _deliver(self, session: Session, frame: str) -> bool:
        try:
            await session.send(frame)
        except Exception as e:
            logger.error(f"Failed to send to {session.connection_id}: {e}")
            return False
        logger.log_send(session.connection_id, frame)
        return True

    async def broadcast(self, frame: str, targets: Optional[Iterable[Hashable]] = None) -> List[Hashable]:
        """
        Send a frame to every live session, or only to those in ``targets``.

        The snapshot is taken under the registry lock; sends run afterwards,
        concurrently, in registry order. A failed send never stops the
        others. Returns the connection ids whose send failed.
        """
        sessions = await self.registry.snapshot()
        if targets is not None:
            wanted = set(targets)
            sessions = [s for s in sessions if s.connection_id in wanted]

        results = await asyncio.gather(*(self._deliver(s, frame) for s in sessions))

        return [s.connection_id for s, ok in zip(sessions, results) if not ok]

    async def send(self, connection_id: Hashable, frame: str) -> bool:
        """Send a frame to a single connection. Unknown ids return False."""
        session = await self.registry.lookup(connection_id)
        if session is None:
            logger.debug(f"Dropping frame for unknown connection {connection_id}")
            return False
        return await self._deliver(session, frame)
