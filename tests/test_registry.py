#!/usr/bin/env python3
"""
Unit tests for the session registry.
"""

import asyncio
import unittest
from unittest.mock import AsyncMock

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chat_relay.server.chat.registry import SessionExistsError, SessionRegistry


class TestSessionRegistry(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.registry = SessionRegistry()

    async def test_add_creates_anonymous_session(self):
        send = AsyncMock()
        session = await self.registry.add("c1", send)

        self.assertEqual(session.connection_id, "c1")
        self.assertIs(session.send, send)
        self.assertIsNone(session.display_name)
        self.assertFalse(session.is_named)
        self.assertIn("c1", self.registry)
        self.assertEqual(len(self.registry), 1)

    async def test_add_rejects_duplicate(self):
        first = AsyncMock()
        await self.registry.add("c1", first)

        with self.assertRaises(SessionExistsError):
            await self.registry.add("c1", AsyncMock())

        # The original session is untouched
        session = await self.registry.lookup("c1")
        self.assertIs(session.send, first)

    async def test_lookup_missing_returns_none(self):
        self.assertIsNone(await self.registry.lookup("missing"))

    async def test_remove_returns_session(self):
        await self.registry.add("c1", AsyncMock())
        await self.registry.set_name("c1", "Alice")

        removed = await self.registry.remove("c1")

        self.assertEqual(removed.display_name, "Alice")
        self.assertNotIn("c1", self.registry)

    async def test_double_remove_is_tolerated(self):
        await self.registry.add("c1", AsyncMock())
        await self.registry.remove("c1")
        self.assertIsNone(await self.registry.remove("c1"))

    async def test_set_name(self):
        await self.registry.add("c1", AsyncMock())

        session = await self.registry.set_name("c1", "Alice")

        self.assertEqual(session.display_name, "Alice")
        self.assertEqual((await self.registry.lookup("c1")).display_name, "Alice")

    async def test_set_name_on_missing_is_noop(self):
        self.assertIsNone(await self.registry.set_name("missing", "Alice"))
        self.assertEqual(len(self.registry), 0)

    async def test_set_name_does_not_mutate_held_session(self):
        before = await self.registry.add("c1", AsyncMock())
        await self.registry.set_name("c1", "Alice")
        self.assertIsNone(before.display_name)

    async def test_snapshot_is_insertion_ordered(self):
        for cid in ("c3", "c1", "c2"):
            await self.registry.add(cid, AsyncMock())
        # Renaming keeps the slot
        await self.registry.set_name("c3", "Carol")

        snapshot = await self.registry.snapshot()

        self.assertEqual([s.connection_id for s in snapshot], ["c3", "c1", "c2"])

    async def test_snapshot_is_detached(self):
        await self.registry.add("c1", AsyncMock())
        snapshot = await self.registry.snapshot()
        await self.registry.add("c2", AsyncMock())
        self.assertEqual(len(snapshot), 1)

    async def test_names_skip_anonymous(self):
        await self.registry.add("c1", AsyncMock())
        await self.registry.add("c2", AsyncMock())
        await self.registry.add("c3", AsyncMock())
        await self.registry.set_name("c1", "Alice")
        await self.registry.set_name("c3", "Carol")

        self.assertEqual(await self.registry.names(), ["Alice", "Carol"])

    async def test_names_allow_duplicates(self):
        await self.registry.add("c1", AsyncMock())
        await self.registry.add("c2", AsyncMock())
        await self.registry.set_name("c1", "Alice")
        await self.registry.set_name("c2", "Alice")

        self.assertEqual(await self.registry.names(), ["Alice", "Alice"])

    async def test_clear(self):
        await self.registry.add("c1", AsyncMock())
        await self.registry.clear()
        self.assertEqual(await self.registry.snapshot(), [])

    async def test_concurrent_adds_and_removes(self):
        ids = [f"c{i}" for i in range(200)]
        await asyncio.gather(*(self.registry.add(cid, AsyncMock()) for cid in ids))
        await asyncio.gather(*(self.registry.remove(cid) for cid in ids[::2]))

        remaining = {s.connection_id for s in await self.registry.snapshot()}
        self.assertEqual(remaining, set(ids[1::2]))


if __name__ == '__main__':
    unittest.main()
