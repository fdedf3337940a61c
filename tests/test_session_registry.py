# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from unittest.mock import AsyncMock
import asyncio, json, unittest

from Public.WebSocket.Models import Session
from Public.WebSocket.Libs   import SessionRegistry
from tests.helpers           import ALICE, BOB, CAROL

def session_for(user, websocket=None) -> Session:
    return Session(websocket=websocket or AsyncMock(), user=user)

class TestSessionRegistry(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.registry = SessionRegistry(send_timeout=0.05)
        self.alice    = session_for(ALICE)
        self.bob      = session_for(BOB)
        for session in (self.alice, self.bob):
            self.registry.register(session)

    async def test_join_other_room_detaches_from_previous(self):
        self.assertIsNone(self.registry.join_room(self.alice, "A"))
        self.alice.access_cache["A"] = 99.0

        previous = self.registry.join_room(self.alice, "B")

        self.assertEqual(previous, "A")
        self.assertEqual(self.alice.current_room_id, "B")
        self.assertEqual(self.registry.sessions_in("A"), [])
        self.assertEqual(self.registry.sessions_in("B"), [self.alice])
        self.assertNotIn("A", self.alice.access_cache)
        self.assertNotIn("A", self.registry.rooms)

    async def test_rejoining_same_room_reports_nothing(self):
        self.registry.join_room(self.alice, "A")
        self.assertIsNone(self.registry.join_room(self.alice, "A"))
        self.assertEqual(len(self.registry.sessions_in("A")), 1)

    async def test_roster_lists_attached_sessions(self):
        self.registry.join_room(self.alice, "A")
        self.registry.join_room(self.bob, "A")

        roster = self.registry.roster("A")

        self.assertEqual({u["username"] for u in roster}, {"alice", "bob"})
        self.assertIn(self.alice.session_id, {u["sessionId"] for u in roster})

    async def test_unregister_returns_left_room(self):
        self.registry.join_room(self.bob, "A")

        self.assertEqual(self.registry.unregister(self.bob), "A")
        self.assertNotIn(self.bob.session_id, self.registry.sessions)
        self.assertIsNone(self.registry.unregister(self.alice))

    async def test_broadcast_excludes_sender(self):
        self.registry.join_room(self.alice, "A")
        self.registry.join_room(self.bob, "A")

        sent = await self.registry.broadcast("A", {"type": "video-play"}, exclude_session_id=self.alice.session_id)

        self.assertEqual(sent, 1)
        self.alice.websocket.send_text.assert_not_awaited()
        self.assertEqual(json.loads(self.bob.websocket.send_text.await_args.args[0]), {"type": "video-play"})

    async def test_slow_socket_does_not_block_others(self):
        async def hang(_):
            await asyncio.sleep(10)

        slow = session_for(CAROL, AsyncMock(send_text=AsyncMock(side_effect=hang)))
        self.registry.register(slow)
        for session in (self.alice, self.bob, slow):
            self.registry.join_room(session, "A")

        sent = await asyncio.wait_for(self.registry.broadcast("A", {"type": "x"}), timeout=1)

        self.assertEqual(sent, 2)

    async def test_send_reports_failure(self):
        broken = session_for(CAROL, AsyncMock(send_text=AsyncMock(side_effect=RuntimeError("closed"))))
        self.assertFalse(await self.registry.send(broken, {"type": "x"}))
        self.assertTrue(await self.registry.send(self.alice, {"type": "x"}))

if __name__ == "__main__":
    unittest.main(verbosity=2)
