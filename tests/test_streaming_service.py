# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from unittest.mock import AsyncMock, patch
import asyncio, unittest

from Libs                    import AccessDenied, NotFound, UpstreamUnavailable
from Public.WebSocket.Models import EventType, StateUpdate
from Public.WebSocket.Libs   import StreamingService, AccessPolicy, InMemoryPlaybackStateStore
from tests.helpers           import FakeClock, build_gateway, ALICE, BOB

def update(kind: EventType, position: float, playing: bool, **event_data) -> StateUpdate:
    return StateUpdate(event_type=kind, video_position=position, is_playing=playing, event_data=event_data)

class TestStreamingService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.clock     = FakeClock()
        self.directory = build_gateway(self.clock).directory
        self.store     = InMemoryPlaybackStateStore(clock=self.clock.now)
        self.seeks     = []

        async def on_seek_commit(pending, state):
            self.seeks.append((pending, state))

        self.service = StreamingService(
            self.store, AccessPolicy(self.directory),
            clock          = self.clock.now,
            seek_window    = 0.05,
            on_seek_commit = on_seek_commit,
        )

    async def asyncTearDown(self):
        await self.service.shutdown()

    async def test_play_commits_immediately_and_records_event(self):
        state = await self.service.update_room_state("public-room", BOB.id, update(EventType.PLAY, 12.0, True, source="button"))

        self.assertTrue(state.is_playing)
        self.assertEqual(state.video_position, 12.0)
        self.assertEqual(state.updated_by, BOB.id)

        events = await self.store.recent_events("public-room")
        self.assertEqual(events[0].event_type, EventType.PLAY)
        self.assertEqual(events[0].event_data, {"position": 12.0, "isPlaying": True, "source": "button"})

    async def test_access_is_checked_before_any_write(self):
        with self.assertRaises(AccessDenied):
            await self.service.update_room_state("private-room", BOB.id, update(EventType.PAUSE, 1.0, False))
        with self.assertRaises(NotFound):
            await self.service.get_room_state("yok", BOB.id)

        self.assertIsNone(await self.store.find_by_room_id("private-room"))

    async def test_seek_burst_commits_once_with_last_values(self):
        for position in (10.0, 20.0, 30.0):
            result = await self.service.update_room_state(
                "public-room", BOB.id, update(EventType.SEEK, position, True, fromPosition=position - 10),
                session_id = "s1",
                wait       = False,
            )
            self.assertIsNone(result)

        await asyncio.sleep(0.2)

        self.assertEqual(len(self.seeks), 1)
        state = self.seeks[0][1]
        self.assertEqual(state.video_position, 30.0)

        seek_events = [e for e in await self.store.recent_events("public-room") if e.event_type is EventType.SEEK]
        self.assertEqual(len(seek_events), 1)
        self.assertEqual(seek_events[0].event_data, {"fromPosition": 20.0, "toPosition": 30.0})

    async def test_play_during_pending_seek_is_overridden_by_seek_commit(self):
        await self.service.update_room_state(
            "public-room", BOB.id, update(EventType.SEEK, 30.0, False, fromPosition=0.0),
            session_id = "s1",
            wait       = False,
        )
        played = await self.service.update_room_state("public-room", ALICE.id, update(EventType.PLAY, 10.0, True))

        # Play seek'i iptal etmez, hemen yazılır
        self.assertEqual((played.video_position, played.is_playing), (10.0, True))
        self.assertTrue(self.service.debouncer.is_pending("public-room"))

        await asyncio.sleep(0.2)

        # Pencere kapanınca seek'in tüm değerleri yazılır (isPlaying dahil)
        state = await self.store.find_by_room_id("public-room")
        self.assertEqual((state.video_position, state.is_playing, state.updated_by), (30.0, False, BOB.id))
        self.assertEqual(len(self.seeks), 1)

        events = await self.store.recent_events("public-room")
        self.assertEqual([e.event_type for e in events], [EventType.SEEK, EventType.PLAY])

    async def test_waiting_seek_returns_committed_state(self):
        state = await asyncio.wait_for(
            self.service.update_room_state("public-room", BOB.id, update(EventType.SEEK, 77.0, False)),
            timeout = 1,
        )
        self.assertEqual(state.video_position, 77.0)
        self.assertFalse(state.is_playing)

    async def test_late_joiner_gets_projected_position(self):
        await self.service.update_room_state("public-room", ALICE.id, update(EventType.PLAY, 0.0, True))
        self.clock.advance(10)

        snapshot = await self.service.sync_participant("public-room", BOB.id)

        self.assertAlmostEqual(snapshot.video_position, 10.0)
        self.assertEqual(snapshot.state.video_position, 0.0)
        self.assertEqual(snapshot.sync_timestamp, self.clock.now())

        events = await self.store.recent_events("public-room")
        self.assertEqual(events[0].event_type, EventType.JOIN)
        self.assertEqual(events[0].event_data, {"syncPosition": 10.0})

    async def test_event_log_failure_is_swallowed(self):
        with patch.object(self.store, "append_event", AsyncMock(side_effect=RuntimeError("disk full"))):
            state = await self.service.update_room_state("public-room", BOB.id, update(EventType.PAUSE, 3.0, False))

        self.assertEqual(state.video_position, 3.0)

    async def test_store_failure_surfaces_as_upstream_unavailable(self):
        with patch.object(self.store, "commit", AsyncMock(side_effect=ConnectionError("db gone"))):
            with self.assertRaises(UpstreamUnavailable):
                await self.service.update_room_state("public-room", BOB.id, update(EventType.PLAY, 3.0, True))

    async def test_recent_events_requires_access(self):
        with self.assertRaises(AccessDenied):
            await self.service.recent_events("private-room", BOB.id)

        self.assertEqual(await self.service.recent_events("private-room", ALICE.id), [])

    async def test_room_locks_are_collected(self):
        await self.service.update_room_state("public-room", BOB.id, update(EventType.PLAY, 1.0, True))
        self.assertNotIn("public-room", self.service._room_locks)

if __name__ == "__main__":
    unittest.main(verbosity=2)
