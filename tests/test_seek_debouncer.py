# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from datetime import datetime, timezone
import asyncio, unittest

from Public.WebSocket.Models import EventType, StateUpdate, RoomPlaybackState
from Public.WebSocket.Libs   import SeekDebouncer, SEEK_DEBOUNCE_WINDOW

def seek(position: float) -> StateUpdate:
    return StateUpdate(event_type=EventType.SEEK, video_position=position, is_playing=True)

class TestSeekDebouncer(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.commits = []

        async def committer(pending):
            self.commits.append(pending)
            return RoomPlaybackState(
                room_id        = pending.room_id,
                video_position = pending.update.video_position,
                is_playing     = pending.update.is_playing,
                last_updated   = datetime.now(timezone.utc),
            )

        self.debouncer = SeekDebouncer(committer, window=0.05)

    async def test_default_window(self):
        self.assertEqual(SEEK_DEBOUNCE_WINDOW, 0.5)

    async def test_burst_collapses_to_last_seek(self):
        for position in (10.0, 20.0, 30.0, 40.0):
            self.debouncer.schedule("room", "u1", seek(position), session_id=f"s{int(position)}")
            await asyncio.sleep(0.01)

        self.assertTrue(self.debouncer.is_pending("room"))
        await asyncio.sleep(0.15)

        self.assertEqual(len(self.commits), 1)
        self.assertEqual(self.commits[0].update.video_position, 40.0)
        self.assertEqual(self.commits[0].session_ids, {"s10", "s20", "s30", "s40"})
        self.assertFalse(self.debouncer.is_pending("room"))

    async def test_rooms_are_independent(self):
        self.debouncer.schedule("a", "u1", seek(1.0))
        self.debouncer.schedule("b", "u1", seek(2.0))
        await asyncio.sleep(0.15)

        self.assertEqual(sorted(p.room_id for p in self.commits), ["a", "b"])

    async def test_superseded_waiters_get_final_state(self):
        first  = self.debouncer.schedule("room", "u1", seek(5.0)).waiter()
        second = self.debouncer.schedule("room", "u2", seek(50.0)).waiter()

        results = await asyncio.wait_for(asyncio.gather(first, second), timeout=1)

        self.assertEqual([state.video_position for state in results], [50.0, 50.0])
        self.assertEqual(len(self.commits), 1)

    async def test_shutdown_discards_pending(self):
        waiter = self.debouncer.schedule("room", "u1", seek(5.0)).waiter()
        await self.debouncer.shutdown()
        await asyncio.sleep(0.1)

        self.assertEqual(self.commits, [])
        self.assertTrue(waiter.cancelled())
        self.assertFalse(self.debouncer.is_pending("room"))

    async def test_commit_failure_reaches_waiters(self):
        async def broken(pending):
            raise RuntimeError("db down")

        debouncer = SeekDebouncer(broken, window=0.01)
        waiter    = debouncer.schedule("room", "u1", seek(1.0)).waiter()

        with self.assertRaises(RuntimeError):
            await asyncio.wait_for(waiter, timeout=1)

if __name__ == "__main__":
    unittest.main(verbosity=2)
