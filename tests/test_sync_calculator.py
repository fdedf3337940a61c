# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from datetime import datetime, timedelta, timezone
import unittest

from Public.WebSocket.Models import RoomPlaybackState
from Public.WebSocket.Libs   import project_position, project_state

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

class TestProjectPosition(unittest.TestCase):
    def test_playing_advances_by_elapsed_time(self):
        self.assertEqual(project_position(10.0, True, T0, T0 + timedelta(seconds=5)), 15.0)

    def test_paused_position_is_unchanged(self):
        self.assertEqual(project_position(10.0, False, T0, T0 + timedelta(seconds=5)), 10.0)

    def test_never_negative_on_clock_skew(self):
        self.assertEqual(project_position(1.0, True, T0, T0 - timedelta(seconds=30)), 0.0)

    def test_clamped_to_known_duration(self):
        self.assertEqual(project_position(95.0, True, T0, T0 + timedelta(seconds=20), video_duration=100.0), 100.0)

    def test_zero_duration_means_unknown(self):
        self.assertEqual(project_position(5.0, True, T0, T0 + timedelta(seconds=5), video_duration=0), 10.0)

    def test_project_state_uses_stored_fields(self):
        state = RoomPlaybackState(room_id="r", video_position=42.0, is_playing=True, last_updated=T0, video_duration=60.0)
        self.assertEqual(project_state(state, T0 + timedelta(seconds=3)), 45.0)
        self.assertEqual(project_state(state, T0 + timedelta(minutes=5)), 60.0)

if __name__ == "__main__":
    unittest.main(verbosity=2)
