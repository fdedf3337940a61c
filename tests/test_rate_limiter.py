# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import unittest

from Libs                  import RateLimited
from Public.WebSocket.Libs import SlidingWindowLimiter
from tests.helpers         import FakeClock

class TestSlidingWindowLimiter(unittest.TestCase):
    def setUp(self):
        self.clock   = FakeClock()
        self.limiter = SlidingWindowLimiter(limit=100, window=60.0, max_users=3, clock=self.clock.monotonic)

    def test_hundred_and_first_event_is_rejected(self):
        for _ in range(100):
            self.limiter.hit("u1")
            self.clock.advance(0.1)

        with self.assertRaises(RateLimited) as ctx:
            self.limiter.hit("u1")

        self.assertGreater(ctx.exception.retry_after, 0)
        self.assertEqual(ctx.exception.to_dict()["code"], "RATE_LIMITED")

    def test_allowed_again_after_window(self):
        for _ in range(100):
            self.limiter.hit("u1")

        self.clock.advance(60)
        self.limiter.hit("u1")

    def test_rejected_events_are_not_counted(self):
        for _ in range(100):
            self.limiter.hit("u1")
        for _ in range(5):
            with self.assertRaises(RateLimited):
                self.limiter.hit("u1")

        self.clock.advance(60)
        for _ in range(100):
            self.limiter.hit("u1")

    def test_users_are_counted_separately(self):
        for _ in range(100):
            self.limiter.hit("u1")
        self.limiter.hit("u2")

    def test_capacity_evicts_stale_then_least_recent(self):
        self.limiter.hit("u1")
        self.clock.advance(61)
        self.limiter.hit("u2")
        self.limiter.hit("u3")

        # u1 penceresi dolmuş: yer açılırken silinir
        self.limiter.hit("u4")
        self.assertEqual(len(self.limiter), 3)
        self.assertNotIn("u1", self.limiter._hits)

        # Hepsi taze: en uzun süre sessiz kalan (u2) çıkar
        self.limiter.hit("u3")
        self.limiter.hit("u5")
        self.assertNotIn("u2", self.limiter._hits)
        self.assertIn("u3", self.limiter._hits)

if __name__ == "__main__":
    unittest.main(verbosity=2)
