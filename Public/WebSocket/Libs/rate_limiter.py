# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from collections import OrderedDict, deque
from typing      import Callable
from Libs        import RateLimited
import time

class SlidingWindowLimiter:
    """
    Kullanıcı başına kayan pencere sayacı (varsayılan 100 olay / 60 sn).

    Her kullanıcı için en fazla `limit` zaman damgası tutulur, takip edilen
    kullanıcı sayısı `max_users` ile sınırlıdır. Penceresi dolan kullanıcılar
    yer açılırken silinir, hâlâ yer yoksa en uzun süre sessiz kalan çıkarılır.
    """

    def __init__(self, limit: int = 100, window: float = 60.0, max_users: int = 10_000, clock: Callable[[], float] = time.monotonic):
        self.limit     = limit
        self.window    = window
        self.max_users = max_users
        self.clock     = clock
        self._hits: OrderedDict[str, deque[float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._hits)

    def hit(self, user_id: str) -> None:
        """Olayı say, tavan aşıldıysa RateLimited yükselt (reddedilen olay sayılmaz)"""
        now  = self.clock()
        hits = self._hits.get(user_id)

        if hits is None:
            self._make_room(now)
            hits = deque(maxlen=self.limit)
            self._hits[user_id] = hits
        else:
            self._hits.move_to_end(user_id)

        # Pencere dışına düşenleri at
        while hits and now - hits[0] >= self.window:
            hits.popleft()

        if len(hits) >= self.limit:
            raise RateLimited(retry_after=self.window - (now - hits[0]))

        hits.append(now)

    def prune(self, now: float | None = None) -> int:
        """Son olayı pencere dışına düşmüş kullanıcıları sil"""
        now     = self.clock() if now is None else now
        eskiler = [uid for uid, hits in self._hits.items() if not hits or now - hits[-1] >= self.window]
        for uid in eskiler:
            del self._hits[uid]
        return len(eskiler)

    def _make_room(self, now: float):
        if len(self._hits) < self.max_users:
            return

        self.prune(now)
        while len(self._hits) >= self.max_users:
            self._hits.popitem(last=False)

    def reset(self, user_id: str | None = None):
        if user_id is None:
            self._hits.clear()
        else:
            self._hits.pop(user_id, None)
