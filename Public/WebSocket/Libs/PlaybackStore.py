# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from abc         import ABC, abstractmethod
from collections import deque
from datetime    import datetime, timezone
from typing      import Any, Callable
from ..Models    import RoomPlaybackState, StreamingEvent, EventType
import asyncio

Clock = Callable[[], datetime]

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class PlaybackStateStore(ABC):
    """
    Oda başına tek oynatım durumu + sadece eklenen olay kaydı.
    Her çağrı ağ üzerinden kalıcı depoya gidebilir ve geçici olarak başarısız olabilir.
    """

    @abstractmethod
    async def find_by_room_id(self, room_id: str) -> RoomPlaybackState | None: ...

    @abstractmethod
    async def get_or_init(self, room_id: str, user_id: str | None = None) -> RoomPlaybackState: ...

    @abstractmethod
    async def commit(
        self, room_id: str, video_position: float, is_playing: bool, video_duration: float | None, user_id: str
    ) -> RoomPlaybackState: ...

    @abstractmethod
    async def append_event(
        self, room_id: str, user_id: str, event_type: EventType, event_data: dict[str, Any]
    ) -> StreamingEvent: ...

    @abstractmethod
    async def recent_events(self, room_id: str, limit: int = 50) -> list[StreamingEvent]: ...

class InMemoryPlaybackStateStore(PlaybackStateStore):
    """Süreç içi depo, geliştirme ve testler için"""

    def __init__(self, clock: Clock = utc_now, event_limit: int = 500):
        self.clock       = clock
        self.event_limit = event_limit
        self.states: dict[str, RoomPlaybackState]      = {}
        self.events: dict[str, deque[StreamingEvent]]  = {}
        self._lock = asyncio.Lock()

    async def find_by_room_id(self, room_id: str) -> RoomPlaybackState | None:
        async with self._lock:
            return self.states.get(room_id)

    async def get_or_init(self, room_id: str, user_id: str | None = None) -> RoomPlaybackState:
        """Upsert: aynı oda için eş zamanlı ilk erişimler tek satır üretir"""
        async with self._lock:
            state = self.states.get(room_id)
            if state is None:
                state = RoomPlaybackState(
                    room_id        = room_id,
                    video_position = 0.0,
                    is_playing     = False,
                    last_updated   = self.clock(),
                    updated_by     = user_id,
                )
                self.states[room_id] = state
            return state

    async def commit(
        self, room_id: str, video_position: float, is_playing: bool, video_duration: float | None, user_id: str
    ) -> RoomPlaybackState:
        # Kısmi alan yok: değiştirilebilir alanların tamamı yeniden yazılır
        async with self._lock:
            previous = self.states.get(room_id)
            state = RoomPlaybackState(
                room_id        = room_id,
                video_position = max(0.0, float(video_position)),
                is_playing     = bool(is_playing),
                video_duration = video_duration if video_duration is not None else (previous.video_duration if previous else None),
                last_updated   = self.clock(),
                updated_by     = user_id,
            )
            self.states[room_id] = state
            return state

    async def append_event(
        self, room_id: str, user_id: str, event_type: EventType, event_data: dict[str, Any]
    ) -> StreamingEvent:
        async with self._lock:
            kayitlar = self.events.get(room_id)
            if kayitlar is None:
                kayitlar = deque(maxlen=self.event_limit)
                self.events[room_id] = kayitlar

            # Oda içinde zaman damgası geri gitmez
            timestamp = self.clock()
            if kayitlar and kayitlar[-1].timestamp > timestamp:
                timestamp = kayitlar[-1].timestamp

            event = StreamingEvent(
                room_id    = room_id,
                user_id    = user_id,
                event_type = event_type,
                event_data = dict(event_data),
                timestamp  = timestamp,
            )
            kayitlar.append(event)
            return event

    async def recent_events(self, room_id: str, limit: int = 50) -> list[StreamingEvent]:
        async with self._lock:
            kayitlar = self.events.get(room_id) or ()
            return list(reversed(kayitlar))[:limit]
