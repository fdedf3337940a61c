# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI              import konsol
from typing           import Any, Awaitable, Callable
from weakref          import WeakValueDictionary
from Libs             import upstream_call
from ..Models         import EventType, RoomPlaybackState, StreamingEvent, StateUpdate, SyncSnapshot
from .PlaybackStore   import PlaybackStateStore, Clock, utc_now
from .AccessPolicy    import AccessPolicy
from .seek_debouncer  import SeekDebouncer, PendingSeek, SEEK_DEBOUNCE_WINDOW
from .sync_calculator import project_state
import asyncio

SeekListener = Callable[[PendingSeek, RoomPlaybackState], Awaitable[None]]

class StreamingService:
    """
    Oynatım durumu üzerindeki tüm işlemler. WebSocket gateway'i ve HTTP API aynı
    servisi kullanır, iki taşıma katmanında ayrı mantık yoktur.
    """

    def __init__(
        self,
        store         : PlaybackStateStore,
        policy        : AccessPolicy,
        clock         : Clock = utc_now,
        seek_window   : float = SEEK_DEBOUNCE_WINDOW,
        on_seek_commit: SeekListener | None = None,
    ):
        self.store          = store
        self.policy         = policy
        self.clock          = clock
        self.on_seek_commit = on_seek_commit
        self.debouncer      = SeekDebouncer(self._commit_seek, window=seek_window)
        self._room_locks: WeakValueDictionary[str, asyncio.Lock] = WeakValueDictionary()

    # ============== Store çağrıları ==============

    async def _call_store(self, islem: str, fn: Callable[..., Awaitable[Any]], *args) -> Any:
        return await upstream_call(f"Depo ({islem})", fn, *args)

    def _room_lock(self, room_id: str) -> asyncio.Lock:
        # Aynı odaya yazımlar sırayla; kilit kimse tutmadığında toplanır
        lock = self._room_locks.get(room_id)
        if lock is None:
            lock = asyncio.Lock()
            self._room_locks[room_id] = lock
        return lock

    async def get_or_init(self, room_id: str, user_id: str | None = None) -> RoomPlaybackState:
        return await self._call_store("get_or_init", self.store.get_or_init, room_id, user_id)

    async def commit(self, room_id: str, user_id: str, update: StateUpdate) -> RoomPlaybackState:
        async with self._room_lock(room_id):
            return await self._call_store(
                "commit",
                self.store.commit, room_id, update.video_position, update.is_playing, update.video_duration, user_id,
            )

    async def record_event(self, room_id: str, user_id: str, event_type: EventType, event_data: dict[str, Any]) -> StreamingEvent | None:
        """Olay kaydı en iyi çaba ile yazılır; hata oynatımı bozmaz"""
        try:
            return await self.store.append_event(room_id, user_id, event_type, event_data)
        except Exception as hata:
            konsol.log(f"[yellow]Olay kaydı yazılamadı:[/] {room_id} {event_type.value} » {type(hata).__name__}: {hata}")
            return None

    # ============== Domain işlemleri ==============

    async def get_room_state(self, room_id: str, user_id: str, check_access: bool = True) -> RoomPlaybackState:
        if check_access:
            await self.policy.ensure_access(room_id, user_id)
        return await self.get_or_init(room_id, user_id)

    async def update_room_state(
        self,
        room_id      : str,
        user_id      : str,
        update       : StateUpdate,
        session_id   : str | None = None,
        wait         : bool = True,
        check_access : bool = True,
    ) -> RoomPlaybackState | None:
        """
        Durumu güncelle. Seek'ler debouncer'dan geçer: `wait=False` ise hemen None döner,
        commit sonrası `on_seek_commit` tetiklenir. Diğer olaylar anında yazılır.
        """
        if check_access:
            await self.policy.ensure_access(room_id, user_id)

        if update.event_type is EventType.SEEK:
            pending = self.debouncer.schedule(room_id, user_id, update, session_id)
            if not wait:
                return None
            return await pending.waiter()

        state = await self.commit(room_id, user_id, update)
        await self.record_event(room_id, user_id, update.event_type, {
            "position"  : update.video_position,
            "isPlaying" : update.is_playing,
            **update.event_data,
        })
        return state

    async def _commit_seek(self, pending: PendingSeek) -> RoomPlaybackState:
        update = pending.update
        state  = await self.commit(pending.room_id, pending.user_id, update)

        await self.record_event(pending.room_id, pending.user_id, EventType.SEEK, {
            "fromPosition" : update.event_data.get("fromPosition"),
            "toPosition"   : update.video_position,
        })

        if self.on_seek_commit:
            try:
                await self.on_seek_commit(pending, state)
            except Exception as hata:
                konsol.log(f"[red]Seek yayını başarısız:[/] {pending.room_id} » {hata}")

        return state

    async def sync_participant(
        self, room_id: str, user_id: str, event_type: EventType = EventType.JOIN, check_access: bool = True
    ) -> SyncSnapshot:
        """Kayıtlı durumu şimdiye taşı ve katılım/senkron olayını kaydet"""
        state    = await self.get_room_state(room_id, user_id, check_access=check_access)
        now      = self.clock()
        position = project_state(state, now)

        await self.record_event(room_id, user_id, event_type, {"syncPosition": position})

        return SyncSnapshot(state=state, video_position=position, sync_timestamp=now)

    async def recent_events(self, room_id: str, user_id: str, limit: int = 50) -> list[StreamingEvent]:
        await self.policy.ensure_access(room_id, user_id)
        return await self._call_store("recent_events", self.store.recent_events, room_id, limit)

    async def shutdown(self):
        await self.debouncer.shutdown()
