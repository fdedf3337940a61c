# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from typing            import Any, Callable, assert_never
from datetime          import datetime
from Libs              import StreamError, Unauthenticated, upstream_call
from Settings          import JWT_SECRET, JWT_ALGORITHM, EVENT_LOG_LIMIT, ACCESS_CACHE_TTL, WS_RATE_LIMIT, WS_RATE_WINDOW, WS_RATE_MAX_USERS, WS_MAX_PAYLOAD
from ..Models          import EventType, ConnectionState, UserIdentity, RoomPlaybackState, Session, epoch_ms
from .PlaybackStore    import PlaybackStateStore, InMemoryPlaybackStateStore, Clock, utc_now
from .Directory        import IdentityDirectory, InMemoryIdentityDirectory, TokenVerifier, JWTTokenVerifier, RoomDirectory, InMemoryRoomDirectory
from .AccessPolicy     import AccessPolicy
from .RoomService      import RoomService
from .SessionRegistry  import SessionRegistry
from .rate_limiter     import SlidingWindowLimiter
from .seek_debouncer   import PendingSeek, SEEK_DEBOUNCE_WINDOW
from .StreamingService import StreamingService
import asyncio, time

def broadcast_type(kind: EventType) -> str:
    """Olay türü -> odaya yayınlanan mesaj türü"""
    match kind:
        case EventType.PLAY:
            return "video-play"
        case EventType.PAUSE:
            return "video-pause"
        case EventType.SEEK:
            return "video-seek"
        case EventType.SYNC:
            return "video-sync"
        case EventType.JOIN:
            return "user-joined"
        case EventType.LEAVE:
            return "user-left"
        case _:
            assert_never(kind)

def error_frame(hata: StreamError) -> dict:
    return {"type": "error", **hata.to_dict()}

def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None

    sema, _, token = authorization.partition(" ")
    if sema.lower() != "bearer" or not token.strip():
        return None

    return token.strip()

class StreamingGateway:
    """
    Gerçek zamanlı senkronizasyon geçidi.

    Süreç başına bir tane oluşturulur (lifespan), tüm işbirlikçiler dışarıdan verilir.
    Bağlantı kabulü, kimlik doğrulama, oda üyeliği, hız sınırı ve yayınlar buradan geçer.
    """

    def __init__(
        self,
        store            : PlaybackStateStore,
        directory        : RoomDirectory,
        identity         : IdentityDirectory,
        verifier         : TokenVerifier,
        clock            : Clock = utc_now,
        monotonic        : Callable[[], float] = time.monotonic,
        rate_limit       : int   = 100,
        rate_window      : float = 60.0,
        rate_max_users   : int   = 10_000,
        access_cache_ttl : float = 30.0,
        seek_window      : float = SEEK_DEBOUNCE_WINDOW,
        max_payload      : int   = 64 * 1024,
    ):
        self.store            = store
        self.directory        = directory
        self.identity         = identity
        self.verifier         = verifier
        self.clock            = clock
        self.monotonic        = monotonic
        self.access_cache_ttl = access_cache_ttl
        self.max_payload      = max_payload

        self.policy   = AccessPolicy(directory)
        self.rooms    = RoomService(self.policy)
        self.registry = SessionRegistry()
        self.limiter  = SlidingWindowLimiter(rate_limit, rate_window, rate_max_users, clock=monotonic)
        self.service  = StreamingService(store, self.policy, clock=clock, seek_window=seek_window, on_seek_commit=self._seek_committed)
        self.running  = False

    # ============== Yaşam döngüsü ==============

    async def start(self):
        self.running = True
        konsol.log("[green]Streaming gateway başlatıldı[/]")

    async def stop(self):
        """Bekleyen seek'leri at, açık bağlantıları kapat"""
        self.running = False
        await self.service.shutdown()

        for session in list(self.registry.sessions.values()):
            session.state = ConnectionState.DISCONNECTED
            try:
                await session.websocket.close(code=1001)
            except Exception as hata:
                konsol.log(f"[yellow]Bağlantı kapatılamadı:[/] {session.session_id} » {type(hata).__name__}")

        self.registry.sessions.clear()
        self.registry.rooms.clear()
        konsol.log("[yellow]Streaming gateway durduruldu[/]")

    # ============== Bağlantı ==============

    async def authenticate(self, token: str | None) -> UserIdentity:
        user_id = await self.verifier.verify_token(token)
        user    = await upstream_call("Kimlik dizini", self.identity.find_user_by_id, user_id, message="Kimlik dizinine ulaşılamıyor")
        if user is None:
            raise Unauthenticated("Kullanıcı bulunamadı")
        return user

    async def open_session(self, websocket: Any, token: str | None) -> Session:
        """Handshake: token doğrulanmadan hiçbir oda olayı işlenmez"""
        session       = Session(websocket=websocket)
        session.state = ConnectionState.AUTHENTICATING

        try:
            session.user = await self.authenticate(token)
        except StreamError:
            session.state = ConnectionState.REJECTED
            raise

        session.state = ConnectionState.AUTHENTICATED
        self.registry.register(session)
        konsol.log(f"[cyan]🔌 Bağlandı:[/] {session.user.username} [dim]({session.session_id})[/]")
        return session

    async def close_session(self, session: Session, reason: str = "disconnect"):
        """Bağlantı koptu: odadaysa ayrılma olayı üret, kayıttan düş"""
        if session.state is ConnectionState.DISCONNECTED:
            return

        room_id = self.registry.unregister(session)
        session.state = ConnectionState.DISCONNECTED

        if room_id and session.user:
            await self.announce_leave(session.user, room_id, reason)

        if session.user:
            konsol.log(f"[cyan]🔌 Ayrıldı:[/] {session.user.username} [dim]({session.session_id}, {reason})[/]")

    def check_rate(self, session: Session):
        self.limiter.hit(session.user_id)

    async def ensure_access(self, session: Session, room_id: str):
        """Politikayı oturum başına kısa süre önbelleğe alarak uygula"""
        now    = self.monotonic()
        bitis  = session.access_cache.get(room_id)
        if bitis is not None and bitis > now:
            return

        await self.policy.ensure_access(room_id, session.user_id)
        session.access_cache[room_id] = now + self.access_cache_ttl

    def forget_access(self, room_id: str, user_id: str | None = None):
        """Önbellekteki oda erişim kararlarını sil (user_id yoksa herkesin)"""
        for session in self.registry.sessions.values():
            if user_id is None or session.user_id == user_id:
                session.access_cache.pop(room_id, None)

    async def revoke_access(self, room_id: str, user_id: str | None, reason: str) -> int:
        """
        Odadan çıkarılan / ayrılan kullanıcının (user_id yoksa herkesin) canlı oturumlarını
        odadan düşür. Oturuma `room-left` gider, odada kalanlara `user-left` yayınlanır.
        """
        self.forget_access(room_id, user_id)

        dusenler = [
            session
                for session in self.registry.sessions_in(room_id)
                    if user_id is None or session.user_id == user_id
        ]
        for session in dusenler:
            self.registry.leave_room(session)

        for session in dusenler:
            await self.send(session, {
                "type"      : "room-left",
                "roomId"    : room_id,
                "reason"    : reason,
                "timestamp" : epoch_ms(self.clock()),
            })
            await self.announce_leave(session.user, room_id, reason)

        return len(dusenler)

    async def recheck_room(self, room_id: str, reason: str = "access-revoked") -> int:
        """Oda ayarları değişti: erişimi kalmayan canlı oturumları düşür"""
        self.forget_access(room_id)

        dusen = 0
        for user_id in {session.user_id for session in self.registry.sessions_in(room_id)}:
            if not await self.policy.can_access(room_id, user_id):
                dusen += await self.revoke_access(room_id, user_id, reason)
        return dusen

    # ============== Yayınlar ==============

    async def send(self, session: Session, message: dict) -> bool:
        return await self.registry.send(session, message)

    async def send_error(self, session: Session, hata: StreamError) -> bool:
        return await self.registry.send(session, error_frame(hata))

    def state_message(
        self, kind: EventType, state: RoomPlaybackState, user: UserIdentity | None, event_data: dict | None = None
    ) -> dict:
        return {
            **(event_data or {}),
            "type"          : broadcast_type(kind),
            "roomId"        : state.room_id,
            "videoPosition" : state.video_position,
            "isPlaying"     : state.is_playing,
            "videoDuration" : state.video_duration,
            "user"          : user.to_dict() if user else None,
            "timestamp"     : epoch_ms(state.last_updated),
        }

    def confirmation(self, kind: EventType, state: RoomPlaybackState) -> dict:
        return {
            "type"      : "event-confirmed",
            "eventType" : kind.value,
            "timestamp" : epoch_ms(self.clock()),
            "state"     : state.to_dict(),
        }

    async def publish_state_change(
        self,
        kind               : EventType,
        state              : RoomPlaybackState,
        user               : UserIdentity | None,
        event_data         : dict | None = None,
        exclude_session_id : str | None  = None,
    ) -> int:
        """Oynatım değişikliğini odadaki canlı oturumlara duyur (WS ve HTTP kaynaklı)"""
        return await self.registry.broadcast(
            state.room_id,
            self.state_message(kind, state, user, event_data),
            exclude_session_id = exclude_session_id,
        )

    async def announce_join(self, session: Session, room_id: str, zaman: datetime):
        await self.registry.broadcast(room_id, {
            "type"      : broadcast_type(EventType.JOIN),
            "roomId"    : room_id,
            "user"      : session.user.to_dict(),
            "timestamp" : epoch_ms(zaman),
            "users"     : self.registry.roster(room_id),
        }, exclude_session_id=session.session_id)

    async def announce_leave(self, user: UserIdentity, room_id: str, reason: str):
        """Ayrılma olayını kaydet ve odada kalanlara bildir (oturum odadan çıkmış olmalı)"""
        await self.service.record_event(room_id, user.id, EventType.LEAVE, {"reason": reason})

        await self.registry.broadcast(room_id, {
            "type"      : broadcast_type(EventType.LEAVE),
            "roomId"    : room_id,
            "user"      : user.to_dict(),
            "reason"    : reason,
            "timestamp" : epoch_ms(self.clock()),
            "users"     : self.registry.roster(room_id),
        })

    async def _seek_committed(self, pending: PendingSeek, state: RoomPlaybackState):
        """Debounce penceresi kapandı: tek yayın + penceredeki gönderenlere onay"""
        sender = self.registry.sessions.get(pending.session_id) if pending.session_id else None
        user   = sender.user if sender else await self.identity.find_user_by_id(pending.user_id)

        await self.publish_state_change(
            EventType.SEEK, state, user,
            event_data         = pending.update.event_data,
            exclude_session_id = pending.session_id,
        )

        onay = self.confirmation(EventType.SEEK, state)
        # Pencere içinde odadan çıkan/oda değiştiren oturumlar onay almaz
        hedefler = [self.registry.sessions[sid] for sid in pending.session_ids if sid in self.registry.sessions]
        hedefler = [session for session in hedefler if session.current_room_id == pending.room_id]
        if hedefler:
            await asyncio.gather(*(self.registry.send(session, onay) for session in hedefler))

def build_gateway() -> StreamingGateway:
    """Ayarlardan süreç içi (bellek) işbirlikçilerle gateway kur"""
    identity = InMemoryIdentityDirectory()

    return StreamingGateway(
        store            = InMemoryPlaybackStateStore(event_limit=EVENT_LOG_LIMIT),
        directory        = InMemoryRoomDirectory(),
        identity         = identity,
        verifier         = JWTTokenVerifier(JWT_SECRET, JWT_ALGORITHM, directory=identity),
        rate_limit       = WS_RATE_LIMIT,
        rate_window      = WS_RATE_WINDOW,
        rate_max_users   = WS_RATE_MAX_USERS,
        access_cache_ttl = ACCESS_CACHE_TTL,
        max_payload      = WS_MAX_PAYLOAD,
    )
