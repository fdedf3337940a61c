# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI               import konsol
from typing            import Awaitable, Callable
from Libs              import StreamError, AccessDenied
from ..Models          import ClientEvent, EventType, Session, RoomPayload, VideoEventPayload, parse_payload, epoch_ms
from .StreamingGateway import StreamingGateway

# İstemci mesajı -> MessageHandler metodu (her ClientEvent burada olmalı)
HANDLER_NAMES: dict[ClientEvent, str] = {
    ClientEvent.JOIN_ROOM    : "handle_join_room",
    ClientEvent.LEAVE_ROOM   : "handle_leave_room",
    ClientEvent.VIDEO_PLAY   : "handle_video_play",
    ClientEvent.VIDEO_PAUSE  : "handle_video_pause",
    ClientEvent.VIDEO_SEEK   : "handle_video_seek",
    ClientEvent.REQUEST_SYNC : "handle_request_sync",
    ClientEvent.HEARTBEAT    : "handle_heartbeat",
}

class MessageHandler:
    """Tek bağlantının WebSocket mesaj işleyicisi"""

    def __init__(self, session: Session, gateway: StreamingGateway):
        self.session = session
        self.gateway = gateway
        self.service = gateway.service

    @property
    def user(self):
        return self.session.user

    def handlers(self) -> dict[str, Callable[[dict], Awaitable[None]]]:
        return {event.value: getattr(self, name) for event, name in HANDLER_NAMES.items()}

    async def send_error(self, hata: StreamError):
        """Hata mesajı gönder"""
        await self.gateway.send_error(self.session, hata)

    async def send_json(self, data: dict):
        """JSON mesajı gönder"""
        await self.gateway.send(self.session, data)

    def ensure_in_room(self, room_id: str):
        """Oda olayları sadece join-room ile girilen odaya gönderilebilir"""
        if self.session.current_room_id != room_id:
            raise AccessDenied("Bu odada değilsiniz")

    # ============== Handlers ==============

    async def handle_join_room(self, message: dict):
        """JOIN mesajını işle"""
        room_id = parse_payload(RoomPayload, message).room_id
        await self.gateway.ensure_access(self.session, room_id)

        snapshot = await self.service.sync_participant(room_id, self.user.id, EventType.JOIN, check_access=False)

        zaten_odada = self.session.current_room_id == room_id
        previous    = self.gateway.registry.join_room(self.session, room_id)

        # Başka odadan geçiş: eski odada ayrılma olayı
        if previous:
            await self.gateway.announce_leave(self.user, previous, reason="switched-room")

        await self.send_json({
            "type"  : "room-state",
            **snapshot.to_dict(),
            "users" : self.gateway.registry.roster(room_id),
        })

        if not zaten_odada:
            konsol.log(f"[green]➕ {self.user.username}[/] » {room_id}")
            await self.gateway.announce_join(self.session, room_id, snapshot.sync_timestamp)

    async def handle_leave_room(self, message: dict):
        """LEAVE mesajını işle"""
        room_id = parse_payload(RoomPayload, message).room_id
        self.ensure_in_room(room_id)

        self.gateway.registry.leave_room(self.session)
        konsol.log(f"[yellow]➖ {self.user.username}[/] » {room_id}")
        await self.gateway.announce_leave(self.user, room_id, reason="left")

    async def _video_event(self, message: dict, event_type: EventType):
        payload = parse_payload(VideoEventPayload, message)
        self.ensure_in_room(payload.room_id)
        await self.gateway.ensure_access(self.session, payload.room_id)

        update = payload.to_update(event_type)
        state  = await self.service.update_room_state(
            payload.room_id, self.user.id, update,
            session_id   = self.session.session_id,
            wait         = False,
            check_access = False,
        )

        # Seek: yayın ve onay debounce penceresi kapanınca gateway'den gelir
        if state is None:
            return

        await self.gateway.publish_state_change(
            event_type, state, self.user,
            event_data         = update.event_data,
            exclude_session_id = self.session.session_id,
        )
        await self.send_json(self.gateway.confirmation(event_type, state))

    async def handle_video_play(self, message: dict):
        await self._video_event(message, EventType.PLAY)

    async def handle_video_pause(self, message: dict):
        await self._video_event(message, EventType.PAUSE)

    async def handle_video_seek(self, message: dict):
        await self._video_event(message, EventType.SEEK)

    async def handle_request_sync(self, message: dict):
        """Geç katılan / kopan istemci için güncel pozisyon"""
        room_id = parse_payload(RoomPayload, message).room_id
        self.ensure_in_room(room_id)
        await self.gateway.ensure_access(self.session, room_id)

        snapshot = await self.service.sync_participant(room_id, self.user.id, EventType.SYNC, check_access=False)
        await self.send_json({"type": "sync-response", **snapshot.to_dict()})

    async def handle_heartbeat(self, message: dict):
        await self.send_json({"type": "heartbeat-response", "timestamp": epoch_ms(self.gateway.clock())})

    async def handle_disconnect(self, reason: str = "disconnect"):
        """Bağlantı koptuğunda temizlik"""
        await self.gateway.close_session(self.session, reason)
