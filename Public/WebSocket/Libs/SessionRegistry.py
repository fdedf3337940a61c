# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from ..Models import Session
import json, asyncio

class SessionRegistry:
    """
    Canlı bağlantılar ve odalar arasındaki eşleme.

    Bir oturum aynı anda en fazla bir odadadır. Sadece gateway handler'ları
    tarafından, tek event loop turu içinde değiştirilir; kilit kullanılmaz.
    """

    def __init__(self, send_timeout: float = 1.5):
        self.send_timeout = send_timeout
        self.sessions: dict[str, Session]            = {}
        self.rooms: dict[str, dict[str, Session]]    = {}  # room_id -> session_id -> Session

    def register(self, session: Session) -> None:
        self.sessions[session.session_id] = session

    def unregister(self, session: Session) -> str | None:
        """Oturumu tamamen kaldır, odadaysa çıkılan odayı döndür"""
        room_id = self.leave_room(session)
        self.sessions.pop(session.session_id, None)
        return room_id

    def join_room(self, session: Session, room_id: str) -> str | None:
        """Oturumu odaya bağla; önceki oda (varsa ve farklıysa) döndürülür"""
        previous = session.current_room_id
        if previous == room_id:
            return None

        if previous is not None:
            self._detach(session, previous)

        self.rooms.setdefault(room_id, {})[session.session_id] = session
        session.current_room_id = room_id
        return previous

    def leave_room(self, session: Session) -> str | None:
        room_id = session.current_room_id
        if room_id is None:
            return None

        self._detach(session, room_id)
        return room_id

    def _detach(self, session: Session, room_id: str):
        members = self.rooms.get(room_id)
        if members is not None:
            members.pop(session.session_id, None)
            if not members:
                del self.rooms[room_id]

        session.current_room_id = None
        session.access_cache.pop(room_id, None)

    def sessions_in(self, room_id: str, exclude_session_id: str | None = None) -> list[Session]:
        return [
            session
                for session_id, session in self.rooms.get(room_id, {}).items()
                    if session_id != exclude_session_id
        ]

    def roster(self, room_id: str) -> list[dict]:
        """Odadaki canlı oturumların kullanıcı bilgileri"""
        return [
            {**session.user.to_dict(), "sessionId": session.session_id}
                for session in self.rooms.get(room_id, {}).values()
                    if session.user
        ]

    async def send(self, session: Session, message: dict) -> bool:
        try:
            await asyncio.wait_for(session.websocket.send_text(json.dumps(message, ensure_ascii=False)), timeout=self.send_timeout)
            return True
        except Exception as hata:
            konsol.log(f"[yellow]Gönderim başarısız:[/] {session.session_id} » {type(hata).__name__}")
            return False

    async def broadcast(self, room_id: str, message: dict, exclude_session_id: str | None = None) -> int:
        """Odadaki herkese gönder (yavaş istemciler diğerlerini bekletmez)"""
        targets = self.sessions_in(room_id, exclude_session_id)
        if not targets:
            return 0

        message_str = json.dumps(message, ensure_ascii=False)

        async def _safe_send(session: Session) -> bool:
            try:
                await asyncio.wait_for(session.websocket.send_text(message_str), timeout=self.send_timeout)
                return True
            except Exception as hata:
                konsol.log(f"[yellow]Yayın başarısız:[/] {session.session_id} » {type(hata).__name__}")
                return False

        sonuclar = await asyncio.gather(*(_safe_send(session) for session in targets))
        return sum(sonuclar)
