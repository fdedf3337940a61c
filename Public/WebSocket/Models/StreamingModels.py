# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
from datetime    import datetime
from enum        import Enum
from typing      import Any
import uuid

def epoch_ms(an: datetime) -> int:
    """datetime -> milisaniye (istemcilerin beklediği zaman damgası)"""
    return int(an.timestamp() * 1000)

class EventType(str, Enum):
    """Olay kaydındaki olay türleri (kapalı küme)"""
    PLAY  = "play"
    PAUSE = "pause"
    SEEK  = "seek"
    JOIN  = "join"
    LEAVE = "leave"
    SYNC  = "sync"

class ClientEvent(str, Enum):
    """İstemciden gelen WebSocket mesaj türleri"""
    JOIN_ROOM    = "join-room"
    LEAVE_ROOM   = "leave-room"
    VIDEO_PLAY   = "video-play"
    VIDEO_PAUSE  = "video-pause"
    VIDEO_SEEK   = "video-seek"
    REQUEST_SYNC = "request-sync"
    HEARTBEAT    = "heartbeat"

class ConnectionState(str, Enum):
    CONNECTING     = "connecting"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED  = "authenticated"
    REJECTED       = "rejected"
    DISCONNECTED   = "disconnected"

class RoomType(str, Enum):
    YOUTUBE_LINK  = "YOUTUBE_LINK"
    EXTERNAL_LINK = "EXTERNAL_LINK"

@dataclass
class UserIdentity:
    """Doğrulanmış kullanıcının görünen bilgileri"""
    id       : str
    username : str
    name     : str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "name": self.name}

@dataclass
class Room:
    """Oda dizinindeki kayıt"""
    id                   : str
    host_id              : str
    name                 : str        = ""
    description          : str        = ""
    type                 : RoomType   = RoomType.YOUTUBE_LINK
    stream_url           : str        = ""
    is_private           : bool       = False
    max_participants     : int        = 10
    current_participants : int        = 0
    is_active            : bool       = True
    password_hash        : str | None = None

    def to_dict(self) -> dict:
        # password_hash asla dışarı çıkmaz
        return {
            "id"                  : self.id,
            "hostId"              : self.host_id,
            "name"                : self.name,
            "description"         : self.description,
            "type"                : self.type.value,
            "streamUrl"           : self.stream_url,
            "isPrivate"           : self.is_private,
            "maxParticipants"     : self.max_participants,
            "currentParticipants" : self.current_participants,
            "isActive"            : self.is_active,
        }

@dataclass
class Participation:
    room_id   : str
    user_id   : str
    joined_at : datetime
    is_active : bool = True

    def to_dict(self) -> dict:
        return {
            "roomId"   : self.room_id,
            "userId"   : self.user_id,
            "joinedAt" : self.joined_at.isoformat(),
            "isActive" : self.is_active,
        }

@dataclass
class RoomPlaybackState:
    """Odanın otoriter oynatım durumu"""
    room_id        : str
    video_position : float
    is_playing     : bool
    last_updated   : datetime
    video_duration : float | None = None
    updated_by     : str | None   = None

    def to_dict(self) -> dict:
        return {
            "roomId"        : self.room_id,
            "videoPosition" : self.video_position,
            "isPlaying"     : self.is_playing,
            "videoDuration" : self.video_duration,
            "lastUpdated"   : self.last_updated.isoformat(),
            "updatedBy"     : self.updated_by,
        }

@dataclass
class StreamingEvent:
    """Olay kaydı satırı, eklendikten sonra değişmez"""
    room_id    : str
    user_id    : str
    event_type : EventType
    event_data : dict[str, Any]
    timestamp  : datetime
    id         : str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> dict:
        return {
            "id"        : self.id,
            "roomId"    : self.room_id,
            "userId"    : self.user_id,
            "eventType" : self.event_type.value,
            "eventData" : self.event_data,
            "timestamp" : self.timestamp.isoformat(),
        }

@dataclass
class StateUpdate:
    """İstemcinin gönderdiği tam durum (pozisyon + oynatma birlikte)"""
    event_type     : EventType
    video_position : float
    is_playing     : bool
    video_duration : float | None   = None
    event_data     : dict[str, Any] = field(default_factory=dict)

@dataclass
class SyncSnapshot:
    """Geç katılana gönderilen, geçen süreye göre düzeltilmiş durum"""
    state          : RoomPlaybackState
    video_position : float
    sync_timestamp : datetime

    def to_dict(self) -> dict:
        return {
            **self.state.to_dict(),
            "videoPosition" : self.video_position,
            "syncTimestamp" : epoch_ms(self.sync_timestamp),
        }

@dataclass
class Session:
    """Tek bir canlı WebSocket bağlantısı"""
    websocket       : Any
    user            : UserIdentity | None = None
    session_id      : str                 = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state           : ConnectionState     = ConnectionState.CONNECTING
    current_room_id : str | None          = None
    access_cache    : dict[str, float]    = field(default_factory=dict)  # room_id -> geçerlilik bitişi (monotonic)

    @property
    def user_id(self) -> str | None:
        return self.user.id if self.user else None

    @property
    def in_room(self) -> bool:
        return self.current_room_id is not None
