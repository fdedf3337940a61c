# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .StreamingModels import (
    epoch_ms,
    EventType,
    ClientEvent,
    ConnectionState,
    RoomType,
    UserIdentity,
    Room,
    Participation,
    RoomPlaybackState,
    StreamingEvent,
    StateUpdate,
    SyncSnapshot,
    Session,
)
from .Payloads import (
    RoomPayload,
    VideoEventPayload,
    StateUpdatePayload,
    CreateRoomPayload,
    UpdateRoomPayload,
    JoinRoomPayload,
    StreamUrlPayload,
    parse_payload,
)
