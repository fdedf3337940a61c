# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing   import Any, Literal
from Libs     import ValidationFailed
from .StreamingModels import EventType, RoomType, StateUpdate

class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

class RoomPayload(CamelModel):
    room_id: str = Field(alias="roomId", min_length=1, max_length=128)

class VideoEventPayload(RoomPayload):
    video_position : float                 = Field(alias="videoPosition", ge=0)
    is_playing     : bool                  = Field(alias="isPlaying")
    video_duration : float | None          = Field(default=None, alias="videoDuration", ge=0)
    event_data     : dict[str, Any] | None = Field(default=None, alias="eventData")

    def to_update(self, event_type: EventType) -> StateUpdate:
        return StateUpdate(
            event_type     = event_type,
            video_position = self.video_position,
            is_playing     = self.is_playing,
            video_duration = self.video_duration,
            event_data     = dict(self.event_data or {}),
        )

class StateUpdatePayload(CamelModel):
    """HTTP PUT gövdesi"""
    event_type     : Literal["play", "pause", "seek", "sync"] = Field(alias="eventType")
    video_position : float                 = Field(alias="videoPosition", ge=0)
    is_playing     : bool                  = Field(alias="isPlaying")
    video_duration : float | None          = Field(default=None, alias="videoDuration", ge=0)
    event_data     : dict[str, Any] | None = Field(default=None, alias="eventData")

    def to_update(self) -> StateUpdate:
        return StateUpdate(
            event_type     = EventType(self.event_type),
            video_position = self.video_position,
            is_playing     = self.is_playing,
            video_duration = self.video_duration,
            event_data     = dict(self.event_data or {}),
        )

class CreateRoomPayload(CamelModel):
    name             : str         = Field(min_length=1, max_length=100)
    description      : str         = Field(default="", max_length=1000)
    type             : RoomType
    stream_url       : str         = Field(alias="streamUrl", min_length=1)
    max_participants : int         = Field(default=10, alias="maxParticipants", ge=1, le=50)
    is_private       : bool        = Field(default=False, alias="isPrivate")
    password         : str | None  = Field(default=None, min_length=4, max_length=128)

class UpdateRoomPayload(CamelModel):
    """Host oda güncellemesi, sadece gönderilen alanlar değişir"""
    name             : str | None  = Field(default=None, min_length=1, max_length=100)
    description      : str | None  = Field(default=None, max_length=1000)
    stream_url       : str | None  = Field(default=None, alias="streamUrl", min_length=1)
    max_participants : int | None  = Field(default=None, alias="maxParticipants", ge=1, le=50)
    is_private       : bool | None = Field(default=None, alias="isPrivate")
    password         : str | None  = Field(default=None, min_length=4, max_length=128)

class JoinRoomPayload(CamelModel):
    password: str | None = None

class StreamUrlPayload(CamelModel):
    url  : str = Field(min_length=1)
    type : RoomType

def parse_payload(model: type[CamelModel], data: dict) -> CamelModel:
    """Ham mesajı modele çevir, hataları ValidationFailed olarak yükselt"""
    try:
        return model.model_validate(data)
    except ValidationError as hata:
        mesajlar = [f"{'.'.join(str(p) for p in e['loc']) or 'payload'}: {e['msg']}" for e in hata.errors()]
        raise ValidationFailed(" | ".join(mesajlar)) from hata
