# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Libs       import NotFound, AccessDenied, upstream_call
from ..Models   import Room, Participation
from .Directory import RoomDirectory

DIRECTORY_DOWN = "Oda dizinine ulaşılamıyor"

class AccessPolicy:
    """
    Bir kullanıcının odanın oynatım durumunu okuyup değiştirebilir mi olduğuna karar verir.
    HTTP ve WebSocket aynı kuralı buradan kullanır.

    Sıra: oda yok -> NotFound, host -> izin, açık oda -> izin,
    özel oda -> aktif katılım kaydı varsa izin.
    """

    def __init__(self, directory: RoomDirectory):
        self.directory = directory

    async def call_directory(self, islem: str, *args, **kwargs):
        """Oda dizini çağrısı; dizin hataları UpstreamUnavailable olur"""
        return await upstream_call(f"Oda dizini ({islem})", getattr(self.directory, islem), *args, message=DIRECTORY_DOWN, **kwargs)

    async def get_room(self, room_id: str) -> Room:
        room = await self.call_directory("find_room_by_id", room_id)
        if room is None:
            raise NotFound()
        return room

    async def participation(self, room_id: str, user_id: str) -> Participation | None:
        return await self.call_directory("find_participation", room_id, user_id)

    async def can_access(self, room_id: str, user_id: str) -> bool:
        room = await self.get_room(room_id)

        if room.host_id == user_id:
            return True

        if not room.is_private:
            return True

        participation = await self.participation(room_id, user_id)
        return bool(participation and participation.is_active)

    async def ensure_access(self, room_id: str, user_id: str) -> None:
        if not await self.can_access(room_id, user_id):
            raise AccessDenied()

    async def ensure_host(self, room_id: str, user_id: str) -> Room:
        room = await self.get_room(room_id)
        if room.host_id != user_id:
            raise AccessDenied("Bu işlemi sadece oda sahibi yapabilir")
        return room
