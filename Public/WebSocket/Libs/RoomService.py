# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI           import konsol
from Libs          import AccessDenied, NotFound, ValidationFailed
from ..Models      import UserIdentity, Room, Participation, CreateRoomPayload, UpdateRoomPayload
from .Directory    import new_room, hash_password
from .AccessPolicy import AccessPolicy
from .stream_url   import check_url_format

class RoomService:
    """
    Oda kayıtları üzerindeki işlemler: oluşturma, katılım ve host yönetimi.

    Tüm dizin çağrıları `AccessPolicy.call_directory` üzerinden gider; dizin
    erişilemezse UpstreamUnavailable yükselir.
    """

    def __init__(self, policy: AccessPolicy):
        self.policy = policy

    @property
    def directory(self):
        return self.policy.directory

    async def create_room(self, host: UserIdentity, payload: CreateRoomPayload) -> Room:
        check_url_format(payload.stream_url, payload.type)
        if payload.is_private and not payload.password:
            raise ValidationFailed("Özel oda için şifre gerekli")

        room = await self.policy.call_directory("create_room", new_room(
            host.id, payload.name, payload.type, payload.stream_url,
            description      = payload.description,
            max_participants = payload.max_participants,
            is_private       = payload.is_private,
            password         = payload.password,
        ))
        konsol.log(f"[green]🎬 Oda oluşturuldu:[/] {room.name} [dim]({room.id})[/] » {host.username}")
        return room

    async def public_rooms(self, limit: int = 20, offset: int = 0) -> list[Room]:
        return await self.policy.call_directory("list_public_rooms", limit, offset)

    async def host_rooms(self, host_id: str, limit: int = 20, offset: int = 0) -> list[Room]:
        rooms = await self.policy.call_directory("list_host_rooms", host_id)
        return rooms[offset:offset + limit]

    async def joined_rooms(self, user_id: str, limit: int = 20, offset: int = 0) -> list[Room]:
        return await self.policy.call_directory("list_user_rooms", user_id, limit, offset)

    async def get_room(self, room_id: str, user_id: str) -> Room:
        await self.policy.ensure_access(room_id, user_id)
        return await self.policy.get_room(room_id)

    async def join(self, room_id: str, user_id: str, password: str | None) -> Participation:
        """Katılım kaydı oluştur; özel odalarda şifre zorunlu"""
        room = await self.policy.get_room(room_id)

        if room.is_private and room.host_id != user_id:
            if not password:
                raise AccessDenied("Özel oda için şifre gerekli")
            if not self.directory.check_password(room, password):
                raise AccessDenied("Oda şifresi hatalı")

        mevcut = await self.policy.participation(room_id, user_id)
        if not (mevcut and mevcut.is_active) and room.current_participants >= room.max_participants:
            raise AccessDenied("Oda dolu")

        return await self.policy.call_directory("add_participant", room_id, user_id)

    async def leave(self, room_id: str, user_id: str) -> bool:
        await self.policy.get_room(room_id)
        return await self.policy.call_directory("remove_participant", room_id, user_id)

    async def participants(self, room_id: str, user_id: str) -> list[Participation]:
        await self.policy.ensure_access(room_id, user_id)
        return await self.policy.call_directory("list_participants", room_id)

    # ============== Host işlemleri ==============

    async def update_room(self, room_id: str, host_id: str, payload: UpdateRoomPayload) -> Room:
        room    = await self.policy.ensure_host(room_id, host_id)
        changes = payload.model_dump(exclude_none=True, exclude={"password"})

        if payload.stream_url is not None:
            check_url_format(payload.stream_url, room.type)

        if payload.is_private and not (payload.password or room.password_hash):
            raise ValidationFailed("Özel oda için şifre gerekli")

        ozel = room.is_private if payload.is_private is None else payload.is_private
        if not ozel:
            changes["password_hash"] = None
        elif payload.password:
            changes["password_hash"] = hash_password(payload.password)

        guncel = await self.policy.call_directory("update_room", room_id, changes)
        if guncel is None:
            raise NotFound()

        konsol.log(f"[cyan]✏️  Oda güncellendi:[/] {guncel.name} [dim]({room_id})[/] » {', '.join(sorted(changes)) or '-'}")
        return guncel

    async def delete_room(self, room_id: str, host_id: str) -> bool:
        await self.policy.ensure_host(room_id, host_id)
        silindi = await self.policy.call_directory("delete_room", room_id)
        if silindi:
            konsol.log(f"[red]🗑  Oda silindi:[/] {room_id}")
        return silindi

    async def remove_participant(self, room_id: str, participant_id: str, host_id: str) -> bool:
        await self.policy.ensure_host(room_id, host_id)
        if participant_id == host_id:
            raise ValidationFailed("Oda sahibi kendini odadan çıkaramaz")

        if not await self.policy.call_directory("remove_participant", room_id, participant_id):
            raise NotFound("Katılımcı bulunamadı")

        konsol.log(f"[yellow]🚫 Katılımcı çıkarıldı:[/] {participant_id} » {room_id}")
        return True
