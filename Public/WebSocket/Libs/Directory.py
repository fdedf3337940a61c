# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from abc             import ABC, abstractmethod
from typing          import Any
from jose            import jwt
from jose.exceptions import JWTError, ExpiredSignatureError
from Libs            import Unauthenticated, NotFound
from ..Models        import UserIdentity, Room, Participation, RoomType
from .PlaybackStore  import Clock, utc_now
from passlib.context import CryptContext
import hashlib, uuid

# ============== Kimlik ==============

class IdentityDirectory(ABC):
    @abstractmethod
    async def find_user_by_id(self, user_id: str) -> UserIdentity | None: ...

class TokenVerifier(ABC):
    @abstractmethod
    async def verify_token(self, token: str | None) -> str:
        """Geçerli token için user_id döndürür, aksi halde Unauthenticated"""

class JWTTokenVerifier(TokenVerifier):
    """Dış kimlik servisinin imzaladığı JWT'leri doğrular (üretim bu serviste yapılmaz)"""

    def __init__(self, secret: str, algorithm: str = "HS256", directory: "InMemoryIdentityDirectory | None" = None):
        self.secret    = secret
        self.algorithm = algorithm
        self.directory = directory  # verilirse token profil bilgileri süreç içi dizine yazılır

    async def verify_token(self, token: str | None) -> str:
        if not token:
            raise Unauthenticated("Kimlik doğrulama token'ı gerekli")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as hata:
            raise Unauthenticated("Token süresi dolmuş") from hata
        except JWTError as hata:
            raise Unauthenticated("Geçersiz token") from hata

        user_id = payload.get("sub") or payload.get("userId")
        if not user_id:
            raise Unauthenticated("Geçersiz token: kullanıcı kimliği yok")

        if self.directory is not None:
            self.directory.learn(str(user_id), payload)

        return str(user_id)

class InMemoryIdentityDirectory(IdentityDirectory):
    def __init__(self, users: list[UserIdentity] | None = None):
        self.users: dict[str, UserIdentity] = {user.id: user for user in users or []}

    def add_user(self, user: UserIdentity) -> UserIdentity:
        self.users[user.id] = user
        return user

    def learn(self, user_id: str, claims: dict) -> UserIdentity | None:
        """Token claim'lerinde kullanıcı adı varsa kimliği kaydet"""
        username = claims.get("username")
        if not username:
            return self.users.get(user_id)

        return self.add_user(UserIdentity(id=user_id, username=str(username), name=str(claims.get("name") or "")))

    async def find_user_by_id(self, user_id: str) -> UserIdentity | None:
        return self.users.get(user_id)

# ============== Oda Dizini ==============

pwd_context = CryptContext(
    schemes    = ["bcrypt"],
    deprecated = "auto"
)

def _on_ozet(password: str) -> str:
    # bcrypt 72 bayttan sonrasını okumaz
    return hashlib.sha256(password.encode("utf-8")).hexdigest()

def hash_password(password: str) -> str:
    return pwd_context.hash(_on_ozet(password))

def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(_on_ozet(password), hashed)
    except ValueError:
        return False

class RoomDirectory(ABC):
    @abstractmethod
    async def find_room_by_id(self, room_id: str) -> Room | None:
        """Sadece aktif (silinmemiş) odalar"""

    @abstractmethod
    async def find_participation(self, room_id: str, user_id: str) -> Participation | None: ...

    @abstractmethod
    async def add_participant(self, room_id: str, user_id: str) -> Participation: ...

    @abstractmethod
    async def remove_participant(self, room_id: str, user_id: str) -> bool: ...

    @abstractmethod
    async def list_participants(self, room_id: str) -> list[Participation]: ...

    @abstractmethod
    async def create_room(self, room: Room) -> Room: ...

    @abstractmethod
    async def update_room(self, room_id: str, changes: dict[str, Any]) -> Room | None: ...

    @abstractmethod
    async def delete_room(self, room_id: str) -> bool: ...

    @abstractmethod
    async def list_public_rooms(self, limit: int = 20, offset: int = 0) -> list[Room]: ...

    @abstractmethod
    async def list_host_rooms(self, host_id: str, include_inactive: bool = False) -> list[Room]: ...

    @abstractmethod
    async def list_user_rooms(self, user_id: str, limit: int = 20, offset: int = 0) -> list[Room]:
        """Kullanıcının aktif katılımcı olduğu odalar, en son katılınan önce"""

    def check_password(self, room: Room, password: str | None) -> bool:
        if not room.password_hash:
            return True
        if not password:
            return False
        return verify_password(password, room.password_hash)

class InMemoryRoomDirectory(RoomDirectory):
    """Süreç içi oda/katılımcı tablosu"""

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock
        self.rooms: dict[str, Room] = {}
        self.participations: dict[tuple[str, str], Participation] = {}

    def add_room(self, room: Room) -> Room:
        self.rooms[room.id] = room
        return room

    async def find_room_by_id(self, room_id: str) -> Room | None:
        room = self.rooms.get(room_id)
        return room if room and room.is_active else None

    async def find_participation(self, room_id: str, user_id: str) -> Participation | None:
        return self.participations.get((room_id, user_id))

    async def add_participant(self, room_id: str, user_id: str) -> Participation:
        room = await self.find_room_by_id(room_id)
        if room is None:
            raise NotFound()

        mevcut = self.participations.get((room_id, user_id))
        if mevcut and mevcut.is_active:
            return mevcut

        participation = Participation(room_id=room_id, user_id=user_id, joined_at=self.clock())
        self.participations[(room_id, user_id)] = participation
        room.current_participants += 1
        return participation

    async def remove_participant(self, room_id: str, user_id: str) -> bool:
        participation = self.participations.get((room_id, user_id))
        if not participation or not participation.is_active:
            return False

        participation.is_active = False
        room = self.rooms.get(room_id)
        if room and room.current_participants > 0:
            room.current_participants -= 1
        return True

    async def list_participants(self, room_id: str) -> list[Participation]:
        return [p for (r_id, _), p in self.participations.items() if r_id == room_id and p.is_active]

    async def create_room(self, room: Room) -> Room:
        if not room.id:
            room.id = str(uuid.uuid4())
        self.rooms[room.id] = room
        return room

    async def update_room(self, room_id: str, changes: dict[str, Any]) -> Room | None:
        room = await self.find_room_by_id(room_id)
        if room is None:
            return None

        for alan, deger in changes.items():
            setattr(room, alan, deger)
        return room

    async def delete_room(self, room_id: str) -> bool:
        """Yumuşak silme: oda pasifleşir, katılımlar kapanır"""
        room = await self.find_room_by_id(room_id)
        if room is None:
            return False

        room.is_active = False
        for (r_id, _), participation in self.participations.items():
            if r_id == room_id:
                participation.is_active = False
        room.current_participants = 0
        return True

    async def list_public_rooms(self, limit: int = 20, offset: int = 0) -> list[Room]:
        acik = [room for room in self.rooms.values() if room.is_active and not room.is_private]
        return acik[offset:offset + limit]

    async def list_host_rooms(self, host_id: str, include_inactive: bool = False) -> list[Room]:
        return [
            room
                for room in self.rooms.values()
                    if room.host_id == host_id and (include_inactive or room.is_active)
        ]

    async def list_user_rooms(self, user_id: str, limit: int = 20, offset: int = 0) -> list[Room]:
        katilimlar = sorted(
            (p for (_, u_id), p in self.participations.items() if u_id == user_id and p.is_active),
            key     = lambda p: p.joined_at,
            reverse = True,
        )
        odalar = [self.rooms[p.room_id] for p in katilimlar if p.room_id in self.rooms and self.rooms[p.room_id].is_active]
        return odalar[offset:offset + limit]

def new_room(
    host_id: str, name: str, type: RoomType, stream_url: str, *,
    description: str = "", max_participants: int = 10, is_private: bool = False, password: str | None = None
) -> Room:
    return Room(
        id               = str(uuid.uuid4()),
        host_id          = host_id,
        name             = name,
        description      = description,
        type             = type,
        stream_url       = stream_url,
        is_private       = is_private,
        max_participants = max_participants,
        password_hash    = hash_password(password) if is_private and password else None,
    )
