# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from datetime import datetime, timedelta, timezone
from jose     import jwt

from Public.WebSocket.Models import UserIdentity, RoomType
from Public.WebSocket.Libs   import (
    StreamingGateway,
    InMemoryPlaybackStateStore,
    InMemoryRoomDirectory,
    InMemoryIdentityDirectory,
    JWTTokenVerifier,
    hash_password,
    new_room,
)

SECRET = "test-secret"

# Özel oda şifresi modül yüklenirken bir kez özetlenir
PRIVATE_PASSWORD = "gizli123"
PRIVATE_HASH     = hash_password(PRIVATE_PASSWORD)

ALICE = UserIdentity(id="u-alice", username="alice", name="Alice")
BOB   = UserIdentity(id="u-bob",   username="bob",   name="Bob")
CAROL = UserIdentity(id="u-carol", username="carol", name="Carol")

class FakeClock:
    """Duvar saati ve monotonic saati birlikte ilerleten test saati"""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        self.mono    = 1000.0

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self.mono

    def advance(self, seconds: float):
        self.current += timedelta(seconds=seconds)
        self.mono    += seconds

def make_token(user_id: str, secret: str = SECRET, **claims) -> str:
    return jwt.encode({"sub": user_id, **claims}, secret, algorithm="HS256")

def build_gateway(clock: FakeClock | None = None, **kwargs) -> StreamingGateway:
    """
    Bellek içi işbirlikçilerle izole gateway.

    Odalar: `public-room` (alice'in, açık), `private-room` (alice'in, şifre: gizli123).
    """
    clock     = clock or FakeClock()
    directory = InMemoryRoomDirectory(clock=clock.now)
    identity  = InMemoryIdentityDirectory([ALICE, BOB, CAROL])

    public = new_room(ALICE.id, "Film Gecesi", RoomType.YOUTUBE_LINK, "https://www.youtube.com/watch?v=dQw4w9WgXcQ")
    public.id = "public-room"
    directory.add_room(public)

    private = new_room(ALICE.id, "Gizli Oda", RoomType.EXTERNAL_LINK, "https://cdn.example.com/film.mp4", is_private=True)
    private.id            = "private-room"
    private.password_hash = PRIVATE_HASH
    directory.add_room(private)

    kwargs.setdefault("seek_window", 0.05)

    return StreamingGateway(
        store     = InMemoryPlaybackStateStore(clock=clock.now),
        directory = directory,
        identity  = identity,
        verifier  = JWTTokenVerifier(SECRET),
        clock     = clock.now,
        monotonic = clock.monotonic,
        **kwargs,
    )
