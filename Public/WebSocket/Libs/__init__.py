# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .PlaybackStore    import PlaybackStateStore, InMemoryPlaybackStateStore, utc_now
from .Directory        import (
    IdentityDirectory,
    InMemoryIdentityDirectory,
    TokenVerifier,
    JWTTokenVerifier,
    RoomDirectory,
    InMemoryRoomDirectory,
    hash_password,
    verify_password,
    new_room,
)
from .AccessPolicy     import AccessPolicy
from .sync_calculator  import project_position, project_state
from .seek_debouncer   import SeekDebouncer, PendingSeek, SEEK_DEBOUNCE_WINDOW
from .rate_limiter     import SlidingWindowLimiter
from .SessionRegistry  import SessionRegistry
from .RoomService      import RoomService
from .StreamingService import StreamingService
from .StreamingGateway import StreamingGateway, build_gateway, broadcast_type, error_frame, bearer_token
from .message_handlers import MessageHandler, HANDLER_NAMES
from .stream_url       import validate_stream_url, video_metadata, check_url_format
