# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from dataclasses import dataclass, field
from typing      import Awaitable, Callable
from ..Models    import StateUpdate, RoomPlaybackState
import asyncio

# ============== Timing Constants (seconds) ==============
SEEK_DEBOUNCE_WINDOW = 0.5   # Sürükleme sırasında gelen seek'ler bu pencerede tek yazıma iner

@dataclass
class PendingSeek:
    """Oda başına tek bekleyen seek yuvası"""
    room_id     : str
    user_id     : str
    update      : StateUpdate
    session_id  : str | None           = None   # son seek'i gönderen bağlantı
    session_ids : set[str]             = field(default_factory=set)  # penceredeki tüm gönderenler
    waiters     : list[asyncio.Future] = field(default_factory=list)
    task        : asyncio.Task | None  = None

    def waiter(self) -> asyncio.Future:
        """Commit sonucunu beklemek isteyen (HTTP) çağıranlar için future"""
        future = asyncio.get_running_loop().create_future()
        self.waiters.append(future)
        return future

Committer = Callable[[PendingSeek], Awaitable[RoomPlaybackState]]

class SeekDebouncer:
    """
    idle -> pending -> committed -> idle

    Bekleyen seek varken yeni seek gelirse eski zamanlayıcı iptal edilir,
    yük en sonuncusuyla değişir ve pencere baştan başlar. Kuyruk yoktur.
    İptal + yeniden planlama tek senkron adımda olur, kilit gerekmez.
    """

    def __init__(self, committer: Committer, window: float = SEEK_DEBOUNCE_WINDOW):
        self.committer = committer
        self.window    = window
        self._pending: dict[str, PendingSeek] = {}

    def is_pending(self, room_id: str) -> bool:
        return room_id in self._pending

    def pending(self, room_id: str) -> PendingSeek | None:
        return self._pending.get(room_id)

    def schedule(self, room_id: str, user_id: str, update: StateUpdate, session_id: str | None = None) -> PendingSeek:
        pending  = PendingSeek(room_id=room_id, user_id=user_id, update=update, session_id=session_id)
        previous = self._pending.pop(room_id, None)

        if previous:
            if previous.task and not previous.task.done():
                previous.task.cancel()
            pending.session_ids |= previous.session_ids
            pending.waiters.extend(previous.waiters)

        if session_id:
            pending.session_ids.add(session_id)

        pending.task = asyncio.create_task(self._fire(pending))
        self._pending[room_id] = pending
        return pending

    async def _fire(self, pending: PendingSeek):
        await asyncio.sleep(self.window)

        # Bu arada yerimize başka seek geçtiyse çık
        if self._pending.get(pending.room_id) is not pending:
            return

        # Yuva boşalır: commit sürerken gelen seek yeni pencere açar
        del self._pending[pending.room_id]

        try:
            state = await self.committer(pending)
        except Exception as hata:
            konsol.log(f"[red]Seek commit başarısız:[/] {pending.room_id} » {hata}")
            for waiter in pending.waiters:
                if not waiter.done():
                    waiter.set_exception(hata)
            return

        for waiter in pending.waiters:
            if not waiter.done():
                waiter.set_result(state)

    def discard(self, room_id: str) -> bool:
        """Odanın bekleyen seek'ini yazmadan at"""
        pending = self._pending.pop(room_id, None)
        if not pending:
            return False

        if pending.task and not pending.task.done():
            pending.task.cancel()
        for waiter in pending.waiters:
            waiter.cancel()
        return True

    async def shutdown(self):
        """Kapanışta bekleyen tüm seek'leri deterministik olarak at"""
        tasks = [p.task for p in self._pending.values() if p.task]
        for room_id in list(self._pending):
            self.discard(room_id)

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
