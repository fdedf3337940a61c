# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from datetime import datetime
from ..Models import RoomPlaybackState

def project_position(
    video_position : float,
    is_playing     : bool,
    last_updated   : datetime,
    now            : datetime,
    video_duration : float | None = None,
) -> float:
    """
    Kayıtlı pozisyonu geçen duvar saati süresi kadar ileri taşır.

    Oynatılıyorsa `pozisyon + (now - last_updated)`, duraklatılmışsa pozisyonun kendisi.
    Sonuç hiçbir zaman negatif olmaz.

    `video_duration` temel üç girdinin (pozisyon, oynatılıyor mu, son güncelleme) dışında
    isteğe bağlı bir genişletmedir: verilirse sonuç videonun sonunda durur, verilmezse
    (None / 0) üst sınır uygulanmaz.
    """
    if not is_playing:
        return video_position

    gecen = (now - last_updated).total_seconds()
    konum = max(0.0, video_position + gecen)

    if video_duration and video_duration > 0:
        konum = min(konum, video_duration)

    return konum

def project_state(state: RoomPlaybackState, now: datetime) -> float:
    return project_position(state.video_position, state.is_playing, state.last_updated, now, state.video_duration)
