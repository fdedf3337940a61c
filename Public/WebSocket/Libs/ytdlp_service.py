# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI import konsol
import asyncio, yt_dlp

YDL_OPTS = {
    "simulate"      : True,   # İndirme yok, sadece bilgi
    "skip_download" : True,
    "quiet"         : True,
    "no_warnings"   : True,
    "noplaylist"    : True,
}

def _extract(url: str) -> dict | None:
    with yt_dlp.YoutubeDL(YDL_OPTS) as ydl:
        info = ydl.extract_info(url, download=False)

    if not info or info.get("extractor_key") == "Generic":
        return None

    return {
        "title"     : info.get("title") or "",
        "duration"  : info.get("duration"),
        "thumbnail" : info.get("thumbnail"),
        "uploader"  : info.get("uploader") or "",
        "extractor" : info.get("extractor_key") or "",
    }

async def ytdlp_video_info(url: str, timeout: float = 15.0) -> dict | None:
    """
    yt-dlp ile video başlığı / süresi gibi bilgileri çıkar.

    yt-dlp senkron çalıştığı için ayrı thread'de koşturulur.
    Başarısız olursa None döner, çağıran taraf regex tabanlı bilgiye düşer.
    """
    try:
        return await asyncio.wait_for(asyncio.to_thread(_extract, url), timeout=timeout)
    except asyncio.TimeoutError:
        konsol.log(f"[red]yt-dlp timeout:[/] {url}")
        return None
    except Exception as hata:
        konsol.log(f"[yellow][⚠] yt-dlp bilgi çıkaramadı:[/] {type(hata).__name__} » {hata}")
        return None
