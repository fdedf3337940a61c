# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from urllib.parse   import urlparse
from Libs           import global_request, ValidationFailed
from ..Models       import RoomType
from .ytdlp_service import ytdlp_video_info
import re

YOUTUBE_REGEX = re.compile(r"^(https?://)?(www\.)?(youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([a-zA-Z0-9_-]{11})")
VIDEO_EXT     = re.compile(r"\.(mp4|webm|ogg|avi|mov|m3u8)(\?.*)?$", re.IGNORECASE)

def validate_youtube_url(url: str) -> dict:
    eslesme = YOUTUBE_REGEX.match(url)
    if not eslesme:
        raise ValidationFailed("Geçersiz YouTube URL formatı")

    video_id = eslesme.group(4)
    return {
        "isValid"     : True,
        "videoId"     : video_id,
        "embedUrl"    : f"https://www.youtube.com/embed/{video_id}",
        "originalUrl" : url,
    }

def check_url_format(url: str, room_type: RoomType) -> None:
    """Oda oluştururken ağa çıkmadan yapılan biçim kontrolü"""
    if room_type is RoomType.YOUTUBE_LINK:
        validate_youtube_url(url)
        return

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationFailed("Geçersiz URL formatı")

async def validate_external_url(url: str) -> dict:
    check_url_format(url, RoomType.EXTERNAL_LINK)

    try:
        response = await global_request.fetch(url, method="HEAD")
    except Exception as hata:
        raise ValidationFailed(f"Harici URL doğrulanamadı: {type(hata).__name__}") from hata

    if response.status_code >= 400:
        raise ValidationFailed(f"Harici URL doğrulanamadı: HTTP {response.status_code}")

    content_type = response.headers.get("content-type", "")
    return {
        "isValid"     : True,
        "contentType" : content_type,
        "isVideo"     : content_type.startswith("video/") or bool(VIDEO_EXT.search(url)),
        "needsProxy"  : url.startswith("http://"),
        "originalUrl" : url,
    }

async def validate_stream_url(url: str, room_type: RoomType) -> dict:
    if room_type is RoomType.YOUTUBE_LINK:
        return validate_youtube_url(url)
    return await validate_external_url(url)

async def video_metadata(url: str, room_type: RoomType) -> dict:
    if room_type is RoomType.EXTERNAL_LINK:
        dogrulama = await validate_external_url(url)
        return {
            "type"        : room_type.value,
            "originalUrl" : url,
            "contentType" : dogrulama["contentType"],
            "needsProxy"  : dogrulama["needsProxy"],
            "isVideo"     : dogrulama["isVideo"],
            "title"       : url.rstrip("/").split("/")[-1].split("?")[0] or "Harici İçerik",
        }

    dogrulama = validate_youtube_url(url)
    bilgi     = await ytdlp_video_info(url) or {}

    return {
        "type"      : room_type.value,
        "videoId"   : dogrulama["videoId"],
        "embedUrl"  : dogrulama["embedUrl"],
        "title"     : bilgi.get("title") or f"YouTube Video {dogrulama['videoId']}",
        "duration"  : bilgi.get("duration"),
        "thumbnail" : bilgi.get("thumbnail"),
        "uploader"  : bilgi.get("uploader", ""),
    }
