# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import Depends
from Core    import Request
from .       import api_v1_router, api_v1_global_message
from ..Libs  import current_user, json_body

from Public.WebSocket.Models import UserIdentity, RoomType, StreamUrlPayload, parse_payload
from Public.WebSocket.Libs   import validate_stream_url, video_metadata

@api_v1_router.post("/streaming/validate-url")
async def validate_url(request: Request, user: UserIdentity = Depends(current_user)):
    """YouTube linkleri regex ile, harici linkler HEAD isteği ile doğrulanır"""
    payload = parse_payload(StreamUrlPayload, await json_body(request))
    sonuc   = await validate_stream_url(payload.url, payload.type)

    return {**api_v1_global_message, "result": sonuc}

@api_v1_router.get("/streaming/metadata")
async def stream_metadata(request: Request, user: UserIdentity = Depends(current_user)):
    """
    Video bilgisi (başlık, süre, küçük resim).

    Query Parameters:
        url  : Video URL'si
        type : YOUTUBE_LINK | EXTERNAL_LINK (varsayılan YOUTUBE_LINK)
    """
    payload = parse_payload(StreamUrlPayload, {
        "url"  : request.query_params.get("url", "").strip(),
        "type" : request.query_params.get("type", RoomType.YOUTUBE_LINK.value),
    })
    bilgi = await video_metadata(payload.url, payload.type)

    return {**api_v1_global_message, "result": bilgi}
