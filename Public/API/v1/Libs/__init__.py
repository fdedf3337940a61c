# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                 import Depends, Request
from fastapi.security        import HTTPBearer, HTTPAuthorizationCredentials
from Libs                    import ValidationFailed
from Public.WebSocket.Models import UserIdentity
from Public.WebSocket.Libs   import StreamingGateway

bearer_scheme = HTTPBearer(auto_error=False)

def get_gateway(request: Request) -> StreamingGateway:
    return request.app.state.gateway

async def current_user(
    request     : Request,
    credentials : HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> UserIdentity:
    """Authorization: Bearer <jwt> -> kullanıcı (yoksa Unauthenticated)"""
    gateway = get_gateway(request)
    return await gateway.authenticate(credentials.credentials if credentials else None)

async def json_body(request: Request) -> dict:
    """İstek gövdesi (boşsa {})"""
    if not await request.body():
        return {}

    try:
        veri = await request.json()
    except ValueError as hata:
        raise ValidationFailed("Geçersiz JSON gövdesi") from hata

    if not isinstance(veri, dict):
        raise ValidationFailed("JSON gövdesi nesne olmalı")

    return veri
