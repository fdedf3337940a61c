# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core   import JSONResponse, Request
from .      import api_v1_router
from ..Libs import get_gateway

@api_v1_router.get("/health")
async def health_check(request: Request):
    """API sağlık kontrolü"""
    gateway = get_gateway(request)

    return JSONResponse({
        "success"  : True,
        "status"   : "healthy" if gateway.running else "starting",
        "sessions" : len(gateway.registry.sessions),
        "rooms"    : len(gateway.registry.rooms),
    })
