# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                   import konsol
from fastapi               import FastAPI
from contextlib            import asynccontextmanager
from Libs                  import global_request
from Public.WebSocket.Libs import build_gateway

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""

    # ! Paylaşımlı HTTP istemcisi (harici link doğrulama)
    await global_request.start()

    # ! Testler kendi gateway'ini önceden verebilir
    gateway = getattr(app.state, "gateway", None) or build_gateway()
    app.state.gateway = gateway
    await gateway.start()

    try:
        yield
    finally:
        await gateway.stop()
        await global_request.stop()
        konsol.log("[yellow]Kaynaklar serbest bırakıldı.[/]")
