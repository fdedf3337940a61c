# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi                 import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from Core.Modules            import lifespan
from fastapi.responses       import JSONResponse
from Settings                import PROJE, PRODUCTION, CORS_ORIGINS

hive_FastAPI = FastAPI(
    title       = PROJE,
    openapi_url = None if PRODUCTION else "/openapi.json",
    docs_url    = None if PRODUCTION else "/docs",
    redoc_url   = None,
    lifespan    = lifespan
)

# ! ----------------------------------------» Middlewares

hive_FastAPI.add_middleware(CORSMiddleware, allow_origins=CORS_ORIGINS, allow_credentials=True, allow_methods=["*"], allow_headers=["*"])
hive_FastAPI.add_middleware(GZipMiddleware, minimum_size=1000)

# ! ----------------------------------------» Routers

from Core.Modules             import _istek, _hata, _security
from Public.API.v1.Routers    import api_v1_router
from Public.WebSocket.Routers import wss_router

hive_FastAPI.include_router(api_v1_router)

hive_FastAPI.include_router(wss_router)
