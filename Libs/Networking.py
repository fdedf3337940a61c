# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from __future__   import annotations
from urllib.parse import urlparse
import httpx, asyncio

class RequestLimiter:
    """
    Harici video sunucularına giden doğrulama isteklerini sınırlar.
    Aynı host'a aynı anda en fazla `host_limit` istek gider.
    """
    def __init__(self, global_limit: int = 50, host_limit: int = 5):
        self.global_semaphore = asyncio.Semaphore(global_limit)
        self.host_semaphores: dict[str, asyncio.Semaphore] = {}
        self.host_limit = host_limit

    def host_semaphore(self, host: str) -> asyncio.Semaphore:
        # Tek event loop turunda oluşturulur, kilit gerekmez
        if host not in self.host_semaphores:
            self.host_semaphores[host] = asyncio.Semaphore(self.host_limit)
        return self.host_semaphores[host]

class GlobalClient:
    """
    Paylaşımlı httpx.AsyncClient (HTTP/2 + pooling).
    lifespan içinde `start()` / `stop()` ile yönetilir.
    """
    _instance : 'GlobalClient'    | None = None
    _client   : httpx.AsyncClient | None = None
    _limiter  : RequestLimiter    | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(GlobalClient, cls).__new__(cls)
        return cls._instance

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GlobalClient henüz başlatılmadı! lifespan içinde 'start()' çağrılmalı.")
        return self._client

    @property
    def limiter(self) -> RequestLimiter:
        if self._limiter is None:
            self._limiter = RequestLimiter()
        return self._limiter

    async def start(self):
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            http2            = True,
            headers          = {"User-Agent": "StreamHive/1.0 (+stream-validator)"},
            limits           = httpx.Limits(max_connections=50, max_keepalive_connections=10, keepalive_expiry=15.0),
            timeout          = httpx.Timeout(connect=5.0, read=5.0, write=5.0, pool=5.0),
            follow_redirects = True,
            max_redirects    = 3,
        )

    async def stop(self):
        if self._client:
            await self._client.aclose()
            self._client  = None
            self._limiter = None

    async def fetch(self, url: str, method: str = "GET", **kwargs) -> httpx.Response:
        """Paylaşımlı client ve limiter ile istek atar"""
        host = urlparse(url).netloc

        async with self.limiter.global_semaphore:
            async with self.limiter.host_semaphore(host):
                return await self.client.request(method, url, **kwargs)

# Singleton instance
global_request = GlobalClient()
