# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI    import konsol
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

class StreamError(Exception):
    """Tüm senkronizasyon hatalarının tabanı, istemciye `code` + `message` olarak iletilir"""
    code            = "STREAM_ERROR"
    status_code     = 500
    default_message = "Beklenmeyen hata"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}

class Unauthenticated(StreamError):
    code            = "UNAUTHENTICATED"
    status_code     = 401
    default_message = "Kimlik doğrulama gerekli"

class NotFound(StreamError):
    code            = "NOT_FOUND"
    status_code     = 404
    default_message = "Oda bulunamadı"

class AccessDenied(StreamError):
    code            = "ACCESS_DENIED"
    status_code     = 403
    default_message = "Odaya erişim reddedildi"

class RateLimited(StreamError):
    code            = "RATE_LIMITED"
    status_code     = 429
    default_message = "Çok hızlı işlem yapıyorsunuz"

    def __init__(self, message: str | None = None, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self) -> dict:
        return {**super().to_dict(), "retryAfter": round(self.retry_after, 2)}

class ValidationFailed(StreamError):
    code            = "VALIDATION_FAILED"
    status_code     = 400
    default_message = "Geçersiz istek"

class UpstreamUnavailable(StreamError):
    code            = "UPSTREAM_UNAVAILABLE"
    status_code     = 503
    default_message = "Depolama servisine ulaşılamıyor"

async def upstream_call(islem: str, fn: Callable[..., Awaitable[T]], *args, message: str | None = None, **kwargs) -> T:
    """İşbirlikçi (depo, oda/kimlik dizini) hatalarını UpstreamUnavailable'a çevir"""
    try:
        return await fn(*args, **kwargs)
    except StreamError:
        raise
    except Exception as hata:
        konsol.log(f"[red]{islem} başarısız:[/] {type(hata).__name__} » {hata}")
        raise UpstreamUnavailable(message) from hata
