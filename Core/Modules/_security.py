# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core import hive_FastAPI, Request

@hive_FastAPI.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)

    # --- Temel Güvenlik Başlıkları ---
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"]        = "DENY"                    # Sadece JSON API, çerçeveye gömülmez
    response.headers["Referrer-Policy"]        = "no-referrer"
    response.headers["Cache-Control"]          = "no-store"                # Oynatım durumu her an değişir

    # --- İzolasyon ---
    response.headers["Cross-Origin-Opener-Policy"]   = "same-origin"
    response.headers["Cross-Origin-Resource-Policy"] = "same-site"

    # --- HTTPS Zorlaması (HSTS) ---
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

    # Dokümantasyon dışında her şey API
    if not request.url.path.startswith(("/docs", "/openapi.json")):
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
        response.headers["X-Robots-Tag"]            = "noindex, nofollow"

    # --- Gereksiz Bilgi Sızmalarını Temizle ---
    for header in ("server", "x-powered-by"):
        if header in response.headers:
            del response.headers[header]

    return response
