# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

KOK_DIZIN = Path(__file__).resolve().parent.parent

# .env yükleme
load_dotenv(dotenv_path=KOK_DIZIN / ".env")

# AYAR.yml yükleme
with open(KOK_DIZIN / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

def _bool(anahtar: str, varsayilan: str) -> bool:
    return os.getenv(anahtar, varsayilan).lower() == "true"

# Genel ayarlar
PRODUCTION = _bool("PRODUCTION", "false")

PROJE = AYAR["PROJE"]
HOST  = AYAR["APP"]["HOST"]
PORT  = AYAR["APP"]["PORT"]

# Kimlik doğrulama (token üretimi dış servistedir, burada sadece doğrulanır)
JWT_SECRET    = os.getenv("JWT_SECRET", "cokomelli_secret")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

# CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "")
CORS_ORIGINS = [FRONTEND_URL] if PRODUCTION and FRONTEND_URL else ["http://localhost:3000", "http://localhost:3001"]

# WebSocket / Senkronizasyon
WS_RATE_LIMIT     = int(os.getenv("WS_RATE_LIMIT", "100"))       # kullanıcı başına olay sayısı
WS_RATE_WINDOW    = float(os.getenv("WS_RATE_WINDOW", "60"))     # saniye
WS_RATE_MAX_USERS = int(os.getenv("WS_RATE_MAX_USERS", "10000"))
WS_MAX_PAYLOAD    = int(os.getenv("WS_MAX_PAYLOAD", str(64 * 1024)))
ACCESS_CACHE_TTL  = float(os.getenv("ACCESS_CACHE_TTL", "30"))
EVENT_LOG_LIMIT   = int(os.getenv("EVENT_LOG_LIMIT", "500"))     # oda başına tutulan olay kaydı
