# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI         import konsol
from Core        import hive_FastAPI, Request, JSONResponse, Response
from time        import time
from user_agents import parse
import asyncio

# Seek debounce penceresini bekleyen PUT'lar dahil hiçbir API isteği bunu aşmamalı
ISTEK_TIMEOUT = 30

@hive_FastAPI.middleware("http")
async def istekten_once_sonra(request: Request, call_next):
    baslangic_zamani = time()

    request.state.veri = dict(request.query_params)
    if not request.state.veri:
        try:
            request.state.veri = await request.json()
        except Exception:
            request.state.veri = {}

    # Token ve şifreler loga düşmez
    if isinstance(request.state.veri, dict):
        log_data = {
            anahtar: ("***" if anahtar.lower() in ("password", "token") else deger)
                for anahtar, deger in request.state.veri.items()
        }
    else:
        log_data = request.state.veri

    try:
        ua_header = request.headers.get("User-Agent")
        parsed_ua = parse(ua_header)
        cihaz = ua_header if str(parsed_ua).split("/")[2].strip() == "Other" else parsed_ua
    except Exception:
        cihaz = request.headers.get("User-Agent")

    fw_for    = request.headers.get("X-Forwarded-For")
    client_ip = fw_for.split(",")[0].strip() if fw_for else (request.client.host if request.client else "-")

    log_veri = {
        "id"     : request.headers.get("X-Request-ID") or "",
        "method" : request.method,
        "url"    : str(request.url).rstrip("?").split("?")[0],
        "veri"   : log_data,
        "kod"    : None,
        "sure"   : None,
        "ip"     : client_ip,
        "cihaz"  : cihaz,
    }

    try:
        response = await asyncio.wait_for(call_next(request), timeout=ISTEK_TIMEOUT)
        log_veri["kod"] = response.status_code if response else 502
        if not response:
            response = JSONResponse(status_code=502, content={"success": False, "message": "Yanıt Gelmedi.."})
    except asyncio.TimeoutError:
        log_veri["kod"] = 504
        response        = JSONResponse(status_code=504, content={"success": False, "message": "Zaman Aşımı.."})
        konsol.log(f"[red]⏱️ Timeout:[/] {request.url.path} - {ISTEK_TIMEOUT}sn aşıldı")
    except asyncio.CancelledError:
        log_veri["kod"] = 499  # Client Closed Request
        konsol.log(f"[yellow]🚫 İstemci bağlantıyı kapattı:[/] {request.url.path}")
        raise
    except RuntimeError as exc:
        if "No response returned" in str(exc):
            konsol.log(f"[yellow]⚠️ Response yok:[/] {request.url.path}")
            return Response(status_code=204)
        raise
    except Exception as exc:
        log_veri["kod"] = 500
        response        = JSONResponse(status_code=500, content={"success": False, "message": "Sunucu Hatası.."})
        konsol.log(f"[red]❌ Beklenmeyen hata:[/] {request.url.path} - {exc}")

    if request.url.path in ("/favicon.ico", "/api/v1/health"):
        return response

    log_veri["sure"] = round(time() - baslangic_zamani, 2)
    log_salla(log_veri, request)

    return response

def log_salla(log_veri: dict, request: Request):
    log_url = (
        log_veri['url'].replace(request.url.scheme, request.headers.get("X-Forwarded-Proto"))
            if request.headers.get("X-Forwarded-Proto")
                else log_veri['url']
    )

    LABEL_WIDTH  = 5
    durum_label  = f"[green]{'durum':<{LABEL_WIDTH}}:[/]"
    ip_label     = f"[green]{'ip':<{LABEL_WIDTH}}:[/]"
    cihaz_label  = f"[green]{'cihaz':<{LABEL_WIDTH}}:[/]"

    log_lines = [f"[bold blue]»[/] [bold turquoise2]{log_url}[/]"]

    if log_veri["veri"]:
        log_lines.append(f"[bold magenta]»[/] [bold cyan]{log_veri['veri']}[/]")

    log_lines.append(
        f"  {durum_label} [bold green]{log_veri['method']}[/]"
        f" [blue]-[/] [bold bright_yellow]{log_veri['kod']}[/]"
        f" [blue]-[/] [bold yellow2]{log_veri['sure']} sn[/]"
    )

    if log_veri["id"]:
        log_lines.append(
            f"  {ip_label} [bold bright_blue]{log_veri['id']}[/]"
            f"[bold green]@[/][bold red]{log_veri['ip']}[/]"
        )
    else:
        log_lines.append(f"  {ip_label} [bold red]{log_veri['ip']}[/]")

    log_lines.append(f"  {cihaz_label} [magenta]{log_veri['cihaz']}[/]")

    konsol.log("\n".join(log_lines) + "\n")
