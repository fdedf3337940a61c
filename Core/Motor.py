# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from Settings import PROJE, HOST, PORT, PRODUCTION
from sys      import version_info
import uvicorn

def basla():
    surum = f"{version_info[0]}.{version_info[1]}"
    konsol.print(f"\n[bold gold1]{PROJE}[/] [yellow]:bee:[/] [turquoise2]Python {surum}[/] [bold yellow2]uvicorn[/]", width=70, justify="center")
    konsol.print(f"[red]{HOST}[light_coral]:[/]{PORT}[pale_green1] başlatılmıştır...[/]\n", width=70, justify="center")

    # Oda durumu ve oturumlar süreç belleğinde: tek worker
    uvicorn.run(
        "Core:hive_FastAPI",
        host                = HOST,
        port                = PORT,
        proxy_headers       = True,
        forwarded_allow_ips = "*",
        workers             = 1,
        ws_max_size         = 1024 * 1024,
        log_level           = "error" if PRODUCTION else "warning",
    )
