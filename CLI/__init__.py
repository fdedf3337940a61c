# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from rich.console import Console
from rich.panel   import Panel
import sys

konsol = Console(log_path=False, highlight=False)

def cikis_yap(temizle: bool = True):
    """Uygulamayı sessizce kapat"""
    if temizle:
        konsol.clear()
    konsol.print("\n[bold red]Çıkış yapılıyor...[/]", justify="center")
    sys.exit(0)

def hata_yakala(hata: BaseException):
    """Yakalanmamış hatayı panel olarak bas ve çık"""
    if isinstance(hata, KeyboardInterrupt):
        cikis_yap(False)

    konsol.print(
        Panel(
            f"[bold red]{type(hata).__name__}[/] » {hata}",
            title        = "[red]Hata[/]",
            border_style = "red",
        )
    )
    konsol.print_exception(show_locals=False)
    sys.exit(1)
