# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                  import konsol
from Core                 import hive_FastAPI, Request, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions   import RequestValidationError
from pydantic             import ValidationError
from Libs                 import StreamError, UpstreamUnavailable

def _hata_yaniti(status_code: int, code: str, message: str, **ekstra) -> JSONResponse:
    return JSONResponse(
        status_code = status_code,
        content     = {"success": False, "code": code, "message": message, **ekstra}
    )

@hive_FastAPI.exception_handler(StreamError)
async def stream_error_handler(request: Request, exc: StreamError):
    """Domain hatalarını kod + mesaj olarak döndür"""
    if isinstance(exc, UpstreamUnavailable):
        konsol.log(f"[red]{exc.code}:[/] {request.url.path} » {exc.message}")

    veri = exc.to_dict()
    return _hata_yaniti(exc.status_code, **veri)

@hive_FastAPI.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _hata_yaniti(exc.status_code, "HTTP_ERROR", str(exc.detail))

@hive_FastAPI.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Query/path parametre hatalarını JSON olarak döndür"""
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return _hata_yaniti(422, "VALIDATION_FAILED", " | ".join(messages))

@hive_FastAPI.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Pydantic validation hatalarını JSON olarak döndür"""
    errors   = exc.errors()
    messages = [f"{e['loc'][0]}: {e['msg']}" for e in errors if e["loc"]]

    return _hata_yaniti(422, "VALIDATION_FAILED", " | ".join(messages) or "Geçersiz veri")
