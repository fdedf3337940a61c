# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI     import konsol
from fastapi import WebSocket, WebSocketDisconnect
from Libs    import StreamError, ValidationFailed
from .       import wss_router
from ..Libs  import MessageHandler, StreamingGateway, error_frame, bearer_token
import json

@wss_router.websocket("/streaming")
async def streaming_websocket(websocket: WebSocket, token: str | None = None):
    gateway: StreamingGateway = websocket.app.state.gateway
    await websocket.accept()

    # 1. Handshake: oda olaylarından önce kimlik doğrulama
    try:
        session = await gateway.open_session(websocket, token or bearer_token(websocket.headers.get("authorization")))
    except StreamError as hata:
        await websocket.send_text(json.dumps(error_frame(hata), ensure_ascii=False))
        await websocket.close(code=4401)
        return

    handler  = MessageHandler(session, gateway)
    handlers = handler.handlers()

    await handler.send_json({
        "type"      : "connected",
        "sessionId" : session.session_id,
        "user"      : session.user.to_dict(),
    })

    try:
        while True:
            raw = await websocket.receive_text()

            # 2. Flood Control: Payload Size
            if len(raw.encode("utf-8")) > gateway.max_payload:
                await handler.send_error(ValidationFailed("Mesaj boyutu çok büyük"))
                continue

            try:
                # 3. Flood Control: kullanıcı başına kayan pencere
                gateway.check_rate(session)

                try:
                    msg = json.loads(raw)
                except json.JSONDecodeError:
                    raise ValidationFailed("Geçersiz JSON formatı")

                if not isinstance(msg, dict) or not msg.get("type"):
                    raise ValidationFailed("Mesaj türü eksik")

                fn = handlers.get(msg["type"])
                if not fn:
                    raise ValidationFailed(f"Bilinmeyen mesaj türü: {msg['type']}")

                await fn(msg)

            except StreamError as hata:
                await handler.send_error(hata)
            except WebSocketDisconnect:
                raise
            except Exception as hata:
                konsol.log(f"[red]ws handler error:[/] {type(hata).__name__} » {hata}")
                await handler.send_error(StreamError())

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        await handler.handle_disconnect()
