# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import Depends, Query
from Core    import Request
from .       import api_v1_router, api_v1_global_message
from ..Libs  import get_gateway, current_user, json_body

from Public.WebSocket.Models import EventType, UserIdentity, StateUpdatePayload, parse_payload

@api_v1_router.get("/streaming/rooms/{room_id}/state")
async def get_room_state(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    gateway = get_gateway(request)
    state   = await gateway.service.get_room_state(room_id, user.id)

    return {**api_v1_global_message, "result": state.to_dict()}

@api_v1_router.put("/streaming/rooms/{room_id}/state")
async def update_room_state(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    """
    Oynatım durumunu HTTP üzerinden güncelle.

    Seek'ler WebSocket ile aynı debounce penceresinden geçer; yanıt, pencere
    kapandığında yazılan son durumdur. Değişiklik odadaki canlı oturumlara yayınlanır.
    """
    gateway = get_gateway(request)
    payload = parse_payload(StateUpdatePayload, await json_body(request))
    update  = payload.to_update()

    state = await gateway.service.update_room_state(room_id, user.id, update)

    # Seek yayını debounce commit'inde yapılır
    if update.event_type is not EventType.SEEK:
        await gateway.publish_state_change(update.event_type, state, user, event_data=update.event_data)

    return {**api_v1_global_message, "result": state.to_dict()}

@api_v1_router.post("/streaming/rooms/{room_id}/sync")
async def sync_room_state(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    gateway  = get_gateway(request)
    snapshot = await gateway.service.sync_participant(room_id, user.id, EventType.SYNC)

    return {**api_v1_global_message, "result": snapshot.to_dict()}

@api_v1_router.get("/streaming/rooms/{room_id}/events")
async def recent_room_events(
    room_id : str,
    request : Request,
    limit   : int = Query(50, ge=1, le=100),
    user    : UserIdentity = Depends(current_user),
):
    gateway = get_gateway(request)
    events  = await gateway.service.recent_events(room_id, user.id, limit)

    return {**api_v1_global_message, "result": [event.to_dict() for event in events]}

@api_v1_router.get("/streaming/rooms/{room_id}/online")
async def online_users(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    gateway = get_gateway(request)
    await gateway.policy.ensure_access(room_id, user.id)

    users = gateway.registry.roster(room_id)
    return {**api_v1_global_message, "result": {"roomId": room_id, "count": len(users), "users": users}}
