# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from fastapi import Depends, Query
from Core    import Request, JSONResponse
from .       import api_v1_router, api_v1_global_message
from ..Libs  import get_gateway, current_user, json_body

from Public.WebSocket.Models import UserIdentity, CreateRoomPayload, UpdateRoomPayload, JoinRoomPayload, parse_payload

@api_v1_router.post("/rooms")
async def create_room(request: Request, user: UserIdentity = Depends(current_user)):
    gateway = get_gateway(request)
    payload = parse_payload(CreateRoomPayload, await json_body(request))
    room    = await gateway.rooms.create_room(user, payload)

    return JSONResponse(status_code=201, content={**api_v1_global_message, "result": room.to_dict()})

@api_v1_router.get("/rooms")
async def list_rooms(
    request : Request,
    limit   : int = Query(20, ge=1, le=100),
    offset  : int = Query(0, ge=0),
    user    : UserIdentity = Depends(current_user),
):
    rooms = await get_gateway(request).rooms.public_rooms(limit, offset)

    return {**api_v1_global_message, "result": [room.to_dict() for room in rooms]}

@api_v1_router.get("/rooms/my-rooms")
async def my_rooms(
    request : Request,
    limit   : int = Query(20, ge=1, le=100),
    offset  : int = Query(0, ge=0),
    user    : UserIdentity = Depends(current_user),
):
    """Kullanıcının host olduğu odalar"""
    rooms = await get_gateway(request).rooms.host_rooms(user.id, limit, offset)

    return {**api_v1_global_message, "result": [room.to_dict() for room in rooms]}

@api_v1_router.get("/rooms/joined")
async def joined_rooms(
    request : Request,
    limit   : int = Query(20, ge=1, le=100),
    offset  : int = Query(0, ge=0),
    user    : UserIdentity = Depends(current_user),
):
    """Kullanıcının katılımcı olduğu odalar"""
    rooms = await get_gateway(request).rooms.joined_rooms(user.id, limit, offset)

    return {**api_v1_global_message, "result": [room.to_dict() for room in rooms]}

@api_v1_router.get("/rooms/{room_id}")
async def get_room(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    room = await get_gateway(request).rooms.get_room(room_id, user.id)

    return {**api_v1_global_message, "result": room.to_dict()}

@api_v1_router.put("/rooms/{room_id}")
async def update_room(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    """
    Oda ayarlarını güncelle (sadece host).

    Oda özel yapıldığında erişimi kalmayan canlı oturumlar odadan düşürülür.
    """
    gateway = get_gateway(request)
    payload = parse_payload(UpdateRoomPayload, await json_body(request))
    room    = await gateway.rooms.update_room(room_id, user.id, payload)

    await gateway.recheck_room(room_id)
    return {**api_v1_global_message, "result": room.to_dict()}

@api_v1_router.delete("/rooms/{room_id}")
async def delete_room(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    gateway = get_gateway(request)
    await gateway.rooms.delete_room(room_id, user.id)

    await gateway.revoke_access(room_id, None, reason="room-deleted")
    return {**api_v1_global_message, "result": {"roomId": room_id, "deleted": True}}

@api_v1_router.post("/rooms/{room_id}/join")
async def join_room(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    gateway       = get_gateway(request)
    payload       = parse_payload(JoinRoomPayload, await json_body(request))
    participation = await gateway.rooms.join(room_id, user.id, payload.password)

    return {**api_v1_global_message, "result": participation.to_dict()}

@api_v1_router.post("/rooms/{room_id}/leave")
async def leave_room(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    gateway = get_gateway(request)
    left    = await gateway.rooms.leave(room_id, user.id)

    await gateway.revoke_access(room_id, user.id, reason="left")
    return {**api_v1_global_message, "result": {"roomId": room_id, "left": left}}

@api_v1_router.get("/rooms/{room_id}/participants")
async def room_participants(room_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    participants = await get_gateway(request).rooms.participants(room_id, user.id)

    return {**api_v1_global_message, "result": [p.to_dict() for p in participants]}

@api_v1_router.delete("/rooms/{room_id}/participants/{participant_id}")
async def remove_participant(room_id: str, participant_id: str, request: Request, user: UserIdentity = Depends(current_user)):
    """Host bir katılımcıyı odadan çıkarır, canlı oturumları da odadan düşer"""
    gateway = get_gateway(request)
    await gateway.rooms.remove_participant(room_id, participant_id, user.id)

    await gateway.revoke_access(room_id, participant_id, reason="removed")
    return {**api_v1_global_message, "result": {"roomId": room_id, "userId": participant_id, "removed": True}}
