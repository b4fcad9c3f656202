"""
WebSocket endpoint for realtime complaint events.

Connect with: ws://host/api/v1/ws?token=<jwt_token>

Client messages:
- {"event": "join-room", "room": "complaint-<id>"}
- {"event": "leave-room", "room": "complaint-<id>"}

Server messages are {"event": ..., "data": ...} for complaint events, and
{"event": "joined" | "left" | "error", ...} replies to client messages.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from complaint_desk.api.deps import get_db
from complaint_desk.core.exceptions import AuthenticationError
from complaint_desk.services import access_policy
from complaint_desk.services.auth_service import AuthService, Principal
from complaint_desk.services.complaint_service import ComplaintService
from complaint_desk.services.notifier import ClientEvent, ComplaintNotifier, EventType, parse_room

logger = logging.getLogger(__name__)

router = APIRouter()

CLOSE_INVALID_TOKEN = 4001


def _can_join(db: Session, principal: Principal, complaint_id: int) -> bool:
    try:
        complaint = ComplaintService.get_complaint_by_id(db, complaint_id)
        return complaint is not None and access_policy.can_read(principal, complaint)
    finally:
        # Don't keep a transaction open for the life of the socket
        db.close()


def _frame_text(frame: Dict[str, Any]) -> Optional[str]:
    """Text of a client frame; binary frames count if they are UTF-8. None otherwise."""
    if frame["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(frame.get("code", 1000), frame.get("reason"))
    if frame.get("text") is not None:
        return frame["text"]
    data = frame.get("bytes")
    if data is None:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return None


async def _handle_message(
    notifier: ComplaintNotifier,
    connection_id: str,
    principal: Principal,
    db: Session,
    raw: Optional[str],
) -> None:
    try:
        message = json.loads(raw) if raw is not None else None
    except ValueError:
        message = None
    if not isinstance(message, dict):
        await notifier.send_personal_message(
            connection_id, {"event": EventType.ERROR.value, "message": "Messages must be JSON objects"}
        )
        return

    event = message.get("event")
    room = message.get("room")

    if event == ClientEvent.JOIN_ROOM.value:
        complaint_id = parse_room(room)
        # Unknown and out-of-scope complaints get the same answer
        if complaint_id is None or not await run_in_threadpool(_can_join, db, principal, complaint_id):
            await notifier.send_personal_message(
                connection_id, {"event": EventType.ERROR.value, "room": room, "message": "Complaint not found"}
            )
            return
        notifier.join(connection_id, room)
        await notifier.send_personal_message(connection_id, {"event": EventType.JOINED.value, "room": room})

    elif event == ClientEvent.LEAVE_ROOM.value:
        if isinstance(room, str):
            notifier.leave(connection_id, room)
        await notifier.send_personal_message(connection_id, {"event": EventType.LEFT.value, "room": room})

    else:
        await notifier.send_personal_message(
            connection_id, {"event": EventType.ERROR.value, "message": f"Unknown event: {event}"}
        )


@router.websocket("/ws")
async def complaint_events(
    websocket: WebSocket,
    token: str = Query(...),
    db: Session = Depends(get_db),
):
    try:
        principal = AuthService.verify_token(token)
    except AuthenticationError:
        await websocket.close(code=CLOSE_INVALID_TOKEN, reason="Invalid token")
        return

    notifier: ComplaintNotifier = websocket.app.state.notifier
    connection_id = await notifier.connect(websocket, principal)
    try:
        while True:
            raw = _frame_text(await websocket.receive())
            await _handle_message(notifier, connection_id, principal, db, raw)
    except WebSocketDisconnect:
        logger.debug("Realtime session %s disconnected by client", connection_id)
    finally:
        notifier.disconnect(connection_id)
