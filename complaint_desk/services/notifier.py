"""
Realtime complaint notifications over WebSocket.

Two kinds of topic:
- the broadcast topic, which every connected session receives
- one room per complaint (``complaint-<id>``), which sessions join explicitly

Delivery is fire-and-forget: no acknowledgement, no retry, nothing kept for
sessions that connect later. A session whose socket fails is dropped and
the failure is logged, never raised to whoever published the event.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from fastapi import WebSocket

from complaint_desk.services.auth_service import Principal

logger = logging.getLogger(__name__)

ROOM_PREFIX = "complaint-"


class EventType(str, Enum):
    """Events sent to clients"""
    NEW_COMPLAINT = "new-complaint"
    COMPLAINT_UPDATED = "complaint-updated"
    STATUS_CHANGE = "status-change"
    NEW_COMMENT = "new-comment"

    # Session control
    CONNECTED = "connected"
    JOINED = "joined"
    LEFT = "left"
    ERROR = "error"


class ClientEvent(str, Enum):
    """Messages clients may send"""
    JOIN_ROOM = "join-room"
    LEAVE_ROOM = "leave-room"


@dataclass
class Connection:
    websocket: WebSocket
    principal: Principal
    rooms: Set[str] = field(default_factory=set)


def room_for(complaint_id: int) -> str:
    return f"{ROOM_PREFIX}{complaint_id}"


def parse_room(room: Any) -> Optional[int]:
    """Complaint id named by a room, or None if it is not a complaint room"""
    if not isinstance(room, str) or not room.startswith(ROOM_PREFIX):
        return None
    suffix = room[len(ROOM_PREFIX):]
    if not suffix.isdigit():
        return None
    return int(suffix)


class ComplaintNotifier:
    """
    Tracks connected sessions and fans events out to them.

    One instance is created per application and shared through
    ``app.state.notifier``. Bookkeeping is plain dict/set mutation with no
    awaits in between and runs on the event loop only.
    """

    def __init__(self):
        # connection_id -> Connection
        self._connections: Dict[str, Connection] = {}
        # room -> connection_ids
        self._rooms: Dict[str, Set[str]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def room_members(self, room: str) -> Set[str]:
        return set(self._rooms.get(room, ()))

    async def connect(self, websocket: WebSocket, principal: Principal) -> str:
        """Accept the socket, register it on the broadcast topic and greet it.

        The greeting is sent only once the session is registered, so a client
        that has read it will not miss later broadcasts.
        """
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = Connection(websocket=websocket, principal=principal)
        await self.send_personal_message(
            connection_id, {"event": EventType.CONNECTED.value, "data": {"userId": principal.id}}
        )
        logger.info(
            "Realtime session %s opened for user %d (%d connected)",
            connection_id, principal.id, len(self._connections),
        )
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        for room in connection.rooms:
            members = self._rooms.get(room)
            if members is not None:
                members.discard(connection_id)
                if not members:
                    del self._rooms[room]
        logger.info("Realtime session %s closed (%d connected)", connection_id, len(self._connections))

    def join(self, connection_id: str, room: str) -> None:
        connection = self._connections.get(connection_id)
        if connection is None:
            return
        connection.rooms.add(room)
        self._rooms.setdefault(room, set()).add(connection_id)
        logger.debug("Session %s joined %s", connection_id, room)

    def leave(self, connection_id: str, room: str) -> None:
        connection = self._connections.get(connection_id)
        if connection is None:
            return
        connection.rooms.discard(room)
        members = self._rooms.get(room)
        if members is not None:
            members.discard(connection_id)
            if not members:
                del self._rooms[room]

    async def send_personal_message(self, connection_id: str, message: Dict[str, Any]) -> None:
        await self._deliver([connection_id], message)

    async def broadcast(self, event: str, data: Any) -> None:
        """Send to every connected session"""
        await self._deliver(list(self._connections), {"event": _event_name(event), "data": data})

    async def emit_to_room(self, room: str, event: str, data: Any) -> None:
        """Send to the sessions that joined ``room``"""
        await self._deliver(list(self._rooms.get(room, ())), {"event": _event_name(event), "data": data})

    async def _deliver(self, connection_ids: List[str], message: Dict[str, Any]) -> None:
        failed = []
        for connection_id in connection_ids:
            connection = self._connections.get(connection_id)
            if connection is None:
                continue
            try:
                await connection.websocket.send_json(message)
            except Exception as e:
                logger.warning("Dropping realtime session %s after send failure: %s", connection_id, e)
                failed.append(connection_id)

        for connection_id in failed:
            self.disconnect(connection_id)


def _event_name(event: Any) -> str:
    return event.value if isinstance(event, Enum) else str(event)
