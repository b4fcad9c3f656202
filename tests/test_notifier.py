import pytest

from complaint_desk.models.enums import RoleEnum
from complaint_desk.services.auth_service import Principal
from complaint_desk.services.notifier import ComplaintNotifier, EventType, parse_room, room_for


class FakeWebSocket:
    """Records what the notifier sends; can be told to fail"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_json(self, message):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)

    def events(self):
        return [m["event"] for m in self.sent]


@pytest.fixture
def notifier():
    return ComplaintNotifier()


async def connect(notifier, user_id=1, fail=False):
    websocket = FakeWebSocket()
    connection_id = await notifier.connect(websocket, Principal(id=user_id, role=RoleEnum.USER))
    websocket.fail = fail
    return connection_id, websocket


@pytest.mark.asyncio
async def test_connect_accepts_and_greets(notifier):
    connection_id, websocket = await connect(notifier, user_id=7)

    assert websocket.accepted
    assert websocket.sent == [{"event": "connected", "data": {"userId": 7}}]
    assert notifier.connection_count == 1


@pytest.mark.asyncio
async def test_broadcast_reaches_everyone(notifier):
    _, first = await connect(notifier, 1)
    _, second = await connect(notifier, 2)

    await notifier.broadcast(EventType.NEW_COMPLAINT, {"id": 5})

    for websocket in (first, second):
        assert websocket.sent[-1] == {"event": "new-complaint", "data": {"id": 5}}


@pytest.mark.asyncio
async def test_room_event_only_reaches_members(notifier):
    member_id, member = await connect(notifier, 1)
    _, outsider = await connect(notifier, 2)
    notifier.join(member_id, room_for(5))

    await notifier.emit_to_room(room_for(5), EventType.COMPLAINT_UPDATED, {"id": 5})

    assert member.events() == ["connected", "complaint-updated"]
    assert outsider.events() == ["connected"]


@pytest.mark.asyncio
async def test_emit_to_empty_room_is_noop(notifier):
    _, websocket = await connect(notifier)

    await notifier.emit_to_room(room_for(99), EventType.NEW_COMMENT, {})

    assert websocket.events() == ["connected"]


@pytest.mark.asyncio
async def test_leave_room(notifier):
    connection_id, websocket = await connect(notifier)
    notifier.join(connection_id, room_for(5))
    notifier.leave(connection_id, room_for(5))

    await notifier.emit_to_room(room_for(5), EventType.COMPLAINT_UPDATED, {"id": 5})

    assert websocket.events() == ["connected"]
    assert notifier.room_members(room_for(5)) == set()


@pytest.mark.asyncio
async def test_failed_send_drops_only_that_session(notifier):
    broken_id, broken = await connect(notifier, 1, fail=True)
    healthy_id, healthy = await connect(notifier, 2)
    notifier.join(broken_id, room_for(5))
    notifier.join(healthy_id, room_for(5))

    await notifier.broadcast(EventType.STATUS_CHANGE, {"id": 5})

    assert healthy.sent[-1]["event"] == "status-change"
    assert notifier.connection_count == 1
    assert notifier.room_members(room_for(5)) == {healthy_id}


@pytest.mark.asyncio
async def test_disconnect_cleans_rooms(notifier):
    connection_id, _ = await connect(notifier)
    notifier.join(connection_id, room_for(1))
    notifier.join(connection_id, room_for(2))

    notifier.disconnect(connection_id)
    notifier.disconnect(connection_id)

    assert notifier.connection_count == 0
    assert notifier.room_members(room_for(1)) == set()
    assert notifier.room_members(room_for(2)) == set()


@pytest.mark.asyncio
async def test_join_unknown_session_ignored(notifier):
    notifier.join("missing", room_for(1))

    assert notifier.room_members(room_for(1)) == set()


@pytest.mark.parametrize(
    "room,expected",
    [
        ("complaint-12", 12),
        ("complaint-", None),
        ("complaint-1a", None),
        ("complaint--1", None),
        ("room-12", None),
        (12, None),
        (None, None),
    ],
)
def test_parse_room(room, expected):
    assert parse_room(room) == expected
