from unittest.mock import AsyncMock, MagicMock

import pytest

from rendezvous.room import RoomState
from rendezvous.services.presence import SocketConnection, SocketIOBroadcaster


class FakeBroadcaster:
    def __init__(self, channels=None, connected=None):
        self.channels = channels or {}
        if connected is None:
            connected = {sid for members in self.channels.values() for sid in members}
        self.connected = connected
        self.emit = AsyncMock()

    def list_members(self, channel):
        return set(self.channels.get(channel, set()))

    def resolve_connection(self, connection_id):
        if connection_id not in self.connected:
            return None
        connection = MagicMock()
        connection.id = connection_id
        return connection


def _fake_server(participants=None, connected=()):
    participants = participants or {}
    server = MagicMock()
    server.emit = AsyncMock()
    server.manager.get_participants.side_effect = lambda namespace, room: iter(
        [(sid, f"eio-{sid}") for sid in participants.get(room, [])]
    )
    server.manager.is_connected.side_effect = lambda sid, namespace: sid in connected
    return server


def test_initialize_shallow_assigns_keys():
    room = RoomState().initialize(
        FakeBroadcaster(),
        {"name": "room-1", "genderMatch": "MF", "results": {"audio": {"a": 1}}, "language": "en"},
    )

    assert room.get_name() == "room-1"
    assert room.get_gender_match() == "MF"
    # replaced wholesale, not merged
    assert room.data.results == {"audio": {"a": 1}}
    assert room.data.language == "en"
    assert room.get_age_group() is None


def test_setters():
    room = RoomState().initialize(FakeBroadcaster(), {"name": "room-1"})

    room.set_status("waiting")
    room.set_video(True)
    room.set_timer(90)
    room.set_initiator("user-1")

    assert room.get_status() == "waiting"
    assert room.data.video is True
    assert room.data.timer == 90
    assert room.get_initiator() == "user-1"
    assert "initiator" not in room.data.model_dump()


def test_query_returns_live_record():
    room = RoomState().initialize(FakeBroadcaster(), {"name": "room-1", "status": "waiting"})

    result = room.query()
    room.set_status("talking")

    assert result["type"] == "room"
    assert result["data"] is room.data
    assert result["data"].status == "talking"


def test_membership_is_read_live_from_broadcaster():
    broadcaster = FakeBroadcaster(channels={"room-1": {"s1", "s2"}})
    room = RoomState().initialize(broadcaster, {"name": "room-1"})

    assert room.get_socket_ids() == {"s1", "s2"}

    broadcaster.channels["room-1"] = {"s2"}
    assert room.get_socket_ids() == {"s2"}


def test_membership_of_unknown_channel_is_empty():
    room = RoomState().initialize(FakeBroadcaster(), {"name": "room-9"})

    assert room.get_socket_ids() == set()
    assert room.get_sockets() == []


def test_membership_before_initialize_is_empty():
    assert RoomState().get_socket_ids() == set()


def test_get_sockets_skips_unresolvable_connections():
    broadcaster = FakeBroadcaster(channels={"room-1": {"s1", "s2"}}, connected={"s1"})
    room = RoomState().initialize(broadcaster, {"name": "room-1"})

    sockets = room.get_sockets()

    assert [socket.id for socket in sockets] == ["s1"]


@pytest.mark.asyncio
async def test_room_emit_goes_to_its_channel():
    broadcaster = FakeBroadcaster()
    room = RoomState().initialize(broadcaster, {"name": "room-1"})

    await room.emit("timer", {"seconds": 10})

    broadcaster.emit.assert_awaited_once_with("room-1", "timer", {"seconds": 10})


@pytest.mark.asyncio
async def test_room_emit_requires_broadcaster():
    with pytest.raises(RuntimeError):
        await RoomState().emit("timer", {})


def test_socketio_broadcaster_membership():
    server = _fake_server(participants={"room-1": ["s1", "s2"]}, connected={"s1"})
    broadcaster = SocketIOBroadcaster(server, namespace="/")

    assert broadcaster.list_members("room-1") == {"s1", "s2"}
    assert broadcaster.list_members("missing") == set()
    server.manager.get_participants.assert_any_call("/", "room-1")

    connection = broadcaster.resolve_connection("s1")
    assert isinstance(connection, SocketConnection)
    assert connection.id == "s1"
    assert broadcaster.resolve_connection("s2") is None


@pytest.mark.asyncio
async def test_socketio_broadcaster_and_connection_emit():
    server = _fake_server(connected={"s1"})
    broadcaster = SocketIOBroadcaster(server, namespace="/chat")

    await broadcaster.emit("room-1", "status", {"status": "open"})
    server.emit.assert_awaited_with("status", {"status": "open"}, room="room-1", namespace="/chat")

    connection = broadcaster.resolve_connection("s1")
    await connection.emit("message", "hi")
    server.emit.assert_awaited_with("message", "hi", to="s1", namespace="/chat")

    await connection.broadcast("user-1", "availability", {"user-1": 1})
    server.emit.assert_awaited_with("availability", {"user-1": 1}, room="user-1", skip_sid="s1", namespace="/chat")


def test_room_with_socketio_broadcaster():
    server = _fake_server(participants={"room-1": ["s1"]}, connected={"s1"})
    room = RoomState().initialize(SocketIOBroadcaster(server), {"name": "room-1"})

    assert [socket.id for socket in room.get_sockets()] == ["s1"]
