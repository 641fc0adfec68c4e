from typing import Any, Protocol

import socketio
from loguru import logger

from rendezvous.core.config import settings
from rendezvous.core.security import redact_token


class Connection(Protocol):
    """A single live client connection."""

    id: str

    async def emit(self, event: str, payload: Any) -> None: ...

    async def broadcast(self, channel: str, event: str, payload: Any) -> None: ...


class PresenceBroadcaster(Protocol):
    """Channel based pub/sub that also knows who is connected to each channel."""

    async def emit(self, channel: str, event: str, payload: Any) -> None: ...

    def list_members(self, channel: str) -> set[str]: ...

    def resolve_connection(self, connection_id: str) -> Connection | None: ...


class SocketConnection:
    """Connection handle for one socket.io session id."""

    def __init__(self, server: socketio.AsyncServer, sid: str, namespace: str | None = None):
        self.server = server
        self.id = sid
        self.namespace = namespace or settings.SOCKET_NAMESPACE

    async def emit(self, event: str, payload: Any) -> None:
        """Send an event to this connection only."""
        await self.server.emit(event, payload, to=self.id, namespace=self.namespace)

    async def broadcast(self, channel: str, event: str, payload: Any) -> None:
        """Send an event to everyone in `channel` except this connection."""
        await self.server.emit(event, payload, room=channel, skip_sid=self.id, namespace=self.namespace)

    def __repr__(self) -> str:
        return f"SocketConnection(id={self.id!r}, namespace={self.namespace!r})"


class SocketIOBroadcaster:
    """PresenceBroadcaster backed by a python-socketio AsyncServer.

    Channels are socket.io rooms; membership is read from the server's
    client manager on every call and never cached.
    """

    def __init__(self, server: socketio.AsyncServer, namespace: str | None = None):
        self.server = server
        self.namespace = namespace or settings.SOCKET_NAMESPACE

    async def emit(self, channel: str, event: str, payload: Any) -> None:
        logger.debug(f"Emitting '{event}' to channel {redact_token(channel)}")
        await self.server.emit(event, payload, room=channel, namespace=self.namespace)

    def list_members(self, channel: str) -> set[str]:
        if not channel:
            return set()
        return {sid for sid, _ in self.server.manager.get_participants(self.namespace, channel)}

    def resolve_connection(self, connection_id: str) -> SocketConnection | None:
        if not self.server.manager.is_connected(connection_id, self.namespace):
            return None
        return SocketConnection(self.server, connection_id, self.namespace)
