from typing import Any

from loguru import logger

from rendezvous.models.room import RoomRecord
from rendezvous.services.presence import Connection, PresenceBroadcaster


class RoomState:
    """
    Metadata of one pairing room.

    Who is in the room is never stored here; it is read from the presence
    broadcaster by room name on every call.
    """

    def __init__(self) -> None:
        self.broadcaster: PresenceBroadcaster | None = None
        self.initiator: str | None = None
        self.data = RoomRecord()

    def initialize(self, broadcaster: PresenceBroadcaster, data: dict[str, Any] | None = None) -> "RoomState":
        """Keep the broadcaster and copy each top-level key of `data` onto the record.

        Values replace the current ones wholesale; keys outside the schema are kept too.
        """
        self.broadcaster = broadcaster
        for key, value in (data or {}).items():
            setattr(self.data, key, value)
        return self

    @property
    def name(self) -> str | None:
        return self.data.name

    def get_name(self) -> str | None:
        return self.data.name

    def get_gender_match(self) -> str | None:
        return self.data.genderMatch

    def get_age_group(self) -> str | None:
        return self.data.ageGroup

    def get_status(self) -> str | None:
        return self.data.status

    def set_status(self, status: str | None) -> None:
        self.data.status = status

    def set_video(self, video: bool | None) -> None:
        self.data.video = video

    def set_timer(self, seconds: int | None) -> None:
        self.data.timer = seconds

    def set_initiator(self, user_id: str | None) -> None:
        self.initiator = user_id

    def get_initiator(self) -> str | None:
        return self.initiator

    def get_socket_ids(self) -> set[str]:
        if self.broadcaster is None or not self.name:
            return set()
        return set(self.broadcaster.list_members(self.name))

    def get_sockets(self) -> list[Connection]:
        sockets = []
        for socket_id in self.get_socket_ids():
            connection = self.broadcaster.resolve_connection(socket_id)
            if connection is None:
                logger.debug(f"Room {self.name}: connection {socket_id} is gone, skipping")
                continue
            sockets.append(connection)
        return sockets

    async def emit(self, event: str, payload: Any) -> None:
        if self.broadcaster is None:
            raise RuntimeError(f"Room {self.name} has no broadcaster; call initialize() first")
        await self.broadcaster.emit(self.name, event, payload)

    def query(self) -> dict[str, Any]:
        # Live record, not a copy: later changes to the room show through.
        return {"type": "room", "data": self.data}

    def __repr__(self) -> str:
        return f"RoomState(name={self.name!r}, status={self.data.status!r})"
