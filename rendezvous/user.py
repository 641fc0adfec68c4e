import json
import random
import time
from typing import Any

from loguru import logger

from rendezvous.core.config import settings
from rendezvous.core.constants import (
    ACCEPT_ALL_AGE_GROUPS,
    AVAILABILITY_EVENT,
    CONTACT_TYPES,
    FEELINGS,
    FRIENDSHIP,
    MATCH_TYPES,
    MESSAGE_EVENT,
    OFFLINE_MESSAGE_LIMIT,
    RELATIONSHIP,
    REPORT_THRESHOLD,
)
from rendezvous.core.security import generate_user_id, redact_token
from rendezvous.models.user import MatchScore, UserRecord
from rendezvous.services import contacts, preferences
from rendezvous.services.presence import Connection
from rendezvous.services.store import KeyValueStore
from rendezvous.shared.merge import deep_merge

# Always hidden from query(), including from the owner
PRIVATE_FIELDS = ("email", "firstname", "lastname", "password", "offlineMessages")
# Additionally hidden when someone else is looking
OWNER_ONLY_FIELDS = ("provider", "providers", "contacts", "reports")


class UserProfile:
    """
    A user of the pairing system: identity, preferences, contact graph and scores.

    Only `data` is persisted. `online`, `connection` and `store` are
    process-local handles.
    """

    COLLECTION = settings.USER_COLLECTION

    def __init__(self) -> None:
        self.connection: Connection | None = None
        self.store: KeyValueStore | None = None
        self.online = False
        self.data = UserRecord()

    def initialize(
        self,
        store: KeyValueStore | None,
        data: dict[str, Any] | None = None,
        connection: Connection | None = None,
    ) -> "UserProfile":
        """
        Deep-merge `data` over the current record.

        Missing keys keep their current values and nested sections merge field
        by field. An id, once assigned, is never replaced or cleared.
        """
        current_id = self.data.id
        merged = deep_merge(self.data.model_dump(), data or {})
        if current_id:
            if merged.get("id") and merged["id"] != current_id:
                logger.warning(f"Ignoring attempt to change user id {redact_token(current_id)}")
            merged["id"] = current_id
        record = UserRecord.model_validate(merged)
        if not record.id:
            record.id = generate_user_id(record.email)
        self.data = record
        self.store = store
        self.connection = connection
        return self

    @classmethod
    def from_record(cls, store: KeyValueStore | None, raw: str | dict[str, Any]) -> "UserProfile":
        data = json.loads(raw) if isinstance(raw, str) else raw
        return cls().initialize(store, data)

    @classmethod
    async def find_one(cls, store: KeyValueStore, uid: str) -> "UserProfile | None":
        raw = await store.get(cls.COLLECTION, uid)
        if raw is None:
            return None
        return cls.from_record(store, raw)

    @classmethod
    async def find_all(cls, store: KeyValueStore) -> dict[str, "UserProfile"]:
        records = await store.get_all(cls.COLLECTION)
        return {uid: cls.from_record(store, raw) for uid, raw in records.items()}

    @property
    def id(self) -> str | None:
        return self.data.id

    def get_id(self) -> str | None:
        return self.data.id

    def update_last_seen(self) -> None:
        self.data.last = int(time.time() * 1000)

    def is_online(self) -> bool:
        return self.online

    async def _announce(self, status: int) -> None:
        if self.connection is None:
            return
        logger.debug(f"[{redact_token(self.id)}] availability={status}")
        await self.connection.broadcast(self.id, AVAILABILITY_EVENT, {self.id: status})

    async def mark_online(self) -> None:
        self.online = True
        await self._announce(1)

    async def mark_offline(self) -> None:
        self.online = False
        await self._announce(0)

    # Persistence

    def serialize(self) -> str:
        return self.data.model_dump_json()

    def _require_store(self) -> KeyValueStore:
        if self.store is None:
            raise RuntimeError(f"User {redact_token(self.id)} has no store; call initialize() first")
        return self.store

    async def save(self) -> bool:
        store = self._require_store()
        logger.info(f"Saving user {redact_token(self.id)}")
        return await store.set(self.COLLECTION, self.id, self.serialize())

    async def erase(self) -> bool:
        store = self._require_store()
        logger.info(f"Deleting user {redact_token(self.id)}")
        return await store.delete(self.COLLECTION, self.id)

    # Profile accessors

    def get_nickname(self) -> Any:
        return self.data.profile.nickname

    def get_gender(self) -> str | None:
        return self.data.profile.gender

    def get_dating_orientation(self) -> str | None:
        return self.data.profile.orientation

    def get_friendship_orientation(self) -> str | None:
        return self.data.profile.friendship

    def accepts_all_age_groups(self) -> bool:
        return self.data.profile.agegroup == ACCEPT_ALL_AGE_GROUPS

    def get_socket_id(self) -> str | None:
        return self.connection.id if self.connection else None

    # Contact graph

    def get_contact_list(self) -> list[str]:
        return list(self.data.contacts.friendship) + list(self.data.contacts.relationship)

    def has_blocked(self, user_id: str) -> bool:
        return user_id in self.data.contacts.blocked

    def has_contact(self, user_id: str, contact_type: str) -> bool:
        if contact_type not in CONTACT_TYPES:
            raise ValueError(f"Unknown contact type '{contact_type}'")
        return user_id in getattr(self.data.contacts, contact_type)

    def _add_contact(self, user: "UserProfile", contact_type: str) -> None:
        if user.id == self.id:
            return
        getattr(self.data.contacts, contact_type)[user.id] = user.id

    def add_friendship(self, user: "UserProfile") -> None:
        self._add_contact(user, FRIENDSHIP)

    def remove_friendship(self, user: "UserProfile") -> None:
        self.data.contacts.friendship.pop(user.id, None)

    def add_relationship(self, user: "UserProfile") -> None:
        self._add_contact(user, RELATIONSHIP)

    def remove_relationship(self, user: "UserProfile") -> None:
        self.data.contacts.relationship.pop(user.id, None)

    def remove_user_references(self, user: "UserProfile") -> None:
        self.remove_friendship(user)
        self.remove_relationship(user)

    def block_user(self, user: "UserProfile") -> contacts.BlockResult:
        return contacts.block(self, user)

    # Reports

    def get_times_reported(self) -> int:
        return self.data.reports.reportedby

    def get_amount_of_reports(self) -> int:
        return self.data.reports.reported

    def has_too_many_reports(self) -> bool:
        return self.get_amount_of_reports() >= REPORT_THRESHOLD

    def report_user(self, user: "UserProfile") -> contacts.ReportResult:
        return contacts.report(self, user)

    # Offline messages

    def add_offline_message(self, message: Any) -> None:
        queue = self.data.offlineMessages
        queue.append(message)
        if len(queue) > OFFLINE_MESSAGE_LIMIT:
            # NOTE: keeps the oldest messages and drops the overflow
            del queue[OFFLINE_MESSAGE_LIMIT:]

    async def push_offline_messages(self) -> int:
        """Deliver queued messages in order over the live connection.

        Each message leaves the queue only after it was emitted. Returns the
        number of messages delivered.
        """
        queue = self.data.offlineMessages
        if not queue:
            return 0
        if self.connection is None:
            logger.debug(f"[{redact_token(self.id)}] No connection, keeping {len(queue)} offline messages")
            return 0
        delivered = 0
        while queue:
            await self.connection.emit(MESSAGE_EVENT, queue[0])
            queue.pop(0)
            delivered += 1
        logger.debug(f"[{redact_token(self.id)}] Delivered {delivered} offline messages")
        return delivered

    # Preferences

    def get_wanted_gender_friend(self, rng: random.Random | None = None) -> str:
        return preferences.wanted_gender_friend(self.get_gender(), self.get_friendship_orientation(), rng)

    def get_wanted_gender_date(self) -> str:
        return preferences.wanted_gender_date(self.get_gender(), self.get_dating_orientation())

    def get_wanted_gender_for_room(self, room_type: str, rng: random.Random | None = None) -> str:
        return preferences.wanted_gender_for_room(
            room_type,
            self.get_gender(),
            self.get_dating_orientation(),
            self.get_friendship_orientation(),
            rng,
        )

    def get_age(self) -> int:
        return preferences.age_from_birthday(self.data.profile.birthday)

    def get_age_range(self) -> str:
        return preferences.age_range_for(self.data.profile.agegroup, self.data.profile.birthday)

    # Scores

    def _match_score(self, match_type: str) -> MatchScore:
        if match_type not in MATCH_TYPES:
            raise ValueError(f"Unknown match type '{match_type}'")
        return getattr(self.data.match, match_type)

    def update_success_match_score(self, match_type: str) -> None:
        self._match_score(match_type).success += 1

    def update_fail_match_score(self, match_type: str) -> None:
        self._match_score(match_type).fail += 1

    @staticmethod
    def _vote(tally: dict[str, int], feeling: str) -> None:
        if feeling not in FEELINGS:
            raise ValueError(f"Unknown feeling '{feeling}'")
        tally[feeling] = tally.get(feeling, 0) + 1

    def update_internal_personality(self, feeling: str) -> None:
        self._vote(self.data.personality.internal, feeling)

    def update_external_personality(self, feeling: str) -> None:
        self._vote(self.data.personality.external, feeling)

    def query(self, is_self: bool) -> dict[str, Any]:
        """Redacted, deep-copied view of the user for handing to a client."""
        data = self.data.model_dump(mode="json")
        hidden = PRIVATE_FIELDS if is_self else PRIVATE_FIELDS + OWNER_ONLY_FIELDS
        for field in hidden:
            data.pop(field, None)
        return {"type": "user", "self": is_self, "data": data}

    def __repr__(self) -> str:
        return f"UserProfile(id={self.id!r}, online={self.online})"
