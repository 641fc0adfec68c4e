from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rendezvous.core.constants import FEELINGS


class OpenModel(BaseModel):
    """Base for stored records: unknown keys are kept so they survive a save."""

    model_config = ConfigDict(extra="allow")


class Astrological(OpenModel):
    chinese: Any = None
    zodiac: Any = None
    birthstone: Any = None
    planet: Any = None
    element: Any = None


class Profile(OpenModel):
    nickname: Any = None
    gender: Any = None  # M, F
    birthday: Any = None  # ISO date string or epoch milliseconds
    agegroup: Any = None  # bucket label or "no" for all ages
    orientation: Any = None  # dating: S, O, A
    friendship: Any = None  # friends: S, O, A
    headline: Any = None
    bio: Any = None
    education: Any = None
    employment: Any = None
    diet: Any = None  # unhealthy, healthy, vegetarian, vegan, intolerant, other
    picture: Any = None
    astrological: Astrological = Field(default_factory=Astrological)


class MatchScore(OpenModel):
    success: int = 0
    fail: int = 0


class MatchScores(OpenModel):
    audio: MatchScore = Field(default_factory=MatchScore)
    video: MatchScore = Field(default_factory=MatchScore)


def _empty_feelings() -> dict[str, int]:
    return dict.fromkeys(FEELINGS, 0)


class Personality(OpenModel):
    # Votes the user gave
    internal: dict[str, int] = Field(default_factory=_empty_feelings)
    # Votes the user received
    external: dict[str, int] = Field(default_factory=_empty_feelings)


class Location(OpenModel):
    city: Any = None
    country: Any = None
    latitude: Any = None
    longitude: Any = None
    locale: Any = None
    timezone: Any = None


class Contacts(OpenModel):
    """Peer id -> peer id. Membership is key presence."""

    friendship: dict[str, str] = Field(default_factory=dict)
    relationship: dict[str, str] = Field(default_factory=dict)
    blocked: dict[str, str] = Field(default_factory=dict)


class Reports(OpenModel):
    reported: int = Field(default=0, description="Reports this user filed")
    reportedby: int = Field(default=0, description="Accepted reports filed against this user")


class UserRecord(OpenModel):
    """
    Persisted shape of a user.

    Field names match the stored JSON, which is shared with existing records.
    """

    id: str | None = None
    email: Any = None
    firstname: Any = None
    lastname: Any = None
    last: int | None = Field(default=None, description="Last seen, ms since epoch")
    provider: Any = None
    password: Any = None
    providers: dict[str, Any] = Field(default_factory=dict)
    profile: Profile = Field(default_factory=Profile)
    match: MatchScores = Field(default_factory=MatchScores)
    personality: Personality = Field(default_factory=Personality)
    location: Location = Field(default_factory=Location)
    contacts: Contacts = Field(default_factory=Contacts)
    reports: Reports = Field(default_factory=Reports)
    offlineMessages: list[Any] = Field(default_factory=list)
