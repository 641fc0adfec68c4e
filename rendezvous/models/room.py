from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _empty_results() -> dict[str, Any]:
    return {"audio": {}, "video": {}}


class RoomRecord(BaseModel):
    """
    Flat metadata of a pairing room.

    Membership is deliberately absent: it lives in the presence broadcaster.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    status: str | None = None
    timer: int | None = Field(default=None, description="Countdown in seconds")
    video: bool | None = None
    genderMatch: str | None = Field(default=None, description="Gender signature, e.g. 'MF' or 'AA'")
    ageGroup: str | None = None
    # Per-session outcome scratch space, opaque to the core
    results: dict[str, Any] = Field(default_factory=_empty_results)
