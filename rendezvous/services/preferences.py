"""
Preference resolution.

Turns a user's gender and stated orientations into the gender signature a
room should be created for, and buckets ages into the labels rooms use.
These functions only compute labels; assigning users to rooms happens
elsewhere.
"""

import random
from datetime import date, datetime, timezone
from typing import Any

from rendezvous.core.constants import (
    ACCEPT_ALL_AGE_GROUPS,
    AGE_RANGE_ALL,
    AGE_RANGE_OLDEST,
    AGE_RANGES,
    ANY_GENDER,
    FEMALE,
    MALE,
    OPPOSITE,
    RELATIONSHIP,
    SAME,
)


def opposite_gender(gender: str | None) -> str:
    return FEMALE if gender == MALE else MALE


def wanted_gender_friend(gender: str | None, orientation: str | None, rng: random.Random | None = None) -> str:
    """Single-letter gender wanted for a friendship room."""
    if orientation == SAME:
        return gender
    if orientation == OPPOSITE:
        return opposite_gender(gender)
    # Any gender: coin flip
    rng = rng or random
    return MALE if rng.randrange(100) < 50 else FEMALE


def wanted_gender_date(gender: str | None, orientation: str | None) -> str:
    """Two-letter gender signature wanted for a relationship room."""
    if orientation == SAME:
        return MALE * 2 if gender == MALE else FEMALE * 2
    if orientation == OPPOSITE:
        return f"{MALE}{FEMALE}" if gender == MALE else f"{FEMALE}{MALE}"
    return ANY_GENDER * 2


def wanted_gender_for_room(
    room_type: str,
    gender: str | None,
    dating_orientation: str | None,
    friendship_orientation: str | None,
    rng: random.Random | None = None,
) -> str:
    """
    Gender signature of the room a user should be placed in.

    Relationship rooms get an ordered pair with the user's own gender first,
    e.g. "MF" for a man looking for a woman. Any other room type is treated
    as a friendship room and is labeled by the partner's gender only.
    """
    if room_type == RELATIONSHIP:
        return wanted_gender_date(gender, dating_orientation)
    return wanted_gender_friend(gender, friendship_orientation, rng)


def age_from_birthday(birthday: Any, today: date | None = None) -> int:
    """
    Years between the birth year and the current year.

    Accepts a date, an ISO 8601 date string (a time part after the first
    10 characters is ignored) or epoch milliseconds. Other string formats
    such as "05/04/1990" are rejected with ValueError.

    Month and day are ignored, so the result is one too high until the
    birthday has passed in the current year.
    """
    if birthday is None:
        raise ValueError("Birthday is not set")
    if isinstance(birthday, bool):
        raise ValueError(f"Unsupported birthday {birthday!r}")
    if isinstance(birthday, (int, float)):
        birthday = datetime.fromtimestamp(birthday / 1000, tz=timezone.utc).date()
    elif isinstance(birthday, str):
        birthday = date.fromisoformat(birthday[:10])
    elif not isinstance(birthday, date):
        raise ValueError(f"Unsupported birthday {birthday!r}")
    today = today or date.today()
    return today.year - birthday.year


def age_range(age: int) -> str:
    for upper, label in AGE_RANGES:
        if age < upper:
            return label
    return AGE_RANGE_OLDEST


def age_range_for(agegroup: Any, birthday: Any, today: date | None = None) -> str:
    """Age bucket label for a user; the "no" sentinel accepts every age."""
    if agegroup == ACCEPT_ALL_AGE_GROUPS:
        return AGE_RANGE_ALL
    return age_range(age_from_birthday(birthday, today))
