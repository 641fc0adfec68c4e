"""
Domain constants shared by the user and room entities.

Stored records depend on these values, so they are not configurable.
"""

from typing import Final

# Genders
MALE: Final[str] = "M"
FEMALE: Final[str] = "F"
ANY_GENDER: Final[str] = "A"

# Orientations (both dating and friendship)
SAME: Final[str] = "S"
OPPOSITE: Final[str] = "O"

# Room / contact types
RELATIONSHIP: Final[str] = "relationship"
FRIENDSHIP: Final[str] = "friendship"
CONTACT_TYPES: Final[tuple[str, ...]] = (FRIENDSHIP, RELATIONSHIP)

# Age groups
ACCEPT_ALL_AGE_GROUPS: Final[str] = "no"
AGE_RANGE_ALL: Final[str] = "18-99"
# (exclusive upper bound, label), checked in order; anything older falls through
AGE_RANGES: Final[list[tuple[int, str]]] = [(30, "18-29"), (50, "30-49"), (65, "50-64")]
AGE_RANGE_OLDEST: Final[str] = "65-99"

# Scoring
MATCH_TYPES: Final[tuple[str, ...]] = ("audio", "video")
FEELINGS: Final[tuple[str, ...]] = (
    "bored",
    "offended",
    "angry",
    "undecided",
    "charmed",
    "inspired",
    "entertained",
    "excited",
)

# Abuse limits
REPORT_THRESHOLD: Final[int] = 10  # only a user's first 10 reports count against peers
OFFLINE_MESSAGE_LIMIT: Final[int] = 100

# Presence events
AVAILABILITY_EVENT: Final[str] = "availability"
MESSAGE_EVENT: Final[str] = "message"
