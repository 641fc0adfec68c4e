import random
from collections import Counter
from datetime import date

import pytest

from rendezvous.services import preferences
from rendezvous.user import UserProfile


def _user(gender, orientation=None, friendship=None):
    return UserProfile().initialize(
        None,
        {
            "email": f"{gender}{orientation}{friendship}@example.com",
            "profile": {"gender": gender, "orientation": orientation, "friendship": friendship},
        },
    )


@pytest.mark.parametrize(
    "gender, friendship, expected",
    [("M", "O", "F"), ("F", "O", "M"), ("M", "S", "M"), ("F", "S", "F")],
)
def test_friendship_room_signature(gender, friendship, expected):
    assert _user(gender, friendship=friendship).get_wanted_gender_for_room("friendship") == expected


def test_friendship_room_any_gender_is_a_fair_coin():
    user = _user("M", friendship="A")
    rng = random.Random(1234)
    counts = Counter(user.get_wanted_gender_for_room("friendship", rng=rng) for _ in range(2000))

    assert set(counts) == {"M", "F"}
    assert 0.45 < counts["M"] / 2000 < 0.55


def test_unknown_room_type_is_treated_as_friendship():
    assert _user("M", orientation="S", friendship="O").get_wanted_gender_for_room("chat") == "F"


@pytest.mark.parametrize(
    "gender, orientation, expected",
    [
        ("M", "O", "MF"),
        ("F", "O", "FM"),
        ("M", "S", "MM"),
        ("F", "S", "FF"),
        ("M", "A", "AA"),
        ("F", "A", "AA"),
    ],
)
def test_relationship_room_signature(gender, orientation, expected):
    user = _user(gender, orientation=orientation)
    assert user.get_wanted_gender_for_room("relationship") == expected
    assert user.get_wanted_gender_date() == expected


def test_wanted_gender_friend_same_and_opposite():
    assert _user("F", friendship="S").get_wanted_gender_friend() == "F"
    assert _user("F", friendship="O").get_wanted_gender_friend() == "M"


def test_relationship_room_ignores_friendship_orientation():
    user = _user("F", orientation="S", friendship="O")
    assert user.get_wanted_gender_for_room("relationship") == "FF"


def test_age_from_birthday_ignores_month_and_day():
    assert preferences.age_from_birthday("2000-12-31", today=date(2030, 1, 1)) == 30
    assert preferences.age_from_birthday(date(2000, 1, 1), today=date(2030, 12, 31)) == 30
    assert preferences.age_from_birthday("2000-05-04T10:00:00Z", today=date(2030, 1, 1)) == 30


def test_age_from_missing_birthday_raises():
    with pytest.raises(ValueError):
        preferences.age_from_birthday(None)


def test_age_range_for_sentinel_skips_birthday():
    assert preferences.age_range_for("no", None) == "18-99"
    assert preferences.age_range_for("30-49", "1980-01-01", today=date(2030, 1, 1)) == "50-64"


def test_age_from_epoch_milliseconds():
    assert preferences.age_from_birthday(631152000000, today=date(2030, 6, 1)) == 40


def test_age_rejects_non_iso_dates():
    with pytest.raises(ValueError):
        preferences.age_from_birthday("05/04/1990")
    with pytest.raises(ValueError):
        preferences.age_from_birthday(["1990"])
