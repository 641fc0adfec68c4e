"""
Rendezvous - entities and compatibility rules for anonymous real-time pairing.

Users are matched into rooms by gender, age and orientation preferences; the
contact graph (friendship, relationship, blocking) constrains who can meet again.
"""

from rendezvous.room import RoomState
from rendezvous.user import UserProfile

__version__ = "0.1.0"

__all__ = [
    "UserProfile",
    "RoomState",
]
