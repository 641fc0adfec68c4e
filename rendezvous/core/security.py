import hashlib
from typing import Any


def generate_user_id(email: Any) -> str:
    """
    Derive the stable user id from an email address.

    MD5 hex digest of the UTF-8 email. Existing stored ids depend on it,
    so the derivation must never change.
    """
    if not email:
        raise ValueError("Cannot derive a user id without an email")
    return hashlib.md5(str(email).encode("utf-8")).hexdigest()


def redact_token(token: str | None) -> str:
    """
    Redact an identifier for logging purposes.
    Shows the first 6 characters followed by ***.
    """
    if not token:
        return "None"
    if len(token) <= 6:
        return token
    return f"{token[:6]}***"
