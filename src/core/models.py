"""Shared models and types for the whole application."""

import secrets
import string
from datetime import datetime, timezone
from typing import Annotated

from bson import ObjectId
from pydantic import BeforeValidator

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 26


def validate_object_id(v: str | ObjectId) -> str:
    """Validate and convert ObjectId to string."""
    if isinstance(v, ObjectId):
        return str(v)
    if isinstance(v, str) and ObjectId.is_valid(v):
        return v
    raise ValueError("Invalid ObjectId")


def generate_id() -> str:
    """Generate a content item / user id: 26 lowercase letters and digits."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def utc_now() -> datetime:
    """Naive UTC timestamp at millisecond precision, the form MongoDB hands back."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


# Standard type for MongoDB ObjectIDs used across modules
PyObjectId = Annotated[str, BeforeValidator(validate_object_id)]
